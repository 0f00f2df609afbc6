"""Catalog, cart, address and order routes."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, g, jsonify, request

from ..common.utils.validators import parse_int
from .auth import error_response, login_required


api_bp = Blueprint("storefront_api", __name__, url_prefix="/api")


def _components() -> Dict[str, Any]:
    return current_app.extensions["storefront_components"]


# --- Catalog ---

@api_bp.get("/categories")
def list_categories():
    return jsonify(_components()["catalog_service"].list_categories())


@api_bp.get("/products/featured")
def featured_products():
    return jsonify(_components()["catalog_service"].featured_products())


@api_bp.get("/products")
def list_products():
    args = request.args
    result = _components()["catalog_service"].list_products(
        search=args.get("search") or None,
        category=args.get("category") or None,
        min_price=parse_int(args.get("min"), 0),
        max_price=parse_int(args.get("max"), 100000),
        rating=parse_int(args.get("rating"), 0),
        sort=args.get("sort") or None,
        page=parse_int(args.get("page"), 1),
        limit=parse_int(args.get("limit"), 10),
    )
    return jsonify(result)


@api_bp.get("/products/<product_id>")
def get_product(product_id: str):
    product = _components()["catalog_service"].get_product(product_id)
    if not product:
        return error_response("Product not found", 404, "PRODUCT_NOT_FOUND")
    return jsonify(product)


# --- Cart ---

def _cart_payload():
    return _components()["cart_service"].get_cart(user_id=g.user["id"])


@api_bp.get("/cart")
@login_required
def get_cart():
    return jsonify(_cart_payload())


@api_bp.post("/cart/items")
@login_required
def add_cart_item():
    payload = request.get_json(silent=True) or {}
    try:
        _components()["cart_service"].add_item(
            user_id=g.user["id"],
            product_id=payload.get("productId"),
            quantity=parse_int(payload.get("quantity"), 1),
        )
    except LookupError as exc:
        return error_response(str(exc), 404, "PRODUCT_NOT_FOUND")
    except ValueError as exc:
        return error_response(str(exc), 400, "VALIDATION_ERROR")
    return jsonify(_cart_payload()), 201


@api_bp.put("/cart/items/<item_id>")
@login_required
def update_cart_item(item_id: str):
    payload = request.get_json(silent=True) or {}
    if "quantity" not in payload:
        return error_response("quantity required", 400, "VALIDATION_ERROR")
    try:
        _components()["cart_service"].update_item(
            user_id=g.user["id"],
            item_id=item_id,
            quantity=parse_int(payload.get("quantity"), -1),
        )
    except LookupError as exc:
        return error_response(str(exc), 404, "CART_ITEM_NOT_FOUND")
    except ValueError as exc:
        return error_response(str(exc), 400, "VALIDATION_ERROR")
    return jsonify(_cart_payload())


@api_bp.delete("/cart/items/<item_id>")
@login_required
def remove_cart_item(item_id: str):
    try:
        _components()["cart_service"].remove_item(user_id=g.user["id"], item_id=item_id)
    except LookupError as exc:
        return error_response(str(exc), 404, "CART_ITEM_NOT_FOUND")
    return jsonify(_cart_payload())


@api_bp.delete("/cart")
@login_required
def clear_cart():
    _components()["cart_service"].clear(user_id=g.user["id"])
    return jsonify(_cart_payload())


# --- Addresses ---

@api_bp.get("/addresses")
@login_required
def list_addresses():
    return jsonify(_components()["address_service"].list_addresses(user_id=g.user["id"]))


@api_bp.post("/addresses")
@login_required
def add_address():
    try:
        address = _components()["address_service"].add_address(
            user_id=g.user["id"], data=request.get_json(silent=True) or {}
        )
    except ValueError as exc:
        return error_response(str(exc), 400, "VALIDATION_ERROR")
    return jsonify(address), 201


@api_bp.put("/addresses/<address_id>")
@login_required
def update_address(address_id: str):
    try:
        address = _components()["address_service"].update_address(
            user_id=g.user["id"], address_id=address_id, data=request.get_json(silent=True) or {}
        )
    except LookupError as exc:
        return error_response(str(exc), 404, "ADDRESS_NOT_FOUND")
    except ValueError as exc:
        return error_response(str(exc), 400, "VALIDATION_ERROR")
    return jsonify(address)


@api_bp.put("/addresses/<address_id>/default")
@login_required
def set_default_address(address_id: str):
    try:
        address = _components()["address_service"].set_default(user_id=g.user["id"], address_id=address_id)
    except LookupError as exc:
        return error_response(str(exc), 404, "ADDRESS_NOT_FOUND")
    return jsonify(address)


@api_bp.delete("/addresses/<address_id>")
@login_required
def delete_address(address_id: str):
    if not _components()["address_service"].delete_address(user_id=g.user["id"], address_id=address_id):
        return error_response("Address not found", 404, "ADDRESS_NOT_FOUND")
    return jsonify({"status": "ok"})


# --- Orders ---

@api_bp.get("/orders")
@login_required
def list_orders():
    return jsonify(_components()["order_service"].list_orders(user_id=g.user["id"]))


@api_bp.post("/orders")
@login_required
def create_order():
    payload = request.get_json(silent=True) or {}
    try:
        order = _components()["order_service"].create_order(
            user_id=g.user["id"],
            shipping_info=payload.get("shippingInfo"),
            payment_method=payload.get("paymentMethod"),
            payment_info=payload.get("paymentInfo"),
            request_id=request.headers.get("Idempotency-Key"),
        )
    except ValueError as exc:
        return error_response(str(exc), 400, "VALIDATION_ERROR")
    return jsonify(order), 201


@api_bp.get("/orders/<order_id>")
@login_required
def get_order(order_id: str):
    order = _components()["order_service"].get_order(user_id=g.user["id"], order_id=order_id)
    if not order:
        return error_response("Order not found", 404, "ORDER_NOT_FOUND")
    return jsonify(order)
