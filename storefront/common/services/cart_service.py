from decimal import Decimal
from typing import Dict
from uuid import uuid4

from ..db.session import SessionFactory
from ..models.cart_item import CartItem
from ..utils.dto import to_cart_product_dto
from ..utils.money import to_money
from ..utils.validators import ensure_positive_int
from .catalog_service import CatalogService


class CartService:
    """Account carts backed by DB, priced from the catalog."""

    def __init__(
        self,
        session_factory: SessionFactory,
        catalog: CatalogService,
        *,
        currency: str = "USD",
        free_shipping_threshold: Decimal = Decimal("50.00"),
        flat_shipping_rate: Decimal = Decimal("5.99"),
    ):
        self._session_factory = session_factory
        self._catalog = catalog
        self._currency = currency
        self._free_shipping_threshold = to_money(free_shipping_threshold)
        self._flat_shipping_rate = to_money(flat_shipping_rate)

    def shipping_for(self, subtotal: Decimal, item_count: int) -> Decimal:
        if item_count == 0 or subtotal >= self._free_shipping_threshold:
            return Decimal("0.00")
        return self._flat_shipping_rate

    def get_cart(self, *, user_id: str) -> Dict:
        with self._session_factory() as session:
            rows = (
                session.query(CartItem)
                .filter(CartItem.user_id == user_id)
                .order_by(CartItem.added_at, CartItem.id)
                .all()
            )
            items = []
            for it in rows:
                product = self._catalog.get_product(it.product_id) or {"id": it.product_id, "name": "Unavailable product"}
                snapshot = to_cart_product_dto(product)
                # the price charged is the one captured when the item was added
                snapshot["price"] = float(it.unit_price or 0)
                items.append({"id": it.id, "product": snapshot, "quantity": it.quantity})
            subtotal = to_money(sum((Decimal(str(i["product"]["price"])) * i["quantity"] for i in items), Decimal("0")))
            shipping = self.shipping_for(subtotal, len(items))
            return {
                "items": items,
                "subtotal": float(subtotal),
                "shipping": float(shipping),
                "total": float(subtotal + shipping),
                "currency": self._currency,
            }

    def add_item(self, *, user_id: str, product_id, quantity: int) -> Dict:
        if product_id in (None, ""):
            raise ValueError("productId required")
        qnty = ensure_positive_int(quantity, "quantity")
        prod = self._catalog.get_product(product_id)
        if not prod:
            raise LookupError("product not found")
        if not prod.get("inStock", True):
            raise ValueError("product is out of stock")
        with self._session_factory() as session:
            # merge with an existing line for the same product
            existing = (
                session.query(CartItem)
                .filter(CartItem.user_id == user_id, CartItem.product_id == prod["id"])
                .first()
            )
            if existing:
                existing.quantity = existing.quantity + qnty
                item_id = existing.id
            else:
                item = CartItem(
                    id=str(uuid4()),
                    user_id=user_id,
                    product_id=prod["id"],
                    quantity=qnty,
                    unit_price=to_money(prod["price"]),
                    currency=self._currency,
                )
                session.add(item)
                item_id = item.id
            session.flush()
            return {"status": "added", "item_id": item_id}

    def update_item(self, *, user_id: str, item_id: str, quantity: int) -> Dict:
        if not item_id:
            raise ValueError("item_id required")
        qnty = int(quantity)
        if qnty < 0:
            raise ValueError("quantity must be >= 0")
        with self._session_factory() as session:
            it = (
                session.query(CartItem)
                .filter(CartItem.id == item_id, CartItem.user_id == user_id)
                .first()
            )
            if not it:
                raise LookupError("cart item not found")
            if qnty == 0:
                session.delete(it)
            else:
                it.quantity = qnty
            session.flush()
            return {"status": "updated", "item_id": item_id}

    def remove_item(self, *, user_id: str, item_id: str) -> None:
        with self._session_factory() as session:
            it = (
                session.query(CartItem)
                .filter(CartItem.id == item_id, CartItem.user_id == user_id)
                .first()
            )
            if not it:
                raise LookupError("cart item not found")
            session.delete(it)
            session.flush()
        return None

    def clear(self, *, user_id: str) -> int:
        with self._session_factory() as session:
            removed = session.query(CartItem).filter(CartItem.user_id == user_id).delete()
            session.flush()
            return removed
