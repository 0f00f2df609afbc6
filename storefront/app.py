"""Storefront API: the mock backend the storefront client talks to."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify

from .common.config import AppConfig, load_env
from .common.db.session import build_session_factory, create_db_engine, init_schema
from .common.services.address_service import AddressService
from .common.services.auth_service import AuthService
from .common.services.cart_service import CartService
from .common.services.catalog_service import CatalogService
from .common.services.logging import set_event_level
from .common.services.order_service import OrderService
from .routes import api, auth


def create_app(config: Optional[AppConfig] = None) -> Flask:
    config = config or load_env()
    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.config["STOREFRONT_CONFIG"] = config
    set_event_level(config.log_level)

    engine = create_db_engine(config.database_url)
    init_schema(engine)
    session_factory = build_session_factory(engine)

    catalog_service = CatalogService()
    cart_service = CartService(
        session_factory,
        catalog_service,
        currency=config.currency,
        free_shipping_threshold=config.free_shipping_threshold,
        flat_shipping_rate=config.flat_shipping_rate,
    )
    auth_service = AuthService(session_factory, config.secret_key, config.token_ttl_seconds)
    auth_service.ensure_user(
        username="admin",
        email=config.admin_email,
        password=config.admin_password,
        role="admin",
    )

    components = {
        "engine": engine,
        "auth_service": auth_service,
        "catalog_service": catalog_service,
        "cart_service": cart_service,
        "address_service": AddressService(session_factory),
        "order_service": OrderService(session_factory, cart_service),
    }
    app.extensions["storefront_components"] = components

    app.register_blueprint(auth.auth_bp)
    app.register_blueprint(api.api_bp)

    @app.errorhandler(404)
    def not_found(_exc):
        return jsonify({"message": "Not found", "code": "NOT_FOUND"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_exc):
        return jsonify({"message": "Method not allowed", "code": "METHOD_NOT_ALLOWED"}), 405

    return app


def main() -> None:
    config = load_env()
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app(config)
    app.run(host="0.0.0.0", port=5000, debug=False)


if __name__ == "__main__":
    main()
