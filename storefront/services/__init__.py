"""Storefront client services: session, cart and checkout."""

from .account import AccountService
from .api_client import ApiClient
from .cart_store import Cart, CartItem, CartState, CartStore, Product
from .catalog_client import CatalogClient, ProductFilters, ProductPage
from .checkout_flow import (
    Address,
    CheckoutDraft,
    CheckoutFlow,
    CheckoutStep,
    Order,
    PaymentInfo,
    PaymentMethod,
    ShippingInfo,
)
from .errors import (
    ApiError,
    AuthenticationError,
    CheckoutError,
    CheckoutStateError,
    CheckoutValidationError,
    EmptyCartError,
    NetworkError,
    NotFoundError,
    is_auth_error,
)
from .navigation import Navigator, Notification, Notifier
from .order_client import OrderClient
from .query_cache import QueryCache
from .route_guard import GuardDecision, GuardResult, RouteGuard
from .session_manager import AuthSessionManager, Session, User
from .token_store import MemoryTokenStore, TokenStore

__all__ = [
    "AccountService",
    "Address",
    "ApiClient",
    "ApiError",
    "AuthSessionManager",
    "AuthenticationError",
    "Cart",
    "CartItem",
    "CartState",
    "CartStore",
    "CatalogClient",
    "CheckoutDraft",
    "CheckoutError",
    "CheckoutFlow",
    "CheckoutStateError",
    "CheckoutStep",
    "CheckoutValidationError",
    "EmptyCartError",
    "GuardDecision",
    "GuardResult",
    "MemoryTokenStore",
    "Navigator",
    "NetworkError",
    "NotFoundError",
    "Notification",
    "Notifier",
    "Order",
    "OrderClient",
    "PaymentInfo",
    "PaymentMethod",
    "Product",
    "ProductFilters",
    "ProductPage",
    "QueryCache",
    "RouteGuard",
    "Session",
    "ShippingInfo",
    "TokenStore",
    "User",
    "is_auth_error",
]
