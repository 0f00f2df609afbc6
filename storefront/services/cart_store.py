"""Guest and account shopping carts.

Consistency contract for account carts: every mutation is sent to the Cart
API and followed by a full reload of `GET /api/cart`. The reloaded cart
replaces local state wholesale; nothing is merged optimistically, so server
pricing and stock rules always win. If either request fails the error is
raised and the last successfully loaded cart stays in place.

Guest carts live only in this object and are discarded on login (they are
replaced by the account cart, not merged).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple, Union
from uuid import uuid4

from ..common.services.logging import log_event
from ..common.utils.money import to_money
from ..common.utils.validators import ensure_positive_int
from .api_client import ApiClient
from .errors import ApiError
from .navigation import CHECKOUT_PATH, LOGIN_PATH, Navigator
from .session_manager import AuthSessionManager, Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Product:
    id: Any
    name: str
    price: Decimal
    image_url: str = ""
    brand: str = ""

    @classmethod
    def from_dict(cls, payload: dict) -> "Product":
        return cls(
            id=payload["id"],
            name=str(payload.get("name") or ""),
            price=to_money(payload.get("price")),
            image_url=str(payload.get("imageUrl") or payload.get("image_url") or payload.get("image") or ""),
            brand=str(payload.get("brand") or ""),
        )


@dataclass(frozen=True)
class CartItem:
    id: str
    product: Product
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return to_money(self.product.price * self.quantity)

    @classmethod
    def from_dict(cls, payload: dict) -> "CartItem":
        return cls(
            id=str(payload["id"]),
            product=Product.from_dict(payload["product"]),
            quantity=int(payload["quantity"]),
        )


@dataclass(frozen=True)
class Cart:
    """Items plus server-computed totals; totals are None for guest carts."""

    items: Tuple[CartItem, ...] = ()
    subtotal: Optional[Decimal] = None
    shipping: Optional[Decimal] = None
    total: Optional[Decimal] = None

    @classmethod
    def from_dict(cls, payload: dict) -> "Cart":
        def money(key):
            return to_money(payload[key]) if payload.get(key) is not None else None

        return cls(
            items=tuple(CartItem.from_dict(i) for i in payload.get("items") or ()),
            subtotal=money("subtotal"),
            shipping=money("shipping"),
            total=money("total"),
        )

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)

    def find(self, item_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


class CartState(str, Enum):
    EMPTY_GUEST = "empty-guest"
    POPULATED_GUEST = "populated-guest"
    LOADING = "loading"
    POPULATED_ACCOUNT = "populated-account"


class CartStore:
    """Cart for the current session, switching mode as the session changes."""

    def __init__(
        self,
        api: ApiClient,
        auth: AuthSessionManager,
        navigator: Optional[Navigator] = None,
    ) -> None:
        self._api = api
        self._auth = auth
        self._navigator = navigator
        self._cart = Cart()
        self._user_id: Optional[str] = None
        self._generation = 0
        self._pending = 0
        self._closed = False
        self.is_cart_open = False
        self.last_added: Optional[Product] = None
        self._unsubscribe = auth.subscribe(self._on_session_change)
        if auth.user is not None:
            self._switch_user(auth.user.id)

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def is_loading(self) -> bool:
        return self._pending > 0

    @property
    def is_account_cart(self) -> bool:
        return self._user_id is not None

    @property
    def state(self) -> CartState:
        if self.is_loading and self.is_account_cart:
            return CartState.LOADING
        if self.is_account_cart:
            return CartState.POPULATED_ACCOUNT
        return CartState.EMPTY_GUEST if self._cart.is_empty else CartState.POPULATED_GUEST

    @property
    def item_count(self) -> int:
        return self._cart.item_count

    def local_subtotal(self) -> Decimal:
        """Sum of price x quantity, for views of carts without server totals."""
        return to_money(sum((i.line_total for i in self._cart.items), Decimal("0")))

    def toggle_cart(self) -> bool:
        self.is_cart_open = not self.is_cart_open
        return self.is_cart_open

    def close(self) -> None:
        """Detach from the session; late reload results are dropped from now on."""
        self._closed = True
        self._generation += 1
        self._unsubscribe()

    # session transitions

    def _on_session_change(self, previous: Session, current: Session) -> None:
        prev_id = previous.user.id if previous.user else None
        curr_id = current.user.id if current.user else None
        if prev_id == curr_id:
            return
        self._switch_user(curr_id)

    def _switch_user(self, user_id: Optional[str]) -> None:
        self._generation += 1
        self._user_id = user_id
        # never show one user's cart to another, or to nobody
        self._cart = Cart()
        if user_id is None:
            return
        try:
            self.load_cart()
        except ApiError as exc:
            log_event("warning", "cart.reload_failed", user_id=user_id, code=exc.code, message=exc.message)

    @contextmanager
    def _busy(self):
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    def load_cart(self) -> Cart:
        """Replace the account cart with the server's copy."""
        if self._user_id is None or self._closed:
            return self._cart
        generation = self._generation
        with self._busy():
            payload = self._api.get("/api/cart")
        if self._closed or generation != self._generation:
            logger.debug("dropping cart response from generation %s", generation)
            return self._cart
        self._cart = Cart.from_dict(payload or {})
        return self._cart

    def _remote(self, method: str, path: str, payload: Optional[dict] = None) -> Cart:
        with self._busy():
            self._api.request(method, path, json=payload)
            return self.load_cart()

    # mutations

    def add_to_cart(self, product: Union[Product, dict], quantity: int = 1) -> Cart:
        """Add `quantity` (>= 1) of a product; ValueError leaves the cart untouched."""
        quantity = ensure_positive_int(quantity, "quantity")
        if not isinstance(product, Product):
            product = Product.from_dict(product)
        self.last_added = product
        if self.is_account_cart:
            return self._remote("POST", "/api/cart/items", {"productId": product.id, "quantity": quantity})

        items = self._cart.items
        if any(i.product.id == product.id for i in items):
            items = tuple(
                replace(i, quantity=i.quantity + quantity) if i.product.id == product.id else i
                for i in items
            )
        else:
            items = items + (CartItem(id=f"guest-{uuid4().hex}", product=product, quantity=quantity),)
        self._cart = Cart(items=items)
        return self._cart

    def update_cart_item(self, item_id: str, quantity: int) -> Cart:
        """Set an item's quantity. Callers must keep quantity >= 1."""
        if self.is_account_cart:
            return self._remote("PUT", f"/api/cart/items/{item_id}", {"quantity": quantity})
        self._cart = Cart(
            items=tuple(replace(i, quantity=quantity) if i.id == item_id else i for i in self._cart.items)
        )
        return self._cart

    def change_quantity(self, item_id: str, quantity: int) -> Cart:
        """Quantity stepper entry point: anything below 1 is ignored."""
        if quantity < 1:
            return self._cart
        return self.update_cart_item(item_id, quantity)

    def remove_cart_item(self, item_id: str) -> Cart:
        if self.is_account_cart:
            return self._remote("DELETE", f"/api/cart/items/{item_id}")
        self._cart = Cart(items=tuple(i for i in self._cart.items if i.id != item_id))
        return self._cart

    def clear_cart(self) -> Cart:
        if self.is_account_cart:
            return self._remote("DELETE", "/api/cart")
        self._cart = Cart()
        return self._cart

    def proceed_to_checkout(self) -> bool:
        """Close the sidebar and go to checkout, or to login without a session."""
        self.is_cart_open = False
        if self._auth.user is None:
            self._auth.validate_token()
        if self._auth.user is None:
            if self._navigator is not None:
                self._navigator.navigate(LOGIN_PATH)
            return False
        if self._navigator is not None:
            self._navigator.navigate(CHECKOUT_PATH)
        return True
