"""Three-step checkout: shipping, payment, review, then order submission."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import uuid4

from ..common.services.logging import log_event
from ..common.utils.money import to_money
from .api_client import ApiClient
from .cart_store import CartStore
from .errors import (
    ApiError,
    AuthenticationError,
    CheckoutStateError,
    CheckoutValidationError,
    EmptyCartError,
    is_auth_error,
)
from .navigation import LOGIN_PATH, PRODUCTS_PATH, Navigator, Notifier, order_success_path
from .query_cache import QueryCache
from .session_manager import AuthSessionManager

logger = logging.getLogger(__name__)


class CheckoutStep(IntEnum):
    SHIPPING = 1
    PAYMENT = 2
    REVIEW = 3
    SUBMITTED = 4


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"


@dataclass(frozen=True)
class ShippingInfo:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    notes: str = ""

    REQUIRED = (
        "first_name",
        "last_name",
        "email",
        "phone",
        "address_line1",
        "city",
        "state",
        "postal_code",
        "country",
    )

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED if not getattr(self, name).strip()]

    def to_payload(self) -> Dict[str, str]:
        return {
            "name": f"{self.first_name} {self.last_name}".strip(),
            "email": self.email,
            "addressLine1": self.address_line1,
            "addressLine2": self.address_line2,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
            "country": self.country,
            "phone": self.phone,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class PaymentInfo:
    card_number: str = ""
    card_name: str = ""
    expiry_date: str = ""
    cvv: str = ""

    REQUIRED = ("card_number", "card_name", "expiry_date", "cvv")

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED if not getattr(self, name).strip()]

    def to_payload(self) -> Dict[str, str]:
        return {
            "cardNumber": self.card_number,
            "cardName": self.card_name,
            "expiryDate": self.expiry_date,
            "cvv": self.cvv,
        }


@dataclass(frozen=True)
class Address:
    id: str
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    is_default: bool = False

    @classmethod
    def from_dict(cls, payload: dict) -> "Address":
        return cls(
            id=str(payload["id"]),
            name=payload.get("name") or "",
            first_name=payload.get("firstName") or "",
            last_name=payload.get("lastName") or "",
            email=payload.get("email") or "",
            phone=payload.get("phone") or "",
            address_line1=payload.get("addressLine1") or "",
            address_line2=payload.get("addressLine2") or "",
            city=payload.get("city") or "",
            state=payload.get("state") or "",
            postal_code=payload.get("postalCode") or "",
            country=payload.get("country") or "",
            is_default=bool(payload.get("isDefault")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "addressLine1": self.address_line1,
            "addressLine2": self.address_line2,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
            "country": self.country,
            "isDefault": self.is_default,
        }


@dataclass(frozen=True)
class Order:
    id: str
    status: str
    items: Tuple[Dict[str, Any], ...] = ()
    shipping_info: Dict[str, Any] = field(default_factory=dict)
    payment_method: Optional[str] = None
    subtotal: Optional[Decimal] = None
    shipping: Optional[Decimal] = None
    total: Optional[Decimal] = None

    @classmethod
    def from_dict(cls, payload: dict) -> "Order":
        def money(key):
            return to_money(payload[key]) if payload.get(key) is not None else None

        return cls(
            id=str(payload["id"]),
            status=str(payload.get("status") or "pending"),
            items=tuple(payload.get("items") or ()),
            shipping_info=dict(payload.get("shippingInfo") or {}),
            payment_method=payload.get("paymentMethod"),
            subtotal=money("subtotal"),
            shipping=money("shipping"),
            total=money("total"),
        )


@dataclass
class CheckoutDraft:
    step: CheckoutStep = CheckoutStep.SHIPPING
    shipping_info: ShippingInfo = field(default_factory=ShippingInfo)
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    payment_info: PaymentInfo = field(default_factory=PaymentInfo)
    selected_address_id: Optional[str] = None
    # sent as Idempotency-Key so a manual resubmit cannot create a second order
    request_id: str = field(default_factory=lambda: uuid4().hex)


SHIPPING_ERROR = "Please fill in all shipping information"
PAYMENT_ERROR = "Please fill in all payment information"
SIGN_IN_ERROR = "Please sign in to place an order"
EXPIRED_ERROR = "Your session has expired. Please log in again."
SUBMIT_ERROR = "Failed to place order. Please try again."


class CheckoutFlow:
    """Linear wizard over a CheckoutDraft.

    Order submission is never retried automatically; after a non-auth
    failure the draft stays on the review step for the user to try again.
    """

    def __init__(
        self,
        api: ApiClient,
        auth: AuthSessionManager,
        cart: CartStore,
        navigator: Navigator,
        *,
        notifier: Optional[Notifier] = None,
        query_cache: Optional[QueryCache] = None,
    ) -> None:
        self._api = api
        self._auth = auth
        self._cart = cart
        self._navigator = navigator
        self._notifier = notifier
        self._queries = query_cache or QueryCache()
        self._draft: Optional[CheckoutDraft] = None
        self.order: Optional[Order] = None

    @property
    def draft(self) -> Optional[CheckoutDraft]:
        return self._draft

    @property
    def step(self) -> Optional[CheckoutStep]:
        if self.order is not None:
            return CheckoutStep.SUBMITTED
        return self._draft.step if self._draft else None

    def _notify_error(self, message: str) -> None:
        if self._notifier is not None:
            self._notifier.error(message)

    def _require_draft(self) -> CheckoutDraft:
        if self._draft is None:
            raise CheckoutStateError("checkout has not been started")
        return self._draft

    def begin(self) -> CheckoutDraft:
        """Start a new draft; refuses when the cart is empty."""
        if self._cart.is_account_cart:
            self._cart.load_cart()
        if self._cart.cart.is_empty:
            raise EmptyCartError("Your cart is empty", browse_path=PRODUCTS_PATH)
        self.order = None
        self._draft = CheckoutDraft()
        return self._draft

    def cancel(self) -> None:
        self._draft = None

    def load_addresses(self) -> List[Address]:
        payload = self._queries.fetch(("addresses",), lambda: self._api.get("/api/addresses"))
        return [Address.from_dict(a) for a in payload or []]

    def select_address(self, address: Union[Address, dict]) -> ShippingInfo:
        """Pre-fill the shipping fields; the step is left alone."""
        draft = self._require_draft()
        if not isinstance(address, Address):
            address = Address.from_dict(address)
        draft.selected_address_id = address.id
        draft.shipping_info = replace(
            draft.shipping_info,
            first_name=address.first_name,
            last_name=address.last_name,
            email=address.email,
            phone=address.phone,
            address_line1=address.address_line1,
            address_line2=address.address_line2,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
        )
        return draft.shipping_info

    def update_shipping(self, **values: str) -> ShippingInfo:
        draft = self._require_draft()
        _check_names(ShippingInfo, values)
        draft.shipping_info = replace(draft.shipping_info, **values)
        return draft.shipping_info

    def set_payment_method(self, method: Union[PaymentMethod, str]) -> None:
        self._require_draft().payment_method = PaymentMethod(method)

    def update_payment(self, **values: str) -> PaymentInfo:
        draft = self._require_draft()
        _check_names(PaymentInfo, values)
        draft.payment_info = replace(draft.payment_info, **values)
        return draft.payment_info

    def _validate_shipping(self, draft: CheckoutDraft) -> None:
        missing = draft.shipping_info.missing_fields()
        if missing:
            self._notify_error(SHIPPING_ERROR)
            raise CheckoutValidationError(SHIPPING_ERROR, missing)

    def _validate_payment(self, draft: CheckoutDraft) -> None:
        if draft.payment_method is not PaymentMethod.CREDIT_CARD:
            return
        missing = draft.payment_info.missing_fields()
        if missing:
            self._notify_error(PAYMENT_ERROR)
            raise CheckoutValidationError(PAYMENT_ERROR, missing)

    def advance(self) -> CheckoutStep:
        draft = self._require_draft()
        if draft.step is CheckoutStep.SHIPPING:
            self._validate_shipping(draft)
        elif draft.step is CheckoutStep.PAYMENT:
            self._validate_payment(draft)
        else:
            raise CheckoutStateError("review is the last step; submit the order instead")
        draft.step = CheckoutStep(draft.step + 1)
        return draft.step

    def back(self) -> CheckoutStep:
        draft = self._require_draft()
        if draft.step > CheckoutStep.SHIPPING:
            draft.step = CheckoutStep(draft.step - 1)
        return draft.step

    def _order_payload(self, draft: CheckoutDraft) -> Dict[str, Any]:
        card = draft.payment_method is PaymentMethod.CREDIT_CARD
        return {
            "shippingInfo": draft.shipping_info.to_payload(),
            "paymentMethod": draft.payment_method.value,
            "paymentInfo": draft.payment_info.to_payload() if card else None,
        }

    def _expire_session(self) -> None:
        self._draft = None
        self._notify_error(EXPIRED_ERROR)
        self._auth.invalidate()

    def submit(self) -> Order:
        draft = self._require_draft()
        if draft.step is not CheckoutStep.REVIEW:
            raise CheckoutStateError("orders can only be submitted from the review step")
        self._validate_shipping(draft)
        self._validate_payment(draft)

        if not self._auth.is_authenticated:
            self._notify_error(SIGN_IN_ERROR)
            self._navigator.navigate(LOGIN_PATH)
            raise AuthenticationError(SIGN_IN_ERROR, code="NO_TOKEN")

        try:
            # the draft may have outlived the token
            self._api.get("/api/users/profile")
            payload = self._api.post(
                "/api/orders",
                self._order_payload(draft),
                headers={"Idempotency-Key": draft.request_id},
            )
        except ApiError as exc:
            if is_auth_error(exc):
                log_event("warning", "checkout.session_expired", code=exc.code)
                self._expire_session()
            else:
                log_event("error", "checkout.submit_failed", **exc.to_dict())
                self._notify_error(SUBMIT_ERROR)
            raise

        order = Order.from_dict(payload)
        try:
            self._cart.clear_cart()
        except ApiError as exc:
            # the order exists; a stale cart is the lesser problem
            log_event("warning", "checkout.cart_clear_failed", order_id=order.id, message=exc.message)
        self.order = order
        self._draft = None
        self._queries.invalidate("orders")
        log_event("info", "checkout.submitted", order_id=order.id, payment_method=payload.get("paymentMethod"))
        if self._notifier is not None:
            self._notifier.success("Order placed successfully!")
        self._navigator.navigate(order_success_path(order.id))
        return order


def _check_names(cls, values: Dict[str, Any]) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise TypeError(f"unknown {cls.__name__} fields: {', '.join(unknown)}")
