from typing import Dict, List, Optional
from uuid import uuid4

from ..db.session import SessionFactory
from ..models.order import Order
from ..utils.dto import to_order_dto
from ..utils.money import to_money
from ..utils.validators import missing_fields
from .cart_service import CartService
from .logging import log_event

PAYMENT_METHODS = {"credit_card", "paypal"}
SHIPPING_REQUIRED = ("name", "addressLine1", "city", "state", "postalCode", "country", "phone")
CARD_REQUIRED = ("cardNumber", "cardName", "expiryDate", "cvv")


def _mask_card(payment_info: Dict) -> Dict:
    digits = "".join(ch for ch in str(payment_info.get("cardNumber", "")) if ch.isdigit())
    return {
        "cardName": payment_info.get("cardName"),
        "last4": digits[-4:],
        "expiryDate": payment_info.get("expiryDate"),
    }


class OrderService:
    """Order creation and retrieval backed by DB.

    The order snapshots the account cart; clearing the cart afterwards is
    the client's job (DELETE /api/cart).
    """

    def __init__(self, session_factory: SessionFactory, cart_service: CartService):
        self._session_factory = session_factory
        self._cart_service = cart_service

    def create_order(
        self,
        *,
        user_id: str,
        shipping_info: Optional[Dict],
        payment_method: Optional[str],
        payment_info: Optional[Dict] = None,
        request_id: Optional[str] = None,
    ) -> Dict:
        """Create order from current cart (idempotency by request_id)."""
        shipping_info = shipping_info or {}
        missing = missing_fields(shipping_info, SHIPPING_REQUIRED)
        if missing:
            raise ValueError(f"missing shipping fields: {', '.join(missing)}")
        if payment_method not in PAYMENT_METHODS:
            raise ValueError("paymentMethod must be credit_card or paypal")
        if payment_method == "credit_card":
            missing = missing_fields(payment_info or {}, CARD_REQUIRED)
            if missing:
                raise ValueError(f"missing payment fields: {', '.join(missing)}")

        if request_id:
            with self._session_factory() as session:
                existing = (
                    session.query(Order)
                    .filter(Order.request_id == request_id, Order.user_id == user_id)
                    .first()
                )
                if existing:
                    return to_order_dto(existing)

        cart = self._cart_service.get_cart(user_id=user_id)
        if not cart["items"]:
            raise ValueError("cart is empty")
        with self._session_factory() as session:
            oid = str(uuid4())
            order = Order(
                id=oid,
                user_id=user_id,
                items=[
                    {
                        "product_id": it["product"]["id"],
                        "name": it["product"]["name"],
                        "quantity": it["quantity"],
                        "unit_price": it["product"]["price"],
                    }
                    for it in cart["items"]
                ],
                shipping_info=dict(shipping_info),
                payment_method=payment_method,
                payment_info=_mask_card(payment_info) if payment_method == "credit_card" else None,
                subtotal=to_money(cart["subtotal"]),
                shipping=to_money(cart["shipping"]),
                total=to_money(cart["total"]),
                currency=cart["currency"],
                status="pending",
                payment_status="unpaid",
                request_id=request_id,
            )
            session.add(order)
            session.flush()
            log_event("info", "order.created", order_id=oid, items=len(cart["items"]), total=cart["total"])
            return to_order_dto(order)

    def list_orders(self, *, user_id: str) -> List[Dict]:
        with self._session_factory() as session:
            rows = (
                session.query(Order)
                .filter(Order.user_id == user_id)
                .order_by(Order.created_at.desc())
                .all()
            )
            return [to_order_dto(o) for o in rows]

    def get_order(self, *, user_id: str, order_id: str) -> Dict:
        if not order_id:
            return {}
        with self._session_factory() as session:
            o = (
                session.query(Order)
                .filter(Order.id == order_id, Order.user_id == user_id)
                .first()
            )
            return to_order_dto(o) if o else {}
