"""Tests for the checkout wizard and order submission."""

import pytest

from conftest import USER_EMAIL, USER_PASSWORD, network_down
from storefront.services import (
    AuthenticationError,
    CheckoutStateError,
    CheckoutStep,
    CheckoutValidationError,
    EmptyCartError,
    NetworkError,
)
from storefront.services.checkout_flow import EXPIRED_ERROR, PAYMENT_ERROR, SHIPPING_ERROR, SUBMIT_ERROR

SHIPPING = {
    "first_name": "Jane",
    "last_name": "Doe",
    "email": USER_EMAIL,
    "phone": "555-0100",
    "address_line1": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "US",
}
CARD = {"card_number": "4111111111111111", "card_name": "Jane Doe", "expiry_date": "12/30", "cvv": "123"}


@pytest.fixture
def flow(signed_in):
    signed_in.cart.add_to_cart({"id": 1, "name": "Minimalist Sneakers", "price": 0}, 2)
    flow = signed_in.checkout()
    flow.begin()
    return flow


@pytest.fixture
def at_review(flow):
    flow.update_shipping(**SHIPPING)
    flow.advance()
    flow.update_payment(**CARD)
    flow.advance()
    return flow


def _server_cart(api):
    token = api.post("/api/auth/login", json={"email": USER_EMAIL, "password": USER_PASSWORD}).get_json()["token"]
    return api.get("/api/cart", headers={"Authorization": f"Bearer {token}"}).get_json()


class TestWizard:
    def test_empty_cart_cannot_start(self, signed_in):
        with pytest.raises(EmptyCartError) as err:
            signed_in.checkout().begin()

        assert err.value.browse_path == "/products"

    def test_blank_city_blocks_shipping_step(self, flow, signed_in):
        flow.update_shipping(**dict(SHIPPING, city="  "))

        with pytest.raises(CheckoutValidationError) as err:
            flow.advance()

        assert err.value.fields == ("city",)
        assert flow.step is CheckoutStep.SHIPPING
        assert signed_in.notifier.last.message == SHIPPING_ERROR

    def test_card_fields_required_for_card_payment(self, flow, signed_in):
        flow.update_shipping(**SHIPPING)
        flow.advance()
        flow.update_payment(**dict(CARD, cvv=""))

        with pytest.raises(CheckoutValidationError) as err:
            flow.advance()

        assert err.value.fields == ("cvv",)
        assert flow.step is CheckoutStep.PAYMENT
        assert signed_in.notifier.last.message == PAYMENT_ERROR

    def test_paypal_needs_no_card(self, flow):
        flow.update_shipping(**SHIPPING)
        flow.advance()
        flow.set_payment_method("paypal")

        assert flow.advance() is CheckoutStep.REVIEW

    def test_back_stops_at_shipping(self, at_review):
        assert at_review.back() is CheckoutStep.PAYMENT
        assert at_review.back() is CheckoutStep.SHIPPING
        assert at_review.back() is CheckoutStep.SHIPPING
        assert at_review.draft.shipping_info.city == "Springfield"

    def test_review_is_the_last_step(self, at_review):
        with pytest.raises(CheckoutStateError):
            at_review.advance()

    def test_submit_only_from_review(self, flow):
        flow.update_shipping(**SHIPPING)

        with pytest.raises(CheckoutStateError):
            flow.submit()

    def test_unknown_field_rejected(self, flow):
        with pytest.raises(TypeError):
            flow.update_shipping(zip="62701")

    def test_saved_address_prefills_shipping(self, flow, signed_in):
        signed_in.api.post(
            "/api/addresses",
            {
                "firstName": "Jane",
                "lastName": "Doe",
                "email": USER_EMAIL,
                "phone": "555-0100",
                "addressLine1": "9 Elm St",
                "city": "Shelbyville",
                "state": "IL",
                "postalCode": "62565",
                "country": "US",
            },
        )
        (address,) = flow.load_addresses()

        shipping = flow.select_address(address)

        assert shipping.city == "Shelbyville"
        assert flow.draft.selected_address_id == address.id
        assert flow.step is CheckoutStep.SHIPPING
        assert flow.advance() is CheckoutStep.PAYMENT


class TestSubmit:
    def test_successful_order(self, at_review, signed_in):
        order = at_review.submit()

        assert order.total is not None and str(order.total) == "179.98"
        assert order.status == "pending"
        assert at_review.step is CheckoutStep.SUBMITTED
        assert at_review.draft is None
        assert signed_in.cart.cart.is_empty
        assert signed_in.navigator.location == f"/order/success?orderId={order.id}"
        assert signed_in.notifier.last.level == "success"
        assert [o.id for o in signed_in.orders.list_orders()] == [order.id]

    def test_paypal_order_has_no_card(self, flow):
        flow.update_shipping(**SHIPPING)
        flow.advance()
        flow.set_payment_method("paypal")
        flow.advance()

        order = flow.submit()

        assert order.payment_method == "paypal"

    def test_expired_token_ends_session_and_keeps_server_cart(
        self, at_review, signed_in, auth_service, registered_user, tokens, api
    ):
        tokens.set(auth_service.issue_token(registered_user, ttl_seconds=-60))

        with pytest.raises(AuthenticationError) as err:
            at_review.submit()

        assert err.value.code == "TOKEN_EXPIRED"
        assert signed_in.auth.user is None
        assert tokens.get() is None
        assert signed_in.navigator.location == "/login"
        assert signed_in.notifier.last.message == EXPIRED_ERROR
        assert at_review.order is None
        assert at_review.draft is None
        assert at_review.step is None
        assert len(_server_cart(api)["items"]) == 1

    def test_network_failure_stays_on_review(self, at_review, signed_in, transport):
        transport.fail_on[("POST", "/api/orders")] = network_down()

        with pytest.raises(NetworkError):
            at_review.submit()

        assert at_review.step is CheckoutStep.REVIEW
        assert at_review.draft.shipping_info.city == "Springfield"
        assert signed_in.notifier.last.message == SUBMIT_ERROR
        assert signed_in.auth.user is not None
        assert signed_in.cart.item_count == 2

    def test_retry_after_failure_succeeds(self, at_review, transport):
        transport.fail_on[("POST", "/api/orders")] = network_down()
        with pytest.raises(NetworkError):
            at_review.submit()
        del transport.fail_on[("POST", "/api/orders")]

        order = at_review.submit()

        assert at_review.step is CheckoutStep.SUBMITTED
        assert order.id

    def test_cart_clear_failure_does_not_fail_the_order(self, at_review, transport, api):
        transport.fail_on[("DELETE", "/api/cart")] = network_down()

        order = at_review.submit()

        assert at_review.order == order
        assert len(_server_cart(api)["items"]) == 1

    def test_guest_is_sent_to_login(self, storefront):
        storefront.cart.add_to_cart({"id": 1, "name": "Minimalist Sneakers", "price": 89.99})
        flow = storefront.checkout()
        flow.begin()
        flow.update_shipping(**SHIPPING)
        flow.advance()
        flow.set_payment_method("paypal")
        flow.advance()

        with pytest.raises(AuthenticationError):
            flow.submit()

        assert storefront.navigator.location == "/login"
        assert flow.step is CheckoutStep.REVIEW
