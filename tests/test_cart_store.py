"""Tests for CartStore in guest and account mode."""

from decimal import Decimal

import pytest

from conftest import USER_EMAIL, USER_PASSWORD, network_down
from storefront.services import CartState, NetworkError

SOCKS = {"id": 101, "name": "Socks", "price": 10.0, "image": "socks.png"}
SCARF = {"id": 102, "name": "Scarf", "price": 20.0, "imageUrl": "scarf.png"}


class TestGuestCart:
    def test_starts_empty(self, storefront):
        assert storefront.cart.state is CartState.EMPTY_GUEST
        assert storefront.cart.item_count == 0
        assert not storefront.cart.is_account_cart

    def test_local_subtotal(self, storefront, transport):
        cart = storefront.cart
        cart.add_to_cart(SOCKS, 2)
        cart.add_to_cart(SCARF)

        assert cart.local_subtotal() == Decimal("40.00")
        assert cart.item_count == 3
        assert cart.state is CartState.POPULATED_GUEST
        assert cart.cart.total is None
        assert transport.calls == []

    def test_same_product_merges_into_one_line(self, storefront):
        storefront.cart.add_to_cart(SOCKS)
        storefront.cart.add_to_cart(SOCKS, 3)

        (line,) = storefront.cart.cart.items
        assert line.quantity == 4
        assert line.id.startswith("guest-")

    def test_update_and_remove(self, storefront):
        line = storefront.cart.add_to_cart(SOCKS).items[0]

        storefront.cart.update_cart_item(line.id, 5)
        assert storefront.cart.cart.find(line.id).quantity == 5

        storefront.cart.remove_cart_item(line.id)
        assert storefront.cart.cart.is_empty

    def test_quantity_stepper_ignores_values_below_one(self, storefront):
        line = storefront.cart.add_to_cart(SOCKS, 2).items[0]

        storefront.cart.change_quantity(line.id, 0)

        assert storefront.cart.cart.find(line.id).quantity == 2

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_rejects_quantity_below_one(self, storefront, quantity):
        with pytest.raises(ValueError):
            storefront.cart.add_to_cart(SOCKS, quantity)

        assert storefront.cart.cart.is_empty
        assert storefront.cart.last_added is None

    def test_negative_quantity_cannot_shrink_existing_line(self, storefront):
        storefront.cart.add_to_cart(SOCKS)

        with pytest.raises(ValueError):
            storefront.cart.add_to_cart(SOCKS, -3)

        (line,) = storefront.cart.cart.items
        assert line.quantity == 1
        assert storefront.cart.local_subtotal() == Decimal("10.00")

    def test_clear_twice_is_harmless(self, storefront):
        storefront.cart.add_to_cart(SOCKS)

        storefront.cart.clear_cart()
        storefront.cart.clear_cart()

        assert storefront.cart.cart.is_empty

    def test_guest_checkout_goes_to_login(self, storefront):
        storefront.cart.toggle_cart()

        assert storefront.cart.proceed_to_checkout() is False
        assert storefront.cart.is_cart_open is False
        assert storefront.navigator.location == "/login"

    def test_login_replaces_guest_items(self, storefront, registered_user):
        storefront.cart.add_to_cart(SOCKS)

        storefront.auth.authenticate(USER_EMAIL, USER_PASSWORD)

        assert storefront.cart.is_account_cart
        assert storefront.cart.cart.is_empty


class TestAccountCart:
    def test_server_prices_win(self, signed_in):
        cart = signed_in.cart.add_to_cart({"id": 1, "name": "Minimalist Sneakers", "price": 1.0}, 2)

        assert cart.items[0].product.price == Decimal("89.99")
        assert cart.subtotal == Decimal("179.98")
        assert cart.total == Decimal("179.98")
        assert signed_in.cart.state is CartState.POPULATED_ACCOUNT

    def test_every_mutation_reloads(self, signed_in, transport):
        transport.calls.clear()

        signed_in.cart.add_to_cart({"id": 12, "name": "Lip Balm", "price": 12.0})

        assert transport.calls == [("POST", "/api/cart/items"), ("GET", "/api/cart")]
        assert signed_in.cart.cart.shipping == Decimal("5.99")

    def test_update_quantity(self, signed_in):
        line = signed_in.cart.add_to_cart({"id": 6, "name": "Tote", "price": 18.99}).items[0]

        cart = signed_in.cart.change_quantity(line.id, 3)

        assert cart.items[0].quantity == 3
        assert cart.shipping == Decimal("0.00")

    def test_zero_quantity_is_refused_before_any_request(self, signed_in, transport):
        transport.calls.clear()

        with pytest.raises(ValueError):
            signed_in.cart.add_to_cart({"id": 1, "name": "Minimalist Sneakers", "price": 0}, 0)

        assert transport.calls == []

    def test_failed_mutation_keeps_last_cart(self, signed_in, transport):
        before = signed_in.cart.add_to_cart({"id": 2, "name": "Canvas Backpack", "price": 0})
        transport.fail_on[("POST", "/api/cart/items")] = network_down()

        with pytest.raises(NetworkError):
            signed_in.cart.add_to_cart({"id": 3, "name": "Denim", "price": 0})

        assert signed_in.cart.cart == before
        assert not signed_in.cart.is_loading

    def test_loading_state_while_request_is_in_flight(self, signed_in, transport):
        seen = []
        transport.before = lambda method, path: seen.append(signed_in.cart.state)

        signed_in.cart.load_cart()

        assert seen == [CartState.LOADING]
        assert signed_in.cart.state is CartState.POPULATED_ACCOUNT

    def test_clear_twice_is_harmless(self, signed_in):
        signed_in.cart.add_to_cart({"id": 1, "name": "Minimalist Sneakers", "price": 0})

        signed_in.cart.clear_cart()
        cart = signed_in.cart.clear_cart()

        assert cart.is_empty
        assert cart.total == Decimal("0.00")

    def test_logout_drops_account_items(self, signed_in):
        signed_in.cart.add_to_cart({"id": 1, "name": "Minimalist Sneakers", "price": 0})

        signed_in.auth.logout()

        assert signed_in.cart.state is CartState.EMPTY_GUEST
        assert signed_in.cart.item_count == 0

    def test_failed_reload_on_login_is_not_raised(self, storefront, registered_user, transport):
        transport.fail_on[("GET", "/api/cart")] = network_down()

        storefront.auth.authenticate(USER_EMAIL, USER_PASSWORD)

        assert storefront.cart.is_account_cart
        assert storefront.cart.cart.is_empty

    def test_response_for_previous_user_is_dropped(self, signed_in, transport):
        signed_in.cart.add_to_cart({"id": 1, "name": "Minimalist Sneakers", "price": 0})

        def session_ends_mid_request(method, path):
            transport.before = None
            signed_in.auth.invalidate()

        transport.before = session_ends_mid_request
        signed_in.cart.load_cart()

        assert signed_in.cart.cart.is_empty
        assert not signed_in.cart.is_account_cart

    def test_closed_store_ignores_reloads(self, signed_in, transport):
        signed_in.cart.close()
        transport.calls.clear()

        signed_in.cart.load_cart()

        assert transport.calls == []

    def test_checkout_navigation(self, signed_in):
        assert signed_in.cart.proceed_to_checkout() is True
        assert signed_in.navigator.location == "/checkout"
