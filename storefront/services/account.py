"""Profile and saved-address management for the signed-in user."""

from __future__ import annotations

from typing import Callable, List, Optional, TypeVar, Union

from .api_client import ApiClient
from .checkout_flow import Address
from .errors import ApiError
from .navigation import Notifier
from .query_cache import QueryCache
from .session_manager import AuthSessionManager, User

T = TypeVar("T")

ADDRESSES_KEY = ("addresses",)
PROFILE_KEY = ("profile",)


class AccountService:
    """Reads go through the query cache; every successful mutation drops the
    cached entries it affects so the next read sees the server's copy.
    Failures are shown as an error notification and re-raised.
    """

    def __init__(
        self,
        api: ApiClient,
        auth: AuthSessionManager,
        query_cache: QueryCache,
        *,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._api = api
        self._auth = auth
        self._queries = query_cache
        self._notifier = notifier

    def _mutate(self, call: Callable[[], T], key, success: str, failure: str) -> T:
        try:
            result = call()
        except ApiError as exc:
            if self._notifier is not None:
                self._notifier.error(exc.message or failure)
            raise
        self._queries.invalidate(key[0])
        if self._notifier is not None:
            self._notifier.success(success)
        return result

    # profile

    def profile(self) -> User:
        return User.from_dict(self._queries.fetch(PROFILE_KEY, lambda: self._api.get("/api/users/profile")))

    def update_profile(self, **values: str) -> User:
        """Accepts name, first_name, last_name and phone."""
        allowed = {"name": "name", "first_name": "firstName", "last_name": "lastName", "phone": "phone"}
        unknown = sorted(set(values) - set(allowed))
        if unknown:
            raise TypeError(f"unknown profile fields: {', '.join(unknown)}")
        payload = {allowed[k]: v for k, v in values.items()}
        user = User.from_dict(
            self._mutate(
                lambda: self._api.put("/api/users/profile", payload),
                PROFILE_KEY,
                "Profile updated successfully",
                "Failed to update profile",
            )
        )
        self._auth.update_user(user)
        return user

    # addresses

    def list_addresses(self) -> List[Address]:
        payload = self._queries.fetch(ADDRESSES_KEY, lambda: self._api.get("/api/addresses"))
        return [Address.from_dict(a) for a in payload or []]

    def default_address(self) -> Optional[Address]:
        for address in self.list_addresses():
            if address.is_default:
                return address
        return None

    def add_address(self, address: Union[Address, dict]) -> Address:
        payload = address.to_payload() if isinstance(address, Address) else dict(address)
        return Address.from_dict(
            self._mutate(
                lambda: self._api.post("/api/addresses", payload),
                ADDRESSES_KEY,
                "Address added successfully",
                "Failed to add address",
            )
        )

    def update_address(self, address_id: str, values: dict) -> Address:
        return Address.from_dict(
            self._mutate(
                lambda: self._api.put(f"/api/addresses/{address_id}", dict(values)),
                ADDRESSES_KEY,
                "Address updated successfully",
                "Failed to update address",
            )
        )

    def set_default_address(self, address_id: str) -> Address:
        return Address.from_dict(
            self._mutate(
                lambda: self._api.put(f"/api/addresses/{address_id}/default"),
                ADDRESSES_KEY,
                "Default address updated",
                "Failed to update default address",
            )
        )

    def delete_address(self, address_id: str) -> None:
        self._mutate(
            lambda: self._api.delete(f"/api/addresses/{address_id}"),
            ADDRESSES_KEY,
            "Address deleted successfully",
            "Failed to delete address",
        )
