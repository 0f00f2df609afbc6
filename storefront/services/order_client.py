from __future__ import annotations

from typing import List, Optional

from .api_client import ApiClient
from .checkout_flow import Order
from .errors import NotFoundError
from .query_cache import QueryCache


class OrderClient:
    """Order history and the confirmation lookup."""

    def __init__(self, api: ApiClient, query_cache: QueryCache) -> None:
        self._api = api
        self._queries = query_cache

    def list_orders(self) -> List[Order]:
        payload = self._queries.fetch(("orders",), lambda: self._api.get("/api/orders"))
        return [Order.from_dict(o) for o in payload or []]

    def get_order(self, order_id: str) -> Optional[Order]:
        if not order_id:
            return None
        try:
            payload = self._queries.fetch(
                ("orders", order_id), lambda: self._api.get(f"/api/orders/{order_id}")
            )
        except NotFoundError:
            return None
        return Order.from_dict(payload)
