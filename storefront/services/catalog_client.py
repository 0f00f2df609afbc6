"""Read-only catalog queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .api_client import ApiClient
from .cart_store import Product
from .errors import NotFoundError
from .query_cache import QueryCache


@dataclass(frozen=True)
class ProductFilters:
    category: Optional[str] = None
    price_range: Tuple[int, int] = (0, 100000)
    rating: int = 0
    search: str = ""
    sort: str = "featured"

    def to_params(self, page: int) -> dict:
        params = {"min": self.price_range[0], "max": self.price_range[1]}
        if self.category:
            params["category"] = self.category
        if self.rating > 0:
            params["rating"] = self.rating
        if self.search:
            params["search"] = self.search
        if self.sort != "featured":
            params["sort"] = self.sort
        params["page"] = page
        return params


@dataclass(frozen=True)
class ProductPage:
    products: Tuple[dict, ...]
    total: int
    page: int
    limit: int
    total_pages: int

    def as_products(self) -> List[Product]:
        return [Product.from_dict(p) for p in self.products]


class CatalogClient:
    def __init__(self, api: ApiClient, query_cache: QueryCache) -> None:
        self._api = api
        self._queries = query_cache

    def list_products(self, filters: Optional[ProductFilters] = None, page: int = 1) -> ProductPage:
        filters = filters or ProductFilters()
        params = filters.to_params(page)
        key = ("products",) + tuple(sorted(params.items()))
        payload = self._queries.fetch(
            key, lambda: self._api.get("/api/products", params=params, require_auth=False)
        )
        pagination = payload.get("pagination") or {}
        return ProductPage(
            products=tuple(payload.get("products") or ()),
            total=int(pagination.get("total", 0)),
            page=int(pagination.get("page", page)),
            limit=int(pagination.get("limit", 10)),
            total_pages=int(pagination.get("totalPages", 0)),
        )

    def get_product(self, product_id) -> Optional[dict]:
        """Product detail, or None when the product does not exist."""
        try:
            return self._queries.fetch(
                ("products", "detail", str(product_id)),
                lambda: self._api.get(f"/api/products/{product_id}", require_auth=False),
            )
        except NotFoundError:
            return None

    def featured_products(self) -> List[dict]:
        return self._queries.fetch(
            ("products", "featured"),
            lambda: self._api.get("/api/products/featured", require_auth=False),
        )

    def list_categories(self) -> List[dict]:
        return self._queries.fetch(
            ("categories",), lambda: self._api.get("/api/categories", require_auth=False)
        )
