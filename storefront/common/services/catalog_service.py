from typing import Dict, List, Optional

from ..catalog_seed import CATEGORIES, PRODUCTS
from ..utils.dto import to_product_dto
from ..utils.pagination import normalize_paging, total_pages

SORTS = {
    "price-asc": (lambda p: p["price"], False),
    "price-desc": (lambda p: p["price"], True),
    "rating": (lambda p: p["rating"], True),
    # no creation dates in the mock data, newest means highest id
    "newest": (lambda p: p["id"], True),
}


class CatalogService:
    """Read-only catalog queries over the in-memory product list.

    Responsibilities:
    - List/search products with filters, sorting and pagination
    - Get single product detail
    - List categories and featured products
    """

    def __init__(self, products: Optional[List[Dict]] = None, categories: Optional[List[Dict]] = None):
        self._products = list(PRODUCTS if products is None else products)
        self._categories = list(CATEGORIES if categories is None else categories)

    def list_products(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        min_price: float = 0,
        max_price: float = 100000,
        rating: float = 0,
        sort: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Dict:
        """Return dict: { products: [ProductDTO], pagination: {total, page, limit, totalPages} }"""
        p, ps = normalize_paging(page, limit)
        rows = list(self._products)
        if category:
            rows = [r for r in rows if str(r["category"]) == str(category)]
        rows = [r for r in rows if min_price <= r["price"] <= max_price]
        if rating > 0:
            rows = [r for r in rows if r["rating"] >= rating]
        if search:
            needle = search.lower()
            rows = [
                r
                for r in rows
                if needle in r["name"].lower()
                or needle in r["description"].lower()
                or needle in r["brand"].lower()
            ]
        if sort in SORTS:
            key, reverse = SORTS[sort]
            rows.sort(key=key, reverse=reverse)
        else:
            # featured first, then by id
            rows.sort(key=lambda r: (not r.get("featured"), r["id"]))

        total = len(rows)
        start = (p - 1) * ps
        return {
            "products": [to_product_dto(r) for r in rows[start : start + ps]],
            "pagination": {"total": total, "page": p, "limit": ps, "totalPages": total_pages(total, ps)},
        }

    def get_product(self, product_id) -> Dict:
        """Return ProductDTO for given product id, or {} when unknown."""
        for r in self._products:
            if str(r["id"]) == str(product_id):
                return to_product_dto(r)
        return {}

    def featured_products(self) -> List[Dict]:
        return [to_product_dto(r) for r in self._products if r.get("featured")]

    def list_categories(self) -> List[Dict]:
        return [dict(c) for c in self._categories]
