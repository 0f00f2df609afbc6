from typing import Any, Dict


def to_product_dto(row: Dict) -> Dict:
    return {
        "id": row.get("id"),
        "name": row.get("name"),
        "brand": row.get("brand"),
        "description": row.get("description"),
        "price": float(row.get("price") or 0),
        "image": row.get("image"),
        "badge": row.get("badge"),
        "rating": row.get("rating") or 0,
        "reviews": row.get("reviews") or 0,
        "category": row.get("category"),
        "inStock": bool(row.get("inStock", True)),
        "featured": bool(row.get("featured", False)),
    }


def to_cart_product_dto(product: Dict) -> Dict:
    """The product snapshot embedded in a cart line."""
    return {
        "id": product.get("id"),
        "name": product.get("name"),
        "price": float(product.get("price") or 0),
        "image": product.get("image"),
        "brand": product.get("brand"),
    }


def to_user_dto(row: Any) -> Dict:
    return {
        "id": getattr(row, "id", None),
        "name": getattr(row, "username", None),
        "email": getattr(row, "email", None),
        "role": getattr(row, "role", "user"),
        "firstName": getattr(row, "first_name", None) or "",
        "lastName": getattr(row, "last_name", None) or "",
        "phone": getattr(row, "phone", None) or "",
    }


def to_address_dto(row: Any) -> Dict:
    return {
        "id": getattr(row, "id", None),
        "name": getattr(row, "name", None) or "",
        "firstName": getattr(row, "first_name", None),
        "lastName": getattr(row, "last_name", None),
        "email": getattr(row, "email", None),
        "phone": getattr(row, "phone", None),
        "addressLine1": getattr(row, "address_line1", None),
        "addressLine2": getattr(row, "address_line2", None) or "",
        "city": getattr(row, "city", None),
        "state": getattr(row, "state", None),
        "postalCode": getattr(row, "postal_code", None),
        "country": getattr(row, "country", None),
        "isDefault": bool(getattr(row, "is_default", False)),
    }


def to_order_dto(row: Any) -> Dict:
    created_at = getattr(row, "created_at", None)
    return {
        "id": getattr(row, "id", None),
        "items": getattr(row, "items", None) or [],
        "shippingInfo": getattr(row, "shipping_info", None) or {},
        "paymentMethod": getattr(row, "payment_method", None),
        "paymentInfo": getattr(row, "payment_info", None),
        "subtotal": float(getattr(row, "subtotal", 0) or 0),
        "shipping": float(getattr(row, "shipping", 0) or 0),
        "total": float(getattr(row, "total", 0) or 0),
        "currency": getattr(row, "currency", None),
        "status": getattr(row, "status", None),
        "paymentStatus": getattr(row, "payment_status", None),
        "createdAt": created_at.isoformat() if created_at else None,
    }
