"""Mock catalog served by the storefront API.

The catalog is deliberately in-memory; only accounts, carts, addresses and
orders are stored in the database.
"""

CATEGORIES = [
    {"id": 1, "name": "Clothing", "image": "/images/categories/clothing.jpg"},
    {"id": 2, "name": "Electronics", "image": "/images/categories/electronics.jpg"},
    {"id": 3, "name": "Home & Decor", "image": "/images/categories/home.jpg"},
    {"id": 4, "name": "Beauty", "image": "/images/categories/beauty.jpg"},
    {"id": 5, "name": "Sports", "image": "/images/categories/sports.jpg"},
    {"id": 6, "name": "Books", "image": "/images/categories/books.jpg"},
]

PRODUCTS = [
    {
        "id": 1,
        "name": "Minimalist Sneakers",
        "brand": "Urban Outfitters",
        "price": 89.99,
        "image": "/images/products/sneakers.jpg",
        "badge": "New",
        "rating": 4.5,
        "reviews": 28,
        "description": "Comfortable minimalist sneakers with premium materials for everyday wear.",
        "category": 1,
        "inStock": True,
        "featured": True,
    },
    {
        "id": 2,
        "name": "Wireless Headphones",
        "brand": "SoundWave",
        "price": 149.99,
        "image": "/images/products/headphones.jpg",
        "badge": "Sale",
        "rating": 4.7,
        "reviews": 112,
        "description": "Noise-cancelling over-ear headphones with 30 hour battery life.",
        "category": 2,
        "inStock": True,
        "featured": True,
    },
    {
        "id": 3,
        "name": "Ceramic Table Lamp",
        "brand": "Lumen Home",
        "price": 59.0,
        "image": "/images/products/lamp.jpg",
        "badge": None,
        "rating": 4.2,
        "reviews": 17,
        "description": "Hand-glazed ceramic lamp with a linen shade.",
        "category": 3,
        "inStock": True,
        "featured": False,
    },
    {
        "id": 4,
        "name": "Hydrating Face Serum",
        "brand": "Glow Lab",
        "price": 32.5,
        "image": "/images/products/serum.jpg",
        "badge": "Bestseller",
        "rating": 4.8,
        "reviews": 240,
        "description": "Lightweight hyaluronic serum for all skin types.",
        "category": 4,
        "inStock": True,
        "featured": True,
    },
    {
        "id": 5,
        "name": "Yoga Mat",
        "brand": "FlexFit",
        "price": 25.0,
        "image": "/images/products/yoga-mat.jpg",
        "badge": None,
        "rating": 3.9,
        "reviews": 54,
        "description": "Non-slip 6mm mat with carrying strap.",
        "category": 5,
        "inStock": True,
        "featured": False,
    },
    {
        "id": 6,
        "name": "The Pragmatic Reader",
        "brand": "Paper Crane Press",
        "price": 18.99,
        "image": "/images/products/book.jpg",
        "badge": None,
        "rating": 4.4,
        "reviews": 73,
        "description": "A collection of essays on craft and curiosity.",
        "category": 6,
        "inStock": True,
        "featured": False,
    },
    {
        "id": 7,
        "name": "Denim Jacket",
        "brand": "Urban Outfitters",
        "price": 98.0,
        "image": "/images/products/denim-jacket.jpg",
        "badge": None,
        "rating": 4.1,
        "reviews": 39,
        "description": "Classic washed denim jacket with a relaxed fit.",
        "category": 1,
        "inStock": True,
        "featured": False,
    },
    {
        "id": 8,
        "name": "Smart Watch",
        "brand": "Pulse",
        "price": 199.0,
        "image": "/images/products/watch.jpg",
        "badge": "New",
        "rating": 4.3,
        "reviews": 88,
        "description": "Fitness tracking, notifications and a week of battery.",
        "category": 2,
        "inStock": False,
        "featured": True,
    },
    {
        "id": 9,
        "name": "Scented Candle Set",
        "brand": "Lumen Home",
        "price": 24.0,
        "image": "/images/products/candles.jpg",
        "badge": None,
        "rating": 4.6,
        "reviews": 61,
        "description": "Three soy candles in cedar, fig and sea salt.",
        "category": 3,
        "inStock": True,
        "featured": False,
    },
    {
        "id": 10,
        "name": "Running Shorts",
        "brand": "FlexFit",
        "price": 35.0,
        "image": "/images/products/shorts.jpg",
        "badge": None,
        "rating": 4.0,
        "reviews": 22,
        "description": "Breathable shorts with a zip pocket.",
        "category": 5,
        "inStock": True,
        "featured": False,
    },
    {
        "id": 11,
        "name": "Matte Lipstick",
        "brand": "Glow Lab",
        "price": 16.0,
        "image": "/images/products/lipstick.jpg",
        "badge": None,
        "rating": 4.1,
        "reviews": 95,
        "description": "Long-wear matte finish in twelve shades.",
        "category": 4,
        "inStock": True,
        "featured": False,
    },
    {
        "id": 12,
        "name": "Field Notes Journal",
        "brand": "Paper Crane Press",
        "price": 12.0,
        "image": "/images/products/journal.jpg",
        "badge": None,
        "rating": 4.5,
        "reviews": 31,
        "description": "Dot-grid journal with a lay-flat binding.",
        "category": 6,
        "inStock": True,
        "featured": False,
    },
]
