"""Storefront session, cart and checkout client with its mock API."""

__version__ = "0.1.0"
