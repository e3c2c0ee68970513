"""
Product Search Module
=====================

Public storefront search over active products.

Provides:
- /search -- server-rendered search page with category facets
- /api/products/search -- CORS-enabled JSON for embedding
"""

from flask import Blueprint

search_bp = Blueprint(
    'search',
    __name__,
    template_folder='templates'
)

from . import routes

__all__ = ['search_bp']
