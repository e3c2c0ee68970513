"""
Merchandise Admin Module
========================

Admin actions on the product list.
Plugs into the admin dashboard module.

Provides:
- Product listing in display order
- Delete, show/hide and up/down reordering
"""

from flask import Blueprint

merchandise_bp = Blueprint(
    'merchandise_admin',
    __name__,
    url_prefix='/admin/products'
)

from . import routes

__all__ = ['merchandise_bp']
