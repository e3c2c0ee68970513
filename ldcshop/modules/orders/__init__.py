"""
Orders Admin Module
===================

Admin interface for order management.
Plugs into the admin dashboard module.

Provides:
- Paginated order listing with free-text search
- Status and "needs delivery" filters
- Order detail lookup
- Best-effort cancellation of expired pending orders on page load
"""

from flask import Blueprint

orders_bp = Blueprint(
    'orders_admin',
    __name__,
    url_prefix='/admin/orders',
    template_folder='templates'
)

from . import routes

__all__ = ['orders_bp']
