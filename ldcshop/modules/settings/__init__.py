"""
Settings Module
===============

Site settings for the shop: name, low-stock threshold, check-in reward,
check-in toggle and search-engine no-index toggle. Reads always resolve to
a documented default when a key is unset or unreadable.
"""

from flask import Blueprint

settings_bp = Blueprint('settings', __name__, url_prefix='/admin/settings')

from . import routes

__all__ = ['settings_bp']
