"""
ldcshop Modules
===============

Flask blueprint modules for the shop admin and storefront search.
"""

__all__ = ['dashboard', 'settings', 'orders', 'merchandise', 'search']
