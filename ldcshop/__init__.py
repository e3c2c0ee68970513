"""
ldcshop - Storefront Admin for a Virtual Goods Shop
===================================================

A Flask extension providing:
- Admin dashboard with sales stats, shop settings and product actions
- Paginated, filterable order listing with expired-order cleanup
- Public product search with category facets

Usage:
    from flask import Flask
    from ldcshop import LdcShop

    app = Flask(__name__)
    LdcShop(app)
"""

import logging
import secrets

from .core.config import Config
from .core.database import Database, db
from .core.errors import register_error_handlers

__version__ = '0.1.0'

logger = logging.getLogger(__name__)


class LdcShop:
    """Registers the shop modules on a Flask app"""

    DEFAULT_FEATURES = {
        'settings': True,
        'orders': True,
        'merchandise': True,
        'search': True,
    }

    def __init__(self, app=None, config=None):
        self._config = config or {}
        self._registered = []
        self.capabilities = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_defaults(app)
        self.capabilities = Database.init_app(app)
        app.extensions['ldcshop'] = self

        register_error_handlers(app)
        self._register_modules(app)
        app.context_processor(self._inject_site_meta)
        return self

    def _apply_defaults(self, app):
        if not app.config.get('SECRET_KEY'):
            app.config['SECRET_KEY'] = Config.SECRET_KEY or secrets.token_hex(32)
            if not Config.SECRET_KEY:
                logger.warning("No SECRET_KEY configured; sessions will not survive a restart")
        app.config.setdefault('DB_DIR', Config.DB_DIR)
        app.config.setdefault('ORDER_EXPIRY_MINUTES', Config.ORDER_EXPIRY_MINUTES)
        app.config.setdefault('SITE_DEFAULT_TITLE',
                              self._config.get('brand_name') or Config.SITE_DEFAULT_TITLE)
        app.config.setdefault('SITE_DEFAULT_DESCRIPTION', Config.SITE_DEFAULT_DESCRIPTION)

    def _feature_enabled(self, name):
        features = dict(self.DEFAULT_FEATURES)
        features.update(self._config.get('features', {}))
        return features.get(name, False)

    def _register_modules(self, app):
        # The dashboard owns admin.login, which every admin guard redirects to
        from .modules.dashboard import dashboard_bp
        app.register_blueprint(dashboard_bp)
        self._registered.append('dashboard')

        if self._feature_enabled('settings'):
            from .modules.settings import settings_bp
            app.register_blueprint(settings_bp)
            self._registered.append('settings')

        if self._feature_enabled('orders'):
            from .modules.orders import orders_bp
            app.register_blueprint(orders_bp)
            self._registered.append('orders')

        if self._feature_enabled('merchandise'):
            from .modules.merchandise import merchandise_bp
            app.register_blueprint(merchandise_bp)
            self._registered.append('merchandise')

        if self._feature_enabled('search'):
            from .modules.search import search_bp
            app.register_blueprint(search_bp)
            self._registered.append('search')

    def get_registered_modules(self):
        return list(self._registered)

    def _inject_site_meta(self):
        from flask import current_app
        from .modules.settings.helpers import get_site_title, is_noindex_enabled

        return {
            'site_title': get_site_title(current_app.config['SITE_DEFAULT_TITLE']),
            'site_description': current_app.config['SITE_DEFAULT_DESCRIPTION'],
            'noindex': is_noindex_enabled(),
            'ldcshop_modules': self.get_registered_modules(),
        }


__all__ = ['LdcShop', 'Config', 'Database', 'db']
