import os
from dotenv import load_dotenv

from .query_params import parse_int_param

load_dotenv(override=True)

class Config:
    """
    Base configuration for the ldcshop admin.
    Projects should provide the database URL via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY') or os.getenv('SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Falls back to a SQLite file in DB_DIR
    DATABASE_URL = os.getenv('DATABASE_URL')

    # Pending orders older than this are cancelled by the expiry sweep
    ORDER_EXPIRY_MINUTES = parse_int_param(os.getenv('ORDER_EXPIRY_MINUTES'), 5)

    # Title used when the shop_name setting is unset
    SITE_DEFAULT_TITLE = os.getenv('SITE_DEFAULT_TITLE', 'LDC Virtual Goods Shop')
    SITE_DEFAULT_DESCRIPTION = os.getenv('SITE_DEFAULT_DESCRIPTION',
                                         'High-quality virtual goods, instant delivery')

    # Origins allowed to call the public product search API
    SEARCH_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.getenv('SEARCH_ALLOWED_ORIGINS', 'http://localhost:3000').split(',')
        if origin.strip()
    ]

    # Table names
    PRODUCTS_TABLE = "products"
    ORDERS_TABLE = "orders"
    SETTINGS_TABLE = "settings"
    CATEGORIES_TABLE = "categories"
    USERS_TABLE = "login_users"
    ADMIN_TABLE = "admin"
    LOGS_TABLE = "app_logs"


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
