import logging
import os
import threading

from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import inspect

from .config import Config

db = SQLAlchemy()

logger = logging.getLogger(__name__)


class SchemaCapabilities:
    """
    Which optional order columns the connected database actually has.

    Detected once at start-up; order queries branch on it instead of
    failing per request on older schemas.
    """

    def __init__(self, order_columns):
        self.order_columns = frozenset(order_columns)

    @classmethod
    def detect(cls, engine):
        from .models import Order

        inspector = inspect(engine)
        if not inspector.has_table(Config.ORDERS_TABLE):
            # Fresh database: create_all will give it the full model
            return cls(column.name for column in Order.__table__.columns)
        present = {column['name'] for column in inspector.get_columns(Config.ORDERS_TABLE)}
        return cls(present)

    def has_order_column(self, name):
        return name in self.order_columns

    def missing_optional_columns(self):
        from .models import OPTIONAL_ORDER_COLUMNS
        return [name for name in OPTIONAL_ORDER_COLUMNS if name not in self.order_columns]

    def __repr__(self):
        return f"SchemaCapabilities(order_columns={sorted(self.order_columns)})"


class Database:
    # Guards re-detection when several requests hit a schema mismatch together
    _lock = threading.Lock()

    @staticmethod
    def init_app(app):
        """Bind Flask-SQLAlchemy to the app and create any missing tables"""
        if not app.config.get('SQLALCHEMY_DATABASE_URI'):
            db_dir = app.config.get('DB_DIR') or Config.DB_DIR
            os.makedirs(db_dir, exist_ok=True)
            app.config['SQLALCHEMY_DATABASE_URI'] = (
                Config.DATABASE_URL or 'sqlite:///' + os.path.join(db_dir, 'shop.db')
            )
        app.config.setdefault('SQLALCHEMY_TRACK_MODIFICATIONS', False)
        db.init_app(app)

        with app.app_context():
            # Must run before create_all, which would hide a legacy orders table
            capabilities = SchemaCapabilities.detect(db.engine)
            from . import models  # noqa: F401  registers the tables
            db.create_all()

        missing = capabilities.missing_optional_columns()
        if missing:
            logger.warning(f"Orders table lacks optional columns {missing}; queries will skip them")
        return capabilities

    @staticmethod
    def capabilities():
        """Schema capabilities of the running app"""
        ext = current_app.extensions['ldcshop']
        return ext.capabilities

    @classmethod
    def refresh_capabilities(cls):
        """Re-inspect the schema after a query failed on a missing column"""
        with cls._lock:
            ext = current_app.extensions['ldcshop']
            ext.capabilities = SchemaCapabilities.detect(db.engine)
            logger.info(f"Re-detected schema: {ext.capabilities!r}")
            return ext.capabilities
