"""
Shared fixtures: a fully initialised app on a throwaway SQLite file, an
admin-authenticated client, and factories for seeding rows.

pytest-flask pushes a request context around every test, so ``db.session``
is usable directly inside test bodies.
"""

import os
import shutil
import tempfile
from datetime import timedelta
from decimal import Decimal
from itertools import count

import pytest
from flask import Flask

from ldcshop import LdcShop
from ldcshop.core.database import db
from ldcshop.core.models import Category, Order, Product, utcnow


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="ldcshop-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


def make_app(db_dir, config=None):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = db_dir
    app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(db_dir, "shop.db")
    app.config["ORDER_EXPIRY_MINUTES"] = 5
    LdcShop(app, config)
    return app


@pytest.fixture
def app(tmp_db_dir):
    """Fully initialised Flask app with every shop module registered."""
    app = make_app(tmp_db_dir)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def admin_client(client):
    with client.session_transaction() as sess:
        sess["admin_id"] = 1
        sess["admin_email"] = "admin@test.com"
    return client


@pytest.fixture
def make_product():
    ids = count(1)

    def _make(**fields):
        n = next(ids)
        values = {
            "id": f"p{n}",
            "name": f"Product {n}",
            "price": Decimal("10.00"),
            "stock": 20,
            "is_active": True,
            "sort_order": 0,
            "created_at": utcnow() - timedelta(minutes=n),
        }
        values.update(fields)
        product = Product(**values)
        db.session.add(product)
        db.session.commit()
        return product

    return _make


@pytest.fixture
def make_order():
    ids = count(1)

    def _make(**fields):
        n = next(ids)
        values = {
            "order_id": f"ORD{n:05d}",
            "product_id": "p1",
            "product_name": "Product 1",
            "amount": Decimal("10.00"),
            "status": "pending",
            "created_at": utcnow() - timedelta(seconds=n),
        }
        values.update(fields)
        order = Order(**values)
        db.session.add(order)
        db.session.commit()
        return order

    return _make


@pytest.fixture
def make_category():
    def _make(name, icon=None, sort_order=0):
        category = Category(name=name, icon=icon, sort_order=sort_order)
        db.session.add(category)
        db.session.commit()
        return category

    return _make
