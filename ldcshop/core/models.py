"""
ORM models for the shop tables.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Numeric
from werkzeug.security import generate_password_hash, check_password_hash

from .config import Config
from .database import db


ORDER_STATUSES = ('pending', 'paid', 'delivered', 'cancelled', 'refunded')

# Statuses that count as a completed sale
SOLD_STATUSES = ('paid', 'delivered')


def utcnow():
    """Naive UTC timestamp, matching what the columns store"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id():
    return uuid.uuid4().hex[:12]


class Product(db.Model):
    __tablename__ = Config.PRODUCTS_TABLE

    id = db.Column(db.String(64), primary_key=True, default=_new_id)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(Numeric(10, 2), nullable=False, default=0)
    compare_at_price = db.Column(Numeric(10, 2))
    category = db.Column(db.String(50))
    image = db.Column(db.String(500))
    stock = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_hot = db.Column(db.Boolean, nullable=False, default=False)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'price': str(self.price),
            'compare_at_price': str(self.compare_at_price) if self.compare_at_price is not None else None,
            'category': self.category,
            'stock_count': self.stock,
            'is_active': bool(self.is_active),
            'is_hot': bool(self.is_hot),
            'sort_order': self.sort_order or 0,
        }


class Order(db.Model):
    __tablename__ = Config.ORDERS_TABLE

    order_id = db.Column(db.String(64), primary_key=True)
    product_id = db.Column(db.String(64), index=True)
    product_name = db.Column(db.String(200), nullable=False)
    amount = db.Column(Numeric(10, 2), nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)
    card_key = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    paid_at = db.Column(db.DateTime)
    # Added after the first release; older databases may not have them
    username = db.Column(db.String(100))
    email = db.Column(db.String(255))
    trade_no = db.Column(db.String(100))


# Columns the order queries can live without
OPTIONAL_ORDER_COLUMNS = ('username', 'email', 'trade_no')


class Setting(db.Model):
    __tablename__ = Config.SETTINGS_TABLE

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)


class Category(db.Model):
    __tablename__ = Config.CATEGORIES_TABLE

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    icon = db.Column(db.String(50))
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {'name': self.name, 'icon': self.icon, 'sort_order': self.sort_order}


class ShopUser(db.Model):
    """Storefront users who have signed in at least once"""
    __tablename__ = Config.USERS_TABLE

    user_id = db.Column(db.String(64), primary_key=True)
    username = db.Column(db.String(100))
    created_at = db.Column(db.DateTime, default=utcnow)
    last_login_at = db.Column(db.DateTime, default=utcnow)


class Admin(db.Model):
    __tablename__ = Config.ADMIN_TABLE

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def set_password(self, p): self.password_hash = generate_password_hash(p)
    def check_password(self, p): return check_password_hash(self.password_hash, p)


class AppLog(db.Model):
    __tablename__ = Config.LOGS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    level = db.Column(db.String(10), nullable=False, index=True)
    source = db.Column(db.String(50), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(500))
    request_path = db.Column(db.String(500))
    user_id = db.Column(db.String(64))
