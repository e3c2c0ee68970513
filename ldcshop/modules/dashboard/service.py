"""
Data behind the admin dashboard: sales stats, visitor count and the
combined page payload.
"""

import logging
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ldcshop.core.models import Order, ShopUser, SOLD_STATUSES, utcnow
from ldcshop.modules.merchandise.service import get_products, low_stock_count
from ldcshop.modules.settings.helpers import resolve_settings

logger = logging.getLogger(__name__)


def _sales_since(session, since=None):
    query = session.query(
        func.count(Order.order_id),
        func.coalesce(func.sum(Order.amount), 0),
    ).filter(Order.status.in_(SOLD_STATUSES))
    if since is not None:
        query = query.filter(Order.created_at >= since)
    count, revenue = query.one()
    return {'count': count or 0, 'revenue': float(revenue or 0)}


def get_dashboard_stats(session, now=None):
    """Order count and revenue for today, the last 7 days, this month and all time"""
    now = now or utcnow()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return {
        'today': _sales_since(session, start_of_day),
        'week': _sales_since(session, now - timedelta(days=7)),
        'month': _sales_since(session, start_of_day.replace(day=1)),
        'total': _sales_since(session),
    }


def get_visitor_count(session):
    return session.query(func.count(ShopUser.user_id)).scalar() or 0


def load_dashboard(session):
    """Everything the dashboard page renders, with non-critical reads defaulted"""
    products = get_products(session)
    stats = get_dashboard_stats(session)
    settings = resolve_settings(session=session)

    try:
        visitor_count = get_visitor_count(session)
    except SQLAlchemyError as e:
        session.rollback()
        logger.debug(f"Visitor count unavailable: {e}")
        visitor_count = 0

    return {
        'products': products,
        'stats': stats,
        'settings': settings,
        'visitor_count': visitor_count,
        'low_stock_count': low_stock_count(products, settings.low_stock_threshold),
    }
