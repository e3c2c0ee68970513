"""
Order listing, filtering and the expiry sweep.

Every function takes the SQLAlchemy session (and the schema capabilities
where the query shape depends on them) as arguments.
"""

import logging
from datetime import timedelta

from sqlalchemy import and_, func, or_, update
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import load_only

from ldcshop.core.exceptions import NotFoundError
from ldcshop.core.logging_service import db_log
from ldcshop.core.models import Order, OPTIONAL_ORDER_COLUMNS, utcnow
from ldcshop.core.query_params import escape_like, total_pages

logger = logging.getLogger(__name__)


class OrderPage:
    def __init__(self, items, total, page, page_size):
        self.items = items
        self.total = total
        self.page = page
        self.page_size = page_size

    @property
    def total_pages(self):
        return total_pages(self.total, self.page_size)

    def to_dict(self):
        return {
            'orders': self.items,
            'total': self.total,
            'page': self.page,
            'page_size': self.page_size,
            'total_pages': self.total_pages,
        }


def build_order_predicates(filters, capabilities):
    """
    The WHERE clauses for an OrderFilter.

    The count and the page query both use this list so ``total`` always
    describes the same rows the page is cut from.
    """
    predicates = []

    if filters.status != 'all':
        predicates.append(Order.status == filters.status)

    if filters.fulfillment == 'needsDelivery':
        # Paid but nothing delivered yet
        predicates.append(and_(
            Order.status == 'paid',
            or_(Order.card_key.is_(None), Order.card_key == ''),
        ))

    if filters.q:
        like = f"%{escape_like(filters.q)}%"
        matches = [
            Order.order_id.ilike(like, escape='\\'),
            Order.product_name.ilike(like, escape='\\'),
        ]
        for name in OPTIONAL_ORDER_COLUMNS:
            if capabilities.has_order_column(name):
                column = getattr(Order, name)
                matches.append(func.coalesce(column, '').ilike(like, escape='\\'))
        predicates.append(or_(*matches))

    return predicates


def _loadable_columns(capabilities):
    return [
        getattr(Order, column.name)
        for column in Order.__table__.columns
        if capabilities.has_order_column(column.name)
    ]


def serialize_order(order, capabilities):
    def optional(name):
        # Unloaded columns would lazy-load and fail on older schemas
        if capabilities.has_order_column(name):
            return getattr(order, name)
        return None

    return {
        'order_id': order.order_id,
        'product_id': order.product_id,
        'product_name': order.product_name,
        'amount': str(order.amount) if order.amount is not None else '0',
        'status': order.status,
        'card_key': order.card_key,
        'username': optional('username'),
        'email': optional('email'),
        'trade_no': optional('trade_no'),
        'created_at': order.created_at.isoformat() if order.created_at else None,
        'paid_at': order.paid_at.isoformat() if order.paid_at else None,
    }


def list_orders(session, filters, capabilities):
    """One page of orders, newest first, plus the total for the same filter"""
    predicates = build_order_predicates(filters, capabilities)
    page_request = filters.page_request

    total = session.query(func.count(Order.order_id)).filter(*predicates).scalar() or 0

    rows = []
    # Huge page numbers overflow the database OFFSET
    if page_request.offset < total:
        rows = (
            session.query(Order)
            .options(load_only(*_loadable_columns(capabilities)))
            .filter(*predicates)
            .order_by(Order.created_at.desc(), Order.order_id.desc())
            .limit(page_request.limit)
            .offset(page_request.offset)
            .all()
        )

    return OrderPage(
        [serialize_order(order, capabilities) for order in rows],
        total,
        page_request.page,
        page_request.page_size,
    )


def list_orders_with_fallback(session, filters, capabilities, redetect):
    """
    list_orders, retried once with freshly detected capabilities when the
    database rejects a column. A second failure propagates.
    """
    try:
        return list_orders(session, filters, capabilities)
    except (OperationalError, ProgrammingError) as e:
        session.rollback()
        logger.warning(f"Order query failed, re-detecting schema: {e}")
        return list_orders(session, filters, redetect())


def get_order(session, order_id, capabilities):
    order = (
        session.query(Order)
        .options(load_only(*_loadable_columns(capabilities)))
        .filter(Order.order_id == order_id)
        .first()
    )
    if order is None:
        raise NotFoundError('Order not found')
    return serialize_order(order, capabilities)


# ============================================
# Expiry sweep
# ============================================

def cancel_expired_orders(session, expiry_minutes, now=None):
    """
    Cancel pending orders created more than ``expiry_minutes`` ago.

    Returns the number of orders cancelled. Running it again finds nothing
    left to cancel, so concurrent or repeated sweeps are harmless.
    """
    now = now or utcnow()
    cutoff = now - timedelta(minutes=expiry_minutes)

    result = session.execute(
        update(Order)
        .where(Order.status == 'pending', Order.created_at < cutoff)
        .values(status='cancelled')
        .execution_options(synchronize_session=False)
    )
    session.commit()
    return result.rowcount or 0


def run_expiry_sweep(session, expiry_minutes, now=None):
    """Best-effort sweep for the page-load path; never raises"""
    try:
        cancelled = cancel_expired_orders(session, expiry_minutes, now=now)
    except Exception as e:
        session.rollback()
        logger.warning(f"Expired order sweep failed: {e}")
        return 0

    if cancelled:
        db_log('info', 'orders', f'Cancelled {cancelled} expired orders',
               {'expiry_minutes': expiry_minutes})
    return cancelled
