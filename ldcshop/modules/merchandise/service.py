"""
Product admin actions: list, delete, show/hide and reorder.
"""

from sqlalchemy import update

from ldcshop.core.exceptions import ConflictError, NotFoundError, ValidationError
from ldcshop.core.models import Product

# Display order of the admin product table
DISPLAY_ORDER = (Product.sort_order.asc(), Product.created_at.desc(), Product.id.asc())

REORDER_DIRECTIONS = ('up', 'down')


def get_products(session):
    """All products, active or not, in display order"""
    return session.query(Product).order_by(*DISPLAY_ORDER).all()


def low_stock_count(products, threshold):
    return sum(1 for product in products if (product.stock or 0) <= threshold)


def _get_or_404(session, product_id):
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError('Product not found')
    return product


def delete_product(session, product_id):
    product = _get_or_404(session, product_id)
    session.delete(product)
    session.commit()


def toggle_product_status(session, product_id, is_active=None):
    """Set is_active to the given value, or flip it when None. Returns the new value."""
    product = _get_or_404(session, product_id)
    product.is_active = (not product.is_active) if is_active is None else bool(is_active)
    session.commit()
    return product.is_active


def reorder_product(session, product_id, direction):
    """
    Swap a product with its neighbour in display order.

    The two rows exchange their sort_order values. When both hold the same
    value there is nothing to exchange, so the whole list is renumbered by
    position with the pair swapped. Every write is guarded by the
    previously read sort_order and all of them run in one transaction; if
    any row changed underneath us nothing is written and ConflictError is
    raised.

    Returns False when there is no neighbour in that direction.
    """
    if direction not in REORDER_DIRECTIONS:
        raise ValidationError("Direction must be 'up' or 'down'")

    rows = session.query(Product.id, Product.sort_order).order_by(*DISPLAY_ORDER).all()
    idx = next((i for i, row in enumerate(rows) if row.id == product_id), None)
    if idx is None:
        raise NotFoundError('Product not found')

    target_idx = idx - 1 if direction == 'up' else idx + 1
    if target_idx < 0 or target_idx >= len(rows):
        return False

    current, target = rows[idx], rows[target_idx]
    if current.sort_order != target.sort_order:
        swaps = [
            (current.id, current.sort_order, target.sort_order),
            (target.id, target.sort_order, current.sort_order),
        ]
    else:
        ordered = list(rows)
        ordered[idx], ordered[target_idx] = target, current
        swaps = [
            (row.id, row.sort_order, position)
            for position, row in enumerate(ordered)
            if row.sort_order != position
        ]

    try:
        for row_id, expected, new_order in swaps:
            result = session.execute(
                update(Product)
                .where(Product.id == row_id, Product.sort_order == expected)
                .values(sort_order=new_order)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise ConflictError('Product order changed in the meantime, reload and try again')
        session.commit()
    except Exception:
        session.rollback()
        raise

    # Loaded Product objects still hold the old sort_order
    session.expire_all()
    return True
