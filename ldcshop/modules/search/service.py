"""
Storefront product search.
"""

from sqlalchemy import func, or_, select

from ldcshop.core.models import Category, Order, Product, SOLD_STATUSES
from ldcshop.core.query_params import escape_like, total_pages


class SearchResult:
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
            'products': self.items,
            'total': self.total,
            'page': self.page,
            'page_size': self.page_size,
            'total_pages': self.total_pages,
        }


def _sold_count():
    """Paid or delivered orders per product, 0 when there are none"""
    subquery = (
        select(func.count(Order.order_id))
        .where(Order.product_id == Product.id, Order.status.in_(SOLD_STATUSES))
        .correlate(Product)
        .scalar_subquery()
    )
    return func.coalesce(subquery, 0).label('sold_count')


def _ordering(sort, sold):
    default = [Product.sort_order.asc(), Product.created_at.desc()]
    orderings = {
        'priceAsc': [Product.price.asc()],
        'priceDesc': [Product.price.desc()],
        'stockDesc': [Product.stock.desc()],
        'soldDesc': [sold.desc()],
        'newest': [Product.created_at.desc()],
        'hot': [Product.is_hot.desc()] + default,
    }
    # Unknown sort modes fall back to the default order
    return orderings.get(sort, default) + [Product.id.asc()]


def build_search_predicates(filters):
    predicates = [Product.is_active.is_(True)]
    if filters.category != 'all':
        predicates.append(Product.category == filters.category)
    if filters.q:
        like = f"%{escape_like(filters.q)}%"
        predicates.append(or_(
            Product.name.ilike(like, escape='\\'),
            func.coalesce(Product.description, '').ilike(like, escape='\\'),
        ))
    return predicates


def serialize_product(product, sold_count):
    return {
        'id': product.id,
        'name': product.name,
        'description': product.description,
        'price': str(product.price),
        'compare_at_price': str(product.compare_at_price) if product.compare_at_price is not None else None,
        'image': product.image,
        'category': product.category,
        'is_hot': bool(product.is_hot),
        'stock_count': product.stock or 0,
        'sold_count': int(sold_count or 0),
    }


def search_active_products(session, filters):
    """Active products matching the filter, one page at a time"""
    predicates = build_search_predicates(filters)
    page_request = filters.page_request

    total = session.query(func.count(Product.id)).filter(*predicates).scalar() or 0

    rows = []
    if page_request.offset < total:
        sold = _sold_count()
        rows = (
            session.query(Product, sold)
            .filter(*predicates)
            .order_by(*_ordering(filters.sort, sold))
            .limit(page_request.limit)
            .offset(page_request.offset)
            .all()
        )

    return SearchResult(
        [serialize_product(product, sold_count) for product, sold_count in rows],
        total,
        page_request.page,
        page_request.page_size,
    )


def get_categories(session):
    """Every category, whatever the current search, for the facet list"""
    return session.query(Category).order_by(Category.sort_order.asc(), Category.name.asc()).all()
