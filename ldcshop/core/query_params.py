"""
Query-String Parsing
====================

Turns raw query-string parameters into validated filters and bounded
page requests for the order listing and the product search.

Bad numbers never raise: anything missing, non-numeric, zero or negative
falls back to the default.
"""

import re

ORDERS_DEFAULT_PAGE_SIZE = 50
ORDERS_MAX_PAGE_SIZE = 200
SEARCH_DEFAULT_PAGE_SIZE = 24
SEARCH_MAX_PAGE_SIZE = 60

FULFILLMENT_FILTERS = ('all', 'needsDelivery')
SEARCH_SORTS = ('default', 'priceAsc', 'priceDesc', 'stockDesc', 'soldDesc', 'newest', 'hot')

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def first_param(value):
    """First value of a repeated parameter, or the value itself"""
    if not value:
        return None
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def parse_int_param(value, fallback):
    """Leading-integer parse ('12abc' -> 12); fallback unless the result is positive"""
    if not isinstance(value, str):
        return fallback
    match = _LEADING_INT.match(value)
    if not match:
        return fallback
    num = int(match.group(1))
    return num if num > 0 else fallback


def _get(args, key):
    # MultiDict.get already returns the first value
    if hasattr(args, 'getlist'):
        return args.get(key)
    return first_param(args.get(key))


def _text(args, key, default=''):
    return (_get(args, key) or default).strip()


class PageRequest:
    """A 1-based page with a clamped size"""

    def __init__(self, page, page_size):
        self.page = page
        self.page_size = page_size

    @property
    def offset(self):
        return (self.page - 1) * self.page_size

    @property
    def limit(self):
        return self.page_size

    @classmethod
    def from_args(cls, args, default_size, max_size):
        page = parse_int_param(_get(args, 'page'), 1)
        page_size = min(parse_int_param(_get(args, 'pageSize'), default_size), max_size)
        return cls(page, page_size)

    def __eq__(self, other):
        return (isinstance(other, PageRequest)
                and (self.page, self.page_size) == (other.page, other.page_size))

    def __repr__(self):
        return f"PageRequest(page={self.page}, page_size={self.page_size})"


class OrderFilter:
    def __init__(self, q='', status='all', fulfillment='all', page_request=None):
        self.q = q
        self.status = status
        self.fulfillment = fulfillment
        self.page_request = page_request or PageRequest(1, ORDERS_DEFAULT_PAGE_SIZE)

    def query_args(self, **overrides):
        """Parameters for building links that keep the current filter"""
        args = {
            'q': self.q,
            'status': self.status,
            'fulfillment': self.fulfillment,
            'page': self.page_request.page,
            'pageSize': self.page_request.page_size,
        }
        args.update(overrides)
        return {k: v for k, v in args.items() if v not in ('', None)}


class SearchFilter:
    def __init__(self, q='', category='all', sort='default', page_request=None):
        self.q = q
        self.category = category
        self.sort = sort
        self.page_request = page_request or PageRequest(1, SEARCH_DEFAULT_PAGE_SIZE)

    def query_args(self, **overrides):
        args = {
            'q': self.q,
            'category': self.category,
            'sort': self.sort,
            'page': self.page_request.page,
            'pageSize': self.page_request.page_size,
        }
        args.update(overrides)
        return {k: v for k, v in args.items() if v not in ('', None)}


def parse_order_filters(args):
    """Build an OrderFilter from request.args (or any mapping)"""
    return OrderFilter(
        q=_text(args, 'q'),
        status=_text(args, 'status', 'all') or 'all',
        fulfillment=_text(args, 'fulfillment', 'all') or 'all',
        page_request=PageRequest.from_args(args, ORDERS_DEFAULT_PAGE_SIZE, ORDERS_MAX_PAGE_SIZE),
    )


def parse_search_filters(args):
    """Build a SearchFilter from request.args (or any mapping)"""
    return SearchFilter(
        q=_text(args, 'q'),
        category=_text(args, 'category', 'all') or 'all',
        sort=_text(args, 'sort', 'default') or 'default',
        page_request=PageRequest.from_args(args, SEARCH_DEFAULT_PAGE_SIZE, SEARCH_MAX_PAGE_SIZE),
    )


def escape_like(text, escape='\\'):
    """Escape LIKE wildcards so user text matches literally"""
    return (text.replace(escape, escape * 2)
                .replace('%', escape + '%')
                .replace('_', escape + '_'))


def total_pages(total, page_size):
    if page_size <= 0:
        return 1
    return max(1, (total + page_size - 1) // page_size)
