"""
Product search routes.
"""

import logging

from flask import jsonify, render_template, request
from flask_cors import cross_origin

from ldcshop.core.config import Config
from ldcshop.core.database import db
from ldcshop.core.query_params import SEARCH_SORTS, parse_search_filters
from . import search_bp
from .service import get_categories, search_active_products

logger = logging.getLogger(__name__)


@search_bp.route('/search')
def search_page():
    filters = parse_search_filters(request.args)
    result = search_active_products(db.session, filters)
    categories = get_categories(db.session)
    return render_template(
        'search/search.html',
        filters=filters,
        result=result,
        products=result.items,
        categories=categories,
        sorts=SEARCH_SORTS,
    )


@search_bp.route('/api/products/search', methods=['GET', 'OPTIONS'])
@cross_origin(origins=Config.SEARCH_ALLOWED_ORIGINS, supports_credentials=False)
def api_search():
    """
    Query params: q, category (default all), sort (default default),
    page (default 1), pageSize (default 24, max 60)
    """
    filters = parse_search_filters(request.args)
    try:
        result = search_active_products(db.session, filters)
        categories = get_categories(db.session)
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error searching products: {e}")
        return jsonify({'success': False, 'error': 'Internal error', 'products': []}), 500

    data = result.to_dict()
    data.update({
        'success': True,
        'q': filters.q,
        'category': filters.category,
        'sort': filters.sort,
        'categories': [c.to_dict() for c in categories],
    })
    return jsonify(data)
