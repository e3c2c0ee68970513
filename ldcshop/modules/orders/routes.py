"""
Orders Admin Routes
===================

Order listing page and its JSON twin. Both run the expiry sweep first and
never fail because of it.
"""

from flask import jsonify, render_template, request

from ldcshop.core.auth import admin_required, admin_required_json
from ldcshop.core.config import get_config_value
from ldcshop.core.database import Database, db
from ldcshop.core.exceptions import ShopError
from ldcshop.core.models import ORDER_STATUSES
from ldcshop.core.query_params import FULFILLMENT_FILTERS, parse_order_filters
from . import orders_bp
from .service import get_order, list_orders_with_fallback, run_expiry_sweep


def _load_order_page(args):
    run_expiry_sweep(db.session, int(get_config_value('ORDER_EXPIRY_MINUTES', 5)))

    filters = parse_order_filters(args)
    result = list_orders_with_fallback(
        db.session, filters, Database.capabilities(), Database.refresh_capabilities
    )
    return filters, result


@orders_bp.route('/')
@admin_required
def orders_manager():
    """Order management page"""
    filters, result = _load_order_page(request.args)
    return render_template(
        'orders/orders_manager.html',
        orders=result.items,
        result=result,
        filters=filters,
        statuses=ORDER_STATUSES,
        fulfillment_filters=FULFILLMENT_FILTERS,
    )


@orders_bp.route('/api/orders')
@admin_required_json
def api_orders():
    """Same listing as the page, as JSON"""
    filters, result = _load_order_page(request.args)
    data = result.to_dict()
    data.update({
        'success': True,
        'query': filters.q,
        'status': filters.status,
        'fulfillment': filters.fulfillment,
    })
    return jsonify(data)


@orders_bp.route('/api/order/<order_id>')
@admin_required_json
def api_order_details(order_id):
    """Get detailed order information"""
    try:
        order = get_order(db.session, order_id, Database.capabilities())
    except ShopError as e:
        return jsonify({'success': False, 'error': e.message}), e.status_code
    return jsonify({'success': True, 'order': order})
