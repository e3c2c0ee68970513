"""
Merchandise Admin Routes
========================

JSON endpoints for the inline product actions on the dashboard. Each one
answers ``{"success": true, ...}`` or ``{"success": false, "error": msg}``.
"""

from flask import jsonify, request

from ldcshop.core.auth import admin_required_json
from ldcshop.core.database import db
from ldcshop.core.exceptions import ShopError
from ldcshop.core.logging_service import LoggingService
from . import merchandise_bp
from .service import delete_product, get_products, reorder_product, toggle_product_status


def _run_action(action, description, details):
    try:
        result = action()
    except ShopError as e:
        db.session.rollback()
        return None, (jsonify({'success': False, 'error': e.message}), e.status_code)
    except Exception as e:
        db.session.rollback()
        LoggingService.log_error_with_traceback('merchandise', e, details)
        return None, (jsonify({'success': False, 'error': str(e)}), 500)

    LoggingService.log_user_action('merchandise', description, details=details)
    return result, None


@merchandise_bp.route('/api/products')
@admin_required_json
def api_products():
    """All products in display order"""
    products = get_products(db.session)
    return jsonify({'success': True, 'products': [p.to_dict() for p in products]})


@merchandise_bp.route('/<product_id>/delete', methods=['POST'])
@admin_required_json
def api_delete_product(product_id):
    """Delete product"""
    _, error = _run_action(
        lambda: delete_product(db.session, product_id),
        'Deleted product', {'product_id': product_id},
    )
    if error:
        return error
    return jsonify({'success': True})


@merchandise_bp.route('/<product_id>/toggle', methods=['POST'])
@admin_required_json
def api_toggle_product(product_id):
    """Show or hide a product; body {"is_active": bool} or empty to flip"""
    data = request.get_json(silent=True) or {}
    is_active = data.get('is_active')
    if is_active is not None and not isinstance(is_active, bool):
        return jsonify({'success': False, 'error': 'is_active must be true or false'}), 400

    new_value, error = _run_action(
        lambda: toggle_product_status(db.session, product_id, is_active),
        'Toggled product status', {'product_id': product_id, 'is_active': is_active},
    )
    if error:
        return error
    return jsonify({'success': True, 'is_active': new_value})


@merchandise_bp.route('/<product_id>/reorder', methods=['POST'])
@admin_required_json
def api_reorder_product(product_id):
    """Move a product one row up or down; body {"direction": "up"|"down"}"""
    data = request.get_json(silent=True) or {}
    direction = data.get('direction')

    moved, error = _run_action(
        lambda: reorder_product(db.session, product_id, direction),
        'Reordered product', {'product_id': product_id, 'direction': direction},
    )
    if error:
        return error
    return jsonify({'success': True, 'moved': moved})
