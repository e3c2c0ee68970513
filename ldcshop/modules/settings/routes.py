"""
Settings Admin Routes
=====================

JSON endpoints behind the inline save buttons on the admin dashboard.
"""

from flask import jsonify, request

from ldcshop.core.auth import admin_required_json
from ldcshop.core.database import db
from ldcshop.core.exceptions import ShopError
from ldcshop.core.logging_service import LoggingService
from . import settings_bp
from .helpers import SAVE_OPERATIONS, resolve_settings


@settings_bp.route('/api/settings')
@admin_required_json
def api_get_settings():
    """Resolved settings (defaults filled in)"""
    return jsonify({'success': True, 'settings': resolve_settings().to_dict()})


@settings_bp.route('/<name>', methods=['POST'])
@admin_required_json
def api_save_setting(name):
    """Save one setting: POST /admin/settings/shop-name {"value": "My Shop"}"""
    operation = SAVE_OPERATIONS.get(name)
    if operation is None:
        return jsonify({'success': False, 'error': f'Unknown setting: {name}'}), 404
    key, save = operation

    data = request.get_json(silent=True) or {}
    if 'value' not in data:
        return jsonify({'success': False, 'error': 'Value is required'}), 400

    try:
        value = save(data['value'])
    except ShopError as e:
        db.session.rollback()
        return jsonify({'success': False, 'error': e.message}), e.status_code
    except Exception as e:
        db.session.rollback()
        LoggingService.log_error_with_traceback('settings', e, {'key': key})
        return jsonify({'success': False, 'error': str(e)}), 500

    LoggingService.log_user_action('settings', f'Saved {key}', details={'value': value})
    return jsonify({'success': True, 'key': key, 'value': value})
