from flask import jsonify, render_template, request

from .database import db
from .exceptions import ShopError


def _wants_json():
    return request.path.startswith('/api/') or '/api/' in request.path or request.is_json


def register_error_handlers(app):
    @app.errorhandler(ShopError)
    def shop_error(e):
        db.session.rollback()
        if _wants_json():
            return jsonify({'success': False, 'error': e.message}), e.status_code
        return render_template('errors/error.html', code=e.status_code, message=e.message), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        if _wants_json():
            return jsonify({'success': False, 'error': 'Not found'}), 404
        return render_template('errors/error.html', code=404, message="Page not found"), 404

    @app.errorhandler(500)
    def server_error(e):
        if _wants_json():
            return jsonify({'success': False, 'error': 'Internal error'}), 500
        return render_template('errors/error.html', code=500, message="Something broke on our end"), 500
