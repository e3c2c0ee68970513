"""
Admin Dashboard Routes
======================

Admin session handling and the dashboard page: shop settings, sales stats,
visitor count and the product table with inline actions.
"""

from datetime import datetime

from flask import render_template, request, redirect, url_for, flash, session, jsonify
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ldcshop.core.auth import admin_required, admin_required_json
from ldcshop.core.database import db
from ldcshop.core.logging_service import LoggingService
from ldcshop.core.models import Admin
from . import dashboard_bp
from .service import get_dashboard_stats, load_dashboard


def _is_safe_next(target):
    return bool(target) and target.startswith('/') and not target.startswith('//')


@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not email or not password:
            flash('Please enter both email and password', 'error')
            return render_template('dashboard/login.html')

        admin = Admin.query.filter_by(email=email).first()
        if admin and admin.check_password(password):
            session['admin_id'] = admin.id
            session['admin_email'] = admin.email
            LoggingService.log_user_action('auth', 'Admin login', user_id=admin.email)

            next_page = request.args.get('next')
            return redirect(next_page if _is_safe_next(next_page) else url_for('admin.dashboard'))

        LoggingService.warning('auth', 'Failed admin login', {'email': email})
        flash('Invalid email or password', 'error')

    return render_template('dashboard/login.html')


@dashboard_bp.route('/logout')
def logout():
    """Admin logout route"""
    session.pop('admin_id', None)
    session.pop('admin_email', None)
    flash('You have been logged out', 'info')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/create-admin', methods=['GET', 'POST'])
def create_admin():
    """Create new admin (only accessible by existing admin or if no admins exist)"""
    admin_count = db.session.query(func.count(Admin.id)).scalar()

    # If admins exist, require authentication
    if admin_count > 0 and 'admin_id' not in session:
        return redirect(url_for('admin.login'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        confirm_password = request.form.get('confirm_password', '')

        if not all([email, password, confirm_password]):
            flash('All fields are required', 'error')
            return render_template('dashboard/create_admin.html')

        if password != confirm_password:
            flash('Passwords do not match', 'error')
            return render_template('dashboard/create_admin.html')

        if len(password) < 6:
            flash('Password must be at least 6 characters long', 'error')
            return render_template('dashboard/create_admin.html')

        admin = Admin(email=email)
        admin.set_password(password)
        db.session.add(admin)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            flash('An admin with this email already exists', 'error')
            return render_template('dashboard/create_admin.html')

        flash(f'Admin {email} created successfully', 'success')
        return redirect(url_for('admin.dashboard'))

    return render_template('dashboard/create_admin.html')


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
@admin_required
def dashboard():
    """Admin dashboard - settings, stats and products"""
    data = load_dashboard(db.session)
    return render_template('dashboard/dashboard.html', **data)


@dashboard_bp.route('/status')
def status():
    """Check admin login status (API endpoint)"""
    if 'admin_id' in session:
        return jsonify({
            'logged_in': True,
            'admin_email': session.get('admin_email')
        })
    return jsonify({'logged_in': False}), 401


@dashboard_bp.route('/api/stats')
@admin_required_json
def api_stats():
    """Sales stats for the dashboard cards"""
    return jsonify(get_dashboard_stats(db.session))


@dashboard_bp.context_processor
def utility_processor():
    def current_year():
        """Return current year for footer"""
        return datetime.now().year

    return dict(current_year=current_year)
