"""
Centralized logging service for the shop admin.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
import traceback
from datetime import timedelta

from flask import request, has_request_context, session

from .database import db

console = logging.getLogger('ldcshop')


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        try:
            ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
            if ip_address and ',' in ip_address:
                ip_address = ip_address.split(',')[0].strip()

            user_agent = request.headers.get('User-Agent', '')
            request_path = request.path

            return ip_address, user_agent, request_path
        except Exception:
            return None, None, None

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (orders, settings, merchandise, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        from .models import AppLog

        level = level.upper()
        console.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")

        ip_address, user_agent, request_path = LoggingService._get_request_context()

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        if user_id is None and has_request_context():
            user_id = session.get('admin_email')

        # A separate connection keeps log rows out of the caller's transaction
        try:
            with db.engine.begin() as conn:
                conn.execute(AppLog.__table__.insert().values(
                    level=level, source=source, message=message, details=details,
                    ip_address=ip_address, user_agent=user_agent,
                    request_path=request_path, user_id=user_id,
                ))
        except Exception as e:
            # Fallback to console logging if database fails
            console.warning(f"Logging service error: {e}")
            if details:
                console.warning(f"Details: {details}")

    @staticmethod
    def debug(source, message, details=None, user_id=None):
        LoggingService.log('DEBUG', source, message, details, user_id)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log admin actions (toggle, reorder, save setting, etc.)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        from .models import AppLog, utcnow

        cutoff = utcnow() - timedelta(days=days_to_keep)
        try:
            with db.engine.begin() as conn:
                result = conn.execute(
                    AppLog.__table__.delete().where(AppLog.__table__.c.timestamp < cutoff)
                )
            LoggingService.info('system', f"Cleaned up {result.rowcount} old log entries")
            return result.rowcount
        except Exception as e:
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0


def db_log(level, source, message, details=None):
    """Shorthand used by modules: db_log('info', 'orders', 'Swept', {...})"""
    LoggingService.log(level, source, message, details)


# Convenience instance for easy importing
logger = LoggingService()
