"""
Settings Store
==============

Key-value site settings kept in the ``settings`` table. Values are plain
strings; callers parse them (see ``helpers.resolve_setting``).
"""

from ldcshop.core.database import db
from ldcshop.core.models import Setting, utcnow


def get_setting(key, default=None, session=None):
    """
    Get a setting value by key.
    Returns ``default`` when the key is absent or the value is empty.
    Store errors propagate.
    """
    session = session or db.session
    row = session.get(Setting, key)
    if row is None or row.value in (None, ''):
        return default
    return row.value


def set_setting(key, value, session=None):
    """Insert or update a setting and commit"""
    session = session or db.session
    row = session.get(Setting, key)
    if row is None:
        row = Setting(key=key, value=value)
        session.add(row)
    else:
        row.value = value
        row.updated_at = utcnow()
    session.commit()
    return row


def delete_setting(key, session=None):
    """Delete a setting; True when a row was removed"""
    session = session or db.session
    row = session.get(Setting, key)
    if row is None:
        return False
    session.delete(row)
    session.commit()
    return True


def get_all_settings(session=None):
    session = session or db.session
    rows = session.query(Setting).order_by(Setting.key).all()
    return [{
        'key': row.key,
        'value': row.value,
        'updated_at': row.updated_at.isoformat() if row.updated_at else None,
    } for row in rows]
