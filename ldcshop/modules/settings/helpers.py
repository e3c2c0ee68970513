"""
Settings Helpers
================

Typed access to site settings. Every read goes through ``resolve_setting``,
which returns the per-key default whenever the key is unset, the stored value
does not parse, or the store itself fails. The dashboard therefore always
renders, even with the settings table unavailable.
"""

import logging

from ldcshop.core.database import db
from ldcshop.core.exceptions import ValidationError
from ldcshop.core.query_params import parse_int_param
from .database import get_setting, set_setting

logger = logging.getLogger(__name__)


def _parse_text(value):
    value = (value or '').strip()
    return value or None


def _parse_positive_int(value):
    # Unparseable or non-positive values fall back to the default
    parsed = parse_int_param(value, None)
    if parsed is None:
        raise ValueError(f"not a positive integer: {value!r}")
    return parsed


def _parse_enabled_unless_false(value):
    return value != 'false'


def _parse_enabled_if_true(value):
    return value == 'true'


class SettingDefinition:
    def __init__(self, key, default, parse):
        self.key = key
        self.default = default
        self.parse = parse


SETTING_DEFINITIONS = {
    'shop_name': SettingDefinition('shop_name', None, _parse_text),
    'low_stock_threshold': SettingDefinition('low_stock_threshold', 5, _parse_positive_int),
    'checkin_reward': SettingDefinition('checkin_reward', 10, _parse_positive_int),
    'checkin_enabled': SettingDefinition('checkin_enabled', True, _parse_enabled_unless_false),
    'noindex_enabled': SettingDefinition('noindex_enabled', False, _parse_enabled_if_true),
}


def default_for(key):
    return SETTING_DEFINITIONS[key].default


def resolve_setting(key, session=None):
    """lookup(key) parsed, or the key's default on any failure"""
    definition = SETTING_DEFINITIONS[key]
    session = session or db.session
    try:
        raw = get_setting(key, session=session)
    except Exception as e:
        session.rollback()
        logger.debug(f"Setting {key} unavailable, using default: {e}")
        return definition.default
    if raw is None:
        return definition.default
    try:
        return definition.parse(raw)
    except (TypeError, ValueError) as e:
        logger.debug(f"Setting {key} has bad value, using default: {e}")
        return definition.default


class SiteSettings:
    """Resolved settings, one attribute per key"""

    def __init__(self, values):
        self._values = dict(values)
        for key, value in values.items():
            setattr(self, key, value)

    def to_dict(self):
        return dict(self._values)

    def __repr__(self):
        return f"SiteSettings({self._values!r})"


def resolve_settings(keys=None, session=None):
    keys = keys or list(SETTING_DEFINITIONS)
    return SiteSettings({key: resolve_setting(key, session=session) for key in keys})


# ============================================
# Site metadata
# ============================================

def get_site_title(default_title, session=None):
    """Shop name if set, else the configured default title"""
    return resolve_setting('shop_name', session=session) or default_title


def is_noindex_enabled(session=None):
    return resolve_setting('noindex_enabled', session=session)


# ============================================
# Save operations
# ============================================

def _require_positive_int(value, label):
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number")
    if number <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    return number


def _require_bool(value, label):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    raise ValidationError(f"{label} must be true or false")


def save_shop_name(name, session=None):
    trimmed = (name or '').strip() if isinstance(name, str) else ''
    if not trimmed:
        raise ValidationError("Shop name cannot be empty")
    set_setting('shop_name', trimmed, session=session)
    return trimmed


def save_low_stock_threshold(value, session=None):
    number = _require_positive_int(value, "Low stock threshold")
    set_setting('low_stock_threshold', str(number), session=session)
    return number


def save_checkin_reward(value, session=None):
    number = _require_positive_int(value, "Check-in reward")
    set_setting('checkin_reward', str(number), session=session)
    return number


def save_checkin_enabled(enabled, session=None):
    enabled = _require_bool(enabled, "Check-in enabled")
    set_setting('checkin_enabled', 'true' if enabled else 'false', session=session)
    return enabled


def save_noindex(enabled, session=None):
    enabled = _require_bool(enabled, "No-index")
    set_setting('noindex_enabled', 'true' if enabled else 'false', session=session)
    return enabled


SAVE_OPERATIONS = {
    'shop-name': ('shop_name', save_shop_name),
    'low-stock-threshold': ('low_stock_threshold', save_low_stock_threshold),
    'checkin-reward': ('checkin_reward', save_checkin_reward),
    'checkin-enabled': ('checkin_enabled', save_checkin_enabled),
    'noindex': ('noindex_enabled', save_noindex),
}
