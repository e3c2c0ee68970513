"""
Settings resolution with defaults, the save operations and their routes.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from ldcshop.core.database import db
from ldcshop.core.exceptions import ValidationError
from ldcshop.core.models import Setting
from ldcshop.modules.settings.database import delete_setting, get_all_settings, get_setting, set_setting
from ldcshop.modules.settings.helpers import (
    SETTING_DEFINITIONS,
    default_for,
    get_site_title,
    resolve_setting,
    resolve_settings,
    save_checkin_enabled,
    save_checkin_reward,
    save_low_stock_threshold,
    save_noindex,
    save_shop_name,
)

DEFAULTS = {
    "shop_name": None,
    "low_stock_threshold": 5,
    "checkin_reward": 10,
    "checkin_enabled": True,
    "noindex_enabled": False,
}


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def test_defaults_when_nothing_is_stored(app):
    assert resolve_settings().to_dict() == DEFAULTS


@pytest.mark.parametrize("key, raw, expected", [
    ("low_stock_threshold", "12", 12),
    ("low_stock_threshold", "abc", 5),
    ("low_stock_threshold", "0", 5),
    ("low_stock_threshold", "-3", 5),
    ("checkin_reward", "25", 25),
    ("checkin_reward", "", 10),
    ("checkin_enabled", "false", False),
    ("checkin_enabled", "anything else", True),
    ("noindex_enabled", "true", True),
    ("noindex_enabled", "yes", False),
    ("shop_name", "  My Shop ", "My Shop"),
    ("shop_name", "   ", None),
])
def test_stored_values_parse_or_default(app, key, raw, expected):
    db.session.add(Setting(key=key, value=raw))
    db.session.commit()

    assert resolve_setting(key) == expected


def test_store_failure_gives_defaults(app):
    error = OperationalError("SELECT", {}, Exception("no such table: settings"))
    with patch("ldcshop.modules.settings.helpers.get_setting", side_effect=error):
        assert resolve_settings().to_dict() == DEFAULTS


def test_driver_failure_gives_defaults(app):
    with patch("ldcshop.modules.settings.helpers.get_setting",
               side_effect=RuntimeError("driver went away")):
        assert resolve_settings().to_dict() == DEFAULTS


def test_missing_settings_table_gives_defaults(app):
    Setting.__table__.drop(db.engine)

    assert resolve_settings().to_dict() == DEFAULTS
    assert get_site_title("Fallback") == "Fallback"


def test_every_key_has_a_default():
    for key in SETTING_DEFINITIONS:
        assert default_for(key) == DEFAULTS[key]


def test_site_title_prefers_shop_name(app):
    assert get_site_title("Default Title") == "Default Title"
    set_setting("shop_name", "Pixel Store")
    assert get_site_title("Default Title") == "Pixel Store"


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

def test_store_roundtrip(app):
    assert get_setting("shop_name", default="none") == "none"

    set_setting("shop_name", "First")
    set_setting("shop_name", "Second")

    assert get_setting("shop_name") == "Second"
    assert [row["key"] for row in get_all_settings()] == ["shop_name"]
    assert delete_setting("shop_name") is True
    assert delete_setting("shop_name") is False


# ---------------------------------------------------------------------------
# Save operations
# ---------------------------------------------------------------------------

def test_save_shop_name_trims_and_rejects_empty(app):
    assert save_shop_name("  Night Market  ") == "Night Market"
    assert get_setting("shop_name") == "Night Market"

    with pytest.raises(ValidationError):
        save_shop_name("   ")
    assert get_setting("shop_name") == "Night Market"


@pytest.mark.parametrize("save", [save_low_stock_threshold, save_checkin_reward])
def test_positive_int_saves(app, save):
    assert save("7") == 7
    assert save(3) == 3
    for bad in ("0", "-1", "abc", None):
        with pytest.raises(ValidationError):
            save(bad)


def test_boolean_saves(app):
    assert save_checkin_enabled(False) is False
    assert get_setting("checkin_enabled") == "false"
    assert save_noindex("true") is True
    assert resolve_setting("noindex_enabled") is True

    with pytest.raises(ValidationError):
        save_noindex("maybe")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

def test_save_route(admin_client):
    response = admin_client.post("/admin/settings/low-stock-threshold", json={"value": "8"})

    assert response.get_json() == {"success": True, "key": "low_stock_threshold", "value": 8}
    db.session.expire_all()
    assert resolve_setting("low_stock_threshold") == 8


def test_save_route_validation(admin_client):
    response = admin_client.post("/admin/settings/checkin-reward", json={"value": "0"})
    assert response.status_code == 400
    assert response.get_json()["success"] is False

    response = admin_client.post("/admin/settings/shop-name", json={})
    assert response.status_code == 400

    response = admin_client.post("/admin/settings/no-such-setting", json={"value": "x"})
    assert response.status_code == 404


def test_settings_api(admin_client):
    set_setting("checkin_enabled", "false")

    data = admin_client.get("/admin/settings/api/settings").get_json()

    assert data["settings"]["checkin_enabled"] is False
    assert data["settings"]["low_stock_threshold"] == 5


def test_noindex_and_title_reach_public_pages(client):
    response = client.get("/search")
    assert b'name="robots"' not in response.data

    set_setting("noindex_enabled", "true")
    set_setting("shop_name", "Pixel Store")

    response = client.get("/search")
    assert b'<meta name="robots" content="noindex, nofollow">' in response.data
    assert b"Pixel Store" in response.data
