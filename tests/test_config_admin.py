import pytest

from cardshop import models
from cardshop.domain.config.shop_settings import (
    MAX_SHOP_NAME_LENGTH,
    load_flag,
    normalize_positive_int,
    normalize_shop_name,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("12", "12"),
        (" 7 items", "7"),
        (3, "3"),
        ("0", "5"),
        ("-4", "5"),
        ("abc", "5"),
        ("", "5"),
        (None, "5"),
        ("12\u00b2", "12"),
        ("\u0663", "5"),
    ],
)
def test_normalize_positive_int(raw, expected):
    assert normalize_positive_int(raw, 5) == expected


def test_normalize_shop_name():
    assert normalize_shop_name("  Key Store ") == "Key Store"
    with pytest.raises(ValueError, match="cannot be empty"):
        normalize_shop_name("   ")
    with pytest.raises(ValueError, match="too long"):
        normalize_shop_name("x" * (MAX_SHOP_NAME_LENGTH + 1))


def test_load_flag():
    assert load_flag("true")
    assert load_flag(" TRUE ")
    assert not load_flag("false")
    assert not load_flag(None)
    assert load_flag(None, default=True)


def test_defaults_when_nothing_is_stored(client, admin_headers):
    resp = client.get("/admin/settings", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "shop_name": None,
        "low_stock_threshold": 5,
        "checkin_reward": 10,
        "checkin_enabled": False,
    }


def test_save_shop_name(client, admin_headers, db_session, revalidator):
    resp = client.put("/admin/settings/shop-name", json={"name": "  Key Store  "}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["shop_name"] == "Key Store"
    assert db_session.get(models.Setting, "shop_name").value == "Key Store"
    assert revalidator.calls == [["/", "/admin"]]


def test_save_shop_name_validation(client, admin_headers, revalidator):
    resp = client.put("/admin/settings/shop-name", json={"name": " "}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Shop name cannot be empty"

    resp = client.put("/admin/settings/shop-name", json={"name": "x" * 65}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Shop name is too long"
    assert revalidator.calls == []


def test_save_numeric_settings(client, admin_headers):
    resp = client.put("/admin/settings/low-stock-threshold", json={"value": "3"}, headers=admin_headers)
    assert resp.json()["low_stock_threshold"] == 3

    resp = client.put("/admin/settings/low-stock-threshold", json={"value": "zero"}, headers=admin_headers)
    assert resp.json()["low_stock_threshold"] == 5

    resp = client.put("/admin/settings/checkin-reward", json={"value": 25}, headers=admin_headers)
    assert resp.json()["checkin_reward"] == 25

    resp = client.put("/admin/settings/checkin-reward", json={"value": -1}, headers=admin_headers)
    assert resp.json()["checkin_reward"] == 10


def test_toggle_checkin(client, admin_headers, db_session, revalidator):
    resp = client.put("/admin/settings/checkin-enabled", json={"enabled": True}, headers=admin_headers)
    assert resp.json()["checkin_enabled"] is True
    assert db_session.get(models.Setting, "checkin_enabled").value == "true"

    resp = client.put("/admin/settings/checkin-enabled", json={"enabled": False}, headers=admin_headers)
    assert resp.json()["checkin_enabled"] is False
    assert revalidator.calls[-1] == ["/admin", "/"]
