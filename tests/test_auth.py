from fastapi.testclient import TestClient
from jose import jwt

from cardshop.db import get_db, parse_admin_handles, settings
from cardshop.auth.dependencies import is_admin_handle
from cardshop.main import app
from cardshop.security import create_access_token, create_admin_token, decode_access_token
from conftest import count_cards


def test_parse_admin_handles():
    assert parse_admin_handles(" Alice, ,ROOT ,") == frozenset({"alice", "root"})
    assert parse_admin_handles("") == frozenset()
    assert parse_admin_handles(None) == frozenset()


def test_is_admin_handle_ignores_case():
    handles = parse_admin_handles("Alice")
    assert is_admin_handle("ALICE", handles)
    assert is_admin_handle(" alice ", handles)
    assert not is_admin_handle("bob", handles)
    assert not is_admin_handle(None, handles)
    assert not is_admin_handle("", handles)


def test_admin_token_carries_handle():
    payload = decode_access_token(create_admin_token("Alice"))
    assert payload["sub"] == "Alice"
    assert "exp" in payload


def test_missing_token_is_unauthorized(client, product):
    resp = client.post("/admin/cards/prod_1/batch", json={"keys": ["a"]})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Unauthorized"


def test_non_admin_handle_is_unauthorized(client, stranger_headers, db_session, product, revalidator):
    resp = client.post("/admin/cards/prod_1/batch", json={"keys": ["a", "b"]}, headers=stranger_headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Unauthorized"
    assert count_cards(db_session) == 0
    assert revalidator.calls == []


def test_invalid_token_is_rejected(client, product):
    resp = client.get("/admin/cards/prod_1", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


def test_token_signed_with_unknown_secret_is_rejected(client, product):
    forged = jwt.encode({"sub": "Alice"}, "x" * 40, algorithm=settings.auth_algorithm)
    resp = client.get("/admin/cards/prod_1", headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 401


def test_token_without_subject_is_rejected(client, product):
    token = create_access_token({"role": "admin"})
    resp = client.get("/admin/cards/prod_1", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token payload"


def test_admin_handle_match_is_case_insensitive(client, product):
    headers = {"Authorization": f"Bearer {create_admin_token('ALICE')}"}
    resp = client.get("/admin/cards/prod_1", headers=headers)
    assert resp.status_code == 200


def test_admin_token_cookie_is_accepted(client, product):
    cookie_client = TestClient(app, cookies={"admin_token": create_admin_token("root")})
    resp = cookie_client.get("/admin/cards/prod_1")
    assert resp.status_code == 200


def test_unauthorized_caller_never_opens_a_session(client, stranger_headers):
    opened = []

    def tracking_get_db():
        opened.append(True)
        yield None

    app.dependency_overrides[get_db] = tracking_get_db
    endpoints = [
        ("post", "/admin/cards/prod_1/batch", {"json": {"keys": ["a"]}}),
        ("post", "/admin/cards/prod_1", {"json": {"cards": "a\nb"}}),
        ("delete", "/admin/cards/item/1", {}),
        ("delete", "/admin/cards/prod_1", {}),
        ("get", "/admin/catalog/products", {}),
        ("put", "/admin/settings/shop-name", {"json": {"name": "Shop"}}),
        ("delete", "/admin/reviews/1", {}),
    ]
    for method, path, kwargs in endpoints:
        resp = getattr(client, method)(path, headers=stranger_headers, **kwargs)
        assert resp.status_code == 401, path
    assert opened == []


def test_health_is_public(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
