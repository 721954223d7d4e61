import datetime as dt

import jwt

from app.version import API_PREFIX


def test_access_token_allows_request(client, login):
    _, headers = login("9700000001", "Ravi")
    r = client.get(f"{API_PREFIX}/me", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["name"] == "Ravi"


def test_missing_header_is_401(client):
    r = client.get(f"{API_PREFIX}/me")
    assert r.status_code == 401
    assert r.get_json()["message"] == "Auth header missing"


def test_expired_access_token_blocked(client, app):
    past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(seconds=1)
    expired = jwt.encode({"sub": "x", "role": "member", "type": "access", "exp": past}, app.config["JWT_SECRET"], algorithm="HS256")
    r = client.get(f"{API_PREFIX}/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.get_json()["message"] == "token expired"


def test_token_for_unknown_member_blocked(client, app):
    from app.utils import create_access_token
    token = create_access_token("0000000000")
    r = client.get(f"{API_PREFIX}/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.get_json()["message"] == "Unknown member"


def test_refresh_token_rejected_as_access(client):
    r = client.post("/__auth/login_stub", json={"phone": "9700000002"})
    refresh = r.get_json()["data"]["refresh"]
    r = client.get(f"{API_PREFIX}/me", headers={"Authorization": f"Bearer {refresh}"})
    assert r.status_code == 401


def test_refresh_returns_new_access(client):
    toks = client.post("/__auth/login_stub", json={"phone": "9700000003"}).get_json()["data"]
    r = client.post(f"{API_PREFIX}/auth/refresh", json={"refresh_token": toks["refresh"]})
    assert r.status_code == 200
    new_access = r.get_json()["data"]["access_token"]
    r2 = client.get(f"{API_PREFIX}/me", headers={"Authorization": f"Bearer {new_access}"})
    assert r2.status_code == 200


def test_role_without_scope_is_forbidden(client, login):
    _, headers = login("9700000004", role="auditor")
    r = client.post(f"{API_PREFIX}/groups", json={"name": "x"}, headers=headers)
    assert r.status_code == 403


def test_scope_registry():
    from app.auth.permissions import role_has_scope
    assert role_has_scope("member", "contribute")
    assert not role_has_scope("member", "refund_all")
    assert role_has_scope("admin", "anything")
