"""Unit tests for middleware auth (noted/middleware/auth.py)."""

import uuid
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from noted.middleware.auth import JWTBearer, get_current_user_id
from noted.security.jwt import create_access_token


def build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/protected")
    async def protected(user_id=Depends(JWTBearer())):
        return {"user_id": str(user_id)}

    @app.get("/me")
    async def me(user_id=Depends(get_current_user_id)):
        return {"user_id": str(user_id)}

    return app


def _make_bearer(token: Optional[str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token is not None else {}


def test_jwtbearer_accepts_valid_token():
    uid = uuid.uuid4()
    client = TestClient(build_app())
    resp = client.get("/protected", headers=_make_bearer(create_access_token({"sub": str(uid)})))
    assert resp.status_code == 200
    assert resp.json() == {"user_id": str(uid)}


def test_get_current_user_id_uses_bearer(monkeypatch):
    uid = uuid.uuid4()
    from noted.middleware import auth as auth_module

    monkeypatch.setattr(auth_module, "get_user_id_from_token", lambda t: uid)

    resp = TestClient(build_app()).get("/me", headers=_make_bearer("anything"))
    assert resp.json() == {"user_id": str(uid)}


def test_jwtbearer_rejects_missing_header():
    resp = TestClient(build_app()).get("/protected")
    assert resp.status_code in (401, 403)


def test_jwtbearer_rejects_invalid_token():
    resp = TestClient(build_app()).get("/protected", headers=_make_bearer("garbage"))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Invalid token or expired token"


def test_jwtbearer_rejects_non_bearer_scheme():
    resp = TestClient(build_app()).get("/protected", headers={"Authorization": "Basic abc"})
    assert resp.status_code in (401, 403)
