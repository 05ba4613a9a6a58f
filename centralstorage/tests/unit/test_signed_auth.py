"""
Tests for the FastAPI signed request dependency.

Requests are signed with the client-side RequestSigner and sent through
fastapi.testclient, so the query string goes through real URL encoding.
"""
import pytest
import yaml
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from centralstorage.api.signed_auth import AuthContext, init_auth_system, verify_signed_request
from centralstorage.client.requests import StorageRequest
from centralstorage.core.signing import HEADER_KEY, HEADER_SIGNATURE, RequestSigner
from centralstorage.core.signing.registry import Consumer, consumer_registry


@pytest.fixture
def registered_consumer(key, secret):
    consumer_registry.register(Consumer(key=key, secret=secret))
    yield
    consumer_registry.clear()


@pytest.fixture
def api(registered_consumer):
    app = FastAPI()

    @app.get("/api/v1/assets")
    async def list_assets(auth: AuthContext = Depends(verify_signed_request)):
        return {"consumer": auth.consumer_key}

    return TestClient(app)


def _signed(query, key, secret):
    request = StorageRequest(method="GET", url="http://testserver/api/v1/assets", query=dict(query))
    RequestSigner(key, secret).sign(request)
    return request


def test_accepts_signed_request(api, key, secret):
    request = _signed({"foo": "wololo", "bar": "a b&c"}, key, secret)

    response = api.get("/api/v1/assets", params=request.query, headers=dict(request.headers))

    assert response.status_code == 200
    assert response.json() == {"consumer": key}


def test_rejects_tampered_query(api, key, secret):
    request = _signed({"foo": "wololo"}, key, secret)
    request.query["foo"] = "wololo2"

    response = api.get("/api/v1/assets", params=request.query, headers=dict(request.headers))

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid signature"


def test_rejects_wrong_secret(api, key):
    request = _signed({"foo": "wololo"}, key, "not-the-secret")

    response = api.get("/api/v1/assets", params=request.query, headers=dict(request.headers))
    assert response.status_code == 401


def test_rejects_unknown_consumer(api, secret):
    request = _signed({"foo": "wololo"}, "stranger", secret)

    response = api.get("/api/v1/assets", params=request.query, headers=dict(request.headers))
    assert response.status_code == 401


@pytest.mark.parametrize("signature", [None, "sha256:onlytwoparts", "sha256:a:b:c", "md5:salt:digest"])
def test_rejects_malformed_signature(api, key, signature):
    headers = {HEADER_KEY: key}
    if signature is not None:
        headers[HEADER_SIGNATURE] = signature

    response = api.get("/api/v1/assets", params={"foo": "wololo"}, headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid signature"


def test_init_auth_system_loads_registry(tmp_path):
    path = tmp_path / "consumers.yaml"
    path.write_text(yaml.safe_dump({"consumers": {"site": {"secret": "xyz"}}}))

    try:
        init_auth_system(path)
        assert consumer_registry.get_secret("site") == "xyz"
    finally:
        consumer_registry.clear()
