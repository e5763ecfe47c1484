"""
Pytest fixtures for the test suite.

Network calls are never made: tests patch ``requests.get`` with the
``fake_get`` fixture, which serves canned JSON per URL. Signed tokens use a
throwaway RSA key generated once per session.
"""
from __future__ import annotations

import base64
import json
import time
from typing import Any
from unittest.mock import MagicMock

import jwt
import pytest
import requests

ISSUER = "https://example.okta.com"
METADATA_URL = ISSUER + "/.well-known/openid-configuration"
JWKS_URI = ISSUER + "/oauth2/v1/keys"
KID = "abc"


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


@pytest.fixture
def b64url():
    return _b64url


@pytest.fixture
def header_token():
    """Build a token string whose first segment is ``header`` as JSON."""

    def _header_token(header: Any, rest: str = "eyJzdWIiOiIxIn0.c2ln") -> str:
        return _b64url(json.dumps(header).encode()) + "." + rest

    return _header_token


@pytest.fixture
def fake_get():
    """Return a factory for ``requests.get`` stand-ins serving url -> JSON body."""

    def _factory(routes: dict[str, Any]):
        def _get(url, timeout=None, **kwargs):
            resp = MagicMock()
            if url not in routes:
                resp.status_code = 404
                resp.raise_for_status.side_effect = requests.HTTPError(f"404 for {url}")
                return resp
            resp.status_code = 200
            resp.json.return_value = routes[url]
            return resp

        return _get

    return _factory


@pytest.fixture(scope="session")
def private_key():
    from cryptography.hazmat.primitives.asymmetric import rsa

    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def jwks(private_key) -> dict[str, Any]:
    from jwt.algorithms import RSAAlgorithm

    jwk = RSAAlgorithm.to_jwk(private_key.public_key(), as_dict=True)
    jwk["kid"] = KID
    jwk["alg"] = "RS256"
    jwk["use"] = "sig"
    return {"keys": [jwk]}


@pytest.fixture
def routes(jwks) -> dict[str, Any]:
    return {METADATA_URL: {"issuer": ISSUER, "jwks_uri": JWKS_URI}, JWKS_URI: jwks}


@pytest.fixture
def sign(private_key):
    """Sign ``payload`` with the session key; header is exactly {alg, kid}."""

    def _sign(payload: dict[str, Any], kid: str = KID) -> str:
        return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid, "typ": None})

    return _sign


@pytest.fixture
def now() -> int:
    return int(time.time())
