"""
Signature verification, delegated to PyJWT.

The core only needs "token + key-set URL in, claim mapping out". Anything
that implements ``SignatureDecoder`` can be injected into ``JwtVerifier``;
``PyJWTAdaptor`` is the default.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import jwt
import requests
from jwt import PyJWK

from .errors import ErrorKind, VerificationError
from .shape import SUPPORTED_ALGORITHM

logger = logging.getLogger(__name__)


class SignatureDecoder(Protocol):
    def decode(self, token: str, jwks_uri: str) -> dict[str, Any]:
        """Verify the signature and return the claims, or raise VerificationError."""
        ...


def _signature_error(detail: str) -> VerificationError:
    return VerificationError(ErrorKind.SIGNATURE_INVALID, detail)


class PyJWTAdaptor:
    """
    Fetches the key set on every call (no cache), picks the key matching the
    token's ``kid`` and verifies the RS256 signature.

    Claim checks (exp, iat, iss, aud) are switched off here; ``ClaimsValidator``
    owns them so leeway and opt-in rules stay in one place.
    """

    def __init__(self, timeout_seconds: float = 10.0) -> None:
        self._timeout = timeout_seconds

    def _fetch_jwks(self, jwks_uri: str) -> dict[str, Any]:
        try:
            resp = requests.get(jwks_uri, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("JWKS request failed uri=%s error=%s", jwks_uri, type(e).__name__)
            raise _signature_error(f"could not fetch signing keys: {e}") from e
        if not isinstance(data, dict):
            raise _signature_error("signing key set is not a JSON object")
        return data

    def _find_key(self, kid: str, data: dict[str, Any]) -> PyJWK | None:
        """Look up a key by kid in the given JWKS data."""
        for key_dict in data.get("keys") or []:
            if isinstance(key_dict, dict) and key_dict.get("kid") == kid:
                try:
                    return PyJWK.from_dict(key_dict)
                except jwt.PyJWTError as e:
                    raise _signature_error(f"signing key {kid} is unusable: {e}") from e
        return None

    def decode(self, token: str, jwks_uri: str) -> dict[str, Any]:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise _signature_error(f"token header is unreadable: {e}") from e

        kid = header.get("kid")
        if not isinstance(kid, str) or not kid:
            raise _signature_error("token header has no key id")

        signing_key = self._find_key(kid, self._fetch_jwks(jwks_uri))
        if signing_key is None:
            logger.info("No signing key found for kid")
            raise _signature_error(f"no signing key found for kid {kid}")

        try:
            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=[SUPPORTED_ALGORITHM],
                options={
                    "verify_signature": True,
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "verify_iss": False,
                    "verify_aud": False,
                },
            )
        except jwt.InvalidAlgorithmError as e:
            raise _signature_error(f"unsupported signing algorithm: {e}") from e
        except jwt.InvalidTokenError as e:
            logger.info("Token signature invalid: %s", type(e).__name__)
            raise _signature_error(f"signature verification failed: {e}") from e
        return payload
