"""
Verify access and identity tokens issued by an OpenID Connect provider.

Background for newcomers:
    Both flows run the same pipeline:

    1. **Shape** - reject strings that are not an RS256 JWT before any
       network or crypto work.
    2. **Decode** - look up the provider's ``jwks_uri`` from its discovery
       metadata and let the ``SignatureDecoder`` verify the signature.
    3. **Claims** - run the flow's ordered claim checks, stopping at the
       first failure.

    Access tokens check iss, aud, cid, exp, iat. Identity tokens check iss,
    aud, exp, iat, nonce.

The verifier holds only immutable configuration and is safe to share across
threads. It does not cache discovery metadata or signing keys: every call
makes its own HTTP requests.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Sequence

from .adaptors import PyJWTAdaptor, SignatureDecoder
from .claims import ACCESS_TOKEN_CHECKS, ID_TOKEN_CHECKS, ClaimsValidator
from .config import VerifierConfig
from .discovery import Discovery, MetadataResolver, OidcDiscovery
from .errors import ErrorKind, VerificationError
from .result import Jwt
from .shape import TokenShapeValidator

logger = logging.getLogger(__name__)


class JwtVerifier:
    """
    Orchestrates shape check, signature decode and claim validation.

    ``discovery`` and ``adaptor`` default to OIDC discovery and
    ``PyJWTAdaptor``; pass other implementations to swap them.
    """

    def __init__(
        self,
        config: VerifierConfig | None = None,
        *,
        discovery: Discovery | None = None,
        adaptor: SignatureDecoder | None = None,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or VerifierConfig.from_environ()
        self._discovery = discovery or OidcDiscovery()
        self._adaptor = adaptor or PyJWTAdaptor(timeout_seconds=self._config.http_timeout_seconds)
        self._metadata = MetadataResolver(self._discovery, timeout_seconds=self._config.http_timeout_seconds)
        self._shape = TokenShapeValidator()
        self._claims = ClaimsValidator(self._config, now=now)

    @property
    def config(self) -> VerifierConfig:
        return self._config

    @property
    def discovery(self) -> Discovery:
        return self._discovery

    @property
    def adaptor(self) -> SignatureDecoder:
        return self._adaptor

    def verify_access_token(self, token: str) -> Jwt:
        """
        Verify an access token and return its claims.

        Raises VerificationError on any failure. A malformed token is reported
        as MALFORMED_SHAPE; claim failures carry the decoded claims on
        ``error.jwt``.
        """
        try:
            valid_shape = self._shape.validate(token)
        except VerificationError as e:
            raise e.wrap("token is not valid: ") from e
        if not valid_shape:
            logger.debug("Access token rejected: malformed shape")
            raise VerificationError(ErrorKind.MALFORMED_SHAPE, "token is not valid: not a supported JWT")

        return self._verify(token, ACCESS_TOKEN_CHECKS)

    def verify_id_token(self, token: str) -> Jwt | None:
        """
        Verify an identity token and return its claims.

        Unlike ``verify_access_token``, shape-check results are passed through
        untouched: an empty token raises the EMPTY_TOKEN error as-is and a
        malformed token returns None without raising. Treat None as rejected.
        """
        if not self._shape.validate(token):
            logger.debug("Identity token rejected: malformed shape")
            return None

        return self._verify(token, ID_TOKEN_CHECKS)

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            jwks_uri = self._metadata.get_jwks_uri(self._config.issuer)
            claims = self._adaptor.decode(token, jwks_uri)
        except VerificationError as e:
            logger.info("Token decode failed kind=%s", e.kind.value)
            raise e.wrap("could not decode token: ") from e
        except Exception as e:
            # third-party adaptors may raise their own exception types
            logger.info("Token decode failed error=%s", type(e).__name__)
            raise VerificationError(ErrorKind.SIGNATURE_INVALID, f"could not decode token: {e}") from e
        if not isinstance(claims, dict):
            raise VerificationError(ErrorKind.SIGNATURE_INVALID, "could not decode token: payload is not an object")
        return claims

    def _verify(self, token: str, order: Sequence[str]) -> Jwt:
        claims = self._decode(token)
        try:
            self._claims.validate(claims, order)
        except VerificationError as e:
            raise e.wrap("", jwt=Jwt(claims=claims, valid=False)) from e
        return Jwt(claims=claims, valid=True)


def verify_access_token(token: str, config: VerifierConfig | None = None) -> Jwt:
    """
    Convenience function: build a ``JwtVerifier`` (config from the environment
    if ``config`` is None) and verify an access token with it.
    """
    return JwtVerifier(config=config).verify_access_token(token)


def verify_id_token(token: str, config: VerifierConfig | None = None) -> Jwt | None:
    """Convenience function: like ``verify_access_token`` for identity tokens."""
    return JwtVerifier(config=config).verify_id_token(token)
