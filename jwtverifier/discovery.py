"""
Discovery metadata lookup.

Background for newcomers:
    Identity providers publish a small JSON document at a well-known path
    under the issuer URL. The only field this package reads from it is
    ``jwks_uri``: where the public signing keys live. Which well-known path
    to use depends on the kind of authorization server, so the suffix is
    supplied by a pluggable ``Discovery`` object.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from .errors import ErrorKind, VerificationError

logger = logging.getLogger(__name__)


class Discovery(Protocol):
    def well_known_suffix(self) -> str:
        """Path appended to the issuer to form the metadata URL."""
        ...


class OidcDiscovery:
    """OpenID Connect discovery (the default)."""

    def well_known_suffix(self) -> str:
        return "/.well-known/openid-configuration"


class OAuth2Discovery:
    """OAuth 2.0 authorization server metadata (RFC 8414)."""

    def well_known_suffix(self) -> str:
        return "/.well-known/oauth-authorization-server"


def _metadata_error(detail: str) -> VerificationError:
    return VerificationError(ErrorKind.METADATA_FETCH_FAILED, detail)


class MetadataResolver:
    """
    Fetches discovery metadata with one blocking GET per call. No caching.

    Every failure (transport, HTTP status, body) is raised as
    VerificationError (METADATA_FETCH_FAILED); it never aborts the process.
    """

    def __init__(self, discovery: Discovery, timeout_seconds: float = 10.0) -> None:
        self._discovery = discovery
        self._timeout = timeout_seconds

    def metadata_url(self, issuer: str) -> str:
        return issuer + self._discovery.well_known_suffix()

    def get_metadata(self, issuer: str) -> dict[str, Any]:
        url = self.metadata_url(issuer)
        try:
            resp = requests.get(url, timeout=self._timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as e:
            logger.warning("Metadata request failed url=%s error=%s", url, type(e).__name__)
            raise _metadata_error(f"request for metadata was not successful: {e}") from e
        except ValueError as e:
            logger.warning("Metadata response is not JSON url=%s", url)
            raise _metadata_error("metadata response is not valid JSON") from e

        if not isinstance(body, dict):
            raise _metadata_error("metadata response is not a JSON object")
        logger.debug("Metadata fetched url=%s", url)
        return body

    def get_jwks_uri(self, issuer: str) -> str:
        jwks_uri = self.get_metadata(issuer).get("jwks_uri")
        if not isinstance(jwks_uri, str) or not jwks_uri:
            raise _metadata_error("metadata does not contain a jwks_uri")
        return jwks_uri
