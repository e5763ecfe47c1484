"""
Cheap structural checks run before any network or crypto work.

A non-empty string that does not look like an RS256 JWT is a plain "no"
(``False``), not an error; only the empty string raises.
"""

from __future__ import annotations

import base64
import binascii
import json
import re

from .errors import empty_token_error

SUPPORTED_ALGORITHM = "RS256"

# header.payload.signature, signature may be empty
_JWT_RE = re.compile(r"[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")
_HEADER_KEYS = frozenset({"alg", "kid"})
# a {"alg", "kid"} header is a few dozen bytes
MAX_HEADER_SEGMENT_LENGTH = 4096


def pad_segment(segment: str) -> str:
    """Append ``=`` until the length is a multiple of 4."""
    remainder = len(segment) % 4
    if remainder:
        segment += "=" * (4 - remainder)
    return segment


def _decode_header(segment: str) -> object | None:
    if len(segment) > MAX_HEADER_SEGMENT_LENGTH:
        return None
    try:
        raw = base64.urlsafe_b64decode(pad_segment(segment))
        return json.loads(raw)
    except (binascii.Error, ValueError, RecursionError):
        return None


class TokenShapeValidator:
    """Stateless; one instance can be shared by any number of threads."""

    def __init__(self, algorithm: str = SUPPORTED_ALGORITHM) -> None:
        self._algorithm = algorithm

    def validate(self, token: str) -> bool:
        """
        Return True if ``token`` looks like a JWT this verifier can handle.

        Raises VerificationError (EMPTY_TOKEN) for the empty string.
        """
        if token == "":
            raise empty_token_error()

        if not _JWT_RE.fullmatch(token):
            return False

        header = _decode_header(token.split(".", 1)[0])
        if not isinstance(header, dict):
            return False

        if set(header) != _HEADER_KEYS:
            return False

        return header["alg"] == self._algorithm
