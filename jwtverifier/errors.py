"""Verification failures, classified by kind rather than by exception type."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .result import Jwt


class ErrorKind(str, Enum):
    EMPTY_TOKEN = "empty_token"
    MALFORMED_SHAPE = "malformed_shape"
    METADATA_FETCH_FAILED = "metadata_fetch_failed"
    SIGNATURE_INVALID = "signature_invalid"
    CLAIM_MISMATCH = "claim_mismatch"
    CLAIM_EXPIRED = "claim_expired"
    CLAIM_TIMESTAMP_INVALID = "claim_timestamp_invalid"


class VerificationError(Exception):
    """
    Raised when a token cannot be trusted. Do not log the token.

    ``kind`` lets callers tell "token is garbage", "identity provider
    unreachable", "signature bad" and "claim X rejected" apart without
    matching on the message. ``jwt`` carries the decoded (untrusted) claims
    when the failure happened after signature verification.
    """

    def __init__(
        self,
        kind: ErrorKind,
        detail: str,
        *,
        claim: str | None = None,
        jwt: Jwt | None = None,
    ) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.claim = claim
        self.jwt = jwt

    def wrap(self, context: str, *, jwt: Jwt | None = None) -> VerificationError:
        """Return a copy with ``context`` prefixed to the detail, same kind."""
        return VerificationError(
            self.kind,
            f"{context}{self.detail}",
            claim=self.claim,
            jwt=jwt if jwt is not None else self.jwt,
        )


def empty_token_error() -> VerificationError:
    return VerificationError(ErrorKind.EMPTY_TOKEN, "you must provide a jwt to verify")
