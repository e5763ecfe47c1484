"""
Semantic checks over a decoded claim set.

Claim payloads are untyped JSON. Every read goes through ``claim_string`` or
``claim_timestamp``, which either return a typed value or raise a
``VerificationError``; nothing is cast blindly.

Background for newcomers:
    ``iss``, ``aud``, ``cid`` and ``nonce`` are opt-in: they are only compared
    when the caller configured an expected value. ``exp`` and ``iat`` are
    always enforced, with ``leeway`` seconds of tolerance for clock skew.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Callable, Mapping, Sequence

from .config import IatRule, VerifierConfig
from .errors import ErrorKind, VerificationError

logger = logging.getLogger(__name__)

# claim name -> (label used in "the `X` was not able to be validated", label used in mismatch detail)
CLAIM_LABELS: dict[str, tuple[str, str]] = {
    "iss": ("Issuer", "iss"),
    "aud": ("Audience", "aud"),
    "cid": ("Client Id", "clientId"),
    "exp": ("Expiration", "exp"),
    "iat": ("Issued At", "iat"),
    "nonce": ("Nonce", "nonce"),
}

ACCESS_TOKEN_CHECKS: tuple[str, ...] = ("iss", "aud", "cid", "exp", "iat")
ID_TOKEN_CHECKS: tuple[str, ...] = ("iss", "aud", "exp", "iat", "nonce")


def claim_string(value: Any) -> str | None:
    """Return ``value`` if it is a JSON string, else None."""
    return value if isinstance(value, str) else None


def claim_timestamp(name: str, value: Any) -> float:
    """
    Return a NumericDate claim as seconds since the epoch.

    Raises VerificationError (CLAIM_TIMESTAMP_INVALID) when the claim is
    missing, not a JSON number or not finite. Booleans are rejected even
    though Python treats them as ints.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise VerificationError(
            ErrorKind.CLAIM_TIMESTAMP_INVALID,
            f"{name}: expected a numeric timestamp, got {type(value).__name__}",
            claim=name,
        )
    try:
        timestamp = float(value)
    except OverflowError:
        timestamp = math.inf
    if not math.isfinite(timestamp):
        # NaN compares False both ways, inf never expires
        raise VerificationError(
            ErrorKind.CLAIM_TIMESTAMP_INVALID,
            f"{name}: timestamp is not a finite number",
            claim=name,
        )
    return timestamp


class ClaimsValidator:
    """
    Pure claim checks against a ``VerifierConfig`` and the current time.

    ``now`` returns seconds since the epoch; tests inject a fixed clock.
    """

    def __init__(self, config: VerifierConfig, now: Callable[[], float] = time.time) -> None:
        self._config = config
        self._now = now
        self._checks: dict[str, Callable[[Any], None]] = {
            "iss": self.validate_iss,
            "aud": self.validate_audience,
            "cid": self.validate_client_id,
            "exp": self.validate_exp,
            "iat": self.validate_iat,
            "nonce": self.validate_nonce,
        }

    def _current_unix_time(self) -> int:
        return int(self._now())

    def _match(self, claim: str, value: Any) -> None:
        expected = self._config.expected(claim)
        if not expected:
            return
        if claim_string(value) != expected:
            label = CLAIM_LABELS[claim][1]
            raise VerificationError(
                ErrorKind.CLAIM_MISMATCH,
                f"{label}: {value} does not match {expected}",
                claim=claim,
            )

    def validate_iss(self, issuer: Any) -> None:
        self._match("iss", issuer)

    def validate_audience(self, audience: Any) -> None:
        self._match("aud", audience)

    def validate_client_id(self, client_id: Any) -> None:
        self._match("cid", client_id)

    def validate_nonce(self, nonce: Any) -> None:
        self._match("nonce", nonce)

    def validate_exp(self, exp: Any) -> None:
        if self._is_past(claim_timestamp("exp", exp)):
            raise VerificationError(ErrorKind.CLAIM_EXPIRED, "the token is expired", claim="exp")

    def validate_iat(self, iat: Any) -> None:
        issued_at = claim_timestamp("iat", iat)
        if self._config.iat_rule is IatRule.EXPIRY_RULE:
            if self._is_past(issued_at):
                raise VerificationError(ErrorKind.CLAIM_TIMESTAMP_INVALID, "the token is expired", claim="iat")
            return
        if self._current_unix_time() + self._config.leeway < issued_at:
            raise VerificationError(
                ErrorKind.CLAIM_TIMESTAMP_INVALID,
                "the token was issued in the future",
                claim="iat",
            )

    def _is_past(self, timestamp: float) -> bool:
        return self._current_unix_time() - self._config.leeway > timestamp

    def validate(self, claims: Mapping[str, Any], order: Sequence[str]) -> None:
        """
        Run the checks named in ``order`` and stop at the first failure.

        The raised error names the failing claim, e.g.
        "the `Issuer` was not able to be validated. iss: a does not match b".
        """
        for claim in order:
            try:
                self._checks[claim](claims.get(claim))
            except VerificationError as e:
                logger.info("Claim rejected claim=%s kind=%s", claim, e.kind.value)
                raise VerificationError(
                    e.kind,
                    f"the `{CLAIM_LABELS[claim][0]}` was not able to be validated. {e.detail}",
                    claim=claim,
                ) from e
