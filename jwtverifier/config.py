"""Immutable verifier configuration. Built once, never mutated."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .settings import VerifierSettings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_LEEWAY_SECONDS = 120
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0
VALIDATABLE_CLAIMS = frozenset({"iss", "aud", "cid", "nonce"})


class IatRule(str, Enum):
    """How the ``iat`` claim is compared to the current time."""

    NOT_IN_FUTURE = "not_in_future"
    """Reject tokens issued more than ``leeway`` seconds in the future."""

    EXPIRY_RULE = "expiry_rule"
    """Legacy: compare ``iat`` like ``exp`` (reject if older than ``leeway``)."""


@dataclass(frozen=True)
class VerifierConfig:
    """
    Configuration held by ``JwtVerifier``.

    Required:
        issuer: Base URL of the authorization server; discovery metadata is
            fetched from ``issuer + discovery suffix``.

    Optional:
        leeway: Clock-skew tolerance in seconds for exp/iat (default 120).
            A negative value is accepted and tightens both checks.
        claims_to_validate: Expected values for ``iss``, ``aud``, ``cid`` and
            ``nonce``. Missing or empty entries are not checked.
        iat_rule: Which comparison the ``iat`` check uses.
        http_timeout_seconds: Deadline for each outbound HTTP request.
    """

    issuer: str
    leeway: int = DEFAULT_LEEWAY_SECONDS
    claims_to_validate: Mapping[str, str] = field(default_factory=dict)
    iat_rule: IatRule = IatRule.NOT_IN_FUTURE
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.issuer or not self.issuer.strip():
            raise ValueError("issuer must be set")
        unknown = set(self.claims_to_validate).difference(VALIDATABLE_CLAIMS)
        if unknown:
            raise ValueError(f"cannot validate claims: {sorted(unknown)}")
        if self.leeway < 0:
            logger.warning("Negative leeway=%s tightens exp/iat checks", self.leeway)
        object.__setattr__(self, "issuer", self.issuer.strip())
        object.__setattr__(self, "iat_rule", IatRule(self.iat_rule))
        object.__setattr__(
            self,
            "claims_to_validate",
            MappingProxyType({k: v or "" for k, v in self.claims_to_validate.items()}),
        )

    def expected(self, claim: str) -> str:
        """Expected value for ``claim``; empty string means unchecked."""
        return self.claims_to_validate.get(claim, "")

    @classmethod
    def from_settings(cls, settings: VerifierSettings) -> VerifierConfig:
        if not settings.issuer:
            raise ValueError("JWT_VERIFIER_ISSUER must be set")
        return cls(
            issuer=settings.issuer,
            leeway=settings.leeway,
            claims_to_validate={k: v.strip() for k, v in settings.claims_to_validate().items() if v.strip()},
            iat_rule=IatRule(settings.iat_rule.strip().lower()),
            http_timeout_seconds=settings.http_timeout_seconds,
        )

    @classmethod
    def from_environ(cls) -> VerifierConfig:
        return cls.from_settings(get_settings())
