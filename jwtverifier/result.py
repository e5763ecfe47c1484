"""Result object handed back to callers of the verification flows."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class Jwt:
    """
    Decoded claim set plus the verifier's verdict.

    A ``Jwt`` with ``valid=False`` is only ever seen on
    ``VerificationError.jwt``; its claims must not be trusted.
    """

    claims: Mapping[str, Any] = field(default_factory=dict)
    valid: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict."""
        return {"claims": dict(self.claims), "valid": self.valid}
