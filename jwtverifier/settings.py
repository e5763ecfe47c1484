from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class VerifierSettings(BaseSettings):
    """
    Verifier settings read from the environment.

    Notes:
    - Every variable is prefixed with ``JWT_VERIFIER_`` (e.g. ``JWT_VERIFIER_ISSUER``).
    - Empty ``iss``/``aud``/``cid``/``nonce`` mean "do not check this claim".
    """

    model_config = SettingsConfigDict(env_prefix="JWT_VERIFIER_", extra="ignore")

    issuer: str | None = None
    leeway: int = 120
    iss: str = ""
    aud: str = ""
    cid: str = ""
    nonce: str = ""
    iat_rule: str = "not_in_future"
    http_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    def claims_to_validate(self) -> dict[str, str]:
        return {"iss": self.iss, "aud": self.aud, "cid": self.cid, "nonce": self.nonce}


@lru_cache
def get_settings() -> VerifierSettings:
    return VerifierSettings()
