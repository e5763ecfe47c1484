"""
Verify JWT access and identity tokens against an OpenID Connect issuer.

Use JwtVerifier(VerifierConfig(issuer=...)) and call verify_access_token()
or verify_id_token() with the raw token string.
"""

from .config import IatRule, VerifierConfig
from .discovery import OAuth2Discovery, OidcDiscovery
from .errors import ErrorKind, VerificationError
from .logging_config import configure_logging
from .result import Jwt
from .verifier import JwtVerifier, verify_access_token, verify_id_token

__all__ = [
    "ErrorKind",
    "IatRule",
    "Jwt",
    "JwtVerifier",
    "OAuth2Discovery",
    "OidcDiscovery",
    "VerificationError",
    "VerifierConfig",
    "configure_logging",
    "verify_access_token",
    "verify_id_token",
]
