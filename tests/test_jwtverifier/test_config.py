"""Tests for VerifierConfig, environment settings and logging setup."""

import logging
import os

import pytest

from jwtverifier.config import IatRule, VerifierConfig
from jwtverifier.logging_config import configure_logging
from jwtverifier.settings import VerifierSettings, get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for key in list(os.environ):
        if key.startswith("JWT_VERIFIER_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_config_defaults():
    cfg = VerifierConfig(issuer="https://example.okta.com")
    assert cfg.leeway == 120
    assert cfg.iat_rule is IatRule.NOT_IN_FUTURE
    assert cfg.http_timeout_seconds == 10.0
    assert dict(cfg.claims_to_validate) == {}
    assert cfg.expected("aud") == ""


def test_config_requires_issuer():
    with pytest.raises(ValueError, match="issuer"):
        VerifierConfig(issuer="  ")


def test_config_rejects_unknown_claims():
    with pytest.raises(ValueError, match="sub"):
        VerifierConfig(issuer="https://example.okta.com", claims_to_validate={"sub": "x"})


def test_config_is_immutable():
    claims = {"aud": "myclient"}
    cfg = VerifierConfig(issuer="https://example.okta.com", claims_to_validate=claims)
    claims["aud"] = "changed"
    assert cfg.expected("aud") == "myclient"
    with pytest.raises(TypeError):
        cfg.claims_to_validate["aud"] = "x"
    with pytest.raises(AttributeError):
        cfg.leeway = 0


def test_config_none_expectation_means_unchecked():
    cfg = VerifierConfig(issuer="https://example.okta.com", claims_to_validate={"nonce": None})
    assert cfg.expected("nonce") == ""


def test_config_accepts_iat_rule_string():
    cfg = VerifierConfig(issuer="https://example.okta.com", iat_rule="expiry_rule")
    assert cfg.iat_rule is IatRule.EXPIRY_RULE


def test_config_negative_leeway_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="jwtverifier.config"):
        cfg = VerifierConfig(issuer="https://example.okta.com", leeway=-5)
    assert cfg.leeway == -5
    assert "Negative leeway" in caplog.text


def test_config_from_environ_requires_issuer():
    with pytest.raises(ValueError, match="JWT_VERIFIER_ISSUER"):
        VerifierConfig.from_environ()


def test_config_from_environ(monkeypatch):
    env = {
        "JWT_VERIFIER_ISSUER": "https://example.okta.com/oauth2/default",
        "JWT_VERIFIER_LEEWAY": "30",
        "JWT_VERIFIER_AUD": "api://default",
        "JWT_VERIFIER_CID": " ",
        "JWT_VERIFIER_IAT_RULE": "EXPIRY_RULE",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    cfg = VerifierConfig.from_environ()
    assert cfg.issuer == "https://example.okta.com/oauth2/default"
    assert cfg.leeway == 30
    assert dict(cfg.claims_to_validate) == {"aud": "api://default"}
    assert cfg.iat_rule is IatRule.EXPIRY_RULE


def test_settings_claims_to_validate():
    settings = VerifierSettings(issuer="https://i", iss="https://i", nonce="n")
    assert settings.claims_to_validate() == {"iss": "https://i", "aud": "", "cid": "", "nonce": "n"}


def test_configure_logging_sets_package_level():
    try:
        configure_logging("debug")
        assert logging.getLogger("jwtverifier").level == logging.DEBUG
        configure_logging("WARNING")
        assert logging.getLogger("jwtverifier").level == logging.WARNING
    finally:
        logging.getLogger("jwtverifier").setLevel(logging.NOTSET)


def test_configure_logging_reads_level_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_VERIFIER_LOG_LEVEL", "error")
    try:
        configure_logging()
        assert logging.getLogger("jwtverifier").level == logging.ERROR
    finally:
        logging.getLogger("jwtverifier").setLevel(logging.NOTSET)


def test_configure_logging_does_not_add_handlers():
    before = list(logging.getLogger("jwtverifier").handlers)
    try:
        configure_logging("INFO")
        assert logging.getLogger("jwtverifier").handlers == before
    finally:
        logging.getLogger("jwtverifier").setLevel(logging.NOTSET)
