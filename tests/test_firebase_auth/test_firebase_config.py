"""Tests for FirebaseConfig from environment."""

import os

import pytest

from hrms.firebase_auth.config import GOOGLE_SECURETOKEN_JWKS_URI, FirebaseConfig


def test_config_requires_project_id():
    with pytest.raises(ValueError, match="FIREBASE_PROJECT_ID must be set"):
        with _env({}):
            FirebaseConfig.from_environ()


def test_config_from_environ():
    with _env({"FIREBASE_PROJECT_ID": "hrms-prod"}):
        cfg = FirebaseConfig.from_environ()
    assert cfg.project_id == "hrms-prod"
    assert cfg.expected_audience == "hrms-prod"
    assert cfg.issuer == "https://securetoken.google.com/hrms-prod"
    assert cfg.jwks_uri == GOOGLE_SECURETOKEN_JWKS_URI
    assert cfg.clock_skew_seconds == 120
    assert cfg.jwks_cache_ttl_seconds == 3600


def test_config_overrides():
    env = {
        "FIREBASE_PROJECT_ID": " p ",
        "FIREBASE_JWKS_URI": "https://keys.example.com/jwks",
        "CLOCK_SKEW_SECONDS": "30",
        "JWKS_CACHE_TTL_SECONDS": "not-a-number",
    }
    with _env(env):
        cfg = FirebaseConfig.from_environ()
    assert cfg.project_id == "p"
    assert cfg.jwks_uri == "https://keys.example.com/jwks"
    assert cfg.clock_skew_seconds == 30
    assert cfg.jwks_cache_ttl_seconds == 3600


def _env(env: dict):
    class _Env:
        def __enter__(self):
            self._saved = os.environ.copy()
            os.environ.clear()
            os.environ.update(env)
            return self

        def __exit__(self, *args):
            os.environ.clear()
            os.environ.update(self._saved)
            return False

    return _Env()
