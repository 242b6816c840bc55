"""Tests for KeychainSettingsSource integration in config.py."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from config import Settings
from services.credential_manager import CREDENTIAL_KEYS

# Environment variables that would interfere with Settings defaults if
# set in the test runner's shell.  We clear them for isolation.
_ENV_VARS_TO_CLEAR = {
    "DATABASE_URL",
    "ENVIRONMENT",
    "DEBUG",
    "LOG_LEVEL",
    "DEFAULT_VIEW_CURRENCY",
    "REQUIRE_AUTH",
    *CREDENTIAL_KEYS,
}


def _clean_env():
    """Return a dict suitable for ``os.environ`` patching that removes
    any variables the Settings class reads."""
    return {k: v for k, v in os.environ.items() if k not in _ENV_VARS_TO_CLEAR}


class TestKeychainSettingsSource:
    """Test the KeychainSettingsSource pydantic-settings source."""

    def test_keychain_value_overrides_default(self):
        """A password in the keychain overrides the empty-string default."""
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential") as mock_get,
        ):
            mock_get.side_effect = lambda key: "keychain-pass" if key == "APP_PASSWORD" else None
            s = Settings(_env_file=None)
            assert s.APP_PASSWORD == "keychain-pass"

    def test_init_value_overrides_keychain(self):
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential", return_value="keychain-pass"),
        ):
            s = Settings(_env_file=None, APP_PASSWORD="init-pass")
            assert s.APP_PASSWORD == "init-pass"

    def test_keychain_beats_environment(self):
        env = {**_clean_env(), "APP_PASSWORD": "env-pass"}
        with (
            patch.dict(os.environ, env, clear=True),
            patch("config.get_credential", return_value="keychain-pass"),
        ):
            assert Settings(_env_file=None).APP_PASSWORD == "keychain-pass"

    def test_env_fallback_when_keychain_empty(self):
        env = {**_clean_env(), "APP_PASSWORD": "env-pass"}
        with (
            patch.dict(os.environ, env, clear=True),
            patch("config.get_credential", return_value=None),
        ):
            assert Settings(_env_file=None).APP_PASSWORD == "env-pass"

    def test_non_credential_fields_skip_keychain(self):
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential") as mock_get,
        ):
            mock_get.return_value = None
            s = Settings(_env_file=None)
            assert s.DATABASE_URL == "sqlite:///./famfolio.db"
            called_keys = {call.args[0] for call in mock_get.call_args_list}
            assert called_keys == {"APP_PASSWORD"}


class TestSettingsValidation:
    def test_view_currency_normalized(self):
        with (
            patch.dict(os.environ, {**_clean_env(), "DEFAULT_VIEW_CURRENCY": "ils"}, clear=True),
            patch("config.get_credential", return_value=None),
        ):
            assert Settings(_env_file=None).DEFAULT_VIEW_CURRENCY == "ILS"

    def test_view_currency_rejected(self):
        with (
            patch.dict(os.environ, {**_clean_env(), "DEFAULT_VIEW_CURRENCY": "EUR"}, clear=True),
            patch("config.get_credential", return_value=None),
        ):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_funds_names_from_json_env(self):
        env = {**_clean_env(), "FUNDS_ASSET_NAMES": '["Alpha Fund", "Beta Fund"]'}
        with (
            patch.dict(os.environ, env, clear=True),
            patch("config.get_credential", return_value=None),
        ):
            assert Settings(_env_file=None).FUNDS_ASSET_NAMES == ["Alpha Fund", "Beta Fund"]
