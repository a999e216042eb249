"""Unit tests for API key authentication."""

from unittest.mock import patch

import pytest

from bind8.core.auth import parse_api_keys, validate_api_key, verify_api_key
from bind8.core.errors import AuthenticationAppError, ConfigurationAppError


class TestParseAPIKeys:
    def test_parse_multiple_keys(self) -> None:
        assert parse_api_keys("key1,key2,key3") == {"key1", "key2", "key3"}

    def test_parse_keys_with_whitespace(self) -> None:
        assert parse_api_keys("key1 , key2  ,  key3") == {"key1", "key2", "key3"}

    @pytest.mark.parametrize("value", [None, "", "   ,  ,  "])
    def test_parse_empty_inputs(self, value) -> None:
        assert parse_api_keys(value) == set()


class TestValidateAPIKey:
    @patch("bind8.core.auth.settings")
    def test_bypassed_when_auth_disabled(self, mock_settings) -> None:
        mock_settings.app.api_key_required = False

        validate_api_key("any-random-key")
        validate_api_key(None)

    @patch("bind8.core.auth.settings")
    def test_no_keys_configured_is_configuration_error(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = ""

        with pytest.raises(ConfigurationAppError) as exc_info:
            validate_api_key("some-key")

        assert exc_info.value.code == "api_keys_not_configured"

    @patch("bind8.core.auth.settings")
    def test_accepts_valid_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "valid-key-1, valid-key-2"

        validate_api_key("valid-key-1")
        validate_api_key("valid-key-2")

    @patch("bind8.core.auth.settings")
    def test_missing_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "valid-key"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key(None)

        assert exc_info.value.code == "missing_api_key"

    @patch("bind8.core.auth.settings")
    def test_rejects_invalid_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "valid-key"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key(" valid-key ")

        assert exc_info.value.code == "invalid_api_key"


class TestVerifyAPIKeyDependency:
    @pytest.mark.asyncio
    @patch("bind8.core.auth.settings")
    async def test_passes_with_valid_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "k1"

        assert await verify_api_key("k1") is None

    @pytest.mark.asyncio
    @patch("bind8.core.auth.settings")
    async def test_raises_without_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "k1"

        with pytest.raises(AuthenticationAppError):
            await verify_api_key(None)
