"""Tests for configuration loading from the environment and Secrets Manager."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

import config
from config import BotConfig, ConfigError, get_secret_from_secrets_manager, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DISCORD_PUBLIC_KEY", "DISCORD_APP_ID", "DISCORD_TOKEN"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"{name}_SECRET_NAME", raising=False)
    config._secrets_cache.clear()
    yield
    config._secrets_cache.clear()


def test_load_from_environment(monkeypatch):
    monkeypatch.setenv("DISCORD_PUBLIC_KEY", "ab" * 32)
    monkeypatch.setenv("DISCORD_APP_ID", " 123 ")
    monkeypatch.setenv("DISCORD_TOKEN", "bot")

    assert load_config() == BotConfig(public_key="ab" * 32, application_id="123", bot_token="bot")


def test_bot_token_optional(monkeypatch):
    monkeypatch.setenv("DISCORD_PUBLIC_KEY", "ab" * 32)
    monkeypatch.setenv("DISCORD_APP_ID", "123")

    assert load_config().bot_token == ""


@pytest.mark.parametrize("missing", ["DISCORD_PUBLIC_KEY", "DISCORD_APP_ID"])
def test_missing_required_value(monkeypatch, missing):
    monkeypatch.setenv("DISCORD_PUBLIC_KEY", "ab" * 32)
    monkeypatch.setenv("DISCORD_APP_ID", "123")
    monkeypatch.delenv(missing)

    with pytest.raises(ConfigError) as exc_info:
        load_config()

    assert exc_info.value.name == missing


def test_config_is_immutable():
    cfg = BotConfig(public_key="k", application_id="a")

    with pytest.raises(Exception):
        cfg.public_key = "other"


@patch("config.boto3")
def test_public_key_from_secrets_manager(mock_boto3, monkeypatch):
    mock_client = MagicMock()
    mock_client.get_secret_value.return_value = {"SecretString": "cd" * 32}
    mock_boto3.client.return_value = mock_client
    monkeypatch.setenv("DISCORD_PUBLIC_KEY_SECRET_NAME", "gifland/public-key")
    monkeypatch.setenv("DISCORD_APP_ID", "123")

    assert load_config().public_key == "cd" * 32
    load_config()

    mock_client.get_secret_value.assert_called_once_with(SecretId="gifland/public-key")


@patch("config.boto3")
def test_secret_client_error_returns_none(mock_boto3):
    mock_boto3.client.return_value.get_secret_value.side_effect = ClientError(
        {"Error": {"Code": "ResourceNotFoundException", "Message": "not found"}},
        "GetSecretValue",
    )

    assert get_secret_from_secrets_manager("missing") is None


@patch("config.boto3")
def test_unreadable_secret_makes_config_incomplete(mock_boto3, monkeypatch):
    mock_boto3.client.return_value.get_secret_value.side_effect = Exception("network")
    monkeypatch.setenv("DISCORD_PUBLIC_KEY_SECRET_NAME", "gifland/public-key")
    monkeypatch.setenv("DISCORD_APP_ID", "123")

    with pytest.raises(ConfigError):
        load_config()
