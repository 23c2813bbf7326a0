"""
Process configuration for the gifland bot.

Values come from environment variables. Secrets may instead be stored in AWS
Secrets Manager, in which case the *_SECRET_NAME variable names the secret and
its value is fetched once per process and cached.

The resulting BotConfig is immutable and passed explicitly to the request
pipeline; nothing below reads configuration from module globals at request
time.
"""

import os
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from logger_util import get_logger, log, log_exception

_logger = get_logger()

DEFAULT_REGION = "ap-northeast-1"

# Cache for secrets (to avoid repeated API calls)
_secrets_cache: dict[str, str] = {}


class ConfigError(Exception):
    """Raised when a required configuration value is missing."""

    def __init__(self, name: str):
        self.name = name
        self.message = f"Required configuration value {name} is not set"
        super().__init__(self.message)


@dataclass(frozen=True)
class BotConfig:
    """Immutable bot identity: verification key, bot token, application id."""

    public_key: str
    application_id: str
    bot_token: str = ""


def get_secret_from_secrets_manager(secret_name: str, region: Optional[str] = None) -> Optional[str]:
    """
    Retrieve a secret string from AWS Secrets Manager with caching.

    Args:
        secret_name: Name or ARN of the secret
        region: AWS region (default: AWS_REGION_NAME env or ap-northeast-1)

    Returns:
        Secret value as string if successful, None otherwise
    """
    if secret_name in _secrets_cache:
        return _secrets_cache[secret_name]

    try:
        client = boto3.client(
            "secretsmanager",
            region_name=region or os.environ.get("AWS_REGION_NAME", DEFAULT_REGION),
        )
        response = client.get_secret_value(SecretId=secret_name)
        secret_value = response["SecretString"]
        _secrets_cache[secret_name] = secret_value
        return secret_value
    except ClientError as e:
        log(_logger, "ERROR", "secret_retrieval_client_error", {
            "secret_name": secret_name,
            "error_code": e.response.get("Error", {}).get("Code", ""),
        }, service="gifland-config")
        return None
    except Exception as e:
        log_exception(_logger, "secret_retrieval_failed", {"secret_name": secret_name}, e, service="gifland-config")
        return None


def _resolve(name: str) -> str:
    """Read NAME_SECRET_NAME from Secrets Manager if set, else NAME from the environment."""
    secret_name = (os.environ.get(f"{name}_SECRET_NAME") or "").strip()
    if secret_name:
        return (get_secret_from_secrets_manager(secret_name) or "").strip()
    return (os.environ.get(name) or "").strip()


def load_config() -> BotConfig:
    """
    Build BotConfig from the environment.

    Raises:
        ConfigError: If the public key or application id is missing
    """
    public_key = _resolve("DISCORD_PUBLIC_KEY")
    if not public_key:
        raise ConfigError("DISCORD_PUBLIC_KEY")
    application_id = _resolve("DISCORD_APP_ID")
    if not application_id:
        raise ConfigError("DISCORD_APP_ID")
    return BotConfig(
        public_key=public_key,
        application_id=application_id,
        bot_token=_resolve("DISCORD_TOKEN"),
    )
