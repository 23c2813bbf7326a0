"""Conftest for gifland bot tests: put src/ and scripts/ on sys.path, shared fixtures."""

import json
import os
import sys
import time
from unittest.mock import MagicMock

import pytest
import requests
from nacl.signing import SigningKey

ROOT = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, os.path.join(ROOT, "src"))
sys.path.insert(0, os.path.join(ROOT, "scripts"))

from config import BotConfig  # noqa: E402


@pytest.fixture
def signing_key():
    return SigningKey.generate()


@pytest.fixture
def public_key_hex(signing_key):
    return signing_key.verify_key.encode().hex()


@pytest.fixture
def bot_config(public_key_hex):
    return BotConfig(public_key=public_key_hex, application_id="app-123", bot_token="bot-token")


@pytest.fixture
def sign(signing_key):
    """Return a helper producing (body, headers) signed like Discord does."""

    def _sign(payload, timestamp=None):
        body = payload if isinstance(payload, (str, bytes)) else json.dumps(payload)
        raw = body if isinstance(body, bytes) else body.encode()
        ts = timestamp or str(int(time.time()))
        signature = signing_key.sign(ts.encode() + raw).signature.hex()
        headers = {"X-Signature-Ed25519": signature, "X-Signature-Timestamp": ts}
        return body, headers

    return _sign


def make_catalog_response(records, status_code=200):
    """Mock requests.Response for the catalog endpoint."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = records
    if response.ok:
        response.raise_for_status.return_value = None
    else:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Server Error")
    return response


@pytest.fixture
def catalog_session():
    """Return a factory for a session whose get() serves the given catalog."""

    def _session(records, status_code=200):
        session = MagicMock()
        session.get.return_value = make_catalog_response(records, status_code)
        return session

    return _session
