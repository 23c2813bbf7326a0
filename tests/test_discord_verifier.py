"""
Unit tests for Discord Ed25519 signature verification.

Signatures are produced with a freshly generated PyNaCl key pair, so every
test exercises real cryptography rather than a mocked verifier.
"""

import json

import pytest
from nacl.signing import SigningKey

from discord_verifier import verify_signature


class TestDiscordSignatureVerification:
    """Test cases for Discord request signature verification."""

    BODY = json.dumps({"type": 1, "id": "123", "token": "tok"})
    TIMESTAMP = "1700000000"

    def _sign(self, signing_key, timestamp, body):
        return signing_key.sign(f"{timestamp}{body}".encode()).signature.hex()

    def test_valid_signature(self, signing_key, public_key_hex):
        signature = self._sign(signing_key, self.TIMESTAMP, self.BODY)

        assert verify_signature(self.BODY, self.TIMESTAMP, signature, public_key_hex) is True

    def test_flipped_signature_byte_rejected(self, signing_key, public_key_hex):
        signature = bytearray(bytes.fromhex(self._sign(signing_key, self.TIMESTAMP, self.BODY)))
        signature[0] ^= 0x01

        assert verify_signature(self.BODY, self.TIMESTAMP, signature.hex(), public_key_hex) is False

    def test_modified_timestamp_rejected(self, signing_key, public_key_hex):
        signature = self._sign(signing_key, self.TIMESTAMP, self.BODY)

        assert verify_signature(self.BODY, "1700000001", signature, public_key_hex) is False

    def test_modified_body_rejected(self, signing_key, public_key_hex):
        signature = self._sign(signing_key, self.TIMESTAMP, self.BODY)
        tampered = self.BODY.replace('"type": 1', '"type": 2')

        assert verify_signature(tampered, self.TIMESTAMP, signature, public_key_hex) is False

    def test_other_key_rejected(self, signing_key):
        signature = self._sign(signing_key, self.TIMESTAMP, self.BODY)
        other_key = SigningKey.generate().verify_key.encode().hex()

        assert verify_signature(self.BODY, self.TIMESTAMP, signature, other_key) is False

    def test_non_ascii_body(self, signing_key, public_key_hex):
        body = json.dumps({"type": 2, "data": {"options": [{"name": "search", "value": "猫"}]}}, ensure_ascii=False)
        signature = self._sign(signing_key, self.TIMESTAMP, body)

        assert verify_signature(body, self.TIMESTAMP, signature, public_key_hex) is True

    def test_raw_bytes_body_verified_as_is(self, signing_key, public_key_hex):
        body = b"\xff\xfe{"
        signature = signing_key.sign(self.TIMESTAMP.encode() + body).signature.hex()

        assert verify_signature(body, self.TIMESTAMP, signature, public_key_hex) is True
        assert verify_signature(b"\xff\xfe}", self.TIMESTAMP, signature, public_key_hex) is False

    @pytest.mark.parametrize("signature", ["", "zz" * 64, "abc", "00" * 10])
    def test_malformed_signature_returns_false(self, public_key_hex, signature):
        assert verify_signature(self.BODY, self.TIMESTAMP, signature, public_key_hex) is False

    @pytest.mark.parametrize("public_key", ["", "not-hex", "00" * 5])
    def test_malformed_public_key_returns_false(self, signing_key, public_key):
        signature = self._sign(signing_key, self.TIMESTAMP, self.BODY)

        assert verify_signature(self.BODY, self.TIMESTAMP, signature, public_key) is False

    def test_missing_values_return_false(self, signing_key, public_key_hex):
        signature = self._sign(signing_key, self.TIMESTAMP, self.BODY)

        assert verify_signature(None, self.TIMESTAMP, signature, public_key_hex) is False
        assert verify_signature(self.BODY, None, signature, public_key_hex) is False
        assert verify_signature(self.BODY, self.TIMESTAMP, None, public_key_hex) is False
        assert verify_signature(self.BODY, self.TIMESTAMP, signature, None) is False
