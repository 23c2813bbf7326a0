"""
Discord interaction signature verification.

Discord signs every interaction request with the application's Ed25519 key.
The signed message is the X-Signature-Timestamp header value followed by the
raw request body; the signature is sent hex-encoded in X-Signature-Ed25519.

Any malformed input (bad hex, wrong key or signature length) is reported as
a failed verification instead of an exception, so the caller can answer 401.

Reference: https://discord.com/developers/docs/interactions/overview#setting-up-an-endpoint-validating-security-request-headers
"""

from typing import Optional, Union

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import VerifyKey

from logger_util import get_logger, log

_logger = get_logger()


def verify_signature(
    body: Optional[Union[str, bytes]],
    timestamp: Optional[str],
    signature: Optional[str],
    public_key: Optional[str],
) -> bool:
    """
    Verify a Discord request signature using Ed25519.

    Args:
        body: Raw request body, as received (bytes) or already decoded (str)
        timestamp: X-Signature-Timestamp header value
        signature: X-Signature-Ed25519 header value (hex)
        public_key: Application public key (hex)

    Returns:
        bool: True if the signature is valid for timestamp + body, False otherwise

    Example:
        >>> verify_signature('{"type":1}', "1700000000", "00" * 64, "11" * 32)
        False
    """
    if body is None or timestamp is None or signature is None or not public_key:
        return False

    try:
        verify_key = VerifyKey(bytes.fromhex(public_key))
        body_bytes = body if isinstance(body, bytes) else body.encode("utf-8")
        message = timestamp.encode("utf-8") + body_bytes
        verify_key.verify(message, bytes.fromhex(signature))
        return True
    except BadSignatureError:
        return False
    except (CryptoError, ValueError, TypeError) as e:
        log(_logger, "WARN", "signature_verification_error", {
            "error": str(e),
            "error_type": type(e).__name__,
        })
        return False
