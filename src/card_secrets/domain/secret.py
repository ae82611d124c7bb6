"""Symmetric secret encoding and validation helpers.

The symmetric secret shared with the card issuer is a 128-bit value carried
around as a 32 character hexadecimal string. These helpers enforce that
representation and produce the encodings the protocol needs.
"""

import base64
import re
import secrets

from card_secrets.domain.exceptions import InvalidInput

SECRET_BYTES = 16  # AES-128
SECRET_HEX_LENGTH = SECRET_BYTES * 2

_HEX_PATTERN = re.compile(r"[0-9A-Fa-f]+")


def is_hex_secret(value: object) -> bool:
    """Return True if value is a non-empty hex string of whole bytes."""
    return (
        isinstance(value, str)
        and bool(_HEX_PATTERN.fullmatch(value))
        and len(value) % 2 == 0
    )


def validate_secret(secret: object) -> str:
    """Check the hexadecimal secret invariant.

    Args:
        secret: Candidate secret, expected to be a hex string

    Returns:
        The secret unchanged

    Raises:
        InvalidInput: If secret is missing, not hex, or has an odd length
    """
    if not secret:
        raise InvalidInput("secret", "secret is required")
    if not is_hex_secret(secret):
        raise InvalidInput("secret", "secret must be a hex string of whole bytes")
    return secret  # type: ignore[return-value]


def generate_secret() -> str:
    """Generate a fresh 32-character hex secret from the system CSPRNG."""
    return secrets.token_hex(SECRET_BYTES)


def secret_to_bytes(secret: str) -> bytes:
    """Decode a validated hex secret into raw key bytes."""
    return bytes.fromhex(validate_secret(secret))


def secret_to_base64(secret: str) -> str:
    """Encode the secret's raw bytes as base64 text.

    This is the form the issuer expects inside the session token, so the
    hex text itself is never what gets encrypted.
    """
    return base64.b64encode(secret_to_bytes(secret)).decode("ascii")
