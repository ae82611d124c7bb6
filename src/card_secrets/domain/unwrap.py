"""Secret unwrapper for card fields returned by the issuer.

The issuer encrypts each card field (PAN, CVC) with AES-128-GCM under the
session's symmetric secret and returns it as a pair of base64 strings:

    iv:   GCM initialization vector
    data: ciphertext || 16-byte authentication tag

Security notes:
    - The tag is always verified; a payload that fails verification is
      rejected, never returned as best-effort plaintext.
    - Nothing in this module logs keys, ciphertext or plaintext.
"""

import base64
import binascii
from typing import NamedTuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from card_secrets.domain.exceptions import (
    AuthenticationFailure,
    DecodingError,
    InvalidInput,
)
from card_secrets.domain.secret import SECRET_BYTES, is_hex_secret

TAG_LENGTH = 16  # 128-bit GCM tag appended to the ciphertext


class EncryptedFieldPayload(NamedTuple):
    """An encrypted card field as returned by the issuer.

    Attributes:
        iv: Base64-encoded initialization vector
        data: Base64-encoded ciphertext with the GCM tag as its last 16 bytes
    """

    iv: str
    data: str


_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def _b64decode(field: str, value: str) -> bytes:
    # Accept what the issuer's decoders accept: embedded whitespace, missing
    # padding and the URL-safe alphabet. Anything else is still rejected.
    normalized = "".join(value.split()).translate(_URLSAFE_TO_STANDARD).rstrip("=")
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodingError(field, "invalid base64") from e


def decrypt_field(payload: EncryptedFieldPayload, secret: str) -> str:
    """Decrypt one card field with the session's symmetric secret.

    Args:
        payload: Encrypted field from the issuer response
        secret: 32-character hex secret the session was issued with

    Returns:
        The plaintext field with surrounding whitespace removed

    Raises:
        InvalidInput: If data, iv or secret is missing or malformed,
            checked in that order
        DecodingError: If data/iv are not base64, data is shorter than the
            tag, or the plaintext is not UTF-8
        AuthenticationFailure: If the GCM tag does not verify
    """
    if not payload.data:
        raise InvalidInput("data", "data is required")
    if not payload.iv:
        raise InvalidInput("iv", "iv is required")
    if not secret or not is_hex_secret(secret):
        raise InvalidInput("secret", "secret must be a hex string of whole bytes")

    key = bytes.fromhex(secret)
    if len(key) != SECRET_BYTES:
        raise InvalidInput(
            "secret", f"secret must decode to {SECRET_BYTES} bytes, got {len(key)}"
        )

    data = _b64decode("data", payload.data)
    iv = _b64decode("iv", payload.iv)

    if len(data) < TAG_LENGTH:
        raise DecodingError(
            "data", f"data must be at least {TAG_LENGTH} bytes, got {len(data)}"
        )
    if not iv:
        raise DecodingError("iv", "iv decodes to zero bytes")

    # AESGCM takes ciphertext || tag, which is exactly the issuer's layout
    try:
        plaintext = AESGCM(key).decrypt(iv, data, associated_data=None)
    except InvalidTag as e:
        raise AuthenticationFailure() from e
    except ValueError as e:
        # AESGCM rejects nonces outside 8..128 bytes
        raise DecodingError("iv", f"unsupported iv length {len(iv)}") from e

    try:
        text = plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodingError("data", "plaintext is not valid UTF-8") from e

    # The issuer pads plaintext; trimming is unconditional for compatibility
    return text.strip()
