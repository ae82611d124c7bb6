"""Test helpers that play the issuer's side of the protocol."""

import base64
import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from card_secrets.domain.unwrap import EncryptedFieldPayload

# Concrete scenario values
SCENARIO_SECRET = "000102030405060708090a0b0c0d0e0f"
SCENARIO_IV = "AAAAAAAAAAAAAAAA"
SCENARIO_PAN = "4242424242424242"


def issuer_decrypt_session(private_key: rsa.RSAPrivateKey, session_id: str) -> str:
    """Decrypt a session token the way the issuer does.

    Returns the base64 text of the symmetric secret's bytes.
    """
    plaintext = private_key.decrypt(
        base64.b64decode(session_id),
        padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA1()),
            algorithm=hashes.SHA1(),
            label=None,
        ),
    )
    return plaintext.decode("utf-8")


def issuer_encrypt_field(
    plaintext: str,
    secret: str,
    iv: bytes | None = None,
) -> EncryptedFieldPayload:
    """Encrypt a card field the way the issuer does: AES-GCM, tag appended."""
    iv = iv if iv is not None else os.urandom(12)
    data = AESGCM(bytes.fromhex(secret)).encrypt(iv, plaintext.encode("utf-8"), None)
    return EncryptedFieldPayload(
        iv=base64.b64encode(iv).decode("ascii"),
        data=base64.b64encode(data).decode("ascii"),
    )
