"""Session key issuer for the card secrets protocol.

A session is established by generating a fresh 128-bit symmetric secret and
encrypting it under the card issuer's RSA public key. The resulting session
token travels to the issuer in the ``SessionId`` header; the issuer decrypts
it with its private key and encrypts the requested card fields under the
symmetric secret.

The encoding chain is fixed by the issuer and must not change:

    hex secret -> raw bytes -> base64 text -> UTF-8 bytes
               -> RSA-OAEP ciphertext -> base64 text
"""

import base64
from enum import Enum
from typing import NamedTuple, Optional, Union
from urllib.parse import urlparse

import structlog
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from card_secrets.domain.exceptions import InvalidInput, KeyConfigurationError
from card_secrets.domain.secret import generate_secret, secret_to_base64, validate_secret

logger = structlog.get_logger(__name__)

PRODUCTION_API_HOST = "api.raincards.xyz"


class Environment(str, Enum):
    """Issuer environment; selects which public key encrypts the session."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: Union["Environment", str]) -> "Environment":
        """Coerce a string to an Environment.

        Raises:
            InvalidInput: If value is not one of the two environments
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise InvalidInput(
                "environment",
                f"environment must be one of {[env.value for env in cls]}",
            ) from e

    @classmethod
    def from_base_url(cls, base_url: str) -> "Environment":
        """Infer the environment from the issuer API base URL.

        Only the production host selects production; every other host,
        including the development host, is treated as sandbox.
        """
        host = (urlparse(base_url).hostname or "").lower()
        if host == PRODUCTION_API_HOST:
            return cls.PRODUCTION
        return cls.SANDBOX


class SessionCredentials(NamedTuple):
    """A symmetric secret and the session token that proves it.

    Attributes:
        secret_key: 32-character hex secret, kept locally for decryption
        session_id: Base64 RSA-OAEP ciphertext sent as the SessionId header
    """

    secret_key: str
    session_id: str

    def __repr__(self) -> str:
        return "SessionCredentials(secret_key=<redacted>, session_id=<redacted>)"


def _load_rsa_public_key(
    environment: Environment, pem: Union[str, bytes]
) -> rsa.RSAPublicKey:
    if not pem:
        raise KeyConfigurationError(environment.value, "no PEM data configured")

    pem_bytes = pem.encode("utf-8") if isinstance(pem, str) else pem
    try:
        key = serialization.load_pem_public_key(pem_bytes)
    except (ValueError, TypeError) as e:
        raise KeyConfigurationError(environment.value, f"unparseable PEM ({e})") from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyConfigurationError(
            environment.value, f"expected an RSA key, got {type(key).__name__}"
        )
    return key


class PublicKeyConfiguration:
    """Issuer RSA public keys, one per environment.

    Both keys are parsed when the configuration is built so a bad key fails
    process startup rather than the first request. Instances are immutable.
    """

    __slots__ = ("_keys",)

    def __init__(
        self,
        sandbox_pem: Union[str, bytes],
        production_pem: Union[str, bytes],
    ) -> None:
        keys = {
            Environment.SANDBOX: _load_rsa_public_key(Environment.SANDBOX, sandbox_pem),
            Environment.PRODUCTION: _load_rsa_public_key(
                Environment.PRODUCTION, production_pem
            ),
        }
        object.__setattr__(self, "_keys", keys)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("PublicKeyConfiguration is immutable")

    def for_environment(self, environment: Union[Environment, str]) -> rsa.RSAPublicKey:
        """Return the public key bound to environment."""
        return self._keys[Environment.parse(environment)]


def _oaep() -> padding.OAEP:
    # MGF1/SHA-1 with SHA-1 digest and no label is what the issuer decrypts with
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA1()),
        algorithm=hashes.SHA1(),
        label=None,
    )


def issue_session_token(
    environment: Union[Environment, str],
    secret: Optional[str] = None,
    *,
    keys: PublicKeyConfiguration,
) -> SessionCredentials:
    """Issue a new session for the card issuer.

    Args:
        environment: Which issuer environment's public key to encrypt under
        secret: Fixed 32-character hex secret. TESTING ONLY: production code
            must leave this unset so the secret is unpredictable.
        keys: Configured issuer public keys

    Returns:
        SessionCredentials holding the hex secret and the session token

    Raises:
        InvalidInput: If secret is supplied but is not a hex string, or the
            environment is unknown
        KeyConfigurationError: If the selected public key cannot encrypt
    """
    env = Environment.parse(environment)

    if secret is not None:
        secret_key = validate_secret(secret)
    else:
        secret_key = generate_secret()

    public_key = keys.for_environment(env)
    message = secret_to_base64(secret_key).encode("utf-8")

    try:
        ciphertext = public_key.encrypt(message, _oaep())
    except ValueError as e:
        # Only reachable with a key too small for OAEP over the message
        raise KeyConfigurationError(env.value, f"encryption failed ({e})") from e

    logger.debug(
        "session_token_issued",
        environment=env.value,
        key_size=public_key.key_size,
        fixed_secret=secret is not None,
    )
    return SessionCredentials(
        secret_key=secret_key,
        session_id=base64.b64encode(ciphertext).decode("ascii"),
    )
