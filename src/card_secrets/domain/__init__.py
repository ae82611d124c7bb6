"""Card secrets domain layer.

This package contains the protocol core: the session key issuer, the
secret unwrapper, and the error taxonomy they share. It performs no I/O.
"""

from card_secrets.domain.exceptions import (
    AuthenticationFailure,
    CardSecretsError,
    DecodingError,
    InvalidInput,
    KeyConfigurationError,
)
from card_secrets.domain.secret import generate_secret, validate_secret
from card_secrets.domain.session import (
    Environment,
    PublicKeyConfiguration,
    SessionCredentials,
    issue_session_token,
)
from card_secrets.domain.unwrap import EncryptedFieldPayload, decrypt_field

__all__ = [
    # Session issuer
    "Environment",
    "PublicKeyConfiguration",
    "SessionCredentials",
    "issue_session_token",
    "generate_secret",
    "validate_secret",
    # Unwrapper
    "EncryptedFieldPayload",
    "decrypt_field",
    # Exceptions
    "CardSecretsError",
    "InvalidInput",
    "AuthenticationFailure",
    "DecodingError",
    "KeyConfigurationError",
]
