"""Card secrets: retrieve and decrypt issued card PAN and CVC."""

from card_secrets.domain import (
    AuthenticationFailure,
    CardSecretsError,
    DecodingError,
    EncryptedFieldPayload,
    Environment,
    InvalidInput,
    KeyConfigurationError,
    PublicKeyConfiguration,
    SessionCredentials,
    decrypt_field,
    issue_session_token,
)

__version__ = "0.1.0"

__all__ = [
    "AuthenticationFailure",
    "CardSecretsError",
    "DecodingError",
    "EncryptedFieldPayload",
    "Environment",
    "InvalidInput",
    "KeyConfigurationError",
    "PublicKeyConfiguration",
    "SessionCredentials",
    "decrypt_field",
    "issue_session_token",
]
