"""Exceptions raised by the card secret retrieval protocol.

Every failure of the session issuer or the secret unwrapper surfaces as one
of the variants below so callers can branch on the kind of failure instead
of parsing message text. None of the messages ever include key material,
ciphertext or plaintext.
"""


class CardSecretsError(Exception):
    """Base exception for card secret protocol errors."""

    pass


class InvalidInput(CardSecretsError):
    """
    Raised when a precondition on an input is violated.

    ``field`` names the offending input ("secret", "data", "iv",
    "environment") so a malformed issuer response can be told apart from
    malformed local state.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class AuthenticationFailure(CardSecretsError):
    """
    Raised when the GCM authentication tag does not verify.

    Signals tampering, a wrong key, or a protocol mismatch. This is a
    TERMINAL error for the key/payload pair: recovering means issuing a new
    session and fetching fresh ciphertext, never retrying the same pair.
    """

    def __init__(self, message: str = "Authentication tag verification failed") -> None:
        super().__init__(message)


class DecodingError(CardSecretsError):
    """Raised when base64, hex or UTF-8 decoding of a field fails."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class KeyConfigurationError(CardSecretsError):
    """
    Raised when a configured public key cannot be used.

    This is a deployment error. It should abort process startup and is
    never retried per request.
    """

    def __init__(self, environment: str, message: str) -> None:
        self.environment = environment
        super().__init__(f"{environment} public key: {message}")
