"""Exceptions raised by the card issuer HTTP client."""


class IssuerError(Exception):
    """Base exception for issuer API errors."""

    pass


class IssuerUnavailable(IssuerError):
    """
    Raised when the issuer API returns 5xx or cannot be reached.

    This is a RETRYABLE error. Retrying means issuing a new session and
    fetching again; ciphertext from a failed request is never reused.
    """

    pass


class CardNotFound(IssuerError):
    """Raised when the issuer returns 404 for the card. TERMINAL."""

    pass


class IssuerUnauthorized(IssuerError):
    """Raised when the issuer rejects the API key or session (401/403). TERMINAL."""

    pass


class IssuerRequestError(IssuerError):
    """Raised for any other non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)


class IssuerResponseError(IssuerError):
    """Raised when a 2xx response body does not match the expected shape."""

    pass
