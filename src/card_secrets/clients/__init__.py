"""HTTP clients for the card issuer API."""

from card_secrets.clients.exceptions import (
    CardNotFound,
    IssuerError,
    IssuerRequestError,
    IssuerResponseError,
    IssuerUnauthorized,
    IssuerUnavailable,
)
from card_secrets.clients.issuer_client import IssuerClient

__all__ = [
    "IssuerClient",
    "IssuerError",
    "IssuerUnavailable",
    "CardNotFound",
    "IssuerUnauthorized",
    "IssuerRequestError",
    "IssuerResponseError",
]
