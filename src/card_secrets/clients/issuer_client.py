"""Card issuer API client for fetching encrypted card secrets."""

import uuid

import httpx
import structlog
from pydantic import ValidationError

from card_secrets.clients.exceptions import (
    CardNotFound,
    IssuerRequestError,
    IssuerResponseError,
    IssuerUnauthorized,
    IssuerUnavailable,
)
from card_secrets.models import CardSecretsResponse

logger = structlog.get_logger(__name__)


class IssuerClient:
    """
    Client for the card issuer's encrypted card secrets endpoint.

    The client only moves ciphertext: it sends an already-issued session
    token in the SessionId header and returns the encrypted PAN and CVC.
    Decryption happens in the caller with the session's secret.

    Neither the API key, the session token nor response bodies are logged.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 10.0,
    ):
        """
        Initialize the issuer client.

        Args:
            base_url: Issuer API base URL (e.g., "https://api-dev.raincards.xyz/v1")
            api_key: Issuer API key sent in the Api-Key header
            timeout_seconds: Request timeout in seconds (default: 10.0)

        Raises:
            ValueError: If api_key is empty
        """
        if not api_key:
            raise ValueError("api_key cannot be empty")

        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.http_client = httpx.AsyncClient(timeout=timeout_seconds)

        logger.info(
            "issuer_client_initialized",
            base_url=self.base_url,
            timeout_seconds=timeout_seconds,
        )

    async def close(self) -> None:
        """Close the HTTP client connection pool."""
        await self.http_client.aclose()

    async def get_card_secrets(self, card_id: str, session_id: str) -> CardSecretsResponse:
        """
        Fetch a card's PAN and CVC encrypted under the session's secret.

        Args:
            card_id: Issuer card identifier
            session_id: Session token from issue_session_token

        Returns:
            CardSecretsResponse with the encrypted PAN and CVC

        Raises:
            ValueError: If card_id or session_id is empty
            CardNotFound: 404 (TERMINAL)
            IssuerUnauthorized: 401/403 (TERMINAL)
            IssuerUnavailable: 5xx, timeout or transport error (RETRYABLE)
            IssuerRequestError: Any other non-2xx status
            IssuerResponseError: 2xx with an unexpected body
        """
        if not card_id:
            raise ValueError("card_id cannot be empty")
        if not session_id:
            raise ValueError("session_id cannot be empty")

        correlation_id = str(uuid.uuid4())
        url = f"{self.base_url}/issuing/cards/{card_id}/secrets"

        logger.info(
            "card_secrets_request",
            card_id=card_id,
            correlation_id=correlation_id,
        )

        try:
            response = await self.http_client.get(
                url,
                headers={
                    "Api-Key": self._api_key,
                    "SessionId": session_id,
                    "Content-Type": "application/json",
                    "X-Request-ID": correlation_id,
                },
            )
        except httpx.TimeoutException as e:
            logger.error(
                "issuer_timeout",
                card_id=card_id,
                correlation_id=correlation_id,
            )
            raise IssuerUnavailable("Issuer API timeout") from e
        except httpx.RequestError as e:
            logger.error(
                "issuer_request_error",
                card_id=card_id,
                correlation_id=correlation_id,
                error=type(e).__name__,
            )
            raise IssuerUnavailable(f"Issuer API request error: {type(e).__name__}") from e

        status = response.status_code

        if status == 404:
            logger.warning("card_not_found", card_id=card_id, correlation_id=correlation_id)
            raise CardNotFound(f"Card {card_id} not found")

        elif status in (401, 403):
            logger.warning(
                "issuer_unauthorized",
                card_id=card_id,
                status_code=status,
                correlation_id=correlation_id,
            )
            raise IssuerUnauthorized(f"Issuer rejected request (status: {status})")

        elif status >= 500:
            logger.error(
                "issuer_service_error",
                status_code=status,
                correlation_id=correlation_id,
            )
            raise IssuerUnavailable(f"Issuer API unavailable (status: {status})")

        elif status < 200 or status >= 300:
            logger.warning(
                "issuer_request_rejected",
                status_code=status,
                correlation_id=correlation_id,
            )
            raise IssuerRequestError(status, f"Issuer API error (status: {status})")

        try:
            secrets_response = CardSecretsResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(
                "issuer_response_invalid",
                card_id=card_id,
                correlation_id=correlation_id,
            )
            raise IssuerResponseError("Issuer returned a malformed card secrets body") from e

        logger.info(
            "card_secrets_received",
            card_id=card_id,
            correlation_id=correlation_id,
        )
        return secrets_response

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
