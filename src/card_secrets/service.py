"""Card secrets service: issue a session, fetch, and decrypt.

This is the orchestration layer around the protocol core. It owns no
state beyond its collaborators and never caches decrypted values.
"""

from typing import Optional, Union

import structlog

from card_secrets.clients.issuer_client import IssuerClient
from card_secrets.config import Settings, load_public_keys
from card_secrets.domain.session import (
    Environment,
    PublicKeyConfiguration,
    SessionCredentials,
    issue_session_token,
)
from card_secrets.domain.unwrap import decrypt_field
from card_secrets.models import CardSecrets, CardSecretsResponse

logger = structlog.get_logger(__name__)


class CardSecretsService:
    """Reveal card secrets for operators.

    Example:
        >>> async with IssuerClient(base_url, api_key) as client:
        ...     service = CardSecretsService(client, keys, Environment.SANDBOX)
        ...     secrets = await service.reveal("94af0c92-...")
        ...     secrets.last4
        '4242'
    """

    def __init__(
        self,
        client: IssuerClient,
        keys: PublicKeyConfiguration,
        environment: Union[Environment, str],
    ) -> None:
        self.client = client
        self.keys = keys
        self.environment = Environment.parse(environment)

    @classmethod
    def from_settings(cls, settings: Settings, client: IssuerClient) -> "CardSecretsService":
        """Build a service from settings, parsing the public keys eagerly."""
        return cls(
            client=client,
            keys=load_public_keys(settings),
            environment=settings.resolved_environment(),
        )

    def new_session(self, secret: Optional[str] = None) -> SessionCredentials:
        """Issue a session for this service's environment.

        secret is for tests only; production callers never pass it.
        """
        return issue_session_token(self.environment, secret, keys=self.keys)

    async def reveal(self, card_id: str, *, secret: Optional[str] = None) -> CardSecrets:
        """Fetch and decrypt a card's PAN and CVC under a fresh session.

        Raises:
            IssuerError: From the client, see IssuerClient.get_card_secrets
            CardSecretsError: From the protocol core; AuthenticationFailure
                must be answered with a new reveal(), never a retry of
                the same payload
        """
        session = self.new_session(secret)
        response = await self.client.get_card_secrets(card_id, session.session_id)
        secrets = self.decrypt_response(response, session.secret_key)

        logger.info(
            "card_secrets_revealed",
            card_id=card_id,
            environment=self.environment.value,
            card_last4=secrets.last4,
        )
        return secrets

    @staticmethod
    def decrypt_response(response: CardSecretsResponse, secret: str) -> CardSecrets:
        """Decrypt an already-fetched response with the session's secret."""
        pan = decrypt_field(response.encrypted_pan.to_payload(), secret)
        cvc = decrypt_field(response.encrypted_cvc.to_payload(), secret)
        return CardSecrets(pan=pan, cvc=cvc)
