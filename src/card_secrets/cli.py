"""
Operator script: fetch a card's encrypted PAN and CVC and decrypt them.

Usage:
    CARD_ID="94af0c92-..." card-secrets-reveal

    Reuse an existing session instead of issuing one:
    CARD_ID="..." SESSION_ID="..." SECRET_KEY="..." card-secrets-reveal

    Print the generated SecretKey so the session can be reused later:
    CARD_ID="..." SHOW_SECRET_KEY=true card-secrets-reveal

The SecretKey decrypts every field fetched under its session, so it is only
printed when SHOW_SECRET_KEY is set to a true value.

Issuer settings (API key, base URL, public keys) come from the
CARD_SECRETS_* environment variables, see card_secrets.config.
"""

import asyncio
import os
import sys
from collections.abc import Mapping
from typing import Optional

from card_secrets.clients.exceptions import IssuerError
from card_secrets.clients.issuer_client import IssuerClient
from card_secrets.config import Settings, get_settings
from card_secrets.domain.exceptions import CardSecretsError
from card_secrets.logging_config import configure_logging
from card_secrets.service import CardSecretsService


def _truncate(value: str, length: int = 50) -> str:
    if len(value) <= length:
        return value
    return f"{value[:length]}... (truncated)"


def _is_true(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


async def reveal_card_secrets(
    card_id: str,
    settings: Settings,
    session_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    show_secret_key: bool = False,
) -> int:
    """Run the fetch/decrypt flow and print a report. Returns an exit code."""
    api_key = settings.api_key.get_secret_value()
    if not api_key:
        print("Error: CARD_SECRETS_API_KEY is not set")
        return 1

    async with IssuerClient(settings.api_base_url, api_key, settings.timeout_seconds) as client:
        # Public keys are parsed here so a bad key stops the script up front
        service = CardSecretsService.from_settings(settings, client)

        if not session_id:
            print(f"Issuing session for {service.environment.value}...")
            session = service.new_session()
            session_id, secret_key = session.session_id, session.secret_key
            print("  ✓ Session issued")
            if show_secret_key:
                print(f"  SecretKey (keep this to decrypt with SESSION_ID): {secret_key}")
        elif not secret_key:
            print("Warning: SESSION_ID provided but SECRET_KEY not found.")
            print("  The card data cannot be decrypted without SECRET_KEY.")

        print(f"\nFetching encrypted data for card ID: {card_id}")
        try:
            response = await client.get_card_secrets(card_id, session_id)
        except IssuerError as e:
            print(f"\nError fetching card secrets: {e}")
            return 1

    print("  ✓ Card secrets retrieved")
    print("\nEncrypted card data:")
    print("  PAN:")
    print(f"    IV: {response.encrypted_pan.iv}")
    print(f"    Data: {_truncate(response.encrypted_pan.data)}")
    print("  CVC:")
    print(f"    IV: {response.encrypted_cvc.iv}")
    print(f"    Data: {_truncate(response.encrypted_cvc.data)}")

    if not secret_key:
        print("\nProvide SECRET_KEY (the secret the session was issued with) to decrypt.")
        return 0

    print("\nDecrypting card data...")
    try:
        secrets = CardSecretsService.decrypt_response(response, secret_key)
    except CardSecretsError as e:
        print(f"\nError decrypting card data: {type(e).__name__}: {e}")
        print("  Make sure SECRET_KEY matches the secret used to issue SESSION_ID.")
        return 1

    print("\nDecrypted card details:")
    print(f"  Card Number (PAN): {secrets.pan}")
    print(f"  CVC: {secrets.cvc}")
    print("\nSecurity warning:")
    print("  - Never store decrypted card details")
    print("  - Only request full card details when absolutely necessary")
    print("  - Handle this data in compliance with PCI DSS")
    return 0


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    """Entry point; reads CARD_ID, SESSION_ID, SECRET_KEY and SHOW_SECRET_KEY from environ."""
    environ = os.environ if environ is None else environ

    card_id = environ.get("CARD_ID")
    if not card_id:
        print("Error: CARD_ID environment variable is required")
        print("\nUsage:")
        print('  CARD_ID="your-card-id" card-secrets-reveal')
        print('  CARD_ID="..." SESSION_ID="..." SECRET_KEY="..." card-secrets-reveal')
        return 1

    settings = get_settings()
    configure_logging(settings.log_level, format_as_json=settings.log_json)

    return asyncio.run(
        reveal_card_secrets(
            card_id,
            settings,
            session_id=environ.get("SESSION_ID"),
            secret_key=environ.get("SECRET_KEY"),
            show_secret_key=_is_true(environ.get("SHOW_SECRET_KEY")),
        )
    )


if __name__ == "__main__":
    sys.exit(main())
