"""Configuration management for the card secrets client."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from card_secrets.domain.exceptions import KeyConfigurationError
from card_secrets.domain.session import Environment, PublicKeyConfiguration

# Issuer-published SessionId public keys. Override through the environment
# when the issuer rotates them.
DEFAULT_SANDBOX_PUBLIC_KEY = """-----BEGIN PUBLIC KEY-----
MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQCAP192809jZyaw62g/eTzJ3P9H
+RmT88sXUYjQ0K8Bx+rJ83f22+9isKx+lo5UuV8tvOlKwvdDS/pVbzpG7D7NO45c
0zkLOXwDHZkou8fuj8xhDO5Tq3GzcrabNLRLVz3dkx0znfzGOhnY4lkOMIdKxlQb
LuVM/dGDC9UpulF+UwIDAQAB
-----END PUBLIC KEY-----"""

DEFAULT_PRODUCTION_PUBLIC_KEY = """-----BEGIN PUBLIC KEY-----
MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQCeZ9uCoxi2XvOw1VmvVLo88TLk
GE+OO1j3fa8HhYlJZZ7CCIAsaCorrU+ZpD5PUTnmME3DJk+JyY1BB3p8XI+C5uno
QucrbxFbkM1lgR10ewz/LcuhleG0mrXL/bzUZbeJqI6v3c9bXvLPKlsordPanYBG
FZkmBPxc8QEdRgH4awIDAQAB
-----END PUBLIC KEY-----"""


class Settings(BaseSettings):
    """Application settings loaded from CARD_SECRETS_* environment variables."""

    # Issuer API
    api_base_url: str = Field(
        default="https://api-dev.raincards.xyz/v1",
        description="Card issuer API base URL",
    )
    api_key: SecretStr = Field(default=SecretStr(""), description="Issuer API key")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Request timeout")

    # Explicit override; inferred from api_base_url when unset
    environment: Environment | None = Field(default=None)

    # SessionId public keys
    sandbox_public_key: str = Field(default=DEFAULT_SANDBOX_PUBLIC_KEY)
    production_public_key: str = Field(default=DEFAULT_PRODUCTION_PUBLIC_KEY)
    sandbox_public_key_file: Path | None = Field(default=None)
    production_public_key_file: Path | None = Field(default=None)

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="CARD_SECRETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    @model_validator(mode="after")
    def read_public_key_files(self) -> "Settings":
        """Replace inline PEM values with file contents when paths are set."""
        for env, attr in (
            (Environment.SANDBOX, "sandbox_public_key"),
            (Environment.PRODUCTION, "production_public_key"),
        ):
            path = getattr(self, f"{attr}_file")
            if path is None:
                continue
            try:
                pem = path.read_text(encoding="utf-8")
            except OSError as e:
                raise KeyConfigurationError(env.value, f"cannot read {path}: {e}") from e
            setattr(self, attr, pem)
        return self

    def resolved_environment(self) -> Environment:
        """Return the explicit environment or infer it from api_base_url."""
        if self.environment is not None:
            return self.environment
        return Environment.from_base_url(self.api_base_url)


def load_public_keys(settings: Settings) -> PublicKeyConfiguration:
    """Parse both configured public keys.

    Call at startup: a KeyConfigurationError here should stop the process.
    """
    return PublicKeyConfiguration(
        sandbox_pem=settings.sandbox_public_key,
        production_pem=settings.production_public_key,
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
