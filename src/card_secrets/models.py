"""Wire models for the issuer's card secrets endpoint and the decrypted result."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from card_secrets.domain.unwrap import EncryptedFieldPayload


class EncryptedSecret(BaseModel):
    """One encrypted card field as returned by the issuer (JSON format)."""

    model_config = ConfigDict(frozen=True)

    iv: str = Field(..., description="Initialization vector (base64 encoded)")
    data: str = Field(..., description="Ciphertext with trailing GCM tag (base64 encoded)")

    def to_payload(self) -> EncryptedFieldPayload:
        return EncryptedFieldPayload(iv=self.iv, data=self.data)

    def __repr__(self) -> str:
        return f"EncryptedSecret(iv=<{len(self.iv)} chars>, data=<{len(self.data)} chars>)"


class CardSecretsResponse(BaseModel):
    """Response body of GET /issuing/cards/{card_id}/secrets."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    encrypted_pan: EncryptedSecret = Field(..., alias="encryptedPan")
    encrypted_cvc: EncryptedSecret = Field(..., alias="encryptedCvc")


@dataclass(frozen=True)
class CardSecrets:
    """Decrypted card secrets (highly sensitive - PCI scope).

    Never store, cache or log instances. repr() masks both fields so an
    accidental log line cannot leak them.

    Attributes:
        pan: Full card number
        cvc: Card verification code
    """

    pan: str
    cvc: str

    @property
    def last4(self) -> str:
        return self.pan[-4:]

    def __repr__(self) -> str:
        return f"CardSecrets(pan=****{self.last4}, cvc=***)"

    __str__ = __repr__
