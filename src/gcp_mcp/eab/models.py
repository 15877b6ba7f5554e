"""EAB credential record and the Public CA wire models."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gcp_mcp.errors import ConfigError
from gcp_mcp.utils.time import from_unix_seconds


@dataclass(frozen=True)
class EabCredential:
    """External Account Binding credential.

    ``secret`` always holds the raw HMAC key bytes. ``created_at`` is stamped
    locally once the response has been decoded; the Public CA API does not
    report a creation time, so this approximates it and is not authoritative.
    """

    key_id: str
    name: str
    secret: bytes
    created_at: datetime

    def __repr__(self) -> str:
        return (
            f"EabCredential(key_id={self.key_id!r}, name={self.name!r}, "
            f"secret=***, created_at={self.created_at.isoformat()})"
        )

    @property
    def hmac_base64(self) -> str:
        return base64.b64encode(self.secret).decode("ascii")

    def to_state(self) -> dict[str, object]:
        return {
            "key_id": self.key_id,
            "name": self.name,
            "hmac_base64": self.hmac_base64,
            "create_at": int(self.created_at.timestamp()),
        }

    @classmethod
    def from_state(cls, state: Mapping[str, object]) -> "EabCredential":
        """Rebuild a credential from its persisted attributes."""
        try:
            secret = base64.b64decode(str(state["hmac_base64"]), validate=True)
        except KeyError as exc:
            raise ConfigError(f"EAB state is missing {exc.args[0]!r}") from exc
        except (binascii.Error, ValueError) as exc:
            raise ConfigError(f"EAB state carries invalid hmac_base64: {exc}") from exc
        raw_created = state.get("create_at")
        if not isinstance(raw_created, (int, float, str)):
            raise ConfigError("EAB state is missing 'create_at'")
        try:
            created_at = from_unix_seconds(int(raw_created))
        except (ValueError, OverflowError, OSError) as exc:
            raise ConfigError(f"EAB state carries invalid create_at: {exc}") from exc
        return cls(
            key_id=str(state.get("key_id", "")),
            name=str(state.get("name", "")),
            secret=secret,
            created_at=created_at,
        )


class ServiceAccountKey(BaseModel):
    """Service account key file; only ``project_id`` is needed here."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    project_id: str = Field(min_length=1)
    private_key_id: str | None = None
    private_key: str | None = None
    client_email: str | None = None
    client_id: str | None = None
    token_uri: str | None = None


class ExternalAccountKey(BaseModel):
    """``externalAccountKeys`` request/response body."""

    model_config = ConfigDict(populate_by_name=True)

    key_id: str = Field(alias="keyId")
    name: str = Field(alias="name")
    b64_mac_key: str = Field(alias="b64MacKey")

    @classmethod
    def for_rotation(cls, prior: EabCredential) -> "ExternalAccountKey":
        # Re-encode the raw secret bytes, never a textual rendering of them.
        return cls(
            key_id=prior.key_id,
            name=prior.name,
            b64_mac_key=base64.b64encode(prior.secret).decode("ascii"),
        )
