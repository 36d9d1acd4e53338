"""
Settings snapshot handed to the facade by an external settings store.

The core never reads or persists settings itself; the owning application
loads them (from disk, a keychain, a UI form) and passes a
``ProviderSettings`` instance to ``ChatStreamFacade.apply_settings``.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..base.models import ProviderId
from ..config.defaults import DEFAULT_PROVIDER


class ProviderSettings(BaseModel):
    """Active provider selection plus one credential per provider.

    Attributes:
        provider: The provider new requests are routed to.
        credentials: Credential per provider. An empty entry clears the
            adapter's credential; a missing entry leaves it untouched.
        model: Preferred model identifier; ``None`` uses the adapter default.
        system_message: Preferred system prompt; ``None`` or empty omits it.
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderId = ProviderId(DEFAULT_PROVIDER)
    credentials: Dict[ProviderId, str] = Field(default_factory=dict)
    model: Optional[str] = None
    system_message: Optional[str] = None

    @field_validator("provider", mode="before")
    @classmethod
    def _parse_provider(cls, value):
        return ProviderId.parse(value)

    @field_validator("credentials", mode="before")
    @classmethod
    def _parse_credentials(cls, value):
        if value is None:
            return {}
        return {ProviderId.parse(k): ("" if v is None else str(v).strip()) for k, v in dict(value).items()}

    @property
    def current_credential(self) -> str:
        """Credential stored for the selected provider (``""`` when absent)."""
        return self.credentials.get(self.provider, "")


__all__ = ["ProviderSettings"]
