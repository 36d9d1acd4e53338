"""
ModelInfo DTO for provider model listings.

Represents a single model entry returned by a provider's listing endpoint or
by the built-in catalog for providers without one.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ModelInfo:
    """A single model listing entry.

    Attributes:
        id: Model identifier sent verbatim in requests.
        name: Human-friendly display name.
        provider: Provider key owning this model.
        owned_by: Optional owner reported by the listing endpoint.
    """

    id: str
    name: str
    provider: str
    owned_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the entry."""
        return asdict(self)


__all__ = ["ModelInfo"]
