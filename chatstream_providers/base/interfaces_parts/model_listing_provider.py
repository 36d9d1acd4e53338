"""ModelListingProvider Protocol (single-class module).

Interface for adapters that can report the models available to them.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from ..models import ModelInfo


@runtime_checkable
class ModelListingProvider(Protocol):
    """Interface to obtain the list of models for a provider."""

    async def list_models(self, refresh: bool = False) -> List[ModelInfo]:
        """Return the models offered by this provider.

        ``refresh=False`` returns the built-in catalog and never fails.
        ``refresh=True`` queries the provider listing endpoint and raises
        ``ProviderError`` on failure.
        """
        ...
