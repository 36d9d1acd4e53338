"""Facade and settings snapshot for application callers."""

from .facade import ChatStreamFacade
from .settings import ProviderSettings

__all__ = ["ChatStreamFacade", "ProviderSettings"]
