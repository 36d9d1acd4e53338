"""OpenAI-compatible gateway adapter."""

from .client import GatewayProvider

__all__ = ["GatewayProvider"]
