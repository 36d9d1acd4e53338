"""HTTP utilities package for adapters.

Exposes the per-adapter httpx client factory, the endpoint builder and the
prepared request value object.
"""

from .client import build_endpoint, create_async_client
from .request import PreparedRequest

__all__ = ["build_endpoint", "create_async_client", "PreparedRequest"]
