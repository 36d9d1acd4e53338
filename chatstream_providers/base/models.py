"""
Provider-agnostic domain models public surface.

Re-exports the one-class-per-file implementations under
``chatstream_providers.base.models_parts``.
"""

from .models_parts.message import DEFAULT_ROLE, Message, Role, normalize_role
from .models_parts.model_info import ModelInfo
from .models_parts.provider_id import ProviderId

__all__ = [
    "DEFAULT_ROLE",
    "Message",
    "Role",
    "normalize_role",
    "ModelInfo",
    "ProviderId",
]
