"""Provider configuration lookup.

``get_provider_config(name)`` folds several layers into one dict, later
layers winning:

1. built-in defaults (``DEFAULTS``)
2. the section named after the provider in the file at
   ``CHATSTREAM_CONFIG_FILE`` (JSON, or YAML when it is not JSON)
3. ``<PROVIDER>_MODEL``, ``_API_KEY``, ``_BASE_URL``, ``_SYSTEM_MESSAGE``
   and ``_AUTH_SCHEME`` environment variables
4. credential aliases such as ``GITHUB_TOKEN`` (only when no key is set yet)
5. explicit overrides from the caller (``None`` values are skipped)

Before the first lookup a ``.env`` file (``DOTENV_FILE``, default ``.env``)
is applied once. A config file such as::

    openai:
      model: gpt-4o-mini
    gateway:
      auth_scheme: api-key
      base_url: https://models.inference.ai.azure.com

is read once per path. Nothing here writes settings back.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MODEL,
    GATEWAY_DEFAULT_AUTH_SCHEME,
    GATEWAY_DEFAULT_BASE_URL,
    GATEWAY_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
)
from .env import load_dotenv, resolve_provider_key

CONFIG_FILE_ENV = "CHATSTREAM_CONFIG_FILE"
DOTENV_FILE_ENV = "DOTENV_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "anthropic": {"model": ANTHROPIC_DEFAULT_MODEL, "base_url": ANTHROPIC_DEFAULT_BASE_URL},
    "gateway": {
        "model": GATEWAY_DEFAULT_MODEL,
        "base_url": GATEWAY_DEFAULT_BASE_URL,
        "auth_scheme": GATEWAY_DEFAULT_AUTH_SCHEME,
    },
}

# config key -> environment variable suffix
ENV_FIELD_MAP: Dict[str, str] = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "system_message": "SYSTEM_MESSAGE",
    "auth_scheme": "AUTH_SCHEME",
}

_file_cache: Optional[Tuple[str, Dict[str, Any]]] = None
_dotenv_applied = False


def reset_config_cache() -> None:
    """Forget the parsed config file and allow ``.env`` to be applied again."""
    global _file_cache, _dotenv_applied
    _file_cache = None
    _dotenv_applied = False


def _apply_dotenv() -> None:
    global _dotenv_applied
    if not _dotenv_applied:
        _dotenv_applied = True
        load_dotenv(os.getenv(DOTENV_FILE_ENV, ".env"))


def _parse(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            return {}
    return data if isinstance(data, dict) else {}


def _file_layer(provider: str) -> Dict[str, Any]:
    global _file_cache
    path = os.getenv(CONFIG_FILE_ENV) or ""
    if _file_cache is None or _file_cache[0] != path:
        source = Path(path) if path else None
        parsed = _parse(source.read_text(encoding="utf-8")) if source and source.is_file() else {}
        _file_cache = (path, parsed)
    section = _file_cache[1].get(provider)
    return dict(section) if isinstance(section, dict) else {}


def _env_layer(provider: str) -> Dict[str, Any]:
    prefix = provider.upper()
    layer: Dict[str, Any] = {}
    for key, suffix in ENV_FIELD_MAP.items():
        value = os.getenv(f"{prefix}_{suffix}")
        if value is not None:
            layer[key] = value
    return layer


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged configuration dict for ``provider`` (case-insensitive)."""
    _apply_dotenv()
    name = (provider or "").strip().lower()
    cfg: Dict[str, Any] = dict(DEFAULTS.get(name, {}))
    cfg.update(_file_layer(name))
    cfg.update(_env_layer(name))
    if not cfg.get("api_key"):
        alias_value, _ = resolve_provider_key(name)
        if alias_value:
            cfg["api_key"] = alias_value
    if overrides:
        cfg.update((k, v) for k, v in overrides.items() if v is not None)
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
    "CONFIG_FILE_ENV",
]
