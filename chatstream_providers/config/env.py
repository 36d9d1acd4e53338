"""Environment variable names for provider credentials, and a ``.env`` reader.

``ENV_MAP`` holds the canonical variable per provider. ``ENV_ALIASES`` lists
fallbacks in lookup order; the gateway also accepts ``GITHUB_TOKEN`` (GitHub
Models).

Nothing here raises for unknown providers or unset variables.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gateway": "GATEWAY_API_KEY",
}

# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gateway": ("GATEWAY_API_KEY", "GITHUB_TOKEN"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder/test credential.

    Heuristics: contains 'placeholder', 'changeme' or 'example', or starts
    with 'test_'. Case-insensitive, tolerant of surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical credential env var for a provider (or ``None``)."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable credential env var names, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def load_dotenv(path: str) -> Dict[str, str]:
    """Read ``KEY=VALUE`` lines from ``path`` into ``os.environ``.

    Variables that are already set keep their value unless it looks like a
    placeholder. Returns the entries that were applied; a missing file gives
    an empty mapping.
    """
    applied: Dict[str, str] = {}
    if not os.path.isfile(path):
        return applied
    with open(path, "r", encoding="utf-8") as fh:
        for raw in fh:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            name, sep, value = line.partition("=")
            name = name.strip()
            if not sep or not name:
                continue
            current = os.environ.get(name)
            if current is None or is_placeholder(current):
                applied[name] = os.environ[name] = value.strip().strip("\"'")
    return applied


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve a credential from the process environment.

    Returns:
        ``(value, env_var_used)`` for the first non-empty candidate, or
        ``(None, None)`` when nothing is set.
    """
    for name in get_env_var_candidates(provider):
        if val := os.environ.get(name):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
    "load_dotenv",
]
