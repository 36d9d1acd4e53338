"""chatstream_providers.config.defaults
=====================================

Central place for small, stable default values used across adapters. These
defaults can be overridden via environment variables or an external config
file, but provide sensible fallbacks for local development and tests.

This module intentionally imports nothing from other package modules so it
can be used from anywhere without circular imports. Only plain constants
belong here.
"""

from __future__ import annotations

# ---- OpenAI-style API ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com"
OPENAI_CHAT_PATH = "/v1/chat/completions"
OPENAI_MODELS_PATH = "/v1/models"
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"

# ---- Anthropic-style API ----
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_MESSAGES_PATH = "/v1/messages"
ANTHROPIC_MODELS_PATH = "/v1/models"
ANTHROPIC_DEFAULT_MODEL = "claude-3-5-haiku-20241022"

# ---- OpenAI-compatible gateway (GitHub Models / Azure AI inference) ----
GATEWAY_DEFAULT_BASE_URL = "https://models.inference.ai.azure.com"
GATEWAY_CHAT_PATH = "/chat/completions"
GATEWAY_MODELS_PATH = "/models"
GATEWAY_DEFAULT_MODEL = "gpt-4o"
# "bearer" sends Authorization: Bearer <key>; "api-key" sends an api-key header
GATEWAY_DEFAULT_AUTH_SCHEME = "bearer"
GATEWAY_AUTH_SCHEMES = ("bearer", "api-key")

# ---- Facade ----
DEFAULT_PROVIDER = "openai"
