"""Built-in model catalogs per provider.

Used when a provider's listing endpoint is not consulted and as the source of
each provider's default model. Identifiers are passed verbatim to the
provider. The catalog is informational and never used to validate a model
locally.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from ..base.models import ModelInfo
from .defaults import ANTHROPIC_DEFAULT_MODEL, GATEWAY_DEFAULT_MODEL, OPENAI_DEFAULT_MODEL

# provider -> ordered (id, display name) pairs
_CATALOG: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "openai": (
        ("gpt-4o-mini", "GPT-4o Mini"),
        ("gpt-3.5-turbo", "GPT-3.5 Turbo"),
    ),
    "anthropic": (
        ("claude-3-5-haiku-20241022", "Claude 3.5 Haiku"),
        ("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet"),
        ("claude-3-opus-20240229", "Claude 3 Opus"),
    ),
    "gateway": (
        ("AI21-Jamba-1.5-Large", "AI21 Jamba 1.5 Large"),
        ("AI21-Jamba-1.5-Mini", "AI21 Jamba 1.5 Mini"),
        ("Cohere-command-r", "Cohere Command R"),
        ("Cohere-command-r-08-2024", "Cohere Command R 08-2024"),
        ("Cohere-command-r-plus", "Cohere Command R+"),
        ("Cohere-command-r-plus-08-2024", "Cohere Command R+ 08-2024"),
        ("jais-30b-chat", "JAIS 30b Chat"),
        ("Llama-3.2-11B-Vision-Instruct", "Llama-3.2-11B-Vision-Instruct"),
        ("Llama-3.2-90B-Vision-Instruct", "Llama-3.2-90B-Vision-Instruct"),
        ("Llama-3.3-70B-Instruct", "Llama-3.3-70B-Instruct"),
        ("Meta-Llama-3-70B-Instruct", "Meta-Llama-3-70B-Instruct"),
        ("Meta-Llama-3-8B-Instruct", "Meta-Llama-3-8B-Instruct"),
        ("Meta-Llama-3.1-405B-Instruct", "Meta-Llama-3.1-405B-Instruct"),
        ("Meta-Llama-3.1-70B-Instruct", "Meta-Llama-3.1-70B-Instruct"),
        ("Meta-Llama-3.1-8B-Instruct", "Meta-Llama-3.1-8B-Instruct"),
        ("Ministral-3B", "Ministral 3B"),
        ("Mistral-large", "Mistral Large"),
        ("Mistral-large-2407", "Mistral Large (2407)"),
        ("Mistral-Large-2411", "Mistral Large 24.11"),
        ("Mistral-Nemo", "Mistral Nemo"),
        ("Mistral-small", "Mistral Small"),
        ("gpt-4o", "OpenAI GPT-4o"),
        ("gpt-4o-mini", "OpenAI GPT-4o mini"),
        ("o1-mini", "OpenAI o1-mini"),
        ("o1-preview", "OpenAI o1-preview"),
        ("Phi-3-medium-128k-instruct", "Phi-3-medium instruct (128k)"),
        ("Phi-3-medium-4k-instruct", "Phi-3-medium instruct (4k)"),
        ("Phi-3-mini-128k-instruct", "Phi-3-mini instruct (128k)"),
        ("Phi-3-mini-4k-instruct", "Phi-3-mini instruct (4k)"),
        ("Phi-3-small-128k-instruct", "Phi-3-small instruct (128k)"),
        ("Phi-3-small-8k-instruct", "Phi-3-small instruct (8k)"),
        ("Phi-3.5-mini-instruct", "Phi-3.5-mini instruct (128k)"),
        ("Phi-3.5-MoE-instruct", "Phi-3.5-MoE instruct (128k)"),
        ("Phi-3.5-vision-instruct", "Phi-3.5-vision instruct (128k)"),
    ),
}

_DEFAULT_MODELS: Dict[str, str] = {
    "openai": OPENAI_DEFAULT_MODEL,
    "anthropic": ANTHROPIC_DEFAULT_MODEL,
    "gateway": GATEWAY_DEFAULT_MODEL,
}


def catalog_models(provider: str) -> List[ModelInfo]:
    """Return the built-in catalog for ``provider`` (empty for unknown providers)."""
    name = (provider or "").lower().strip()
    return [ModelInfo(id=mid, name=label, provider=name) for mid, label in _CATALOG.get(name, ())]


def default_model_for(provider: str) -> str | None:
    """Return the built-in default model identifier for ``provider``."""
    return _DEFAULT_MODELS.get((provider or "").lower().strip())


__all__ = ["catalog_models", "default_model_for"]
