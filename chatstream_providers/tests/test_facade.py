"""Unified facade routing, settings application and lifecycle."""

from __future__ import annotations

import asyncio
import json

import pytest
from pydantic import ValidationError

from chatstream_providers import ChatStreamFacade, ProviderSettings
from chatstream_providers.anthropic import AnthropicProvider
from chatstream_providers.base.errors import ErrorCode, ProviderError
from chatstream_providers.base.models import Message, ProviderId
from chatstream_providers.base.streaming import collect_text
from chatstream_providers.gateway import GatewayProvider
from chatstream_providers.openai import OpenAIProvider


@pytest.fixture()
def wired(sse_body, transport_for):
    """Facade with one recording transport per provider."""
    transports = {
        "openai": transport_for(sse_body({"choices": [{"delta": {"content": "from-openai"}}]}, "data: [DONE]")),
        "anthropic": transport_for(
            sse_body({"type": "content_block_delta", "delta": {"text": "from-anthropic"}}, {"type": "message_stop"})
        ),
        "gateway": transport_for(sse_body({"choices": [{"delta": {"content": "from-gateway"}}]}, "data: [DONE]")),
    }
    facade = ChatStreamFacade(
        adapter_options={name: {"transport": t} for name, t in transports.items()},
    )
    return facade, transports


def test_routes_to_active_provider(wired):
    facade, transports = wired

    async def main():
        out = []
        for provider in ("openai", "anthropic", "gateway"):
            facade.select_provider(provider)
            facade.update_credential(f"{provider}-credential-value")
            out.append(await collect_text(facade.stream_completion([Message("user", "hi")])))
        await facade.aclose()
        return out

    assert asyncio.run(main()) == ["from-openai", "from-anthropic", "from-gateway"]  # nosec B101 - asserts are fine in tests
    assert all(len(t.requests) == 1 for t in transports.values())  # nosec B101 - asserts are fine in tests


def test_none_model_uses_adapter_default(wired):
    facade, transports = wired
    facade.select_provider(ProviderId.ANTHROPIC)
    facade.update_credential("anthropic-credential")

    async def main():
        await collect_text(facade.stream_completion([Message("user", "x")], None, "sys"))
        await collect_text(facade.stream_completion([Message("user", "x")], "claude-3-opus-20240229"))
        await facade.aclose()

    asyncio.run(main())
    models = [json.loads(r.content)["model"] for r in transports["anthropic"].requests]
    assert models == ["claude-3-5-haiku-20241022", "claude-3-opus-20240229"]  # nosec B101 - asserts are fine in tests


def test_apply_settings_selects_provider_and_pushes_credentials(wired):
    facade, transports = wired
    settings = ProviderSettings(
        provider="gateway",
        credentials={"openai": "sk-openai-value", "gateway": "ghp_gateway_value", "anthropic": ""},
    )
    facade.apply_settings(settings)
    assert facade.active_provider is ProviderId.GATEWAY  # nosec B101 - asserts are fine in tests
    assert settings.current_credential == "ghp_gateway_value"  # nosec B101 - asserts are fine in tests
    assert facade.adapter("openai").has_credential  # nosec B101 - asserts are fine in tests
    assert not facade.adapter("anthropic").has_credential  # nosec B101 - asserts are fine in tests

    async def main():
        await collect_text(facade.stream_completion([Message("user", "x")]))
        await facade.aclose()

    asyncio.run(main())
    assert transports["gateway"].requests[0].headers["authorization"] == "Bearer ghp_gateway_value"  # nosec B101 - asserts are fine in tests


def test_errors_surface_unchanged_without_retry(wired):
    facade, transports = wired
    facade.select_provider("openai")
    with pytest.raises(ProviderError) as info:
        facade.stream_completion([Message("user", "x")])
    assert info.value.code is ErrorCode.INVALID_CREDENTIAL  # nosec B101 - asserts are fine in tests
    assert transports["openai"].requests == []  # nosec B101 - asserts are fine in tests
    asyncio.run(facade.aclose())


def test_switching_provider_leaves_in_flight_stream_alone(wired):
    facade, transports = wired
    facade.update_credential("sk-openai-value")

    async def main():
        stream = facade.stream_completion([Message("user", "x")])
        facade.select_provider("anthropic")
        text = await collect_text(stream)
        await facade.aclose()
        return text, stream.provider_name

    text, provider_name = asyncio.run(main())
    assert text == "from-openai" and provider_name == "openai"  # nosec B101 - asserts are fine in tests


def test_injected_adapters_are_used_and_closed(transport_for):
    adapter = OpenAIProvider(api_key="sk-injected", transport=transport_for(b""))
    facade = ChatStreamFacade("openai", adapters={"openai": adapter})
    assert facade.adapter() is adapter  # nosec B101 - asserts are fine in tests
    assert isinstance(facade.adapter("gateway"), GatewayProvider)  # nosec B101 - asserts are fine in tests
    assert isinstance(facade.adapter("anthropic"), AnthropicProvider)  # nosec B101 - asserts are fine in tests
    asyncio.run(facade.aclose())
    assert adapter._session.client.is_closed  # nosec B101 - asserts are fine in tests


def test_unknown_provider_selection_is_rejected():
    facade = ChatStreamFacade()
    with pytest.raises(ValueError):
        facade.select_provider("ollama")
    assert facade.active_provider is ProviderId.OPENAI  # nosec B101 - asserts are fine in tests


def test_list_models_defaults_to_catalog():
    facade = ChatStreamFacade("gateway")

    async def main():
        try:
            return await facade.list_models(), await facade.list_models("anthropic")
        finally:
            await facade.aclose()

    gateway_models, anthropic_models = asyncio.run(main())
    assert "gpt-4o" in [m.id for m in gateway_models]  # nosec B101 - asserts are fine in tests
    assert all(m.provider == "gateway" for m in gateway_models)  # nosec B101 - asserts are fine in tests
    assert anthropic_models[0].id == "claude-3-5-haiku-20241022"  # nosec B101 - asserts are fine in tests


def test_settings_snapshot_is_immutable_and_parses_names():
    settings = ProviderSettings(provider=" Anthropic ", credentials={"ANTHROPIC": " key "})
    assert settings.provider is ProviderId.ANTHROPIC  # nosec B101 - asserts are fine in tests
    assert settings.current_credential == "key"  # nosec B101 - asserts are fine in tests
    with pytest.raises(ValidationError):
        settings.provider = ProviderId.OPENAI


def test_clearing_a_credential_blocks_the_next_call(wired):
    facade, transports = wired
    facade.update_credential("sk-old-key-123456", "anthropic")
    facade.update_credential("sk-openai-value", "openai")

    facade.apply_settings(ProviderSettings(provider="anthropic", credentials={"anthropic": ""}))

    assert not facade.adapter("anthropic").has_credential  # nosec B101 - asserts are fine in tests
    # providers missing from the snapshot keep their key
    assert facade.adapter("openai").has_credential  # nosec B101 - asserts are fine in tests
    with pytest.raises(ProviderError) as info:
        facade.stream_completion([Message("user", "x")])
    assert info.value.code is ErrorCode.INVALID_CREDENTIAL  # nosec B101 - asserts are fine in tests
    assert transports["anthropic"].requests == []  # nosec B101 - asserts are fine in tests
    asyncio.run(facade.aclose())


class _BrokenAdapter:
    provider_name = "openai"
    default_model = "m"

    async def aclose(self):
        raise RuntimeError("close failed")


def test_aclose_closes_every_adapter_when_one_fails(transport_for):
    healthy = AnthropicProvider(api_key="sk-ant-key-123", transport=transport_for(b""))
    facade = ChatStreamFacade("openai", adapters={"openai": _BrokenAdapter(), "anthropic": healthy})

    with pytest.raises(RuntimeError):
        asyncio.run(facade.aclose())

    assert healthy._session.client.is_closed  # nosec B101 - asserts are fine in tests
    # a second close has nothing left to do
    asyncio.run(facade.aclose())
