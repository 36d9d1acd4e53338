"""Model listing: built-in catalogs and remote refresh."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from chatstream_providers.anthropic import AnthropicProvider
from chatstream_providers.base.errors import ErrorCode, ProviderError
from chatstream_providers.gateway import GatewayProvider
from chatstream_providers.openai import OpenAIProvider


def _list(provider, refresh=True):
    async def main():
        try:
            return await provider.list_models(refresh=refresh)
        finally:
            await provider.aclose()

    return asyncio.run(main())


def test_catalog_listing_needs_no_credential_or_network(transport_for):
    transport = transport_for(b"")
    models = _list(AnthropicProvider(api_key="", transport=transport), refresh=False)
    assert [m.id for m in models][:2] == ["claude-3-5-haiku-20241022", "claude-3-5-sonnet-20241022"]  # nosec B101 - asserts are fine in tests
    assert transport.requests == []  # nosec B101 - asserts are fine in tests


def test_openai_refresh_queries_models_endpoint(transport_for):
    def responder(request):
        return httpx.Response(
            200,
            json={"object": "list", "data": [{"id": "gpt-4o", "owned_by": "system"}, {"id": "o1-mini"}, {"nope": 1}]},
        )

    transport = transport_for(responder=responder)
    models = _list(OpenAIProvider(api_key="sk-openai-test", transport=transport))
    assert [(m.id, m.owned_by) for m in models] == [("gpt-4o", "system"), ("o1-mini", None)]  # nosec B101 - asserts are fine in tests
    request = transport.requests[0]
    assert request.method == "GET"  # nosec B101 - asserts are fine in tests
    assert str(request.url) == "https://api.openai.com/v1/models"  # nosec B101 - asserts are fine in tests
    assert request.headers["authorization"] == "Bearer sk-openai-test"  # nosec B101 - asserts are fine in tests


def test_anthropic_refresh_reads_display_names(transport_for):
    def responder(request):
        return httpx.Response(200, json={"data": [{"id": "claude-x", "display_name": "Claude X"}]})

    transport = transport_for(responder=responder)
    models = _list(AnthropicProvider(api_key="sk-ant-key-123", transport=transport))
    assert [(m.id, m.name, m.provider) for m in models] == [("claude-x", "Claude X", "anthropic")]  # nosec B101 - asserts are fine in tests
    assert transport.requests[0].headers["x-api-key"] == "sk-ant-key-123"  # nosec B101 - asserts are fine in tests


def test_gateway_refresh_accepts_bare_list(transport_for):
    def responder(request):
        return httpx.Response(200, json=[{"id": "Phi-3.5-mini-instruct", "name": "Phi 3.5 mini"}])

    transport = transport_for(responder=responder)
    models = _list(GatewayProvider(api_key="ghp_token_value", auth_scheme="api-key", transport=transport))
    assert [(m.id, m.name) for m in models] == [("Phi-3.5-mini-instruct", "Phi 3.5 mini")]  # nosec B101 - asserts are fine in tests
    assert str(transport.requests[0].url) == "https://models.inference.ai.azure.com/models"  # nosec B101 - asserts are fine in tests
    assert transport.requests[0].headers["api-key"] == "ghp_token_value"  # nosec B101 - asserts are fine in tests


@pytest.mark.parametrize(
    "response,code",
    [
        (httpx.Response(401, json={"error": "bad key"}), ErrorCode.INVALID_CREDENTIAL),
        (httpx.Response(500, text="boom"), ErrorCode.SERVER_ERROR),
        (httpx.Response(200, content=b"<html>not json</html>"), ErrorCode.INVALID_RESPONSE),
    ],
)
def test_refresh_failures_map_to_taxonomy(response, code, transport_for):
    provider = OpenAIProvider(api_key="sk-openai-test", transport=transport_for(responder=lambda _r: response))
    with pytest.raises(ProviderError) as info:
        _list(provider)
    assert info.value.code is code  # nosec B101 - asserts are fine in tests


def test_refresh_transport_failure_is_network(transport_for):
    def responder(request):
        raise httpx.ConnectError("unreachable", request=request)

    provider = GatewayProvider(api_key="ghp_token_value", transport=transport_for(responder=responder))
    with pytest.raises(ProviderError) as info:
        _list(provider)
    assert info.value.code is ErrorCode.NETWORK  # nosec B101 - asserts are fine in tests


def test_refresh_requires_credential(transport_for):
    transport = transport_for(b"")
    with pytest.raises(ProviderError) as info:
        _list(OpenAIProvider(api_key="", transport=transport))
    assert info.value.code is ErrorCode.INVALID_CREDENTIAL  # nosec B101 - asserts are fine in tests
    assert transport.requests == []  # nosec B101 - asserts are fine in tests
