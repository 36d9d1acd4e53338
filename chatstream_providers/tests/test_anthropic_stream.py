"""Anthropic-style adapter against a simulated Messages API stream."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from chatstream_providers.anthropic import AnthropicProvider
from chatstream_providers.base.errors import ErrorCode, ProviderError
from chatstream_providers.base.models import Message
from chatstream_providers.base.streaming import collect_text


def _delta(text):
    return {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": text}}


async def _drain(stream):
    fragments = []
    async with stream:
        async for fragment in stream:
            fragments.append(fragment)
    return fragments


def _run(provider, conversation=None, model="claude-test", system_prompt=None):
    async def main():
        try:
            stream = provider.stream_completion(conversation or [Message("user", "Hi")], model, system_prompt)
            return await _drain(stream)
        finally:
            await provider.aclose()

    return asyncio.run(main())


def test_streams_text_deltas_until_message_stop(sse_body, transport_for):
    body = sse_body(
        "event: message_start",
        {"type": "message_start", "message": {"id": "msg_1"}},
        {"type": "content_block_start", "index": 0},
        {"type": "ping"},
        _delta("Hel"),
        _delta("lo"),
        {"type": "content_block_stop", "index": 0},
        {"type": "message_stop"},
        _delta("never emitted"),
    )
    transport = transport_for(body)
    provider = AnthropicProvider(api_key="sk-ant-test-key", transport=transport)

    assert _run(provider) == ["Hel", "lo"]  # nosec B101 - asserts are fine in tests
    request = transport.requests[0]
    assert str(request.url) == "https://api.anthropic.com/v1/messages"  # nosec B101 - asserts are fine in tests
    assert request.headers["x-api-key"] == "sk-ant-test-key"  # nosec B101 - asserts are fine in tests
    assert request.headers["anthropic-version"] == "2023-06-01"  # nosec B101 - asserts are fine in tests
    assert request.headers["accept"] == "text/event-stream"  # nosec B101 - asserts are fine in tests


def test_request_body_matches_messages_api(sse_body, transport_for):
    transport = transport_for(sse_body({"type": "message_stop"}))
    provider = AnthropicProvider(api_key="sk-ant-test-key", transport=transport)
    conversation = [
        {"role": "user", "content": "q"},
        {"role": "assistant", "content": "a"},
        {"role": "system", "content": "s"},
    ]
    _run(provider, conversation, model="claude-3-opus-20240229", system_prompt="be terse")

    body = transport.last_json
    assert body["model"] == "claude-3-opus-20240229"  # nosec B101 - asserts are fine in tests
    assert body["stream"] is True and body["max_tokens"] == 4096  # nosec B101 - asserts are fine in tests
    assert body["system"] == "be terse"  # nosec B101 - asserts are fine in tests
    assert [m["role"] for m in body["messages"]] == ["user", "assistant", "assistant"]  # nosec B101 - asserts are fine in tests


def test_done_sentinel_and_end_of_input_terminate_successfully(sse_body, transport_for):
    provider = AnthropicProvider(api_key="k" * 12, transport=transport_for(sse_body(_delta("a"), "data: [DONE]", _delta("b"))))
    assert _run(provider) == ["a"]  # nosec B101 - asserts are fine in tests

    provider = AnthropicProvider(api_key="k" * 12, transport=transport_for(sse_body(_delta("x"))))
    assert _run(provider) == ["x"]  # nosec B101 - asserts are fine in tests


def test_malformed_frame_is_skipped(sse_body, transport_for, log_events):
    body = sse_body(_delta("a"), "data: {broken json", "data: [1,2,3]", _delta("b"), {"type": "message_stop"})
    provider = AnthropicProvider(api_key="k" * 12, transport=transport_for(body))
    assert _run(provider) == ["a", "b"]  # nosec B101 - asserts are fine in tests
    decode_errors = log_events.named("stream.decode_error")
    assert len(decode_errors) == 2  # nosec B101 - asserts are fine in tests
    assert all(e["_level"] == "WARNING" for e in decode_errors)  # nosec B101 - asserts are fine in tests


def test_message_start_resets_diagnostic_buffer(sse_body, transport_for):
    body = sse_body(
        {"type": "message_start"},
        _delta("first"),
        {"type": "message_start"},
        _delta("second"),
        {"type": "message_stop"},
    )
    provider = AnthropicProvider(api_key="k" * 12, transport=transport_for(body))

    async def main():
        stream = provider.stream_completion([Message("user", "x")], "m")
        fragments = await _drain(stream)
        await provider.aclose()
        return fragments, stream

    fragments, stream = asyncio.run(main())
    assert fragments == ["first", "second"]  # nosec B101 - asserts are fine in tests
    assert stream._adapter.accumulated_text == "second"  # nosec B101 - asserts are fine in tests
    assert stream.metrics.emitted == 2  # nosec B101 - asserts are fine in tests
    assert stream.finished and stream.error is None  # nosec B101 - asserts are fine in tests


@pytest.mark.parametrize(
    "status,code",
    [
        (400, ErrorCode.INVALID_REQUEST),
        (401, ErrorCode.INVALID_CREDENTIAL),
        (429, ErrorCode.RATE_LIMIT),
        (500, ErrorCode.SERVER_ERROR),
        (529, ErrorCode.SERVER_ERROR),
        (418, ErrorCode.SERVER_ERROR),
    ],
)
def test_status_codes_map_to_taxonomy_before_body(status, code, transport_for):
    def responder(_request):
        return httpx.Response(status, json={"type": "error", "error": {"type": "x", "message": "nope"}})

    provider = AnthropicProvider(api_key="k" * 12, transport=transport_for(responder=responder))
    with pytest.raises(ProviderError) as info:
        _run(provider)
    assert info.value.code is code  # nosec B101 - asserts are fine in tests
    assert info.value.status_code == status  # nosec B101 - asserts are fine in tests
    assert info.value.provider == "anthropic"  # nosec B101 - asserts are fine in tests
    assert "nope" in info.value.message  # nosec B101 - asserts are fine in tests


def test_error_body_is_redacted_in_message(transport_for):
    def responder(_request):
        return httpx.Response(400, content=b'{"error": "bad", "system": "hidden prompt"}')

    provider = AnthropicProvider(api_key="k" * 12, transport=transport_for(responder=responder))
    with pytest.raises(ProviderError) as info:
        _run(provider)
    assert "hidden prompt" not in info.value.message  # nosec B101 - asserts are fine in tests
    assert "[MASKED]" in info.value.message  # nosec B101 - asserts are fine in tests


def test_empty_credential_fails_without_network(transport_for):
    transport = transport_for(b"")
    provider = AnthropicProvider(api_key="", transport=transport)
    with pytest.raises(ProviderError) as info:
        provider.stream_completion([Message("user", "hi")], "m")
    assert info.value.code is ErrorCode.INVALID_CREDENTIAL  # nosec B101 - asserts are fine in tests
    assert transport.requests == []  # nosec B101 - asserts are fine in tests
    asyncio.run(provider.aclose())


def test_invalid_base_url_fails_before_request(transport_for):
    transport = transport_for(b"")
    provider = AnthropicProvider(api_key="k" * 12, base_url="not a url", transport=transport)
    with pytest.raises(ProviderError) as info:
        provider.stream_completion([Message("user", "hi")], "m")
    assert info.value.code is ErrorCode.INVALID_URL  # nosec B101 - asserts are fine in tests
    assert transport.requests == []  # nosec B101 - asserts are fine in tests
    asyncio.run(provider.aclose())


def test_unserializable_conversation_is_invalid_request(transport_for):
    provider = AnthropicProvider(api_key="k" * 12, transport=transport_for(b""))
    with pytest.raises(ProviderError) as info:
        provider.stream_completion([object()], "m")
    assert info.value.code is ErrorCode.INVALID_REQUEST  # nosec B101 - asserts are fine in tests
    assert info.value.message.startswith("Failed to serialize request")  # nosec B101 - asserts are fine in tests
    asyncio.run(provider.aclose())


def test_credential_rotation_affects_only_later_calls(sse_body, transport_for):
    transport = transport_for(sse_body(_delta("ok"), {"type": "message_stop"}))
    provider = AnthropicProvider(api_key="sk-ant-first-key", transport=transport)

    async def main():
        first = provider.stream_completion([Message("user", "1")], "m")
        provider.update_credential("sk-ant-second-key")
        second = provider.stream_completion([Message("user", "2")], "m")
        await collect_text(first)
        await collect_text(second)
        await provider.aclose()

    asyncio.run(main())
    keys = [r.headers["x-api-key"] for r in transport.requests]
    assert keys == ["sk-ant-first-key", "sk-ant-second-key"]  # nosec B101 - asserts are fine in tests


def test_update_credential_to_empty_blocks_next_call(transport_for):
    provider = AnthropicProvider(api_key="k" * 12, transport=transport_for(b""))
    provider.update_credential("   ")
    assert provider.has_credential is False  # nosec B101 - asserts are fine in tests
    with pytest.raises(ProviderError) as info:
        provider.stream_completion([], "m")
    assert info.value.code is ErrorCode.INVALID_CREDENTIAL  # nosec B101 - asserts are fine in tests
    asyncio.run(provider.aclose())


def test_credential_comes_from_environment(monkeypatch, sse_body, transport_for):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-from-env")
    transport = transport_for(sse_body({"type": "message_stop"}))
    provider = AnthropicProvider(transport=transport)
    assert _run(provider) == []  # nosec B101 - asserts are fine in tests
    assert transport.requests[0].headers["x-api-key"] == "sk-ant-from-env"  # nosec B101 - asserts are fine in tests
    assert json.loads(transport.requests[0].content)["model"] == "claude-test"  # nosec B101 - asserts are fine in tests
