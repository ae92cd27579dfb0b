"""Tests for ModelGateway retry policy and error normalisation.

The real anthropic.AsyncAnthropic client runs against httpx.MockTransport,
so status handling goes through the SDK exactly as in production.
"""

import json

import anthropic
import httpx
import pytest

from ea_discovery.agent.gateway import ModelGateway
from ea_discovery.core.exceptions import (
    ConfigurationError,
    MalformedModelOutputError,
    RateLimitedError,
    TransientUpstreamError,
    UpstreamError,
)

pytestmark = pytest.mark.unit


def _message_body(text: str) -> dict:
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "model": "claude-sonnet-4-20250514",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": {"input_tokens": 12, "output_tokens": 4},
    }


class ScriptedTransport:
    """Replays a fixed list of responses (or exceptions) and records every request."""

    def __init__(self, *steps):
        self.steps = list(steps)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


def _gateway(settings, transport: ScriptedTransport) -> tuple[ModelGateway, list[float]]:
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    client = anthropic.AsyncAnthropic(
        api_key=settings.anthropic_api_key,
        base_url="https://model.test",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)),
    )
    return ModelGateway(settings=settings, client=client, sleep=fake_sleep), sleeps


def _ok(text: str = '{"ok": true}') -> httpx.Response:
    return httpx.Response(200, json=_message_body(text))


def _error(status: int, body: str = "upstream says no", headers: dict | None = None) -> httpx.Response:
    return httpx.Response(status, text=body, headers=headers or {})


class TestBuildRequest:
    def test_payload_shape(self, settings):
        gateway = ModelGateway(settings=settings)
        content = [{"type": "text", "text": "hello"}]

        payload = gateway.build_request(content, max_tokens=4000)

        assert payload == {
            "model": "claude-sonnet-4-20250514",
            "max_tokens": 4000,
            "messages": [{"role": "user", "content": content}],
        }


class TestComplete:
    async def test_success_returns_first_text_block(self, settings):
        transport = ScriptedTransport(_ok('{"companyName": "Acme"}'))
        gateway, sleeps = _gateway(settings, transport)

        result = await gateway.complete("prompt", max_tokens=100)

        assert result == '{"companyName": "Acme"}'
        assert len(transport.requests) == 1
        assert sleeps == []

    async def test_request_carries_content_blocks_in_order(self, settings):
        transport = ScriptedTransport(_ok())
        gateway, _ = _gateway(settings, transport)
        blocks = [
            {"type": "text", "text": "--- Begin text file a.txt ---\nhi\n--- End text file ---"},
            {"type": "document", "source": {"type": "base64", "media_type": "application/pdf", "data": "QUJD"}},
            {"type": "text", "text": "instruction"},
        ]

        await gateway.complete(blocks, max_tokens=4000)

        sent = json.loads(transport.requests[0].content)
        assert sent["model"] == settings.anthropic_model
        assert sent["max_tokens"] == 4000
        assert sent["messages"][0]["content"] == blocks
        assert transport.requests[0].headers["x-api-key"] == "test-key"

    async def test_two_503s_then_200_retries_with_backoff(self, settings):
        transport = ScriptedTransport(_error(503), _error(503), _ok('{"a": 1}'))
        gateway, sleeps = _gateway(settings, transport)

        result = await gateway.complete("prompt", max_tokens=100)

        assert result == '{"a": 1}'
        assert len(transport.requests) == 3
        assert sleeps == [0.5, 1.0]

    @pytest.mark.parametrize("status", [502, 504])
    async def test_other_transient_statuses_retry(self, settings, status):
        transport = ScriptedTransport(_error(status), _ok())
        gateway, sleeps = _gateway(settings, transport)

        await gateway.complete("prompt", max_tokens=100)

        assert len(transport.requests) == 2
        assert sleeps == [0.5]

    async def test_exhausted_retries_surface_transient_error(self, settings):
        body = "<html>" + "x" * 3000 + "</html>"
        transport = ScriptedTransport(_error(503, body), _error(503, body), _error(503, body))
        gateway, sleeps = _gateway(settings, transport)

        with pytest.raises(TransientUpstreamError) as exc_info:
            await gateway.complete("prompt", max_tokens=100)

        err = exc_info.value
        assert len(transport.requests) == 3
        assert sleeps == [0.5, 1.0]
        assert err.upstream_status == 503
        assert err.status_code == 502
        assert err.raw.endswith("\n...[truncated]")
        assert str(err) == "Upstream API request failed: 503"

    async def test_connection_errors_retry_then_surface(self, settings):
        transport = ScriptedTransport(
            httpx.ConnectError("connection reset"),
            httpx.ConnectError("connection reset"),
            httpx.ConnectError("connection reset"),
        )
        gateway, sleeps = _gateway(settings, transport)

        with pytest.raises(TransientUpstreamError) as exc_info:
            await gateway.complete("prompt", max_tokens=100)

        assert exc_info.value.upstream_status is None
        assert len(transport.requests) == 3
        assert sleeps == [0.5, 1.0]

    async def test_connection_error_then_success(self, settings):
        transport = ScriptedTransport(httpx.ReadTimeout("timed out"), _ok())
        gateway, _ = _gateway(settings, transport)

        assert await gateway.complete("prompt", max_tokens=100) == '{"ok": true}'
        assert len(transport.requests) == 2

    async def test_rate_limit_is_distinct_and_keeps_headers(self, settings):
        transport = ScriptedTransport(
            _error(429, '{"error": "rate_limited"}', {"retry-after": "30", "anthropic-ratelimit-requests-remaining": "0"})
        )
        gateway, sleeps = _gateway(settings, transport)

        with pytest.raises(RateLimitedError) as exc_info:
            await gateway.complete("prompt", max_tokens=100)

        err = exc_info.value
        assert len(transport.requests) == 1
        assert sleeps == []
        assert err.status_code == 429
        assert err.headers["retry-after"] == "30"
        assert err.to_payload()["error"] == "Rate limit exceeded: API request failed: 429"
        assert err.to_payload()["statusCode"] == 429

    async def test_client_error_not_retried(self, settings):
        transport = ScriptedTransport(_error(400, "bad request"))
        gateway, sleeps = _gateway(settings, transport)

        with pytest.raises(UpstreamError) as exc_info:
            await gateway.complete("prompt", max_tokens=100)

        assert not isinstance(exc_info.value, TransientUpstreamError)
        assert exc_info.value.upstream_status == 400
        assert exc_info.value.raw == "bad request"
        assert len(transport.requests) == 1
        assert sleeps == []

    async def test_reply_without_text_is_malformed(self, settings):
        body = _message_body("unused")
        body["content"] = []
        transport = ScriptedTransport(httpx.Response(200, json=body))
        gateway, _ = _gateway(settings, transport)

        with pytest.raises(MalformedModelOutputError):
            await gateway.complete("prompt", max_tokens=100)

    async def test_missing_api_key_fails_before_network(self, settings_factory):
        transport = ScriptedTransport(_ok())
        gateway, _ = _gateway(settings_factory(anthropic_api_key="placeholder"), transport)
        gateway.settings = settings_factory(anthropic_api_key="")

        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
            await gateway.complete("prompt", max_tokens=100)

        assert transport.requests == []

    def test_ensure_configured(self, settings_factory):
        ModelGateway(settings=settings_factory()).ensure_configured()

        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
            ModelGateway(settings=settings_factory(anthropic_api_key="")).ensure_configured()

    async def test_retry_budget_follows_settings(self, settings_factory):
        transport = ScriptedTransport(_error(503), _error(503))
        gateway, sleeps = _gateway(settings_factory(gateway_max_retries=1), transport)

        with pytest.raises(TransientUpstreamError):
            await gateway.complete("prompt", max_tokens=100)

        assert len(transport.requests) == 2
        assert sleeps == [0.5]
