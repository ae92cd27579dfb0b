"""ModelGateway: the single path from the application to the language-model API.

- Direct anthropic.AsyncAnthropic call (SDK-level retries disabled, max_retries=0)
- Tenacity retry on 502/503/504 and transport failures only, exponential
  backoff starting at 0.5s, at most 2 retries
- 429 surfaces as RateLimitedError with the response headers
- Any other non-OK status propagates immediately as UpstreamError
- Replies are normalised to the text of the first content block
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import anthropic
import structlog
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from ea_discovery.core.config import Settings, get_settings
from ea_discovery.core.exceptions import (
    ConfigurationError,
    MalformedModelOutputError,
    RateLimitedError,
    TransientUpstreamError,
    UpstreamError,
)

logger = structlog.get_logger(__name__)

TRANSIENT_STATUS_CODES = frozenset({502, 503, 504})

ContentBlock = dict[str, Any]


def _is_transient(exc: BaseException) -> bool:
    """Connection resets, broken pipes and timeouts, or a 502/503/504 response."""
    if isinstance(exc, anthropic.APIConnectionError):
        return True
    return isinstance(exc, anthropic.APIStatusError) and exc.status_code in TRANSIENT_STATUS_CODES


def _log_retry(retry_state) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "model_request_retrying",
        attempt=retry_state.attempt_number,
        sleep_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
        status_code=getattr(exc, "status_code", None),
        error_type=type(exc).__name__ if exc else None,
    )


def _headers_of(exc: anthropic.APIStatusError) -> dict[str, str]:
    return {k: v for k, v in exc.response.headers.items()}


class ModelGateway:
    """Sends instruction + document content to the model API and returns reply text.

    The Anthropic client and the sleep function are injectable so tests can
    run against ``httpx.MockTransport`` and record backoff intervals.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: anthropic.AsyncAnthropic | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self._client = client
        self._sleep = sleep

    def ensure_configured(self) -> None:
        """Raise ConfigurationError when no API key is set.

        Callers that do local work before the first model call (size checks,
        document decoding) run this first so a missing key is reported ahead
        of anything else.
        """
        if not self.settings.anthropic_api_key:
            logger.error("model_api_key_missing")
            raise ConfigurationError(
                "Anthropic API key is not configured. Set ANTHROPIC_API_KEY in the environment."
            )

    def _get_client(self) -> anthropic.AsyncAnthropic:
        self.ensure_configured()
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.settings.anthropic_api_key,
                base_url=self.settings.anthropic_base_url,
                max_retries=0,
            )
        return self._client

    def build_request(self, content: list[ContentBlock], max_tokens: int) -> dict[str, Any]:
        """Build the messages.create() payload for a single user turn."""
        return {
            "model": self.settings.anthropic_model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": content}],
        }

    async def complete(self, content: list[ContentBlock] | str, max_tokens: int) -> str:
        """Send one request and return the reply text.

        Args:
            content: Ordered text/document blocks, or a plain prompt string
            max_tokens: Output token bound for this request

        Returns:
            Text of the first content block of the reply

        Raises:
            ConfigurationError: API key missing (raised before any network call)
            RateLimitedError: HTTP 429
            TransientUpstreamError: 502/503/504 or transport failure after retries
            UpstreamError: Any other non-OK response
            MalformedModelOutputError: Reply had no text content
        """
        client = self._get_client()
        if isinstance(content, str):
            content = [{"type": "text", "text": content}]
        payload = self.build_request(content, max_tokens)

        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self.settings.gateway_max_retries + 1),
            wait=wait_exponential(
                multiplier=self.settings.gateway_initial_backoff_seconds,
                min=self.settings.gateway_initial_backoff_seconds,
            ),
            sleep=self._sleep,
            reraise=True,
            before_sleep=_log_retry,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    response = await client.messages.create(**payload)
        except anthropic.RateLimitError as exc:
            logger.error("model_rate_limited", status_code=exc.status_code)
            raise RateLimitedError(
                f"Rate limit exceeded: API request failed: {exc.status_code}",
                upstream_status=exc.status_code,
                raw=exc.response.text,
                headers=_headers_of(exc),
            ) from exc
        except anthropic.APIStatusError as exc:
            error_cls = TransientUpstreamError if exc.status_code in TRANSIENT_STATUS_CODES else UpstreamError
            logger.error("model_request_failed", status_code=exc.status_code, transient=error_cls is TransientUpstreamError)
            raise error_cls(
                f"Upstream API request failed: {exc.status_code}",
                upstream_status=exc.status_code,
                raw=exc.response.text,
                headers=_headers_of(exc),
            ) from exc
        except anthropic.APIConnectionError as exc:
            logger.error("model_connection_failed", error=str(exc), error_type=type(exc).__name__)
            raise TransientUpstreamError(f"Upstream API connection failed: {exc}") from exc

        return self._reply_text(response)

    @staticmethod
    def _reply_text(response: Any) -> str:
        blocks = getattr(response, "content", None) or []
        text = getattr(blocks[0], "text", None) if blocks else None
        if not isinstance(text, str):
            raise MalformedModelOutputError(None, "Model response contained no text content")
        return text


def get_gateway() -> ModelGateway:
    """FastAPI dependency; override via app.dependency_overrides in tests."""
    return ModelGateway()
