"""Error taxonomy shared by the gateway, extractor, store and HTTP layer.

Each error knows the HTTP status it maps to and how to render itself as a
JSON payload, so route handlers can let them propagate to the global handler
in ``ea_discovery.main``.
"""

from typing import Any

RAW_BODY_LIMIT = 2000


def truncate_raw(raw: str | None, limit: int = RAW_BODY_LIMIT) -> str:
    """Clip an upstream body or model reply for diagnostics."""
    if not raw:
        return ""
    if len(raw) > limit:
        return f"{raw[:limit]}\n...[truncated]"
    return raw


class EADiscoveryError(Exception):
    """Base exception for EA Discovery application."""

    status_code: int = 500

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self)}


class ConfigurationError(EADiscoveryError):
    """Raised when a required setting (e.g. the model API key) is missing."""

    status_code = 500


class PayloadTooLargeError(EADiscoveryError):
    """Raised before any network call when attached documents exceed the upload ceiling."""

    status_code = 413

    def __init__(self, measured_bytes: int, limit_bytes: int):
        self.measured_bytes = measured_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Total uploaded file size is too large ({round(measured_bytes / 1024)} KB). "
            f"Limit is {round(limit_bytes / 1024)} KB. Try uploading fewer or smaller files."
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "measuredBytes": self.measured_bytes,
            "limitBytes": self.limit_bytes,
        }


class UpstreamError(EADiscoveryError):
    """Raised when the model API returns a non-OK response."""

    status_code = 502

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        raw: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.upstream_status = upstream_status
        self.raw = truncate_raw(raw)
        self.headers = headers or {}
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "statusCode": self.upstream_status,
            "headers": self.headers,
            "raw": self.raw,
        }


class TransientUpstreamError(UpstreamError):
    """Raised when 502/503/504 or transport resets persist past the retry budget."""


class RateLimitedError(UpstreamError):
    """Raised on HTTP 429; headers are kept so callers can honour retry-after."""

    status_code = 429


class MalformedModelOutputError(EADiscoveryError):
    """Raised when the model reply cannot be coerced into JSON even after repair."""

    status_code = 502

    def __init__(self, raw: str | None, reason: str = "Model returned malformed JSON"):
        self.raw = truncate_raw(raw)
        super().__init__(reason)

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self), "raw": self.raw}


class DocumentExtractionError(EADiscoveryError):
    """Raised when text extraction fails for a single document."""

    status_code = 422

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        super().__init__(f"Failed to extract text from '{filename}': {reason}")


class PersistenceError(EADiscoveryError):
    """Raised when an engagement datastore read or write fails."""

    status_code = 503


class NoUsableDocumentsError(EADiscoveryError):
    """Raised when none of the uploaded documents could be decoded."""

    status_code = 400
