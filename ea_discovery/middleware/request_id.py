"""Per-request ids carried in the ``X-Request-ID`` header.

asgi-correlation-id takes the id from the incoming header (any format is
accepted) or mints a uuid4, keeps it in a context variable while the request
runs, and returns it on the response. ``core.logging`` stamps the same value
onto every structlog event as ``correlation_id``.
"""

from uuid import uuid4

from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id
from fastapi import FastAPI

REQUEST_ID_HEADER = "X-Request-ID"


def _mint_request_id() -> str:
    return str(uuid4())


def install_request_id_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=REQUEST_ID_HEADER,
        generator=_mint_request_id,
        validator=None,
    )


def current_request_id() -> str | None:
    """The id of the request being served, or None outside a request."""
    return correlation_id.get(None)
