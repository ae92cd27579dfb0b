"""Upload size guard: reject oversized batches before any network call."""

import math
from collections.abc import Iterable

import structlog

from ea_discovery.core.exceptions import PayloadTooLargeError
from ea_discovery.schemas.documents import UploadedDocument

logger = structlog.get_logger(__name__)


def approximate_decoded_size(base64_data: str) -> int:
    """Decoded byte size of a base64 payload, approximated as ceil(len * 3/4)."""
    if not base64_data:
        return 0
    return math.ceil(len(base64_data) * 3 / 4)


def total_upload_size(documents: Iterable[UploadedDocument]) -> int:
    return sum(approximate_decoded_size(doc.base64_data) for doc in documents)


def check_upload_size(documents: Iterable[UploadedDocument], limit_bytes: int) -> int:
    """Return the total approximate size, raising PayloadTooLargeError above the ceiling."""
    total = total_upload_size(documents)
    logger.info("upload_size_checked", total_bytes=total, limit_bytes=limit_bytes)
    if total > limit_bytes:
        logger.error("upload_too_large", total_bytes=total, limit_bytes=limit_bytes)
        raise PayloadTooLargeError(total, limit_bytes)
    return total
