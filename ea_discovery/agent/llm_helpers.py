"""Tolerant JSON recovery for language-model replies.

The model is asked for a bare JSON object but regularly wraps it in code
fences, adds narrative around it, or emits JavaScript-ish literals. Recovery
runs an ordered pipeline of pure repairs, safest first, and re-attempts a
parse after each one:

1. strip leading/trailing code fences
2. keep only the outermost ``{ ... }`` span
3. drop trailing commas before ``}`` / ``]``
4. quote bare identifier keys
5. turn single-quoted literals into double-quoted ones (naive, no escaping)

If every attempt fails, ``MalformedModelOutputError`` carries the (truncated)
raw reply for diagnostics.
"""

import json
import re
from collections.abc import Callable
from typing import Any

import structlog

from ea_discovery.core.exceptions import MalformedModelOutputError

logger = structlog.get_logger(__name__)

_LEADING_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```\s*$")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_UNQUOTED_KEY = re.compile(r"([{,\s])(\w+)\s*:")
_SINGLE_QUOTED = re.compile(r"'([^']*)'")


def _strip_json_fences(content: str) -> str:
    """Remove markdown code fences wrapping JSON output."""
    content = content.strip()
    content = _LEADING_FENCE.sub("", content, count=1)
    content = _TRAILING_FENCE.sub("", content, count=1)
    return content.strip()


def extract_json_object(content: str) -> str:
    """Keep the span from the first ``{`` to the last ``}``, dropping narrative around it."""
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end < start:
        return content
    return content[start : end + 1]


def remove_trailing_commas(content: str) -> str:
    return _TRAILING_COMMA.sub(r"\1", content)


def quote_unquoted_keys(content: str) -> str:
    """``{name: 1}`` -> ``{"name": 1}``. Already quoted keys are left alone."""
    return _UNQUOTED_KEY.sub(r'\1"\2":', content)


def replace_single_quotes(content: str) -> str:
    """``'text'`` -> ``"text"``.

    Apostrophes inside values are not distinguished from delimiters, so
    ``'it's fine'`` is mis-converted. Embedded double quotes are not escaped.
    """
    return _SINGLE_QUOTED.sub(r'"\1"', content)


# Ordered safest -> most destructive. Each repair is applied to the output of the previous one.
REPAIR_PIPELINE: list[tuple[str, Callable[[str], str]]] = [
    ("extract_object", extract_json_object),
    ("trailing_commas", remove_trailing_commas),
    ("unquoted_keys", quote_unquoted_keys),
    ("single_quotes", replace_single_quotes),
]


def _try_parse(content: str) -> tuple[bool, Any]:
    # Deeply nested arrays exhaust the decoder stack before a syntax error.
    try:
        return True, json.loads(content)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return False, None


def recover_json(raw: str) -> Any:
    """Parse a model reply, applying increasingly aggressive repairs until one parses.

    Args:
        raw: Model reply text, nominally a JSON object

    Returns:
        The parsed JSON value

    Raises:
        MalformedModelOutputError: If no repair stage yields parseable JSON
    """
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedModelOutputError(raw if isinstance(raw, str) else None, "Model returned an empty response")

    candidate = _strip_json_fences(raw)
    ok, value = _try_parse(candidate)
    if ok:
        return value

    for stage, repair in REPAIR_PIPELINE:
        candidate = repair(candidate)
        ok, value = _try_parse(candidate)
        if ok:
            logger.info("model_json_repaired", stage=stage)
            return value

    logger.warning("model_json_unrecoverable", raw_length=len(raw))
    raise MalformedModelOutputError(raw)


def recover_json_object(raw: str) -> dict[str, Any]:
    """Like ``recover_json`` but the top-level value must be an object."""
    value = recover_json(raw)
    if not isinstance(value, dict):
        raise MalformedModelOutputError(raw, "Model response was not a JSON object")
    return value
