"""Query-string decoding for the grid protocol.

The grid client sends three JSON-encoded query parameters::

    range=[0,24]  sort=["title","ASC"]  filter={"q":"todo","ownerId":"c1"}

Malformed ``range`` and ``sort`` values never fail the request: they fall back
to the default page and ordering. A malformed ``filter`` means "no constraint".
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import unquote

from app.schemas.grid import DEFAULT_LIMIT, DEFAULT_OFFSET, MAX_QUERY_INT, GridRange, GridSort
from app.services.grid_errors import InvalidGridQuery, PageSizeExceeded
from app.services.grid_filters import Predicate, compile_filter
from app.services.grid_registry import GridResource

_LOG = logging.getLogger("app.grid")

DEFAULT_SORT_FIELD = "id"
DEFAULT_SORT_DIRECTION = "desc"

_MALFORMED = object()


def _decode_json(raw: str | None) -> Any:
    text = str(raw or "").strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        pass
    # Some clients encode the JSON twice.
    decoded = unquote(text)
    if decoded == text:
        return _MALFORMED
    try:
        return json.loads(decoded)
    except ValueError:
        return _MALFORMED


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def parse_range(
    raw: str | None,
    max_page_size: int | None = None,
    default_limit: int = DEFAULT_LIMIT,
) -> GridRange:
    parsed = _decode_json(raw)
    if (
        not isinstance(parsed, list)
        or len(parsed) < 2
        or not _is_non_negative_int(parsed[0])
        or not _is_non_negative_int(parsed[1])
    ):
        if parsed is not None:
            _LOG.debug("range=%r is malformed, using defaults", raw)
        return GridRange(offset=DEFAULT_OFFSET, limit=default_limit)
    offset, limit = parsed[0], parsed[1]
    if offset > MAX_QUERY_INT or limit > MAX_QUERY_INT:
        raise InvalidGridQuery(f"Range values must not exceed {MAX_QUERY_INT}")
    if max_page_size is not None and limit > max_page_size:
        raise PageSizeExceeded(limit, max_page_size)
    return GridRange(offset=offset, limit=limit)


def parse_sort(raw: str | None) -> GridSort:
    parsed = _decode_json(raw)
    if (
        not isinstance(parsed, list)
        or len(parsed) < 2
        or not isinstance(parsed[0], str)
        or not isinstance(parsed[1], str)
        or not parsed[0]
    ):
        if parsed is not None:
            _LOG.debug("sort=%r is malformed, using defaults", raw)
        return GridSort(field=DEFAULT_SORT_FIELD, direction=DEFAULT_SORT_DIRECTION)
    return GridSort(field=parsed[0], direction=parsed[1].lower())


def parse_filter(resource: GridResource, raw: str | None) -> Predicate | None:
    parsed = _decode_json(raw)
    if parsed is None:
        return None
    if parsed is _MALFORMED or not isinstance(parsed, dict):
        _LOG.warning("filter=%r for model=%s is not a JSON object, ignoring it", raw, resource.name.value)
        return None
    if not parsed:
        return None
    predicate = compile_filter(parsed, resource.search_fields)
    return None if predicate.is_empty else predicate
