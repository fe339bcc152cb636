"""Lenient parsing of search responses in the shapes the API has used."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from .models import AnytypeError, Object, Pagination, SearchResponse


class SearchError(AnytypeError):
    """An error reported by the API inside a search response."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _parse_items(mapping: Mapping[str, Any]) -> SearchResponse | None:
    """Read the ``items``/``total``/``limit``/``offset`` shape, or None if it does not fit."""
    try:
        items = mapping.get("items")
        if items is None:
            return None
        if not isinstance(items, list):
            raise TypeError("field 'items': expected array")
        objects = [Object() if item is None else Object.from_dict(item) for item in items]
        counts = Pagination.from_dict(mapping)
        if mapping.get("pagination") is not None:
            Pagination.from_dict(mapping["pagination"])
    except (TypeError, ValueError):
        return None
    if not objects:
        return None
    return SearchResponse(
        data=objects,
        pagination=Pagination(
            total=counts.total,
            limit=counts.limit,
            offset=counts.offset,
            has_more=counts.total > counts.offset + counts.limit,
        ),
    )


def parse_search_response(
    data: bytes | str,
    debug: bool = False,
    logger: logging.Logger | None = None,
) -> SearchResponse | None:
    """Parse a search response.

    Returns None when the response is well formed but holds no objects, raises
    SearchError when it carries an API error message, and re-raises the parse
    error when it fits no known shape.
    """
    text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
    verbose = debug and logger is not None

    try:
        decoded = json.loads(text)
    except ValueError as exc:
        if verbose:
            logger.debug("Failed to parse search response: %s", exc)
        raise
    if decoded is None:
        decoded = {}

    first_error: Exception | None = None
    try:
        response = SearchResponse.from_dict(decoded)
    except (TypeError, ValueError) as exc:
        first_error = exc
    else:
        if response.data:
            return response

    if isinstance(decoded, Mapping):
        items_response = _parse_items(decoded)
        if items_response is not None:
            return items_response

        if verbose:
            logger.debug("Response keys: %s", ", ".join(decoded))

        error = decoded.get("error")
        if isinstance(error, Mapping) and isinstance(error.get("message"), str):
            raise SearchError(error["message"])

    if verbose:
        logger.debug("Failed to parse search response: %s", first_error)
    if first_error is not None:
        raise first_error
    return None