"""Searching objects in a space, with tag filtering done on the client side."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Protocol

from .models import (
    AnytypeError,
    MissingRequiredError,
    Object,
    Pagination,
    SearchResponse,
    SortOptions,
)
from .params import SearchParams, new_search_params

TAG_FILTER_LIMIT = 1000
_TAG_KEYS = frozenset({"tag", "tags"})


class ApiClient(Protocol):
    """What searching needs from an API client."""

    debug: bool
    logger: logging.Logger | None

    def make_request(
        self,
        method: str,
        path: str,
        body: bytes | None = None,
        timeout: float | None = None,
    ) -> bytes:
        """Send a request to the API and return the response body."""
        ...

    def get_type_by_name(self, space_id: str, type_name: str) -> str:
        """Return the key of the type with the given display name."""
        ...


class SearchRequestError(AnytypeError):
    """A search could not be validated, sent or parsed."""

    def __init__(
        self, path: str, status: int, message: str, cause: BaseException | None = None
    ) -> None:
        text = f"{path}: {message}"
        if cause is not None:
            text += f": {cause}"
        super().__init__(text)
        self.path = path
        self.status = status
        self.message = message
        self.cause = cause


@dataclass
class SearchRequestBody:
    """JSON body of a search request."""

    query: str = ""
    limit: int = 0
    offset: int = 0
    space_id: str = ""
    types: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    sort: SortOptions | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "query": self.query,
            "limit": self.limit,
            "offset": self.offset,
        }
        if self.space_id:
            body["space_id"] = self.space_id
        if self.types:
            body["types"] = list(self.types)
        if self.tags:
            body["tags"] = list(self.tags)
        if self.sort is not None:
            body["sort"] = self.sort.to_dict()
        return body


def _debug(client: Any, message: str, *args: Any) -> None:
    logger = getattr(client, "logger", None)
    if getattr(client, "debug", False) and logger is not None:
        logger.debug(message, *args)


def prepare_search_request(
    space_id: str, params: SearchParams
) -> tuple[SearchRequestBody, list[str]]:
    """Build the request body and return it with the tags to filter by afterwards."""
    body = SearchRequestBody(
        query=params.query,
        limit=params.limit,
        offset=params.offset,
        space_id=space_id,
        types=[type_key for type_key in params.types if type_key],
        sort=params.sort,
    )
    requested_tags = list(params.tags)
    if requested_tags:
        body.tags = list(requested_tags)
        # Fetch more so that enough objects survive the tag filter.
        body.limit = max(body.limit, TAG_FILTER_LIMIT)
    return body, requested_tags


def is_empty_response(data: bytes | str) -> bool:
    """Whether a response body holds nothing to parse."""
    text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
    return text in ("", "{}", "[]")


def _collect_tags(obj: Object) -> list[str]:
    """Tag names of an object from its details, tag relations and tag properties."""
    found = list(obj.tags)
    if obj.relations is not None:
        for rel_type, relations in obj.relations.items.items():
            if rel_type.lower() in _TAG_KEYS:
                found.extend(relation.name for relation in relations)
    for prop in obj.properties:
        if prop.id.lower() in _TAG_KEYS or prop.name.lower() in _TAG_KEYS:
            found.extend(tag.name for tag in prop.multi_select)
    return list(dict.fromkeys(name for name in found if name))


def object_matches_any_tag(obj: Object, requested_tags: Iterable[str]) -> bool:
    """Whether the object carries any of the tags, ignoring case."""
    own = {tag.casefold() for tag in obj.tags}
    return any(tag.casefold() in own for tag in requested_tags)


def filter_objects_by_tags(
    response: SearchResponse, requested_tags: Iterable[str]
) -> SearchResponse:
    """Keep the objects that carry any of the tags; the total counts what is kept."""
    wanted = list(requested_tags)
    kept = [obj for obj in response.data if object_matches_any_tag(obj, wanted)]
    return SearchResponse(
        data=kept,
        pagination=replace(response.pagination, total=len(kept)),
    )


def _execute_search(
    client: ApiClient,
    space_id: str,
    body: SearchRequestBody,
    params: SearchParams,
    timeout: float | None,
) -> SearchResponse:
    path = f"/v1/spaces/{space_id}/search"
    payload = json.dumps(body.to_dict()).encode("utf-8")
    _debug(client, "Search request body: %s", payload.decode("utf-8"))

    try:
        data = client.make_request("POST", path, payload, timeout)
    except Exception as exc:
        raise SearchRequestError(path, 0, "failed to perform search", exc) from exc

    _debug(client, "Raw search response: %s", data)

    if is_empty_response(data):
        _debug(client, "Empty search response, returning empty result")
        return SearchResponse(
            data=[],
            pagination=Pagination(total=0, limit=params.limit, offset=params.offset),
        )

    try:
        decoded = json.loads(data)
        return SearchResponse.from_dict({} if decoded is None else decoded)
    except (TypeError, ValueError) as exc:
        raise SearchRequestError(path, 0, "failed to parse search response", exc) from exc


def search(
    client: ApiClient,
    space_id: str,
    params: SearchParams | None = None,
    timeout: float | None = None,
) -> SearchResponse:
    """Search a space; default parameters are used when none are given."""
    if not space_id:
        cause = MissingRequiredError()
        raise SearchRequestError("/search", 0, "space ID is required", cause) from cause
    if params is None:
        params = new_search_params()
    try:
        params.validate()
    except AnytypeError as exc:
        raise SearchRequestError("/search", 0, "invalid search parameters", exc) from exc

    body, requested_tags = prepare_search_request(space_id, params)
    if requested_tags and params.limit < TAG_FILTER_LIMIT:
        _debug(
            client,
            "Increasing search limit for tag filtering: %d -> %d",
            params.limit,
            TAG_FILTER_LIMIT,
        )

    response = _execute_search(client, space_id, body, params, timeout)

    for obj in response.data:
        obj.tags = _collect_tags(obj)
        _debug(client, "Object '%s' has tags: %s", obj.name, obj.tags)

    if requested_tags:
        before = len(response.data)
        response = filter_objects_by_tags(response, requested_tags)
        _debug(client, "Tag filtering reduced results: %d -> %d", before, len(response.data))

    if response.pagination.limit == 0:
        response.pagination.limit = params.limit
    if response.pagination.offset == 0 and params.offset > 0:
        response.pagination.offset = params.offset

    return response