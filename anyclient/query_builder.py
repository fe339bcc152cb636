"""A fluent builder for search queries."""

from __future__ import annotations

from datetime import timedelta
from typing import Callable, Iterator

from .models import AnytypeError, InvalidParameterError, Object, SearchResponse, SortOptions
from .params import SearchParams, new_search_params
from .search import ApiClient, search


class QueryBuilder:
    """Builds search parameters step by step and runs the search."""

    def __init__(self, client: ApiClient, space_id: str) -> None:
        self._client = client
        self._space_id = space_id
        self._params = new_search_params()
        self._timeout: float | None = None

    def with_query(self, query: str) -> QueryBuilder:
        self._params.query = query.strip()
        return self

    def with_type(self, type_name: str) -> QueryBuilder:
        """Filter by a type given by its display name, resolved to its key."""
        if not type_name:
            return self
        try:
            type_key = self._client.get_type_by_name(self._space_id, type_name)
        except Exception as exc:
            raise AnytypeError(f"failed to resolve type name '{type_name}': {exc}") from exc
        self._params.types.append(type_key)
        return self

    def with_types(self, *args: str) -> QueryBuilder:
        for type_name in args:
            self.with_type(type_name)
        return self

    def with_type_keys(self, *args: str) -> QueryBuilder:
        """Filter by type keys such as ``ot-page``."""
        self._params.types.extend(key for key in args if key)
        return self

    def with_tag(self, tag: str) -> QueryBuilder:
        return self.with_tags(tag)

    def with_tags(self, *args: str) -> QueryBuilder:
        self._params.tags.extend(tag for tag in (raw.strip() for raw in args) if tag)
        return self

    def with_limit(self, limit: int) -> QueryBuilder:
        if limit <= 0:
            raise InvalidParameterError("limit must be greater than 0")
        self._params.limit = limit
        return self

    def with_offset(self, offset: int) -> QueryBuilder:
        if offset < 0:
            raise InvalidParameterError("offset cannot be negative")
        self._params.offset = offset
        return self

    def with_sort_field(self, field: str, ascending: bool = True) -> QueryBuilder:
        field = field.strip()
        if not field:
            raise InvalidParameterError("sort field cannot be empty")
        self._params.sort = SortOptions(
            property=field, direction="asc" if ascending else "desc"
        )
        return self

    def with_sort_by_name(self, ascending: bool = True) -> QueryBuilder:
        return self.with_sort_field("name", ascending)

    def with_sort_by_created_at(self, ascending: bool = True) -> QueryBuilder:
        return self.with_sort_field("createdAt", ascending)

    def with_sort_by_updated_at(self, ascending: bool = True) -> QueryBuilder:
        return self.with_sort_field("updatedAt", ascending)

    def with_timeout(self, timeout: float | timedelta) -> QueryBuilder:
        """Set a timeout, in seconds, for the search request."""
        seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)
        if seconds <= 0:
            raise InvalidParameterError("timeout must be greater than 0")
        self._timeout = seconds
        return self

    def get_params(self) -> SearchParams:
        """A copy of the parameters built so far."""
        return self._params.copy()

    def execute(self) -> SearchResponse:
        return search(self._client, self._space_id, self._params, self._timeout)

    def execute_with_callback(self, callback: Callable[[Object], None]) -> None:
        """Run the search and pass each object to the callback; its errors propagate."""
        for obj in self.results():
            callback(obj)

    def results(self) -> Iterator[Object]:
        """Run the search and yield the objects found."""
        yield from self.execute().data