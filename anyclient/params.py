"""Request parameters for the Anytype API and their validation."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .models import (
    InvalidObjectIDError,
    InvalidParameterError,
    InvalidSpaceIDError,
    InvalidTypeIDError,
    Object,
    SortOptions,
)

DEFAULT_SEARCH_LIMIT = 100
DEFAULT_SEARCH_OFFSET = 0


@dataclass
class SearchParams:
    """Search criteria; tags are filtered on the client side."""

    space_id: str = ""
    query: str = ""
    types: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    sort: SortOptions | None = None
    limit: int = 0
    offset: int = 0

    def validate(self) -> None:
        if self.limit < 0 or self.offset < 0:
            raise InvalidParameterError()

    def copy(self) -> SearchParams:
        """Return an independent copy of these parameters."""
        return replace(
            self,
            types=list(self.types),
            tags=list(self.tags),
            sort=None if self.sort is None else replace(self.sort),
        )


def new_search_params() -> SearchParams:
    """Search parameters with the default limit and offset."""
    return SearchParams(limit=DEFAULT_SEARCH_LIMIT, offset=DEFAULT_SEARCH_OFFSET)


def _require_space(space_id: str) -> None:
    if not space_id:
        raise InvalidSpaceIDError()


def _require_object(object_id: str) -> None:
    if not object_id:
        raise InvalidObjectIDError()


@dataclass
class GetObjectParams:
    """Identifies an object to retrieve."""

    space_id: str = ""
    object_id: str = ""

    def validate(self) -> None:
        _require_space(self.space_id)
        _require_object(self.object_id)


@dataclass
class CreateObjectParams:
    """An object to create in a space."""

    space_id: str = ""
    object: Object | None = None

    def validate(self) -> None:
        _require_space(self.space_id)
        if self.object is None:
            raise InvalidParameterError()
        self.object.validate()


@dataclass
class UpdateObjectParams:
    """New data for an existing object."""

    space_id: str = ""
    object_id: str = ""
    object: Object | None = None

    def validate(self) -> None:
        _require_space(self.space_id)
        _require_object(self.object_id)
        if self.object is None:
            raise InvalidParameterError()


@dataclass
class DeleteObjectParams:
    """Identifies an object to delete."""

    space_id: str = ""
    object_id: str = ""

    def validate(self) -> None:
        _require_space(self.space_id)
        _require_object(self.object_id)


@dataclass
class GetSpacesParams:
    """Options for listing spaces."""

    include_members: bool = False


def new_get_spaces_params() -> GetSpacesParams:
    """Space listing options that include members."""
    return GetSpacesParams(include_members=True)


@dataclass
class GetSpaceByIDParams:
    """Identifies a space to retrieve."""

    space_id: str = ""

    def validate(self) -> None:
        _require_space(self.space_id)


@dataclass
class GetTypesParams:
    """Identifies the space whose types are listed."""

    space_id: str = ""

    def validate(self) -> None:
        _require_space(self.space_id)


@dataclass
class GetTypeByNameParams:
    """Looks up a type by its display name."""

    space_id: str = ""
    type_name: str = ""

    def validate(self) -> None:
        _require_space(self.space_id)
        if not self.type_name:
            raise InvalidTypeIDError()


@dataclass
class GetMembersParams:
    """Identifies the space whose members are listed."""

    space_id: str = ""

    def validate(self) -> None:
        _require_space(self.space_id)