"""Data models exchanged with the Anytype API, their JSON mapping and validation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

VERSION = "0.2.0-alpha.2"
API_VERSION = "2025-05-20"


class AnytypeError(Exception):
    """Base class for errors raised by this package."""

    default_message = "anytype error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidSpaceIDError(AnytypeError, ValueError):
    """A space ID is missing or invalid."""

    default_message = "invalid space ID"


class InvalidObjectIDError(AnytypeError, ValueError):
    """An object ID is missing or invalid."""

    default_message = "invalid object ID"


class InvalidTypeIDError(AnytypeError, ValueError):
    """A type ID, key or name is missing or invalid."""

    default_message = "invalid type ID"


class InvalidParameterError(AnytypeError, ValueError):
    """A request parameter is invalid."""

    default_message = "invalid parameter"


class MissingRequiredError(AnytypeError, ValueError):
    """A required value is missing."""

    default_message = "missing required field"


_TYPE_NAMES = {str: "string", bool: "boolean", int: "integer", float: "number", list: "array"}


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"{what}: expected a JSON object, got {type(data).__name__}")
    return data


def _get(data: Mapping[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if kind is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        if ok:
            value = float(value)
    elif kind is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, kind)
    if not ok:
        raise TypeError(
            f"field {key!r}: expected {_TYPE_NAMES.get(kind, kind.__name__)}, "
            f"got {type(value).__name__}"
        )
    return value


def _str(data: Mapping[str, Any], key: str) -> str:
    return _get(data, key, str, "")


def _bool(data: Mapping[str, Any], key: str) -> bool:
    return _get(data, key, bool, False)


def _int(data: Mapping[str, Any], key: str) -> int:
    return _get(data, key, int, 0)


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    items = _get(data, key, list, [])
    result = []
    for item in items:
        if item is not None and not isinstance(item, str):
            raise TypeError(f"field {key!r}: expected array of strings")
        result.append(item or "")
    return result


def _nested(data: Mapping[str, Any], key: str, cls: Any) -> Any:
    value = data.get(key)
    return None if value is None else cls.from_dict(value)


def _nested_list(data: Mapping[str, Any], key: str, cls: Any) -> list:
    return [cls() if item is None else cls.from_dict(item) for item in _get(data, key, list, [])]


def _is_empty(value: Any, spec: Any) -> bool:
    omit = spec.metadata.get("omit")
    if omit == "never":
        return False
    if value is None:
        return True
    if omit == "nil" or is_dataclass(value):
        return False
    if isinstance(value, (list, dict)):
        return not value
    return value in ("", False, 0)


def _encode(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for spec in fields(value):
            if spec.metadata.get("skip"):
                continue
            item = getattr(value, spec.name)
            if _is_empty(item, spec):
                continue
            out[spec.metadata.get("key", spec.name)] = _encode(item)
        return out
    if isinstance(value, list):
        return [_encode(item) for item in value]
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    return value


_ZERO_TIME = "0001-01-01T00:00:00Z"
_TIMESTAMP = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)


def _parse_time(text: str) -> datetime | None:
    match = _TIMESTAMP.match(text)
    if not match:
        raise ValueError(f"invalid timestamp: {text!r}")
    base, fraction, zone = match.groups()
    micro = (fraction or "").ljust(6, "0")[:6]
    offset = "+00:00" if zone == "Z" else zone
    moment = datetime.fromisoformat(f"{base}.{micro}{offset}")
    if moment.utcoffset() == timedelta(0) and moment.replace(tzinfo=None) == datetime(1, 1, 1):
        return None
    return moment


def _format_time(moment: datetime | None) -> str:
    if moment is None:
        return _ZERO_TIME
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass
class Icon:
    """An emoji, named icon or file used to decorate an entity."""

    format: str = ""
    emoji: str = ""
    name: str = ""
    file: str = ""
    color: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Icon:
        data = _require_mapping(data, "icon")
        return cls(
            format=_str(data, "format"),
            emoji=_str(data, "emoji"),
            name=_str(data, "name"),
            file=_str(data, "file"),
            color=_str(data, "color"),
        )


@dataclass
class TextBlock:
    """Text content of a block."""

    text: str = ""
    style: str = ""
    checked: bool = False
    color: str = ""
    icon: Icon | None = None

    @classmethod
    def from_dict(cls, data: Any) -> TextBlock:
        data = _require_mapping(data, "text block")
        return cls(
            text=_str(data, "text"),
            style=_str(data, "style"),
            checked=_bool(data, "checked"),
            color=_str(data, "color"),
            icon=_nested(data, "icon", Icon),
        )


@dataclass
class FileBlock:
    """File content of a block."""

    hash: str = ""
    name: str = ""
    mime: str = ""
    size: int = 0
    type: str = ""
    state: str = ""
    style: str = ""
    target_object_id: str = ""
    added_at: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> FileBlock:
        data = _require_mapping(data, "file block")
        return cls(
            hash=_str(data, "hash"),
            name=_str(data, "name"),
            mime=_str(data, "mime"),
            size=_int(data, "size"),
            type=_str(data, "type"),
            state=_str(data, "state"),
            style=_str(data, "style"),
            target_object_id=_str(data, "target_object_id"),
            added_at=_int(data, "added_at"),
        )


@dataclass
class Block:
    """A content block of an object."""

    id: str = ""
    children_ids: list[str] = field(default_factory=list)
    align: str = ""
    vertical_align: str = ""
    background_color: str = ""
    text: TextBlock | None = None
    file: FileBlock | None = None
    property: Any = field(default=None, metadata={"omit": "nil"})

    @classmethod
    def from_dict(cls, data: Any) -> Block:
        data = _require_mapping(data, "block")
        return cls(
            id=_str(data, "id"),
            children_ids=_str_list(data, "children_ids"),
            align=_str(data, "align"),
            vertical_align=_str(data, "vertical_align"),
            background_color=_str(data, "background_color"),
            text=_nested(data, "text", TextBlock),
            file=_nested(data, "file", FileBlock),
            property=data.get("property"),
        )


@dataclass
class TypeInfo:
    """An object type."""

    model: str = field(default="", metadata={"key": "object"})
    id: str = ""
    key: str = ""
    name: str = ""
    icon: Icon | None = None
    archived: bool = False
    recommended_layout: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> TypeInfo:
        data = _require_mapping(data, "type")
        return cls(
            model=_str(data, "object"),
            id=_str(data, "id"),
            key=_str(data, "key"),
            name=_str(data, "name"),
            icon=_nested(data, "icon", Icon),
            archived=_bool(data, "archived"),
            recommended_layout=_str(data, "recommended_layout"),
        )


@dataclass
class ChallengeResponse:
    """Response of the authentication challenge endpoint."""

    challenge_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ChallengeResponse:
        data = _require_mapping(data, "challenge response")
        return cls(challenge_id=_str(data, "challenge_id"))


@dataclass
class AuthResponse:
    """Response carrying the session token and app key."""

    session_token: str = ""
    app_key: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> AuthResponse:
        data = _require_mapping(data, "auth response")
        return cls(session_token=_str(data, "session_token"), app_key=_str(data, "app_key"))


@dataclass
class AuthConfig:
    """Stored authentication settings; a missing timestamp is None."""

    api_url: str = ""
    session_token: str = ""
    app_key: str = ""
    timestamp: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> AuthConfig:
        data = _require_mapping(data, "auth config")
        raw_time = _get(data, "timestamp", str, None)
        return cls(
            api_url=_str(data, "api_url"),
            session_token=_str(data, "session_token"),
            app_key=_str(data, "app_key"),
            timestamp=None if raw_time is None else _parse_time(raw_time),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "api_url": self.api_url,
            "session_token": self.session_token,
            "app_key": self.app_key,
            "timestamp": _format_time(self.timestamp),
        }


@dataclass
class Member:
    """A member of a space."""

    model: str = field(default="", metadata={"key": "object"})
    id: str = ""
    name: str = ""
    icon: Icon | None = None
    identity: str = ""
    global_name: str = ""
    role: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Member:
        data = _require_mapping(data, "member")
        return cls(
            model=_str(data, "object"),
            id=_str(data, "id"),
            name=_str(data, "name"),
            icon=_nested(data, "icon", Icon),
            identity=_str(data, "identity"),
            global_name=_str(data, "global_name"),
            role=_str(data, "role"),
            status=_str(data, "status"),
        )


@dataclass
class Space:
    """A space; members are filled in separately and never read from JSON."""

    model: str = field(default="", metadata={"key": "object"})
    id: str = ""
    name: str = ""
    icon: Icon | None = None
    description: str = ""
    gateway_url: str = ""
    network_id: str = ""
    home_object_id: str = ""
    archive_object_id: str = ""
    profile_object_id: str = ""
    workspace_object_id: str = ""
    device_id: str = ""
    account_space_id: str = ""
    space_view_id: str = ""
    local_path: str = ""
    timezone: str = ""
    is_read_only: bool = False
    can_delete: bool = False
    can_leave: bool = False
    role: str = ""
    members: list[Member] = field(default_factory=list, metadata={"skip": True})

    @classmethod
    def from_dict(cls, data: Any) -> Space:
        data = _require_mapping(data, "space")
        text_fields = (
            "id", "name", "description", "gateway_url", "network_id", "home_object_id",
            "archive_object_id", "profile_object_id", "workspace_object_id", "device_id",
            "account_space_id", "space_view_id", "local_path", "timezone", "role",
        )
        flag_fields = ("is_read_only", "can_delete", "can_leave")
        return cls(
            model=_str(data, "object"),
            icon=_nested(data, "icon", Icon),
            **{name: _str(data, name) for name in text_fields},
            **{name: _bool(data, name) for name in flag_fields},
        )

    def validate(self) -> None:
        if not self.id:
            raise InvalidSpaceIDError()


@dataclass
class Pagination:
    """Pagination metadata of a list response."""

    total: int = field(default=0, metadata={"omit": "never"})
    offset: int = field(default=0, metadata={"omit": "never"})
    limit: int = field(default=0, metadata={"omit": "never"})
    has_more: bool = field(default=False, metadata={"omit": "never"})

    @classmethod
    def from_dict(cls, data: Any) -> Pagination:
        data = _require_mapping(data, "pagination")
        return cls(
            total=_int(data, "total"),
            offset=_int(data, "offset"),
            limit=_int(data, "limit"),
            has_more=_bool(data, "has_more"),
        )


def _pagination(data: Mapping[str, Any]) -> Pagination:
    return _nested(data, "pagination", Pagination) or Pagination()


@dataclass
class MembersResponse:
    """A page of space members."""

    data: list[Member] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def from_dict(cls, data: Any) -> MembersResponse:
        data = _require_mapping(data, "members response")
        return cls(data=_nested_list(data, "data", Member), pagination=_pagination(data))


@dataclass
class SpacesResponse:
    """A page of spaces."""

    data: list[Space] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def from_dict(cls, data: Any) -> SpacesResponse:
        data = _require_mapping(data, "spaces response")
        return cls(data=_nested_list(data, "data", Space), pagination=_pagination(data))


@dataclass
class PropertyTag:
    """A tag value of a select or multi-select property."""

    id: str = ""
    name: str = ""
    color: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> PropertyTag:
        data = _require_mapping(data, "tag")
        return cls(id=_str(data, "id"), name=_str(data, "name"), color=_str(data, "color"))


@dataclass
class Property:
    """A property of an object and its value."""

    id: str = ""
    name: str = ""
    format: str = ""
    multi_select: list[PropertyTag] = field(default_factory=list)
    date: str = ""
    objects: list[str] = field(default_factory=list, metadata={"key": "object"})
    number: float = 0.0
    text: str = ""
    url: str = ""
    email: str = ""
    phone: str = ""
    checkbox: bool = False
    files: list[str] = field(default_factory=list, metadata={"key": "file"})
    select: PropertyTag | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Property:
        data = _require_mapping(data, "property")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            format=_str(data, "format"),
            multi_select=_nested_list(data, "multi_select", PropertyTag),
            date=_str(data, "date"),
            objects=_str_list(data, "object"),
            number=_get(data, "number", float, 0.0),
            text=_str(data, "text"),
            url=_str(data, "url"),
            email=_str(data, "email"),
            phone=_str(data, "phone"),
            checkbox=_bool(data, "checkbox"),
            files=_str_list(data, "file"),
            select=_nested(data, "select", PropertyTag),
        )


_RELATION_FIELDS = ("id", "name", "type_key", "snippet")


@dataclass
class Relation:
    """A link to another object."""

    id: str = ""
    name: str = ""
    type_key: str = ""
    snippet: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Relation:
        data = _require_mapping(data, "relation")
        return cls(**{name: _str(data, name) for name in _RELATION_FIELDS})


@dataclass
class Relations:
    """Related objects grouped by relation type."""

    items: dict[str, list[Relation]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Relations:
        """Read the ``items`` form, falling back to a bare map of relation lists."""
        data = _require_mapping(data, "relations")
        try:
            return cls(items=cls._strict_items(data.get("items")))
        except TypeError:
            pass

        items: dict[str, list[Relation]] = {}
        for rel_type, rel_list in data.items():
            if not isinstance(rel_list, list):
                continue
            relations = [
                Relation(**{
                    name: raw[name] for name in _RELATION_FIELDS if isinstance(raw.get(name), str)
                })
                for raw in rel_list
                if isinstance(raw, Mapping)
            ]
            if relations:
                items[rel_type] = relations
        return cls(items=items)

    @staticmethod
    def _strict_items(raw: Any) -> dict[str, list[Relation]]:
        if raw is None:
            return {}
        raw = _require_mapping(raw, "relation items")
        items: dict[str, list[Relation]] = {}
        for rel_type, rel_list in raw.items():
            if rel_list is None:
                items[rel_type] = []
                continue
            if not isinstance(rel_list, list):
                raise TypeError(f"relation items {rel_type!r}: expected array")
            items[rel_type] = [
                Relation() if rel is None else Relation.from_dict(rel) for rel in rel_list
            ]
        return items


@dataclass
class Object:
    """An object in a space; tags are read from the ``details`` section."""

    model: str = field(default="", metadata={"key": "object"})
    id: str = ""
    name: str = ""
    type: TypeInfo | None = None
    icon: Icon | None = None
    archived: bool = False
    space_id: str = ""
    snippet: str = ""
    layout: str = ""
    blocks: list[Block] = field(default_factory=list)
    relations: Relations | None = None
    properties: list[Property] = field(default_factory=list)
    tags: list[str] = field(default_factory=list, metadata={"skip": True})

    @classmethod
    def from_dict(cls, data: Any) -> Object:
        data = _require_mapping(data, "object")

        tags: list[str] = []
        for detail in _get(data, "details", list, []):
            if isinstance(detail, Mapping) and detail.get("id") == "tags":
                inner = _require_mapping(detail.get("details") or {}, "details")
                tags = [
                    "" if tag is None else _str(_require_mapping(tag, "tag"), "name")
                    for tag in _get(inner, "tags", list, [])
                ]
                break

        raw_relations = data.get("relations")
        relations = None
        if raw_relations is not None:
            raw_relations = _require_mapping(raw_relations, "relations")
            if raw_relations:
                relations = Relations.from_dict(raw_relations)

        return cls(
            model=_str(data, "object"),
            id=_str(data, "id"),
            name=_str(data, "name"),
            type=_nested(data, "type", TypeInfo),
            icon=_nested(data, "icon", Icon),
            archived=_bool(data, "archived"),
            space_id=_str(data, "space_id"),
            snippet=_str(data, "snippet"),
            layout=_str(data, "layout"),
            blocks=_nested_list(data, "blocks", Block),
            relations=relations,
            properties=_nested_list(data, "properties", Property),
            tags=tags,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON form with empty fields left out; tags are not included."""
        return _encode(self)

    def validate(self) -> None:
        if not self.id:
            raise InvalidObjectIDError()
        if self.type is None or not self.type.key:
            raise InvalidTypeIDError()


@dataclass
class SortOptions:
    """Sorting criteria for search results."""

    property: str = ""
    direction: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)


@dataclass
class SearchResponse:
    """A page of search results."""

    data: list[Object] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def from_dict(cls, data: Any) -> SearchResponse:
        data = _require_mapping(data, "search response")
        return cls(data=_nested_list(data, "data", Object), pagination=_pagination(data))


@dataclass(frozen=True)
class VersionInfo:
    """Version of this package and of the API it targets."""

    version: str
    api_version: str


def get_version_info() -> VersionInfo:
    return VersionInfo(version=VERSION, api_version=API_VERSION)