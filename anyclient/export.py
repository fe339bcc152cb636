"""Exporting objects to files on disk, one directory per object type."""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Iterable, Mapping

from .images import Fetch, process_markdown_images
from .models import AnytypeError, InvalidObjectIDError, InvalidSpaceIDError, Object
from .search import ApiClient

SUPPORTED_EXPORT_FORMATS = ("markdown",)
UNKNOWN_TYPE_NAME = "Unknown"
MAX_REPORTED_ERRORS = 3

_INVALID_FILENAME_CHARS = str.maketrans({char: "_" for char in '/\\:*?"<>|'})
_REPEATED_HYPHENS = re.compile(r"-{2,}")

_log = logging.getLogger(__name__)


class ExportError(AnytypeError):
    """An object could not be exported."""

    default_message = "export failed"


def sanitize_filename(name: str) -> str:
    """Replace characters that are not allowed in file names with underscores."""
    return name.translate(_INVALID_FILENAME_CHARS)


def normalize_export_format(fmt: str) -> str:
    """Lower-case the format and map ``md`` to ``markdown``."""
    fmt = fmt.lower()
    return "markdown" if fmt == "md" else fmt


def type_name_for_export(obj: Object) -> str:
    """Directory name for the object's type, ``Unknown`` when it has none."""
    if obj.type is not None and obj.type.name:
        return sanitize_filename(obj.type.name)
    return UNKNOWN_TYPE_NAME


def export_filename(obj: Object, object_id: str, fmt: str) -> str:
    """File name for an exported object, built from its name or else its ID."""
    name = ""
    if obj.name:
        name = sanitize_filename(obj.name).replace(" ", "-")
        name = _REPEATED_HYPHENS.sub("-", name).strip("-")
    if not name:
        name = f"object-{object_id}"
    extension = "md" if fmt == "markdown" else fmt
    return f"{name}.{extension}"


def _is_not_found(exc: BaseException) -> bool:
    return getattr(exc, "status", None) == 404 or "returned status 404" in str(exc)


def _decode(data: bytes | str) -> str:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8", errors="surrogateescape")
    return data


class Exporter:
    """Exports objects of a space through an API client."""

    def __init__(self, client: ApiClient, fetch: Fetch | None = None) -> None:
        self._client = client
        self._fetch = fetch
        self._logger: logging.Logger = getattr(client, "logger", None) or _log

    def _get_object(self, space_id: str, object_id: str) -> Object:
        data = self._client.make_request("GET", f"/v1/spaces/{space_id}/objects/{object_id}")
        decoded = json.loads(_decode(data) or "null")
        if decoded is None:
            decoded = {}
        if isinstance(decoded, Mapping) and isinstance(decoded.get("object"), Mapping):
            decoded = decoded["object"]
        return Object.from_dict(decoded)

    def _content_from_object(self, space_id: str, object_id: str) -> str:
        """Build markdown from the object's own fields when no export is available."""
        try:
            obj = self._get_object(space_id, object_id)
        except Exception as exc:
            raise ExportError(f"failed to get object details: {exc}") from exc

        parts: list[str] = []
        if obj.name:
            icon = ""
            if obj.icon is not None:
                icon = obj.icon.emoji or obj.icon.name
            title = f"{icon} {obj.name}" if icon else obj.name
            parts.append(f"# {title}\n\n")
        if obj.tags:
            parts.append(f"**Tags:** {', '.join(obj.tags)}\n\n")
        if obj.snippet:
            parts.append(f"{obj.snippet}\n\n")
        parts.append("---\n")
        type_name = obj.type.name if obj.type is not None else ""
        parts.append(f"Type: {type_name}  \n")
        if obj.layout:
            parts.append(f"Layout: {obj.layout}  \n")
        return "".join(parts)

    def object_content(self, space_id: str, object_id: str, fmt: str) -> str:
        """Content of an object in the given format.

        A JSON reply's ``markdown`` or ``content`` field is used when set, any
        other reply is taken as the content itself. If the export endpoint is
        not found, markdown is built from the object's fields.
        """
        path = f"/v1/spaces/{space_id}/objects/{object_id}/{fmt}"
        try:
            data = self._client.make_request("GET", path)
        except Exception as exc:
            if _is_not_found(exc):
                self._logger.debug(
                    "Export endpoint returned 404, trying to extract content "
                    "from regular object endpoint"
                )
                return self._content_from_object(space_id, object_id)
            raise ExportError(f"failed to export object {object_id}: {exc}") from exc

        text = _decode(data)
        if not text:
            raise ExportError(f"received empty response for object {object_id}")

        try:
            decoded: Any = json.loads(text)
        except ValueError:
            return text
        if isinstance(decoded, Mapping):
            fields = [decoded.get("markdown"), decoded.get("content")]
            if all(value is None or isinstance(value, str) for value in fields):
                for value in fields:
                    if value:
                        return value
        return text

    def export_object(
        self,
        space_id: str,
        object_id: str,
        export_path: str | os.PathLike[str],
        fmt: str,
    ) -> Path:
        """Write one object to ``<export_path>/<type name>/<name>.<ext>`` and return its path."""
        if not space_id:
            raise InvalidSpaceIDError()
        if not object_id:
            raise InvalidObjectIDError()
        if not str(export_path):
            raise ExportError("export path cannot be empty")

        fmt = normalize_export_format(fmt)
        if fmt not in SUPPORTED_EXPORT_FORMATS:
            self._logger.info(
                "Format '%s' is not officially supported by the Anytype API "
                "(only 'markdown' is guaranteed). Attempting export anyway.",
                fmt,
            )

        try:
            obj = self._get_object(space_id, object_id)
        except Exception as exc:
            raise ExportError(f"failed to get object {object_id}: {exc}") from exc

        type_dir = Path(export_path) / type_name_for_export(obj)
        try:
            type_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise ExportError(f"failed to create export directory: {exc}") from exc

        self._logger.debug(
            "Exporting object - ID: %s, Name: %s, Type: %s", obj.id, obj.name, obj.type
        )

        file_path = type_dir / export_filename(obj, object_id, fmt)

        try:
            content = self.object_content(space_id, object_id, fmt)
        except Exception as exc:
            raise ExportError(f"failed to get object content: {exc}") from exc

        if fmt == "markdown":
            self._logger.debug("Processing images in markdown content")
            try:
                content = process_markdown_images(content, export_path, self._fetch)
            except Exception as exc:
                self._logger.error("Failed to process images: %s", exc)

        try:
            file_path.write_bytes(content.encode("utf-8", errors="surrogateescape"))
        except OSError as exc:
            raise ExportError(f"failed to write to file: {exc}") from exc

        self._logger.info("Object exported successfully to: %s", file_path)
        return file_path

    def export_objects(
        self,
        space_id: str,
        objects: Iterable[Object],
        export_path: str | os.PathLike[str],
        fmt: str,
    ) -> list[Path]:
        """Export each object, skipping failures; raise only if none could be exported."""
        objects = list(objects)
        if not objects:
            raise ExportError("no objects to export")

        exported: list[Path] = []
        errors: list[str] = []
        for obj in objects:
            try:
                exported.append(self.export_object(space_id, obj.id, export_path, fmt))
            except Exception as exc:
                message = f"Failed to export object {obj.id} ({obj.name}): {exc}"
                errors.append(message)
                self._logger.error("%s", message)

        if not exported:
            if errors:
                shown = errors[:MAX_REPORTED_ERRORS]
                raise ExportError(
                    f"failed to export any objects. First {len(shown)} errors: "
                    + "; ".join(shown)
                )
            raise ExportError("failed to export any objects")

        if errors:
            self._logger.info(
                "Exported %d objects successfully, %d objects failed",
                len(exported),
                len(errors),
            )
        return exported