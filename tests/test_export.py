import json

import pytest

from anyclient.export import (
    ExportError,
    Exporter,
    export_filename,
    normalize_export_format,
    sanitize_filename,
    type_name_for_export,
)
from anyclient.models import InvalidObjectIDError, InvalidSpaceIDError, Object, TypeInfo


class FakeHTTPError(Exception):
    def __init__(self, path, status):
        super().__init__(f"request to {path} returned status {status}")
        self.status = status


class FakeClient:
    debug = False
    logger = None

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def make_request(self, method, path, body=None, timeout=None):
        self.requests.append((method, path))
        if path not in self.routes:
            raise FakeHTTPError(path, 404)
        return self.routes[path]

    def get_type_by_name(self, space_id, type_name):
        return type_name


MOCK_MARKDOWN = """# Test Note

This is the content of a test note.

- Item 1
- Item 2
- Item 3

## Heading

More content here.
"""


def _object_json(object_id, name, type_name="Note", **extra):
    data = {"id": object_id, "name": name, "type": {"key": "ot-note", "name": type_name}}
    data.update(extra)
    return json.dumps(data).encode()


def test_export_object(tmp_path):
    client = FakeClient({
        "/v1/spaces/space123/objects/obj123": _object_json("obj123", "Test Note"),
        "/v1/spaces/space123/objects/obj123/markdown": MOCK_MARKDOWN.encode(),
    })
    path = Exporter(client).export_object("space123", "obj123", tmp_path, "md")
    assert path == tmp_path / "Note" / "Test-Note.md"
    assert path.read_text(encoding="utf-8") == MOCK_MARKDOWN


def test_export_objects(tmp_path):
    client = FakeClient({
        "/v1/spaces/space123/objects/obj123": _object_json("obj123", "First Note"),
        "/v1/spaces/space123/objects/obj123/markdown": b"# First Note content",
        "/v1/spaces/space123/objects/obj456": _object_json("obj456", "Second Note"),
        "/v1/spaces/space123/objects/obj456/markdown": b"# Second Note content",
    })
    objects = [
        Object(id="obj123", name="First Note", type=TypeInfo(key="ot-note", name="Note")),
        Object(id="obj456", name="Second Note", type=TypeInfo(key="ot-note", name="Note")),
    ]
    paths = Exporter(client).export_objects("space123", objects, tmp_path, "md")
    assert len(paths) == 2
    assert paths[0].read_text() == "# First Note content"
    assert paths[1].read_text() == "# Second Note content"


@pytest.mark.parametrize(
    "space_id, object_id, export_path, error",
    [
        ("", "obj123", "/tmp", InvalidSpaceIDError),
        ("space123", "", "/tmp", InvalidObjectIDError),
        ("space123", "obj123", "", ExportError),
    ],
)
def test_export_validation(space_id, object_id, export_path, error):
    client = FakeClient({})
    with pytest.raises(error):
        Exporter(client).export_object(space_id, object_id, export_path, "md")
    assert client.requests == []


def test_export_objects_empty_list():
    with pytest.raises(ExportError, match="no objects to export"):
        Exporter(FakeClient({})).export_objects("space123", [], "/tmp", "md")


def test_export_objects_all_fail(tmp_path):
    objects = [Object(id="a", name="A"), Object(id="b", name="B")]
    with pytest.raises(ExportError) as info:
        Exporter(FakeClient({})).export_objects("space123", objects, tmp_path, "md")
    message = str(info.value)
    assert message.startswith("failed to export any objects. First 2 errors:")
    assert "Failed to export object a (A)" in message
    assert "Failed to export object b (B)" in message


def test_export_objects_partial_failure(tmp_path):
    client = FakeClient({
        "/v1/spaces/s/objects/ok": _object_json("ok", "Fine"),
        "/v1/spaces/s/objects/ok/markdown": b"body",
    })
    objects = [Object(id="missing"), Object(id="ok")]
    paths = Exporter(client).export_objects("s", objects, tmp_path, "markdown")
    assert paths == [tmp_path / "Note" / "Fine.md"]


def test_object_content_json_fields():
    client = FakeClient({
        "/v1/spaces/s/objects/o/markdown": json.dumps({"markdown": "# md"}).encode(),
        "/v1/spaces/s/objects/p/markdown": json.dumps({"content": "plain"}).encode(),
        "/v1/spaces/s/objects/q/markdown": b'{"other": 1}',
    })
    exporter = Exporter(client)
    assert exporter.object_content("s", "o", "markdown") == "# md"
    assert exporter.object_content("s", "p", "markdown") == "plain"
    assert exporter.object_content("s", "q", "markdown") == '{"other": 1}'


def test_object_content_empty_response():
    client = FakeClient({"/v1/spaces/s/objects/o/markdown": b""})
    with pytest.raises(ExportError, match="empty response"):
        Exporter(client).object_content("s", "o", "markdown")


def test_object_content_falls_back_to_object_fields():
    details = [{"id": "tags", "details": {"tags": [{"name": "a"}, {"name": "b"}]}}]
    client = FakeClient({
        "/v1/spaces/s/objects/o": _object_json(
            "o", "Title", icon={"emoji": "📝"}, snippet="snippet",
            layout="basic", details=details,
        ),
    })
    content = Exporter(client).object_content("s", "o", "markdown")
    assert content == (
        "# 📝 Title\n\n**Tags:** a, b\n\nsnippet\n\n---\nType: Note  \nLayout: basic  \n"
    )


def test_export_downloads_images(tmp_path):
    markdown = "see ![pic](http://127.0.0.1:31009/image/abc)"
    client = FakeClient({
        "/v1/spaces/s/objects/o": _object_json("o", "Pic"),
        "/v1/spaces/s/objects/o/markdown": markdown.encode(),
    })
    path = Exporter(client, fetch=lambda url: b"png").export_object("s", "o", tmp_path, "md")
    assert path.read_text() == "see ![pic](../static/abc.png)"
    assert (tmp_path / "static" / "abc.png").read_bytes() == b"png"


def test_export_unsupported_format_uses_its_extension(tmp_path):
    client = FakeClient({
        "/v1/spaces/s/objects/o": _object_json("o", "Page", type_name="Web/Page"),
        "/v1/spaces/s/objects/o/html": b"<p>x</p>",
    })
    path = Exporter(client).export_object("s", "o", tmp_path, "HTML")
    assert path == tmp_path / "Web_Page" / "Page.html"
    assert path.read_text() == "<p>x</p>"


@pytest.mark.parametrize("given, expected", [("md", "markdown"), ("MD", "markdown"),
                                             ("Markdown", "markdown"), ("HTML", "html")])
def test_normalize_export_format(given, expected):
    assert normalize_export_format(given) == expected


def test_type_name_for_export():
    assert type_name_for_export(Object()) == "Unknown"
    assert type_name_for_export(Object(type=TypeInfo(name=""))) == "Unknown"
    assert type_name_for_export(Object(type=TypeInfo(name="A/B"))) == "A_B"


@pytest.mark.parametrize(
    "name, fmt, expected",
    [
        ("  My / Note  ", "markdown", "My-_-Note.md"),
        ("---", "markdown", "object-id1.md"),
        ("", "html", "object-id1.html"),
        ("Plain", "txt", "Plain.txt"),
    ],
)
def test_export_filename(name, fmt, expected):
    assert export_filename(Object(name=name), "id1", fmt) == expected