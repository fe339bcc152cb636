# anyclient

A small Python library, with no third-party dependencies, for working with
the Anytype local API. It provides:

- data models for spaces, members, objects, types and search results, read
  from and written to JSON (`anyclient.models`);
- request parameter objects with validation (`anyclient.params`);
- search with client-side, case-insensitive tag filtering (`anyclient.search`);
- lenient parsing of search responses in older shapes (`anyclient.search_parser`);
- a fluent `QueryBuilder` for composing searches (`anyclient.query_builder`);
- markdown export of objects to disk (`anyclient.export`);
- download of the local images that exported markdown refers to
  (`anyclient.images`);
- storage of authentication settings (`anyclient.auth_config`).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## What the package does not include

There is no HTTP client for the API and no authentication flow. Searching,
query building and export all work through an object that you supply. It must
match the `ApiClient` protocol in `anyclient.search`:

- `debug: bool` and `logger: logging.Logger | None` attributes. Search debug
  messages are logged only when `debug` is true and a logger is set.
- `make_request(method, path, body=None, timeout=None) -> bytes`. It sends a
  request such as `GET /v1/spaces/{space_id}/objects/{object_id}` and returns
  the response body. On failure it raises an exception. For a missing
  resource, that exception should have a `status` attribute of `404`, or a
  message containing `returned status 404`.
- `get_type_by_name(space_id, type_name) -> str`. It returns the key of the
  type with that display name. Only `QueryBuilder.with_type` and
  `QueryBuilder.with_types` call it.

There is also no command-line program.

## Searching

```python
from anyclient.params import SearchParams
from anyclient.search import search

response = search(client, "space123", SearchParams(query="meeting", limit=50))
for obj in response.data:
    print(obj.id, obj.name, obj.tags)
```

If `params` is omitted, the defaults from `new_search_params()` are used: a
limit of 100 and an offset of 0.

Tags are filtered on the client side:

- An object is kept when it carries any requested tag. Tags are compared
  without regard to case.
- An object's tags are gathered from three places: its `details`, relations
  named `tag`/`tags`, and multi-select properties named `tag`/`tags`.
- When tags are requested, the request limit is raised to at least 1000, so
  that enough candidates come back.
- `pagination.total` is set to the number of objects kept.

Errors are raised as `SearchRequestError`. It carries `path`, `status`,
`message` and `cause`.

## Building a query

`QueryBuilder` in `anyclient.query_builder` wraps an `ApiClient` and a space
ID. Every `with_*` method returns the builder, so calls can be chained.
Invalid values raise at once, as `InvalidParameterError`:

- a limit that is not positive;
- a negative offset;
- an empty sort field;
- a timeout that is not positive.

A type name that cannot be resolved raises `AnytypeError`.

```python
from anyclient.query_builder import QueryBuilder

qb = (
    QueryBuilder(client, "space123")
    .with_query("meeting")
    .with_type_keys("ot-note")
    .with_tag("important")
    .with_limit(25)
    .with_sort_by_name(True)
    .with_timeout(5)          # seconds, or a datetime.timedelta
)

response = qb.execute()
for obj in qb.results():      # runs the search again and yields each object
    print(obj.name)
qb.execute_with_callback(print)
saved = qb.get_params()       # an independent copy of the SearchParams
```

The sort helpers are `with_sort_by_name`, `with_sort_by_created_at` and
`with_sort_by_updated_at`. Each takes `ascending`, which defaults to true.

## Exporting objects

`Exporter` in `anyclient.export` writes each object to
`<export_path>/<Type name>/<Object-name>.<ext>`.

- The type directory is `Unknown` when the object has no type name.
- File names have characters that are invalid in file names replaced, spaces
  turned into hyphens, and repeated hyphens collapsed.
- When no name is left, the file is named `object-<id>`.

```python
from anyclient.export import Exporter

exporter = Exporter(client)
path = exporter.export_object("space123", "obj456", "./exports", "md")
paths = exporter.export_objects("space123", response.data, "./exports", "md")
```

The format is lower-cased, and `md` is mapped to `markdown`. Only `markdown`
is officially supported; other formats are attempted anyway, and a notice is
logged.

Content is taken from `GET /v1/spaces/{space}/objects/{id}/{format}`:

- A JSON reply's `markdown` or `content` field is used when it is set.
- Any other reply is taken as the content itself.
- If that endpoint returns 404, a short markdown page is built from the
  object's own fields.

`export_objects` skips objects that fail. It raises `ExportError` only when
none could be exported, and its message quotes the first three errors.

## Images in exported markdown

For markdown exports, images served at `http://127.0.0.1:<port>/image/<hash>`
are handled by `anyclient.images.process_markdown_images`:

- each image is saved as `<export_path>/static/<hash>.png`;
- its link is rewritten to `../static/<hash>.png`.

Images that already exist on disk are not downloaded again. Images that fail
to download keep their original link.

Both `download_image` and `process_markdown_images` accept an optional `fetch`
callable, `url -> bytes`, in place of the built-in HTTP download. `Exporter`
takes the same callable as its `fetch` argument.

## Parsing older search responses

`anyclient.search_parser.parse_search_response(data, debug=False, logger=None)`
accepts two shapes:

- the `{"data": [...], "pagination": {...}}` shape;
- an older `{"items": [...], "total", "limit", "offset"}` shape.

It raises `SearchError` when the body carries `{"error": {"message": ...}}`.
It returns `None` for a well-formed response with no objects.

## Authentication settings

`anyclient.auth_config` stores an `AuthConfig` in
`~/.config/anytype-go/anytype_auth.json`. The file is written with mode 0600.
Every function takes an optional `home` directory in place of the user's home.
An `AuthConfig` holds:

- the API URL;
- the session token;
- the app key;
- a timestamp.

```python
from datetime import datetime, timezone
from anyclient.models import AuthConfig
from anyclient.auth_config import load_auth_config, remove_config, save_auth_config

config = AuthConfig(
    api_url="http://localhost:31009",
    session_token="token",
    app_key="placeholder",
    timestamp=datetime.now(timezone.utc),
)
save_auth_config(config)        # returns the file's path
print(load_auth_config().api_url)
remove_config()
```

The errors are:

- a missing file raises `ConfigNotFoundError`;
- a file that cannot be parsed, or settings with any field empty, raise
  `InvalidConfigError`.

## Version

`anyclient.models.get_version_info()` returns a `VersionInfo`. It holds the
library version and the API version it targets.