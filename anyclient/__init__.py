"""Models, search, query building, markdown export and settings storage for the Anytype local API."""

__version__ = "0.2.0"

__all__ = [
    "models",
    "params",
    "search_parser",
    "auth_config",
    "search",
    "query_builder",
    "images",
    "export",
]