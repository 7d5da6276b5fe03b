"""Canonical article mapping for heterogeneous news-provider records.

Each target field has an ordered tuple of accessors. The first accessor that
yields a non-empty string wins; supporting a new provider schema means adding
entries to `FIELD_ACCESSORS`, not new branches.
"""

from typing import Any, Callable

UNTITLED_ARTICLE = "Untitled article"

Accessor = Callable[[dict], Any]


def field_path(*keys: str) -> Accessor:
    """Return an accessor that walks nested dict keys, yielding `None` on any miss."""

    def access(record: dict) -> Any:
        value: Any = record
        for key in keys:
            if not isinstance(value, dict):
                return None
            value = value.get(key)
        return value

    return access


FIELD_ACCESSORS: dict[str, tuple[Accessor, ...]] = {
    "title": (field_path("title"), field_path("heading"), field_path("headline"), field_path("name")),
    "description": (
        field_path("description"),
        field_path("snippet"),
        field_path("summary"),
        field_path("content"),
    ),
    "url": (field_path("url"), field_path("link"), field_path("article_url")),
    "source": (
        field_path("source", "name"),
        field_path("source_name"),
        field_path("source"),
        field_path("publisher", "name"),
        field_path("publisher"),
    ),
    "publishedAt": (
        field_path("publishedAt"),
        field_path("published_datetime_utc"),
        field_path("published_at"),
        field_path("date"),
    ),
}

FIELD_DEFAULTS = {
    "title": UNTITLED_ARTICLE,
}


def first_text(record: dict, accessors: tuple[Accessor, ...]) -> str:
    """Return the first non-empty trimmed string produced by `accessors`, else `""`."""
    for accessor in accessors:
        value = accessor(record)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def normalize_article(record: Any) -> dict:
    """Map one raw provider record to `{title, description, url, source, publishedAt}`.

    Non-dict records normalize to an all-default article.
    """
    if not isinstance(record, dict):
        record = {}

    article = {}
    for field_name, accessors in FIELD_ACCESSORS.items():
        article[field_name] = first_text(record, accessors) or FIELD_DEFAULTS.get(field_name, "")
    return article
