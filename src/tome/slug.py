"""Reversible title <-> slug mapping used for directory names and URLs.

encode("Hello World")  -> "Hello%20World"
encode("..")           -> "%2E%2E"
"""

import re
from urllib.parse import quote, unquote

from tome.errors import DecodeError

_SLUG_RE = re.compile(r"(?:[A-Za-z0-9_~-]|%[0-9A-F]{2})+")


def encode(title: str) -> str:
    if not title:
        raise ValueError("title must not be empty")
    return quote(title, safe="").replace(".", "%2E")


def decode(slug: str) -> str:
    if not _SLUG_RE.fullmatch(slug):
        raise DecodeError(f"not a slug: {slug!r}")
    try:
        title = unquote(slug, errors="strict")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"slug is not UTF-8: {slug!r}") from exc
    # reject non-canonical escapes such as "%41" for "A"
    if encode(title) != slug:
        raise DecodeError(f"non-canonical slug: {slug!r}")
    return title
