"""
Charset negotiation for message bodies.

Charsets are carried around as normalized Python codec names
(``codecs.lookup(name).name``), e.g. ``"utf-8"`` or ``"iso8859-1"``.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

UTF_8 = codecs.lookup("utf-8").name

CONTENT_TYPE = "Content-Type"


def resolve_charset(name: str) -> str:
    """
    Resolve a charset label to its normalized codec name.

    Raises:
        LookupError: If Python has no codec for the label
    """
    return codecs.lookup(name.strip().strip("\"'").strip()).name


def _header_values(headers: Mapping[str, Iterable[str] | str], name: str) -> list[str]:
    wanted = name.lower()
    values: list[str] = []
    for key, value in headers.items():
        if key.lower() != wanted:
            continue
        if isinstance(value, str):
            values.append(value)
        elif value is not None:
            values.extend(value)
    return values


def content_type(headers: Mapping[str, Iterable[str] | str]) -> str | None:
    """Return the first Content-Type value, if any."""
    values = _header_values(headers, CONTENT_TYPE)
    return values[0] if values else None


def charset_from_headers(headers: Mapping[str, Iterable[str] | str]) -> str:
    """
    Derive the body charset from the Content-Type header(s).

    Every ``name=value`` parameter after the media type is inspected and the
    first ``charset`` parameter wins. Defaults to UTF-8 when there is no
    Content-Type, no charset parameter, or the charset is unknown to Python.
    """
    for header in _header_values(headers, CONTENT_TYPE):
        for parameter in header.split(";")[1:]:
            parts = parameter.split("=")
            if len(parts) != 2 or parts[0].strip().lower() != "charset":
                continue
            label = parts[1].strip().replace('"', "")
            try:
                return resolve_charset(label)
            except LookupError:
                logger.warning("Unknown charset %r in Content-Type, using %s", label, UTF_8)
                return UTF_8
    return UTF_8
