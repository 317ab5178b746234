"""
String table lookups and the name resolution pass.

A string table is a blob of NUL-terminated byte strings addressed by
offset. Sections and symbols only carry the offset of their name after the
structural decode; resolve_names fills in the text. Malformed entries never
abort parsing: they resolve to sentinel names instead.
"""

import logging
from typing import Iterable, Protocol

from .reader import Buffer

logger = logging.getLogger(__name__)

CORRUPTED_NAME = "CORRUPTED"
NULL_NAME = "NULL"


class Named(Protocol):
    """Anything carrying a deferred string-table name."""

    name_offset: int
    name: str


def read_cstring(strtab: Buffer, offset: int) -> bytes | None:
    """Return the NUL-terminated bytes starting at offset.

    Returns:
        The bytes without the terminator, or None if offset is outside the
        table or no terminator follows it
    """
    if offset < 0 or offset >= len(strtab):
        return None
    data = bytes(strtab)
    end = data.find(b"\x00", offset)
    if end == -1:
        return None
    return data[offset:end]


def lookup_name(strtab: Buffer, offset: int) -> str:
    """Resolve one name, substituting sentinels for malformed entries."""
    raw = read_cstring(strtab, offset)
    if raw is None:
        logger.debug("No terminated string at string table offset %#x", offset)
        return CORRUPTED_NAME
    try:
        name = raw.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Name at string table offset %#x is not valid UTF-8", offset)
        return CORRUPTED_NAME
    if not name:
        logger.debug("Empty name at string table offset %#x", offset)
        return NULL_NAME
    return name


def resolve_names(strtab: Buffer, entries: Iterable[Named]) -> None:
    """Set ``name`` on every entry from its ``name_offset`` into strtab.

    An empty string table leaves all names untouched.
    """
    if len(strtab) == 0:
        return

    data = bytes(strtab)
    for entry in entries:
        entry.name = lookup_name(data, entry.name_offset)
