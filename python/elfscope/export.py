"""
MessagePack export of parsed ELF content.

The summary is a plain dict (header, sections, symbols) made only of ints,
strings, lists and dicts, so it can be shipped to another process or cached
and read back without this package. Raw section content is not included.
"""

import msgpack

from .content import ElfContent
from .header import FileHeader
from .sections import SectionHeader
from .symbols import Symbol

SUMMARY_VERSION = 1


def _code(value) -> dict:
    return {"kind": value.kind.name, "code": value.code}


def header_to_dict(header: FileHeader) -> dict:
    return {
        "bits": header.bits,
        "endian": header.endian.name,
        "os_abi": {**_code(header.os_abi), "abi_version": header.os_abi.abi_version},
        "file_type": _code(header.file_type),
        "machine": _code(header.machine),
        "flags": header.flags.bits,
        "entry_point": header.entry_point,
        "ph_offset": header.ph_offset,
        "sh_offset": header.sh_offset,
        "ph_entry_size": header.ph_entry_size,
        "ph_count": header.ph_count,
        "sh_entry_size": header.sh_entry_size,
        "sh_count": header.sh_count,
        "shstrndx": header.shstrndx,
    }


def section_to_dict(section: SectionHeader) -> dict:
    return {
        "index": section.index,
        "name": section.name,
        "type": _code(section.section_type),
        "flags": section.flags.bits,
        "addr": section.addr,
        "offset": section.offset,
        "size": section.size,
        "link": section.link,
        "info": section.info,
        "addralign": section.addralign,
        "entry_size": section.entry_size,
    }


def symbol_to_dict(symbol: Symbol) -> dict:
    return {
        "name": symbol.name,
        "type": _code(symbol.symbol_type),
        "bind": _code(symbol.bind),
        "visibility": symbol.visibility,
        "section_index": symbol.section_index,
        "value": symbol.value,
        "size": symbol.size,
    }


def content_to_dict(content: ElfContent) -> dict:
    """Build the plain summary structure for a parsed file."""
    return {
        "version": SUMMARY_VERSION,
        "header": header_to_dict(content.header),
        "sections": [section_to_dict(s) for s in content.sections],
        "symbols": [symbol_to_dict(s) for s in content.symbols],
    }


def pack_content(content: ElfContent) -> bytes:
    """Serialize a parsed file's summary to MessagePack."""
    return msgpack.packb(content_to_dict(content), use_bin_type=True)


def unpack_summary(data: bytes) -> dict:
    """Deserialize a summary produced by pack_content.

    Raises:
        ValueError: If data is not a MessagePack summary of a known version
    """
    try:
        summary = msgpack.unpackb(data, raw=False, strict_map_key=True)
    except (msgpack.exceptions.UnpackException, ValueError) as e:
        raise ValueError(f"Failed to parse ELF summary: {e}") from e

    if not isinstance(summary, dict):
        raise ValueError(
            f"Invalid ELF summary: expected dict, got {type(summary).__name__}"
        )
    if summary.get("version") != SUMMARY_VERSION:
        raise ValueError(f"Unsupported ELF summary version: {summary.get('version')}")
    return summary
