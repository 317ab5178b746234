"""
Endian-aware primitive readers.

All multi-byte fields in an ELF file are stored in the byte order declared
by e_ident[EI_DATA]. The functions here read fixed-width unsigned integers
(or whole struct records) from a buffer at an offset, and raise
ElfBoundsError instead of reading short.
"""

import struct
from typing import Callable

from .codes import Endian
from .errors import check_range

Buffer = bytes | bytearray | memoryview


def _read(fmt: str, size: int, data: Buffer, endian: Endian, offset: int) -> int:
    check_range(f"{size * 8}-bit field", offset, size, len(data))
    return struct.unpack_from(endian.struct_prefix + fmt, data, offset)[0]


def read_u16(data: Buffer, endian: Endian, offset: int = 0) -> int:
    """Read an unsigned 16-bit integer."""
    return _read("H", 2, data, endian, offset)


def read_u32(data: Buffer, endian: Endian, offset: int = 0) -> int:
    """Read an unsigned 32-bit integer."""
    return _read("I", 4, data, endian, offset)


def read_u64(data: Buffer, endian: Endian, offset: int = 0) -> int:
    """Read an unsigned 64-bit integer."""
    return _read("Q", 8, data, endian, offset)


def address_reader(width: int) -> Callable[[Buffer, Endian, int], int]:
    """Return the reader for a pointer-width field (4 or 8 bytes)."""
    if width == 4:
        return read_u32
    if width == 8:
        return read_u64
    raise ValueError(f"Unsupported pointer width: {width}")


def unpack_record(
    fmt: str, data: Buffer, endian: Endian, offset: int = 0, what: str = "record"
) -> tuple:
    """Unpack a struct record of format ``fmt`` (without byte-order prefix).

    Raises:
        ElfBoundsError: If the record does not fit in ``data`` at ``offset``
    """
    full_fmt = endian.struct_prefix + fmt
    check_range(what, offset, struct.calcsize(full_fmt), len(data))
    return struct.unpack_from(full_fmt, data, offset)
