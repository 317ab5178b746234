"""
Inflation of SHF_COMPRESSED sections.

Compressed sections (typically .debug_*) start with a compression header
followed by the compressed payload:

  Elf32_Chdr: ch_type(4) ch_size(4) ch_addralign(4)
  Elf64_Chdr: ch_type(4) ch_reserved(4) ch_size(8) ch_addralign(8)

ch_type 1 is zlib, 2 is zstd. ch_size is the inflated size.
"""

import logging
import struct
import zlib
from dataclasses import dataclass
from typing import ClassVar

import zstandard as zstd

from .codes import ELFCOMPRESS_ZLIB, ELFCOMPRESS_ZSTD, Endian
from .errors import CompressedSectionError, ElfBoundsError
from .reader import Buffer, unpack_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompressionHeader:
    """Decoded Elf32_Chdr / Elf64_Chdr."""

    ch_type: int
    ch_size: int  # Size of the inflated data
    ch_addralign: int
    header_size: int  # Bytes occupied by the header itself

    STRUCT_FMT_32: ClassVar[str] = "III"
    STRUCT_FMT_64: ClassVar[str] = "IIQQ"

    @classmethod
    def from_bytes(
        cls, data: Buffer, endian: Endian, pointer_width: int
    ) -> "CompressionHeader":
        if pointer_width == 8:
            ch_type, _reserved, ch_size, ch_addralign = unpack_record(
                cls.STRUCT_FMT_64, data, endian, what="compression header"
            )
            fmt = cls.STRUCT_FMT_64
        else:
            ch_type, ch_size, ch_addralign = unpack_record(
                cls.STRUCT_FMT_32, data, endian, what="compression header"
            )
            fmt = cls.STRUCT_FMT_32
        return cls(ch_type, ch_size, ch_addralign, struct.calcsize("<" + fmt))


def decompress_section(data: Buffer, endian: Endian, pointer_width: int) -> bytes:
    """Inflate the content of an SHF_COMPRESSED section.

    Args:
        data: Raw section content, starting with the compression header
        endian: File byte order
        pointer_width: 4 or 8

    Returns:
        The inflated section content

    Raises:
        CompressedSectionError: If the compression type is unknown, the
            payload is corrupt, or the inflated size does not match ch_size
            (oversized payloads are rejected before inflating past ch_size)
    """
    try:
        header = CompressionHeader.from_bytes(data, endian, pointer_width)
    except ElfBoundsError as e:
        raise CompressedSectionError(f"Truncated compression header: {e}") from e

    payload = bytes(data[header.header_size :])
    logger.debug(
        "Inflating %d compressed bytes (type %d) to %d bytes",
        len(payload),
        header.ch_type,
        header.ch_size,
    )

    if header.ch_type == ELFCOMPRESS_ZLIB:
        inflated = _inflate_zlib(payload, header.ch_size)
    elif header.ch_type == ELFCOMPRESS_ZSTD:
        inflated = _inflate_zstd(payload, header.ch_size)
    else:
        raise CompressedSectionError(
            f"Unknown section compression type {header.ch_type:#x}"
        )

    if len(inflated) != header.ch_size:
        raise CompressedSectionError(
            f"Size mismatch: expected {header.ch_size}, got {len(inflated)}"
        )
    return inflated


def _inflate_zlib(payload: bytes, limit: int) -> bytes:
    # Output is capped one byte past limit
    dobj = zlib.decompressobj()
    try:
        inflated = dobj.decompress(payload, limit + 1)
    except zlib.error as e:
        raise CompressedSectionError(f"zlib decompression failed: {e}") from e
    if len(inflated) > limit or dobj.unconsumed_tail:
        raise CompressedSectionError(
            f"Size mismatch: zlib stream inflates past {limit} bytes"
        )
    if not dobj.eof:
        raise CompressedSectionError("zlib decompression failed: truncated stream")
    return inflated


def _inflate_zstd(payload: bytes, limit: int) -> bytes:
    try:
        params = zstd.get_frame_parameters(payload)
    except zstd.ZstdError as e:
        raise CompressedSectionError(f"zstd decompression failed: {e}") from e
    declared = params.content_size
    if declared not in (0, zstd.CONTENTSIZE_UNKNOWN) and declared != limit:
        raise CompressedSectionError(
            f"Size mismatch: expected {limit}, frame declares {declared}"
        )

    dctx = zstd.ZstdDecompressor()
    try:
        with dctx.stream_reader(payload) as reader:
            inflated = reader.read(limit + 1)
    except zstd.ZstdError as e:
        raise CompressedSectionError(f"zstd decompression failed: {e}") from e
    if len(inflated) > limit:
        raise CompressedSectionError(
            f"Size mismatch: zstd frame inflates past {limit} bytes"
        )
    return inflated
