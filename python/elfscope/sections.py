"""
Section header table decoding.

Section headers are decoded in two phases: the structural fields first,
then the names once the section name string table (itself one of the
decoded sections) is known. See strtab.resolve_names for the second phase.
"""

import struct
from dataclasses import dataclass
from typing import ClassVar

from .codes import Endian, SectionFlags, SectionKind, SectionType
from .errors import ElfBoundsError, check_range
from .reader import Buffer, unpack_record


@dataclass
class SectionHeader:
    """ELF section header (Elf32_Shdr / Elf64_Shdr), widened to Python ints.

    ``name`` starts empty and is filled in by name resolution.
    """

    index: int  # Position in the section header table
    name_offset: int  # sh_name: offset into the section name string table
    section_type: SectionType
    flags: SectionFlags
    addr: int  # Virtual address (if SHF_ALLOC set)
    offset: int  # File offset
    size: int  # Section size in bytes
    link: int  # Index of an associated section (type dependent)
    info: int  # Extra information (type dependent)
    addralign: int  # Alignment (0 or 1 means none)
    entry_size: int  # Entry size if section holds a table
    name: str = ""

    # Field order is identical for both classes; only widths differ
    STRUCT_FMT_32: ClassVar[str] = "IIIIIIIIII"
    STRUCT_FMT_64: ClassVar[str] = "IIQQQQIIQQ"

    @classmethod
    def struct_fmt(cls, pointer_width: int) -> str:
        return cls.STRUCT_FMT_64 if pointer_width == 8 else cls.STRUCT_FMT_32

    @classmethod
    def record_size(cls, pointer_width: int) -> int:
        return struct.calcsize("<" + cls.struct_fmt(pointer_width))

    @classmethod
    def from_bytes(
        cls,
        data: Buffer,
        endian: Endian,
        pointer_width: int,
        index: int,
        offset: int = 0,
    ) -> "SectionHeader":
        """Parse one section header from data at offset."""
        (
            sh_name,
            sh_type,
            sh_flags,
            sh_addr,
            sh_offset,
            sh_size,
            sh_link,
            sh_info,
            sh_addralign,
            sh_entsize,
        ) = unpack_record(
            cls.struct_fmt(pointer_width),
            data,
            endian,
            offset,
            what=f"section header {index}",
        )
        return cls(
            index=index,
            name_offset=sh_name,
            section_type=SectionType.from_code(sh_type),
            flags=SectionFlags(sh_flags),
            addr=sh_addr,
            offset=sh_offset,
            size=sh_size,
            link=sh_link,
            info=sh_info,
            addralign=sh_addralign,
            entry_size=sh_entsize,
        )

    @property
    def kind(self) -> SectionKind:
        return self.section_type.kind

    @property
    def file_range(self) -> tuple[int, int]:
        """(file offset, size) of the section content."""
        return (self.offset, self.size)

    @property
    def virtual_range(self) -> tuple[int, int]:
        """(virtual address, size) of the section in memory."""
        return (self.addr, self.size)

    @property
    def end_offset(self) -> int:
        """File offset of end of section content."""
        return self.offset + self.size

    @property
    def end_addr(self) -> int:
        """Virtual address of end of section."""
        return self.addr + self.size

    @property
    def is_nobits(self) -> bool:
        """Check if this section has no file content (like BSS)."""
        return self.kind is SectionKind.NOBITS


def decode_section_headers(
    table: Buffer,
    endian: Endian,
    entry_size: int,
    entry_count: int,
    pointer_width: int,
) -> list[SectionHeader]:
    """Decode entry_count consecutive section headers from table.

    Args:
        table: Bytes of the section header table
        endian: File byte order
        entry_size: e_shentsize (stride between records)
        entry_count: e_shnum
        pointer_width: 4 or 8

    Returns:
        Section headers in table order, names unresolved

    Raises:
        ElfBoundsError: If the table is shorter than entry_size * entry_count,
            or entry_size is smaller than one record
    """
    if entry_count == 0:
        return []

    check_range("section header table", 0, entry_size * entry_count, len(table))

    record_size = SectionHeader.record_size(pointer_width)
    if entry_size < record_size:
        raise ElfBoundsError("section header entry", 0, record_size, entry_size)

    return [
        SectionHeader.from_bytes(table, endian, pointer_width, i, i * entry_size)
        for i in range(entry_count)
    ]
