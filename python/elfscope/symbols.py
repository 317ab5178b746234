"""
Symbol table decoding.

Record layouts (st_info packs the type in the low nibble and the binding in
the high nibble):

  Elf32_Sym: st_name(4) st_value(4) st_size(4) st_info(1) st_other(1) st_shndx(2)
  Elf64_Sym: st_name(4) st_info(1) st_other(1) st_shndx(2) st_value(8) st_size(8)
"""

import logging
from dataclasses import dataclass
from typing import ClassVar

from .codes import BindKind, Endian, SymbolBind, SymbolKind, SymbolType
from .reader import Buffer, unpack_record

logger = logging.getLogger(__name__)

SHN_UNDEF = 0


@dataclass
class Symbol:
    """ELF symbol table entry, widened to Python ints.

    ``name`` starts empty and is filled in by name resolution.
    """

    name_offset: int  # st_name: offset into .strtab
    symbol_type: SymbolType
    bind: SymbolBind
    visibility: int  # st_other, not interpreted
    section_index: int  # st_shndx, 0 when not tied to a section
    value: int  # Address or absolute value depending on type
    size: int
    name: str = ""

    STRUCT_FMT_32: ClassVar[str] = "IIIBBH"
    STRUCT_FMT_64: ClassVar[str] = "IBBHQQ"
    SIZE_32: ClassVar[int] = 16
    SIZE_64: ClassVar[int] = 24

    @classmethod
    def record_size(cls, pointer_width: int) -> int:
        return cls.SIZE_64 if pointer_width == 8 else cls.SIZE_32

    @classmethod
    def from_bytes(
        cls, data: Buffer, endian: Endian, pointer_width: int, offset: int = 0
    ) -> "Symbol":
        """Parse one symbol from data at offset."""
        if pointer_width == 8:
            st_name, st_info, st_other, st_shndx, st_value, st_size = unpack_record(
                cls.STRUCT_FMT_64, data, endian, offset, what="symbol"
            )
        else:
            st_name, st_value, st_size, st_info, st_other, st_shndx = unpack_record(
                cls.STRUCT_FMT_32, data, endian, offset, what="symbol"
            )
        return cls(
            name_offset=st_name,
            symbol_type=SymbolType.from_code(st_info & 0xF),
            bind=SymbolBind.from_code(st_info >> 4),
            visibility=st_other,
            section_index=st_shndx,
            value=st_value,
            size=st_size,
        )

    @property
    def kind(self) -> SymbolKind:
        return self.symbol_type.kind

    @property
    def address(self) -> int:
        return self.value

    @property
    def is_global(self) -> bool:
        return self.bind.kind is BindKind.GLOBAL

    @property
    def is_undefined(self) -> bool:
        """Symbol is referenced but not defined in this file."""
        return self.section_index == SHN_UNDEF

    def contains(self, address: int) -> bool:
        """Check if address falls within [value, value + size)."""
        return self.value <= address < self.value + self.size


def decode_symbols(table: Buffer, endian: Endian, pointer_width: int) -> list[Symbol]:
    """Decode every whole symbol record in table.

    Args:
        table: Bytes of a SHT_SYMTAB section
        endian: File byte order
        pointer_width: 4 or 8

    Returns:
        Symbols in table order, names unresolved
    """
    size = Symbol.record_size(pointer_width)
    count, remainder = divmod(len(table), size)
    if remainder:
        logger.warning(
            "Symbol table size %d is not a multiple of %d; ignoring %d trailing bytes",
            len(table),
            size,
            remainder,
        )
    return [
        Symbol.from_bytes(table, endian, pointer_width, i * size) for i in range(count)
    ]
