"""
ELF file header decoding.

The header starts with the 16-byte identification block, followed by fields
whose layout depends on the file class:

  Offset | 32-bit | 64-bit | Field
  -------|--------|--------|------
  0x10   | 2      | 2      | e_type
  0x12   | 2      | 2      | e_machine
  0x14   | 4      | 4      | e_version
  0x18   | 4      | 8      | e_entry
  ...    | 4      | 8      | e_phoff
  ...    | 4      | 8      | e_shoff
  ...    | 4      | 4      | e_flags
  ...    | 2      | 2      | e_ehsize
  ...    | 2      | 2      | e_phentsize
  ...    | 2      | 2      | e_phnum
  ...    | 2      | 2      | e_shentsize
  ...    | 2      | 2      | e_shnum
  ...    | 2      | 2      | e_shstrndx

Only the pointer-width fields change size, so both classes share one decoder
parameterized by the width.
"""

import logging
from dataclasses import dataclass

from .codes import (
    ELF_MAGIC,
    EI_ABIVERSION,
    EI_CLASS,
    EI_DATA,
    EI_NIDENT,
    EI_OSABI,
    EI_VERSION,
    ELFCLASS32,
    ELFCLASS64,
    EV_CURRENT,
    ArchFlags,
    Endian,
    FileType,
    InstructionSet,
    OperatingSystem,
)
from .errors import (
    BadEndianCodeError,
    BadMagicError,
    BadPointerWidthError,
    BadVersionError,
    check_range,
)
from .reader import Buffer, address_reader, read_u16, read_u32

logger = logging.getLogger(__name__)

E_TYPE_OFFSET = 0x10
E_MACHINE_OFFSET = 0x12
E_ENTRY_OFFSET = 0x18

ELF32_EHDR_SIZE = 52
ELF64_EHDR_SIZE = 64

# Pointer width in bytes, keyed by EI_CLASS
POINTER_WIDTHS = {ELFCLASS32: 4, ELFCLASS64: 8}


def check_magic(raw: Buffer) -> None:
    """Raise BadMagicError unless raw starts with the ELF signature."""
    if bytes(raw[:4]) != ELF_MAGIC:
        raise BadMagicError(bytes(raw[:4]))


def check_class(raw: Buffer) -> int:
    """Return the pointer width selected by the class byte.

    Raises:
        BadPointerWidthError: If the class byte is neither 1 nor 2
        ElfBoundsError: If the class byte is missing
    """
    check_range("ELF class byte", EI_CLASS, 1, len(raw))
    elf_class = raw[EI_CLASS]
    if elf_class not in POINTER_WIDTHS:
        raise BadPointerWidthError(elf_class)
    return POINTER_WIDTHS[elf_class]


@dataclass(frozen=True)
class FileHeader:
    """Decoded ELF file header (Elf32_Ehdr / Elf64_Ehdr).

    Pointer-width fields (entry point and table offsets) are plain ints
    regardless of class; ``pointer_width`` records where they came from.
    """

    pointer_width: int  # 4 for ELFCLASS32, 8 for ELFCLASS64
    endian: Endian
    os_abi: OperatingSystem
    file_type: FileType
    machine: InstructionSet
    flags: ArchFlags
    entry_point: int
    ph_offset: int  # Program header table file offset
    sh_offset: int  # Section header table file offset
    header_size: int
    ph_entry_size: int
    ph_count: int
    sh_entry_size: int
    sh_count: int
    shstrndx: int  # Section index of the section name string table

    @classmethod
    def parse(cls, raw: Buffer) -> "FileHeader":
        """Parse the file header at the start of raw.

        Validation order: magic, version, class, data encoding.

        Args:
            raw: ELF file contents (at least the header)

        Returns:
            Parsed FileHeader

        Raises:
            BadMagicError: If the signature is wrong
            BadVersionError: If e_ident[EI_VERSION] is not 1
            BadPointerWidthError: If the class byte is neither 1 nor 2
            BadEndianCodeError: If the data encoding byte is neither 1 nor 2
            ElfBoundsError: If raw is too short for the header
        """
        check_magic(raw)

        check_range("ELF version byte", EI_VERSION, 1, len(raw))
        if raw[EI_VERSION] != EV_CURRENT:
            raise BadVersionError(raw[EI_VERSION])

        width = check_class(raw)

        try:
            endian = Endian(raw[EI_DATA])
        except ValueError:
            raise BadEndianCodeError(raw[EI_DATA]) from None

        check_range("ELF identification", 0, EI_NIDENT, len(raw))

        header_size = ELF32_EHDR_SIZE if width == 4 else ELF64_EHDR_SIZE
        check_range("ELF file header", 0, header_size, len(raw))

        header = cls._decode(raw, endian, width)
        logger.debug(
            "Decoded %d-bit %s header: %d sections at %#x",
            width * 8,
            endian.name.lower(),
            header.sh_count,
            header.sh_offset,
        )
        return header

    @classmethod
    def _decode(cls, raw: Buffer, endian: Endian, width: int) -> "FileHeader":
        read_addr = address_reader(width)

        os_abi = OperatingSystem.from_code(raw[EI_OSABI], raw[EI_ABIVERSION])
        file_type = FileType.from_code(read_u16(raw, endian, E_TYPE_OFFSET))
        machine = InstructionSet.from_code(read_u16(raw, endian, E_MACHINE_OFFSET))

        # Pointer-width region: entry, phoff, shoff
        i = E_ENTRY_OFFSET
        entry_point = read_addr(raw, endian, i)
        i += width
        ph_offset = read_addr(raw, endian, i)
        i += width
        sh_offset = read_addr(raw, endian, i)
        i += width

        # Fixed-width tail
        flags = ArchFlags(read_u32(raw, endian, i))
        i += 4
        header_size = read_u16(raw, endian, i)
        i += 2
        ph_entry_size = read_u16(raw, endian, i)
        ph_count = read_u16(raw, endian, i + 2)
        sh_entry_size = read_u16(raw, endian, i + 4)
        sh_count = read_u16(raw, endian, i + 6)
        shstrndx = read_u16(raw, endian, i + 8)

        return cls(
            pointer_width=width,
            endian=endian,
            os_abi=os_abi,
            file_type=file_type,
            machine=machine,
            flags=flags,
            entry_point=entry_point,
            ph_offset=ph_offset,
            sh_offset=sh_offset,
            header_size=header_size,
            ph_entry_size=ph_entry_size,
            ph_count=ph_count,
            sh_entry_size=sh_entry_size,
            sh_count=sh_count,
            shstrndx=shstrndx,
        )

    @property
    def is_64bit(self) -> bool:
        return self.pointer_width == 8

    @property
    def bits(self) -> int:
        """Pointer width in bits (32 or 64)."""
        return self.pointer_width * 8

    @property
    def section_table_size(self) -> int:
        """Total size in bytes of the section header table."""
        return self.sh_entry_size * self.sh_count
