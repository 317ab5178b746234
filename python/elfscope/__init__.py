"""
elfscope: read-only decoding of ELF object files.

This package decodes the file header, section header table and symbol table
of 32- and 64-bit ELF files in either byte order:

    from elfscope import ElfContent

    elf = ElfContent.load(path)
    for section in elf.sections:
        print(section.index, section.name, section.section_type)

    debug_info = elf.section_bytes(".debug_info")

Modules:
- codes: Code tables (OS ABI, file type, machine, section/symbol codes)
- reader: Endian-aware primitive readers
- header: File header decoding
- sections: Section header table decoding
- symbols: Symbol table decoding
- strtab: String table lookups and name resolution
- content: The ElfContent aggregate
- compression: SHF_COMPRESSED section inflation
- export: MessagePack summaries
"""

from .codes import (
    AbiKind,
    ArchFlags,
    BindKind,
    Endian,
    FileKind,
    FileType,
    InstructionSet,
    MachineKind,
    OperatingSystem,
    SectionFlags,
    SectionKind,
    SectionType,
    SymbolBind,
    SymbolKind,
    SymbolType,
    ELF_MAGIC,
)
from .content import ElfContent
from .errors import (
    ElfError,
    BadMagicError,
    BadPointerWidthError,
    BadVersionError,
    BadEndianCodeError,
    ElfBoundsError,
    CompressedSectionError,
)
from .export import content_to_dict, pack_content, unpack_summary
from .header import FileHeader
from .sections import SectionHeader, decode_section_headers
from .strtab import CORRUPTED_NAME, NULL_NAME, resolve_names
from .symbols import Symbol, decode_symbols

__all__ = [
    # Aggregate
    "ElfContent",
    "FileHeader",
    "SectionHeader",
    "Symbol",
    # Decoders
    "decode_section_headers",
    "decode_symbols",
    "resolve_names",
    # Code tables
    "AbiKind",
    "ArchFlags",
    "BindKind",
    "Endian",
    "FileKind",
    "FileType",
    "InstructionSet",
    "MachineKind",
    "OperatingSystem",
    "SectionFlags",
    "SectionKind",
    "SectionType",
    "SymbolBind",
    "SymbolKind",
    "SymbolType",
    # Constants
    "ELF_MAGIC",
    "CORRUPTED_NAME",
    "NULL_NAME",
    # Errors
    "ElfError",
    "BadMagicError",
    "BadPointerWidthError",
    "BadVersionError",
    "BadEndianCodeError",
    "ElfBoundsError",
    "CompressedSectionError",
    # Export
    "content_to_dict",
    "pack_content",
    "unpack_summary",
]
