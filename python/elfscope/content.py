"""
Top-level ELF parsing.

ElfContent owns the raw file bytes together with everything decoded from
them: the file header, the section headers and the symbols. Parsing is a
single pass:

1. Check magic and class byte
2. Decode the file header
3. Decode the section header table
4. Name sections from the section name string table (e_shstrndx)
5. Find .strtab and the symbol table
6. Decode symbols and name them from .strtab

Section and symbol lists are fixed once parsing completes. Section content
is handed out as memoryviews into the owned buffer, so nothing is copied
unless the caller asks for bytes.
"""

import logging
from pathlib import Path
from typing import Iterator

from .codes import SectionKind, SymbolKind
from .compression import decompress_section
from .errors import check_range
from .header import FileHeader, check_class, check_magic
from .reader import Buffer
from .sections import SectionHeader, decode_section_headers
from .strtab import CORRUPTED_NAME, NULL_NAME, resolve_names
from .symbols import Symbol, decode_symbols

logger = logging.getLogger(__name__)

STRTAB_NAME = ".strtab"
DEBUG_SECTION_PREFIX = ".debug_"


class ElfContent:
    """A parsed ELF file.

    Usage:
        elf = ElfContent.load(Path("a.out"))

        text = elf.find_section(".text")
        code = elf.section_data(text)

        main = elf.find_symbol("main")
        debug_info = elf.section_bytes(".debug_info")
    """

    def __init__(
        self,
        raw: bytes,
        header: FileHeader,
        sections: list[SectionHeader],
        symbols: list[Symbol],
        path: Path | None = None,
    ):
        """Initialize from already-decoded parts.

        Prefer ElfContent.parse() or ElfContent.load().
        """
        self._raw = raw
        self._header = header
        self._sections = tuple(sections)
        self._symbols = tuple(symbols)
        self._path = path

    @classmethod
    def parse(cls, raw: Buffer, path: Path | None = None) -> "ElfContent":
        """Parse an ELF image held in memory.

        Args:
            raw: Complete file contents
            path: Where the bytes came from (for error messages only)

        Returns:
            ElfContent owning a copy of raw

        Raises:
            BadMagicError: If the signature is wrong
            BadPointerWidthError: If the class byte is neither 1 nor 2
            BadVersionError: If the identification version is not 1
            BadEndianCodeError: If the data encoding byte is neither 1 nor 2
            ElfBoundsError: If a table or string table lies outside raw
        """
        raw = bytes(raw)

        check_magic(raw)
        check_class(raw)

        header = FileHeader.parse(raw)
        width = header.pointer_width

        table = _slice(
            raw, header.sh_offset, header.section_table_size, "section header table"
        )
        sections = decode_section_headers(
            table, header.endian, header.sh_entry_size, header.sh_count, width
        )

        if header.shstrndx < len(sections):
            shstrtab = _section_view(raw, sections[header.shstrndx])
            resolve_names(shstrtab, sections)
        elif sections:
            logger.warning(
                "Section name string table index %d out of range (%d sections)",
                header.shstrndx,
                len(sections),
            )

        strtab_section = next(
            (
                s
                for s in sections
                if s.kind is SectionKind.STRTAB and s.name == STRTAB_NAME
            ),
            None,
        )
        if strtab_section is None:
            logger.debug("No %s section; symbol names stay empty", STRTAB_NAME)
            strtab = memoryview(b"")
        else:
            strtab = _section_view(raw, strtab_section)

        symtab_section = next(
            (s for s in sections if s.kind is SectionKind.SYMTAB), None
        )
        if symtab_section is None:
            logger.debug("No symbol table section")
            symbols = []
        else:
            symbols = decode_symbols(
                _section_view(raw, symtab_section), header.endian, width
            )

        resolve_names(strtab, symbols)

        return cls(raw, header, sections, symbols, path)

    @classmethod
    def load(cls, path: Path) -> "ElfContent":
        """Read and parse an ELF file from disk."""
        return cls.parse(Path(path).read_bytes(), path)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def raw(self) -> bytes:
        """The complete file contents."""
        return self._raw

    @property
    def header(self) -> FileHeader:
        return self._header

    @property
    def sections(self) -> tuple[SectionHeader, ...]:
        """Section headers in table order."""
        return self._sections

    @property
    def symbols(self) -> tuple[Symbol, ...]:
        """Symbols in symbol table order."""
        return self._symbols

    @property
    def path(self) -> Path | None:
        return self._path

    # =========================================================================
    # Section queries
    # =========================================================================

    def find_section(self, name: str) -> SectionHeader | None:
        """Find the first section with the given name.

        Args:
            name: Section name (e.g., ".text")

        Returns:
            SectionHeader if found, None otherwise
        """
        for section in self._sections:
            if section.name == name:
                return section
        return None

    def section_by_index(self, index: int) -> SectionHeader | None:
        """Get section by index."""
        if 0 <= index < len(self._sections):
            return self._sections[index]
        return None

    def sections_of_type(self, kind: SectionKind) -> list[SectionHeader]:
        return [s for s in self._sections if s.kind is kind]

    def section_data(self, section: SectionHeader | str) -> memoryview:
        """Get a read-only view of a section's file content.

        Args:
            section: SectionHeader or section name

        Returns:
            memoryview into the raw buffer (empty for NOBITS sections)

        Raises:
            ValueError: If a section name is given and not found
            ElfBoundsError: If the section's file range exceeds the file
        """
        if isinstance(section, str):
            found = self.find_section(section)
            if found is None:
                raise ValueError(f"Section not found: {section}")
            section = found
        return _section_view(self._raw, section)

    def section_bytes(self, name: str, *, decompress: bool = True) -> bytes:
        """Get an owned copy of a named section's content.

        This is the lookup handed to debug-info readers: an absent section
        yields empty bytes rather than an error.

        Args:
            name: Section name (e.g., ".debug_info")
            decompress: Inflate SHF_COMPRESSED sections

        Returns:
            Section content, or b"" if there is no such section

        Raises:
            ElfBoundsError: If the section's file range exceeds the file
            CompressedSectionError: If a compressed section cannot be inflated
        """
        section = self.find_section(name)
        if section is None:
            return b""
        data = self.section_data(section)
        if decompress and section.flags.compressed():
            return decompress_section(
                data, self._header.endian, self._header.pointer_width
            )
        return bytes(data)

    def debug_sections(self) -> dict[str, bytes]:
        """Content of every .debug_* section present, keyed by name."""
        return {
            s.name: self.section_bytes(s.name)
            for s in self._sections
            if s.name.startswith(DEBUG_SECTION_PREFIX)
        }

    # =========================================================================
    # Symbol queries
    # =========================================================================

    def find_symbol(self, name: str) -> Symbol | None:
        """Find the first symbol with the given name."""
        for symbol in self._symbols:
            if symbol.name == name:
                return symbol
        return None

    def symbols_of_type(self, kind: SymbolKind) -> list[Symbol]:
        return [s for s in self._symbols if s.kind is kind]

    def symbol_at(self, address: int) -> Symbol | None:
        """Find a function or object symbol whose range covers address."""
        for symbol in self._symbols:
            if symbol.kind in (SymbolKind.FUNCTION, SymbolKind.OBJECT) and (
                symbol.contains(address)
            ):
                return symbol
        return None

    def iter_named_sections(self) -> Iterator[SectionHeader]:
        """Iterate over sections that have a resolved, non-sentinel name."""
        for section in self._sections:
            if section.name and section.name not in (NULL_NAME, CORRUPTED_NAME):
                yield section

    def __repr__(self) -> str:
        source = f" {self._path}" if self._path else ""
        return (
            f"<ElfContent{source}: {self._header.bits}-bit "
            f"{self._header.endian.name.lower()}, {len(self._sections)} sections, "
            f"{len(self._symbols)} symbols>"
        )


def _slice(raw: bytes, offset: int, size: int, what: str) -> memoryview:
    check_range(what, offset, size, len(raw))
    return memoryview(raw)[offset : offset + size]


def _section_view(raw: bytes, section: SectionHeader) -> memoryview:
    if section.is_nobits:
        return memoryview(b"")
    what = f"section {section.name or section.index}"
    return _slice(raw, section.offset, section.size, what)
