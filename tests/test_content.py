"""End-to-end tests for ElfContent parsing and queries."""

import logging

import pytest

from elfscope import (
    CORRUPTED_NAME,
    NULL_NAME,
    BadMagicError,
    BadPointerWidthError,
    ElfBoundsError,
    ElfContent,
    SectionKind,
    SymbolKind,
)
from elfscope.codes import BindKind, Endian

from elf_builder import (
    SHF_ALLOC,
    SHF_EXECINSTR,
    SHT_NULL,
    SHT_PROGBITS,
    SHT_STRTAB,
    SHT_SYMTAB,
    STB_GLOBAL,
    STT_FUNC,
    STT_OBJECT,
    SectionSpec,
    SymbolSpec,
    build_elf,
)


class TestEndToEnd:
    """Whole-file scenarios on synthesized images."""

    def test_big_endian_64bit_executable(self):
        """Sections and symbols of a 64-bit big-endian file come back named."""
        data = build_elf(
            [
                SectionSpec(
                    ".text",
                    SHT_PROGBITS,
                    data=b"\x60\x00\x00\x00" * 4,
                    flags=SHF_ALLOC | SHF_EXECINSTR,
                    addr=0x10000000,
                ),
                SectionSpec(".shstrtab", SHT_STRTAB),
                SectionSpec(".symtab", SHT_SYMTAB, link=3),
                SectionSpec(".strtab", SHT_STRTAB),
            ],
            bits=64,
            endian=">",
            machine=21,
            symbols=[
                SymbolSpec(
                    "_start",
                    value=0x10000000,
                    size=8,
                    sym_type=STT_FUNC,
                    bind=STB_GLOBAL,
                    section_index=0,
                ),
                SymbolSpec(
                    "helper",
                    value=0x10000008,
                    size=8,
                    sym_type=STT_FUNC,
                    section_index=0,
                ),
            ],
        )
        elf = ElfContent.parse(data)

        assert elf.header.endian is Endian.BIG
        assert elf.header.is_64bit
        assert [s.name for s in elf.sections] == [
            ".text",
            ".shstrtab",
            ".symtab",
            ".strtab",
        ]
        assert [s.name for s in elf.symbols] == ["_start", "helper"]

        text = elf.find_section(".text")
        assert text.flags.bits == 0x6
        assert text.flags.alloc()
        assert text.flags.exec()
        assert not text.flags.write()
        assert bytes(elf.section_data(text)) == b"\x60\x00\x00\x00" * 4

    def test_missing_strtab_leaves_symbol_names_empty(self):
        """Without .strtab, symbols decode but stay unnamed."""
        data = build_elf(
            [
                SectionSpec("", SHT_NULL),
                SectionSpec(".symtab", SHT_SYMTAB),
                SectionSpec(".shstrtab", SHT_STRTAB),
            ],
            symbols=[SymbolSpec(""), SymbolSpec("lost", value=0x40)],
        )
        elf = ElfContent.parse(data)

        assert len(elf.symbols) == 2
        assert [s.name for s in elf.symbols] == ["", ""]
        assert elf.symbols[1].value == 0x40
        assert elf.find_section(".symtab") is not None

    def test_section_past_end_of_file(self):
        """Accessing a section that runs off the end of the file fails."""
        data = build_elf(
            [
                SectionSpec("", SHT_NULL),
                SectionSpec(".text", SHT_PROGBITS, data=b"\x90" * 4, size=0x10000),
                SectionSpec(".shstrtab", SHT_STRTAB),
            ]
        )
        elf = ElfContent.parse(data)

        text = elf.find_section(".text")
        assert text.size == 0x10000
        with pytest.raises(ElfBoundsError, match="section .text"):
            elf.section_data(text)
        with pytest.raises(ElfBoundsError):
            elf.section_bytes(".text")

    def test_every_layout(self, sample_elf, layout):
        bits, _ = layout
        elf = ElfContent.parse(sample_elf)

        assert elf.header.bits == bits
        assert elf.header.entry_point == 0x401000
        assert len(elf.sections) == 7
        assert [s.name for s in elf.sections] == [
            NULL_NAME,
            ".text",
            ".data",
            ".bss",
            ".symtab",
            ".strtab",
            ".shstrtab",
        ]
        assert [s.name for s in elf.symbols] == [NULL_NAME, "crt1.c", "main", "counter"]

        main = elf.find_symbol("main")
        assert main.kind is SymbolKind.FUNCTION
        assert main.bind.kind is BindKind.GLOBAL
        assert main.value == 0x401000
        assert main.size == 0x20
        assert main.section_index == 1

        assert bytes(elf.section_data(".data")) == bytes(range(1, 9))


class TestParseErrors:
    """Tests for errors raised while parsing a whole file."""

    def test_not_elf(self):
        with pytest.raises(BadMagicError):
            ElfContent.parse(b"\x00asm\x01\x00\x00\x00" + b"\x00" * 56)

    def test_bad_class_before_header(self):
        """A short file with a bad class byte reports the class."""
        with pytest.raises(BadPointerWidthError):
            ElfContent.parse(b"\x7fELF\x07")

    def test_class_checked_before_version(self):
        """The assembler rejects a bad class byte before header validation."""
        data = bytearray(build_elf([SectionSpec("", SHT_NULL)]))
        data[4] = 5
        data[6] = 0
        with pytest.raises(BadPointerWidthError):
            ElfContent.parse(bytes(data))

    def test_section_table_past_end(self):
        data = build_elf([SectionSpec("", SHT_NULL), SectionSpec(".shstrtab", 3)])
        with pytest.raises(ElfBoundsError, match="section header table"):
            ElfContent.parse(data[:-10])

    def test_symbol_table_past_end(self):
        """A symbol table running off the end of the file fails the parse."""
        data = build_elf(
            [
                SectionSpec("", SHT_NULL),
                SectionSpec(".symtab", SHT_SYMTAB, size=0x10000),
                SectionSpec(".strtab", SHT_STRTAB),
                SectionSpec(".shstrtab", SHT_STRTAB),
            ],
            symbols=[SymbolSpec(""), SymbolSpec("x", value=1)],
        )
        with pytest.raises(ElfBoundsError, match="section .symtab"):
            ElfContent.parse(data)

    def test_section_name_table_past_end(self):
        data = build_elf(
            [
                SectionSpec("", SHT_NULL),
                SectionSpec(".shstrtab", SHT_STRTAB, offset=0x7FFF0000),
            ]
        )
        with pytest.raises(ElfBoundsError, match="section 1"):
            ElfContent.parse(data)

    def test_strtab_past_end(self):
        data = build_elf(
            [
                SectionSpec("", SHT_NULL),
                SectionSpec(".strtab", SHT_STRTAB, size=0x10000),
                SectionSpec(".shstrtab", SHT_STRTAB),
            ]
        )
        with pytest.raises(ElfBoundsError, match="section .strtab"):
            ElfContent.parse(data)

    def test_shstrndx_out_of_range(self, caplog):
        """A bad e_shstrndx leaves section names empty."""
        data = build_elf(
            [SectionSpec("", SHT_NULL), SectionSpec(".shstrtab", SHT_STRTAB)],
            shstrndx=9,
        )
        with caplog.at_level(logging.WARNING, logger="elfscope.content"):
            elf = ElfContent.parse(data)

        assert [s.name for s in elf.sections] == ["", ""]
        assert "out of range" in caplog.text

    def test_corrupted_section_name(self):
        data = build_elf(
            [
                SectionSpec("", SHT_NULL),
                SectionSpec(".odd", SHT_PROGBITS, name_offset=0x5000),
                SectionSpec(".shstrtab", SHT_STRTAB),
            ]
        )
        elf = ElfContent.parse(data)

        assert elf.sections[1].name == CORRUPTED_NAME
        assert [s.name for s in elf.iter_named_sections()] == [".shstrtab"]

    def test_no_sections(self):
        elf = ElfContent.parse(build_elf([]))
        assert elf.sections == ()
        assert elf.symbols == ()


class TestQueries:
    """Tests for section and symbol lookups."""

    @pytest.fixture
    def elf(self, sample_elf_file) -> ElfContent:
        return ElfContent.parse(sample_elf_file.read_bytes())

    def test_find_section_missing(self, elf):
        assert elf.find_section(".nope") is None

    def test_section_by_index(self, elf):
        assert elf.section_by_index(1).name == ".text"
        assert elf.section_by_index(7) is None
        assert elf.section_by_index(-1) is None

    def test_sections_of_type(self, elf):
        names = [s.name for s in elf.sections_of_type(SectionKind.STRTAB)]
        assert names == [".strtab", ".shstrtab"]

    def test_nobits_has_no_data(self, elf):
        bss = elf.find_section(".bss")
        assert bss.size == 0x100
        assert len(elf.section_data(bss)) == 0
        assert elf.section_bytes(".bss") == b""

    def test_section_data_is_view(self, elf):
        view = elf.section_data(".text")
        assert isinstance(view, memoryview)
        assert view.readonly
        assert bytes(view) == b"\x90" * 32

    def test_section_data_unknown_name(self, elf):
        with pytest.raises(ValueError, match="Section not found"):
            elf.section_data(".nope")

    def test_section_bytes_missing_is_empty(self, elf):
        assert elf.section_bytes(".debug_info") == b""

    def test_symbols_of_type(self, elf):
        assert [s.name for s in elf.symbols_of_type(SymbolKind.OBJECT)] == ["counter"]
        assert [s.name for s in elf.symbols_of_type(SymbolKind.FILE)] == ["crt1.c"]

    def test_symbol_at(self, elf):
        assert elf.symbol_at(0x401010).name == "main"
        assert elf.symbol_at(0x402004).name == "counter"
        assert elf.symbol_at(0x401020) is None

    def test_sequences_are_fixed(self, elf):
        with pytest.raises(TypeError):
            elf.sections[0] = elf.sections[1]

    def test_repr(self, elf):
        assert repr(elf) == "<ElfContent: 64-bit little, 7 sections, 4 symbols>"


class TestLoad:
    def test_load_from_disk(self, sample_elf_file):
        elf = ElfContent.load(sample_elf_file)

        assert elf.path == sample_elf_file
        assert elf.raw == sample_elf_file.read_bytes()
        assert elf.find_symbol("counter").kind is SymbolKind.OBJECT
        assert str(sample_elf_file) in repr(elf)

    def test_load_accepts_string_path(self, sample_elf_file):
        elf = ElfContent.load(str(sample_elf_file))
        assert len(elf.sections) == 7

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ElfContent.load(tmp_path / "missing.elf")


class TestDebugSections:
    def test_collects_debug_sections(self):
        data = build_elf(
            [
                SectionSpec("", SHT_NULL),
                SectionSpec(".debug_info", SHT_PROGBITS, data=b"info"),
                SectionSpec(".debug_str", SHT_PROGBITS, data=b"str\x00"),
                SectionSpec(".debugger", SHT_PROGBITS, data=b"x"),
                SectionSpec(".shstrtab", SHT_STRTAB),
            ]
        )
        elf = ElfContent.parse(data)

        assert elf.debug_sections() == {
            ".debug_info": b"info",
            ".debug_str": b"str\x00",
        }

    def test_object_symbols(self):
        data = build_elf(
            [
                SectionSpec("", SHT_NULL),
                SectionSpec(".symtab", SHT_SYMTAB),
                SectionSpec(".strtab", SHT_STRTAB),
                SectionSpec(".shstrtab", SHT_STRTAB),
            ],
            bits=32,
            symbols=[SymbolSpec("g", value=4, size=4, sym_type=STT_OBJECT)],
        )
        elf = ElfContent.parse(data)
        assert elf.symbols[0].name == "g"
        assert elf.symbol_at(6).name == "g"
