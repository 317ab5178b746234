import pytest
import pathlib

from elf_builder import (
    SectionSpec,
    SymbolSpec,
    build_elf,
    SHT_NULL,
    SHT_PROGBITS,
    SHT_SYMTAB,
    SHT_STRTAB,
    SHT_NOBITS,
    SHF_WRITE,
    SHF_ALLOC,
    SHF_EXECINSTR,
    STT_FILE,
    STT_FUNC,
    STT_OBJECT,
    STB_GLOBAL,
    STB_LOCAL,
)


# Layout configurations: (bits, endian)
LAYOUTS = [
    (32, "<"),
    (32, ">"),
    (64, "<"),
    (64, ">"),
]


def layout_id(layout: tuple[int, str]) -> str:
    bits, endian = layout
    return f"elf{bits}-{'le' if endian == '<' else 'be'}"


def sample_sections() -> list[SectionSpec]:
    """A typical linked executable: code, data, bss and the usual tables."""
    return [
        SectionSpec("", SHT_NULL),
        SectionSpec(
            ".text",
            SHT_PROGBITS,
            data=b"\x90" * 32,
            flags=SHF_ALLOC | SHF_EXECINSTR,
            addr=0x401000,
            addralign=16,
        ),
        SectionSpec(
            ".data",
            SHT_PROGBITS,
            data=b"\x01\x02\x03\x04\x05\x06\x07\x08",
            flags=SHF_WRITE | SHF_ALLOC,
            addr=0x402000,
            addralign=8,
        ),
        SectionSpec(
            ".bss", SHT_NOBITS, flags=SHF_WRITE | SHF_ALLOC, addr=0x403000, size=0x100
        ),
        SectionSpec(".symtab", SHT_SYMTAB, link=5, info=2, addralign=8),
        SectionSpec(".strtab", SHT_STRTAB),
        SectionSpec(".shstrtab", SHT_STRTAB),
    ]


def sample_symbols() -> list[SymbolSpec]:
    return [
        SymbolSpec(""),
        SymbolSpec("crt1.c", sym_type=STT_FILE, bind=STB_LOCAL, section_index=0xFFF1),
        SymbolSpec(
            "main",
            value=0x401000,
            size=0x20,
            sym_type=STT_FUNC,
            bind=STB_GLOBAL,
            section_index=1,
        ),
        SymbolSpec(
            "counter",
            value=0x402000,
            size=8,
            sym_type=STT_OBJECT,
            bind=STB_GLOBAL,
            section_index=2,
        ),
    ]


@pytest.fixture(params=LAYOUTS, ids=layout_id)
def layout(request) -> tuple[int, str]:
    """Returns (bits, endian) for tests run against every class/byte order."""
    return request.param


@pytest.fixture
def sample_elf(layout: tuple[int, str]) -> bytes:
    """A sample executable image in the parameterized layout."""
    bits, endian = layout
    return build_elf(
        sample_sections(),
        bits=bits,
        endian=endian,
        symbols=sample_symbols(),
        entry=0x401000,
    )


@pytest.fixture
def sample_elf_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """A 64-bit little-endian sample executable written to disk."""
    path = tmp_path / "sample.elf"
    path.write_bytes(
        build_elf(sample_sections(), symbols=sample_symbols(), entry=0x401000)
    )
    return path
