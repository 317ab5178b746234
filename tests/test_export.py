"""Tests for MessagePack summaries."""

import msgpack
import pytest

from elfscope import ElfContent, content_to_dict, pack_content, unpack_summary
from elfscope.export import SUMMARY_VERSION


class TestContentToDict:
    def test_summary_shape(self, sample_elf, layout):
        bits, endian = layout
        summary = content_to_dict(ElfContent.parse(sample_elf))

        assert summary["version"] == SUMMARY_VERSION
        assert summary["header"]["bits"] == bits
        assert summary["header"]["endian"] == ("LITTLE" if endian == "<" else "BIG")
        assert summary["header"]["machine"] == {"kind": "X86_64", "code": 62}
        assert summary["header"]["entry_point"] == 0x401000
        assert len(summary["sections"]) == 7
        assert len(summary["symbols"]) == 4

    def test_section_entry(self, sample_elf):
        summary = content_to_dict(ElfContent.parse(sample_elf))
        text = summary["sections"][1]

        assert text["name"] == ".text"
        assert text["type"] == {"kind": "PROGBITS", "code": 1}
        assert text["flags"] == 0x6
        assert text["addr"] == 0x401000
        assert text["size"] == 32

    def test_symbol_entry(self, sample_elf):
        summary = content_to_dict(ElfContent.parse(sample_elf))
        main = summary["symbols"][2]

        assert main["name"] == "main"
        assert main["type"] == {"kind": "FUNCTION", "code": 2}
        assert main["bind"] == {"kind": "GLOBAL", "code": 1}
        assert main["value"] == 0x401000


class TestPackUnpack:
    def test_round_trip(self, sample_elf_file):
        elf = ElfContent.load(sample_elf_file)
        assert unpack_summary(pack_content(elf)) == content_to_dict(elf)

    def test_garbage(self):
        with pytest.raises(ValueError, match="Failed to parse ELF summary"):
            unpack_summary(b"\xc1")

    def test_not_a_dict(self):
        with pytest.raises(ValueError, match="expected dict"):
            unpack_summary(msgpack.packb([1, 2, 3]))

    def test_wrong_version(self):
        with pytest.raises(ValueError, match="Unsupported ELF summary version: 99"):
            unpack_summary(msgpack.packb({"version": 99}))
