"""
Code tables of the ELF format.

Every numeric code domain (OS ABI, file type, machine, section type, symbol
binding and type) is represented by a small frozen dataclass holding a
``kind`` (an Enum whose value is the human-readable label) and the raw
``code`` it was decoded from. Conversion from the raw integer never fails:
codes the standard reserves for OS/processor/vendor use map to range kinds,
and anything else degrades to the domain's none/null kind. The raw value is
always preserved.
"""

from dataclasses import dataclass
from enum import Enum

# =============================================================================
# Constants
# =============================================================================

ELF_MAGIC = b"\x7fELF"

# e_ident layout
EI_CLASS = 4
EI_DATA = 5
EI_VERSION = 6
EI_OSABI = 7
EI_ABIVERSION = 8
EI_NIDENT = 16

ELFCLASS32 = 1
ELFCLASS64 = 2

ELFDATA2LSB = 1
ELFDATA2MSB = 2

EV_CURRENT = 1

# ELF type (e_type)
ET_NONE = 0
ET_REL = 1
ET_EXEC = 2
ET_DYN = 3
ET_CORE = 4
ET_LOOS = 0xFE00
ET_HIOS = 0xFEFF
ET_LOPROC = 0xFF00
ET_HIPROC = 0xFFFF

# Section header types (sh_type)
SHT_NULL = 0
SHT_PROGBITS = 1
SHT_SYMTAB = 2
SHT_STRTAB = 3
SHT_RELA = 4
SHT_HASH = 5
SHT_DYNAMIC = 6
SHT_NOTE = 7
SHT_NOBITS = 8
SHT_REL = 9
SHT_SHLIB = 10
SHT_DYNSYM = 11
SHT_INIT_ARRAY = 14
SHT_FINI_ARRAY = 15
SHT_PREINIT_ARRAY = 16
SHT_GROUP = 17
SHT_SYMTAB_SHNDX = 18
SHT_NUM = 19
SHT_LOOS = 0x60000000

# Section flags (sh_flags)
SHF_WRITE = 0x1
SHF_ALLOC = 0x2
SHF_EXECINSTR = 0x4
SHF_MERGE = 0x10
SHF_STRINGS = 0x20
SHF_INFO_LINK = 0x40
SHF_LINK_ORDER = 0x80
SHF_OS_NONCONFORMING = 0x100
SHF_GROUP = 0x200
SHF_TLS = 0x400
SHF_COMPRESSED = 0x800

# Compression types (ch_type)
ELFCOMPRESS_ZLIB = 1
ELFCOMPRESS_ZSTD = 2

# Symbol binding / type processor-specific range
STB_LOPROC = 13
STB_HIPROC = 15
STT_LOPROC = 13
STT_HIPROC = 15


# =============================================================================
# Byte order
# =============================================================================


class Endian(Enum):
    """Data encoding of the file (e_ident[EI_DATA])."""

    LITTLE = ELFDATA2LSB
    BIG = ELFDATA2MSB

    @property
    def struct_prefix(self) -> str:
        """Byte-order character for the struct module."""
        return "<" if self is Endian.LITTLE else ">"

    def __str__(self) -> str:
        return "Little Endian" if self is Endian.LITTLE else "Big Endian"


# =============================================================================
# OS ABI
# =============================================================================


class AbiKind(Enum):
    SYSTEM_V = "System V"
    HPUX = "HP-UX"
    NETBSD = "NetBSD"
    LINUX = "Linux"
    GNU_HURD = "GNU Hurd"
    SOLARIS = "Solaris"
    AIX = "AIX"
    IRIX = "IRIX"
    FREEBSD = "FreeBSD"
    TRU64 = "Tru64"
    NOVELL_MODESTO = "Novell Modesto"
    OPENBSD = "OpenBSD"
    OPENVMS = "OpenVMS"
    NONSTOP_KERNEL = "NonStop Kernel"
    AROS = "AROS"
    FENIX_OS = "Fenix OS"
    CLOUD_ABI = "Cloud ABI"
    OPENVOS = "Stratus Technologies OpenVOS"
    NONE = "No OS ABI defined"


# 0x05 is unassigned and falls through to NONE.
_ABI_CODES = {
    0x01: AbiKind.HPUX,
    0x02: AbiKind.NETBSD,
    0x03: AbiKind.LINUX,
    0x04: AbiKind.GNU_HURD,
    0x06: AbiKind.SOLARIS,
    0x07: AbiKind.AIX,
    0x08: AbiKind.IRIX,
    0x09: AbiKind.FREEBSD,
    0x0A: AbiKind.TRU64,
    0x0B: AbiKind.NOVELL_MODESTO,
    0x0C: AbiKind.OPENBSD,
    0x0D: AbiKind.OPENVMS,
    0x0E: AbiKind.NONSTOP_KERNEL,
    0x0F: AbiKind.AROS,
    0x10: AbiKind.FENIX_OS,
    0x11: AbiKind.CLOUD_ABI,
    0x12: AbiKind.OPENVOS,
}


@dataclass(frozen=True)
class OperatingSystem:
    """Target OS ABI (e_ident[EI_OSABI]) with its ABI version byte."""

    kind: AbiKind
    code: int
    abi_version: int = 0

    @classmethod
    def from_code(cls, code: int, abi_version: int = 0) -> "OperatingSystem":
        if code == 0x00:
            kind = AbiKind.NONE if abi_version == 0 else AbiKind.SYSTEM_V
        else:
            kind = _ABI_CODES.get(code, AbiKind.NONE)
        return cls(kind, code, abi_version)

    def __str__(self) -> str:
        if self.kind is AbiKind.NONE:
            return self.kind.value
        return f"{self.kind.value} - rev {self.abi_version}"


# =============================================================================
# File type
# =============================================================================


class FileKind(Enum):
    NONE = "Unknown ELF file type"
    RELOCATABLE = "Relocatable file"
    EXECUTABLE = "Executable file"
    DYNAMIC = "Dynamic linked file"
    CORE = "Core file"
    OS_SPECIFIC = "OS Specific file"
    PROCESSOR_SPECIFIC = "Processor Specific file"


_FILE_CODES = {
    ET_REL: FileKind.RELOCATABLE,
    ET_EXEC: FileKind.EXECUTABLE,
    ET_DYN: FileKind.DYNAMIC,
    ET_CORE: FileKind.CORE,
}


@dataclass(frozen=True)
class FileType:
    """Object file type (e_type)."""

    kind: FileKind
    code: int

    @classmethod
    def from_code(cls, code: int) -> "FileType":
        if ET_LOOS <= code <= ET_HIOS:
            return cls(FileKind.OS_SPECIFIC, code)
        if ET_LOPROC <= code <= ET_HIPROC:
            return cls(FileKind.PROCESSOR_SPECIFIC, code)
        return cls(_FILE_CODES.get(code, FileKind.NONE), code)

    def __str__(self) -> str:
        if self.kind in (FileKind.OS_SPECIFIC, FileKind.PROCESSOR_SPECIFIC):
            return f"{self.kind.value} (0x{self.code:X})"
        return self.kind.value


# =============================================================================
# Instruction set (e_machine)
# =============================================================================


class MachineKind(Enum):
    NONE = "No machine"
    M32 = "AT&T WE 32100"
    SPARC = "SPARC"
    X86 = "Intel 80386"
    M68K = "Motorola 68000"
    M88K = "Motorola 88000"
    IAMCU = "Intel MCU"
    I860 = "Intel 80860"
    MIPS = "MIPS"
    S370 = "IBM System/370"
    MIPS_RS3_LE = "MIPS RS3000 Little-endian"
    PARISC = "HP PA-RISC"
    I960 = "Intel 80960"
    PPC = "PowerPC"
    PPC64 = "PowerPC 64-bit"
    S390 = "IBM S/390"
    SPU = "IBM SPU/SPC"
    V800 = "NEC V800"
    FR20 = "Fujitsu FR20"
    RH32 = "TRW RH-32"
    RCE = "Motorola RCE"
    ARM = "ARM"
    ALPHA = "Digital Alpha"
    SUPERH = "SuperH"
    SPARCV9 = "SPARC Version 9"
    TRICORE = "Siemens TriCore"
    ARC = "Argonaut RISC Core"
    H8_300 = "Hitachi H8/300"
    IA_64 = "Intel IA-64"
    MIPS_X = "Stanford MIPS-X"
    COLDFIRE = "Motorola ColdFire"
    X86_64 = "AMD x86-64"
    VAX = "Digital VAX"
    AVR = "Atmel AVR"
    XTENSA = "Tensilica Xtensa"
    MSP430 = "TI MSP430"
    BLACKFIN = "Analog Devices Blackfin"
    TMS320C6000 = "TI TMS320C6000"
    AARCH64 = "ARM AArch64"
    AVR32 = "Atmel AVR32"
    CUDA = "NVIDIA CUDA"
    AMDGPU = "AMD GPU"
    RISCV = "RISC-V"
    BPF = "Linux BPF"
    CSKY = "C-SKY"
    LOONGARCH = "LoongArch"
    UNKNOWN = "Unknown instruction set"


_MACHINE_CODES = {
    0: MachineKind.NONE,
    1: MachineKind.M32,
    2: MachineKind.SPARC,
    3: MachineKind.X86,
    4: MachineKind.M68K,
    5: MachineKind.M88K,
    6: MachineKind.IAMCU,
    7: MachineKind.I860,
    8: MachineKind.MIPS,
    9: MachineKind.S370,
    10: MachineKind.MIPS_RS3_LE,
    15: MachineKind.PARISC,
    19: MachineKind.I960,
    20: MachineKind.PPC,
    21: MachineKind.PPC64,
    22: MachineKind.S390,
    23: MachineKind.SPU,
    36: MachineKind.V800,
    37: MachineKind.FR20,
    38: MachineKind.RH32,
    39: MachineKind.RCE,
    40: MachineKind.ARM,
    41: MachineKind.ALPHA,
    42: MachineKind.SUPERH,
    43: MachineKind.SPARCV9,
    44: MachineKind.TRICORE,
    45: MachineKind.ARC,
    46: MachineKind.H8_300,
    50: MachineKind.IA_64,
    51: MachineKind.MIPS_X,
    52: MachineKind.COLDFIRE,
    62: MachineKind.X86_64,
    75: MachineKind.VAX,
    83: MachineKind.AVR,
    94: MachineKind.XTENSA,
    105: MachineKind.MSP430,
    106: MachineKind.BLACKFIN,
    140: MachineKind.TMS320C6000,
    183: MachineKind.AARCH64,
    185: MachineKind.AVR32,
    190: MachineKind.CUDA,
    224: MachineKind.AMDGPU,
    243: MachineKind.RISCV,
    247: MachineKind.BPF,
    252: MachineKind.CSKY,
    258: MachineKind.LOONGARCH,
}


@dataclass(frozen=True)
class InstructionSet:
    """Target instruction set architecture (e_machine)."""

    kind: MachineKind
    code: int

    @classmethod
    def from_code(cls, code: int) -> "InstructionSet":
        return cls(_MACHINE_CODES.get(code, MachineKind.UNKNOWN), code)

    def __str__(self) -> str:
        if self.kind is MachineKind.UNKNOWN:
            return f"{self.kind.value} (0x{self.code:X})"
        return self.kind.value


# =============================================================================
# Section type
# =============================================================================


class SectionKind(Enum):
    NULL = "Null/Unused/Unknown"
    PROGBITS = "Program data"
    SYMTAB = "Symbol table"
    STRTAB = "String table"
    RELA = "Relocation entries with addend"
    HASH = "Symbol hash table"
    DYNAMIC = "Dynamic linking information"
    NOTE = "Notes"
    NOBITS = "BSS"
    REL = "Relocation entries with no addends"
    SHLIB = "RESERVED"
    DYNSYM = "Dynamic linker symbol table"
    INIT_ARRAY = "Array of constructors"
    FINI_ARRAY = "Array of destructors"
    PREINIT_ARRAY = "Array of pre-constructors"
    GROUP = "Section group"
    SYMTAB_SHNDX = "Extended section indices"
    NUM = "Number of defined types"
    OS_SPECIFIC = "OS Specific"


# 12 and 13 are unassigned and collapse to NULL.
_SECTION_CODES = {
    SHT_NULL: SectionKind.NULL,
    SHT_PROGBITS: SectionKind.PROGBITS,
    SHT_SYMTAB: SectionKind.SYMTAB,
    SHT_STRTAB: SectionKind.STRTAB,
    SHT_RELA: SectionKind.RELA,
    SHT_HASH: SectionKind.HASH,
    SHT_DYNAMIC: SectionKind.DYNAMIC,
    SHT_NOTE: SectionKind.NOTE,
    SHT_NOBITS: SectionKind.NOBITS,
    SHT_REL: SectionKind.REL,
    SHT_SHLIB: SectionKind.SHLIB,
    SHT_DYNSYM: SectionKind.DYNSYM,
    SHT_INIT_ARRAY: SectionKind.INIT_ARRAY,
    SHT_FINI_ARRAY: SectionKind.FINI_ARRAY,
    SHT_PREINIT_ARRAY: SectionKind.PREINIT_ARRAY,
    SHT_GROUP: SectionKind.GROUP,
    SHT_SYMTAB_SHNDX: SectionKind.SYMTAB_SHNDX,
    SHT_NUM: SectionKind.NUM,
}


@dataclass(frozen=True)
class SectionType:
    """Section type (sh_type)."""

    kind: SectionKind
    code: int

    @classmethod
    def from_code(cls, code: int) -> "SectionType":
        if code >= SHT_LOOS:
            return cls(SectionKind.OS_SPECIFIC, code)
        return cls(_SECTION_CODES.get(code, SectionKind.NULL), code)

    def __str__(self) -> str:
        if self.kind is SectionKind.OS_SPECIFIC:
            return f"{self.kind.value} (0x{self.code:X})"
        return self.kind.value


# =============================================================================
# Symbol binding and type
# =============================================================================


class BindKind(Enum):
    LOCAL = "Local"
    GLOBAL = "Global"
    WEAK = "Weak"
    PROCESSOR = "Processor"
    NONE = "No binding"


_BIND_CODES = {0: BindKind.LOCAL, 1: BindKind.GLOBAL, 2: BindKind.WEAK}


@dataclass(frozen=True)
class SymbolBind:
    """Symbol binding (high nibble of st_info)."""

    kind: BindKind
    code: int

    @classmethod
    def from_code(cls, code: int) -> "SymbolBind":
        if STB_LOPROC <= code <= STB_HIPROC:
            return cls(BindKind.PROCESSOR, code)
        return cls(_BIND_CODES.get(code, BindKind.NONE), code)

    def __str__(self) -> str:
        if self.kind is BindKind.PROCESSOR:
            return f"{self.kind.value} {self.code}"
        return self.kind.value


class SymbolKind(Enum):
    NONE = "No type"
    OBJECT = "Object"
    FUNCTION = "Function"
    SECTION = "Section"
    FILE = "File"
    PROCESSOR = "Processor"


_SYMBOL_CODES = {
    1: SymbolKind.OBJECT,
    2: SymbolKind.FUNCTION,
    3: SymbolKind.SECTION,
    4: SymbolKind.FILE,
}


@dataclass(frozen=True)
class SymbolType:
    """Symbol type (low nibble of st_info)."""

    kind: SymbolKind
    code: int

    @classmethod
    def from_code(cls, code: int) -> "SymbolType":
        if STT_LOPROC <= code <= STT_HIPROC:
            return cls(SymbolKind.PROCESSOR, code)
        return cls(_SYMBOL_CODES.get(code, SymbolKind.NONE), code)

    def __str__(self) -> str:
        if self.kind is SymbolKind.PROCESSOR:
            return f"{self.kind.value} {self.code}"
        return self.kind.value


# =============================================================================
# Flag fields
# =============================================================================


@dataclass(frozen=True)
class ArchFlags:
    """Processor-specific flags (e_flags). Kept opaque."""

    bits: int

    def __str__(self) -> str:
        return f"0x{self.bits:08X}"


_SECTION_FLAG_NAMES = (
    (SHF_WRITE, "Write"),
    (SHF_ALLOC, "Alloc"),
    (SHF_EXECINSTR, "Exec"),
    (SHF_MERGE, "Merge"),
    (SHF_STRINGS, "Strings"),
    (SHF_INFO_LINK, "InfoLink"),
    (SHF_LINK_ORDER, "LinkOrder"),
    (SHF_OS_NONCONFORMING, "OS-Non conforming"),
    (SHF_GROUP, "Group"),
    (SHF_TLS, "TLS"),
    (SHF_COMPRESSED, "Compressed"),
)


@dataclass(frozen=True)
class SectionFlags:
    """Section attribute bits (sh_flags)."""

    bits: int

    def _has(self, flag: int) -> bool:
        return bool(self.bits & flag)

    def write(self) -> bool:
        """Section is writable at runtime."""
        return self._has(SHF_WRITE)

    def alloc(self) -> bool:
        """Section occupies memory during execution."""
        return self._has(SHF_ALLOC)

    def exec(self) -> bool:
        """Section contains executable instructions."""
        return self._has(SHF_EXECINSTR)

    def merge(self) -> bool:
        return self._has(SHF_MERGE)

    def strings(self) -> bool:
        return self._has(SHF_STRINGS)

    def info_link(self) -> bool:
        """sh_info holds a section header table index."""
        return self._has(SHF_INFO_LINK)

    def link_order(self) -> bool:
        return self._has(SHF_LINK_ORDER)

    def os_nonconforming(self) -> bool:
        return self._has(SHF_OS_NONCONFORMING)

    def group(self) -> bool:
        return self._has(SHF_GROUP)

    def tls(self) -> bool:
        """Section holds thread-local data."""
        return self._has(SHF_TLS)

    def compressed(self) -> bool:
        """Section content starts with a compression header."""
        return self._has(SHF_COMPRESSED)

    def __str__(self) -> str:
        names = [name for flag, name in _SECTION_FLAG_NAMES if self._has(flag)]
        return " + ".join(names) if names else "----"
