"""
Error types raised while decoding ELF files.

Everything derives from ElfError, which is a ValueError so callers that
already guard binary parsing with ``except ValueError`` keep working.
Header validation errors are fatal to a parse; bounds errors are fatal to
the lookup that triggered them.
"""


class ElfError(ValueError):
    """Base class for all ELF decoding errors."""

    pass


class BadMagicError(ElfError):
    """Raised when the first four bytes are not the ELF signature."""

    def __init__(self, actual: bytes):
        self.actual = bytes(actual)
        found = ", ".join(f"0x{b:02X}" for b in self.actual)
        super().__init__(
            "Bad ELF magic number. Expected [0x7F, 0x45, 0x4C, 0x46], "
            f"found [{found}]"
        )


class BadPointerWidthError(ElfError):
    """Raised when the class byte (e_ident[4]) is neither 1 nor 2."""

    def __init__(self, actual: int):
        self.actual = actual
        super().__init__(f"Bad pointer width flag. Expected 1 or 2, found {actual}")


class BadVersionError(ElfError):
    """Raised when the identification version byte is not 1."""

    def __init__(self, actual: int):
        self.actual = actual
        super().__init__(f"Bad ELF version. Expected 1, found {actual}")


class BadEndianCodeError(ElfError):
    """Raised when the data encoding byte (e_ident[5]) is neither 1 nor 2."""

    def __init__(self, actual: int):
        self.actual = actual
        super().__init__(f"Bad data encoding. Expected 1 or 2, found {actual}")


class ElfBoundsError(ElfError):
    """Raised when a computed byte range falls outside the available data."""

    def __init__(self, what: str, offset: int, size: int, limit: int):
        self.what = what
        self.offset = offset
        self.size = size
        self.limit = limit
        super().__init__(
            f"{what} out of bounds: [{offset:#x}, {offset + size:#x}) "
            f"exceeds data length {limit:#x}"
        )


class CompressedSectionError(ElfError):
    """Raised when an SHF_COMPRESSED section cannot be inflated."""

    pass


def check_range(what: str, offset: int, size: int, limit: int) -> None:
    """Raise ElfBoundsError unless [offset, offset + size) lies within limit."""
    if offset < 0 or size < 0 or offset + size > limit:
        raise ElfBoundsError(what, offset, size, limit)
