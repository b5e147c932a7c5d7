"""Reading and writing ELF64 file and program headers."""

import struct
from dataclasses import astuple, dataclass
from enum import IntFlag
from typing import ClassVar, List

ELF_MAGIC = 0x464C457F  # "\x7FELF" read as a little-endian word
ELF_PROG_LOAD = 1

_ELF_HEADER = struct.Struct("<I12sHHIQQQIHHHHHH")
_PROG_HEADER = struct.Struct("<IIQQQQQQ")


class ProgramFlags(IntFlag):
    """Permission bits of a program header."""

    EXEC = 1
    WRITE = 2
    READ = 4


class ElfFormatError(ValueError):
    """Raised when bytes do not hold a well-formed ELF header."""


@dataclass
class ElfHeader:
    """The ELF file header."""

    magic: int = ELF_MAGIC
    elf: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    SIZE: ClassVar[int] = _ELF_HEADER.size

    @classmethod
    def from_bytes(cls, data) -> "ElfHeader":
        """Parse a header from the start of ``data``, checking the magic number."""
        if len(data) < cls.SIZE:
            raise ElfFormatError(f"ELF header needs {cls.SIZE} bytes, got {len(data)}")
        header = cls(*_ELF_HEADER.unpack_from(data))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#x}")
        return header

    def to_bytes(self) -> bytes:
        """Encode the header in its on-disk form."""
        try:
            return _ELF_HEADER.pack(*astuple(self))
        except struct.error as exc:
            raise ElfFormatError(str(exc)) from exc


@dataclass
class ProgramHeader:
    """One entry of the program header table."""

    type: int = 0
    flags: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    SIZE: ClassVar[int] = _PROG_HEADER.size

    @classmethod
    def from_bytes(cls, data) -> "ProgramHeader":
        """Parse a program header from the start of ``data``."""
        if len(data) < cls.SIZE:
            raise ElfFormatError(f"program header needs {cls.SIZE} bytes, got {len(data)}")
        return cls(*_PROG_HEADER.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the program header in its on-disk form."""
        try:
            return _PROG_HEADER.pack(*astuple(self))
        except struct.error as exc:
            raise ElfFormatError(str(exc)) from exc

    def is_load(self) -> bool:
        """True if this segment is to be loaded into memory."""
        return self.type == ELF_PROG_LOAD

    @property
    def permissions(self) -> ProgramFlags:
        return ProgramFlags(self.flags & 0x7)


def program_headers(data) -> List[ProgramHeader]:
    """Return every program header of the ELF image in ``data``."""
    header = ElfHeader.from_bytes(data)
    view = memoryview(data)
    result = []
    for index in range(header.phnum):
        start = header.phoff + index * ProgramHeader.SIZE
        chunk = view[start:start + ProgramHeader.SIZE]
        if len(chunk) < ProgramHeader.SIZE:
            raise ElfFormatError(f"program header {index} runs past end of image")
        result.append(ProgramHeader.from_bytes(chunk))
    return result