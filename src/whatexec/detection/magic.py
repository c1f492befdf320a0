# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Magic numbers identifying native executable formats."""

from __future__ import annotations

from pathlib import Path
from typing import Final

PE_MAGIC: Final[bytes] = b"MZPE\x00\x00"
MZ_MAGIC: Final[bytes] = b"\x4d\x5a"
ELF_MAGIC: Final[bytes] = b"\x7fELF"
MACHO_32_MAGIC: Final[bytes] = b"\xfe\xed\xfa\xce"
MACHO_64_MAGIC: Final[bytes] = b"\xfe\xed\xfa\xcf"
MACHO_FAT_MAGIC: Final[bytes] = b"\xca\xfe\xba\xbe"
SHEBANG_MAGIC: Final[bytes] = b"#!"

MAX_MAGIC_LENGTH: Final[int] = 6


def byte_swapped(magic: bytes) -> bytes:
    """Return ``magic`` in the opposite byte order (Mach-O ``CIGAM`` form)."""

    return magic[::-1]


def read_header(path: Path, length: int) -> bytes:
    """Return at most ``length`` leading bytes of ``path``.

    Raises:
        OSError: If the file cannot be opened or read.
    """

    with path.open("rb") as handle:
        return handle.read(length)


def matches_any(path: Path, magics: tuple[bytes, ...]) -> bool:
    """Return ``True`` when ``path`` starts with one of ``magics``.

    Only ``max(len(magic))`` bytes are read. A file shorter than a magic number
    never matches it.

    Raises:
        OSError: If the file cannot be opened or read.
    """

    header = read_header(path, max(len(magic) for magic in magics))
    return any(len(header) >= len(magic) and header[: len(magic)] == magic for magic in magics)


__all__ = [
    "ELF_MAGIC",
    "MACHO_32_MAGIC",
    "MACHO_64_MAGIC",
    "MACHO_FAT_MAGIC",
    "MAX_MAGIC_LENGTH",
    "MZ_MAGIC",
    "PE_MAGIC",
    "SHEBANG_MAGIC",
    "byte_swapped",
    "matches_any",
    "read_header",
]
