"""
Compiler model: families, versions, and the candidates seen during selection.

A version is tagged with its kind. Vendor compilers report a build number
(Apple clang ``425``), GNU releases report a dotted version (``4.8.2``),
and failure rules that exclude a family outright carry the ``any`` sentinel.
Only values of the same kind are ever compared.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class CompilerFamily(StrEnum):
    """Closed set of compiler identifiers understood by the selector.

    ``GNU`` is a placeholder: the selector expands it into the concrete
    ``gcc-4.x`` members, newest first. Every other member is looked up
    as-is.
    """

    CLANG = "clang"
    GCC = "gcc"
    LLVM = "llvm"
    GCC_4_0 = "gcc-4.0"
    GNU = "gnu"
    GCC_4_3 = "gcc-4.3"
    GCC_4_4 = "gcc-4.4"
    GCC_4_5 = "gcc-4.5"
    GCC_4_6 = "gcc-4.6"
    GCC_4_7 = "gcc-4.7"
    GCC_4_8 = "gcc-4.8"
    GCC_4_9 = "gcc-4.9"

    @classmethod
    def gnu_release(cls, minor: int) -> CompilerFamily:
        """The GNU GCC 4.x member for a minor version (3..9)."""
        return cls(f"gcc-4.{minor}")


class VersionKind(StrEnum):
    """Discriminant for :class:`CompilerVersion`."""

    DOTTED = "dotted"
    BUILD = "build"
    ANY = "any"


class CompilerVersion(BaseModel):
    """A comparable compiler version.

    ``parts`` holds the numeric components: ``(4, 8, 2)`` for a dotted
    version, ``(425,)`` for a build number, empty for the sentinel.
    """

    model_config = ConfigDict(frozen=True)

    kind: VersionKind
    parts: tuple[int, ...] = ()

    @classmethod
    def dotted(cls, text: str) -> CompilerVersion:
        """Parse ``"4.8.2"`` (or ``"v4.8"``) into a dotted version."""
        try:
            parts = tuple(int(x) for x in str(text).strip().lstrip("v").split("."))
        except ValueError as e:
            raise ValueError(f"Not a dotted version: {text!r}") from e
        return cls(kind=VersionKind.DOTTED, parts=parts)

    @classmethod
    def build(cls, number: int) -> CompilerVersion:
        """A vendor build number."""
        if number < 0:
            raise ValueError(f"Build number must be non-negative, got {number}")
        return cls(kind=VersionKind.BUILD, parts=(int(number),))

    @classmethod
    def unbounded(cls) -> CompilerVersion:
        """Sentinel greater than every real version."""
        return cls(kind=VersionKind.ANY)

    @classmethod
    def coerce(cls, value: Any) -> CompilerVersion:
        """Normalise a raw lookup result.

        Integers and digit-only strings are build numbers, anything
        with a dot is a dotted version.
        """
        if isinstance(value, CompilerVersion):
            return value
        if isinstance(value, bool):
            raise TypeError(f"Not a compiler version: {value!r}")
        if isinstance(value, int):
            return cls.build(value)
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls.build(int(text))
            return cls.dotted(text)
        raise TypeError(f"Not a compiler version: {value!r}")

    def covers(self, other: CompilerVersion) -> bool:
        """True when ``self >= other``.

        The sentinel covers everything. Otherwise both values must be of
        the same kind; mixed kinds never cover each other.
        """
        if self.kind == VersionKind.ANY:
            return True
        if other.kind != self.kind:
            return False
        width = max(len(self.parts), len(other.parts))
        mine = self.parts + (0,) * (width - len(self.parts))
        theirs = other.parts + (0,) * (width - len(other.parts))
        return mine >= theirs

    def __str__(self) -> str:
        if self.kind == VersionKind.ANY:
            return "any"
        if self.kind == VersionKind.BUILD:
            return f"build {self.parts[0]}"
        return ".".join(str(p) for p in self.parts)


class CandidateCompiler(BaseModel):
    """An installed compiler considered during one selection walk."""

    model_config = ConfigDict(frozen=True)

    name: CompilerFamily
    version: CompilerVersion
