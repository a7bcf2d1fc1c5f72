"""
Host model: the collaborators the selector consumes.

``VersionLookup``, ``Host`` and ``Package`` are structural protocols; any
object with the right attributes works. ``HostProfile`` is the concrete
host loaded from ``host.yml``.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Union, runtime_checkable

from pydantic import BaseModel, Field, field_validator

from compiler_selector.core.data.constants import GNU_GCC_REGEXP
from compiler_selector.core.models.compiler import CompilerFamily, CompilerVersion
from compiler_selector.core.models.failure import FailureRule

RawVersion = Union[str, int, CompilerVersion, None]


# ── Protocols ───────────────────────────────────────────────────


@runtime_checkable
class VersionLookup(Protocol):
    """Installed compiler versions on a host.

    Both methods return ``None`` when the compiler is not installed.
    """

    def non_apple_gcc_version(self, name: str) -> RawVersion:
        """Dotted version of a GNU release such as ``gcc-4.8``."""
        ...

    def build_version(self, family: CompilerFamily) -> RawVersion:
        """Build number (or version) of any other compiler family."""
        ...


@runtime_checkable
class Host(VersionLookup, Protocol):
    """A version lookup that also knows the host's default compiler."""

    @property
    def default_compiler(self) -> CompilerFamily: ...


class Package(Protocol):
    """Anything that can be built: a name plus its known failures."""

    @property
    def name(self) -> str: ...

    @property
    def compiler_failures(self) -> Iterable[FailureRule]: ...


# ── Host profile ────────────────────────────────────────────────


class HostProfile(BaseModel):
    """A host described in YAML rather than probed.

    Example ``host.yml``::

        default_compiler: clang
        build_versions:
          clang: 425
          gcc: 5666
        gcc_versions:
          gcc-4.8: 4.8.2
    """

    default_compiler: CompilerFamily
    priority: list[CompilerFamily] | None = None  # overrides the default list
    build_versions: dict[CompilerFamily, int | str] = Field(default_factory=dict)
    gcc_versions: dict[str, str] = Field(default_factory=dict)

    @field_validator("gcc_versions", mode="before")
    @classmethod
    def _check_gcc_versions(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        out = {}
        for name, version in value.items():
            if not GNU_GCC_REGEXP.match(str(name)):
                raise ValueError(f"Not a GNU GCC release name: {name!r} (expected gcc-4.3 .. gcc-4.9)")
            # YAML reads "4.8" as a float
            out[str(name)] = _checked_version(name, str(version))
        return out

    @field_validator("build_versions", mode="before")
    @classmethod
    def _check_build_versions(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        return {name: _checked_version(name, version) for name, version in value.items()}

    def non_apple_gcc_version(self, name: str) -> str | None:
        return self.gcc_versions.get(name)

    def build_version(self, family: CompilerFamily) -> int | str | None:
        return self.build_versions.get(CompilerFamily(family))

    def installed(self) -> list[str]:
        """Every compiler this profile reports, in a stable order."""
        names = [f.value for f in self.build_versions]
        names.extend(self.gcc_versions)
        return sorted(names)


def _checked_version(name: object, version: object) -> object:
    """Return ``version`` unchanged once it is known to parse."""
    try:
        CompilerVersion.coerce(version)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid version for {name}: {version!r} ({e})") from e
    return version
