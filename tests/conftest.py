"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import Field

from compiler_selector.core.models.compiler import CompilerFamily
from compiler_selector.core.models.host import HostProfile


class RecordingHost(HostProfile):
    """HostProfile that remembers every lookup it answers."""

    lookups: list[str] = Field(default_factory=list)

    def non_apple_gcc_version(self, name: str):
        self.lookups.append(name)
        return super().non_apple_gcc_version(name)

    def build_version(self, family: CompilerFamily):
        self.lookups.append(CompilerFamily(family).value)
        return super().build_version(family)


@pytest.fixture
def make_host():
    """Factory: ``make_host("clang", builds={"clang": 425}, gnu={"gcc-4.8": "4.8.2"})``."""

    def _make(
        default: str = "clang",
        builds: dict | None = None,
        gnu: dict | None = None,
    ) -> RecordingHost:
        return RecordingHost(
            default_compiler=default,
            build_versions=builds or {},
            gcc_versions=gnu or {},
        )

    return _make


@pytest.fixture
def host_yml(tmp_path: Path) -> Path:
    """A host.yml for a clang host with Apple clang 425 and GCC 4.8."""
    content = textwrap.dedent("""\
        default_compiler: clang
        build_versions:
          clang: 425
          gcc: 5666
        gcc_versions:
          gcc-4.8: 4.8.2
          gcc-4.4: 4.4.7
    """)
    path = tmp_path / "host.yml"
    path.write_text(content)
    return path
