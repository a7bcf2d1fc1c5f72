"""
Compiler selection: walk the host's priority list and return the first
installed compiler no failure rule excludes.

The walk is first-survivor, not best-survivor. The ``gnu`` placeholder
expands in place to ``gcc-4.9`` .. ``gcc-4.3`` so newer GNU releases win
within that slot, but an older GNU release found there still beats any
compiler later in the list.

Nothing here holds state between calls. Every input is passed in, the
only side effects are the version lookups.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

from compiler_selector.core.config.loader import ConfigError
from compiler_selector.core.data.constants import (
    COMPILER_PRIORITY,
    GNU_GCC_REGEXP,
    GNU_GCC_VERSIONS,
)
from compiler_selector.core.models.compiler import (
    CandidateCompiler,
    CompilerFamily,
    CompilerVersion,
)
from compiler_selector.core.models.failure import FailureRule
from compiler_selector.core.models.host import Host, Package, VersionLookup
from compiler_selector.core.services.compiler_failure import rule_matches

logger = logging.getLogger(__name__)


class CompilerSelectionError(Exception):
    """No installed compiler survives the package's failure rules."""

    def __init__(self, package: Package | str | None = None):
        self.package = package
        name = getattr(package, "name", package) or "This package"
        super().__init__(
            f"{name} cannot be built with any available compilers.\n"
            "Install a compatible compiler (e.g. a newer GCC) and try again."
        )


class UnknownDefaultCompilerError(ConfigError):
    """The host reports a default compiler with no priority list."""


# ── Lookup helpers ──────────────────────────────────────────────


def default_priority_list(family: CompilerFamily | str) -> tuple[CompilerFamily, ...]:
    """Priority list for a host whose default compiler is ``family``.

    Raises:
        UnknownDefaultCompilerError: ``family`` has no entry.
    """
    try:
        return COMPILER_PRIORITY[CompilerFamily(family)]
    except (ValueError, KeyError):
        raise UnknownDefaultCompilerError(
            f"No compiler priority defined for default compiler {family!r}; "
            f"expected one of {', '.join(f.value for f in COMPILER_PRIORITY)}"
        ) from None


def expand_family(family: CompilerFamily) -> tuple[CompilerFamily, ...]:
    """Concrete compilers behind a priority entry, newest GNU release first."""
    if family == CompilerFamily.GNU:
        return tuple(CompilerFamily.gnu_release(v) for v in reversed(GNU_GCC_VERSIONS))
    return (family,)


def compiler_version(versions: VersionLookup, family: CompilerFamily) -> CompilerVersion | None:
    """Installed version of one concrete compiler, or None."""
    if GNU_GCC_REGEXP.match(family.value):
        raw = versions.non_apple_gcc_version(family.value)
    else:
        raw = versions.build_version(family)
    if raw is None:
        return None
    return CompilerVersion.coerce(raw)


# ── Selector ────────────────────────────────────────────────────


class CompilerSelector:
    """One selection walk over a fixed set of inputs.

    Args:
        failures: Every rule the package declares.
        versions: Installed-version collaborator.
        priority: Families to try, in order.
        package: Reported in :class:`CompilerSelectionError`.
    """

    def __init__(
        self,
        failures: Iterable[FailureRule],
        versions: VersionLookup,
        priority: Sequence[CompilerFamily | str],
        package: Package | str | None = None,
    ):
        self.failures = tuple(failures)
        self.versions = versions
        self.priority = tuple(CompilerFamily(c) for c in priority)
        self.package = package

    @classmethod
    def select_for(
        cls,
        package: Package,
        host: Host,
        priority: Sequence[CompilerFamily | str] | None = None,
    ) -> CompilerFamily:
        """Pick a compiler for ``package`` on ``host``.

        Uses the host's default priority list unless ``priority`` is given.
        """
        if priority is None:
            priority = default_priority_list(host.default_compiler)
        return cls(package.compiler_failures, host, priority, package=package).compiler()

    def compiler(self) -> CompilerFamily:
        """Return the first surviving candidate.

        Raises:
            CompilerSelectionError: Every candidate is missing or excluded.
        """
        for candidate in self.candidates():
            if not self.fails_with(candidate):
                logger.info(
                    "Selected %s (%s) for %s",
                    candidate.name.value, candidate.version, self._package_name(),
                )
                return candidate.name
        logger.info("No usable compiler for %s", self._package_name())
        raise CompilerSelectionError(self.package)

    def candidates(self) -> Iterator[CandidateCompiler]:
        """Installed compilers in priority order, looked up lazily."""
        for entry in self.priority:
            for family in expand_family(entry):
                version = compiler_version(self.versions, family)
                if version is None:
                    logger.debug("%s not installed, skipping", family.value)
                    continue
                yield CandidateCompiler(name=family, version=version)

    def fails_with(self, candidate: CandidateCompiler) -> bool:
        for rule in self.failures:
            if rule_matches(rule, candidate):
                logger.debug(
                    "%s %s excluded: %s",
                    candidate.name.value, candidate.version, rule.cause or "known failure",
                )
                return True
        return False

    def _package_name(self) -> str:
        return str(getattr(self.package, "name", self.package) or "package")


def select_compiler(
    failures: Iterable[FailureRule],
    priority: Sequence[CompilerFamily | str],
    versions: VersionLookup,
    package: Package | str | None = None,
) -> CompilerFamily:
    """Functional form of :meth:`CompilerSelector.compiler`."""
    return CompilerSelector(failures, versions, priority, package=package).compiler()
