"""
Failure rules: construction, matching, and the per-standard registry.

Two spec shapes build a rule:

    create_rule("clang")            # every clang fails
    create_rule({"gcc": "4.8"})     # every gcc 4.8.x fails, 4.9 is fine

The registry maps a standard (``cxx11``, ``openmp``) to the rules every
package needing that standard inherits. It is built once at import and
is read-only.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Union

from compiler_selector.core.data.constants import (
    FAILURE_MESSAGES,
    GNU_GCC_REGEXP,
    GNU_SERIES_LAST_PATCH,
)
from compiler_selector.core.models.compiler import (
    CandidateCompiler,
    CompilerFamily,
    CompilerVersion,
    VersionKind,
)
from compiler_selector.core.models.failure import FailureRule, RuleOptions

logger = logging.getLogger(__name__)

FailureSpec = Union[str, CompilerFamily, Mapping[str, object]]


class UnrecognizedStandardError(LookupError):
    """Raised when rules are requested for a standard that isn't registered."""

    def __init__(self, standard: str):
        self.standard = standard
        super().__init__(f'"{standard}" is not a recognized standard')


class InvalidFailureSpecError(ValueError):
    """Raised when a rule spec names no known compiler or GNU series."""


# ── Construction ────────────────────────────────────────────────


def create_rule(spec: FailureSpec, options: RuleOptions | None = None) -> FailureRule:
    """Build one failure rule.

    Args:
        spec: A family name (``"clang"``) or a one-entry mapping from
            ``gcc`` to a 4.x series (``{"gcc": "4.8"}``).
        options: Cause and optional build-number override.

    Returns:
        The frozen rule.

    Raises:
        InvalidFailureSpecError: Unknown family, the ``gnu`` placeholder,
            a series outside GCC 4.3..4.9, or a negative build number.
    """
    options = options or RuleOptions()

    if isinstance(spec, Mapping):
        name, version = _series_rule(spec)
    else:
        name = _family(spec)
        version = CompilerVersion.unbounded()

    if options.build is not None:
        try:
            version = CompilerVersion.build(options.build)
        except ValueError as e:
            raise InvalidFailureSpecError(f"Invalid build number for {name.value}: {e}") from e

    return FailureRule(name=name, version=version, cause=options.cause)


def _family(spec: str | CompilerFamily) -> CompilerFamily:
    try:
        family = CompilerFamily(spec)
    except ValueError as e:
        raise InvalidFailureSpecError(f"Unknown compiler: {spec!r}") from e
    if family == CompilerFamily.GNU:
        raise InvalidFailureSpecError(
            "'gnu' is a placeholder; name a GCC series instead, e.g. {'gcc': '4.8'}"
        )
    return family


def _series_rule(spec: Mapping[str, object]) -> tuple[CompilerFamily, CompilerVersion]:
    if len(spec) != 1:
        raise InvalidFailureSpecError(
            f"Expected a single compiler => series entry, got {dict(spec)!r}"
        )
    ((compiler, series),) = spec.items()
    if str(compiler) != CompilerFamily.GCC.value:
        raise InvalidFailureSpecError(
            f"Series rules are only supported for gcc, got {compiler!r}"
        )

    name = f"gcc-{series}"
    if not GNU_GCC_REGEXP.match(name):
        raise InvalidFailureSpecError(f"Unsupported GCC series: {series!r}")

    version = CompilerVersion.dotted(f"{series}.{GNU_SERIES_LAST_PATCH}")
    return CompilerFamily(name), version


# ── Matching ────────────────────────────────────────────────────


def rule_matches(rule: FailureRule, compiler: CandidateCompiler) -> bool:
    """True when ``compiler`` is the rule's family at or below its version."""
    if rule.name != compiler.name:
        return False
    if rule.version.kind != VersionKind.ANY and rule.version.kind != compiler.version.kind:
        logger.warning(
            "Cannot compare %s rule version (%s) with detected %s; ignoring rule",
            rule.name.value, rule.version, compiler.version,
        )
        return False
    return rule.version.covers(compiler.version)


# ── Registry ────────────────────────────────────────────────────


def _standard_rule(standard: str, spec: FailureSpec, build: int | None = None) -> FailureRule:
    return create_rule(spec, RuleOptions(cause=FAILURE_MESSAGES[standard], build=build))


_COLLECTIONS: Mapping[str, tuple[FailureRule, ...]] = MappingProxyType({
    "cxx11": (
        _standard_rule("cxx11", CompilerFamily.GCC_4_0),
        _standard_rule("cxx11", CompilerFamily.GCC),
        _standard_rule("cxx11", CompilerFamily.LLVM),
        _standard_rule("cxx11", CompilerFamily.CLANG, build=425),
        _standard_rule("cxx11", {"gcc": "4.3"}),
        _standard_rule("cxx11", {"gcc": "4.4"}),
        _standard_rule("cxx11", {"gcc": "4.5"}),
        _standard_rule("cxx11", {"gcc": "4.6"}),
    ),
    "openmp": (
        _standard_rule("openmp", CompilerFamily.CLANG),
    ),
})


def rules_for_standard(standard: str) -> tuple[FailureRule, ...]:
    """Return the registered rules for a standard.

    Raises:
        UnrecognizedStandardError: ``standard`` is not registered.
    """
    try:
        return _COLLECTIONS[standard]
    except KeyError:
        raise UnrecognizedStandardError(standard) from None


def known_standards() -> list[str]:
    """List registered standard identifiers."""
    return sorted(_COLLECTIONS)
