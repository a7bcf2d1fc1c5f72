"""
Package model: a named build target and the compilers it can't use.

Failures come from two places: the standards the package needs (each
pulls in its registry rules) and ad-hoc ``fails_with`` declarations.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from compiler_selector.core.models.failure import FailureRule, RuleOptions
from compiler_selector.core.services.compiler_failure import (
    FailureSpec,
    create_rule,
    rules_for_standard,
)


class PackageSpec(BaseModel):
    """A package as seen by the selector."""

    name: str
    needs: list[str] = Field(default_factory=list)
    failures: list[FailureRule] = Field(default_factory=list)

    @field_validator("needs")
    @classmethod
    def _known_standards(cls, value: list[str]) -> list[str]:
        # UnrecognizedStandardError is a LookupError, so pydantic lets it through
        for standard in value:
            rules_for_standard(standard)
        return list(dict.fromkeys(value))

    def needs_standard(self, standard: str) -> None:
        """Require a standard; its registered rules join the failures."""
        rules_for_standard(standard)
        if standard not in self.needs:
            self.needs.append(standard)

    def fails_with(
        self,
        spec: FailureSpec,
        cause: str = "",
        build: int | None = None,
    ) -> FailureRule:
        """Declare an ad-hoc incompatibility and return the new rule."""
        rule = create_rule(spec, RuleOptions(cause=cause, build=build))
        self.failures.append(rule)
        return rule

    @property
    def compiler_failures(self) -> tuple[FailureRule, ...]:
        """Standard rules first, then ad-hoc ones, without duplicates."""
        rules: list[FailureRule] = []
        for standard in self.needs:
            rules.extend(rules_for_standard(standard))
        rules.extend(self.failures)
        return tuple(dict.fromkeys(rules))
