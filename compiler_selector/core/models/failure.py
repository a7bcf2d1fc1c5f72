"""
Failure rule model: "compiler X up to version V is known to fail".

Rules are built by ``compiler_selector.core.services.compiler_failure``
and never mutated afterwards.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from compiler_selector.core.models.compiler import CompilerFamily, CompilerVersion


class RuleOptions(BaseModel):
    """Extra settings applied while building a rule.

    ``build`` replaces the rule's version with a vendor build number,
    used for compilers that only report builds (Apple clang).
    """

    model_config = ConfigDict(frozen=True)

    cause: str = ""
    build: int | None = None


class FailureRule(BaseModel):
    """A known incompatibility.

    The rule matches compilers of the same family whose version is at or
    below ``version``.
    """

    model_config = ConfigDict(frozen=True)

    name: CompilerFamily
    version: CompilerVersion
    cause: str = ""

    @property
    def build(self) -> CompilerVersion:
        """Alias of ``version`` for vendor compilers that report builds."""
        return self.version

    def __repr__(self) -> str:
        return f"<FailureRule: {self.name.value} {self.version}>"
