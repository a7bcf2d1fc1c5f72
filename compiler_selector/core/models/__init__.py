"""
Domain models for compiler selection.

    compiler.py  CompilerFamily, CompilerVersion, CandidateCompiler
    failure.py   FailureRule, RuleOptions
    host.py      collaborator protocols and the YAML HostProfile
    package.py   PackageSpec

Import from the submodules directly; this package re-exports nothing so
the data tables can depend on ``compiler.py`` without an import cycle.
"""
