"""
Compiler selector: pick a usable compiler for a package on a host.

Public entry points:

    from compiler_selector.core.services.compiler_selector import select_compiler
    from compiler_selector.core.services.compiler_failure import rules_for_standard
"""

__version__ = "0.1.0"
