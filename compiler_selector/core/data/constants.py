"""
Compiler tables: GNU release range, candidate priority per host default,
and the causes attached to registry rules.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

from compiler_selector.core.models.compiler import CompilerFamily

# Minor versions of the GNU GCC 4.x releases the ``gnu`` placeholder covers.
GNU_GCC_VERSIONS = range(3, 10)

# Identifiers looked up through the GNU (non-vendor) version path.
GNU_GCC_REGEXP = re.compile(r"^gcc-(4\.[3-9])$")

# "gcc 4.8" fails for every 4.8.x release.
GNU_SERIES_LAST_PATCH = 999

_C = CompilerFamily

COMPILER_PRIORITY: Mapping[CompilerFamily, tuple[CompilerFamily, ...]] = MappingProxyType({
    _C.CLANG:   (_C.CLANG, _C.GCC, _C.LLVM, _C.GNU, _C.GCC_4_0),
    _C.GCC:     (_C.GCC, _C.LLVM, _C.GNU, _C.CLANG, _C.GCC_4_0),
    _C.LLVM:    (_C.LLVM, _C.GCC, _C.GNU, _C.CLANG, _C.GCC_4_0),
    _C.GCC_4_0: (_C.GCC_4_0, _C.GCC, _C.LLVM, _C.GNU, _C.CLANG),
})

FAILURE_MESSAGES: Mapping[str, str] = MappingProxyType({
    "cxx11": "This compiler does not support C++11",
    "openmp": "clang does not support OpenMP",
})
