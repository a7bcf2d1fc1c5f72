"""
Tests for compiler selection: priority walk, GNU expansion, exhaustion.
"""

import logging

import pytest

from compiler_selector.core.config.loader import ConfigError
from compiler_selector.core.models.compiler import CompilerFamily, CompilerVersion
from compiler_selector.core.models.package import PackageSpec
from compiler_selector.core.services.compiler_failure import create_rule
from compiler_selector.core.services.compiler_selector import (
    CompilerSelectionError,
    CompilerSelector,
    UnknownDefaultCompilerError,
    compiler_version,
    default_priority_list,
    expand_family,
    select_compiler,
)

C = CompilerFamily


# ── Helpers ──────────────────────────────────────────────────────


class TestDefaultPriorityList:
    def test_clang_host(self):
        assert default_priority_list("clang") == (C.CLANG, C.GCC, C.LLVM, C.GNU, C.GCC_4_0)

    def test_gcc_host(self):
        assert default_priority_list(C.GCC) == (C.GCC, C.LLVM, C.GNU, C.CLANG, C.GCC_4_0)

    def test_llvm_host(self):
        assert default_priority_list("llvm")[0] == C.LLVM

    def test_legacy_gcc_host(self):
        assert default_priority_list("gcc-4.0") == (C.GCC_4_0, C.GCC, C.LLVM, C.GNU, C.CLANG)

    @pytest.mark.parametrize("family", ["msvc", "gnu", "gcc-4.8"])
    def test_unknown_family_is_config_error(self, family):
        with pytest.raises(UnknownDefaultCompilerError):
            default_priority_list(family)

    def test_error_is_config_error(self):
        assert issubclass(UnknownDefaultCompilerError, ConfigError)


class TestExpandFamily:
    def test_gnu_expands_newest_first(self):
        assert [f.value for f in expand_family(C.GNU)] == [
            "gcc-4.9", "gcc-4.8", "gcc-4.7", "gcc-4.6", "gcc-4.5", "gcc-4.4", "gcc-4.3",
        ]

    def test_other_families_are_single(self):
        assert expand_family(C.CLANG) == (C.CLANG,)
        assert expand_family(C.GCC_4_8) == (C.GCC_4_8,)


class TestCompilerVersion:
    def test_gnu_release_uses_gcc_lookup(self, make_host):
        host = make_host(gnu={"gcc-4.8": "4.8.2"})
        assert compiler_version(host, C.GCC_4_8) == CompilerVersion.dotted("4.8.2")
        assert host.lookups == ["gcc-4.8"]

    def test_vendor_uses_build_lookup(self, make_host):
        host = make_host(builds={"gcc-4.0": 5370})
        assert compiler_version(host, C.GCC_4_0) == CompilerVersion.build(5370)

    def test_absent(self, make_host):
        assert compiler_version(make_host(), C.LLVM) is None


# ── Selection ────────────────────────────────────────────────────


class TestSelectCompiler:
    def test_priority_order_wins(self, make_host):
        host = make_host(builds={"clang": 600, "gcc": 5666})
        assert select_compiler([], [C.CLANG, C.GCC], host) == C.CLANG
        assert select_compiler([], [C.GCC, C.CLANG], host) == C.GCC

    def test_rule_order_does_not_matter(self, make_host):
        host = make_host(builds={"clang": 600, "gcc": 5666})
        rules = [create_rule("llvm"), create_rule({"gcc": "4.4"})]
        assert select_compiler(rules, [C.CLANG, C.GCC], host) == C.CLANG
        assert select_compiler(list(reversed(rules)), [C.CLANG, C.GCC], host) == C.CLANG

    def test_excluded_compiler_is_skipped(self, make_host):
        host = make_host(builds={"clang": 600, "gcc": 5666})
        assert select_compiler([create_rule("clang")], [C.CLANG, C.GCC], host) == C.GCC

    def test_gnu_expansion_prefers_newer(self, make_host):
        host = make_host(
            builds={"clang": 425},
            gnu={"gcc-4.4": "4.4.7", "gcc-4.9": "4.9.2"},
        )
        rules = [create_rule("clang")]
        assert select_compiler(rules, [C.CLANG, C.GNU], host) == C.GCC_4_9

    def test_gnu_excluded_release_falls_to_older(self, make_host):
        host = make_host(gnu={"gcc-4.4": "4.4.7", "gcc-4.9": "4.9.2"})
        rules = [create_rule({"gcc": "4.9"})]
        assert select_compiler(rules, [C.GNU], host) == C.GCC_4_4

    def test_first_survivor_not_best(self, make_host):
        # an old GNU release in the gnu slot beats a later gcc-4.0
        host = make_host(builds={"gcc-4.0": 5370}, gnu={"gcc-4.3": "4.3.6"})
        assert select_compiler([], default_priority_list("clang"), host) == C.GCC_4_3

    def test_exhaustion_raises(self, make_host):
        host = make_host(builds={"clang": 600})
        with pytest.raises(CompilerSelectionError, match="mypkg cannot be built"):
            select_compiler([create_rule("clang")], [C.CLANG], host, package="mypkg")

    def test_nothing_installed_raises(self, make_host):
        with pytest.raises(CompilerSelectionError):
            select_compiler([], default_priority_list("gcc"), make_host())

    def test_error_carries_package(self, make_host):
        pkg = PackageSpec(name="boost")
        pkg.fails_with("clang")
        with pytest.raises(CompilerSelectionError) as exc:
            CompilerSelector.select_for(pkg, make_host(builds={"clang": 600}), [C.CLANG])
        assert exc.value.package is pkg
        assert "boost" in str(exc.value)

    def test_unresolved_never_tested(self, make_host, monkeypatch):
        host = make_host(builds={"gcc": 5666})
        selector = CompilerSelector([create_rule("llvm")], host, [C.LLVM, C.GCC])
        checked = []
        original = selector.fails_with

        def spy(candidate):
            checked.append(candidate.name)
            return original(candidate)

        monkeypatch.setattr(selector, "fails_with", spy)
        assert selector.compiler() == C.GCC
        assert checked == [C.GCC]

    def test_stops_at_first_survivor(self, make_host):
        host = make_host(builds={"clang": 600, "gcc": 5666, "llvm": 2336})
        select_compiler([], [C.CLANG, C.GCC, C.LLVM], host)
        assert host.lookups == ["clang"]

    def test_idempotent(self, make_host):
        host = make_host(builds={"clang": 425}, gnu={"gcc-4.8": "4.8.2"})
        rules = PackageSpec(name="pkg", needs=["cxx11"]).compiler_failures
        priority = default_priority_list("clang")
        first = select_compiler(rules, priority, host)
        assert select_compiler(rules, priority, host) == first == C.GCC_4_8

    def test_logs_selection(self, make_host, caplog):
        host = make_host(builds={"clang": 600})
        with caplog.at_level(logging.INFO, logger="compiler_selector"):
            select_compiler([], [C.CLANG], host, package="zlib")
        assert "Selected clang" in caplog.text


class TestSelectFor:
    def test_uses_host_default(self, make_host):
        host = make_host("gcc", builds={"clang": 600, "gcc": 5666})
        assert CompilerSelector.select_for(PackageSpec(name="pkg"), host) == C.GCC

    def test_explicit_priority(self, make_host):
        host = make_host("gcc", builds={"clang": 600, "gcc": 5666})
        pkg = PackageSpec(name="pkg")
        assert CompilerSelector.select_for(pkg, host, ["clang"]) == C.CLANG

    def test_cxx11_on_old_apple_toolchain(self, make_host):
        host = make_host(
            builds={"clang": 425, "gcc": 5666, "llvm": 2336, "gcc-4.0": 5370},
            gnu={"gcc-4.8": "4.8.2", "gcc-4.6": "4.6.4"},
        )
        pkg = PackageSpec(name="pkg", needs=["cxx11"])
        assert CompilerSelector.select_for(pkg, host) == C.GCC_4_8

    def test_cxx11_newer_clang(self, make_host):
        host = make_host(builds={"clang": 500}, gnu={"gcc-4.8": "4.8.2"})
        pkg = PackageSpec(name="pkg", needs=["cxx11"])
        assert CompilerSelector.select_for(pkg, host) == C.CLANG

    def test_openmp_skips_clang(self, make_host):
        host = make_host(builds={"clang": 600}, gnu={"gcc-4.9": "4.9.1"})
        pkg = PackageSpec(name="pkg", needs=["openmp"])
        assert CompilerSelector.select_for(pkg, host) == C.GCC_4_9

    def test_unknown_host_default(self, make_host):
        with pytest.raises(UnknownDefaultCompilerError):
            CompilerSelector.select_for(PackageSpec(name="pkg"), make_host("gnu"))
