"""版本解析器测试 - 版本线替换 + 最佳匹配"""

from __future__ import annotations

import pytest

from depsupply.core.exceptions import NoMatchingVersionError
from depsupply.core.models import Dependency
from depsupply.core.resolver import VersionResolver
from depsupply.core.version_lines import VersionLineTable


class TestResolve:
    def test_prefix_numeric_not_lexicographic(self, make_catalog) -> None:
        resolver = VersionResolver(make_catalog(), VersionLineTable())
        assert resolver.resolve("nginx", "1.19") == Dependency("nginx", "1.19.10")

    def test_empty_specifier_selects_latest(self, make_catalog) -> None:
        catalog = make_catalog(["1.18.0", "1.19.2", "1.20.1"])
        resolver = VersionResolver(catalog, VersionLineTable())
        assert resolver.resolve("nginx", "").version == "1.20.1"

    def test_default_specifier(self, make_catalog) -> None:
        resolver = VersionResolver(make_catalog(), VersionLineTable())
        assert resolver.resolve("nginx").version == "1.20.1"

    def test_exact(self, make_catalog) -> None:
        catalog = make_catalog(["1.18.0", "1.19.2", "1.20.1"])
        resolver = VersionResolver(catalog, VersionLineTable())
        assert resolver.resolve("nginx", "1.19.2").version == "1.19.2"

    def test_whitespace_trimmed(self, make_catalog) -> None:
        resolver = VersionResolver(make_catalog(), VersionLineTable({"stable": "1.18"}))
        assert resolver.resolve("nginx", "  stable ").version == "1.18.0"

    def test_no_match(self, make_catalog) -> None:
        catalog = make_catalog(["1.18.0", "1.19.2", "1.20.1"])
        resolver = VersionResolver(catalog, VersionLineTable())
        with pytest.raises(NoMatchingVersionError, match="'2.0'") as exc_info:
            resolver.resolve("nginx", "2.0")
        assert exc_info.value.name == "nginx"
        assert exc_info.value.requested == "2.0"
        assert "nginx" in str(exc_info.value)

    def test_unknown_dependency(self, make_catalog) -> None:
        resolver = VersionResolver(make_catalog(), VersionLineTable())
        with pytest.raises(NoMatchingVersionError, match="php"):
            resolver.resolve("php", "")

    def test_only_malformed_versions(self, make_catalog) -> None:
        resolver = VersionResolver(make_catalog(["nightly"]), VersionLineTable())
        with pytest.raises(NoMatchingVersionError):
            resolver.resolve("nginx", "")


class TestVersionLines:
    def test_line_alias(self, make_catalog) -> None:
        catalog = make_catalog(["1.18.0", "1.19.2", "1.20.1"])
        resolver = VersionResolver(catalog, VersionLineTable({"stable": "1.19"}))
        assert resolver.resolve("nginx", "stable").version == "1.19.2"

    def test_line_wildcard_selector(self, make_catalog) -> None:
        resolver = VersionResolver(make_catalog(), VersionLineTable({"mainline": "1.20.x"}))
        assert resolver.resolve("nginx", "mainline").version == "1.20.1"

    @pytest.mark.parametrize("line", ["stable", "mainline", "legacy"])
    def test_substitution_transparent(self, make_catalog, line: str) -> None:
        table = VersionLineTable({"stable": "1.19", "mainline": "", "legacy": "1.18.0"})
        resolver = VersionResolver(make_catalog(), table)
        assert resolver.resolve("nginx", line) == resolver.resolve("nginx", table[line])

    def test_line_takes_precedence_over_numeric(self, make_catalog) -> None:
        resolver = VersionResolver(make_catalog(), VersionLineTable({"1.19": "1.18"}))
        assert resolver.resolve("nginx", "1.19").version == "1.18.0"

    def test_no_recursive_expansion(self, make_catalog) -> None:
        table = VersionLineTable({"stable": "lts", "lts": "1.18"})
        resolver = VersionResolver(make_catalog(), table)
        with pytest.raises(NoMatchingVersionError, match="lts") as exc_info:
            resolver.resolve("nginx", "stable")
        assert exc_info.value.requested == "stable"
        assert exc_info.value.selector == "lts"

    def test_error_names_both_specifiers(self, make_catalog) -> None:
        resolver = VersionResolver(make_catalog(), VersionLineTable({"next": "2.x"}))
        with pytest.raises(NoMatchingVersionError) as exc_info:
            resolver.resolve("nginx", "next")
        msg = str(exc_info.value)
        assert "'next'" in msg
        assert "'2.x'" in msg


class TestProperties:
    @pytest.mark.parametrize("specifier", ["", "1", "1.19", "1.19.x", "1.20.1", "stable"])
    def test_sound_and_idempotent(self, make_catalog, specifier: str) -> None:
        catalog = make_catalog()
        resolver = VersionResolver(catalog, VersionLineTable({"stable": "1.19"}))
        first = resolver.resolve("nginx", specifier)
        assert first.version in catalog.all_dependency_versions("nginx")
        assert resolver.resolve("nginx", specifier) == first

    def test_catalog_order_irrelevant(self, make_catalog) -> None:
        forward = VersionResolver(make_catalog(), VersionLineTable())
        backward = VersionResolver(
            make_catalog(["1.20.1", "1.19.10", "1.19.2", "1.18.0"]), VersionLineTable(),
        )
        assert forward.resolve("nginx", "1.19") == backward.resolve("nginx", "1.19")
