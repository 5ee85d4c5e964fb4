"""YAML 读写工具测试"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from depsupply.utils import yaml_io
from depsupply.utils.yaml_io import load_yaml, save_yaml


class TestLoadYaml:
    def test_missing_returns_empty(self, tmp_path: Path) -> None:
        assert load_yaml(tmp_path / "nope.yml") == {}

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        p = tmp_path / "list.yml"
        p.write_text("- 1\n")
        with pytest.raises(ValueError, match="不是映射"):
            load_yaml(p)

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        p = tmp_path / "bad.yml"
        p.write_text("a: [\n")
        with pytest.raises(yaml.YAMLError):
            load_yaml(p)

    def test_literal_keeps_scalar_text(self, tmp_path: Path) -> None:
        p = tmp_path / "nginx.yml"
        p.write_text("version: 1.20\nworkers: 4\n1.19: on\n")
        assert load_yaml(p) == {"version": 1.2, "workers": 4, 1.19: True}
        assert load_yaml(p, literal=True) == {"version": "1.20", "workers": "4", "1.19": "on"}

    def test_size_limit(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(yaml_io, "MAX_YAML_SIZE", 4)
        p = tmp_path / "big.yml"
        p.write_text("key: value\n")
        with pytest.raises(ValueError, match="过大"):
            load_yaml(p)


class TestSaveYaml:
    def test_roundtrip_keeps_order(self, tmp_path: Path) -> None:
        p = tmp_path / "sub" / "marker.yml"
        save_yaml(p, {"name": "nginx", "version": "1.20.1"})
        assert list(load_yaml(p)) == ["name", "version"]
        assert not list(p.parent.glob("*.tmp"))
