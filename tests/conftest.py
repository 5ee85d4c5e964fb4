"""测试共享 fixture - 协作方 fake + 清单/归档构造工具

FakeCatalog / FakeStager 只实现协议要求的操作，
解析器、安装器、编排器的测试无需真实下载或文件链接。
"""

from __future__ import annotations

import io
import tarfile
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from depsupply.core.models import Dependency

NGINX_VERSIONS = ["1.18.0", "1.19.2", "1.19.10", "1.20.1"]


class FakeCatalog:
    """内存目录：install_dependency 在目标目录下生成 layout 中的文件"""

    def __init__(
        self,
        versions: dict[str, list[str]],
        *,
        root_dir: Path = Path("."),
        layout: list[str] | None = None,
        fail: Exception | None = None,
    ) -> None:
        self.versions = versions
        self._root_dir = root_dir
        self.layout = ["nginx/sbin/nginx"] if layout is None else layout
        self.fail = fail
        self.installed: list[tuple[Dependency, Path]] = []

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def all_dependency_versions(self, name: str) -> list[str]:
        return list(self.versions.get(name, []))

    def install_dependency(self, dependency: Dependency, destination: Path) -> None:
        self.installed.append((dependency, destination))
        if self.fail is not None:
            raise self.fail
        for rel in self.layout:
            f = destination / dependency.name / rel
            f.parent.mkdir(parents=True, exist_ok=True)
            f.write_text(dependency.version)


class FakeStager:
    """记录 add_bin_dependency_link 调用，可注入失败"""

    def __init__(
        self, build_dir: Path, dep_dir: Path, fail: Exception | None = None,
    ) -> None:
        self._build_dir = build_dir
        self._dep_dir = dep_dir
        self.fail = fail
        self.links: list[tuple[Path, str]] = []

    @property
    def build_dir(self) -> Path:
        return self._build_dir

    @property
    def dep_dir(self) -> Path:
        return self._dep_dir

    def add_bin_dependency_link(self, source: Path, link_name: str) -> None:
        if self.fail is not None:
            raise self.fail
        self.links.append((source, link_name))


@pytest.fixture
def make_catalog() -> Callable[..., FakeCatalog]:
    def _make(versions: list[str] | None = None, **kwargs: Any) -> FakeCatalog:
        return FakeCatalog(
            {"nginx": NGINX_VERSIONS if versions is None else versions}, **kwargs,
        )
    return _make


@pytest.fixture
def make_stager(tmp_path: Path) -> Callable[..., FakeStager]:
    def _make(**kwargs: Any) -> FakeStager:
        build = tmp_path / "build"
        build.mkdir(exist_ok=True)
        return FakeStager(build, tmp_path / "deps", **kwargs)
    return _make


def write_yaml(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, allow_unicode=True))
    return path


def make_tarball(path: Path, files: dict[str, str]) -> Path:
    """生成 tar.gz，files 为 {归档内路径: 内容}"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tf:
        for name, content in files.items():
            data = content.encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
    return path
