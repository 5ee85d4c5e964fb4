"""协作方协议定义

解析器、安装器和编排器只依赖这里的 Protocol，
使用 typing.Protocol 而非 ABC，测试时可直接注入轻量 fake。
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from depsupply.core.models import Dependency


# =========================================================================
# 依赖目录协议
# =========================================================================

class CatalogProvider(Protocol):
    """依赖目录提供者协议

    提供某个依赖的全部已知版本，并能把指定版本安装到目标目录。
    install_dependency 对同一具体版本必须幂等，可安全重试。
    """

    @property
    def root_dir(self) -> Path:
        """清单文件所在根目录"""
        ...

    def all_dependency_versions(self, name: str) -> list[str]:
        """返回依赖的全部版本字符串（顺序无保证）"""
        ...

    def install_dependency(self, dependency: Dependency, destination: Path) -> None:
        """安装到 destination/<name>/ 下，失败时抛出异常"""
        ...


# =========================================================================
# 暂存区协议
# =========================================================================

class Stager(Protocol):
    """构建暂存区协议"""

    @property
    def build_dir(self) -> Path:
        """构建目录（可选配置文件所在位置）"""
        ...

    @property
    def dep_dir(self) -> Path:
        """依赖安装根目录"""
        ...

    def add_bin_dependency_link(self, source: Path, link_name: str) -> None:
        """以固定名称发布二进制链接"""
        ...
