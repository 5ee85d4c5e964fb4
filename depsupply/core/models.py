"""数据模型

数据类:
- Dependency: 解析结果（依赖名 + 具体版本）
- SupplyTarget: 被供应的依赖及其二进制发布方式
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Dependency:
    """解析得到的具体依赖版本，仅在本次运行内有效"""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True)
class SupplyTarget:
    """供应目标

    binary_path 相对于依赖安装目录 (<dep_dir>/<name>/)，
    安装后在 <dep_dir>/bin/ 下以 link_name 发布。
    """

    name: str = "nginx"
    config_file: str = "nginx.yml"
    binary_path: str = "nginx/sbin/nginx"
    link_name: str = "nginx"
