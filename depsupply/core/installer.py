"""依赖安装器

职责:
- 调用目录提供者把解析好的版本安装到目标根目录
- 以固定名称发布依赖的二进制链接，下游步骤无需关心版本

安装失败包装为 InstallError 且不再尝试发布链接；链接失败抛出 LinkError。
"""

from __future__ import annotations

import logging
from pathlib import Path

from depsupply.core.exceptions import InstallError, LinkError
from depsupply.core.models import Dependency, SupplyTarget
from depsupply.core.protocols import CatalogProvider, Stager

logger = logging.getLogger(__name__)


class Installer:
    """依赖安装器"""

    def __init__(self, catalog: CatalogProvider, stager: Stager) -> None:
        self.catalog = catalog
        self.stager = stager

    def install(
        self,
        dependency: Dependency,
        destination: Path,
        target: SupplyTarget,
    ) -> Path:
        """安装依赖并发布二进制链接，返回链接指向的二进制路径"""
        destination = Path(destination)
        try:
            self.catalog.install_dependency(dependency, destination)
        except Exception as e:
            raise InstallError(dependency.name, dependency.version, str(e)) from e
        logger.info("已安装 %s -> %s", dependency, destination / dependency.name)

        source = destination / dependency.name / target.binary_path
        if not source.exists():
            raise LinkError(source, f"{dependency} 安装后找不到二进制文件")

        try:
            self.stager.add_bin_dependency_link(source, target.link_name)
        except LinkError:
            raise
        except OSError as e:
            raise LinkError(e.filename or source, e.strerror or str(e)) from e

        logger.info("已发布链接 %s -> %s", target.link_name, source)
        return source
