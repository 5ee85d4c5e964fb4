"""供应编排器

顺序执行 Setup → Resolve → Install，任一步失败即进入 FAILED 终态并抛出原异常，
没有重试，也不回滚已完成的步骤。

用法:
    from depsupply.core.supplier import Supplier

    supplier = Supplier(stager, catalog)
    dep = supplier.run()
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from depsupply.core.config import Config
from depsupply.core.exceptions import SupplyError
from depsupply.core.installer import Installer
from depsupply.core.models import Dependency, SupplyTarget
from depsupply.core.protocols import CatalogProvider, Stager
from depsupply.core.resolver import VersionResolver
from depsupply.core.version_lines import MANIFEST_FILE, VersionLineTable, load_version_lines

logger = logging.getLogger(__name__)


class SupplyState(str, Enum):
    START = "start"
    SETUP = "setup"
    RESOLVE = "resolve"
    INSTALL = "install"
    DONE = "done"
    FAILED = "failed"


class Supplier:
    """依赖供应流程"""

    def __init__(
        self,
        stager: Stager,
        catalog: CatalogProvider,
        target: SupplyTarget | None = None,
    ) -> None:
        self.stager = stager
        self.catalog = catalog
        self.target = target or SupplyTarget()
        self.config = Config()
        self.version_lines = VersionLineTable()
        self.dependency: Dependency | None = None
        self.binary: Path | None = None
        self.state = SupplyState.START
        self.error: Exception | None = None

    def run(self) -> Dependency:
        """执行完整流程，返回已安装的依赖"""
        try:
            self.setup()
            dep = self.resolve()
            self.install(dep)
        except Exception as e:
            self.state = SupplyState.FAILED
            self.error = e
            if isinstance(e, SupplyError):
                logger.error(
                    "供应失败 [%s]: %s", e.code, e, extra={"error_code": e.code},
                )
            raise
        self.state = SupplyState.DONE
        return dep

    def setup(self) -> None:
        """加载构建目录配置和清单中的版本线表"""
        self.state = SupplyState.SETUP
        self.config = Config.from_file(
            Path(self.stager.build_dir) / self.target.config_file,
        )
        self.version_lines = load_version_lines(
            Path(self.catalog.root_dir) / MANIFEST_FILE,
        )

    def resolve(self) -> Dependency:
        self.state = SupplyState.RESOLVE
        resolver = VersionResolver(self.catalog, self.version_lines)
        self.dependency = resolver.resolve(self.target.name, self.config.version)
        logger.info(
            "Requested %s version: %s => %s",
            self.target.name, self.config.version, self.dependency.version,
        )
        return self.dependency

    def install(self, dependency: Dependency) -> Path:
        self.state = SupplyState.INSTALL
        installer = Installer(self.catalog, self.stager)
        self.binary = installer.install(
            dependency, Path(self.stager.dep_dir), self.target,
        )
        return self.binary
