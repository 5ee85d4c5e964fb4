"""依赖版本解析器

把用户请求的版本说明解析为目录中真实存在的一个具体版本:

  1. 版本线替换（只替换一层，先于数值匹配）
  2. 从目录取该依赖的全部版本
  3. 精确匹配优先，否则取满足前缀的最高数值版本

结果只取决于版本线表、目录内容和请求本身，同样的输入总得到同样的版本。
"""

from __future__ import annotations

import logging

from depsupply.core.exceptions import NoMatchingVersionError
from depsupply.core.models import Dependency
from depsupply.core.protocols import CatalogProvider
from depsupply.core.version import find_matching_version
from depsupply.core.version_lines import VersionLineTable

logger = logging.getLogger(__name__)


class VersionResolver:
    """版本解析器 - 只做选择，不触发安装"""

    def __init__(
        self,
        catalog: CatalogProvider,
        version_lines: VersionLineTable,
    ) -> None:
        self.catalog = catalog
        self.version_lines = version_lines

    def resolve(self, name: str, specifier: str = "") -> Dependency:
        """解析 (依赖名, 版本说明) 为具体依赖版本

        Raises:
            NoMatchingVersionError: 目录中没有满足条件的版本
        """
        requested = (specifier or "").strip()
        selector = self.version_lines.expand(requested)
        if selector != requested:
            logger.debug("版本线 %s -> %s", requested, selector)

        versions = self.catalog.all_dependency_versions(name)
        version = find_matching_version(selector, versions)
        if version is None:
            raise NoMatchingVersionError(name, requested, selector)

        return Dependency(name=name, version=version)
