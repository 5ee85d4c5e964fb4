"""本地文件系统暂存区

目录约定:
  <dep_dir>/<name>/...     依赖安装目录
  <dep_dir>/bin/<link>     二进制发布链接（相对路径符号链接）
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from depsupply.core.exceptions import LinkError

logger = logging.getLogger(__name__)


class LocalStager:
    """本地暂存区"""

    def __init__(self, build_dir: str | Path, dep_dir: str | Path) -> None:
        self._build_dir = Path(build_dir)
        self._dep_dir = Path(dep_dir)

    @property
    def build_dir(self) -> Path:
        return self._build_dir

    @property
    def dep_dir(self) -> Path:
        return self._dep_dir

    @property
    def bin_dir(self) -> Path:
        return self._dep_dir / "bin"

    def add_bin_dependency_link(self, source: Path, link_name: str) -> None:
        """在 bin/ 下创建指向 source 的相对符号链接

        已存在且指向同一目标的链接保持不动，重试安全；
        其他已存在的路径视为冲突。
        """
        self.bin_dir.mkdir(parents=True, exist_ok=True)
        link = self.bin_dir / link_name
        rel = os.path.relpath(Path(source).absolute(), self.bin_dir.absolute())

        if link.is_symlink():
            current = os.readlink(link)
            if current == rel:
                logger.debug("链接已存在: %s -> %s", link, rel)
                return
            raise LinkError(link, f"链接已存在且指向 {current}")
        if link.exists():
            raise LinkError(link, "路径已存在且不是链接")

        os.symlink(rel, link)
        logger.debug("创建链接: %s -> %s", link, rel)
