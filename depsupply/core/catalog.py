"""基于 manifest.yml 的依赖目录

清单格式:

    version_lines:
      stable: 1.20.x
    dependencies:
      - name: nginx
        version: 1.20.1
        uri: https://example.com/nginx-1.20.1-linux-x64.tgz
        sha256: 6c1a...
      - name: nginx
        version: 1.21.0
        uri: files/nginx-1.21.0.tgz      # 相对清单根目录的本地文件

安装策略:
  1. destination/<name>/.depsupply.yml 记录的版本一致，且记录的文件都还在 → 直接返回（幂等）
  2. 远程 uri 先下载到缓存目录，缓存命中且校验和通过则复用
  3. 校验 sha256 后解压 tar 包到 destination/<name>/，非 tar 文件原样复制
  4. 最后原子写入安装标记，附带安装的文件列表

清单中的标量按原文读取，version: 1.20 就是 "1.20"。
"""

from __future__ import annotations

import hashlib
import logging
import shutil
import tarfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import yaml

from depsupply.core.exceptions import (
    ChecksumError,
    ManifestLoadError,
    SupplyError,
    ValidationError,
)
from depsupply.core.models import Dependency
from depsupply.core.version_lines import MANIFEST_FILE
from depsupply.utils.net import is_remote, validate_url_scheme
from depsupply.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)

INSTALL_MARKER = ".depsupply.yml"
DOWNLOAD_TIMEOUT = 60


@dataclass(frozen=True)
class CatalogEntry:
    """清单中的一个可安装版本"""

    name: str
    version: str
    uri: str
    sha256: str = ""
    file: str = ""

    @property
    def filename(self) -> str:
        if self.file:
            return self.file
        name = urlparse(self.uri).path.rstrip("/").split("/")[-1]
        return name or f"{self.name}-{self.version}"


def _parse_entries(path: Path, raw: object) -> list[CatalogEntry]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ManifestLoadError(
            f"{path}: dependencies 必须是列表 (实际类型: {type(raw).__name__})"
        )
    entries = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ManifestLoadError(f"{path}: dependencies[{i}] 不是映射")
        name = item.get("name")
        version = item.get("version")
        if not isinstance(name, str) or not name:
            raise ManifestLoadError(f"{path}: dependencies[{i}] 缺少 name")
        if not isinstance(version, str) or not version:
            raise ManifestLoadError(
                f"{path}: dependencies[{i}] ({name}) 的 version 缺失或不是字符串"
            )
        entries.append(CatalogEntry(
            name=name,
            version=version,
            uri=str(item.get("uri", "")),
            sha256=str(item.get("sha256", "") or "").lower(),
            file=str(item.get("file", "") or ""),
        ))
    return entries


class ManifestCatalog:
    """依赖目录 - 从清单文件读取版本列表并负责安装"""

    def __init__(self, root_dir: str | Path, cache_dir: str | Path = "") -> None:
        self._root_dir = Path(root_dir)
        self.cache_dir = Path(cache_dir) if cache_dir else self._root_dir / ".cache"
        self.manifest_path = self._root_dir / MANIFEST_FILE
        self.entries: list[CatalogEntry] = []
        self._load_manifest()

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def _load_manifest(self) -> None:
        if not self.manifest_path.is_file():
            raise ManifestLoadError(f"清单文件不存在: {self.manifest_path}")
        try:
            data = load_yaml(self.manifest_path, literal=True)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ManifestLoadError(
                f"无法加载清单文件 {self.manifest_path}: {e}"
            ) from e
        self.entries = _parse_entries(self.manifest_path, data.get("dependencies"))
        logger.info("已加载 %d 个依赖版本", len(self.entries))

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def all_dependency_versions(self, name: str) -> list[str]:
        """按清单顺序返回依赖的全部版本（去重）"""
        seen: dict[str, None] = {}
        for e in self.entries:
            if e.name == name:
                seen.setdefault(e.version, None)
        return list(seen)

    def find_entry(self, dependency: Dependency) -> CatalogEntry | None:
        for e in self.entries:
            if e.name == dependency.name and e.version == dependency.version:
                return e
        return None

    # ------------------------------------------------------------------
    # 安装
    # ------------------------------------------------------------------

    def install_dependency(self, dependency: Dependency, destination: Path) -> None:
        """安装到 destination/<name>/，同一版本重复安装不做任何事"""
        entry = self.find_entry(dependency)
        if entry is None:
            raise SupplyError(
                f"清单中没有 {dependency}。"
                f"可用版本: {self.all_dependency_versions(dependency.name)}"
            )

        install_dir = Path(destination) / dependency.name
        marker = install_dir / INSTALL_MARKER
        installed = load_yaml(marker) if marker.exists() else {}
        if installed.get("version") == dependency.version:
            missing = [
                f for f in installed.get("files") or []
                if not (install_dir / f).exists()
            ]
            if not missing:
                logger.info("已安装，跳过: %s -> %s", dependency, install_dir)
                return
            logger.warning(
                "安装不完整，缺少 %d 个文件 (如 %s)，重新安装: %s",
                len(missing), missing[0], install_dir,
            )

        archive = self._fetch(entry)
        if entry.sha256:
            self._verify_checksum(archive, entry.sha256)

        is_tar = tarfile.is_tarfile(archive)
        # data 过滤器 3.10.12 / 3.11.4 起才有，清理旧安装前先检查
        if is_tar and not hasattr(tarfile, "data_filter"):
            raise SupplyError(
                f"当前 Python 不支持安全解压 tar 包，"
                f"请升级到带 tarfile data 过滤器的版本: {archive}"
            )

        if install_dir.exists():
            logger.info("清理旧安装 (%s): %s", installed.get("version"), install_dir)
            shutil.rmtree(install_dir)
        install_dir.mkdir(parents=True)

        if is_tar:
            files = self._extract(archive, install_dir)
        else:
            shutil.copy2(archive, install_dir / entry.filename)
            files = [entry.filename]

        save_yaml(marker, {
            "name": dependency.name,
            "version": dependency.version,
            "sha256": entry.sha256,
            "files": files,
        })
        logger.info("安装完成: %s -> %s", dependency, install_dir)

    @staticmethod
    def _extract(archive: Path, install_dir: Path) -> list[str]:
        """安全解压 tar 包，返回解压出的普通文件相对路径"""
        with tarfile.open(archive) as tf:
            tf.extractall(path=str(install_dir), filter="data")  # noqa: S202
            return [m.name.lstrip("/") for m in tf.getmembers() if m.isfile()]

    def _fetch(self, entry: CatalogEntry) -> Path:
        """返回条目对应的本地文件，远程地址先下载到缓存"""
        if not entry.uri:
            raise ValidationError(f"{entry.name} {entry.version} 未定义 uri")

        if is_remote(entry.uri):
            return self._download(entry)

        parsed = urlparse(entry.uri)
        if parsed.scheme == "file":
            path = Path(url2pathname(parsed.path))
        elif not parsed.scheme or len(parsed.scheme) == 1:
            # 单字母 scheme 是 Windows 盘符
            path = self._root_dir / entry.uri
        else:
            raise ValidationError(
                f"不支持的 uri 协议 '{parsed.scheme}': {entry.uri}"
            )

        if not path.is_file():
            raise FileNotFoundError(f"依赖文件不存在: {path}")
        return path

    def _download(self, entry: CatalogEntry) -> Path:
        dest = self.cache_dir / entry.name / entry.version / entry.filename
        if dest.exists():
            if not entry.sha256 or self._digest(dest) == entry.sha256:
                logger.info("  缓存命中: %s", dest)
                return dest
            logger.warning("  缓存校验和不匹配，重新下载: %s", dest)
            dest.unlink()

        validate_url_scheme(entry.uri, context=f"download {entry.name}")
        dest.parent.mkdir(parents=True, exist_ok=True)
        logger.info("  下载: %s", entry.uri)
        try:
            with urllib.request.urlopen(entry.uri, timeout=DOWNLOAD_TIMEOUT) as resp:  # nosec B310
                with open(dest, "wb") as f:
                    shutil.copyfileobj(resp, f)
        except (urllib.error.URLError, OSError) as e:
            dest.unlink(missing_ok=True)
            raise ConnectionError(f"下载失败: {entry.uri} - {e}") from e
        logger.info("  已保存: %s", dest)
        return dest

    @staticmethod
    def _digest(path: Path) -> str:
        sha256 = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                sha256.update(chunk)
        return sha256.hexdigest()

    def _verify_checksum(self, path: Path, expected: str) -> None:
        actual = self._digest(path)
        if actual != expected:
            raise ChecksumError(
                f"校验和不匹配 {path}: 期望 {expected}, 实际 {actual}",
            )
        logger.info("  校验和通过: %s", path.name)
