"""版本线表

清单文件 manifest.yml 中的 version_lines 段把符号名映射到版本选择器:

    version_lines:
      mainline: 1.21.x
      stable: 1.20.x

标量按原文读取，1.20 就是 "1.20"，不会变成浮点 1.2。
表在启动时加载一次，之后只读；加载失败直接报错，不会退化为空表。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import yaml

from depsupply.core.exceptions import ManifestLoadError
from depsupply.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.yml"


class VersionLineTable(Mapping[str, str]):
    """只读的版本线映射 {line_name: selector}"""

    def __init__(self, lines: Mapping[str, str] | None = None) -> None:
        self._lines = MappingProxyType(dict(lines or {}))

    def __getitem__(self, key: str) -> str:
        return self._lines[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"VersionLineTable({dict(self._lines)!r})"

    def expand(self, specifier: str) -> str:
        """把版本线名替换为选择器，只替换一层；不是版本线名则原样返回"""
        return self._lines.get(specifier, specifier)


def _coerce(path: Path, key: object, value: object) -> tuple[str, str]:
    # 按原文读入，键和值都应是字符串；嵌套结构不是合法的选择器
    if not isinstance(key, str):
        raise ManifestLoadError(
            f"{path}: version_lines 的键类型无效: {type(key).__name__}"
        )
    if not isinstance(value, str):
        raise ManifestLoadError(
            f"{path}: version_lines.{key} 的值类型无效: {type(value).__name__}"
        )
    return key.strip(), value.strip()


def load_version_lines(manifest_path: str | Path) -> VersionLineTable:
    """从清单文件加载版本线表

    Raises:
        ManifestLoadError: 清单不存在、无法解析，或 version_lines 不是映射
    """
    path = Path(manifest_path)
    if not path.is_file():
        raise ManifestLoadError(f"清单文件不存在: {path}")

    try:
        data = load_yaml(path, literal=True)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ManifestLoadError(f"无法加载清单文件 {path}: {e}") from e

    raw = data.get("version_lines")
    if raw is None or raw == "":
        raw = {}
    if not isinstance(raw, dict):
        raise ManifestLoadError(
            f"{path}: version_lines 必须是映射 (实际类型: {type(raw).__name__})"
        )

    table = VersionLineTable(dict(_coerce(path, k, v) for k, v in raw.items()))
    logger.info("已加载 %d 条版本线: %s", len(table), path)
    return table
