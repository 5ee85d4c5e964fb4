"""构建目录配置

构建目录下可选的 YAML 配置文件（默认 nginx.yml），当前只识别 version 字段:

    version: stable      # 版本线名、数值前缀或具体版本，留空表示最新
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from depsupply.core.exceptions import ConfigLoadError
from depsupply.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """用户配置"""

    version: str = ""

    # 未识别的字段原样保留，不参与解析
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """从 YAML 文件加载配置，文件不存在则返回默认

        Raises:
            ConfigLoadError: 文件存在但无法读取、解析，或字段类型不对
        """
        p = Path(path)
        if not p.exists():
            logger.debug("配置文件不存在，使用默认配置: %s", p)
            return cls()

        try:
            data = load_yaml(p, literal=True)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"无法加载配置文件 {p}: {e}") from e

        # 标量按原文读取，version: 1.20 得到 "1.20"
        version = data.get("version", "")
        if not isinstance(version, str):
            raise ConfigLoadError(
                f"{p}: version 必须是字符串 (实际类型: {type(version).__name__})"
            )

        known = {"version"}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(version=version.strip(), extra=extra)
        logger.info("配置已加载: %s", p)
        return cfg
