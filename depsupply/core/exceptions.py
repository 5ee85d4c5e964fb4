"""统一异常体系

所有业务异常继承 SupplyError，每个阶段一个异常类型。
CLI 层据此输出 "Error [code]: message" 形式的单行提示。
"""

from __future__ import annotations

from pathlib import Path


class SupplyError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigLoadError(SupplyError):
    """配置文件存在但无法解析"""

    code = "CONFIG_ERROR"


class ManifestLoadError(SupplyError):
    """清单文件缺失、无法读取或结构无效"""

    code = "MANIFEST_ERROR"


class NoMatchingVersionError(SupplyError):
    """请求的版本在目录中没有任何匹配"""

    code = "NO_MATCHING_VERSION"

    def __init__(self, name: str, requested: str, selector: str) -> None:
        if requested == selector:
            shown = f"'{requested}'"
        else:
            shown = f"'{requested}' (=> '{selector}')"
        super().__init__(f"依赖 '{name}' 没有匹配版本 {shown} 的可用版本")
        self.name = name
        self.requested = requested
        self.selector = selector


class InstallError(SupplyError):
    """底层安装失败"""

    code = "INSTALL_ERROR"

    def __init__(self, name: str, version: str, reason: str) -> None:
        super().__init__(f"无法安装 {name} {version}: {reason}")
        self.name = name
        self.version = version


class ChecksumError(SupplyError):
    """下载文件校验和不匹配"""

    code = "CHECKSUM_ERROR"


class LinkError(SupplyError):
    """二进制链接发布失败"""

    code = "LINK_ERROR"

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)


class ValidationError(SupplyError, ValueError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []
