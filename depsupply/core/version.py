"""结构化版本号与选择器匹配

版本号按 "." 拆分为非负整数序列，逐段数值比较（1.19.10 > 1.19.2）。
选择器是版本前缀，末尾缺省的段或 x / X / * 视为通配:

  ""        → 任意版本
  "1.19"    → 1.19.*
  "1.19.x"  → 1.19.*
  "1.*"     → 1.*

无法按数值解析的目录版本不参与匹配，也不报错。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

WILDCARDS = frozenset(("x", "X", "*"))


def _parse_component(text: str) -> int | None:
    if not text.isdigit() or not text.isascii():
        return None
    return int(text)


@dataclass(frozen=True, order=True)
class Version:
    """数值版本号，按段从左到右比较"""

    parts: tuple[int, ...]

    @classmethod
    def parse(cls, text: str) -> Version | None:
        """解析版本字符串，任一段非纯数字时返回 None"""
        text = text.strip()
        if not text:
            return None
        parts = []
        for piece in text.split("."):
            value = _parse_component(piece)
            if value is None:
                return None
            parts.append(value)
        return cls(tuple(parts))

    def startswith(self, prefix: tuple[int, ...]) -> bool:
        return self.parts[:len(prefix)] == prefix

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.parts)


@dataclass(frozen=True)
class Selector:
    """版本选择器: 固定前缀 + 通配尾部"""

    raw: str
    prefix: tuple[int, ...]

    @classmethod
    def parse(cls, raw: str) -> Selector | None:
        """解析选择器，格式非法时返回 None

        通配段之后只能再跟通配段（"1.x.3" 非法）。
        """
        text = raw.strip()
        if not text:
            return cls(raw=raw, prefix=())

        prefix: list[int] = []
        seen_wildcard = False
        for piece in text.split("."):
            if piece in WILDCARDS:
                seen_wildcard = True
                continue
            if seen_wildcard:
                return None
            value = _parse_component(piece)
            if value is None:
                return None
            prefix.append(value)
        return cls(raw=raw, prefix=tuple(prefix))

    def matches(self, version: Version) -> bool:
        return version.startswith(self.prefix)


def find_matching_version(selector: str, versions: Iterable[str]) -> str | None:
    """在候选版本中选出满足选择器的最高版本

    规则:
      1. 选择器与某个候选字符串完全相同 → 直接返回该字符串
      2. 否则按前缀匹配，取数值最大者；数值相同时取原始字符串较大者，
         保证结果与候选顺序无关
      3. 无匹配返回 None
    """
    candidates = list(versions)
    wanted = selector.strip()
    if wanted and wanted in candidates:
        return wanted

    sel = Selector.parse(wanted)
    if sel is None:
        logger.debug("选择器无法解析: %r", selector)
        return None

    best: tuple[Version, str] | None = None
    for text in candidates:
        ver = Version.parse(text)
        if ver is None:
            logger.debug("跳过无法解析的版本: %r", text)
            continue
        if not sel.matches(ver):
            continue
        key = (ver, text)
        if best is None or key > best:
            best = key
    return best[1] if best else None


def sort_versions(versions: Iterable[str], *, descending: bool = True) -> list[str]:
    """按数值排序可解析的版本，无法解析的版本追加在末尾（保持原顺序）"""
    parsed: list[tuple[Version, str]] = []
    malformed: list[str] = []
    for text in versions:
        ver = Version.parse(text)
        if ver is None:
            malformed.append(text)
        else:
            parsed.append((ver, text))
    parsed.sort(reverse=descending)
    return [text for _, text in parsed] + malformed
