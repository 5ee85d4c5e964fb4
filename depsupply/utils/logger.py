"""depsupply 日志配置

支持普通文本和结构化 JSON 两种输出格式，均输出到 stderr。
命令行通过环境变量选择级别和格式:

    DEPSUPPLY_LOG_LEVEL=DEBUG     # 默认 INFO
    DEPSUPPLY_LOG_JSON=1          # 1/true/yes 输出 JSON
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from datetime import datetime, timezone

LOG_LEVEL_ENV = "DEPSUPPLY_LOG_LEVEL"
LOG_JSON_ENV = "DEPSUPPLY_LOG_JSON"


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器，便于构建流水线消费

    输出格式:
        {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "level": "INFO",
            "logger": "depsupply.core.supplier",
            "message": "Requested nginx version: stable => 1.20.1",
            "module": "supplier",
            "function": "run",
            "line": 42,
            "error_code": "NO_MATCHING_VERSION", (仅在供应失败时)
            "exception": "traceback..."  (仅在有异常时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            # record.created 是事件发生时间，不是格式化时间
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        error_code = getattr(record, "error_code", None)
        if error_code:
            log_entry["error_code"] = error_code
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: 为 True 时使用 JSON 格式，否则使用人类可读格式

    说明:
        - 自动清理已有 handlers，重复调用不会重复输出
        - 未知级别回退到 INFO
    """
    reset_logging()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt))

    root.addHandler(handler)


def setup_logging_from_env(environ: Mapping[str, str] | None = None) -> None:
    """按 DEPSUPPLY_LOG_LEVEL / DEPSUPPLY_LOG_JSON 配置日志"""
    env = os.environ if environ is None else environ
    setup_logging(
        level=env.get(LOG_LEVEL_ENV, "INFO"),
        json_output=env.get(LOG_JSON_ENV, "").strip().lower() in ("1", "true", "yes"),
    )


def reset_logging() -> None:
    """移除根日志器上的全部 handlers"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
