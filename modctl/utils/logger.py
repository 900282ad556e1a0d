"""modctl 日志配置

交互式命令行工具，默认只在 stderr 输出简短的 "[级别] 消息"；
DEBUG 级别才带时间和 logger 名。MODCTL_LOG_JSON=1 时输出单行 JSON，供脚本 / CI 消费。

命令上下文（数据库别名、模块列表）通过 extra 传入:

    logger.info("安装完成", extra={"db": alias, "modules": names})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

# 通过 extra= 附加到日志记录上的命令上下文字段
CONTEXT_FIELDS = ("db", "modules")

_CONCISE_FMT = "[%(levelname)s] %(message)s"
_VERBOSE_FMT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


def _context(record: logging.LogRecord) -> dict:
    return {k: getattr(record, k) for k in CONTEXT_FIELDS if hasattr(record, k)}


class ConsoleFormatter(logging.Formatter):
    """人类可读格式，有上下文字段时追加到行尾"""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        ctx = _context(record)
        if ctx:
            line += " (" + " ".join(f"{k}={v}" for k, v in ctx.items()) + ")"
        return line


class JSONFormatter(logging.Formatter):
    """单行 JSON

    输出示例:
        {"timestamp": "...", "level": "INFO", "logger": "modctl.core.catalog",
         "message": "module/install", "db": "dev", "modules": ["aws_vpc"]}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_context(record))
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """配置根日志器，重复调用会替换已有 handler

    level 无法识别时回退到 WARNING。
    """
    root = logging.getLogger()
    reset_logging()

    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    root.setLevel(numeric)

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    elif numeric <= logging.DEBUG:
        handler.setFormatter(ConsoleFormatter(_VERBOSE_FMT))
    else:
        handler.setFormatter(ConsoleFormatter(_CONCISE_FMT))
    root.addHandler(handler)


def reset_logging() -> None:
    """清理根日志器的所有 handlers，常用于测试"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
