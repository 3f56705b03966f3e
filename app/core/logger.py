# app/core/logger.py
from __future__ import annotations

"""
Mux Playback Gateway — Logging (Loguru)
---------------------------------------
- Pretty console logs by default; JSON lines via `LOG_JSON=1`
- Every record carries `request_id` (bound by RequestIDMiddleware)
- Stdlib loggers (`app.*`, uvicorn, fastapi, starlette, httpx) are routed into Loguru
- Optional rotating file sink

Env
---
LOG_LEVEL=INFO|DEBUG|WARNING|ERROR (default: INFO)
LOG_JSON=1 (structured logs)
LOG_TO_FILE=1 (write LOG_DIR/LOG_FILE with rotation; default: 0)
LOG_DIR=logs
LOG_FILE=app.log
LOG_ROTATION=10 MB
APP_DEBUG=1 (enables backtrace/diagnose in console sink)
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

_TRUTHY = {"1", "true", "yes"}
_INTERCEPTED = ("app", "uvicorn", "uvicorn.error", "fastapi", "starlette", "httpx")

_configured = False


# ─────────────────────────────────────────────────────────────
# 🧾 Formatters
# ─────────────────────────────────────────────────────────────
def _fmt_pretty(record) -> str:
    record["extra"].setdefault("request_id", "N/A")
    name = record["name"].replace("<", "[").replace(">", "]")
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level:<8}</level> | "
        f"<cyan>{name}</cyan>:<cyan>{{line}}</cyan> - "
        "<level>{message}</level> | request_id={extra[request_id]}\n{exception}"
    )


def _serialize(record) -> str:
    payload: Dict[str, Any] = {
        "time": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f%z"),
        "level": record["level"].name,
        "logger": record["name"],
        "line": record["line"],
        "message": record["message"],
        "request_id": record["extra"].get("request_id", "N/A"),
    }
    for k, v in record["extra"].items():
        if k not in payload and k != "serialized":
            payload[k] = v
    if record["exception"] is not None:
        payload["exception"] = repr(record["exception"].value)
    return json.dumps(payload, ensure_ascii=False, default=str)


def _fmt_json(record) -> str:
    record["extra"]["serialized"] = _serialize(record)
    return "{extra[serialized]}\n"


# ─────────────────────────────────────────────────────────────
# 🔁 Intercept stdlib logging → Loguru
# ─────────────────────────────────────────────────────────────
class InterceptHandler(logging.Handler):
    """Route standard logging records into Loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging() -> None:
    """Install Loguru sinks and stdlib interception (idempotent)."""
    global _configured
    if _configured:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    as_json = os.getenv("LOG_JSON", "0").lower() in _TRUTHY
    debug = os.getenv("APP_DEBUG", "0").lower() in _TRUTHY
    fmt = _fmt_json if as_json else _fmt_pretty

    logger.remove()
    logger.configure(extra={"request_id": "N/A"})
    logger.add(sys.stdout, level=level, format=fmt, enqueue=True, backtrace=debug, diagnose=debug)

    if os.getenv("LOG_TO_FILE", "0").lower() in _TRUTHY:
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_dir / os.getenv("LOG_FILE", "app.log")),
            rotation=os.getenv("LOG_ROTATION", "10 MB"),
            level=level,
            format=fmt,
            enqueue=True,
            backtrace=False,
            diagnose=False,
        )

    for name in _INTERCEPTED:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.setLevel(level)
        std_logger.propagate = False

    # uvicorn's access log duplicates RequestLogMiddleware
    logging.getLogger("uvicorn.access").disabled = True
    _configured = True


__all__ = ["InterceptHandler", "configure_logging", "logger"]
