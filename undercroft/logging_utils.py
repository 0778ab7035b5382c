"""Minimal structured logging helper.

Emits key=value records (or compact JSON) with a timestamp, level and logger
name. Generation stages log through this helper so degraded-but-recovered
situations (search exhaustion, forced bridges) stay greppable without pulling
the stdlib logging configuration into library code.

Usage:
    from undercroft.logging_utils import get_logger
    log = get_logger("dungeon.rooms")
    log.info(event="rooms_placed", placed=12, attempts=140)

Non-numeric values are str()'d with spaces replaced by underscores. Reserved
keys: level, ts, logger. Records go to stderr so stdout stays clean for CLI
output.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def _env_level() -> int:
    return LEVELS.get(os.getenv("UNDERCROFT_LOG_LEVEL", "info").lower(), 20)


def _env_json() -> bool:
    return os.getenv("UNDERCROFT_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


CURRENT_LEVEL = _env_level()
JSON_MODE = _env_json()


def set_level(level: str) -> None:
    """Override the minimum level at runtime (CLI --log-level, tests)."""
    global CURRENT_LEVEL
    if level not in LEVELS:
        raise ValueError(f"unknown log level: {level!r}")
    CURRENT_LEVEL = LEVELS[level]


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        try:
            return json.dumps(rec, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": int(time.time()), "error": "json_encode_failed"})
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "undercroft"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        if "logger" not in fields:
            fields["logger"] = self.name
        print(_format(lvl, **fields), file=sys.stderr)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("undercroft")
