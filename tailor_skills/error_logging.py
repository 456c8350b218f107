"""Append unexpected failures to ~/.tailor_skills/logs/errors.log.

Writing the log is best-effort: it must never turn a reported error into a
crash of its own.
"""

import os
import traceback
from datetime import datetime
from typing import Optional

from tailor_skills.config import CONFIG_DIR

LOGS_DIR = os.path.join(CONFIG_DIR, "logs")
ERROR_LOG_FILE = os.path.join(LOGS_DIR, "errors.log")


def _ensure_logs_dir() -> None:
    os.makedirs(LOGS_DIR, exist_ok=True)


def _append(entry: str) -> None:
    try:
        _ensure_logs_dir()
        with open(ERROR_LOG_FILE, "a", encoding="utf-8") as f:
            f.write(entry)
    except OSError:
        pass


def log_error(
    error: BaseException,
    context: Optional[str] = None,
    include_traceback: bool = True,
) -> None:
    """Record an exception with an optional context line and traceback."""
    lines = [
        f"[{datetime.now().isoformat()}] {type(error).__name__}: {error}",
    ]
    if context:
        lines.append(f"Context: {context}")
    if include_traceback:
        tb = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        lines.append(f"Traceback:\n{tb.rstrip()}")
    _append("\n".join(lines) + "\n\n")


def log_error_message(message: str, context: Optional[str] = None) -> None:
    lines = [f"[{datetime.now().isoformat()}] {message}"]
    if context:
        lines.append(f"Context: {context}")
    _append("\n".join(lines) + "\n\n")
