"""Logging configuration for the command-line entrypoint.

Provides:
    - stderr and optional file handler
    - JSON output mode for log ingestion
    - Contextual fields (input, output, run settings)

Public API:
    setup_logging(log_level="WARNING", log_file=None, json=False,
                  context={"input": "logo.svg"})
    get_logger(name)
    push_context(distance=0.5)
    pop_context(keys=["distance"])

Format examples:
    Human: 2026-10-18T13:45:12.345Z | INFO     | input=logo.svg | Wrote 512 points
    JSON:  {"t":"2026-10-18T13:45:12.345+00:00","lvl":"INFO","input":"logo.svg","msg":"..."}

The default level is WARNING: a successful conversion logs at INFO/DEBUG
only, so stderr stays empty unless the user asks for more.

Context uses contextvars.  Idempotent: repeated setup_logging() calls
replace handlers instead of duplicating them.
"""

import contextvars
import json as jsonlib
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .fs import ensure_dir

_context_var: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    'logging_context', default={}
)

# Handlers installed by setup_logging (replaced on repeated calls)
_installed: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Formatter that appends contextual fields.

    Supports a human-readable line (optionally colored) and JSON lines.
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt_mode: str = "human", use_color: bool = False):
        super().__init__()
        self.fmt_mode = fmt_mode
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get()
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        log_dict = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'msg': record.getMessage(),
        }
        log_dict.update(context)
        if record.exc_info:
            log_dict['exc'] = self.formatException(record.exc_info)
        return jsonlib.dumps(log_dict, default=str)

    def _format_human(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        ts_str = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        parts = [ts_str, '|', level, '|']
        context_str = ' '.join(f"{k}={v}" for k, v in context.items())
        if context_str:
            parts.extend([context_str, '|'])
        parts.append(record.getMessage())

        line = ' '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure the root logger (idempotent).

    Parameters
    ----------
    log_level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    log_file : str, optional
        Also log to this file (parent directories are created)
    json : bool
        JSON lines instead of the human format
    color : bool
        ANSI colors on stderr when it is a terminal
    to_stderr : bool
        Log to stderr, default True
    context : dict, optional
        Initial contextual fields

    Returns
    -------
    list[logging.Handler]
        Handlers installed on the root logger
    """
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    root.setLevel(getattr(logging, log_level.upper()))
    fmt_mode = "json" if json else "human"

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(
            ContextFormatter(fmt_mode, use_color=color and not json and sys.stderr.isatty())
        )
        _installed.append(console)

    if log_file:
        ensure_dir(Path(log_file).parent)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(ContextFormatter(fmt_mode, use_color=False))
        _installed.append(file_handler)

    for handler in _installed:
        root.addHandler(handler)

    if context:
        push_context(**context)

    logging.captureWarnings(True)
    return list(_installed)


def get_logger(name: str) -> logging.Logger:
    """Get logger by name (typically ``__name__``)."""
    return logging.getLogger(name)


def push_context(**kwargs) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(input="logo.svg")
    >>> push_context(distance=0.5)  # → "... | input=logo.svg distance=0.5 | ..."
    """
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; all of them when *keys* is None."""
    if keys is None:
        _context_var.set({})
        return
    current = dict(_context_var.get())
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)
