"""
Ledger Node Logging

Root logger setup shared by every module: a `rich` console handler (or a
plain stream handler when highlighting is off), an optional rotating log
file, and a formatter that strips terminal control sequences from values
read out of config sources.

Usage:
    >>> from ledgernode.logger import get_logger
    >>> logger = get_logger(__name__)
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    LOG_LEVEL,
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_MAX_FILE_SIZE,
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
    LOG_FILE_OUTPUT,
)


LOG_FILE_PATH = Path(__file__).parent.parent / "logs" / "ledgernode.log"

LEDGER_THEME = Theme(
    {
        "ledger.address":        "cyan",
        "ledger.level_critical": "bold red reverse",
        "ledger.level_debug":    "bold dim",
        "ledger.level_error":    "bold red",
        "ledger.level_info":     "bold green",
        "ledger.level_warning":  "bold yellow",
        "ledger.path":           "magenta",
        "ledger.timestamp":      "bold cyan",
    }
)


class LogManager:
    """
    Process-wide logging setup, applied once.

    Instances are a singleton; ``configure()`` is a no-op after the first
    successful call.
    """

    _instance: Optional["LogManager"] = None
    _lock: threading.Lock = threading.Lock()

    def __new__(cls) -> "LogManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._configured = False
        return cls._instance

    @staticmethod
    def resolve_log_format(log_format: str) -> str:
        """Return *log_format* if it formats a record, else the default format."""
        if not log_format:
            return str(LOG_FORMAT.default())
        record = logging.LogRecord(
            name="check", level=logging.INFO, pathname="", lineno=0,
            msg="check", args=(), exc_info=None,
        )
        try:
            logging.Formatter(fmt=str(log_format)).format(record)
        except (ValueError, KeyError, TypeError) as e:
            print(f"ledgernode.logger - bad LOG_FORMAT ({e}), using default", file=sys.stderr)
            return str(LOG_FORMAT.default())
        return str(log_format)

    def configure(self, log_level: Optional[str] = None, file_output: Optional[bool] = None) -> None:
        """
        Attach handlers to the root logger.

        Args:
            log_level: DEBUG, INFO, ... Defaults to LOG_LEVEL from .env.
            file_output: Write logs/ledgernode.log too. Defaults to LOG_FILE_OUTPUT.
        """
        with self._lock:
            if self._configured:
                return

            level = getattr(logging, str(log_level or LOG_LEVEL).upper(), logging.INFO)
            root_logger = logging.getLogger()
            root_logger.setLevel(level)

            # timestamps in UTC
            formatter = TerminalSafeFormatter(
                fmt=self.resolve_log_format(LOG_FORMAT),
                datefmt=(str(LOG_DATE_FORMAT) or str(LOG_DATE_FORMAT.default())) + " UTC",
            )
            formatter.converter = time.gmtime

            handlers: list = []
            if LOG_CONSOLE_HIGHLIGHTING:
                handlers.append(RichHandler(
                    console=Console(theme=LEDGER_THEME, highlight=False, stderr=True),
                    highlighter=LedgerLogHighlighter(),
                    keywords=[],
                    rich_tracebacks=True,
                    show_path=False,
                    show_time=False,
                    show_level=False,
                    markup=False,
                ))
            else:
                handlers.append(logging.StreamHandler(sys.stderr))

            if bool(LOG_FILE_OUTPUT) if file_output is None else file_output:
                LOG_FILE_PATH.parent.mkdir(parents=True, exist_ok=True)
                handlers.append(logging.handlers.RotatingFileHandler(
                    filename=str(LOG_FILE_PATH),
                    maxBytes=LOG_MAX_FILE_SIZE,
                    backupCount=LOG_BACKUP_COUNT,
                    encoding="utf-8",
                ))

            for handler in handlers:
                handler.setLevel(level)
                handler.setFormatter(formatter)
                root_logger.addHandler(handler)

            self._configured = True

    def get_logger(self, name: str) -> logging.Logger:
        if not self._configured:
            self.configure()
        return logging.getLogger(name)


class TerminalSafeFormatter(logging.Formatter):
    """Formatter that drops ANSI escapes and control characters (tab and newline survive)."""

    _ansi_escape_re = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b[@-Z\\-_]")
    _control_chars_re = re.compile(r"[\x00-\x08\x0B-\x1F\x7F]")

    @classmethod
    def sanitize(cls, text: str) -> str:
        if not text:
            return text
        return cls._control_chars_re.sub("", cls._ansi_escape_re.sub("", text))

    def format(self, record: logging.LogRecord) -> str:
        return self.sanitize(super().format(record))


class LedgerLogHighlighter(RegexHighlighter):
    """Highlights host:port addresses, paths and levels in node log lines."""

    base_style = "ledger."
    highlights = [
        r"(?P<address>\b[\w.\-]+:\d{1,5}\b)",
        r"(?P<level_critical>\bCRITICAL\b)",
        r"(?P<level_debug>\bDEBUG\b)",
        r"(?P<level_error>\bERROR\b)",
        r"(?P<level_info>\bINFO\b)",
        r"(?P<level_warning>\bWARNING\b)",
        r"(?P<path>(?<![\w.])(?:\.{0,2}/)[\w./\-]+)",
        r"(?P<timestamp>^(.*?)UTC)",
    ]


_manager = LogManager()


def get_logger(name: str) -> logging.Logger:
    """Return a logger for *name*, configuring the root logger on first use."""
    return _manager.get_logger(name)
