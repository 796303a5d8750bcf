import logging
import sys
from typing import TextIO

RESET = "\033[0m"
RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[0;33m"
CYAN = "\033[0;36m"
BOLD = "\033[1m"

# Pass as ``extra`` to mark a record as a progress step or a success line.
STEP = {"kind": "step"}
SUCCESS = {"kind": "success"}


class ConsoleFormatter(logging.Formatter):
    """Render records the way an operator reads them in a terminal."""

    def __init__(self, color: bool = True) -> None:
        super().__init__("%(message)s")
        self.color = color

    def _paint(self, code: str, text: str) -> str:
        return f"{code}{text}{RESET}" if self.color else text

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        kind = getattr(record, "kind", None)
        if record.levelno >= logging.ERROR:
            return self._paint(RED, f"✗ ERROR: {message}")
        if record.levelno == logging.WARNING:
            return self._paint(YELLOW, f"! {message}")
        if kind == "success":
            return self._paint(GREEN, f"✓ {message}")
        if kind == "step":
            return self._paint(YELLOW, f"• {message}")
        if record.levelno <= logging.DEBUG:
            return f"  [{record.name}] {message}"
        marker = self._paint(CYAN + BOLD, ">")
        return f"{marker} {self._paint(CYAN, message)}"


def use_color(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(verbose: bool = False, stream: TextIO | None = None) -> None:
    stream = stream or sys.stderr
    root = logging.getLogger("pf9_upload")
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ConsoleFormatter(color=use_color(stream)))
    root.addHandler(handler)
    # httpx logs full request URLs at INFO, which would leak the signed URL.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
