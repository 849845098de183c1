"""Console output — leveled, optionally colorized user messages.

User-facing messages go to stdout with a bracketed level tag ([INFO],
[WARNING], [ERROR]). Diagnostics go through the stdlib logging tree on
stderr and are only shown with --verbose (see setup_logging).
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import TextIO

logger = logging.getLogger(__name__)

RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
BLUE = "\x1b[34m"
MAGENTA = "\x1b[35m"
RESET = "\x1b[0m"

# TERM prefixes known to handle ANSI colors
COLOR_TERMS = (
    "xterm",
    "xterm-256color",
    "screen",
    "screen-256color",
    "tmux",
    "tmux-256color",
    "linux",
)


def setup_logging(verbose: bool = False) -> None:
    """Configure diagnostics on stderr; DEBUG for txm when verbose."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.WARNING,
        stream=sys.stderr,
    )
    logging.getLogger("txm").setLevel(logging.DEBUG if verbose else logging.WARNING)


def detect_color_support(
    env: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Decide whether messages written to stream may use ANSI colors."""
    environ = os.environ if env is None else env
    out = sys.stdout if stream is None else stream

    if environ.get("NO_COLOR"):
        logger.debug("Colors disabled due to NO_COLOR environment variable")
        return False

    term = environ.get("TERM", "")
    if not term:
        logger.debug("No TERM environment variable found")
        return False

    isatty = getattr(out, "isatty", None)
    if isatty is None or not isatty():
        logger.debug("Output is not going to a terminal")
        return False

    if term.startswith(COLOR_TERMS):
        logger.debug("Color support detected for TERM=%s", term)
        return True

    logger.debug("TERM=%s doesn't appear to support colors", term)
    return False


def colorize(color: str, text: str, enabled: bool) -> str:
    """Wrap text in color and reset codes, or return it unchanged."""
    if not enabled:
        return text
    return f"{color}{text}{RESET}"


class Console:
    """Leveled message writer used by the dispatcher."""

    def __init__(self, use_colors: bool = False, stream: TextIO | None = None) -> None:
        self.use_colors = use_colors
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output
        return self._stream if self._stream is not None else sys.stdout

    def _emit(self, color: str, tag: str, msg: str) -> None:
        prefix = colorize(color, f"[{tag}]", self.use_colors)
        print(f"{prefix} {msg}", file=self.stream)

    def info(self, msg: str) -> None:
        self._emit(GREEN, "INFO", msg)

    def warning(self, msg: str) -> None:
        self._emit(YELLOW, "WARNING", msg)

    def error(self, msg: str) -> None:
        self._emit(RED, "ERROR", msg)

    def echo(self, text: str = "") -> None:
        print(text, file=self.stream)
