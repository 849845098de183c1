"""Abstract base class for terminal multiplexer backends.

Defines the MultiplexerBackend ABC that all backends (tmux, Zellij, GNU
Screen) implement, and the MuxResult returned by successful operations.
The ABC provides a unified interface for:
  - Session lifecycle: create, list, attach, detach, kill, rename, nuke
  - Window/tab lifecycle: new, list, kill, next/previous, rename, move, swap
  - Pane lifecycle: split, list, kill, resize, send_keys

Session lifecycle methods are abstract. Window and pane methods default to
raising UnsupportedOperation, so a backend only overrides what it can
express. Failures are raised (SubprocessFailure, SessionNotFound, ...),
never returned.

Key class: MultiplexerBackend (ABC), MuxResult (dataclass).
"""

from __future__ import annotations

import enum
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import NoReturn

from ..config import Backend
from ..errors import SessionNotFound, SubprocessFailure, UnsupportedOperation
from .runner import CommandRunner

logger = logging.getLogger(__name__)

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

# Verb name → adapter method
OPERATIONS: dict[str, str] = {
    "create": "create_session",
    "list": "list_sessions",
    "attach": "attach_session",
    "detach": "detach_session",
    "delete": "kill_session",
    "rename-session": "rename_session",
    "nuke": "nuke_all",
    "new-window": "new_window",
    "list-windows": "list_windows",
    "kill-window": "kill_window",
    "next-window": "next_window",
    "prev-window": "previous_window",
    "rename-window": "rename_window",
    "move-window": "move_window",
    "swap-window": "swap_window",
    "split-window": "split_window",
    "list-panes": "list_panes",
    "kill-pane": "kill_pane",
    "resize-pane": "resize_pane",
    "send-keys": "send_keys",
}


class SplitDirection(enum.Enum):
    VERTICAL = "v"
    HORIZONTAL = "h"

    def __str__(self) -> str:
        return "vertically" if self is SplitDirection.VERTICAL else "horizontally"


class ResizeDirection(enum.Enum):
    UP = "U"
    DOWN = "D"
    LEFT = "L"
    RIGHT = "R"

    @property
    def word(self) -> str:
        return self.name.lower()


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


@dataclass
class MuxResult:
    """Outcome of a successful backend operation."""

    message: str = ""
    warning: bool = False


class MultiplexerBackend(ABC):
    """Abstract base for terminal multiplexer backends."""

    backend: Backend
    binary: str

    def __init__(
        self, runner: CommandRunner | None = None, binary: str | None = None,
    ) -> None:
        self.runner = runner or CommandRunner()
        if binary:
            self.binary = binary

    # ── process helpers ──────────────────────────────────────────────────

    def _run(self, operation: str, *args: str) -> None:
        """Run `<binary> <args>` with inherited stdio; raise on failure."""
        rc = self.runner.run([self.binary, *args])
        if rc != 0:
            raise SubprocessFailure(operation, self.backend, rc)

    def _try(self, *args: str) -> bool:
        """Run `<binary> <args>` and report success without raising."""
        return self.runner.run([self.binary, *args]) == 0

    def _capture(self, *args: str) -> tuple[int, str, str]:
        return self.runner.capture([self.binary, *args])

    def _unsupported(self, operation: str) -> NoReturn:
        raise UnsupportedOperation(operation, self.backend)

    def require_session(self, name: str) -> None:
        """Raise SessionNotFound unless the session exists."""
        if not self.session_exists(name):
            raise SessionNotFound(name)

    @classmethod
    def supported_operations(cls) -> list[str]:
        """Verbs this backend implements (overrides of the base defaults)."""
        supported = []
        for verb, method in OPERATIONS.items():
            if getattr(cls, method) is not getattr(MultiplexerBackend, method):
                supported.append(verb)
        return supported

    @classmethod
    def unsupported_operations(cls) -> list[str]:
        supported = set(cls.supported_operations())
        return [verb for verb in OPERATIONS if verb not in supported]

    # ── sessions ─────────────────────────────────────────────────────────

    @abstractmethod
    def session_exists(self, name: str) -> bool:
        """Query the backend's session list for name."""

    @abstractmethod
    def create_session(self, name: str) -> MuxResult:
        """Create a detached session."""

    @abstractmethod
    def list_sessions(self) -> MuxResult:
        """Print the backend's session list to the terminal."""

    @abstractmethod
    def attach_session(self, name: str) -> MuxResult:
        """Attach the terminal to a session; blocks until detach."""

    @abstractmethod
    def kill_session(self, name: str) -> MuxResult:
        """Kill a session by name."""

    @abstractmethod
    def nuke_all(self) -> MuxResult:
        """Kill every session of this backend."""

    def detach_session(self) -> MuxResult:
        return self._unsupported("detach")

    def rename_session(self, old: str, new: str) -> MuxResult:
        return self._unsupported("rename-session")

    # ── windows / tabs ───────────────────────────────────────────────────

    def new_window(self, session: str, name: str) -> MuxResult:
        return self._unsupported("new-window")

    def list_windows(self, session: str) -> MuxResult:
        return self._unsupported("list-windows")

    def kill_window(self, session: str, window: str) -> MuxResult:
        return self._unsupported("kill-window")

    def next_window(self, session: str) -> MuxResult:
        return self._unsupported("next-window")

    def previous_window(self, session: str) -> MuxResult:
        return self._unsupported("prev-window")

    def rename_window(self, session: str, old: str, new: str) -> MuxResult:
        return self._unsupported("rename-window")

    def move_window(self, src_session: str, window: str, dst_session: str) -> MuxResult:
        return self._unsupported("move-window")

    def swap_window(self, session: str, window1: str, window2: str) -> MuxResult:
        return self._unsupported("swap-window")

    # ── panes ────────────────────────────────────────────────────────────

    def split_window(
        self, session: str, window: str, direction: SplitDirection,
    ) -> MuxResult:
        return self._unsupported("split-window")

    def list_panes(self, session: str, window: str) -> MuxResult:
        return self._unsupported("list-panes")

    def kill_pane(self, session: str, window: str, pane: str) -> MuxResult:
        return self._unsupported("kill-pane")

    def resize_pane(
        self,
        session: str,
        window: str,
        pane: str,
        direction: ResizeDirection,
        size: int,
    ) -> MuxResult:
        return self._unsupported("resize-pane")

    def send_keys(self, session: str, window: str, pane: str, text: str) -> MuxResult:
        return self._unsupported("send-keys")
