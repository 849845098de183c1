"""Tmux backend for the multiplexer abstraction.

Session existence is answered by libtmux (`Server.has_session`); every
other operation shells out to `tmux` with inherited stdio so interactive
commands (attach, list-*) reach the user's terminal directly.

Targets use tmux's compound syntax: `session`, `session:window`,
`session:window.pane`.

Key class: TmuxBackend(MultiplexerBackend).
"""

from __future__ import annotations

import logging

import libtmux
from libtmux import exc as tmux_exc

from ..config import Backend
from .base import MultiplexerBackend, MuxResult, ResizeDirection, SplitDirection
from .runner import CommandRunner

logger = logging.getLogger(__name__)


def window_target(session: str, window: str) -> str:
    return f"{session}:{window}"


def pane_target(session: str, window: str, pane: str) -> str:
    return f"{session}:{window}.{pane}"


class TmuxBackend(MultiplexerBackend):
    """Drives tmux sessions, windows and numbered panes."""

    backend = Backend.TMUX
    binary = "tmux"

    def __init__(
        self,
        runner: CommandRunner | None = None,
        server: libtmux.Server | None = None,
        binary: str | None = None,
    ) -> None:
        super().__init__(runner, binary)
        self._server = server

    @property
    def server(self) -> libtmux.Server:
        """Get or create tmux server connection."""
        if self._server is None:
            self._server = libtmux.Server()
        return self._server

    def session_exists(self, name: str) -> bool:
        if self.binary != TmuxBackend.binary:
            # libtmux only finds tmux on PATH; "=" makes the match exact
            rc, _, _ = self._capture("has-session", "-t", f"={name}")
            return rc == 0
        try:
            return bool(self.server.has_session(name))
        except tmux_exc.LibTmuxException as e:
            logger.debug("has-session %r failed: %s", name, e)
            return False

    # ── sessions ─────────────────────────────────────────────────────────

    def create_session(self, name: str) -> MuxResult:
        self._run("create", "new-session", "-d", "-s", name)
        return MuxResult(f"Session '{name}' created with tmux")

    def list_sessions(self) -> MuxResult:
        if not self._try("list-sessions"):
            return MuxResult("No tmux sessions found", warning=True)
        return MuxResult()

    def attach_session(self, name: str) -> MuxResult:
        self.require_session(name)
        self._run("attach", "attach-session", "-t", name)
        return MuxResult()

    def detach_session(self) -> MuxResult:
        self._run("detach", "detach-client")
        return MuxResult("Detached from tmux session")

    def kill_session(self, name: str) -> MuxResult:
        self.require_session(name)
        self._run("delete", "kill-session", "-t", name)
        return MuxResult(f"Killed tmux session '{name}'")

    def rename_session(self, old: str, new: str) -> MuxResult:
        self.require_session(old)
        self._run("rename-session", "rename-session", "-t", old, new)
        return MuxResult(f"Renamed tmux session from '{old}' to '{new}'")

    def nuke_all(self) -> MuxResult:
        self._run("nuke", "kill-server")
        return MuxResult("Killed all tmux sessions")

    # ── windows ──────────────────────────────────────────────────────────

    def new_window(self, session: str, name: str) -> MuxResult:
        self._run("new-window", "new-window", "-t", session, "-n", name)
        return MuxResult(f"Window '{name}' created in tmux session '{session}'")

    def list_windows(self, session: str) -> MuxResult:
        self._run("list-windows", "list-windows", "-t", session)
        return MuxResult()

    def kill_window(self, session: str, window: str) -> MuxResult:
        self._run("kill-window", "kill-window", "-t", window_target(session, window))
        return MuxResult(f"Window '{window}' killed in tmux session '{session}'")

    def next_window(self, session: str) -> MuxResult:
        self._run("next-window", "next-window", "-t", session)
        return MuxResult("Switched to next window")

    def previous_window(self, session: str) -> MuxResult:
        self._run("prev-window", "previous-window", "-t", session)
        return MuxResult("Switched to previous window")

    def rename_window(self, session: str, old: str, new: str) -> MuxResult:
        self.require_session(session)
        self._run("rename-window", "rename-window", "-t", window_target(session, old), new)
        return MuxResult(
            f"Renamed window from '{old}' to '{new}' in tmux session '{session}'"
        )

    def move_window(self, src_session: str, window: str, dst_session: str) -> MuxResult:
        self.require_session(src_session)
        self.require_session(dst_session)
        self._run(
            "move-window",
            "move-window", "-s", window_target(src_session, window), "-t", dst_session,
        )
        return MuxResult(
            f"Moved window '{window}' from session '{src_session}' to session '{dst_session}'"
        )

    def swap_window(self, session: str, window1: str, window2: str) -> MuxResult:
        self.require_session(session)
        self._run(
            "swap-window",
            "swap-window",
            "-s", window_target(session, window1),
            "-t", window_target(session, window2),
        )
        return MuxResult(
            f"Swapped windows '{window1}' and '{window2}' in tmux session '{session}'"
        )

    # ── panes ────────────────────────────────────────────────────────────

    def split_window(
        self, session: str, window: str, direction: SplitDirection,
    ) -> MuxResult:
        self.require_session(session)
        flag = "-h" if direction is SplitDirection.HORIZONTAL else "-v"
        self._run("split-window", "split-window", flag, "-t", window_target(session, window))
        return MuxResult(f"Split window '{window}' {direction} in tmux session '{session}'")

    def list_panes(self, session: str, window: str) -> MuxResult:
        self.require_session(session)
        self._run("list-panes", "list-panes", "-t", window_target(session, window))
        return MuxResult()

    def kill_pane(self, session: str, window: str, pane: str) -> MuxResult:
        self.require_session(session)
        self._run("kill-pane", "kill-pane", "-t", pane_target(session, window, pane))
        return MuxResult(
            f"Killed pane '{pane}' in window '{window}' of tmux session '{session}'"
        )

    def resize_pane(
        self,
        session: str,
        window: str,
        pane: str,
        direction: ResizeDirection,
        size: int,
    ) -> MuxResult:
        self.require_session(session)
        self._run(
            "resize-pane",
            "resize-pane",
            "-t", pane_target(session, window, pane),
            f"-{direction.value}", str(size),
        )
        return MuxResult(
            f"Resized pane '{pane}' in window '{window}' of tmux session '{session}'"
        )

    def send_keys(self, session: str, window: str, pane: str, text: str) -> MuxResult:
        self.require_session(session)
        self._run("send-keys", "send-keys", "-t", pane_target(session, window, pane), text)
        return MuxResult(
            f"Sent keys to pane '{pane}' in window '{window}' of tmux session '{session}'"
        )
