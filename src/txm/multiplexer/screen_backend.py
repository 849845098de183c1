"""GNU Screen backend for the multiplexer abstraction.

Screen has one active "screen" (window) per session and no pane
addressing, so window commands act on the current window and most pane
commands are unsupported. Several running sessions may share a name;
`screen -ls` lists each as `<pid>.<name>` followed by an
(Attached)/(Detached) marker, and kill/nuke target those pid-qualified ids.

Key class: ScreenBackend(MultiplexerBackend).
"""

from __future__ import annotations

import logging

from ..config import Backend
from ..errors import SessionNotFound, SubprocessFailure
from .base import MultiplexerBackend, MuxResult, SplitDirection, strip_ansi

logger = logging.getLogger(__name__)

_STATUS_MARKERS = ("(Attached)", "(Detached)")


def parse_session_ids(listing: str) -> list[str]:
    """Extract `pid.name` ids from `screen -ls` output."""
    ids = []
    for line in listing.splitlines():
        clean = strip_ansi(line).strip()
        if not any(marker in clean for marker in _STATUS_MARKERS):
            continue
        fields = clean.split()
        if fields and "." in fields[0]:
            ids.append(fields[0])
    return ids


def session_name(session_id: str) -> str:
    """Name part of a `pid.name` id."""
    return session_id.split(".", 1)[1]


class ScreenBackend(MultiplexerBackend):
    """Drives GNU Screen sessions and their current window."""

    backend = Backend.SCREEN
    binary = "screen"

    def _session_ids(self) -> list[str]:
        # screen -ls exits non-zero even when it lists sessions
        _, stdout, _ = self._capture("-ls")
        return parse_session_ids(stdout)

    def matching_session_ids(self, name: str) -> list[str]:
        return [sid for sid in self._session_ids() if session_name(sid) == name]

    def session_exists(self, name: str) -> bool:
        return bool(self.matching_session_ids(name))

    def _quit_all(self, session_ids: list[str]) -> int:
        """Quit each session id; return how many succeeded."""
        killed = 0
        for sid in session_ids:
            if self._try("-S", sid, "-X", "quit"):
                killed += 1
            else:
                logger.warning("Failed to quit screen session %s", sid)
        return killed

    # ── sessions ─────────────────────────────────────────────────────────

    def create_session(self, name: str) -> MuxResult:
        self._run("create", "-dmS", name)
        return MuxResult(f"Session '{name}' created with screen")

    def list_sessions(self) -> MuxResult:
        # Exit status is non-zero whether or not sessions exist
        self._try("-ls")
        if not self._session_ids():
            return MuxResult("No screen sessions found", warning=True)
        return MuxResult()

    def attach_session(self, name: str) -> MuxResult:
        self.require_session(name)
        self._run("attach", "-r", name)
        return MuxResult()

    def detach_session(self) -> MuxResult:
        self._run("detach", "-d")
        return MuxResult("Detached from screen session")

    def kill_session(self, name: str) -> MuxResult:
        ids = self.matching_session_ids(name)
        if not ids:
            raise SessionNotFound(name)
        killed = self._quit_all(ids)
        if killed == 0:
            raise SubprocessFailure("delete", self.backend, detail=f"could not quit '{name}'")
        if killed > 1:
            return MuxResult(f"Killed {killed} screen sessions named '{name}'")
        return MuxResult(f"Killed screen session '{name}'")

    def nuke_all(self) -> MuxResult:
        killed = self._quit_all(self._session_ids())
        if killed == 0:
            return MuxResult("No screen sessions were killed", warning=True)
        return MuxResult(f"Killed {killed} screen sessions")

    # ── windows ──────────────────────────────────────────────────────────

    def new_window(self, session: str, name: str) -> MuxResult:
        self._run("new-window", "-S", session, "-X", "screen", "-t", name)
        return MuxResult(f"Window '{name}' created in screen session '{session}'")

    def list_windows(self, session: str) -> MuxResult:
        self._run("list-windows", "-S", session, "-Q", "windows")
        return MuxResult()

    def kill_window(self, session: str, window: str) -> MuxResult:
        self._run("kill-window", "-S", session, "-X", "kill")
        return MuxResult(f"Window killed in screen session '{session}'")

    def next_window(self, session: str) -> MuxResult:
        self._run("next-window", "-S", session, "-X", "next")
        return MuxResult("Switched to next window")

    def previous_window(self, session: str) -> MuxResult:
        self._run("prev-window", "-S", session, "-X", "prev")
        return MuxResult("Switched to previous window")

    def rename_window(self, session: str, old: str, new: str) -> MuxResult:
        self.require_session(session)
        self._run("rename-window", "-S", session, "-X", "title", new)
        return MuxResult(f"Renamed window to '{new}' in screen session '{session}'")

    # ── panes ────────────────────────────────────────────────────────────

    def split_window(
        self, session: str, window: str, direction: SplitDirection,
    ) -> MuxResult:
        if direction is not SplitDirection.VERTICAL:
            self._unsupported("split-window (horizontal)")
        self.require_session(session)
        self._run("split-window", "-S", session, "-X", "split")
        return MuxResult(f"Split window vertically in screen session '{session}'")
