"""Zellij backend for the multiplexer abstraction.

Implements MultiplexerBackend using the Zellij CLI. Zellij actions are
focus-dependent (they operate on the focused tab/pane of a session), so
session-scoped commands take the form `zellij --session <name> action ...`.

Limitations vs tmux:
  - No headless session creation in the foreground; sessions are started
    with `attach --create-background` and verified afterwards.
  - No numbered panes: pane targeting is emulated with a focus-walk
    (reset to the top-left pane, then N-1 `focus-next-pane` steps). When
    fewer panes exist the walk ends on the last reachable one.
  - No detach, tab rename, tab move/swap or pane listing.

Key class: ZellijBackend(MultiplexerBackend).
"""

from __future__ import annotations

import logging

from ..config import Backend
from ..errors import SessionExists, SubprocessFailure
from .base import MultiplexerBackend, MuxResult, ResizeDirection, SplitDirection, strip_ansi

logger = logging.getLogger(__name__)

_SPLIT_DIRECTIONS = {
    SplitDirection.VERTICAL: "down",
    SplitDirection.HORIZONTAL: "right",
}


class ZellijBackend(MultiplexerBackend):
    """Manages Zellij sessions, tabs and focused panes."""

    backend = Backend.ZELLIJ
    binary = "zellij"

    def _action(self, operation: str, session: str, *action_args: str) -> None:
        """Run `zellij --session <name> action <action_args>`."""
        self._run(operation, "--session", session, "action", *action_args)

    def _try_action(self, session: str, *action_args: str) -> bool:
        return self._try("--session", session, "action", *action_args)

    def _session_names(self) -> list[str]:
        rc, stdout, _ = self._capture("list-sessions", "--short", "--no-formatting")
        if rc != 0:
            return []
        return [
            strip_ansi(line).strip()
            for line in stdout.splitlines()
            if strip_ansi(line).strip()
        ]

    def session_exists(self, name: str) -> bool:
        return name in self._session_names()

    def focus_pane(self, session: str, pane: str) -> None:
        """Best-effort move of the focus to pane number `pane` (1-based).

        Never raises for an unreachable index: the walk stops on the first
        failed step and later actions use whatever pane is focused.
        """
        if pane in ("", "0"):
            return

        self._try_action(session, "move-focus", "left")
        self._try_action(session, "move-focus", "up")

        try:
            target = int(pane)
        except ValueError:
            target = 1
        target = max(target, 1)

        for step in range(1, target):
            if not self._try_action(session, "focus-next-pane"):
                logger.debug(
                    "Focus walk stopped after %d of %d steps in session %s",
                    step - 1, target - 1, session,
                )
                break

    # ── sessions ─────────────────────────────────────────────────────────

    def create_session(self, name: str) -> MuxResult:
        if self.session_exists(name):
            raise SessionExists(name)

        # Plain `zellij -s` takes over the terminal; start it in the background
        rc, _, stderr = self._capture("attach", "--create-background", name)
        if rc != 0:
            raise SubprocessFailure("create", self.backend, rc, stderr.strip())

        if not self.session_exists(name):
            raise SubprocessFailure(
                "create", self.backend,
                detail="creation appeared to succeed but session not found",
            )
        return MuxResult(f"Session '{name}' created with zellij")

    def list_sessions(self) -> MuxResult:
        if not self._try("list-sessions"):
            return MuxResult("No zellij sessions found", warning=True)
        return MuxResult()

    def attach_session(self, name: str) -> MuxResult:
        self.require_session(name)
        self._run("attach", "attach", name)
        return MuxResult()

    def kill_session(self, name: str) -> MuxResult:
        self.require_session(name)
        if not self._try("delete-session", name):
            self._run("delete", "delete-session", "--force", name)
        return MuxResult(f"Killed zellij session '{name}'")

    def rename_session(self, old: str, new: str) -> MuxResult:
        self.require_session(old)
        self._action("rename-session", old, "rename-session", new)
        return MuxResult(f"Renamed zellij session from '{old}' to '{new}'")

    def nuke_all(self) -> MuxResult:
        if self._try("delete-all-sessions", "-y", "-f"):
            return MuxResult("Killed all zellij sessions")

        rc, stdout, stderr = self._capture("list-sessions")
        if rc != 0:
            raise SubprocessFailure(
                "nuke", self.backend, rc, f"failed to list zellij sessions: {stderr.strip()}"
            )

        killed = 0
        for line in stdout.splitlines():
            fields = strip_ansi(line).split()
            if not fields:
                continue
            # Format: session_name [Created ...] (EXITED ...)
            name = fields[0]
            if not self._try("delete-session", name):
                self._try("delete-session", "--force", name)
            killed += 1

        if killed == 0:
            raise SubprocessFailure("nuke", self.backend, detail="no zellij sessions found to delete")
        return MuxResult(f"Killed {killed} zellij sessions")

    # ── tabs ─────────────────────────────────────────────────────────────

    def new_window(self, session: str, name: str) -> MuxResult:
        self.require_session(session)
        if name:
            self._action("new-window", session, "new-tab", "--name", name)
            return MuxResult(f"Tab '{name}' created in zellij session '{session}'")
        self._action("new-window", session, "new-tab")
        return MuxResult(f"Tab created in zellij session '{session}'")

    def list_windows(self, session: str) -> MuxResult:
        self.require_session(session)
        self._action("list-windows", session, "query-tab-names")
        return MuxResult()

    def tab_names(self, session: str) -> list[str]:
        rc, stdout, stderr = self._capture("--session", session, "action", "query-tab-names")
        if rc != 0:
            raise SubprocessFailure("query-tab-names", self.backend, rc, stderr.strip())
        return [line.strip() for line in stdout.splitlines() if line.strip()]

    def kill_window(self, session: str, window: str) -> MuxResult:
        self.require_session(session)
        # go-to-tab-name exits 0 for unknown names; close-tab would hit the focused tab
        if window not in self.tab_names(session):
            raise SubprocessFailure(
                "kill-window", self.backend,
                detail=f"no tab named '{window}' in session '{session}'",
            )
        self._action("kill-window", session, "go-to-tab-name", window)
        self._action("kill-window", session, "close-tab")
        return MuxResult(f"Tab '{window}' closed in zellij session '{session}'")

    def next_window(self, session: str) -> MuxResult:
        self.require_session(session)
        self._action("next-window", session, "go-to-next-tab")
        return MuxResult("Switched to next tab")

    def previous_window(self, session: str) -> MuxResult:
        self.require_session(session)
        self._action("prev-window", session, "go-to-previous-tab")
        return MuxResult("Switched to previous tab")

    # ── panes ────────────────────────────────────────────────────────────

    def split_window(
        self, session: str, window: str, direction: SplitDirection,
    ) -> MuxResult:
        self.require_session(session)
        self._action(
            "split-window", session, "new-pane", "--direction", _SPLIT_DIRECTIONS[direction],
        )
        return MuxResult(f"Split focused pane {direction} in zellij session '{session}'")

    def kill_pane(self, session: str, window: str, pane: str) -> MuxResult:
        self.require_session(session)
        self.focus_pane(session, pane)
        self._action("kill-pane", session, "close-pane")
        return MuxResult(
            f"Killed focused pane in zellij session '{session}' (target pane: {pane})"
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
        self.focus_pane(session, pane)
        # One resize action moves the border by a single step
        for _ in range(size):
            self._action("resize-pane", session, "resize", "increase", direction.word)
        return MuxResult(
            f"Resized focused pane in zellij session '{session}' "
            f"(target pane: {pane}, direction: {direction.value}, size: {size})"
        )

    def send_keys(self, session: str, window: str, pane: str, text: str) -> MuxResult:
        self.require_session(session)
        self.focus_pane(session, pane)
        self._action("send-keys", session, "write-chars", text)
        return MuxResult(
            f"Sent keys to focused pane in zellij session '{session}' (target pane: {pane})"
        )
