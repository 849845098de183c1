"""Shared test fixtures and helpers for the txm test suite.

Isolates HOME and the txm environment variables so no test reads the
developer's real ~/.txm, and provides FakeRunner, a CommandRunner stand-in
that records argument vectors and returns scripted results.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from txm.config import Backend


class FakeRunner:
    """Records every command and answers from prefix-matched rules.

    Rules added later take precedence. A rule holding several results
    returns them in order and then keeps repeating the last one.
    Unmatched commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self._rules: list[tuple[tuple[str, ...], list[tuple[int, str, str]]]] = []

    def on(self, *prefix: str, rc: int = 0, stdout: str = "", stderr: str = "") -> FakeRunner:
        return self.on_sequence(prefix, [(rc, stdout, stderr)])

    def on_sequence(
        self, prefix: Sequence[str], results: list[tuple[int, str, str]],
    ) -> FakeRunner:
        self._rules.insert(0, (tuple(prefix), list(results)))
        return self

    def _answer(self, args: Sequence[str]) -> tuple[int, str, str]:
        self.calls.append(list(args))
        for prefix, results in self._rules:
            if tuple(args[: len(prefix)]) == prefix:
                if len(results) > 1:
                    return results.pop(0)
                return results[0]
        return 0, "", ""

    def run(self, args: Sequence[str]) -> int:
        return self._answer(args)[0]

    def capture(self, args: Sequence[str]) -> tuple[int, str, str]:
        return self._answer(args)

    def commands(self, *prefix: str) -> list[list[str]]:
        """Recorded calls starting with prefix."""
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("TXM_DEFAULT_BACKEND", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    return home


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def tmux_server() -> MagicMock:
    """libtmux.Server stand-in where every session exists."""
    server = MagicMock()
    server.has_session.return_value = True
    return server


def availability(*installed: Backend) -> dict[Backend, bool]:
    return {backend: backend in installed for backend in Backend}
