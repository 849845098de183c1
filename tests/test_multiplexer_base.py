"""Tests for multiplexer abstraction — ABC defaults, MuxResult, factory."""

import pytest

from txm.config import Backend
from txm.errors import SessionNotFound, SubprocessFailure, UnsupportedOperation
from txm.multiplexer import OPERATIONS, create_backend
from txm.multiplexer.base import MultiplexerBackend, MuxResult, SplitDirection, strip_ansi
from txm.multiplexer.runner import CommandRunner
from txm.multiplexer.screen_backend import ScreenBackend
from txm.multiplexer.tmux_backend import TmuxBackend
from txm.multiplexer.zellij_backend import ZellijBackend


# ── MuxResult dataclass ─────────────────────────────────────────────────


class TestMuxResult:
    def test_defaults(self):
        r = MuxResult()
        assert r.message == ""
        assert r.warning is False

    def test_equality(self):
        assert MuxResult("done") == MuxResult("done")
        assert MuxResult("done") != MuxResult("done", warning=True)


# ── Concrete stub for testing ABC defaults ───────────────────────────────


class StubBackend(MultiplexerBackend):
    """Minimal concrete backend for testing base class methods."""

    backend = Backend.TMUX
    binary = "stub"

    def __init__(self, runner, sessions: list[str] | None = None) -> None:
        super().__init__(runner)
        self._sessions = sessions or []

    def session_exists(self, name: str) -> bool:
        return name in self._sessions

    def create_session(self, name: str) -> MuxResult:
        self._run("create", "new", name)
        return MuxResult("ok")

    def list_sessions(self) -> MuxResult:
        return MuxResult()

    def attach_session(self, name: str) -> MuxResult:
        return MuxResult()

    def kill_session(self, name: str) -> MuxResult:
        return MuxResult()

    def nuke_all(self) -> MuxResult:
        return MuxResult()


class TestBaseDefaults:
    def test_optional_operations_unsupported(self, runner):
        backend = StubBackend(runner)
        with pytest.raises(UnsupportedOperation) as exc_info:
            backend.split_window("s", "w", SplitDirection.VERTICAL)
        assert exc_info.value.operation == "split-window"
        assert exc_info.value.backend is Backend.TMUX
        assert runner.calls == []

    def test_unsupported_is_not_subprocess_failure(self, runner):
        with pytest.raises(UnsupportedOperation) as exc_info:
            StubBackend(runner).rename_session("a", "b")
        assert not isinstance(exc_info.value, SubprocessFailure)

    def test_run_prefixes_binary(self, runner):
        StubBackend(runner).create_session("x")
        assert runner.calls == [["stub", "new", "x"]]

    def test_run_failure_raises(self, runner):
        runner.on("stub", "new", rc=3)
        with pytest.raises(SubprocessFailure) as exc_info:
            StubBackend(runner).create_session("x")
        assert exc_info.value.returncode == 3
        assert exc_info.value.operation == "create"

    def test_require_session(self, runner):
        backend = StubBackend(runner, sessions=["a"])
        backend.require_session("a")
        with pytest.raises(SessionNotFound, match="'b' does not exist"):
            backend.require_session("b")

    def test_supported_operations_from_overrides(self):
        supported = StubBackend.supported_operations()
        assert set(supported) == {"create", "list", "attach", "delete", "nuke"}
        assert "send-keys" in StubBackend.unsupported_operations()


class TestCapabilities:
    def test_tmux_supports_everything(self):
        assert TmuxBackend.unsupported_operations() == []

    def test_zellij_limits(self):
        assert set(ZellijBackend.unsupported_operations()) == {
            "detach", "rename-window", "move-window", "swap-window", "list-panes",
        }

    def test_screen_limits(self):
        assert set(ScreenBackend.unsupported_operations()) == {
            "rename-session", "move-window", "swap-window",
            "list-panes", "kill-pane", "resize-pane", "send-keys",
        }

    def test_every_operation_has_a_method(self):
        for method in OPERATIONS.values():
            assert callable(getattr(MultiplexerBackend, method))


def test_strip_ansi():
    assert strip_ansi("\x1b[32;1mwork\x1b[m [Created 1h ago]") == "work [Created 1h ago]"


# ── Factory create_backend() ────────────────────────────────────────────


class TestCreateBackend:
    @pytest.mark.parametrize(
        "backend,cls",
        [(Backend.TMUX, TmuxBackend), (Backend.ZELLIJ, ZellijBackend), (Backend.SCREEN, ScreenBackend)],
    )
    def test_returns_matching_adapter(self, backend, cls, runner):
        mux = create_backend(backend, runner)
        assert isinstance(mux, cls)
        assert mux.backend is backend
        assert mux.runner is runner

    def test_default_runner(self):
        assert isinstance(create_backend(Backend.SCREEN).runner, CommandRunner)

    def test_fresh_instance_per_call(self, runner):
        assert create_backend(Backend.TMUX, runner) is not create_backend(Backend.TMUX, runner)

    @pytest.mark.parametrize("backend", list(Backend))
    def test_binary_override(self, backend, runner):
        mux = create_backend(backend, runner, binary=f"/opt/homebrew/bin/{backend.binary}")
        mux.list_sessions()
        assert runner.calls[0][0] == f"/opt/homebrew/bin/{backend.binary}"

    def test_class_binary_untouched_by_override(self, runner):
        create_backend(Backend.SCREEN, runner, binary="/usr/local/bin/screen")
        assert ScreenBackend.binary == "screen"

    def test_invalid_backend_raises(self):
        from txm.multiplexer import backend_class

        with pytest.raises(ValueError, match="Unknown multiplexer backend"):
            backend_class("invalid")
