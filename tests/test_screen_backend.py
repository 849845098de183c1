"""Tests for ScreenBackend — `screen -ls` parsing and current-window commands."""

import pytest

from txm.errors import SessionNotFound, SubprocessFailure, UnsupportedOperation
from txm.multiplexer.base import ResizeDirection, SplitDirection
from txm.multiplexer.screen_backend import ScreenBackend, parse_session_ids, session_name

SCREEN_LS = """\
There are screens on:
\t12345.work\t(01/02/2025 10:00:00 AM)\t(Detached)
\t12399.work\t(01/02/2025 10:05:00 AM)\t(Attached)
\t22222.other.dev\t(01/02/2025 11:00:00 AM)\t(Detached)
\t33333.workshop\t(Dead ???)
3 Sockets in /run/screen/S-user.
"""


@pytest.fixture
def backend(runner) -> ScreenBackend:
    # screen -ls exits 1 while listing sessions
    runner.on("screen", "-ls", rc=1, stdout=SCREEN_LS)
    return ScreenBackend(runner)


def _without_listing(calls):
    return [c for c in calls if c != ["screen", "-ls"]]


class TestParsing:
    def test_parse_session_ids(self):
        assert parse_session_ids(SCREEN_LS) == ["12345.work", "12399.work", "22222.other.dev"]

    def test_parse_strips_ansi(self):
        listing = "\t\x1b[1m4242.colored\x1b[0m\t(Detached)\n"
        assert parse_session_ids(listing) == ["4242.colored"]

    def test_session_name_keeps_dots(self):
        assert session_name("22222.other.dev") == "other.dev"

    def test_empty_listing(self):
        assert parse_session_ids("No Sockets found in /run/screen/S-user.\n") == []


class TestSessions:
    def test_exists_ignores_exit_status(self, backend):
        assert backend.session_exists("work") is True
        assert backend.session_exists("other.dev") is True

    def test_exists_needs_exact_name(self, backend):
        assert backend.session_exists("wor") is False
        assert backend.session_exists("workshop") is False

    def test_duplicate_names_are_all_found(self, backend):
        assert backend.matching_session_ids("work") == ["12345.work", "12399.work"]

    def test_create(self, backend, runner):
        backend.create_session("new")
        assert runner.calls == [["screen", "-dmS", "new"]]

    def test_list_ignores_exit_status(self, backend, runner):
        result = backend.list_sessions()
        # once on the terminal, once captured for parsing
        assert runner.calls == [["screen", "-ls"], ["screen", "-ls"]]
        assert result.warning is False

    def test_list_without_sessions_is_warning(self, runner):
        runner.on("screen", "-ls", rc=1, stdout="No Sockets found in /run/screen/S-user.\n")
        result = ScreenBackend(runner).list_sessions()
        assert result.warning is True
        assert result.message == "No screen sessions found"

    def test_attach(self, backend, runner):
        backend.attach_session("work")
        assert _without_listing(runner.calls) == [["screen", "-r", "work"]]

    def test_attach_missing(self, backend):
        with pytest.raises(SessionNotFound):
            backend.attach_session("ghost")

    def test_detach(self, backend, runner):
        backend.detach_session()
        assert runner.calls == [["screen", "-d"]]

    def test_kill_targets_every_pid_qualified_id(self, backend, runner):
        result = backend.kill_session("work")
        assert _without_listing(runner.calls) == [
            ["screen", "-S", "12345.work", "-X", "quit"],
            ["screen", "-S", "12399.work", "-X", "quit"],
        ]
        assert "2" in result.message

    def test_kill_missing(self, backend, runner):
        with pytest.raises(SessionNotFound):
            backend.kill_session("ghost")
        assert runner.calls == [["screen", "-ls"]]

    def test_kill_all_quits_fail(self, backend, runner):
        runner.on("screen", "-S", rc=1)
        with pytest.raises(SubprocessFailure):
            backend.kill_session("work")

    def test_rename_unsupported(self, backend, runner):
        with pytest.raises(UnsupportedOperation, match="screen"):
            backend.rename_session("work", "play")
        assert runner.calls == []

    def test_nuke_quits_every_session(self, backend, runner):
        result = backend.nuke_all()
        assert _without_listing(runner.calls) == [
            ["screen", "-S", "12345.work", "-X", "quit"],
            ["screen", "-S", "12399.work", "-X", "quit"],
            ["screen", "-S", "22222.other.dev", "-X", "quit"],
        ]
        assert result.message == "Killed 3 screen sessions"

    def test_nuke_nothing_is_warning(self, runner):
        runner.on("screen", "-ls", rc=1, stdout="No Sockets found.\n")
        result = ScreenBackend(runner).nuke_all()
        assert result.warning is True


class TestWindows:
    def test_new_window(self, backend, runner):
        backend.new_window("work", "logs")
        assert runner.calls == [["screen", "-S", "work", "-X", "screen", "-t", "logs"]]

    def test_list_windows(self, backend, runner):
        backend.list_windows("work")
        assert runner.calls == [["screen", "-S", "work", "-Q", "windows"]]

    def test_kill_window_acts_on_current(self, backend, runner):
        backend.kill_window("work", "ignored")
        assert runner.calls == [["screen", "-S", "work", "-X", "kill"]]

    def test_next_previous(self, backend, runner):
        backend.next_window("work")
        backend.previous_window("work")
        assert runner.calls == [
            ["screen", "-S", "work", "-X", "next"],
            ["screen", "-S", "work", "-X", "prev"],
        ]

    def test_rename_window_sets_title(self, backend, runner):
        backend.rename_window("work", "old", "new")
        assert _without_listing(runner.calls) == [["screen", "-S", "work", "-X", "title", "new"]]

    def test_move_swap_unsupported(self, backend):
        with pytest.raises(UnsupportedOperation):
            backend.move_window("work", "a", "other")
        with pytest.raises(UnsupportedOperation):
            backend.swap_window("work", "a", "b")


class TestPanes:
    def test_vertical_split(self, backend, runner):
        backend.split_window("work", "0", SplitDirection.VERTICAL)
        assert _without_listing(runner.calls) == [["screen", "-S", "work", "-X", "split"]]

    def test_horizontal_split_unsupported(self, backend, runner):
        with pytest.raises(UnsupportedOperation, match="horizontal"):
            backend.split_window("work", "0", SplitDirection.HORIZONTAL)
        assert runner.calls == []

    @pytest.mark.parametrize(
        "call",
        [
            lambda b: b.list_panes("work", "0"),
            lambda b: b.kill_pane("work", "0", "1"),
            lambda b: b.resize_pane("work", "0", "1", ResizeDirection.UP, 5),
            lambda b: b.send_keys("work", "0", "1", "ls"),
        ],
    )
    def test_pane_operations_unsupported(self, backend, call):
        with pytest.raises(UnsupportedOperation):
            call(backend)
