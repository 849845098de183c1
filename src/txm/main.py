"""Application entry point — CLI dispatcher.

Parses `txm <verb> [args...] [-v|--verbose]`, validates the positional
arguments of the verb, selects one backend for the run and routes the verb
through the MultiplexerBackend interface. Config, version and maintenance
verbs are handled here without touching any backend.

Exit status: 0 on success, 1 for bad input, unsupported operations,
backend failures and missing backends.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config import Backend, Config, default_config_path, load_config, parse_backend, save_config
from .errors import (
    NoBackendAvailable,
    TxmError,
    UnsupportedOperation,
    UserInputError,
)
from .multiplexer import (
    OPERATIONS,
    CommandRunner,
    MultiplexerBackend,
    MuxResult,
    ResizeDirection,
    SplitDirection,
    backend_class,
    create_backend,
    probe_all,
    resolve_binary,
    select_best_backend,
)
from .output import Console, detect_color_support, setup_logging

logger = logging.getLogger(__name__)

VERBOSE_FLAGS = ("-v", "--verbose")
DEFAULT_RESIZE_SIZE = 5

# verb → (required positional names, message when any is missing)
_REQUIRED_ARGS: dict[str, tuple[tuple[str, ...], str]] = {
    "create": (("session",), "Please specify a session name"),
    "list": ((), ""),
    "attach": (("session",), "Please specify a session name"),
    "detach": ((), ""),
    "delete": (("session",), "Please specify a session name"),
    "nuke": ((), ""),
    "new-window": (
        ("session", "name"), "Please specify both session name and window name",
    ),
    "list-windows": (("session",), "Please specify a session name"),
    "kill-window": (
        ("session", "window"), "Please specify both session name and window name",
    ),
    "next-window": (("session",), "Please specify a session name"),
    "prev-window": (("session",), "Please specify a session name"),
    "rename-session": (
        ("old", "new"), "Please specify both old session name and new session name",
    ),
    "rename-window": (
        ("session", "old", "new"),
        "Please specify session name, old window name, and new window name",
    ),
    "move-window": (
        ("src", "window", "dst"),
        "Please specify source session, window name, and destination session",
    ),
    "swap-window": (
        ("session", "window1", "window2"),
        "Please specify session name, first window name, and second window name",
    ),
    "split-window": (
        ("session", "window"), "Please specify session name and window name",
    ),
    "list-panes": (
        ("session", "window"), "Please specify session name and window name",
    ),
    "kill-pane": (
        ("session", "window", "pane"),
        "Please specify session name, window name, and pane number",
    ),
    "resize-pane": (
        ("session", "window", "pane"),
        "Please specify session name, window name, pane number, and direction (U/D/L/R)",
    ),
    "send-keys": (
        ("session", "window", "pane", "keys"),
        "Please specify session name, window name, pane number, and keys to send",
    ),
}

HELP_TEXT = f"""\
Usage: txm [command] [arguments] [-v|--verbose]

Session commands:
  create          <session>                         Create a new session
  list                                              List all sessions
  attach          <session>                         Attach to a session
  detach                                            Detach from the current session
  delete          <session>                         Delete a session
  rename-session  <old> <new>                       Rename a session
  nuke                                              Kill all sessions

Window commands:
  new-window      <session> <name>                  Create a new window (tab)
  list-windows    <session>                         List windows in a session
  kill-window     <session> <window>                Kill a window
  next-window     <session>                         Switch to the next window
  prev-window     <session>                         Switch to the previous window
  rename-window   <session> <old> <new>             Rename a window
  move-window     <src> <window> <dst>              Move a window to another session
  swap-window     <session> <window1> <window2>     Swap two windows

Pane commands:
  split-window    <session> <window> [v|h]          Split a window (default: v)
  list-panes      <session> <window>                List panes in a window
  kill-pane       <session> <window> <pane>         Kill a pane
  resize-pane     <session> <window> <pane> [U|D|L|R] [size]
                                                    Resize a pane (default: U {DEFAULT_RESIZE_SIZE})
  send-keys       <session> <window> <pane> <keys>  Send keys to a pane

Configuration:
  config set backend <tmux|zellij|screen>           Set the default backend
  config get backend                                Show the default backend
  config show                                       Show configuration and backends

Other:
  version         [--check-update]                  Show version
  update                                            Update txm
  uninstall                                         Uninstall txm
  help                                              Show this help

Options:
  -v, --verbose    Enable verbose output

Environment:
  TXM_DEFAULT_BACKEND   Override the configured default backend
  NO_COLOR              Disable colored output

Note: zellij and screen have limited window and pane management compared
      to tmux. Unsupported commands report an error naming the backend.
"""


def strip_verbose(argv: Sequence[str]) -> tuple[list[str], bool]:
    """Remove -v/--verbose from anywhere in argv."""
    args = [a for a in argv if a not in VERBOSE_FLAGS]
    return args, len(args) != len(argv)


def _positionals(verb: str, args: list[str]) -> list[str]:
    """Required positional arguments of verb, or UserInputError."""
    names, missing_msg = _REQUIRED_ARGS[verb]
    values = args[1:1 + len(names)]
    if len(values) < len(names) or any(not v for v in values):
        raise UserInputError(missing_msg)
    return values


def _optional(args: list[str], index: int, default: str) -> str:
    if index < len(args) and args[index]:
        return args[index]
    return default


def parse_split_direction(text: str) -> SplitDirection:
    try:
        return SplitDirection(text.lower())
    except ValueError:
        raise UserInputError(f"Invalid split direction '{text}' (use v or h)") from None


def parse_resize_direction(text: str) -> ResizeDirection:
    try:
        return ResizeDirection(text.upper())
    except ValueError:
        raise UserInputError(f"Invalid resize direction '{text}' (use U, D, L or R)") from None


def parse_size(text: str) -> int:
    try:
        size = int(text)
    except ValueError:
        raise UserInputError("Size must be a number") from None
    if size < 1:
        raise UserInputError("Size must be a positive number")
    return size


def dispatch(mux: MultiplexerBackend, verb: str, args: list[str]) -> MuxResult:
    """Validate args for verb and call the matching adapter operation."""
    values: list[object] = list(_positionals(verb, args))

    if verb == "split-window":
        values.append(parse_split_direction(_optional(args, 3, "v")))
    elif verb == "resize-pane":
        values.append(parse_resize_direction(_optional(args, 4, "U")))
        values.append(parse_size(_optional(args, 5, str(DEFAULT_RESIZE_SIZE))))

    method = getattr(mux, OPERATIONS[verb])
    return method(*values)


def _report(console: Console, result: MuxResult) -> None:
    if not result.message:
        return
    if result.warning:
        console.warning(result.message)
    else:
        console.info(result.message)


def _select(
    console: Console, config: Config, availability: Mapping[Backend, bool],
) -> Backend:
    if not any(availability.values()):
        raise NoBackendAvailable()
    backend = select_best_backend(config, availability)
    if backend is not config.default_backend:
        console.warning(
            f"{config.default_backend} is not installed. Falling back to {backend}."
        )
    logger.debug("Selected backend: %s", backend)
    return backend


def _config_command(
    console: Console,
    args: list[str],
    config: Config,
    availability: Mapping[Backend, bool] | None,
    config_path: Path | None,
) -> None:
    usage = "Usage: txm config set backend <name> | config get backend | config show"
    action = _optional(args, 1, "")
    key = _optional(args, 2, "")

    if action == "set" and key == "backend":
        name = _optional(args, 3, "")
        if not name:
            raise UserInputError("Please specify a backend name (tmux, zellij, screen)")
        config.default_backend = parse_backend(name)
        path = save_config(config, config_path)
        console.info(f"Default backend set to '{config.default_backend}' ({path})")
        if availability is None:
            availability = probe_all()
        if not availability.get(config.default_backend, False):
            console.warning(f"{config.default_backend} is not installed on this system")
        return

    if action == "get" and key == "backend":
        console.echo(str(config.default_backend))
        return

    if action == "show":
        if availability is None:
            availability = probe_all()
        path = config.path or config_path or default_config_path()
        console.echo(f"Default backend: {config.default_backend} (from {config.source})")
        console.echo(f"Config file:     {path}{'' if config.path else ' (not present)'}")
        console.echo(f"Fallback order:  {', '.join(str(b) for b in config.fallback_order)}")
        console.echo("Available backends:")
        for backend in Backend:
            state = "installed" if availability.get(backend, False) else "not installed"
            console.echo(f"  {backend}: {state}")
        if any(availability.values()):
            selected = select_best_backend(config, availability)
            unsupported = backend_class(selected).unsupported_operations()
            console.echo(f"Selected backend: {selected}")
            console.echo(f"Unsupported commands: {', '.join(unsupported) or 'none'}")
        else:
            console.echo("Selected backend: none (no multiplexer installed)")
        return

    raise UserInputError(usage)


def _maintenance_command(console: Console, verb: str, args: list[str]) -> None:
    """version / update / uninstall; txm is managed by pip."""
    if verb == "version":
        console.echo(f"txm version {__version__}")
        if "--check-update" in args[1:]:
            console.info("To check for and install updates run: pip install --upgrade txm")
    elif verb == "update":
        console.info("txm is installed as a Python package. Update it with: pip install --upgrade txm")
    elif verb == "uninstall":
        console.info("txm is installed as a Python package. Remove it with: pip uninstall txm")
        console.info("Configuration is kept in ~/.txm; delete it manually if no longer needed")


def run(
    argv: Sequence[str] | None = None,
    env: Mapping[str, str] | None = None,
    runner: CommandRunner | None = None,
    availability: Mapping[Backend, bool] | None = None,
    config_path: Path | None = None,
    console: Console | None = None,
) -> int:
    """Execute one txm invocation and return its exit status."""
    args, verbose = strip_verbose(sys.argv[1:] if argv is None else argv)
    setup_logging(verbose)
    if console is None:
        console = Console(use_colors=detect_color_support(env))
    logger.debug("Console colors enabled: %s", console.use_colors)

    if not args:
        console.echo(HELP_TEXT)
        return 1

    verb = args[0]
    try:
        if verb == "help":
            console.echo(HELP_TEXT)
            return 0
        if verb in ("version", "update", "uninstall"):
            _maintenance_command(console, verb, args)
            return 0

        config = load_config(env, config_path)
        if verb == "config":
            _config_command(console, args, config, availability, config_path)
            return 0

        if verb not in OPERATIONS:
            console.error("Invalid command")
            console.echo(HELP_TEXT)
            return 1

        if availability is None:
            availability = probe_all()
        backend = _select(console, config, availability)
        mux = create_backend(backend, runner, binary=resolve_binary(backend))
        _report(console, dispatch(mux, verb, args))
        return 0

    except UserInputError as e:
        console.error(str(e))
        console.echo(HELP_TEXT)
        return 1
    except UnsupportedOperation as e:
        console.error(f"{e} (backend limitation)")
        return 1
    except TxmError as e:
        console.error(str(e))
        return 1


def main() -> None:
    """Main entry point."""
    load_dotenv()
    sys.exit(run())


if __name__ == "__main__":
    main()
