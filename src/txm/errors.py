"""Error taxonomy shared by the loader, adapters and dispatcher.

Every failure the dispatcher reports derives from TxmError:
  - UserInputError: missing or malformed command-line arguments.
  - UnsupportedOperation: the selected backend has no way to do the verb.
  - SubprocessFailure: the backend binary failed or could not be spawned.
  - SessionNotFound / SessionExists: backend state checked before acting.
  - ConfigError / InvalidBackendName: configuration read/write problems.
  - NoBackendAvailable: none of the multiplexers is installed.
"""

from __future__ import annotations


class TxmError(Exception):
    """Base class for all errors reported by txm."""


class UserInputError(TxmError):
    """Missing or invalid command-line arguments."""


class ConfigError(TxmError):
    """Configuration could not be read or written."""


class InvalidBackendName(ConfigError, ValueError):
    """A backend identifier did not match any known multiplexer."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Invalid backend '{name}'. Valid backends are: tmux, zellij, screen"
        )


class UnsupportedOperation(TxmError):
    """The backend cannot express the requested operation at all."""

    def __init__(self, operation: str, backend: object) -> None:
        self.operation = operation
        self.backend = backend
        super().__init__(f"'{operation}' is not supported by the {backend} backend")


class SubprocessFailure(TxmError):
    """The backend binary exited non-zero or could not be started."""

    def __init__(
        self,
        operation: str,
        backend: object,
        returncode: int | None = None,
        detail: str = "",
    ) -> None:
        self.operation = operation
        self.backend = backend
        self.returncode = returncode
        self.detail = detail
        msg = f"{backend} {operation} failed"
        if returncode is not None:
            msg += f" (exit status {returncode})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class SessionNotFound(TxmError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Session '{name}' does not exist")


class SessionExists(TxmError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Session '{name}' already exists. Use the attach command to connect "
            "to it or specify a different name"
        )


class NoBackendAvailable(TxmError):
    """None of the supported multiplexer binaries is installed."""

    def __init__(self) -> None:
        super().__init__(
            "Neither tmux, zellij nor screen is installed. "
            "Please install one of them and try again."
        )
