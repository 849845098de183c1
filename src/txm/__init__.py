"""txm — one command-line vocabulary for tmux, Zellij and GNU Screen."""

__version__ = "0.3.0"
