"""Error types raised by CLI commands."""

from __future__ import annotations


class CLIError(RuntimeError):
    """Base error surfaced to CLI users."""


class PayloadFileError(CLIError):
    """Raised when a payload file cannot be read or parsed."""


__all__ = ["CLIError", "PayloadFileError"]
