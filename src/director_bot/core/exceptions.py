"""Shared error hierarchy.

Adapters derive from these so severity and recoverability read the same
everywhere a failure is logged.
"""

from __future__ import annotations

from typing import Optional


class DirectorBotError(Exception):
    """Base error for the bot."""

    recoverable = False
    severity = "error"

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_message = user_message


class TransientError(DirectorBotError):
    """Failure that may succeed if attempted again later."""

    recoverable = True
    severity = "warning"


class PermanentError(DirectorBotError):
    """Failure that will not go away on its own."""

    recoverable = False
    severity = "error"


class DeliveryError(PermanentError):
    """An outbound platform call failed; fatal to the dialogue that issued it."""


class StartupError(PermanentError):
    """Raised before any dialogue can start (missing config, store failure)."""


class ConfigError(StartupError):
    """Invalid or incomplete configuration."""
