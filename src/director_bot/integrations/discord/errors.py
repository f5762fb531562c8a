from __future__ import annotations

from typing import Optional

from ...core.exceptions import (
    ConfigError,
    DirectorBotError,
    PermanentError,
    TransientError,
)


class DiscordError(DirectorBotError):
    """Base Discord integration error."""


class DiscordConfigError(DiscordError, ConfigError):
    """Discord integration configuration error."""


class DiscordAPIError(DiscordError):
    """Discord API request error."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[int] = None,
        retry_after: Optional[float] = None,
        user_message: Optional[str] = None,
    ) -> None:
        super().__init__(message, user_message=user_message)
        self.status_code = status_code
        self.error_code = error_code
        self.retry_after = retry_after


class DiscordTransientError(DiscordAPIError, TransientError):
    """Discord API error that may clear up (rate limits, 5xx, network)."""


class DiscordPermanentError(DiscordAPIError, PermanentError):
    """Discord API error that will not clear up (auth, invalid requests)."""

    recoverable = PermanentError.recoverable
    severity = PermanentError.severity


class DiscordNotFoundError(DiscordPermanentError):
    """The addressed resource (message, channel) does not exist."""
