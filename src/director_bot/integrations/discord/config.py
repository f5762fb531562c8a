from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ...core.config import BotConfig
from ...core.dialogue.session import (
    DEFAULT_ACTION_TIMEOUT_SECONDS,
    DEFAULT_SELECTION_TIMEOUT_SECONDS,
)
from .constants import (
    DISCORD_INTENT_DIRECT_MESSAGES,
    DISCORD_INTENT_GUILD_MESSAGES,
    DISCORD_INTENT_MESSAGE_CONTENT,
)
from .errors import DiscordConfigError

DEFAULT_BOT_TOKEN_ENV = "DISCORD_TOKEN"
DEFAULT_STATE_FILE_ENV = "DB_FILE"
DEFAULT_TRIGGER = "!director"
DEFAULT_INTENTS = (
    DISCORD_INTENT_GUILD_MESSAGES
    | DISCORD_INTENT_DIRECT_MESSAGES
    | DISCORD_INTENT_MESSAGE_CONTENT
)


class DirectorBotConfigError(DiscordConfigError):
    """Raised when director bot config is invalid."""


@dataclass(frozen=True)
class DirectorBotConfig:
    root: Path
    bot_token_env: str
    state_file_env: str
    bot_token: str
    state_file: Path
    intents: int
    trigger: str
    selection_timeout_seconds: float
    action_timeout_seconds: float

    @classmethod
    def from_raw(
        cls,
        *,
        root: Path,
        raw: dict[str, Any],
        env: Mapping[str, str],
    ) -> "DirectorBotConfig":
        cfg: dict[str, Any] = raw if isinstance(raw, dict) else {}
        bot_cfg = _section(cfg, "discord_bot")
        dialogue_cfg = _section(cfg, "dialogue")

        bot_token_env = str(bot_cfg.get("bot_token_env", DEFAULT_BOT_TOKEN_ENV)).strip()
        state_file_env = str(
            bot_cfg.get("state_file_env", DEFAULT_STATE_FILE_ENV)
        ).strip()
        if not bot_token_env:
            raise DirectorBotConfigError("discord_bot.bot_token_env must be non-empty")
        if not state_file_env:
            raise DirectorBotConfigError("discord_bot.state_file_env must be non-empty")

        bot_token = (env.get(bot_token_env) or "").strip()
        if not bot_token:
            raise DirectorBotConfigError(f"env var {bot_token_env} is unset or empty")
        state_file_value = (env.get(state_file_env) or "").strip()
        if not state_file_value:
            raise DirectorBotConfigError(f"env var {state_file_env} is unset or empty")

        intents_value = bot_cfg.get("intents", DEFAULT_INTENTS)
        if isinstance(intents_value, bool) or not isinstance(intents_value, int):
            raise DirectorBotConfigError("discord_bot.intents must be an integer")
        if intents_value < 0:
            raise DirectorBotConfigError("discord_bot.intents must be >= 0")

        trigger = dialogue_cfg.get("trigger", DEFAULT_TRIGGER)
        # The trigger is compared verbatim, so surrounding whitespace is not stripped.
        if not isinstance(trigger, str) or not trigger.strip():
            raise DirectorBotConfigError("dialogue.trigger must be a non-empty string")

        return cls(
            root=root,
            bot_token_env=bot_token_env,
            state_file_env=state_file_env,
            bot_token=bot_token,
            state_file=(root / state_file_value).resolve(),
            intents=intents_value,
            trigger=trigger,
            selection_timeout_seconds=_parse_positive_seconds(
                dialogue_cfg.get(
                    "selection_timeout_seconds", DEFAULT_SELECTION_TIMEOUT_SECONDS
                ),
                key="dialogue.selection_timeout_seconds",
            ),
            action_timeout_seconds=_parse_positive_seconds(
                dialogue_cfg.get(
                    "action_timeout_seconds", DEFAULT_ACTION_TIMEOUT_SECONDS
                ),
                key="dialogue.action_timeout_seconds",
            ),
        )

    @classmethod
    def from_bot_config(cls, config: BotConfig) -> "DirectorBotConfig":
        return cls.from_raw(root=config.root, raw=config.raw, env=config.env)

    def redacted_summary(self) -> dict[str, Any]:
        return {
            "bot_token_env": self.bot_token_env,
            "bot_token": "<set>" if self.bot_token else "<unset>",
            "state_file_env": self.state_file_env,
            "state_file": str(self.state_file),
            "intents": self.intents,
            "trigger": self.trigger,
            "selection_timeout_seconds": self.selection_timeout_seconds,
            "action_timeout_seconds": self.action_timeout_seconds,
        }


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    value = cfg.get(name)
    return value if isinstance(value, dict) else {}


def _parse_positive_seconds(value: Any, *, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DirectorBotConfigError(f"{key} must be a number")
    if value <= 0:
        raise DirectorBotConfigError(f"{key} must be > 0")
    return float(value)
