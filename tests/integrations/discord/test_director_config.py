from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from director_bot.core.config import CONFIG_FILENAME, load_bot_config
from director_bot.core.exceptions import ConfigError, StartupError
from director_bot.integrations.discord.config import (
    DEFAULT_INTENTS,
    DirectorBotConfig,
    DirectorBotConfigError,
)
from director_bot.integrations.discord.constants import (
    DISCORD_INTENT_DIRECT_MESSAGES,
    DISCORD_INTENT_GUILD_MESSAGES,
    DISCORD_INTENT_MESSAGE_CONTENT,
)

ENV = {"DISCORD_TOKEN": "secret-token", "DB_FILE": "data/director.sqlite3"}


def _config(tmp_path: Path, raw: dict[str, Any], env: dict[str, str] = ENV):
    return DirectorBotConfig.from_raw(root=tmp_path, raw=raw, env=env)


def test_defaults(tmp_path: Path) -> None:
    cfg = _config(tmp_path, {})

    assert cfg.bot_token == "secret-token"
    assert cfg.bot_token_env == "DISCORD_TOKEN"
    assert cfg.state_file_env == "DB_FILE"
    assert cfg.state_file == (tmp_path / "data" / "director.sqlite3").resolve()
    assert cfg.trigger == "!director"
    assert cfg.selection_timeout_seconds == 180.0
    assert cfg.action_timeout_seconds == 180.0
    assert cfg.intents == DEFAULT_INTENTS
    assert DEFAULT_INTENTS == (
        DISCORD_INTENT_GUILD_MESSAGES
        | DISCORD_INTENT_DIRECT_MESSAGES
        | DISCORD_INTENT_MESSAGE_CONTENT
    )


def test_custom_env_var_names(tmp_path: Path) -> None:
    cfg = _config(
        tmp_path,
        {"discord_bot": {"bot_token_env": "MY_TOKEN", "state_file_env": "MY_DB"}},
        env={"MY_TOKEN": "t", "MY_DB": "/var/lib/director.db"},
    )
    assert cfg.bot_token == "t"
    assert cfg.state_file == Path("/var/lib/director.db").resolve()


@pytest.mark.parametrize(
    "env",
    [
        {"DB_FILE": "x.db"},
        {"DISCORD_TOKEN": "   ", "DB_FILE": "x.db"},
        {"DISCORD_TOKEN": "t"},
        {"DISCORD_TOKEN": "t", "DB_FILE": ""},
    ],
)
def test_missing_required_env_is_config_error(tmp_path: Path, env: dict[str, str]) -> None:
    with pytest.raises(DirectorBotConfigError, match="unset or empty"):
        _config(tmp_path, {}, env=env)


def test_config_error_hierarchy() -> None:
    assert issubclass(DirectorBotConfigError, ConfigError)
    assert issubclass(DirectorBotConfigError, StartupError)


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ({"discord_bot": {"bot_token_env": " "}}, "bot_token_env"),
        ({"discord_bot": {"state_file_env": ""}}, "state_file_env"),
        ({"discord_bot": {"intents": "all"}}, "intents"),
        ({"discord_bot": {"intents": -1}}, "intents"),
        ({"dialogue": {"trigger": ""}}, "trigger"),
        ({"dialogue": {"trigger": 5}}, "trigger"),
        ({"dialogue": {"selection_timeout_seconds": 0}}, "selection_timeout_seconds"),
        ({"dialogue": {"action_timeout_seconds": "soon"}}, "action_timeout_seconds"),
        ({"dialogue": {"action_timeout_seconds": True}}, "action_timeout_seconds"),
    ],
)
def test_invalid_values(tmp_path: Path, raw: dict[str, Any], message: str) -> None:
    with pytest.raises(DirectorBotConfigError, match=message):
        _config(tmp_path, raw)


def test_from_bot_config_reads_yaml_and_env(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        "dialogue:\n"
        "  trigger: '!film'\n"
        "  selection_timeout_seconds: 12.5\n"
        "discord_bot:\n"
        "  intents: 512\n",
        encoding="utf-8",
    )

    cfg = DirectorBotConfig.from_bot_config(load_bot_config(tmp_path, env=ENV))

    assert cfg.trigger == "!film"
    assert cfg.selection_timeout_seconds == 12.5
    assert cfg.action_timeout_seconds == 180.0
    assert cfg.intents == 512


def test_redacted_summary_never_contains_token(tmp_path: Path) -> None:
    summary = _config(tmp_path, {}).redacted_summary()
    assert summary["bot_token"] == "<set>"
    assert "secret-token" not in repr(summary)
    assert summary["trigger"] == "!director"
