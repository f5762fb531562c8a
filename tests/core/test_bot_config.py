from __future__ import annotations

import os
from pathlib import Path

import pytest

from director_bot.core.config import (
    CONFIG_FILENAME,
    DEFAULT_LOG_MAX_BYTES,
    load_bot_config,
)
from director_bot.core.exceptions import ConfigError, StartupError


def test_load_bot_config_defaults_without_file(tmp_path: Path) -> None:
    config = load_bot_config(tmp_path, env={})

    assert config.root == tmp_path.resolve()
    assert config.section("discord_bot")["bot_token_env"] == "DISCORD_TOKEN"
    assert config.section("discord_bot")["state_file_env"] == "DB_FILE"
    assert config.section("dialogue")["trigger"] == "!director"
    assert config.section("dialogue")["selection_timeout_seconds"] == 180
    assert config.log.path == (tmp_path / ".director-bot" / "director-bot.log").resolve()
    assert config.log.max_bytes == DEFAULT_LOG_MAX_BYTES
    assert config.section("missing") == {}


def test_load_bot_config_merges_yaml_over_defaults(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        "dialogue:\n  action_timeout_seconds: 30\nlog:\n  path: logs/bot.log\n",
        encoding="utf-8",
    )

    config = load_bot_config(tmp_path, env={})

    dialogue = config.section("dialogue")
    assert dialogue["action_timeout_seconds"] == 30
    assert dialogue["selection_timeout_seconds"] == 180
    assert dialogue["trigger"] == "!director"
    assert config.log.path == (tmp_path / "logs" / "bot.log").resolve()


def test_load_bot_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text("dialogue: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_bot_config(tmp_path, env={})


def test_load_bot_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_bot_config(tmp_path, env={})


def test_load_bot_config_rejects_bad_log_settings(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        "log:\n  backup_count: 0\n", encoding="utf-8"
    )
    with pytest.raises(ConfigError, match="log.backup_count"):
        load_bot_config(tmp_path, env={})


def test_config_error_is_a_startup_error() -> None:
    assert issubclass(ConfigError, StartupError)


def test_load_bot_config_reads_dotenv_without_overriding(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("DIRECTOR_TEST_FROM_DOTENV", raising=False)
    monkeypatch.setenv("DIRECTOR_TEST_ALREADY_SET", "from-process")
    (tmp_path / ".env").write_text(
        "DIRECTOR_TEST_FROM_DOTENV=from-file\nDIRECTOR_TEST_ALREADY_SET=from-file\n",
        encoding="utf-8",
    )
    try:
        config = load_bot_config(tmp_path)
        assert config.env["DIRECTOR_TEST_FROM_DOTENV"] == "from-file"
        assert config.env["DIRECTOR_TEST_ALREADY_SET"] == "from-process"
    finally:
        # load_dotenv writes into os.environ directly.
        os.environ.pop("DIRECTOR_TEST_FROM_DOTENV", None)


def test_explicit_env_skips_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("DIRECTOR_TEST_IGNORED=1\n", encoding="utf-8")
    config = load_bot_config(tmp_path, env={"DISCORD_TOKEN": "t"})
    assert dict(config.env) == {"DISCORD_TOKEN": "t"}
