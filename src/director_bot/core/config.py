import dataclasses
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError

CONFIG_FILENAME = "director-bot.yml"
DOTENV_FILENAME = ".env"
DEFAULT_LOG_PATH = ".director-bot/director-bot.log"
DEFAULT_LOG_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 3

DEFAULT_CONFIG: Dict[str, Any] = {
    "discord_bot": {
        "bot_token_env": "DISCORD_TOKEN",
        "state_file_env": "DB_FILE",
    },
    "dialogue": {
        "trigger": "!director",
        "selection_timeout_seconds": 180,
        "action_timeout_seconds": 180,
    },
    "log": {
        "path": DEFAULT_LOG_PATH,
        "max_bytes": DEFAULT_LOG_MAX_BYTES,
        "backup_count": DEFAULT_LOG_BACKUP_COUNT,
    },
}


@dataclasses.dataclass(frozen=True)
class LogConfig:
    path: Path
    max_bytes: int
    backup_count: int


@dataclasses.dataclass(frozen=True)
class BotConfig:
    root: Path
    raw: Dict[str, Any]
    log: LogConfig
    env: Mapping[str, str]

    def section(self, name: str) -> Dict[str, Any]:
        value = self.raw.get(name)
        return value if isinstance(value, dict) else {}


def _merge_defaults(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def _parse_positive_int(value: Any, *, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer")
    if value <= 0:
        raise ConfigError(f"{key} must be > 0")
    return value


def _parse_log_config(root: Path, raw: Dict[str, Any]) -> LogConfig:
    log_raw = raw.get("log")
    log_cfg = log_raw if isinstance(log_raw, dict) else {}
    path_value = log_cfg.get("path", DEFAULT_LOG_PATH)
    if not isinstance(path_value, str) or not path_value.strip():
        raise ConfigError("log.path must be a string path")
    return LogConfig(
        path=(root / path_value).resolve(),
        max_bytes=_parse_positive_int(
            log_cfg.get("max_bytes", DEFAULT_LOG_MAX_BYTES), key="log.max_bytes"
        ),
        backup_count=_parse_positive_int(
            log_cfg.get("backup_count", DEFAULT_LOG_BACKUP_COUNT),
            key="log.backup_count",
        ),
    )


def load_bot_config(
    root: Path,
    *,
    env: Optional[Mapping[str, str]] = None,
    load_env_file: bool = True,
) -> BotConfig:
    """Load `director-bot.yml` under `root`, merged over the defaults.

    When `env` is not given the process environment is used, after
    `root/.env` has been loaded into it (existing variables win).
    """

    root = root.resolve()
    if env is None:
        if load_env_file:
            load_dotenv(root / DOTENV_FILENAME, override=False)
        env = dict(os.environ)
    overrides = _load_yaml_dict(root / CONFIG_FILENAME)
    raw = _merge_defaults(DEFAULT_CONFIG, overrides)
    return BotConfig(root=root, raw=raw, log=_parse_log_config(root, raw), env=env)
