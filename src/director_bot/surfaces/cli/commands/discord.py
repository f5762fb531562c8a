from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Optional

import typer

from ....core.config import load_bot_config
from ....core.exceptions import StartupError
from ....core.logging_utils import setup_rotating_logger
from ....integrations.discord.config import DirectorBotConfig
from ....integrations.discord.service import create_director_bot_service

LOGGER_NAME = "director-bot"


def register_discord_commands(app: typer.Typer, *, raise_exit: Callable) -> None:
    @app.command("start")
    def discord_start(
        path: Optional[Path] = typer.Option(
            None, "--path", help="Directory holding director-bot.yml and .env"
        ),
    ) -> None:
        """Connect to Discord and serve dialogues until interrupted."""
        try:
            config = load_bot_config(path or Path.cwd())
            bot_config = DirectorBotConfig.from_bot_config(config)
            logger = setup_rotating_logger(LOGGER_NAME, config.log)
            service = create_director_bot_service(bot_config, logger=logger)
            asyncio.run(service.run_forever())
        except StartupError as exc:
            raise_exit(str(exc), cause=exc)
        except KeyboardInterrupt:
            typer.echo("Director bot stopped.")

    @app.command("check-config")
    def discord_check_config(
        path: Optional[Path] = typer.Option(
            None, "--path", help="Directory holding director-bot.yml and .env"
        ),
    ) -> None:
        """Validate configuration and print it with secrets redacted."""
        try:
            config = load_bot_config(path or Path.cwd())
            bot_config = DirectorBotConfig.from_bot_config(config)
        except StartupError as exc:
            raise_exit(str(exc), cause=exc)
        for key, value in bot_config.redacted_summary().items():
            typer.echo(f"{key}: {value}")
        typer.echo(f"log_path: {config.log.path}")
        typer.echo("Configuration OK.")
