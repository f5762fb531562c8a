from __future__ import annotations

import logging

import pytest

from director_bot.core.bootstrap import BootstrapStep, run_bootstrap_steps
from director_bot.core.exceptions import ConfigError, StartupError


@pytest.mark.anyio
async def test_bootstrap_runs_steps_in_order(caplog: pytest.LogCaptureFixture) -> None:
    ran: list[str] = []

    async def first() -> None:
        ran.append("first")

    async def second() -> None:
        ran.append("second")

    with caplog.at_level(logging.INFO, logger="test.bootstrap"):
        await run_bootstrap_steps(
            surface="discord",
            logger=logging.getLogger("test.bootstrap"),
            steps=(BootstrapStep("first", first), BootstrapStep("second", second)),
        )

    assert ran == ["first", "second"]
    assert sum("discord.bootstrap.step_ok" in r.message for r in caplog.records) == 2


@pytest.mark.anyio
async def test_required_step_failure_stops_startup() -> None:
    ran: list[str] = []

    async def broken() -> None:
        raise OSError("disk full")

    async def later() -> None:
        ran.append("later")

    with pytest.raises(StartupError, match="open_state_store") as excinfo:
        await run_bootstrap_steps(
            surface="discord",
            logger=logging.getLogger("test.bootstrap"),
            steps=(
                BootstrapStep("open_state_store", broken),
                BootstrapStep("later", later),
            ),
        )

    assert isinstance(excinfo.value.__cause__, OSError)
    assert ran == []


@pytest.mark.anyio
async def test_optional_step_failure_is_logged_and_skipped(
    caplog: pytest.LogCaptureFixture,
) -> None:
    ran: list[str] = []

    async def flaky() -> None:
        raise RuntimeError("nope")

    async def later() -> None:
        ran.append("later")

    with caplog.at_level(logging.WARNING, logger="test.bootstrap"):
        await run_bootstrap_steps(
            surface="discord",
            logger=logging.getLogger("test.bootstrap"),
            steps=(
                BootstrapStep("flaky", flaky, required=False),
                BootstrapStep("later", later),
            ),
        )

    assert ran == ["later"]
    assert any("discord.bootstrap.step_failed" in r.message for r in caplog.records)


@pytest.mark.anyio
async def test_startup_errors_pass_through_unchanged() -> None:
    error = ConfigError("missing token")

    async def misconfigured() -> None:
        raise error

    with pytest.raises(ConfigError) as excinfo:
        await run_bootstrap_steps(
            surface="discord",
            logger=logging.getLogger("test.bootstrap"),
            steps=(BootstrapStep("config", misconfigured),),
        )
    assert excinfo.value is error
