"""Startup steps that must complete before the gateway connects."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable

from .exceptions import StartupError
from .logging_utils import log_event

BootstrapAction = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class BootstrapStep:
    name: str
    action: BootstrapAction
    required: bool = True


async def run_bootstrap_steps(
    *,
    surface: str,
    logger: logging.Logger,
    steps: Iterable[BootstrapStep],
) -> None:
    """Run `steps` in order.

    A failing optional step is logged and skipped. A failing required step
    is logged and re-raised as `StartupError`, so nothing after it runs.
    """

    for step in steps:
        try:
            await step.action()
        except StartupError:
            raise
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR if step.required else logging.WARNING,
                f"{surface}.bootstrap.step_failed",
                step=step.name,
                required=step.required,
                exc=exc,
            )
            if step.required:
                raise StartupError(
                    f"startup step {step.name!r} failed: {exc}"
                ) from exc
            continue
        log_event(
            logger,
            logging.INFO,
            f"{surface}.bootstrap.step_ok",
            step=step.name,
        )
