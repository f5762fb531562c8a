"""Routes inbound messages to dialogue sessions.

Each route pairs a trigger with a session factory. A matching message starts
one session, run as its own task; the trigger message id keys a registry so
a redelivered event never starts a second session for the same message.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union

from ..logging_utils import log_event
from ..ports.dialogue import InboundMessage
from .session import DialogueSession

DEFAULT_SEEN_CACHE_SIZE = 4096


@dataclass(frozen=True)
class ExactTextTrigger:
    """Matches a message whose whole body equals `text` (case-sensitive)."""

    text: str

    def matches(self, message: InboundMessage) -> bool:
        return message.body == self.text


Trigger = Union[ExactTextTrigger]
SessionFactory = Callable[[InboundMessage], DialogueSession]


@dataclass(frozen=True)
class DialogueRoute:
    name: str
    trigger: Trigger
    factory: SessionFactory


@dataclass(frozen=True)
class DispatchResult:
    status: str
    route: Optional[str] = None
    session: Optional[DialogueSession] = None


def _remember(cache: dict[str, None], key: str, *, max_size: int) -> None:
    cache.pop(key, None)
    cache[key] = None
    while len(cache) > max_size:
        cache.pop(next(iter(cache)), None)


class SessionRouter:
    def __init__(
        self,
        routes: Iterable[DialogueRoute],
        *,
        logger: Optional[logging.Logger] = None,
        seen_cache_size: int = DEFAULT_SEEN_CACHE_SIZE,
    ) -> None:
        self._routes = tuple(routes)
        self._logger = logger or logging.getLogger(__name__)
        self._seen_cache_size = max(int(seen_cache_size), 1)
        self._seen: dict[str, None] = {}
        self._sessions: dict[str, DialogueSession] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._idle_event = asyncio.Event()
        self._idle_event.set()

    @property
    def routes(self) -> tuple[DialogueRoute, ...]:
        return self._routes

    def match(self, message: InboundMessage) -> Optional[DialogueRoute]:
        if message.author_is_bot:
            return None
        for route in self._routes:
            if route.trigger.matches(message):
                return route
        return None

    async def dispatch(self, message: InboundMessage) -> DispatchResult:
        route = self.match(message)
        if route is None:
            return DispatchResult(status="ignored")

        key = message.message_id
        if key in self._sessions or key in self._seen:
            log_event(
                self._logger,
                logging.INFO,
                "dialogue.dispatch.duplicate",
                route=route.name,
                message_id=key,
            )
            return DispatchResult(status="duplicate", route=route.name)

        _remember(self._seen, key, max_size=self._seen_cache_size)
        session = route.factory(message)
        self._sessions[key] = session
        self._idle_event.clear()
        self._tasks[key] = asyncio.create_task(
            self._run_session(key, route.name, session)
        )
        log_event(
            self._logger,
            logging.INFO,
            "dialogue.dispatch.started",
            route=route.name,
            message_id=key,
            author_id=message.author_id,
            active_sessions=len(self._sessions),
        )
        return DispatchResult(status="started", route=route.name, session=session)

    def active_sessions(self) -> list[DialogueSession]:
        return list(self._sessions.values())

    def get_session(self, message_id: str) -> Optional[DialogueSession]:
        return self._sessions.get(message_id)

    async def wait_idle(self) -> None:
        """Wait until every started session has finished."""

        await self._idle_event.wait()

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run_session(
        self, key: str, route_name: str, session: DialogueSession
    ) -> None:
        try:
            await session.run()
        except asyncio.CancelledError:
            log_event(
                self._logger,
                logging.INFO,
                "dialogue.dispatch.cancelled",
                route=route_name,
                session_id=key,
            )
            raise
        except Exception as exc:
            # Failures stay inside this session's task.
            log_event(
                self._logger,
                logging.WARNING,
                "dialogue.dispatch.session_failed",
                route=route_name,
                session_id=key,
                exc=exc,
            )
        finally:
            self._sessions.pop(key, None)
            self._tasks.pop(key, None)
            if not self._tasks:
                self._idle_event.set()
