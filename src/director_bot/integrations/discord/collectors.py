"""Component interaction collectors (the `EventSource` for Discord sessions).

The service feeds every component interaction from the gateway into a
`ComponentCollectorHub`. Sessions subscribe to interactions on one of their
own messages; each subscription owns an `asyncio.Queue` mailbox and a
deadline fixed when it is created.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ...core.ports.dialogue import (
    ComponentInteraction,
    InteractionKind,
    MessageHandle,
)

_CLOSED = None


class ComponentCollector:
    """One subscription: yields matching interactions until its deadline or `close()`."""

    def __init__(
        self,
        hub: "ComponentCollectorHub",
        handle: MessageHandle,
        *,
        actor_id: str,
        kind: InteractionKind,
        timeout: float,
    ) -> None:
        self._hub = hub
        self._handle = handle
        self._actor_id = actor_id
        self._kind = kind
        self._loop = asyncio.get_running_loop()
        self._deadline = self._loop.time() + max(float(timeout), 0.0)
        self._queue: asyncio.Queue[Optional[ComponentInteraction]] = asyncio.Queue()
        self._closed = False
        self._received = 0

    @property
    def message_id(self) -> str:
        return self._handle.message_id

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def received(self) -> int:
        return self._received

    def matches(self, interaction: ComponentInteraction) -> bool:
        return (
            interaction.message.message_id == self._handle.message_id
            and interaction.actor_id == self._actor_id
            and interaction.kind is self._kind
        )

    def offer(self, interaction: ComponentInteraction) -> bool:
        if self._closed or not self.matches(interaction):
            return False
        if self._loop.time() >= self._deadline:
            self.close()
            return False
        self._received += 1
        self._queue.put_nowait(interaction)
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._hub._unregister(self)
        # Interactions already queued are still yielded before the stream ends.
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "ComponentCollector":
        return self

    async def __anext__(self) -> ComponentInteraction:
        item = await self.next()
        if item is None:
            raise StopAsyncIteration
        return item

    async def next(self) -> Optional[ComponentInteraction]:
        """Return the next interaction, or None once the subscription has ended."""

        if self._queue.empty():
            if self._closed:
                return None
            remaining = self._deadline - self._loop.time()
            if remaining <= 0:
                self.close()
                return None
            try:
                item = await asyncio.wait_for(self._queue.get(), timeout=remaining)
            except asyncio.TimeoutError:
                self.close()
                return None
        else:
            item = self._queue.get_nowait()
        if item is _CLOSED:
            return None
        return item


class ComponentCollectorHub:
    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._collectors: dict[str, list[ComponentCollector]] = {}

    def feed(self, interaction: ComponentInteraction) -> bool:
        """Hand `interaction` to the first live matching collector; False if none took it."""

        for collector in list(self._collectors.get(interaction.message.message_id, ())):
            if collector.offer(interaction):
                return True
        return False

    def active_collectors(self, message_id: Optional[str] = None) -> int:
        if message_id is not None:
            return len(self._collectors.get(message_id, ()))
        return sum(len(items) for items in self._collectors.values())

    async def wait_for_interaction(
        self,
        handle: MessageHandle,
        *,
        actor_id: str,
        kind: InteractionKind,
        timeout: float,
    ) -> Optional[ComponentInteraction]:
        collector = self._register(handle, actor_id=actor_id, kind=kind, timeout=timeout)
        try:
            return await collector.next()
        finally:
            collector.close()

    def stream_interactions(
        self,
        handle: MessageHandle,
        *,
        actor_id: str,
        kind: InteractionKind,
        timeout: float,
    ) -> ComponentCollector:
        return self._register(handle, actor_id=actor_id, kind=kind, timeout=timeout)

    def _register(
        self,
        handle: MessageHandle,
        *,
        actor_id: str,
        kind: InteractionKind,
        timeout: float,
    ) -> ComponentCollector:
        collector = ComponentCollector(
            self, handle, actor_id=actor_id, kind=kind, timeout=timeout
        )
        self._collectors.setdefault(handle.message_id, []).append(collector)
        return collector

    def _unregister(self, collector: ComponentCollector) -> None:
        items = self._collectors.get(collector.message_id)
        if not items:
            return
        if collector in items:
            items.remove(collector)
        if not items:
            self._collectors.pop(collector.message_id, None)
