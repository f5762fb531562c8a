"""Per-trigger dialogue state machine.

A session sends the selection prompt as a direct message, waits for exactly
one selection, swaps the menu for a row of action buttons, echoes every
button press back to the presser, and finally deletes the message so no
dead components are left behind.

    AWAITING_SELECTION --selection--> AWAITING_ACTION --window ends--> CLOSED
            |                                                    ^
            +-------------------- timeout -----------------------+

Any `DeliveryError` from the sender ends the session immediately; the
remaining lifecycle steps are skipped.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Any, Callable, Optional

from ..exceptions import DeliveryError
from ..logging_utils import log_event
from ..ports.dialogue import (
    EventSource,
    InboundMessage,
    InteractionKind,
    InteractionRef,
    MessageHandle,
    OutboundMessage,
    ResponseKind,
    ResponseSender,
)
from .definition import DialogueDefinition

DEFAULT_SELECTION_TIMEOUT_SECONDS = 180.0
DEFAULT_ACTION_TIMEOUT_SECONDS = 180.0


class SessionPhase(str, Enum):
    AWAITING_SELECTION = "awaiting_selection"
    AWAITING_ACTION = "awaiting_action"
    CLOSED = "closed"


class SessionOutcome(str, Enum):
    SELECTION_TIMEOUT = "selection_timeout"
    ACTION_WINDOW_ENDED = "action_window_ended"
    FAILED = "failed"
    CANCELLED = "cancelled"


class _OrderedReplies:
    """Sends ephemeral replies one at a time, in the order they were submitted.

    The session keeps receiving events while replies are in flight. The first
    failed send stops the worker and calls `on_failure`; `finish()` re-raises it.
    """

    def __init__(
        self, sender: ResponseSender, *, on_failure: Callable[[], None]
    ) -> None:
        self._sender = sender
        self._on_failure = on_failure
        self._queue: asyncio.Queue[Optional[tuple[InteractionRef, OutboundMessage]]] = (
            asyncio.Queue()
        )
        self._failure: Optional[Exception] = None
        self._task = asyncio.create_task(self._run())

    @property
    def failure(self) -> Optional[Exception]:
        return self._failure

    def submit(self, ref: InteractionRef, message: OutboundMessage) -> None:
        self._queue.put_nowait((ref, message))

    async def finish(self) -> None:
        self._queue.put_nowait(None)
        await self._task
        if self._failure is not None:
            raise self._failure

    async def cancel(self) -> None:
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            if item is None:
                return
            ref, message = item
            try:
                await self._sender.respond_to_interaction(
                    ref,
                    ResponseKind.NEW_REPLY_MESSAGE,
                    message,
                    ephemeral=True,
                )
            except Exception as exc:
                self._failure = exc
                self._on_failure()
                return


class DialogueSession:
    def __init__(
        self,
        trigger: InboundMessage,
        *,
        definition: DialogueDefinition,
        sender: ResponseSender,
        events: EventSource,
        logger: logging.Logger,
        store: Any = None,
        selection_timeout_seconds: float = DEFAULT_SELECTION_TIMEOUT_SECONDS,
        action_timeout_seconds: float = DEFAULT_ACTION_TIMEOUT_SECONDS,
    ) -> None:
        self._trigger = trigger
        self._definition = definition
        self._sender = sender
        self._events = events
        self._logger = logger
        # Shared read-mostly handle opened at startup; sessions never write to it.
        self.store = store
        self._selection_timeout = selection_timeout_seconds
        self._action_timeout = action_timeout_seconds
        self._phase = SessionPhase.AWAITING_SELECTION
        self._selected_value: Optional[str] = None
        self._origin_message: Optional[MessageHandle] = None
        self._outcome: Optional[SessionOutcome] = None
        self._phase_before_close: Optional[str] = None
        self._actions_handled = 0
        self._started = False

    @property
    def session_id(self) -> str:
        return self._trigger.message_id

    @property
    def owner_id(self) -> str:
        return self._trigger.author_id

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def selected_value(self) -> Optional[str]:
        return self._selected_value

    @property
    def origin_message(self) -> Optional[MessageHandle]:
        return self._origin_message

    @property
    def outcome(self) -> Optional[SessionOutcome]:
        return self._outcome

    @property
    def actions_handled(self) -> int:
        return self._actions_handled

    async def run(self) -> SessionOutcome:
        if self._started:
            raise RuntimeError(f"session {self.session_id} has already run")
        self._started = True
        log_event(
            self._logger,
            logging.INFO,
            "dialogue.session.started",
            dialogue=self._definition.name,
            session_id=self.session_id,
            owner_id=self.owner_id,
            channel_id=self._trigger.channel_id,
        )
        try:
            return await self._run()
        except DeliveryError as exc:
            self._close(SessionOutcome.FAILED)
            log_event(
                self._logger,
                logging.WARNING,
                "dialogue.session.failed",
                dialogue=self._definition.name,
                session_id=self.session_id,
                phase=self._phase_before_close,
                exc=exc,
            )
            raise
        except asyncio.CancelledError:
            self._close(SessionOutcome.CANCELLED)
            raise

    async def _run(self) -> SessionOutcome:
        handle = await self._sender.send_direct_message(
            self.owner_id, self._definition.selection_prompt()
        )
        self._origin_message = handle

        selection = await self._events.wait_for_interaction(
            handle,
            actor_id=self.owner_id,
            kind=InteractionKind.SELECTION,
            timeout=self._selection_timeout,
        )
        if selection is None:
            log_event(
                self._logger,
                logging.INFO,
                "dialogue.session.selection_timeout",
                dialogue=self._definition.name,
                session_id=self.session_id,
                timeout_seconds=self._selection_timeout,
            )
            # The menu stays as-is; no button UI was ever posted.
            await self._sender.reply_to_message(
                handle, self._definition.selection_timeout_text
            )
            return self._close(SessionOutcome.SELECTION_TIMEOUT)

        selected = self._record_selection(selection.payload)
        log_event(
            self._logger,
            logging.INFO,
            "dialogue.session.selected",
            dialogue=self._definition.name,
            session_id=self.session_id,
            selection=selected,
        )
        await self._sender.respond_to_interaction(
            selection.ref,
            ResponseKind.UPDATE_ORIGIN_MESSAGE,
            self._definition.action_prompt(selected),
        )
        self._phase = SessionPhase.AWAITING_ACTION

        await self._collect_actions(handle, selected)

        await self._sender.delete_message(handle)
        return self._close(SessionOutcome.ACTION_WINDOW_ENDED)

    async def _collect_actions(self, handle: MessageHandle, selected: str) -> None:
        stream = self._events.stream_interactions(
            handle,
            actor_id=self.owner_id,
            kind=InteractionKind.BUTTON_PRESS,
            timeout=self._action_timeout,
        )
        replies = _OrderedReplies(self._sender, on_failure=stream.close)
        try:
            async for interaction in stream:
                if replies.failure is not None:
                    break
                action = interaction.payload
                self._actions_handled += 1
                log_event(
                    self._logger,
                    logging.INFO,
                    "dialogue.session.action",
                    dialogue=self._definition.name,
                    session_id=self.session_id,
                    action=action,
                )
                replies.submit(
                    interaction.ref, self._definition.action_reply(selected, action)
                )
        except BaseException:
            stream.close()
            await replies.cancel()
            raise
        stream.close()
        await replies.finish()

    def _record_selection(self, value: str) -> str:
        if self._phase is not SessionPhase.AWAITING_SELECTION:
            raise RuntimeError(
                f"session {self.session_id} cannot accept a selection in {self._phase.value}"
            )
        if self._selected_value is not None:
            raise RuntimeError(f"session {self.session_id} already has a selection")
        self._selected_value = value
        return value

    def _close(self, outcome: SessionOutcome) -> SessionOutcome:
        self._phase_before_close = self._phase.value
        self._phase = SessionPhase.CLOSED
        self._outcome = outcome
        if outcome in (
            SessionOutcome.SELECTION_TIMEOUT,
            SessionOutcome.ACTION_WINDOW_ENDED,
        ):
            log_event(
                self._logger,
                logging.INFO,
                "dialogue.session.closed",
                dialogue=self._definition.name,
                session_id=self.session_id,
                outcome=outcome.value,
                actions_handled=self._actions_handled,
            )
        return outcome
