"""Platform-neutral contracts between dialogue sessions and a chat platform.

Sessions only ever see these types. Platform packages (see
`integrations/discord`) translate inbound payloads into them and implement
`ResponseSender`/`EventSource` on top of their own transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Optional, Protocol, Union, runtime_checkable


@dataclass(frozen=True)
class MenuOption:
    label: str
    value: str
    icon: str


@dataclass(frozen=True)
class ActionButton:
    name: str
    icon: str


@dataclass(frozen=True)
class SelectMenu:
    custom_id: str
    options: tuple[MenuOption, ...]
    placeholder: Optional[str] = None


@dataclass(frozen=True)
class ButtonRow:
    buttons: tuple[ActionButton, ...]


Component = Union[SelectMenu, ButtonRow]


@dataclass(frozen=True)
class OutboundMessage:
    content: str
    components: tuple[Component, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MessageHandle:
    """Reference to a message the bot has sent."""

    channel_id: str
    message_id: str


@dataclass(frozen=True)
class InboundMessage:
    """A newly created message seen by the bot."""

    message_id: str
    channel_id: str
    author_id: str
    body: str
    guild_id: Optional[str] = None
    author_is_bot: bool = False


class InteractionKind(str, Enum):
    SELECTION = "selection"
    BUTTON_PRESS = "button_press"


class ResponseKind(str, Enum):
    UPDATE_ORIGIN_MESSAGE = "update_origin_message"
    NEW_REPLY_MESSAGE = "new_reply_message"


@dataclass(frozen=True)
class InteractionRef:
    interaction_id: str
    token: str


@dataclass(frozen=True)
class ComponentInteraction:
    """A user's use of a component attached to one of the bot's messages."""

    ref: InteractionRef
    actor_id: str
    message: MessageHandle
    kind: InteractionKind
    custom_id: str
    values: tuple[str, ...] = field(default_factory=tuple)

    @property
    def payload(self) -> str:
        if self.kind is InteractionKind.SELECTION:
            return self.values[0] if self.values else ""
        return self.custom_id


@runtime_checkable
class ResponseSender(Protocol):
    """Outbound calls a session may make. Failures raise `DeliveryError`."""

    async def send_direct_message(
        self, recipient_id: str, message: OutboundMessage
    ) -> MessageHandle:
        """Open (or reuse) a DM with `recipient_id` and post `message` there."""

    async def reply_to_message(self, handle: MessageHandle, content: str) -> MessageHandle:
        """Post `content` as a reply to `handle` in the same channel."""

    async def edit_message(self, handle: MessageHandle, message: OutboundMessage) -> None:
        """Replace the content and components of `handle`.

        Sessions edit their prompt through `respond_to_interaction` with
        `UPDATE_ORIGIN_MESSAGE` instead, which also acknowledges the selection.
        """

    async def respond_to_interaction(
        self,
        ref: InteractionRef,
        kind: ResponseKind,
        message: OutboundMessage,
        *,
        ephemeral: bool = False,
    ) -> None:
        """Answer an interaction, either editing its message or posting a reply."""

    async def delete_message(self, handle: MessageHandle) -> None:
        """Delete `handle`; a message that is already gone counts as deleted."""


@runtime_checkable
class InteractionStream(Protocol):
    """Multi-shot subscription ending at its deadline or on `close()`."""

    def __aiter__(self) -> AsyncIterator[ComponentInteraction]: ...

    async def __anext__(self) -> ComponentInteraction: ...

    def close(self) -> None: ...


@runtime_checkable
class EventSource(Protocol):
    """Delivers component interactions scoped to one of the bot's messages."""

    async def wait_for_interaction(
        self,
        handle: MessageHandle,
        *,
        actor_id: str,
        kind: InteractionKind,
        timeout: float,
    ) -> Optional[ComponentInteraction]:
        """Return the first matching interaction, or None once `timeout` elapses."""

    def stream_interactions(
        self,
        handle: MessageHandle,
        *,
        actor_id: str,
        kind: InteractionKind,
        timeout: float,
    ) -> InteractionStream:
        """Subscribe to matching interactions until `timeout` or `close()`."""
