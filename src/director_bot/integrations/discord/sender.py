"""`ResponseSender` implementation on top of the Discord REST client."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ...core.exceptions import DeliveryError
from ...core.logging_utils import log_event
from ...core.ports.dialogue import (
    InteractionRef,
    MessageHandle,
    OutboundMessage,
    ResponseKind,
)
from .components import render_components
from .constants import (
    DISCORD_CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE,
    DISCORD_CALLBACK_UPDATE_MESSAGE,
    DISCORD_EPHEMERAL_FLAG,
    DISCORD_ERROR_CANNOT_MESSAGE_USER,
)
from .errors import DiscordAPIError, DiscordNotFoundError
from .rest import DiscordRestClient


def _message_payload(message: OutboundMessage) -> dict[str, Any]:
    return {
        "content": message.content,
        "components": render_components(message.components),
    }


def _handle_from_response(
    response: dict[str, Any], *, fallback_channel_id: str, operation: str
) -> MessageHandle:
    message_id = response.get("id")
    if not isinstance(message_id, str) or not message_id:
        raise DeliveryError(f"Discord {operation} response did not include a message id")
    channel_id = response.get("channel_id")
    if not isinstance(channel_id, str) or not channel_id:
        channel_id = fallback_channel_id
    return MessageHandle(channel_id=channel_id, message_id=message_id)


class DiscordResponseSender:
    def __init__(
        self,
        rest: DiscordRestClient,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._rest = rest
        self._logger = logger or logging.getLogger(__name__)
        self._dm_channels: dict[str, str] = {}

    async def send_direct_message(
        self, recipient_id: str, message: OutboundMessage
    ) -> MessageHandle:
        try:
            channel_id = await self._dm_channel_for(recipient_id)
            response = await self._rest.create_channel_message(
                channel_id=channel_id, payload=_message_payload(message)
            )
        except DiscordAPIError as exc:
            if exc.error_code == DISCORD_ERROR_CANNOT_MESSAGE_USER:
                raise DeliveryError(
                    f"user {recipient_id} does not accept direct messages"
                ) from exc
            raise DeliveryError(
                f"failed to send direct message to {recipient_id}: {exc}"
            ) from exc
        return _handle_from_response(
            response, fallback_channel_id=channel_id, operation="direct message"
        )

    async def reply_to_message(self, handle: MessageHandle, content: str) -> MessageHandle:
        payload = {
            "content": content,
            "message_reference": {
                "message_id": handle.message_id,
                "channel_id": handle.channel_id,
            },
        }
        try:
            response = await self._rest.create_channel_message(
                channel_id=handle.channel_id, payload=payload
            )
        except DiscordAPIError as exc:
            raise DeliveryError(
                f"failed to reply to message {handle.message_id}: {exc}"
            ) from exc
        return _handle_from_response(
            response, fallback_channel_id=handle.channel_id, operation="reply"
        )

    async def edit_message(self, handle: MessageHandle, message: OutboundMessage) -> None:
        # Dialogue sessions swap their prompt via an interaction update instead.
        try:
            await self._rest.edit_channel_message(
                channel_id=handle.channel_id,
                message_id=handle.message_id,
                payload=_message_payload(message),
            )
        except DiscordAPIError as exc:
            raise DeliveryError(
                f"failed to edit message {handle.message_id}: {exc}"
            ) from exc

    async def respond_to_interaction(
        self,
        ref: InteractionRef,
        kind: ResponseKind,
        message: OutboundMessage,
        *,
        ephemeral: bool = False,
    ) -> None:
        data = _message_payload(message)
        if ephemeral:
            data["flags"] = DISCORD_EPHEMERAL_FLAG
        callback_type = (
            DISCORD_CALLBACK_UPDATE_MESSAGE
            if kind is ResponseKind.UPDATE_ORIGIN_MESSAGE
            else DISCORD_CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE
        )
        try:
            await self._rest.create_interaction_response(
                interaction_id=ref.interaction_id,
                interaction_token=ref.token,
                payload={"type": callback_type, "data": data},
            )
        except DiscordAPIError as exc:
            raise DeliveryError(
                f"failed to respond to interaction {ref.interaction_id}: {exc}"
            ) from exc

    async def delete_message(self, handle: MessageHandle) -> None:
        try:
            await self._rest.delete_channel_message(
                channel_id=handle.channel_id, message_id=handle.message_id
            )
        except DiscordNotFoundError:
            log_event(
                self._logger,
                logging.DEBUG,
                "discord.message.already_deleted",
                channel_id=handle.channel_id,
                message_id=handle.message_id,
            )
        except DiscordAPIError as exc:
            raise DeliveryError(
                f"failed to delete message {handle.message_id}: {exc}"
            ) from exc

    async def _dm_channel_for(self, recipient_id: str) -> str:
        cached = self._dm_channels.get(recipient_id)
        if cached:
            return cached
        response = await self._rest.create_dm_channel(recipient_id=recipient_id)
        channel_id = response.get("id")
        if not isinstance(channel_id, str) or not channel_id:
            raise DeliveryError(f"could not open a DM channel with {recipient_id}")
        self._dm_channels[recipient_id] = channel_id
        return channel_id
