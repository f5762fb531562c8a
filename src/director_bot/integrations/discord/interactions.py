from __future__ import annotations

from typing import Any, Optional

from ...core.ports.dialogue import (
    ComponentInteraction,
    InboundMessage,
    InteractionKind,
    InteractionRef,
    MessageHandle,
)
from .constants import (
    DISCORD_COMPONENT_BUTTON,
    DISCORD_COMPONENT_STRING_SELECT,
    DISCORD_INTERACTION_TYPE_MESSAGE_COMPONENT,
)


def _as_id(value: object) -> str | None:
    if value is None:
        return None
    token = str(value).strip()
    return token or None


def _data(payload: dict[str, Any]) -> dict[str, Any]:
    data = payload.get("data")
    return data if isinstance(data, dict) else {}


def extract_interaction_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("id"))


def extract_interaction_token(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("token"))


def extract_channel_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("channel_id"))


def extract_user_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    # Guild interactions carry `member.user`, DM interactions carry `user`.
    member = interaction_payload.get("member")
    if isinstance(member, dict):
        member_user = member.get("user")
        if isinstance(member_user, dict):
            user_id = _as_id(member_user.get("id"))
            if user_id:
                return user_id
    user = interaction_payload.get("user")
    if isinstance(user, dict):
        return _as_id(user.get("id"))
    return None


def extract_message_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    message = interaction_payload.get("message")
    if not isinstance(message, dict):
        return None
    return _as_id(message.get("id"))


def is_component_interaction(interaction_payload: dict[str, Any]) -> bool:
    return (
        interaction_payload.get("type") == DISCORD_INTERACTION_TYPE_MESSAGE_COMPONENT
    )


def extract_component_custom_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(_data(interaction_payload).get("custom_id"))


def extract_component_type(interaction_payload: dict[str, Any]) -> Optional[int]:
    component_type = _data(interaction_payload).get("component_type")
    return component_type if isinstance(component_type, int) else None


def extract_component_values(interaction_payload: dict[str, Any]) -> list[str]:
    values = _data(interaction_payload).get("values")
    if not isinstance(values, list):
        return []
    return [str(v) for v in values if isinstance(v, (str, int, float))]


def parse_component_interaction(
    interaction_payload: dict[str, Any],
) -> Optional[ComponentInteraction]:
    """Normalize an INTERACTION_CREATE payload; None unless it is a usable component event."""

    if not is_component_interaction(interaction_payload):
        return None
    interaction_id = extract_interaction_id(interaction_payload)
    token = extract_interaction_token(interaction_payload)
    actor_id = extract_user_id(interaction_payload)
    message_id = extract_message_id(interaction_payload)
    custom_id = extract_component_custom_id(interaction_payload)
    if not interaction_id or not token or not actor_id or not message_id or not custom_id:
        return None

    message = interaction_payload.get("message")
    channel_id = extract_channel_id(interaction_payload)
    if channel_id is None and isinstance(message, dict):
        channel_id = _as_id(message.get("channel_id"))
    if channel_id is None:
        return None

    values = extract_component_values(interaction_payload)
    component_type = extract_component_type(interaction_payload)
    if component_type == DISCORD_COMPONENT_BUTTON:
        kind = InteractionKind.BUTTON_PRESS
    elif component_type == DISCORD_COMPONENT_STRING_SELECT or values:
        kind = InteractionKind.SELECTION
    else:
        kind = InteractionKind.BUTTON_PRESS
    if kind is InteractionKind.SELECTION and not values:
        return None

    return ComponentInteraction(
        ref=InteractionRef(interaction_id=interaction_id, token=token),
        actor_id=actor_id,
        message=MessageHandle(channel_id=channel_id, message_id=message_id),
        kind=kind,
        custom_id=custom_id,
        values=tuple(values),
    )


def parse_inbound_message(message_payload: dict[str, Any]) -> Optional[InboundMessage]:
    """Normalize a MESSAGE_CREATE payload; None when ids are missing."""

    message_id = _as_id(message_payload.get("id"))
    channel_id = _as_id(message_payload.get("channel_id"))
    author = message_payload.get("author")
    author_id = _as_id(author.get("id")) if isinstance(author, dict) else None
    if not message_id or not channel_id or not author_id:
        return None
    content = message_payload.get("content")
    return InboundMessage(
        message_id=message_id,
        channel_id=channel_id,
        author_id=author_id,
        body=content if isinstance(content, str) else "",
        guild_id=_as_id(message_payload.get("guild_id")),
        author_is_bot=bool(author.get("bot", False)),
    )
