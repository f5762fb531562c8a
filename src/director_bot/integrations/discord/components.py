from __future__ import annotations

from typing import Any, Optional, Sequence

from ...core.ports.dialogue import ButtonRow, Component, SelectMenu
from .constants import (
    DISCORD_COMPONENT_ACTION_ROW,
    DISCORD_COMPONENT_BUTTON,
    DISCORD_COMPONENT_STRING_SELECT,
)

DISCORD_BUTTON_STYLE_PRIMARY = 1
DISCORD_BUTTON_STYLE_SECONDARY = 2
DISCORD_BUTTON_STYLE_SUCCESS = 3
DISCORD_BUTTON_STYLE_DANGER = 4
DISCORD_SELECT_OPTION_MAX_OPTIONS = 25
DISCORD_ACTION_ROW_MAX_BUTTONS = 5


def build_action_row(components: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "type": DISCORD_COMPONENT_ACTION_ROW,
        "components": components,
    }


def build_button(
    label: str,
    custom_id: str,
    *,
    style: int = DISCORD_BUTTON_STYLE_PRIMARY,
    emoji: Optional[str] = None,
    disabled: bool = False,
) -> dict[str, Any]:
    button: dict[str, Any] = {
        "type": DISCORD_COMPONENT_BUTTON,
        "style": style,
        "label": label[:80],
        "custom_id": custom_id[:100],
        "disabled": disabled,
    }
    if emoji:
        button["emoji"] = {"name": emoji}
    return button


def build_select_menu(
    custom_id: str,
    options: list[dict[str, Any]],
    *,
    placeholder: Optional[str] = None,
    min_values: int = 1,
    max_values: int = 1,
) -> dict[str, Any]:
    select: dict[str, Any] = {
        "type": DISCORD_COMPONENT_STRING_SELECT,
        "custom_id": custom_id[:100],
        "options": options[:DISCORD_SELECT_OPTION_MAX_OPTIONS],
        "min_values": min_values,
        "max_values": min(max_values, DISCORD_SELECT_OPTION_MAX_OPTIONS),
    }
    if placeholder:
        select["placeholder"] = placeholder[:150]
    return select


def build_select_option(
    label: str,
    value: str,
    *,
    description: Optional[str] = None,
    emoji: Optional[str] = None,
) -> dict[str, Any]:
    option: dict[str, Any] = {
        "label": label[:100],
        "value": value[:100],
    }
    if description:
        option["description"] = description[:100]
    if emoji:
        option["emoji"] = {"name": emoji}
    return option


def render_select_menu(menu: SelectMenu) -> dict[str, Any]:
    # The icon is part of the visible label ("🎬 Stanley Kubrick"); the value stays bare.
    options = [
        build_select_option(
            f"{option.icon} {option.label}" if option.icon else option.label,
            option.value,
        )
        for option in menu.options
    ]
    return build_action_row(
        [build_select_menu(menu.custom_id, options, placeholder=menu.placeholder)]
    )


def render_button_row(row: ButtonRow) -> dict[str, Any]:
    buttons = [
        build_button(button.name, button.name, emoji=button.icon or None)
        for button in row.buttons[:DISCORD_ACTION_ROW_MAX_BUTTONS]
    ]
    return build_action_row(buttons)


def render_components(components: Sequence[Component]) -> list[dict[str, Any]]:
    """Translate neutral component descriptors into Discord action rows."""

    rows: list[dict[str, Any]] = []
    for component in components:
        if isinstance(component, SelectMenu):
            rows.append(render_select_menu(component))
        elif isinstance(component, ButtonRow):
            rows.append(render_button_row(component))
        else:
            raise TypeError(f"unsupported component: {component!r}")
    return rows
