"""Builders for the two outbound messages of a pick-then-act dialogue."""

from __future__ import annotations

from typing import Sequence

from ..ports.dialogue import (
    ActionButton,
    ButtonRow,
    MenuOption,
    OutboundMessage,
    SelectMenu,
)


def build_selection_prompt(
    options: Sequence[MenuOption],
    *,
    content: str,
    placeholder: str,
    custom_id: str,
) -> OutboundMessage:
    if not options:
        raise ValueError("selection prompt requires at least one option")
    menu = SelectMenu(
        custom_id=custom_id,
        options=tuple(options),
        placeholder=placeholder,
    )
    return OutboundMessage(content=content, components=(menu,))


def build_action_prompt(
    selection: str,
    actions: Sequence[ActionButton],
    *,
    template: str,
) -> OutboundMessage:
    # One row only; the platform caps a row at five buttons.
    return OutboundMessage(
        content=template.format(selection=selection),
        components=(ButtonRow(buttons=tuple(actions)),),
    )
