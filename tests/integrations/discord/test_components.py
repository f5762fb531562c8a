from __future__ import annotations

import pytest

from director_bot.core.dialogue.director import DIRECTOR_DIALOGUE
from director_bot.integrations.discord.components import (
    DISCORD_BUTTON_STYLE_PRIMARY,
    build_button,
    build_select_menu,
    build_select_option,
    render_components,
)
from director_bot.integrations.discord.constants import (
    DISCORD_COMPONENT_ACTION_ROW,
    DISCORD_COMPONENT_BUTTON,
    DISCORD_COMPONENT_STRING_SELECT,
)


def test_build_button_truncates_and_sets_emoji() -> None:
    button = build_button("x" * 120, "y" * 150, emoji="\N{CHEERING MEGAPHONE}")
    assert button["type"] == DISCORD_COMPONENT_BUTTON
    assert button["style"] == DISCORD_BUTTON_STYLE_PRIMARY
    assert len(button["label"]) == 80
    assert len(button["custom_id"]) == 100
    assert button["emoji"] == {"name": "\N{CHEERING MEGAPHONE}"}
    assert button["disabled"] is False


def test_build_select_menu_caps_options() -> None:
    options = [build_select_option(f"Option {i}", f"v{i}") for i in range(30)]
    menu = build_select_menu("menu", options, placeholder="Pick", max_values=40)
    assert menu["type"] == DISCORD_COMPONENT_STRING_SELECT
    assert len(menu["options"]) == 25
    assert menu["max_values"] == 25
    assert menu["placeholder"] == "Pick"


def test_render_selection_prompt_as_select_menu_row() -> None:
    rows = render_components(DIRECTOR_DIALOGUE.selection_prompt().components)

    assert len(rows) == 1
    row = rows[0]
    assert row["type"] == DISCORD_COMPONENT_ACTION_ROW
    (menu,) = row["components"]
    assert menu["custom_id"] == "director_select"
    assert menu["placeholder"] == "No director selected"
    assert menu["min_values"] == 1
    assert menu["max_values"] == 1
    assert menu["options"][1] == {
        "label": "\N{CLAPPER BOARD} Stanley Kubrick",
        "value": "Stanley Kubrick",
    }


def test_render_action_prompt_as_button_row() -> None:
    rows = render_components(DIRECTOR_DIALOGUE.action_prompt("Stanley Kubrick").components)

    assert len(rows) == 1
    buttons = rows[0]["components"]
    assert [button["label"] for button in buttons] == [
        "action",
        "cut",
        "print it",
        "another take",
        "that's a wrap",
    ]
    assert [button["custom_id"] for button in buttons] == [
        button["label"] for button in buttons
    ]
    assert all(button["style"] == DISCORD_BUTTON_STYLE_PRIMARY for button in buttons)
    assert all(
        button["emoji"] == {"name": "\N{CHEERING MEGAPHONE}"} for button in buttons
    )


def test_render_components_rejects_unknown_component() -> None:
    with pytest.raises(TypeError):
        render_components([{"type": 1}])  # type: ignore[list-item]
