from __future__ import annotations

from ..ports.dialogue import ActionButton, MenuOption
from .definition import DialogueDefinition

DIRECTOR_TRIGGER = "!director"
DIRECTOR_OPTION_ICON = "\N{CLAPPER BOARD}"
DIRECTOR_ACTION_ICON = "\N{CHEERING MEGAPHONE}"

DIRECTOR_OPTIONS: tuple[MenuOption, ...] = tuple(
    MenuOption(label=name, value=name, icon=DIRECTOR_OPTION_ICON)
    for name in (
        "Steven Spielberg",
        "Stanley Kubrick",
        "Martin Scorsese",
        "Alfred Hitchcock",
        "Quentin Tarantino",
    )
)

DIRECTOR_ACTIONS: tuple[ActionButton, ...] = tuple(
    ActionButton(name=name, icon=DIRECTOR_ACTION_ICON)
    for name in ("action", "cut", "print it", "another take", "that's a wrap")
)

DIRECTOR_DIALOGUE = DialogueDefinition(
    name="director",
    prompt_text="Please select your favorite director",
    placeholder="No director selected",
    menu_custom_id="director_select",
    options=DIRECTOR_OPTIONS,
    actions=DIRECTOR_ACTIONS,
    selection_template="You chose: **{selection}**\nNow choose a command!",
    action_reply_template="**{selection}** yells __{action}__!",
    selection_timeout_text="Sorry, I can't sit around waiting all day.",
)
