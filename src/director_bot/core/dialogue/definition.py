from __future__ import annotations

from dataclasses import dataclass

from ..ports.dialogue import ActionButton, MenuOption, OutboundMessage
from .prompts import build_action_prompt, build_selection_prompt

MAX_MENU_OPTIONS = 25
MAX_ROW_BUTTONS = 5


@dataclass(frozen=True)
class DialogueDefinition:
    """Everything a pick-then-act dialogue says and offers, as data."""

    name: str
    prompt_text: str
    placeholder: str
    menu_custom_id: str
    options: tuple[MenuOption, ...]
    actions: tuple[ActionButton, ...]
    selection_template: str
    action_reply_template: str
    selection_timeout_text: str

    def __post_init__(self) -> None:
        if not self.options:
            raise ValueError(f"dialogue {self.name!r} needs at least one option")
        if len(self.options) > MAX_MENU_OPTIONS:
            raise ValueError(
                f"dialogue {self.name!r} has more than {MAX_MENU_OPTIONS} options"
            )
        values = [option.value for option in self.options]
        if len(set(values)) != len(values):
            raise ValueError(f"dialogue {self.name!r} has duplicate option values")
        if not self.actions or len(self.actions) > MAX_ROW_BUTTONS:
            raise ValueError(
                f"dialogue {self.name!r} needs between 1 and {MAX_ROW_BUTTONS} actions"
            )
        names = [action.name for action in self.actions]
        if len(set(names)) != len(names):
            raise ValueError(f"dialogue {self.name!r} has duplicate action names")

    def selection_prompt(self) -> OutboundMessage:
        return build_selection_prompt(
            self.options,
            content=self.prompt_text,
            placeholder=self.placeholder,
            custom_id=self.menu_custom_id,
        )

    def action_prompt(self, selection: str) -> OutboundMessage:
        return build_action_prompt(
            selection, self.actions, template=self.selection_template
        )

    def action_reply(self, selection: str, action: str) -> OutboundMessage:
        return OutboundMessage(
            content=self.action_reply_template.format(
                selection=selection, action=action
            )
        )
