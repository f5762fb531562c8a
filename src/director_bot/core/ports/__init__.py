from .dialogue import (
    ActionButton,
    ButtonRow,
    Component,
    ComponentInteraction,
    EventSource,
    InboundMessage,
    InteractionKind,
    InteractionRef,
    InteractionStream,
    MenuOption,
    MessageHandle,
    OutboundMessage,
    ResponseKind,
    ResponseSender,
    SelectMenu,
)

__all__ = [
    "ActionButton",
    "ButtonRow",
    "Component",
    "ComponentInteraction",
    "EventSource",
    "InboundMessage",
    "InteractionKind",
    "InteractionRef",
    "InteractionStream",
    "MenuOption",
    "MessageHandle",
    "OutboundMessage",
    "ResponseKind",
    "ResponseSender",
    "SelectMenu",
]
