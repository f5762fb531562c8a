"""Pick-then-act dialogues: definitions, prompt builders, sessions and routing."""

from .definition import DialogueDefinition
from .director import (
    DIRECTOR_ACTIONS,
    DIRECTOR_DIALOGUE,
    DIRECTOR_OPTIONS,
    DIRECTOR_TRIGGER,
)
from .prompts import build_action_prompt, build_selection_prompt
from .router import (
    DialogueRoute,
    DispatchResult,
    ExactTextTrigger,
    SessionRouter,
)
from .session import (
    DEFAULT_ACTION_TIMEOUT_SECONDS,
    DEFAULT_SELECTION_TIMEOUT_SECONDS,
    DialogueSession,
    SessionOutcome,
    SessionPhase,
)

__all__ = [
    "DEFAULT_ACTION_TIMEOUT_SECONDS",
    "DEFAULT_SELECTION_TIMEOUT_SECONDS",
    "DIRECTOR_ACTIONS",
    "DIRECTOR_DIALOGUE",
    "DIRECTOR_OPTIONS",
    "DIRECTOR_TRIGGER",
    "DialogueDefinition",
    "DialogueRoute",
    "DialogueSession",
    "DispatchResult",
    "ExactTextTrigger",
    "SessionOutcome",
    "SessionPhase",
    "SessionRouter",
    "build_action_prompt",
    "build_selection_prompt",
]
