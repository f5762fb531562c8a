"""Discord bindings for the dialogue core."""

from .collectors import ComponentCollector, ComponentCollectorHub
from .components import (
    build_action_row,
    build_button,
    build_select_menu,
    build_select_option,
    render_components,
)
from .config import DirectorBotConfig, DirectorBotConfigError
from .constants import (
    DISCORD_API_BASE_URL,
    DISCORD_GATEWAY_URL,
    DISCORD_INTENT_DIRECT_MESSAGES,
    DISCORD_INTENT_GUILD_MESSAGES,
    DISCORD_INTENT_MESSAGE_CONTENT,
)
from .errors import (
    DiscordAPIError,
    DiscordConfigError,
    DiscordError,
    DiscordNotFoundError,
    DiscordPermanentError,
    DiscordTransientError,
)
from .gateway import (
    DiscordGatewayClient,
    GatewayFrame,
    build_identify_payload,
    calculate_reconnect_backoff,
    parse_gateway_frame,
)
from .interactions import parse_component_interaction, parse_inbound_message
from .rest import DiscordRestClient
from .sender import DiscordResponseSender
from .service import DirectorBotService, create_director_bot_service
from .state import DiscordStateStore

__all__ = [
    "DISCORD_API_BASE_URL",
    "DISCORD_GATEWAY_URL",
    "DISCORD_INTENT_DIRECT_MESSAGES",
    "DISCORD_INTENT_GUILD_MESSAGES",
    "DISCORD_INTENT_MESSAGE_CONTENT",
    "ComponentCollector",
    "ComponentCollectorHub",
    "DirectorBotConfig",
    "DirectorBotConfigError",
    "DirectorBotService",
    "DiscordAPIError",
    "DiscordConfigError",
    "DiscordError",
    "DiscordGatewayClient",
    "DiscordNotFoundError",
    "DiscordPermanentError",
    "DiscordResponseSender",
    "DiscordRestClient",
    "DiscordStateStore",
    "DiscordTransientError",
    "GatewayFrame",
    "build_action_row",
    "build_button",
    "build_identify_payload",
    "build_select_menu",
    "build_select_option",
    "calculate_reconnect_backoff",
    "create_director_bot_service",
    "parse_component_interaction",
    "parse_gateway_frame",
    "parse_inbound_message",
    "render_components",
]
