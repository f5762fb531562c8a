from __future__ import annotations

DISCORD_API_BASE_URL = "https://discord.com/api/v10"
DISCORD_GATEWAY_URL = "wss://gateway.discord.gg/?v=10&encoding=json"

# Gateway intents bitflags (https://discord.com/developers/docs/topics/gateway#gateway-intents).
DISCORD_INTENT_GUILD_MESSAGES = 1 << 9
DISCORD_INTENT_DIRECT_MESSAGES = 1 << 12
DISCORD_INTENT_MESSAGE_CONTENT = 1 << 15

# Interaction types.
DISCORD_INTERACTION_TYPE_MESSAGE_COMPONENT = 3

# Message component types.
DISCORD_COMPONENT_ACTION_ROW = 1
DISCORD_COMPONENT_BUTTON = 2
DISCORD_COMPONENT_STRING_SELECT = 3

# Interaction callback types.
DISCORD_CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE = 4
DISCORD_CALLBACK_UPDATE_MESSAGE = 7

DISCORD_EPHEMERAL_FLAG = 64

# JSON error code returned when a user does not accept DMs from the bot.
DISCORD_ERROR_CANNOT_MESSAGE_USER = 50007
