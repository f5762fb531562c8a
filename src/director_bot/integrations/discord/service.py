from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from ...core.bootstrap import BootstrapStep, run_bootstrap_steps
from ...core.dialogue.definition import DialogueDefinition
from ...core.dialogue.director import DIRECTOR_DIALOGUE
from ...core.dialogue.router import (
    DialogueRoute,
    DispatchResult,
    ExactTextTrigger,
    SessionRouter,
)
from ...core.dialogue.session import DialogueSession
from ...core.logging_utils import log_event
from ...core.ports.dialogue import InboundMessage
from .collectors import ComponentCollectorHub
from .config import DirectorBotConfig
from .gateway import DiscordGatewayClient
from .interactions import (
    is_component_interaction,
    parse_component_interaction,
    parse_inbound_message,
)
from .rest import DiscordRestClient
from .sender import DiscordResponseSender
from .state import DiscordStateStore


class DirectorBotService:
    """Connects the gateway to the dialogue router.

    `MESSAGE_CREATE` events go to the `SessionRouter`; component interactions
    are fed to the collector hub, where a running session picks them up.
    """

    def __init__(
        self,
        config: DirectorBotConfig,
        *,
        logger: logging.Logger,
        rest_client: Optional[DiscordRestClient] = None,
        gateway_client: Optional[DiscordGatewayClient] = None,
        state_store: Optional[DiscordStateStore] = None,
        collector_hub: Optional[ComponentCollectorHub] = None,
        definition: DialogueDefinition = DIRECTOR_DIALOGUE,
    ) -> None:
        self._config = config
        self._logger = logger
        self._definition = definition

        self._rest = (
            rest_client
            if rest_client is not None
            else DiscordRestClient(bot_token=config.bot_token)
        )
        self._owns_rest = rest_client is None

        self._gateway = (
            gateway_client
            if gateway_client is not None
            else DiscordGatewayClient(
                bot_token=config.bot_token,
                intents=config.intents,
                logger=logger,
                rest_client=self._rest,
            )
        )
        self._owns_gateway = gateway_client is None

        self._store = (
            state_store
            if state_store is not None
            else DiscordStateStore(config.state_file)
        )
        self._owns_store = state_store is None

        self._hub = collector_hub or ComponentCollectorHub(logger=logger)
        self._sender = DiscordResponseSender(self._rest, logger=logger)
        self._router = SessionRouter(
            (
                DialogueRoute(
                    name=definition.name,
                    trigger=ExactTextTrigger(config.trigger),
                    factory=self._create_session,
                ),
            ),
            logger=logger,
        )

    @property
    def router(self) -> SessionRouter:
        return self._router

    @property
    def collector_hub(self) -> ComponentCollectorHub:
        return self._hub

    @property
    def store(self) -> DiscordStateStore:
        return self._store

    async def run_forever(self) -> None:
        try:
            await run_bootstrap_steps(
                surface="discord",
                logger=self._logger,
                steps=(
                    BootstrapStep(
                        name="open_state_store",
                        action=self._store.initialize,
                        required=True,
                    ),
                ),
            )
            log_event(
                self._logger,
                logging.INFO,
                "discord.bot.starting",
                state_file=str(self._config.state_file),
                trigger=self._config.trigger,
                intents=self._config.intents,
            )
            await self._gateway.run(self._on_dispatch)
        finally:
            await self._shutdown()

    async def handle_message(self, message: InboundMessage) -> DispatchResult:
        return await self._router.dispatch(message)

    def _create_session(self, message: InboundMessage) -> DialogueSession:
        return DialogueSession(
            message,
            definition=self._definition,
            sender=self._sender,
            events=self._hub,
            logger=self._logger,
            store=self._store,
            selection_timeout_seconds=self._config.selection_timeout_seconds,
            action_timeout_seconds=self._config.action_timeout_seconds,
        )

    async def _on_dispatch(self, event_type: str, payload: dict[str, Any]) -> None:
        if event_type == "MESSAGE_CREATE":
            message = parse_inbound_message(payload)
            if message is not None:
                await self._router.dispatch(message)
        elif event_type == "INTERACTION_CREATE":
            self._handle_interaction(payload)

    def _handle_interaction(self, interaction_payload: dict[str, Any]) -> None:
        if not is_component_interaction(interaction_payload):
            return
        interaction = parse_component_interaction(interaction_payload)
        if interaction is None:
            log_event(
                self._logger,
                logging.DEBUG,
                "discord.component.malformed",
                interaction_id=interaction_payload.get("id"),
            )
            return
        if not self._hub.feed(interaction):
            log_event(
                self._logger,
                logging.INFO,
                "discord.component.unclaimed",
                interaction_id=interaction.ref.interaction_id,
                message_id=interaction.message.message_id,
                actor_id=interaction.actor_id,
                custom_id=interaction.custom_id,
            )

    async def _shutdown(self) -> None:
        await self._shutdown_step("stop_gateway", self._gateway.stop, self._owns_gateway)
        await self._shutdown_step("cancel_sessions", self._router.shutdown, True)
        await self._shutdown_step("close_rest", self._rest.close, self._owns_rest)
        await self._shutdown_step("close_state_store", self._store.close, self._owns_store)

    async def _shutdown_step(
        self, name: str, action: Callable[[], Awaitable[None]], owned: bool
    ) -> None:
        if not owned:
            return
        try:
            await action()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Later shutdown steps still run.
            log_event(
                self._logger,
                logging.WARNING,
                "discord.bot.shutdown_step_failed",
                step=name,
                exc=exc,
            )


def create_director_bot_service(
    config: DirectorBotConfig,
    *,
    logger: logging.Logger,
) -> DirectorBotService:
    return DirectorBotService(config, logger=logger)
