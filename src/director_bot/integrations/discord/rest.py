from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx

from .constants import DISCORD_API_BASE_URL
from .errors import (
    DiscordAPIError,
    DiscordNotFoundError,
    DiscordPermanentError,
    DiscordTransientError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_RATE_LIMIT_RETRIES = 3


def _error_code(response: httpx.Response) -> Optional[int]:
    try:
        body = response.json()
    except ValueError:
        return None
    code = body.get("code") if isinstance(body, dict) else None
    return code if isinstance(code, int) else None


def _retry_after(response: httpx.Response) -> Optional[float]:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return 0.0


class DiscordRestClient:
    """Thin async client for the handful of Discord REST routes the bot uses.

    Only HTTP 429 is retried, honouring the platform's `Retry-After`; every
    other failure is raised to the caller as a `DiscordAPIError` subclass.
    """

    def __init__(
        self,
        *,
        bot_token: str,
        timeout_seconds: float = 10.0,
        base_url: str = DISCORD_API_BASE_URL,
        max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout_seconds)
        self._authorization_header = f"Bot {bot_token}"
        self._max_rate_limit_retries = max_rate_limit_retries

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DiscordRestClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | None = None,
        expect_json: bool = True,
    ) -> Any:
        rate_limit_retries = 0

        while True:
            try:
                response = await self._client.request(
                    method,
                    path,
                    json=payload,
                    headers={"Authorization": self._authorization_header},
                )
            except httpx.HTTPError as exc:
                raise DiscordTransientError(
                    f"Discord API network error for {method} {path}: {exc}"
                ) from exc

            status_code = response.status_code
            if 200 <= status_code < 300:
                break

            retry_after = _retry_after(response)
            if status_code == 429:
                if (
                    retry_after is not None
                    and rate_limit_retries < self._max_rate_limit_retries
                ):
                    rate_limit_retries += 1
                    logger.info(
                        "Discord rate limited on %s %s, retrying after %.2fs (attempt %d)",
                        method,
                        path,
                        retry_after,
                        rate_limit_retries,
                    )
                    await asyncio.sleep(retry_after)
                    continue
                raise DiscordTransientError(
                    f"Discord API rate limit exceeded for {method} {path}",
                    status_code=status_code,
                    retry_after=retry_after,
                )

            error_code = _error_code(response)
            body_preview = (response.text or "").strip().replace("\n", " ")[:200]
            detail = f"status={status_code} code={error_code} body={body_preview!r}"
            if status_code == 404:
                raise DiscordNotFoundError(
                    f"Discord resource not found for {method} {path}: {detail}",
                    status_code=status_code,
                    error_code=error_code,
                )
            if status_code in {401, 403}:
                raise DiscordPermanentError(
                    f"Discord API refused {method} {path}: {detail}",
                    status_code=status_code,
                    error_code=error_code,
                )
            if 500 <= status_code < 600:
                raise DiscordTransientError(
                    f"Discord API server error for {method} {path}: {detail}",
                    status_code=status_code,
                    error_code=error_code,
                )
            raise DiscordAPIError(
                f"Discord API request failed for {method} {path}: {detail}",
                status_code=status_code,
                error_code=error_code,
            )

        if not expect_json or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise DiscordAPIError(
                f"Discord API returned non-JSON success response for {method} {path}",
                status_code=response.status_code,
            ) from exc

    async def get_gateway_bot(self) -> dict[str, Any]:
        payload = await self._request("GET", "/gateway/bot")
        return payload if isinstance(payload, dict) else {}

    async def create_dm_channel(self, *, recipient_id: str) -> dict[str, Any]:
        response = await self._request(
            "POST",
            "/users/@me/channels",
            payload={"recipient_id": recipient_id},
        )
        return response if isinstance(response, dict) else {}

    async def create_channel_message(
        self,
        *,
        channel_id: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/channels/{channel_id}/messages",
            payload=payload,
        )
        return response if isinstance(response, dict) else {}

    async def edit_channel_message(
        self,
        *,
        channel_id: str,
        message_id: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "PATCH",
            f"/channels/{channel_id}/messages/{message_id}",
            payload=payload,
        )
        return response if isinstance(response, dict) else {}

    async def delete_channel_message(
        self,
        *,
        channel_id: str,
        message_id: str,
    ) -> None:
        await self._request(
            "DELETE",
            f"/channels/{channel_id}/messages/{message_id}",
            expect_json=False,
        )

    async def create_interaction_response(
        self,
        *,
        interaction_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> None:
        await self._request(
            "POST",
            f"/interactions/{interaction_id}/{interaction_token}/callback",
            payload=payload,
            expect_json=False,
        )
