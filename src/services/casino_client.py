"""
UAS Bot - ATIVE Casino Client
=============================

HTTP client for the casino bot's session-management API.

DESIGN:
    Every request goes to {base_url}/uas/sessions/{endpoint} with the
    x-uas-api-key / x-uas-bot-id headers. Failures never raise to the
    caller: non-2xx responses and transport errors become
    {"success": False, "error": ..., "code": "REQUEST_FAILED"}.
    There is no retry; the casino bot owns session state and a repeated
    stop or release is the operator's decision.

    One aiohttp.ClientSession is created lazily and closed on shutdown.
"""

import asyncio
import time
from typing import Any, Dict, Iterable, List, Optional

import aiohttp

from src.core.logger import logger
from src.core.constants import (
    CASINO_DEFAULT_API_KEY,
    CASINO_DEFAULT_BASE_URL,
    CASINO_DEFAULT_BOT_ID,
    CASINO_EMERGENCY_CONFIRMATION_CODE,
)


REQUEST_FAILED = "REQUEST_FAILED"


class CasinoAPIError(Exception):
    """Raised internally for non-2xx responses."""

    pass


class CasinoClient:
    """
    Client for the casino bot's /uas/sessions API.

    Attributes:
        base_url: Casino bot base URL.
        api_key: Shared secret sent as x-uas-api-key.
        bot_id: This bot's ID sent as x-uas-bot-id.
        timeout: Total request timeout in seconds.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        bot_id: Optional[str] = None,
        timeout: int = 10,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.base_url = (base_url or CASINO_DEFAULT_BASE_URL).rstrip("/")
        self.api_key = api_key or CASINO_DEFAULT_API_KEY
        self.bot_id = str(bot_id or CASINO_DEFAULT_BOT_ID)
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config) -> "CasinoClient":
        """Build a client from the bot Config."""
        return cls(
            base_url=config.casino_base_url,
            api_key=config.casino_api_key,
            bot_id=config.uas_bot_id,
            timeout=config.casino_timeout,
        )

    # =========================================================================
    # Session Lifecycle
    # =========================================================================

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.info("Casino Client Session Closed")
        self._session = None

    # =========================================================================
    # Transport
    # =========================================================================

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "x-uas-api-key": self.api_key,
            "x-uas-bot-id": self.bot_id,
            "Content-Type": "application/json",
        }

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/uas/sessions/{endpoint}"

    async def _request(
        self,
        endpoint: str,
        method: str = "GET",
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an authenticated request.

        Returns:
            The decoded JSON body, or a REQUEST_FAILED dict.
        """
        kwargs: Dict[str, Any] = {"headers": self.headers}
        if data is not None and method in ("POST", "PUT"):
            kwargs["json"] = data

        try:
            session = self._get_session()
            async with session.request(method, self._url(endpoint), **kwargs) as response:
                try:
                    result = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError):
                    result = None
                if not isinstance(result, dict):
                    result = {}

                if not 200 <= response.status < 300:
                    raise CasinoAPIError(
                        f"HTTP {response.status}: {result.get('error') or 'Unknown error'}"
                    )
                return result

        except (CasinoAPIError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            error = str(e) or type(e).__name__
            logger.error("Casino API Request Failed", [
                ("Endpoint", endpoint),
                ("Method", method),
                ("Error Type", type(e).__name__),
                ("Error", error[:100]),
            ])
            return {"success": False, "error": error, "code": REQUEST_FAILED}

    # =========================================================================
    # Session Operations
    # =========================================================================

    async def get_user_sessions(self, user_id: int) -> Dict[str, Any]:
        """Get a user's active casino sessions."""
        result = await self._request(f"user/{user_id}")
        if result.get("success"):
            logger.debug("Casino Sessions Retrieved", [
                ("User ID", str(user_id)),
                ("Count", str(int(result.get("count") or 0))),
            ])
        return result

    async def stop_user_sessions(
        self,
        user_id: int,
        guild_id: int,
        requested_by: str = "UAS Bot",
    ) -> Dict[str, Any]:
        """Stop a user's sessions with refunds."""
        result = await self._request("stop", "POST", {
            "userId": str(user_id),
            "guildId": str(guild_id),
            "requestedBy": requested_by,
        })
        if result.get("success"):
            logger.tree("Casino Sessions Stopped", [
                ("User ID", str(user_id)),
                ("Sessions", str(int(result.get("sessionsCleaned") or 0))),
                ("Refunded", f"${int(result.get('totalRefunded') or 0):,}"),
                ("Requested By", requested_by),
            ], emoji="🛑")
        return result

    async def release_user_sessions(
        self,
        user_id: int,
        guild_id: int,
        requested_by: str = "UAS Bot",
    ) -> Dict[str, Any]:
        """Release a user's stuck sessions."""
        result = await self._request("release", "POST", {
            "userId": str(user_id),
            "guildId": str(guild_id),
            "requestedBy": requested_by,
        })
        if result.get("success"):
            logger.tree("Casino Sessions Released", [
                ("User ID", str(user_id)),
                ("Sessions", str(int(result.get("sessionsCleaned") or 0))),
                ("Refunded", f"${int(result.get('totalRefunded') or 0):,}"),
                ("Requested By", requested_by),
            ], emoji="🧹")
        return result

    async def can_user_start_game(self, user_id: int, guild_id: int, game_type: str) -> Dict[str, Any]:
        return await self._request("can-start", "POST", {
            "userId": str(user_id),
            "guildId": str(guild_id),
            "gameType": game_type,
        })

    async def get_system_stats(self) -> Dict[str, Any]:
        result = await self._request("stats")
        if result.get("success"):
            stats = result.get("stats") or {}
            logger.debug("Casino Stats Retrieved", [
                ("Active Sessions", str(stats.get("activeSessions", 0))),
                ("Unique Users", str(stats.get("uniqueUsers", 0))),
            ])
        return result

    async def emergency_cleanup_all(
        self,
        requested_by: str,
        confirmation_code: str = CASINO_EMERGENCY_CONFIRMATION_CODE,
    ) -> Dict[str, Any]:
        """Clear every session on the casino bot (developer only)."""
        result = await self._request("emergency-cleanup", "POST", {
            "requestedBy": requested_by,
            "confirmationCode": confirmation_code,
        })
        if result.get("success"):
            logger.warning("Casino Emergency Cleanup", [
                ("Sessions Cleared", str(int(result.get("sessionsCleaned") or 0))),
                ("Requested By", requested_by),
            ])
        return result

    async def test_connection(self) -> Dict[str, Any]:
        """Check that the API answers through the stats endpoint."""
        result = await self.get_system_stats()
        if result.get("success"):
            return {
                "success": True,
                "message": "Connection established successfully",
                "stats": result.get("stats") or {},
            }
        return {"success": False, "error": result.get("error", "Unknown error")}

    async def bulk_stop_sessions(
        self,
        user_ids: Iterable[int],
        guild_id: int,
        requested_by: str = "UAS Bot Bulk",
    ) -> Dict[str, Any]:
        """
        Stop sessions for several users, one request each.

        Returns:
            Aggregate dict: success (any user succeeded), processed,
            successful, total_sessions_cleaned, total_refunded, results.
        """
        user_ids = list(user_ids)
        results: List[Dict[str, Any]] = []

        for user_id in user_ids:
            result = await self.stop_user_sessions(user_id, guild_id, requested_by)
            results.append({
                "user_id": user_id,
                "success": bool(result.get("success")),
                "sessions_cleaned": int(result.get("sessionsCleaned") or 0),
                "total_refunded": int(result.get("totalRefunded") or 0),
                "error": result.get("error"),
            })

        successful = sum(1 for r in results if r["success"])
        total_cleaned = sum(r["sessions_cleaned"] for r in results)
        total_refunded = sum(r["total_refunded"] for r in results)

        logger.tree("Casino Bulk Stop Completed", [
            ("Users", f"{successful}/{len(user_ids)}"),
            ("Sessions", str(total_cleaned)),
            ("Refunded", f"${total_refunded:,}"),
        ], emoji="🔄")

        return {
            "success": successful > 0,
            "processed": len(user_ids),
            "successful": successful,
            "total_sessions_cleaned": total_cleaned,
            "total_refunded": total_refunded,
            "results": results,
        }

    def get_client_config(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "has_api_key": bool(self.api_key),
            "bot_id": self.bot_id,
            "timeout": self.timeout,
        }

    # =========================================================================
    # Formatting
    # =========================================================================

    @staticmethod
    def format_session_info(sessions: Optional[List[Dict[str, Any]]], now: Optional[float] = None) -> str:
        """
        One line per session: "• **GAME** (Nm) - Bet: $X".

        startTime is epoch milliseconds as sent by the casino bot.
        """
        if not sessions:
            return "No active sessions"

        now_ms = (now if now is not None else time.time()) * 1000
        lines = []
        for session in sessions:
            minutes = int((now_ms - float(session.get("startTime", now_ms))) // 60000)
            game = str(session.get("gameType", "unknown")).upper()
            bet = int(session.get("betAmount", 0) or 0)
            lines.append(f"• **{game}** ({minutes}m) - Bet: ${bet:,}")
        return "\n".join(lines)


__all__ = ["CasinoClient", "CasinoAPIError", "REQUEST_FAILED"]
