"""
UIL REST API Client
===================

Async client for the Universal Integration Layer API. One aiohttp session per
client; every public operation returns an ``ApiResult`` and never raises.

Operations:
    list_entities()            GET  /users
    get_profile(id)            GET  /users/{id}/profile
    get_insights(id)           GET  /users/{id}/insights
    get_analytics_summary()    GET  /analytics
    execute_actions(id)        POST /users/{id}/actions
    health()                   GET  /health

Every response is wrapped as ``{"success": bool, "data": ...}``. A
``success: false`` envelope becomes an ``ApplicationFailure``; transport and
parse errors become a ``NetworkFailure``. Neither is retried.

Usage:
    from uil_console.api_client import UILClient

    async with UILClient() as client:
        result = await client.get_profile("user_001")
        if result:
            print(result.data.computed_insights.persona)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

import aiohttp

from uil_console.config import ConsoleConfig
from uil_console.errors import ApiResult, ApplicationFailure, NetworkFailure, UILError
from uil_console.models import (
    ActionResult,
    AnalyticsSummary,
    CrossPlatformAction,
    Entity,
    Insight,
    Profile,
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger("api_client")
logger.setLevel(logging.INFO)

if not logger.handlers:
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter(
        "[%(asctime)s] %(name)s %(levelname)s: %(message)s", datefmt="%H:%M:%S",
    ))
    logger.addHandler(_h)


def _entity_path(entity_id: str, suffix: str) -> str:
    return f"users/{quote(str(entity_id), safe='')}/{suffix}"


def _parse_entities(data: Any) -> List[Entity]:
    # The server encodes an empty list as null
    return [Entity.from_api(item) for item in data or []]


def _parse_insights(data: Any) -> List[Insight]:
    return [Insight.from_api(item) for item in data or []]


def _parse_profile(data: Any) -> Profile:
    if not isinstance(data, dict):
        raise TypeError(f"Expected profile object, got {type(data).__name__}")
    return Profile.from_api(data)


def _parse_summary(data: Any) -> AnalyticsSummary:
    if not isinstance(data, dict):
        raise TypeError(f"Expected analytics object, got {type(data).__name__}")
    return AnalyticsSummary.from_api(data)


class UILClient:
    """
    Async UIL API client.

    Parameters
    ----------
    config : ConsoleConfig, optional
        Base URL, timeout and user agent. Defaults to ``ConsoleConfig.from_env()``.
    session : aiohttp.ClientSession, optional
        Pre-built session. The client does not close sessions it did not create.
    """

    def __init__(
        self,
        config: Optional[ConsoleConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config or ConsoleConfig.from_env()
        self.base_url = self.config.base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    # -- Session management -------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
            self._session = aiohttp.ClientSession(
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/json",
                },
                timeout=timeout,
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> UILClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # -- Core HTTP ----------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Issue one request and unwrap the ``{success, data}`` envelope.

        Raises
        ------
        NetworkFailure
            On connection errors, timeouts, or a body that is not a JSON object.
        ApplicationFailure
            On ``success: false`` or an HTTP error status.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        session = await self._get_session()
        logger.debug("API %s %s", method, url)

        try:
            kwargs: Dict[str, Any] = {}
            if headers is not None:
                kwargs["headers"] = headers
            async with session.request(method, url, **kwargs) as resp:
                status = resp.status
                try:
                    body = await resp.json(content_type=None)
                except ValueError as exc:
                    raise NetworkFailure(
                        f"Malformed response from {url}: {exc}", status_code=status,
                    ) from exc
        except asyncio.TimeoutError as exc:
            raise NetworkFailure(f"Request to {url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise NetworkFailure(f"Connection error on {url}: {exc}") from exc

        if not isinstance(body, dict):
            raise NetworkFailure(
                f"Unexpected payload from {url}: {type(body).__name__}",
                status_code=status,
                response_body=str(body),
            )

        if not body.get("success") or status >= 400:
            message = body.get("error") or body.get("message") or f"HTTP {status}"
            raise ApplicationFailure(
                f"{method} {path} failed: {message}",
                status_code=status,
                response_body=str(body),
            )

        return status, body

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        parse: Callable[[Dict[str, Any]], Any],
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiResult:
        """Run a request and convert every failure into an ``ApiResult``."""
        start = time.monotonic()
        try:
            status, body = await self._request(method, path, headers=headers)
            try:
                data = parse(body)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise NetworkFailure(
                    f"Could not parse {operation} response: {exc}",
                    status_code=status,
                    response_body=str(body),
                ) from exc
        except UILError as exc:
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.warning("%s failed (%s): %s", operation, exc.kind, exc)
            return ApiResult.failed(exc, response_time_ms=elapsed_ms)

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug("%s succeeded (HTTP %d, %.0fms)", operation, status, elapsed_ms)
        return ApiResult.success(data, status_code=status, response_time_ms=elapsed_ms)

    # -----------------------------------------------------------------------
    # Operations
    # -----------------------------------------------------------------------

    async def list_entities(self) -> ApiResult:
        """Fetch the user catalog. ``data`` is a list of ``Entity``."""
        return await self._call(
            "list_entities", "GET", "users",
            lambda body: _parse_entities(body.get("data")),
        )

    async def get_profile(self, entity_id: str) -> ApiResult:
        """Fetch the unified profile for one user. ``data`` is a ``Profile``."""
        return await self._call(
            "get_profile", "GET", _entity_path(entity_id, "profile"),
            lambda body: _parse_profile(body.get("data")),
        )

    async def get_insights(self, entity_id: str) -> ApiResult:
        """Fetch cross-platform insights. ``data`` is a list of ``Insight``."""
        return await self._call(
            "get_insights", "GET", _entity_path(entity_id, "insights"),
            lambda body: _parse_insights(body.get("data")),
        )

    async def get_analytics_summary(self) -> ApiResult:
        """Fetch the process-wide ``AnalyticsSummary``."""
        return await self._call(
            "get_analytics_summary", "GET", "analytics",
            lambda body: _parse_summary(body.get("data")),
        )

    async def execute_actions(self, entity_id: str) -> ApiResult:
        """Trigger coordinated actions for a user. ``data`` is an ``ActionResult``."""
        return await self._call(
            "execute_actions", "POST", _entity_path(entity_id, "actions"),
            lambda body: ActionResult(
                accepted=True,
                actions=[CrossPlatformAction.from_api(a) for a in body.get("data") or []],
                message=body.get("message", ""),
            ),
            headers={"Content-Type": "application/json"},
        )

    async def health(self) -> ApiResult:
        """Ping the API health endpoint. ``data`` is the raw status dict."""
        return await self._call(
            "health", "GET", "health",
            lambda body: dict(body.get("data") or {}),
        )

    def __repr__(self) -> str:
        return f"UILClient(base_url={self.base_url!r})"
