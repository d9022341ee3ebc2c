"""GraphQL-over-HTTP transport for the Supabase GraphQL endpoint.

One logical ``request`` performs up to ``retries + 1`` sequential POSTs:

- HTTP >= 500 is retried while attempts remain.
- Network failures (connection errors, timeouts, anything whose message
  mentions "fetch" or "network") are retried while attempts remain.
- Any other non-2xx response, or a 2xx body carrying a GraphQL ``errors``
  array, raises GraphQLRequestError immediately.

Delay between attempts is linear: ``base * attempt`` (1s, 2s, ...).

A client is cheap and holds no connection state: build one per call via
``create_graphql_client()``. Unless a session is injected, every physical
attempt opens and closes its own aiohttp session.
"""
from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import aiohttp
from pydantic import ValidationError

from app.config import GRAPHQL_PATH, TRANSPORT_RETRY_POLICY, get_supabase_credentials
from app.models.schemas.base import GraphQLErrorEntry, GraphQLResponse
from app.utils import get_logger
from app.utils.backoff import linear_backoff_seconds

logger = get_logger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class GraphQLRequestError(Exception):
    """Transport (HTTP) or protocol (GraphQL ``errors``) failure."""

    def __init__(self, message: str, *, status: Optional[int] = None, errors: Optional[List[GraphQLErrorEntry]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or []


def is_network_error(error: BaseException) -> bool:
    """True for failures that happened before a response was received."""
    if isinstance(error, GraphQLRequestError):
        return False
    if isinstance(error, (aiohttp.ClientError, asyncio.TimeoutError, OSError)):
        return True
    text = f"{type(error).__name__} {error}".lower()
    return "fetch" in text or "network" in text


def extract_http_error_message(reason: str, body_text: str) -> str:
    """``message``/``error`` field of a JSON body, else the raw body, else the status text."""
    fallback = f"GraphQL request failed: {reason}"
    try:
        body = json.loads(body_text)
    except ValueError:
        return body_text or fallback
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or fallback
    return fallback


def format_graphql_errors(errors: List[GraphQLErrorEntry]) -> str:
    parts = []
    for entry in errors:
        suffix = f" at {'.'.join(str(p) for p in entry.path)}" if entry.path else ""
        parts.append(f"{entry.message}{suffix}")
    return f"GraphQL errors: {', '.join(parts)}"


class GraphQLClient:
    """Stateless GraphQL client bound to the configured endpoint and anon key."""

    def __init__(self, *, session: Optional[aiohttp.ClientSession] = None, sleep: Optional[SleepFn] = None):
        base_url, anon_key = get_supabase_credentials()
        self.url = f"{base_url}{GRAPHQL_PATH}"
        self.anon_key = anon_key
        self._session = session
        self._sleep: SleepFn = sleep or asyncio.sleep

    async def request(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        retries: Optional[int] = None,
    ) -> GraphQLResponse:
        """Execute a query or mutation with retry semantics (see module docstring)."""
        retries = int(TRANSPORT_RETRY_POLICY["retries"] if retries is None else retries)
        last_error: Optional[BaseException] = None

        for attempt in range(retries + 1):
            try:
                status, reason, body_text = await self._post(query, variables, headers)
            except Exception as e:  # classified by is_network_error
                last_error = e
                if attempt < retries and is_network_error(e):
                    await self._backoff(attempt + 1, reason=str(e))
                    continue
                logger.error("GraphQL request failed", url=self.url, attempt=attempt + 1, error=str(e))
                raise

            if not 200 <= status < 300:
                message = extract_http_error_message(reason, body_text)
                last_error = GraphQLRequestError(message, status=status)
                if status >= 500 and attempt < retries:
                    await self._backoff(attempt + 1, reason=message, status_code=status)
                    continue
                logger.error(
                    "GraphQL HTTP error",
                    url=self.url,
                    status_code=status,
                    attempt=attempt + 1,
                    error=message,
                )
                raise last_error

            return self._parse_body(status, body_text)

        raise GraphQLRequestError(str(last_error) if last_error else "GraphQL request failed after retries")

    async def authenticated_request(
        self,
        query: str,
        token: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> GraphQLResponse:
        """``request`` with the caller's bearer token instead of the anon key."""
        return await self.request(query, variables, {"Authorization": f"Bearer {token}"})

    async def _backoff(self, attempt: int, **context: Any) -> None:
        delay = linear_backoff_seconds(attempt)
        logger.warning("GraphQL request retry scheduled", attempt=attempt, backoff_seconds=delay, **context)
        await self._sleep(delay)

    def _parse_body(self, status: int, body_text: str) -> GraphQLResponse:
        try:
            response = GraphQLResponse.model_validate(json.loads(body_text))
        except (ValueError, ValidationError) as e:
            raise GraphQLRequestError(f"Invalid GraphQL response body: {e}", status=status)
        if response.errors:
            raise GraphQLRequestError(format_graphql_errors(response.errors), status=status, errors=response.errors)
        return response

    async def _post(
        self,
        query: str,
        variables: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
    ) -> Tuple[int, str, str]:
        request_headers = {
            "Content-Type": "application/json",
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            **(headers or {}),
        }
        payload = {"query": query, "variables": variables or {}}
        if self._session is not None:
            return await self._send(self._session, payload, request_headers)
        async with aiohttp.ClientSession() as session:
            return await self._send(session, payload, request_headers)

    async def _send(self, session: Any, payload: Dict[str, Any], headers: Dict[str, str]) -> Tuple[int, str, str]:
        async with session.post(self.url, json=payload, headers=headers) as response:
            body_text = await response.text()
            return response.status, response.reason or "", body_text


def create_graphql_client(**kwargs: Any) -> GraphQLClient:
    """Create a new GraphQL client instance (raises ConfigurationError if unconfigured)."""
    return GraphQLClient(**kwargs)


__all__ = [
    "GraphQLClient",
    "GraphQLRequestError",
    "create_graphql_client",
    "is_network_error",
    "extract_http_error_message",
    "format_graphql_errors",
]
