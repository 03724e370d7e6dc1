"""
Dixit Sync - GraphQL Client

Thin query/mutation transport over httpx with a response cache that
queries can bypass, plus a cached singleton factory.
"""

from __future__ import annotations

import json
import logging
import threading
from enum import Enum
from functools import lru_cache
from typing import Any

import httpx

from src.api.errors import TransportError
from src.config.settings import get_settings

logger = logging.getLogger(__name__)


class FetchPolicy(Enum):
    """How a query interacts with the response cache."""

    CACHE_FIRST = "cache-first"
    NETWORK_ONLY = "network-only"


def _cache_key(document: str, variables: dict[str, Any] | None) -> tuple[str, str]:
    return document, json.dumps(variables or {}, sort_keys=True)


class GraphQLTransport:
    """Executes GraphQL documents against a single endpoint.

    Every query response is written to an in-memory cache. CACHE_FIRST
    queries are answered from it when possible; NETWORK_ONLY queries and
    mutations always hit the server. Safe to share across threads.
    """

    def __init__(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self._http = http_client or httpx.Client(headers=headers, timeout=timeout)
        self._cache: dict[tuple[str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()

    def query(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        *,
        fetch_policy: FetchPolicy = FetchPolicy.CACHE_FIRST,
    ) -> dict[str, Any]:
        """Run a query and return its `data` object."""
        key = _cache_key(document, variables)
        if fetch_policy is FetchPolicy.CACHE_FIRST:
            with self._lock:
                cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", variables)
                return cached

        data = self._execute(document, variables)
        with self._lock:
            self._cache[key] = data
        return data

    def mutate(
        self, document: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run a mutation and return its `data` object. Never cached."""
        return self._execute(document, variables)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def close(self) -> None:
        self._http.close()

    def _execute(
        self, document: str, variables: dict[str, Any] | None
    ) -> dict[str, Any]:
        try:
            response = self._http.post(
                self.url,
                json={"query": document, "variables": variables or {}},
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {self.url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise TransportError(
                f"Server returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError("Response body is not valid JSON") from exc

        errors = body.get("errors")
        if errors:
            messages = "; ".join(str(e.get("message", e)) for e in errors)
            raise TransportError(f"GraphQL errors: {messages}")

        data = body.get("data")
        if data is None:
            raise TransportError("Response has no data")
        return data


@lru_cache(maxsize=1)
def get_transport() -> GraphQLTransport:
    """Create and cache a transport configured from settings."""
    settings = get_settings()
    headers = {}
    if settings.graphql_token:
        headers["Authorization"] = f"Bearer {settings.graphql_token}"
    return GraphQLTransport(
        settings.graphql_url,
        headers=headers,
        timeout=settings.request_timeout,
    )
