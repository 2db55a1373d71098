"""GraphQL-over-HTTP client with retry on transient failures."""
from __future__ import annotations

import asyncio
import json
import logging
import ssl
from typing import Any

import aiohttp
import backoff
import certifi

from ..config import IndexerConfig
from ..errors import UpstreamQueryError

logger = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class GraphQLClient:
    """POST ``{query, variables}`` documents to a GraphQL endpoint."""

    def __init__(self, config: IndexerConfig) -> None:
        self.url = config.api_url
        self.timeout = config.timeout
        self.max_retries = config.max_retries
        self.retry_backoff = config.retry_backoff

    async def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run a query and return its ``data`` object.

        Connection errors, timeouts, HTTP 429 and 5xx are retried with
        exponential backoff up to ``max_retries`` attempts. GraphQL errors
        are not retried.

        Raises:
            UpstreamQueryError: on exhausted retries, any ``errors`` in the
                response, a non-200 status or a body without ``data``.
        """
        payload = {"query": query, "variables": variables or {}}

        post = backoff.on_exception(
            backoff.expo,
            _TRANSIENT_ERRORS,
            max_tries=self.max_retries,
            factor=self.retry_backoff,
            logger=logger,
        )(self._post)

        try:
            status, body = await post(payload)
        except _TRANSIENT_ERRORS as e:
            raise UpstreamQueryError(
                f"GraphQL request to {self.url} failed after "
                f"{self.max_retries} attempt(s): {e!r}",
                payload=repr(e),
            ) from e

        if not isinstance(body, dict):
            raise UpstreamQueryError(
                f"Unexpected GraphQL response (HTTP {status})", payload=body
            )

        errors = body.get("errors")
        if errors:
            raise UpstreamQueryError(
                f"GraphQL errors: {json.dumps(errors)}", payload=errors
            )

        if status != 200:
            raise UpstreamQueryError(f"GraphQL HTTP {status}", payload=body)

        data = body.get("data")
        if data is None:
            raise UpstreamQueryError("GraphQL response has no data", payload=body)
        return data

    async def _post(self, payload: dict[str, Any]) -> tuple[int, Any]:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.post(
                self.url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status == 429 or response.status >= 500:
                    logger.warning("GraphQL endpoint returned HTTP %s", response.status)
                    raise aiohttp.ClientResponseError(
                        response.request_info,
                        (),
                        status=response.status,
                        message=f"HTTP {response.status}",
                    )
                try:
                    body = await response.json(content_type=None)
                except ValueError as e:
                    raise UpstreamQueryError(
                        f"GraphQL response is not JSON (HTTP {response.status})",
                        payload=str(e),
                    ) from e
                return response.status, body
