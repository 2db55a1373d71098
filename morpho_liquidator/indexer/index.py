"""Paginated market and position discovery from the Morpho API."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from ..errors import UpstreamQueryError
from ..models import ApproximatePosition, Market
from . import parser
from .client import GraphQLClient
from .queries import MARKET_POSITIONS_QUERY, MARKETS_QUERY

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], Awaitable[list[dict[str, Any]]]]


async def paginate(fetch_page: PageFetcher, page_size: int) -> list[dict[str, Any]]:
    """Collect pages from ``fetch_page(first, skip)`` until one comes back short.

    A listing of exactly ``k * page_size`` items takes ``k + 1`` requests, the
    last one empty. Errors propagate; partial results are never returned.
    """
    items: list[dict[str, Any]] = []
    skip = 0

    while True:
        page = await fetch_page(page_size, skip)
        items.extend(page)
        if len(page) < page_size:
            break
        skip += page_size

    return items


class MorphoIndex:
    """List markets and borrower positions from the Morpho GraphQL API."""

    def __init__(self, client: GraphQLClient, page_size: int = 100) -> None:
        self._client = client
        self.page_size = page_size

    async def fetch_page(
        self,
        query: str,
        root: str,
        variables: dict[str, Any],
        first: int,
        skip: int,
    ) -> list[dict[str, Any]]:
        """Run one page of ``query`` and return ``data[root]["items"]``."""
        data = await self._client.execute(query, {**variables, "first": first, "skip": skip})
        try:
            items = data[root]["items"]
        except (KeyError, TypeError) as e:
            raise UpstreamQueryError(
                f"Unexpected response shape for '{root}'", payload=data
            ) from e
        return items or []

    async def list_markets(self, chain_id: int) -> list[Market]:
        """All markets on ``chain_id``, in API order."""
        items = await paginate(
            lambda first, skip: self.fetch_page(
                MARKETS_QUERY, "markets", {"chainId": chain_id}, first, skip
            ),
            self.page_size,
        )
        markets = [parser.parse_market(item) for item in items]
        logger.info("Markets found on chain %s: %d", chain_id, len(markets))
        return markets

    async def list_positions(self, market_id: str) -> list[ApproximatePosition]:
        """All indexed positions in ``market_id``, in API order."""
        items = await paginate(
            lambda first, skip: self.fetch_page(
                MARKET_POSITIONS_QUERY,
                "marketPositions",
                {"marketKey": market_id},
                first,
                skip,
            ),
            self.page_size,
        )
        positions = [parser.parse_position(item, market_id) for item in items]
        logger.debug("Positions in market %s: %d", market_id, len(positions))
        return positions
