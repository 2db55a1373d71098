"""Authoritative on-chain verification of candidate positions."""
from __future__ import annotations

import logging

from ..errors import ChainReadError
from ..interfaces.chain import ChainReader
from ..models import VerifiedPosition

logger = logging.getLogger(__name__)


class Verifier:
    """Confirm a candidate against Morpho state before anything is executed.

    A failed read is reported as ``None``, the same as "no debt", so one bad
    lookup cannot abort a scan. Failures are counted in ``read_failures`` and
    logged at WARNING so they stay visible.
    """

    def __init__(self, chain: ChainReader) -> None:
        self._chain = chain
        self.read_failures = 0

    async def verify(self, market_id: str, borrower: str) -> VerifiedPosition | None:
        try:
            market_params = await self._chain.get_market_params(market_id)
            position = await self._chain.get_position(market_id, borrower)
        except ChainReadError as e:
            self.read_failures += 1
            logger.warning("Could not verify %s in %s: %s", borrower, market_id, e)
            return None

        if not position.has_debt:
            logger.debug("No on-chain debt for %s in %s", borrower, market_id)
            return None

        return VerifiedPosition(
            market_id=market_id,
            borrower=borrower,
            market_params=market_params,
            position=position,
        )
