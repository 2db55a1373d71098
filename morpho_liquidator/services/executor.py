"""Two-phase liquidation: simulate, then submit only if the dry run passes."""
from __future__ import annotations

import logging

from ..errors import SimulationError, SubmissionError
from ..interfaces.chain import Liquidator
from ..models import (
    Confirmed,
    ExecutionOutcome,
    MarketParams,
    SimulationFailed,
    SubmissionFailed,
    Submitted,
)

logger = logging.getLogger(__name__)


class LiquidationExecutor:
    """Execute liquidations against current chain state."""

    def __init__(
        self,
        liquidator: Liquidator,
        gas_limit: int = 1_500_000,
        wait_for_receipt: bool = True,
        receipt_timeout: int = 120,
    ) -> None:
        self._liquidator = liquidator
        self.gas_limit = gas_limit
        self.wait_for_receipt = wait_for_receipt
        self.receipt_timeout = receipt_timeout

    async def execute(
        self, market_params: MarketParams, borrower: str, borrow_shares: int
    ) -> ExecutionOutcome:
        """Simulate, submit and (optionally) confirm one liquidation.

        A failed simulation returns ``SimulationFailed`` and nothing is sent.
        """
        try:
            await self._liquidator.simulate(market_params, borrower, borrow_shares)
        except SimulationError as e:
            logger.info("Simulation failed for %s: %s", borrower, e.reason)
            return SimulationFailed(reason=e.reason)

        logger.info("Simulation passed for %s, submitting", borrower)

        try:
            tx_hash = await self._liquidator.submit(
                market_params, borrower, borrow_shares, self.gas_limit
            )
        except SubmissionError as e:
            logger.error("Submission failed for %s: %s", borrower, e.reason)
            return SubmissionFailed(reason=e.reason, tx_hash=e.tx_hash)

        logger.info("Tx sent for %s: %s", borrower, tx_hash)
        if not self.wait_for_receipt:
            return Submitted(tx_hash=tx_hash)

        try:
            receipt = await self._liquidator.wait_for_receipt(tx_hash, self.receipt_timeout)
        except SubmissionError as e:
            logger.error("Tx %s for %s unconfirmed: %s", tx_hash, borrower, e.reason)
            return SubmissionFailed(reason=e.reason, tx_hash=tx_hash)

        if receipt.get("status") != 1:
            logger.error("Tx %s for %s reverted", tx_hash, borrower)
            return SubmissionFailed(reason="transaction reverted", tx_hash=tx_hash)

        logger.info("Liquidation executed: %s", tx_hash)
        return Confirmed(
            tx_hash=tx_hash,
            block_number=int(receipt.get("blockNumber", 0)),
            gas_used=int(receipt.get("gasUsed", 0)),
        )
