"""Unit tests for the simulate-then-submit executor."""
from __future__ import annotations

import pytest

from morpho_liquidator.errors import SubmissionError
from morpho_liquidator.models import (
    Confirmed,
    MarketParams,
    SimulationFailed,
    SubmissionFailed,
    Submitted,
)
from morpho_liquidator.services.executor import LiquidationExecutor

BORROWER = "0x" + "12" * 20


class TestExecute:
    @pytest.mark.asyncio
    async def test_failed_simulation_never_submits(
        self, liquidator_factory, sample_market_params: MarketParams
    ) -> None:
        liquidator = liquidator_factory(simulate_error="execution reverted: HEALTHY_POSITION")

        outcome = await LiquidationExecutor(liquidator).execute(
            sample_market_params, BORROWER, 500
        )

        assert outcome == SimulationFailed(reason="execution reverted: HEALTHY_POSITION")
        assert len(liquidator.simulated) == 1
        assert liquidator.submitted == []
        assert liquidator.waited == []

    @pytest.mark.asyncio
    async def test_simulation_and_submit_use_same_arguments(
        self, fake_liquidator, sample_market_params: MarketParams
    ) -> None:
        await LiquidationExecutor(fake_liquidator, gas_limit=1_234_567).execute(
            sample_market_params, BORROWER, 500
        )

        assert fake_liquidator.simulated == [(sample_market_params, BORROWER, 500)]
        assert fake_liquidator.submitted == [
            (sample_market_params, BORROWER, 500, 1_234_567)
        ]

    @pytest.mark.asyncio
    async def test_confirmed_on_successful_receipt(
        self, fake_liquidator, sample_market_params: MarketParams
    ) -> None:
        outcome = await LiquidationExecutor(fake_liquidator).execute(
            sample_market_params, BORROWER, 500
        )

        assert isinstance(outcome, Confirmed)
        assert outcome.block_number == 19_000_000
        assert outcome.gas_used == 350_000
        assert fake_liquidator.waited == [outcome.tx_hash]

    @pytest.mark.asyncio
    async def test_submitted_when_not_waiting(
        self, fake_liquidator, sample_market_params: MarketParams
    ) -> None:
        outcome = await LiquidationExecutor(fake_liquidator, wait_for_receipt=False).execute(
            sample_market_params, BORROWER, 500
        )

        assert isinstance(outcome, Submitted)
        assert fake_liquidator.waited == []

    @pytest.mark.asyncio
    async def test_send_failure(self, liquidator_factory, sample_market_params: MarketParams) -> None:
        liquidator = liquidator_factory(submit_error="nonce too low")

        outcome = await LiquidationExecutor(liquidator).execute(sample_market_params, BORROWER, 500)

        assert outcome == SubmissionFailed(reason="nonce too low", tx_hash=None)
        assert liquidator.waited == []

    @pytest.mark.asyncio
    async def test_reverted_receipt(self, liquidator_factory, sample_market_params: MarketParams) -> None:
        liquidator = liquidator_factory(receipt_status=0)

        outcome = await LiquidationExecutor(liquidator).execute(sample_market_params, BORROWER, 500)

        assert isinstance(outcome, SubmissionFailed)
        assert outcome.reason == "transaction reverted"
        assert outcome.tx_hash is not None

    @pytest.mark.asyncio
    async def test_receipt_timeout(self, fake_liquidator, sample_market_params: MarketParams) -> None:
        async def never_mined(tx_hash: str, timeout: int) -> dict:
            raise SubmissionError(f"Not mined within {timeout}s", tx_hash=tx_hash)

        fake_liquidator.wait_for_receipt = never_mined

        outcome = await LiquidationExecutor(fake_liquidator, receipt_timeout=7).execute(
            sample_market_params, BORROWER, 500
        )

        assert isinstance(outcome, SubmissionFailed)
        assert outcome.reason == "Not mined within 7s"
