"""Scan orchestration: markets x positions through filter, verifier, executor."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..chain import LiquidatorClient, MorphoChainClient, build_web3
from ..chain.abis import load_abi
from ..config import AppConfig
from ..filters import is_candidate
from ..indexer import GraphQLClient, MorphoIndex
from ..interfaces.notifier import Notifier
from ..interfaces.position_index import PositionIndex
from ..models import (
    ApproximatePosition,
    Market,
    ScanReport,
    SimulationFailed,
    SubmissionFailed,
    Submitted,
    VerifiedLiquidation,
)
from ..notifications import TelegramNotifier
from ..output import write_snapshot
from .executor import LiquidationExecutor
from .verifier import Verifier

logger = logging.getLogger(__name__)


class Scanner:
    """One-shot batch scan of every market on the configured chain.

    Collaborators default to the real implementations built from ``config``;
    tests pass their own.
    """

    def __init__(
        self,
        config: AppConfig,
        index: PositionIndex | None = None,
        verifier: Verifier | None = None,
        executor: LiquidationExecutor | None = None,
        notifiers: list[Notifier] | None = None,
    ) -> None:
        self._config = config

        if index is None:
            index = MorphoIndex(GraphQLClient(config.indexer), config.indexer.page_size)
        self._index = index

        if verifier is None or executor is None:
            w3 = build_web3(config.chain)
            if verifier is None:
                verifier = Verifier(
                    MorphoChainClient(w3, config.contracts.morpho, config.chain.rpc_timeout)
                )
            if executor is None:
                abi = None
                if config.contracts.liquidator_abi_path:
                    abi = load_abi(config.contracts.liquidator_abi_path)
                liquidator = LiquidatorClient(
                    w3,
                    config.contracts.liquidator,
                    config.wallet.private_key,
                    abi=abi,
                    timeout=config.chain.rpc_timeout,
                )
                executor = LiquidationExecutor(
                    liquidator,
                    gas_limit=config.scan.gas_limit,
                    wait_for_receipt=config.scan.wait_for_receipt,
                    receipt_timeout=config.scan.receipt_timeout,
                )
        self._verifier = verifier
        self._executor = executor

        if notifiers is None:
            notifiers = []
            if config.notifications.telegram.enabled:
                notifiers.append(TelegramNotifier(config.notifications.telegram))
        self._notifiers = notifiers

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _send_log(self, message: str, silent: bool = True) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_log(message, silent=silent)
            except Exception as e:
                logger.error("Notifier send_log failed: %s", e)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _process(
        self,
        market: Market,
        position: ApproximatePosition,
        limiter: asyncio.Semaphore,
        lock: asyncio.Lock,
        report: ScanReport,
    ) -> None:
        if not is_candidate(position.borrowed_usd, position.collateral_usd, market.lltv):
            return
        report.candidates += 1

        async with limiter:
            verified = await self._verifier.verify(market.id, position.borrower)
            if verified is None:
                return
            report.verified_positions += 1

            outcome = await self._executor.execute(
                verified.market_params,
                verified.borrower,
                verified.position.borrow_shares,
            )

        if isinstance(outcome, SimulationFailed):
            report.simulation_failures += 1
            return
        if isinstance(outcome, SubmissionFailed):
            report.submission_failures += 1
            return
        if isinstance(outcome, Submitted):
            logger.info("Liquidation of %s submitted, not awaited: %s", position.borrower, outcome.tx_hash)
            return

        record = VerifiedLiquidation(
            chain_id=self._config.chain.chain_id,
            market_id=market.id,
            borrower=position.borrower,
            loan_asset_symbol=market.loan_asset_symbol,
            collateral_asset_symbol=market.collateral_asset_symbol,
            borrow_shares=verified.position.borrow_shares,
        )
        async with lock:
            report.liquidations.append(record)

        pair = f"{market.loan_asset_symbol}/{market.collateral_asset_symbol}"
        logger.info("VERIFIED: %s in %s and liquidated (tx %s)", position.borrower, pair, outcome.tx_hash)
        await self._send_alert(
            f"✅ Liquidated {position.borrower}\n"
            f"Market: {pair} ({market.id})\n"
            f"Borrow shares: {record.borrow_shares}\n"
            f"Tx: {outcome.tx_hash}",
            subject="Liquidation executed",
        )

    # ------------------------------------------------------------------
    # Core workflows
    # ------------------------------------------------------------------

    async def scan(self, output_path: str | Path | None = None) -> ScanReport:
        """Scan all markets, liquidate what verifies, write the snapshot.

        Raises:
            UpstreamQueryError: market or position discovery failed. Nothing
                is written in that case.
        """
        chain_id = self._config.chain.chain_id
        logger.info("Scanning Morpho chain %s...", chain_id)

        report = ScanReport()
        read_failures_before = self._verifier.read_failures
        limiter = asyncio.Semaphore(self._config.scan.concurrency)
        lock = asyncio.Lock()

        markets = await self._index.list_markets(chain_id)
        report.markets = len(markets)

        for market in markets:
            positions = await self._index.list_positions(market.id)
            report.positions += len(positions)
            logger.info(
                "Market %s (%s/%s): %d positions",
                market.id, market.loan_asset_symbol, market.collateral_asset_symbol, len(positions),
            )

            results = await asyncio.gather(
                *(self._process(market, p, limiter, lock, report) for p in positions),
                return_exceptions=True,
            )
            for position, result in zip(positions, results):
                if isinstance(result, Exception):
                    report.pipeline_errors += 1
                    logger.error(
                        "Pipeline for %s in %s failed: %r",
                        position.borrower, market.id, result,
                    )
                elif isinstance(result, BaseException):
                    raise result

        report.read_failures = self._verifier.read_failures - read_failures_before

        write_snapshot(output_path or self._config.scan.output_path, report.liquidations)

        summary = (
            f"Scan of chain {chain_id} done: {report.markets} markets, "
            f"{report.positions} positions, {report.candidates} candidates, "
            f"{len(report.liquidations)} liquidated"
        )
        logger.info(summary)
        if report.read_failures or report.submission_failures or report.pipeline_errors:
            logger.warning(
                "Unverifiable reads: %d, failed submissions: %d, pipeline errors: %d",
                report.read_failures, report.submission_failures, report.pipeline_errors,
            )
        await self._send_log(summary)
        return report

    async def run_continuous(self, interval_seconds: int | None = None) -> None:
        """Rerun the scan forever, sleeping ``interval_seconds`` between runs."""
        interval = interval_seconds or self._config.scan.interval_seconds
        logger.info("Starting continuous scanning (every %d seconds)", interval)

        while True:
            try:
                await self.scan()
            except Exception as e:
                logger.error("Scan failed: %s", e)
            await asyncio.sleep(interval)
