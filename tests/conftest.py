"""Shared test fixtures, sample data and chain fakes."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import pytest

from morpho_liquidator.config import (
    AppConfig,
    ChainConfig,
    ContractsConfig,
    IndexerConfig,
    NotificationsConfig,
    ScanConfig,
    TelegramConfig,
    WalletConfig,
)
from morpho_liquidator.errors import ChainReadError, SimulationError, SubmissionError
from morpho_liquidator.models import (
    ApproximatePosition,
    Market,
    MarketParams,
    OnChainPosition,
)

MARKET_ID = "0x" + "ab" * 32
BORROWER = "0x" + "12" * 20
MORPHO_ADDRESS = "0x" + "bb" * 20
LIQUIDATOR_ADDRESS = "0x" + "cc" * 20
PRIVATE_KEY = "0x" + "11" * 32


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_indexer_config() -> IndexerConfig:
    return IndexerConfig(
        api_url="https://api.example.com/graphql",
        page_size=100,
        timeout=5,
        max_retries=3,
        retry_backoff=0.0,
    )


@pytest.fixture()
def sample_app_config(tmp_path: Path, sample_indexer_config: IndexerConfig) -> AppConfig:
    return AppConfig(
        chain=ChainConfig(chain_id=1, rpc_url="http://localhost:8545", rpc_timeout=5),
        indexer=sample_indexer_config,
        contracts=ContractsConfig(morpho=MORPHO_ADDRESS, liquidator=LIQUIDATOR_ADDRESS),
        wallet=WalletConfig(private_key=PRIVATE_KEY),
        scan=ScanConfig(
            concurrency=3,
            gas_limit=1_500_000,
            wait_for_receipt=True,
            receipt_timeout=5,
            output_path=str(tmp_path / "verified.json"),
            interval_seconds=60,
        ),
        notifications=NotificationsConfig(telegram=TelegramConfig(enabled=False)),
    )


SAMPLE_YAML = textwrap.dedent("""\
    chain:
      chain_id: 8453
      rpc_url: "https://rpc.example.com"
      rpc_timeout: 10
    indexer:
      api_url: "https://api.example.com/graphql"
      page_size: 50
      timeout: 15
      max_retries: 4
      retry_backoff: 0.5
    contracts:
      morpho: "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"
      liquidator: "0xcccccccccccccccccccccccccccccccccccccccc"
    wallet:
      private_key: "0x1111111111111111111111111111111111111111111111111111111111111111"
    scan:
      concurrency: 5
      gas_limit: 2000000
      wait_for_receipt: false
      receipt_timeout: 60
      output_path: out/liquidations.json
      interval_seconds: 30
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: 999
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_market() -> Market:
    return Market(
        id=MARKET_ID,
        lltv=8 * 10**17,
        loan_asset_symbol="USDC",
        collateral_asset_symbol="WETH",
    )


@pytest.fixture()
def sample_market_params() -> MarketParams:
    return MarketParams(
        loan_token="0x" + "01" * 20,
        collateral_token="0x" + "02" * 20,
        oracle="0x" + "03" * 20,
        irm="0x" + "04" * 20,
        lltv=8 * 10**17,
    )


def make_position(
    borrowed_usd: float, collateral_usd: float, borrower: str = BORROWER
) -> ApproximatePosition:
    return ApproximatePosition(
        market_id=MARKET_ID,
        borrower=borrower,
        borrowed_usd=borrowed_usd,
        collateral_usd=collateral_usd,
    )


# ---------------------------------------------------------------------------
# Chain fakes
# ---------------------------------------------------------------------------


class FakeChain:
    """ChainReader returning fixed state; ``fail_for`` borrowers raise."""

    def __init__(
        self,
        market_params: MarketParams,
        borrow_shares: int = 500,
        fail_for: tuple[str, ...] = (),
    ) -> None:
        self.market_params = market_params
        self.borrow_shares = borrow_shares
        self.fail_for = fail_for
        self.calls: list[tuple[str, ...]] = []

    async def get_market_params(self, market_id: str) -> MarketParams:
        self.calls.append(("get_market_params", market_id))
        return self.market_params

    async def get_position(self, market_id: str, borrower: str) -> OnChainPosition:
        self.calls.append(("get_position", market_id, borrower))
        if borrower in self.fail_for:
            raise ChainReadError("execution timeout")
        return OnChainPosition(
            supply_shares=0, borrow_shares=self.borrow_shares, collateral=10**18
        )


class FakeLiquidator:
    """Liquidator recording every call; behaviour set by flags."""

    def __init__(
        self,
        simulate_error: str | None = None,
        submit_error: str | None = None,
        receipt_status: int = 1,
    ) -> None:
        self.simulate_error = simulate_error
        self.submit_error = submit_error
        self.receipt_status = receipt_status
        self.simulated: list[tuple[Any, ...]] = []
        self.submitted: list[tuple[Any, ...]] = []
        self.waited: list[str] = []

    async def simulate(self, market_params, borrower, borrow_shares) -> None:
        self.simulated.append((market_params, borrower, borrow_shares))
        if self.simulate_error:
            raise SimulationError(self.simulate_error)

    async def submit(self, market_params, borrower, borrow_shares, gas_limit) -> str:
        self.submitted.append((market_params, borrower, borrow_shares, gas_limit))
        if self.submit_error:
            raise SubmissionError(self.submit_error)
        return "0x" + f"{len(self.submitted):064x}"

    async def wait_for_receipt(self, tx_hash: str, timeout: int) -> dict:
        self.waited.append(tx_hash)
        return {"status": self.receipt_status, "blockNumber": 19_000_000, "gasUsed": 350_000}


@pytest.fixture()
def fake_chain(sample_market_params: MarketParams) -> FakeChain:
    return FakeChain(sample_market_params)


@pytest.fixture()
def fake_liquidator() -> FakeLiquidator:
    return FakeLiquidator()


@pytest.fixture()
def position_factory():
    return make_position


@pytest.fixture()
def liquidator_factory():
    return FakeLiquidator


@pytest.fixture()
def chain_factory(sample_market_params: MarketParams):
    def _make(**kwargs: Any) -> FakeChain:
        return FakeChain(sample_market_params, **kwargs)

    return _make
