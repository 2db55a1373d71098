"""Data models for both pipeline stages and scan results."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

WAD = 10**18


@dataclass(frozen=True)
class Market:
    """A Morpho Blue market as listed by the indexer."""

    id: str
    lltv: int
    loan_asset_symbol: str
    collateral_asset_symbol: str


@dataclass(frozen=True)
class ApproximatePosition:
    """Indexer view of a borrower's position, priced in USD. Advisory only."""

    market_id: str
    borrower: str
    borrowed_usd: float
    collateral_usd: float


@dataclass(frozen=True)
class MarketParams:
    """Canonical market parameters read from the Morpho contract."""

    loan_token: str
    collateral_token: str
    oracle: str
    irm: str
    lltv: int

    def as_tuple(self) -> tuple[str, str, str, str, int]:
        return (self.loan_token, self.collateral_token, self.oracle, self.irm, self.lltv)


@dataclass(frozen=True)
class OnChainPosition:
    supply_shares: int
    borrow_shares: int
    collateral: int

    @property
    def has_debt(self) -> bool:
        return self.borrow_shares > 0


@dataclass(frozen=True)
class VerifiedPosition:
    """A position confirmed against chain state, ready for execution."""

    market_id: str
    borrower: str
    market_params: MarketParams
    position: OnChainPosition


@dataclass(frozen=True)
class VerifiedLiquidation:
    """One executed liquidation in the output snapshot."""

    chain_id: int
    market_id: str
    borrower: str
    loan_asset_symbol: str
    collateral_asset_symbol: str
    borrow_shares: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "marketId": self.market_id,
            "borrowerAddress": self.borrower,
            "loanAssetSymbol": self.loan_asset_symbol,
            "collateralAssetSymbol": self.collateral_asset_symbol,
            "borrowShares": str(self.borrow_shares),
        }


# ---------------------------------------------------------------------------
# Execution outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationFailed:
    reason: str


@dataclass(frozen=True)
class Submitted:
    tx_hash: str


@dataclass(frozen=True)
class Confirmed:
    tx_hash: str
    block_number: int = 0
    gas_used: int = 0


@dataclass(frozen=True)
class SubmissionFailed:
    reason: str
    tx_hash: str | None = None


ExecutionOutcome = Union[SimulationFailed, Submitted, Confirmed, SubmissionFailed]


@dataclass
class ScanReport:
    """Counters and results for a single scan run."""

    markets: int = 0
    positions: int = 0
    candidates: int = 0
    verified_positions: int = 0
    simulation_failures: int = 0
    submission_failures: int = 0
    read_failures: int = 0
    pipeline_errors: int = 0
    liquidations: list[VerifiedLiquidation] = field(default_factory=list)
