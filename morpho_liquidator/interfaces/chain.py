"""Chain protocols: contract read and write abstractions."""
from typing import Any, Protocol

from ..models import MarketParams, OnChainPosition


class ChainReader(Protocol):
    """Read-only access to Morpho Blue market and position state.

    Implementations raise ``ChainReadError`` on any failure.
    """

    async def get_market_params(self, market_id: str) -> MarketParams: ...

    async def get_position(self, market_id: str, borrower: str) -> OnChainPosition: ...


class Liquidator(Protocol):
    """The liquidator contract: dry run, submit and confirm."""

    async def simulate(
        self, market_params: MarketParams, borrower: str, borrow_shares: int
    ) -> None: ...

    async def submit(
        self,
        market_params: MarketParams,
        borrower: str,
        borrow_shares: int,
        gas_limit: int,
    ) -> str: ...

    async def wait_for_receipt(self, tx_hash: str, timeout: int) -> dict[str, Any]: ...
