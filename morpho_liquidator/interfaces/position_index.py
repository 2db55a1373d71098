"""Position index protocol: market and position discovery."""
from typing import Protocol

from ..models import ApproximatePosition, Market


class PositionIndex(Protocol):
    """Lists markets and borrower positions from an off-chain index."""

    async def list_markets(self, chain_id: int) -> list[Market]: ...

    async def list_positions(self, market_id: str) -> list[ApproximatePosition]: ...
