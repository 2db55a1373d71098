"""Read-only client for the Morpho Blue singleton."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from web3 import AsyncWeb3

from ..errors import ChainReadError
from ..models import MarketParams, OnChainPosition
from .abis import MORPHO_ABI

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class MorphoChainClient:
    """Fetch market params and positions; every failure becomes ChainReadError."""

    def __init__(self, w3: AsyncWeb3, morpho_address: str, timeout: int = 30) -> None:
        self._w3 = w3
        self.timeout = timeout
        self._morpho = w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(morpho_address), abi=MORPHO_ABI
        )

    async def _call(self, label: str, build_call: Any) -> Any:
        try:
            return await asyncio.wait_for(build_call().call(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ChainReadError(f"{label} timed out after {self.timeout}s") from e
        except Exception as e:
            raise ChainReadError(f"{label} failed: {e}") from e

    async def get_market_params(self, market_id: str) -> MarketParams:
        result = await self._call(
            f"idToMarketParams({market_id})",
            lambda: self._morpho.functions.idToMarketParams(
                AsyncWeb3.to_bytes(hexstr=market_id)
            ),
        )
        try:
            loan_token, collateral_token, oracle, irm, lltv = result
        except (TypeError, ValueError) as e:
            raise ChainReadError(f"Unexpected idToMarketParams result: {result!r}") from e

        if loan_token == ZERO_ADDRESS:
            raise ChainReadError(f"Market {market_id} does not exist on chain")

        return MarketParams(
            loan_token=loan_token,
            collateral_token=collateral_token,
            oracle=oracle,
            irm=irm,
            lltv=int(lltv),
        )

    async def get_position(self, market_id: str, borrower: str) -> OnChainPosition:
        result = await self._call(
            f"position({market_id}, {borrower})",
            lambda: self._morpho.functions.position(
                AsyncWeb3.to_bytes(hexstr=market_id),
                AsyncWeb3.to_checksum_address(borrower),
            ),
        )
        try:
            supply_shares, borrow_shares, collateral = result
        except (TypeError, ValueError) as e:
            raise ChainReadError(f"Unexpected position result: {result!r}") from e

        return OnChainPosition(
            supply_shares=int(supply_shares),
            borrow_shares=int(borrow_shares),
            collateral=int(collateral),
        )
