"""Liquidator contract client: eth_call dry run, signed submit, receipt wait."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted

from ..errors import SimulationError, SubmissionError
from ..models import MarketParams
from .abis import LIQUIDATOR_ABI

logger = logging.getLogger(__name__)


def _revert_reason(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or type(error).__name__


class LiquidatorClient:
    """Drive ``liquidate(marketParams, borrower, repaidShares)`` from the bot wallet."""

    def __init__(
        self,
        w3: AsyncWeb3,
        liquidator_address: str,
        private_key: str,
        abi: list[dict[str, Any]] | None = None,
        timeout: int = 30,
    ) -> None:
        self._w3 = w3
        self.timeout = timeout
        self._account = w3.eth.account.from_key(private_key)
        self._contract = w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(liquidator_address),
            abi=abi or LIQUIDATOR_ABI,
        )
        # Pipelines submit concurrently; nonce fetch + send must not interleave.
        self._nonce_lock = asyncio.Lock()

    @property
    def address(self) -> str:
        return self._account.address

    def _liquidate(self, market_params: MarketParams, borrower: str, borrow_shares: int) -> Any:
        return self._contract.functions.liquidate(
            market_params.as_tuple(),
            AsyncWeb3.to_checksum_address(borrower),
            borrow_shares,
        )

    async def simulate(
        self, market_params: MarketParams, borrower: str, borrow_shares: int
    ) -> None:
        """Dry-run the liquidation; raises SimulationError if it would revert."""
        try:
            await asyncio.wait_for(
                self._liquidate(market_params, borrower, borrow_shares).call(
                    {"from": self.address}
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise SimulationError(f"eth_call timed out after {self.timeout}s") from e
        except ContractLogicError as e:
            raise SimulationError(_revert_reason(e)) from e
        except Exception as e:
            raise SimulationError(f"eth_call failed: {_revert_reason(e)}") from e

    async def submit(
        self,
        market_params: MarketParams,
        borrower: str,
        borrow_shares: int,
        gas_limit: int,
    ) -> str:
        """Sign and broadcast the liquidation; returns the 0x tx hash."""
        call = self._liquidate(market_params, borrower, borrow_shares)
        try:
            async with self._nonce_lock:
                nonce = await self._w3.eth.get_transaction_count(self.address, "pending")
                tx = await call.build_transaction(
                    {"from": self.address, "nonce": nonce, "gas": gas_limit}
                )
                signed = self._account.sign_transaction(tx)
                tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            raise SubmissionError(f"Transaction not sent: {_revert_reason(e)}") from e

        return AsyncWeb3.to_hex(tx_hash)

    async def wait_for_receipt(self, tx_hash: str, timeout: int) -> dict[str, Any]:
        """Block until ``tx_hash`` is mined; returns the receipt as a dict."""
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout
            )
        except TimeExhausted as e:
            raise SubmissionError(f"Not mined within {timeout}s", tx_hash=tx_hash) from e
        except Exception as e:
            raise SubmissionError(
                f"Receipt lookup failed: {_revert_reason(e)}", tx_hash=tx_hash
            ) from e
        return dict(receipt)
