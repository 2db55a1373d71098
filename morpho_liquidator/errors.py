"""Exception taxonomy for the scan pipeline."""
from __future__ import annotations

from typing import Any


class LiquidatorError(Exception):
    """Base class for all pipeline errors."""


class UpstreamQueryError(LiquidatorError):
    """The indexing API failed; fatal to the listing and to the run."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class ChainReadError(LiquidatorError):
    """An on-chain read failed for one position."""


class SimulationError(LiquidatorError):
    """The liquidation dry run reverted."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SubmissionError(LiquidatorError):
    """The liquidation transaction was rejected, reverted or timed out."""

    def __init__(self, reason: str, tx_hash: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.tx_hash = tx_hash
