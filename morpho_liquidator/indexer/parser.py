"""Pure parsing functions for Morpho API items: no I/O."""
from __future__ import annotations

from typing import Any

from ..errors import UpstreamQueryError
from ..models import ApproximatePosition, Market


def to_usd(value: Any) -> float:
    """Convert an API USD figure to float; null counts as zero."""
    if value is None:
        return 0.0
    return float(value)


def asset_symbol(asset: dict[str, Any] | None) -> str:
    """Return the asset's symbol, or "" for markets without that asset (idle markets)."""
    if not asset:
        return ""
    return asset.get("symbol") or ""


def parse_market(item: dict[str, Any]) -> Market:
    """Parse a ``markets.items`` entry.

    Example:
        {"uniqueKey": "0xb3...", "lltv": "860000000000000000",
         "loanAsset": {"symbol": "USDC"}, "collateralAsset": {"symbol": "WETH"}}
    """
    try:
        return Market(
            id=item["uniqueKey"],
            lltv=int(item["lltv"]),
            loan_asset_symbol=asset_symbol(item.get("loanAsset")),
            collateral_asset_symbol=asset_symbol(item.get("collateralAsset")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamQueryError(f"Malformed market item: {e}", payload=item) from e


def parse_position(item: dict[str, Any], market_id: str) -> ApproximatePosition:
    """Parse a ``marketPositions.items`` entry for ``market_id``."""
    try:
        state = item.get("state") or {}
        return ApproximatePosition(
            market_id=market_id,
            borrower=item["user"]["address"],
            borrowed_usd=to_usd(state.get("borrowAssetsUsd")),
            collateral_usd=to_usd(state.get("collateralUsd")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamQueryError(f"Malformed position item: {e}", payload=item) from e
