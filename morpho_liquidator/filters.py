"""Off-chain candidate filter: approximate health check, no I/O."""
from __future__ import annotations

from .models import WAD


def is_candidate(borrowed_usd: float, collateral_usd: float, lltv: int) -> bool:
    """Return True if the indexer's USD figures make the position look unsafe.

    The borrow limit is ``collateral_usd * (lltv / 1e18)``. A position sitting
    exactly at the limit is safe. Non-positive debt or collateral is never a
    candidate.
    """
    if borrowed_usd <= 0 or collateral_usd <= 0:
        return False

    max_borrow_usd = collateral_usd * (lltv / WAD)
    return borrowed_usd > max_borrow_usd
