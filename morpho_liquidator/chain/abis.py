"""Contract ABIs."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

_MARKET_PARAMS_COMPONENTS = [
    {"name": "loanToken", "type": "address"},
    {"name": "collateralToken", "type": "address"},
    {"name": "oracle", "type": "address"},
    {"name": "irm", "type": "address"},
    {"name": "lltv", "type": "uint256"},
]

MORPHO_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "idToMarketParams",
        "stateMutability": "view",
        "inputs": [{"name": "id", "type": "bytes32"}],
        "outputs": [dict(c) for c in _MARKET_PARAMS_COMPONENTS],
    },
    {
        "type": "function",
        "name": "position",
        "stateMutability": "view",
        "inputs": [
            {"name": "id", "type": "bytes32"},
            {"name": "user", "type": "address"},
        ],
        "outputs": [
            {"name": "supplyShares", "type": "uint256"},
            {"name": "borrowShares", "type": "uint128"},
            {"name": "collateral", "type": "uint128"},
        ],
    },
]

# liquidate(MarketParams, borrower, repaidShares) on the bot's own contract.
LIQUIDATOR_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "liquidate",
        "stateMutability": "nonpayable",
        "inputs": [
            {
                "name": "marketParams",
                "type": "tuple",
                "components": [dict(c) for c in _MARKET_PARAMS_COMPONENTS],
            },
            {"name": "borrower", "type": "address"},
            {"name": "repaidShares", "type": "uint256"},
        ],
        "outputs": [],
    },
]


def load_abi(path: str | Path) -> list[dict[str, Any]]:
    """Load an ABI from a plain JSON array or a compiler artifact with an ``abi`` key."""
    with open(path) as f:
        raw = json.load(f)
    if isinstance(raw, dict):
        raw = raw.get("abi")
    if not isinstance(raw, list):
        raise ValueError(f"No ABI array found in {path}")
    return raw
