"""Unit tests for the JSON snapshot writer."""
from __future__ import annotations

import json
from pathlib import Path

from morpho_liquidator.models import VerifiedLiquidation
from morpho_liquidator.output import write_snapshot


def _record(borrower: str) -> VerifiedLiquidation:
    return VerifiedLiquidation(
        chain_id=1,
        market_id="0xabc",
        borrower=borrower,
        loan_asset_symbol="USDC",
        collateral_asset_symbol="WETH",
        borrow_shares=500,
    )


class TestWriteSnapshot:
    def test_writes_json_array(self, tmp_path: Path) -> None:
        path = write_snapshot(tmp_path / "out.json", [_record("0x1"), _record("0x2")])
        data = json.loads(path.read_text())
        assert [r["borrowerAddress"] for r in data] == ["0x1", "0x2"]
        assert data[0]["borrowShares"] == "500"

    def test_overwrites_previous_run(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        write_snapshot(path, [_record("0x1")])
        write_snapshot(path, [])
        assert json.loads(path.read_text()) == []

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = write_snapshot(tmp_path / "a" / "b" / "out.json", [])
        assert path.exists()
