"""Snapshot writer for verified liquidations."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from .models import VerifiedLiquidation

logger = logging.getLogger(__name__)


def write_snapshot(path: str | Path, liquidations: Iterable[VerifiedLiquidation]) -> Path:
    """Overwrite ``path`` with a JSON array of liquidation records."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    records = [liq.to_dict() for liq in liquidations]
    with open(path, "w") as f:
        json.dump(records, f, indent=2)
        f.write("\n")
    logger.info("Wrote %d record(s) to %s", len(records), path)
    return path
