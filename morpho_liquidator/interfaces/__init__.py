"""Protocol interfaces for the liquidation scanner."""
from .chain import ChainReader, Liquidator
from .notifier import Notifier
from .position_index import PositionIndex

__all__ = ["ChainReader", "Liquidator", "Notifier", "PositionIndex"]
