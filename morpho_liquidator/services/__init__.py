"""Service modules"""
from .executor import LiquidationExecutor
from .scanner import Scanner
from .verifier import Verifier

__all__ = ["LiquidationExecutor", "Scanner", "Verifier"]
