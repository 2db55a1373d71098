"""EVM chain access for Morpho Blue and the liquidator contract."""
from .liquidator import LiquidatorClient
from .morpho import MorphoChainClient
from .provider import build_web3

__all__ = ["LiquidatorClient", "MorphoChainClient", "build_web3"]
