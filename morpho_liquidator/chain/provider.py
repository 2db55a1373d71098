"""AsyncWeb3 construction from chain config."""
from __future__ import annotations

import aiohttp
from web3 import AsyncWeb3

from ..config import ChainConfig


def build_web3(config: ChainConfig) -> AsyncWeb3:
    """Create an AsyncWeb3 bound to ``config.rpc_url``; no request is made."""
    return AsyncWeb3(
        AsyncWeb3.AsyncHTTPProvider(
            config.rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=config.rpc_timeout)},
        )
    )
