"""Quote source integrations."""

from arbwatch.data_sources.base import BaseQuoteSource
from arbwatch.data_sources.router import RouterClient, close_rpc, connect_rpc

__all__ = [
    "BaseQuoteSource",
    "RouterClient",
    "close_rpc",
    "connect_rpc",
]
