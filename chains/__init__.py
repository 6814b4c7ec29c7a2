"""
chains/ - Blockchain data access layer.

Modules:
- providers: JSON-RPC provider with endpoint failover
- explorer: Block explorer REST client
"""

from chains.explorer import (
    ExplorerBlock,
    ExplorerClient,
    parse_blocks_body,
)
from chains.providers import (
    RPCProvider,
    RPCResponse,
    RPCStats,
)

__all__ = [
    # Providers
    "RPCProvider",
    "RPCResponse",
    "RPCStats",
    # Explorer
    "ExplorerBlock",
    "ExplorerClient",
    "parse_blocks_body",
]
