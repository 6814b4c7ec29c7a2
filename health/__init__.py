"""
health/ - Validator health resolution.

Modules:
- blocks: block production (explorer first, RPC sampling fallback)
- status: pure classification and the per-validator StatusResolver
"""

from health.blocks import BlockProductionResolver, summarize_explorer_blocks
from health.status import StatusResolver, classify, error_status

__all__ = [
    "BlockProductionResolver",
    "StatusResolver",
    "classify",
    "error_status",
    "summarize_explorer_blocks",
]
