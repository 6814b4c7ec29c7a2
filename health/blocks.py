"""
health/blocks.py - Block production over the last 24 hours.

Primary path: the explorer's blocks-validated list (exact timestamps).
Fallback path: sample the most recent blocks over RPC and extrapolate.

The fallback is a coarse heuristic. A 10-block sample is treated as a
10-minute slice and scaled to 24 hours (x 24 x 6), and the newest block
time is approximated as the resolution instant. Reports from this path are
tagged RPC_SAMPLE so downstream formatting can flag them as estimates.

Sampling bounds the cost to sample_blocks + 1 RPC calls per validator.
"""

from datetime import datetime
from typing import Iterable, Optional

from chains.explorer import ExplorerBlock, ExplorerClient
from chains.providers import RPCProvider
from core.constants import (
    DEFAULT_SAMPLE_BLOCKS,
    LOOKBACK_HOURS,
    SAMPLE_EXTRAPOLATION_FACTOR,
    BlockSource,
)
from core.logging import get_logger
from core.models import (
    BlockCount,
    BlockProductionReport,
    addresses_equal,
    as_report,
)
from core.result import Err, Ok, Result
from core.time import is_within_hours

logger = get_logger(__name__)


def summarize_explorer_blocks(
    blocks: Iterable[ExplorerBlock],
    now: datetime,
    hours: int = LOOKBACK_HOURS,
) -> BlockProductionReport:
    """
    Build a report from explorer blocks.

    Blocks without a timestamp are ignored. Newest/oldest are tracked over
    every timestamped block; only blocks inside (now - hours, now] count.
    """
    count = 0
    newest: Optional[ExplorerBlock] = None
    oldest: Optional[ExplorerBlock] = None

    for block in blocks:
        if block.timestamp is None:
            continue
        if newest is None or block.timestamp > newest.timestamp:
            newest = block
        if oldest is None or block.timestamp < oldest.timestamp:
            oldest = block
        if is_within_hours(block.timestamp, now, hours):
            count += 1

    return BlockProductionReport(
        count_24h=count,
        newest_block_time=newest.timestamp if newest else None,
        newest_block_number=newest.height if newest else None,
        oldest_block_time=oldest.timestamp if oldest else None,
        source=BlockSource.EXPLORER,
    )


class BlockProductionResolver:
    """Explorer first, RPC sampling second; never both."""

    def __init__(
        self,
        explorer: Optional[ExplorerClient],
        provider: RPCProvider,
        sample_blocks: int = DEFAULT_SAMPLE_BLOCKS,
    ):
        self.explorer = explorer
        self.provider = provider
        self.sample_blocks = sample_blocks

    def from_explorer(self, address: str, now: datetime) -> Result[BlockProductionReport]:
        if self.explorer is None:
            return Err("explorer not configured")
        fetched = self.explorer.get_validated_blocks(address)
        if isinstance(fetched, Err):
            return fetched
        return Ok(summarize_explorer_blocks(fetched.value, now))

    def sample_rpc(self, address: str) -> Result[BlockCount]:
        """
        Count recent blocks mined by address and extrapolate to 24h.

        Individual block fetch failures are skipped. Failing to read the
        chain head exhausts this path.
        """
        head = self.provider.try_block_number()
        if isinstance(head, Err):
            return Err(f"cannot read chain head: {head.reason}")

        observed = 0
        newest_match: Optional[int] = None
        skipped = 0

        for offset in range(self.sample_blocks):
            number = head.value - offset
            if number < 0:
                break

            fetched = self.provider.try_block_by_number(number)
            if isinstance(fetched, Err) or fetched.value is None:
                skipped += 1
                continue

            if addresses_equal(fetched.value.get("miner"), address):
                observed += 1
                if newest_match is None:
                    newest_match = number

        logger.debug(
            "RPC block sample",
            extra={"context": {
                "address": address,
                "head": head.value,
                "observed": observed,
                "skipped": skipped,
            }},
        )

        return Ok(BlockCount(
            count=observed * SAMPLE_EXTRAPOLATION_FACTOR,
            newest_block_number=newest_match,
        ))

    def resolve(self, address: str, now: datetime) -> Result[BlockProductionReport]:
        """
        Resolve block production for address.

        Returns:
            Ok(report) from the explorer, or from RPC sampling when the
            explorer fails; Err when both paths are exhausted
        """
        primary = self.from_explorer(address, now)
        if isinstance(primary, Ok):
            return primary

        logger.info(
            "Explorer unavailable, sampling RPC",
            extra={"context": {"address": address, "reason": primary.reason}},
        )

        fallback = self.sample_rpc(address)
        if isinstance(fallback, Err):
            return Err(f"{primary.reason}; {fallback.reason}")
        return Ok(as_report(fallback.value, now))
