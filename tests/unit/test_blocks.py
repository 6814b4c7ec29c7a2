"""
tests/unit/test_blocks.py - Block production resolver (explorer + RPC fallback).
"""

from datetime import timedelta
from unittest.mock import MagicMock

import httpx
import pytest

from chains.explorer import ExplorerBlock, ExplorerClient
from core.constants import SAMPLE_EXTRAPOLATION_FACTOR, BlockSource
from core.models import BlockProductionReport
from core.result import Err, Ok
from health.blocks import BlockProductionResolver, summarize_explorer_blocks

VALIDATOR = "0x1234567890abcdef1234567890abcdef12345678"
OTHER = "0xcccccccccccccccccccccccccccccccccccccccc"


def rpc_provider(head=100, miners=None, failing=()):
    """Mock provider: head block number and a {number: miner} map."""
    miners = miners or {}
    provider = MagicMock()
    provider.try_block_number.return_value = Ok(head) if head is not None else Err("rpc down")

    def block(number):
        if number in failing:
            return Err("timeout")
        return Ok({"number": hex(number), "miner": miners.get(number, OTHER)})

    provider.try_block_by_number.side_effect = block
    return provider


class TestSummarizeExplorerBlocks:
    """Explorer block list -> report."""

    def test_counts_last_24h_and_tracks_extremes(self, now):
        blocks = [
            ExplorerBlock(height=300, timestamp=now - timedelta(minutes=5)),
            ExplorerBlock(height=200, timestamp=now - timedelta(hours=23)),
            ExplorerBlock(height=100, timestamp=now - timedelta(hours=30)),
            ExplorerBlock(height=50, timestamp=None),
        ]

        report = summarize_explorer_blocks(blocks, now)

        assert report.count_24h == 2
        assert report.newest_block_number == 300
        assert report.newest_block_time == now - timedelta(minutes=5)
        assert report.oldest_block_time == now - timedelta(hours=30)
        assert report.source == BlockSource.EXPLORER
        assert not report.is_estimate

    def test_order_independent(self, now):
        blocks = [
            ExplorerBlock(height=1, timestamp=now - timedelta(hours=2)),
            ExplorerBlock(height=3, timestamp=now - timedelta(minutes=1)),
            ExplorerBlock(height=2, timestamp=now - timedelta(hours=1)),
        ]
        report = summarize_explorer_blocks(blocks, now)
        assert report.newest_block_number == 3
        assert report.oldest_block_time == now - timedelta(hours=2)

    def test_empty(self, now):
        report = summarize_explorer_blocks([], now)
        assert report == BlockProductionReport(source=BlockSource.EXPLORER)


class TestExplorerPath:
    """Explorer is preferred when it answers."""

    def test_explorer_wins(self, now):
        explorer = MagicMock()
        explorer.get_validated_blocks.return_value = Ok([
            ExplorerBlock(height=10, timestamp=now - timedelta(minutes=2)),
        ])
        provider = rpc_provider()

        result = BlockProductionResolver(explorer, provider).resolve(VALIDATOR, now)

        assert isinstance(result, Ok)
        assert result.value.count_24h == 1
        assert result.value.source == BlockSource.EXPLORER
        provider.try_block_number.assert_not_called()

    def test_out_of_range_timestamp_does_not_discard_body(self, now):
        body = {"items": [
            {"height": 11, "timestamp": 10**30},
            {"height": 10, "timestamp": (now - timedelta(minutes=2)).isoformat()},
        ]}
        explorer = ExplorerClient(
            "https://explorer.test/api",
            client=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=body))),
        )
        provider = rpc_provider()

        result = BlockProductionResolver(explorer, provider).resolve(VALIDATOR, now)

        assert isinstance(result, Ok)
        assert result.value.source == BlockSource.EXPLORER
        assert result.value.count_24h == 1
        assert result.value.newest_block_number == 10
        provider.try_block_number.assert_not_called()


class TestRpcFallback:
    """Fallback sampling when the explorer fails."""

    def test_explorer_http_500_falls_back(self, now):
        """A failing explorer still yields a well-formed report."""
        explorer = ExplorerClient(
            "https://explorer.test/api",
            client=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(500))),
        )
        provider = rpc_provider(head=100)

        result = BlockProductionResolver(explorer, provider).resolve(VALIDATOR, now)

        assert isinstance(result, Ok)
        report = result.value
        assert report.count_24h == 0
        assert report.source == BlockSource.RPC_SAMPLE
        assert report.is_estimate
        assert report.newest_block_time is None

    def test_extrapolates_sample(self, now):
        explorer = MagicMock()
        explorer.get_validated_blocks.return_value = Err("explorer returned HTTP 503")
        provider = rpc_provider(head=100, miners={98: VALIDATOR.upper().replace("0X", "0x"), 95: VALIDATOR})

        result = BlockProductionResolver(explorer, provider).resolve(VALIDATOR, now)

        report = result.value
        assert report.count_24h == 2 * SAMPLE_EXTRAPOLATION_FACTOR
        assert report.count_24h == 288
        assert report.newest_block_number == 98
        # Sampled block time is approximated as the resolution instant
        assert report.newest_block_time == now
        assert report.oldest_block_time is None

    def test_samples_ten_blocks(self, now):
        provider = rpc_provider(head=1000)
        BlockProductionResolver(None, provider, sample_blocks=10).resolve(VALIDATOR, now)

        requested = [c.args[0] for c in provider.try_block_by_number.call_args_list]
        assert requested == list(range(1000, 990, -1))

    def test_sample_stops_at_genesis(self, now):
        provider = rpc_provider(head=3)
        BlockProductionResolver(None, provider).resolve(VALIDATOR, now)
        assert provider.try_block_by_number.call_count == 4

    def test_failed_blocks_skipped(self, now):
        provider = rpc_provider(head=100, miners={100: VALIDATOR, 99: VALIDATOR}, failing={100})
        result = BlockProductionResolver(None, provider).resolve(VALIDATOR, now)

        assert result.value.count_24h == SAMPLE_EXTRAPOLATION_FACTOR
        assert result.value.newest_block_number == 99

    def test_non_string_miner_is_no_match(self, now):
        provider = rpc_provider(head=100, miners={100: 12345, 99: None, 98: VALIDATOR})
        result = BlockProductionResolver(None, provider).resolve(VALIDATOR, now)

        assert result.value.count_24h == SAMPLE_EXTRAPOLATION_FACTOR
        assert result.value.newest_block_number == 98

    def test_both_paths_exhausted(self, now):
        explorer = MagicMock()
        explorer.get_validated_blocks.return_value = Err("explorer request failed")
        provider = rpc_provider(head=None)

        result = BlockProductionResolver(explorer, provider).resolve(VALIDATOR, now)

        assert isinstance(result, Err)
        assert "explorer request failed" in result.reason
        assert "chain head" in result.reason
