"""
tests/unit/test_probe.py - ContractProbe tier and selector precedence.
"""

from unittest.mock import MagicMock

import pytest

from core.constants import ProbeTier
from core.result import Err, Ok
from staking.abi import (
    IS_VALIDATOR_CANDIDATES,
    VALIDATOR_COUNT_CANDIDATES,
    Candidate,
    decode_validator_info,
)
from staking.probe import ContractProbe

VALIDATOR = "0x1234567890abcdef1234567890abcdef12345678"
CONTRACT = "0x0000000000000000000000000000000000001000"


def word(value: int) -> str:
    return hex(value)[2:].zfill(64)


def routed_provider(responses: dict) -> MagicMock:
    """Provider whose eth_call answers by selector; unknown selectors get Err."""
    provider = MagicMock()

    def try_eth_call(to, data, block="latest"):
        selector = data[2:10]
        response = responses.get(selector)
        if response is None:
            return Err("execution reverted")
        if isinstance(response, Exception):
            raise response
        return response

    provider.try_eth_call.side_effect = try_eth_call
    return provider


class TestSelectorPrecedence:
    """Earlier candidates win."""

    @pytest.fixture
    def tiers(self):
        first = Candidate("first(address)", "aaaaaaaa", decode_validator_info)
        second = Candidate("second(address)", "bbbbbbbb", decode_validator_info)
        return ((ProbeTier.VALIDATOR_INFO, (first, second)),)

    def test_first_plausible_selector_wins(self, tiers, struct_hex):
        provider = routed_provider({
            "aaaaaaaa": Ok(struct_hex(100 * 10**18)),
            "bbbbbbbb": Ok(struct_hex(200 * 10**18)),
        })
        probe = ContractProbe(provider, CONTRACT, tiers=tiers)

        result = probe.probe(VALIDATOR)

        assert result.stake == 100
        assert result.selector == "aaaaaaaa"
        # Second candidate never queried
        assert provider.try_eth_call.call_count == 1

    def test_implausible_first_falls_through(self, tiers, struct_hex):
        provider = routed_provider({
            "aaaaaaaa": Ok("0x" + "00" * 256),
            "bbbbbbbb": Ok(struct_hex(200 * 10**18)),
        })
        result = ContractProbe(provider, CONTRACT, tiers=tiers).probe(VALIDATOR)

        assert result.stake == 200
        assert result.selector == "bbbbbbbb"

    def test_transport_error_falls_through(self, tiers, struct_hex):
        provider = routed_provider({
            "aaaaaaaa": RuntimeError("connection reset"),
            "bbbbbbbb": Ok(struct_hex(300 * 10**18)),
        })
        result = ContractProbe(provider, CONTRACT, tiers=tiers).probe(VALIDATOR)

        assert result.stake == 300

    def test_malformed_hex_falls_through(self, tiers, struct_hex):
        provider = routed_provider({
            "aaaaaaaa": Ok("0xnothex"),
            "bbbbbbbb": Ok(struct_hex(400 * 10**18)),
        })
        result = ContractProbe(provider, CONTRACT, tiers=tiers).probe(VALIDATOR)

        assert result.stake == 400

    def test_calls_target_contract_with_address(self, tiers, struct_hex):
        provider = routed_provider({"aaaaaaaa": Ok(struct_hex(10**21))})
        ContractProbe(provider, CONTRACT, tiers=tiers).probe(VALIDATOR)

        to, data = provider.try_eth_call.call_args[0][:2]
        assert to == CONTRACT
        assert data == "0xaaaaaaaa" + VALIDATOR[2:].zfill(64)


class TestTierFallback:
    """Default tiers: struct -> isValidator -> count."""

    def test_is_validator_tier(self):
        provider = routed_provider({IS_VALIDATOR_CANDIDATES[0].selector: Ok("0x" + word(1))})

        result = ContractProbe(provider, CONTRACT).probe(VALIDATOR)

        assert result.tier == ProbeTier.IS_VALIDATOR
        assert result.is_active
        assert not result.is_jailed
        assert result.stake is None
        assert result.owner is None

    def test_is_validator_false_continues_to_count(self):
        provider = routed_provider({
            IS_VALIDATOR_CANDIDATES[0].selector: Ok("0x" + word(0)),
            VALIDATOR_COUNT_CANDIDATES[1].selector: Ok("0x" + word(12)),
        })

        result = ContractProbe(provider, CONTRACT).probe(VALIDATOR)

        assert result.tier == ProbeTier.VALIDATOR_COUNT
        assert result.is_active
        assert result.note

    def test_exhausted_returns_none(self):
        provider = routed_provider({})
        assert ContractProbe(provider, CONTRACT).probe(VALIDATOR) is None

    def test_never_raises(self):
        provider = MagicMock()
        provider.try_eth_call.side_effect = ConnectionError("down")

        assert ContractProbe(provider, CONTRACT).probe(VALIDATOR) is None
