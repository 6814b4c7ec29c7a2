"""
staking/ - Staking contract probing.

Modules:
- abi: candidate selectors and pure payload decoders
- probe: ContractProbe, tiered best-effort lookup
"""

from staking.abi import (
    IS_VALIDATOR_CANDIDATES,
    PROBE_TIERS,
    VALIDATOR_COUNT_CANDIDATES,
    VALIDATOR_INFO_CANDIDATES,
    Candidate,
    decode_is_validator,
    decode_validator_count,
    decode_validator_info,
)
from staking.probe import ContractProbe

__all__ = [
    "IS_VALIDATOR_CANDIDATES",
    "PROBE_TIERS",
    "VALIDATOR_COUNT_CANDIDATES",
    "VALIDATOR_INFO_CANDIDATES",
    "Candidate",
    "ContractProbe",
    "decode_is_validator",
    "decode_validator_count",
    "decode_validator_info",
]
