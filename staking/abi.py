"""
staking/abi.py - Candidate selectors and pure decoders for the staking contract.

The validator contract's exact interface is not known in advance, so each
probe tier is an ordered list of (signature, selector, decoder) candidates.
Decoders take raw return bytes and return a ContractProbeResult when the
payload is plausible, or None when it is not. They never touch the network.

Layout assumptions for validators(address)-style structs (>= 8 words):
    word 0  stake (base units, 18 decimals)
    word 1  owner address (right-aligned)
    word 2  operator address (right-aligned)
    ...
    jailed flag: last byte of the final word OR of the penultimate word
"""

from dataclasses import dataclass
from typing import Callable, Optional

from eth_utils import function_signature_to_4byte_selector

from core.constants import (
    MIN_DEGRADED_BYTES,
    MIN_STRUCT_BYTES,
    WEI_PER_TOKEN,
    WORD_BYTES,
    ZERO_ADDRESS,
    ProbeTier,
)
from core.models import ContractProbeResult

Decoder = Callable[[bytes], Optional[ContractProbeResult]]


# =============================================================================
# ENCODING
# =============================================================================

def selector_for(signature: str) -> str:
    """4-byte selector (hex, no 0x) for a function signature."""
    return function_signature_to_4byte_selector(signature).hex()


def encode_address_call(selector: str, address: str) -> str:
    """Encode call data for f(address)."""
    address_padded = address.lower().replace("0x", "").zfill(64)
    return f"0x{selector}{address_padded}"


def encode_no_arg_call(selector: str) -> str:
    """Encode call data for f()."""
    return f"0x{selector}"


# =============================================================================
# DECODING HELPERS
# =============================================================================

def hex_to_bytes(hex_result: str) -> bytes:
    """
    Convert an eth_call hex result to bytes.

    Raises:
        ValueError: If the string is not valid hex
    """
    data = hex_result[2:] if hex_result.startswith("0x") else hex_result
    if len(data) % 2:
        data = "0" + data
    return bytes.fromhex(data)


def split_words(data: bytes) -> list[bytes]:
    """Split payload into full 32-byte words (a trailing partial word is dropped)."""
    return [
        data[i:i + WORD_BYTES]
        for i in range(0, len(data) - WORD_BYTES + 1, WORD_BYTES)
    ]


def word_to_int(word: bytes) -> int:
    return int.from_bytes(word, "big")


def word_to_address(word: bytes) -> Optional[str]:
    """Read a right-aligned address from a word; the zero address is None."""
    address = "0x" + word[-20:].hex()
    if address == ZERO_ADDRESS:
        return None
    return address


def to_display_stake(raw: int) -> int:
    """Convert base units to whole tokens when the value is clearly in wei."""
    if raw > WEI_PER_TOKEN:
        return raw // WEI_PER_TOKEN
    return raw


# =============================================================================
# DECODERS
# =============================================================================

def decode_validator_info(data: bytes) -> Optional[ContractProbeResult]:
    """
    Decode a validators(address)-style struct.

    Full parse needs >= 256 bytes and a non-zero payload. Between 64 and
    256 bytes, a non-zero leading word is taken as stake and the validator
    is presumed active with jailed/owner/operator unknown.
    """
    if not any(data):
        return None

    if len(data) >= MIN_STRUCT_BYTES:
        words = split_words(data)
        raw_stake = word_to_int(words[0])
        is_jailed = data[-1] == 1 or data[-1 - WORD_BYTES] == 1
        return ContractProbeResult(
            is_active=raw_stake > 0 and not is_jailed,
            is_jailed=is_jailed,
            stake=to_display_stake(raw_stake),
            owner=word_to_address(words[1]),
            operator=word_to_address(words[2]),
            tier=ProbeTier.VALIDATOR_INFO,
        )

    if len(data) >= MIN_DEGRADED_BYTES:
        raw_stake = word_to_int(data[:WORD_BYTES])
        if raw_stake == 0:
            return None
        return ContractProbeResult(
            is_active=True,
            is_jailed=False,
            stake=to_display_stake(raw_stake),
            tier=ProbeTier.VALIDATOR_INFO,
            note="partial validator struct; jailed status unknown",
        )

    return None


def decode_bool(data: bytes) -> Optional[bool]:
    """Read an ABI bool: last byte of a full word, else the first byte."""
    if not data:
        return None
    flag = data[-1] if len(data) >= WORD_BYTES else data[0]
    return flag == 1


def decode_is_validator(data: bytes) -> Optional[ContractProbeResult]:
    """Decode an isValidator(address)-style bool; only True is plausible."""
    if not decode_bool(data):
        return None
    return ContractProbeResult(
        is_active=True,
        is_jailed=False,
        tier=ProbeTier.IS_VALIDATOR,
    )


def decode_validator_count(data: bytes) -> Optional[ContractProbeResult]:
    """Decode a validator count; a non-zero count is weak evidence only."""
    if len(data) < WORD_BYTES:
        return None
    count = word_to_int(data[:WORD_BYTES])
    if count == 0:
        return None
    return ContractProbeResult(
        is_active=True,
        is_jailed=False,
        tier=ProbeTier.VALIDATOR_COUNT,
        note=f"contract reports {count} validators; per-address status not verified",
    )


# =============================================================================
# CANDIDATES
# =============================================================================

@dataclass(frozen=True)
class Candidate:
    """One speculative contract function."""
    signature: str
    selector: str
    decoder: Decoder
    takes_address: bool = True

    @classmethod
    def from_signature(cls, signature: str, decoder: Decoder) -> "Candidate":
        return cls(
            signature=signature,
            selector=selector_for(signature),
            decoder=decoder,
            takes_address=not signature.endswith("()"),
        )

    def encode(self, address: str) -> str:
        if self.takes_address:
            return encode_address_call(self.selector, address)
        return encode_no_arg_call(self.selector)


# Selector hard-coded by earlier deployments of this monitor for
# getValidatorInfo(address); kept first because it has answered before.
LEGACY_VALIDATOR_INFO_SELECTOR = "5c622a0e"

VALIDATOR_INFO_CANDIDATES: tuple[Candidate, ...] = (
    Candidate(
        signature="getValidatorInfo(address) [legacy]",
        selector=LEGACY_VALIDATOR_INFO_SELECTOR,
        decoder=decode_validator_info,
    ),
    Candidate.from_signature("getValidatorInfo(address)", decode_validator_info),
    Candidate.from_signature("validators(address)", decode_validator_info),
    Candidate.from_signature("getValidator(address)", decode_validator_info),
    Candidate.from_signature("validatorInfo(address)", decode_validator_info),
)

IS_VALIDATOR_CANDIDATES: tuple[Candidate, ...] = (
    Candidate.from_signature("isValidator(address)", decode_is_validator),
    Candidate.from_signature("isActiveValidator(address)", decode_is_validator),
    Candidate.from_signature("isCurrentValidator(address)", decode_is_validator),
)

VALIDATOR_COUNT_CANDIDATES: tuple[Candidate, ...] = (
    Candidate.from_signature("getValidatorCount()", decode_validator_count),
    Candidate.from_signature("validatorCount()", decode_validator_count),
    Candidate.from_signature("getValidatorsLength()", decode_validator_count),
)

PROBE_TIERS: tuple[tuple[ProbeTier, tuple[Candidate, ...]], ...] = (
    (ProbeTier.VALIDATOR_INFO, VALIDATOR_INFO_CANDIDATES),
    (ProbeTier.IS_VALIDATOR, IS_VALIDATOR_CANDIDATES),
    (ProbeTier.VALIDATOR_COUNT, VALIDATOR_COUNT_CANDIDATES),
)
