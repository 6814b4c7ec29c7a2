# PATH: core/models.py
"""
Core data models for VALMON.

ADDRESS CONTRACT
================
Validator addresses are 20-byte accounts. The canonical form is the
lower-cased "0x" + 40 hex string. Equality and lookups are
case-insensitive; every address entering the pipeline goes through
normalize_address().

BLOCK PRODUCTION CONTRACT
=========================
Block production data is a tagged variant:
  - BlockCount: a bare (estimated) count from RPC sampling
  - BlockProductionReport: a full report

as_report() turns either into a BlockProductionReport, so callers never
need to sniff shapes. The explorer and RPC paths are never merged; one
supersedes the other for a given resolution.

STATUS CONTRACT
===============
  - severity == HEALTHY  <=>  issues is empty
  - severity == ERROR    <=>  the resolution pipeline itself failed
  - block counts are never negative; absence is 0 or None
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

from core.constants import (
    DEFAULT_MAX_BLOCK_DELAY_MINUTES,
    DEFAULT_MIN_BLOCKS_PER_24H,
    ZERO_ADDRESS,
    BlockSource,
    ProbeTier,
    Severity,
)
from core.exceptions import ValidationError

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-f]{40}$")


# =============================================================================
# ADDRESSES
# =============================================================================

def normalize_address(value: Any) -> str:
    """
    Return the canonical (lower-case, 0x-prefixed) form of an address.

    Raises:
        ValidationError: If value is not a 20-byte hex address
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"Address must be a string, got {type(value).__name__}",
            details={"value": repr(value)},
        )

    text = value.strip().lower()
    if not text.startswith("0x"):
        text = "0x" + text

    if not ADDRESS_PATTERN.match(text):
        raise ValidationError(
            f"Invalid address: {value!r}",
            details={"value": value},
        )
    return text


def addresses_equal(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive address comparison; None or non-string never matches."""
    if not isinstance(a, str) or not isinstance(b, str) or not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


def short_address(address: str) -> str:
    """Display form: first 10 and last 8 characters of the canonical address."""
    canonical = normalize_address(address)
    return f"{canonical[:10]}...{canonical[-8:]}"


# =============================================================================
# CONTRACT PROBE
# =============================================================================

@dataclass(frozen=True)
class ContractProbeResult:
    """Validator metadata discovered from the staking contract."""
    is_active: bool
    is_jailed: bool
    stake: Optional[int] = None
    owner: Optional[str] = None
    operator: Optional[str] = None
    tier: ProbeTier = ProbeTier.VALIDATOR_INFO
    selector: Optional[str] = None
    note: Optional[str] = None

    @property
    def block_producer(self) -> Optional[str]:
        """Address blocks are attributed to, when the contract told us."""
        if self.operator and self.operator != ZERO_ADDRESS:
            return self.operator
        return None


# =============================================================================
# BLOCK PRODUCTION
# =============================================================================

@dataclass(frozen=True)
class BlockProductionReport:
    """Block production over the last 24 hours."""
    count_24h: int = 0
    newest_block_time: Optional[datetime] = None
    newest_block_number: Optional[int] = None
    oldest_block_time: Optional[datetime] = None
    source: BlockSource = BlockSource.EXPLORER

    def __post_init__(self):
        if self.count_24h < 0:
            raise ValueError(f"count_24h must be >= 0, got {self.count_24h}")

    @property
    def is_estimate(self) -> bool:
        """Sampled counts and times are extrapolated, not observed."""
        return self.source == BlockSource.RPC_SAMPLE


@dataclass(frozen=True)
class BlockCount:
    """Bare 24h block count extrapolated from an RPC sample."""
    count: int
    newest_block_number: Optional[int] = None

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")


BlockProduction = Union[BlockCount, BlockProductionReport]


def as_report(data: BlockProduction, now: datetime) -> BlockProductionReport:
    """
    Normalize either block production variant into a report.

    A BlockCount carries no real block timestamp; when the sample matched
    at least one block its newest block time is approximated as `now`. An
    empty sample leaves it None rather than implying recent production.
    """
    if isinstance(data, BlockProductionReport):
        return data
    if isinstance(data, BlockCount):
        return BlockProductionReport(
            count_24h=data.count,
            newest_block_time=now if data.count > 0 else None,
            newest_block_number=data.newest_block_number,
            oldest_block_time=None,
            source=BlockSource.RPC_SAMPLE,
        )
    raise TypeError(f"Unsupported block production data: {type(data).__name__}")


# =============================================================================
# STATUS
# =============================================================================

@dataclass(frozen=True)
class Thresholds:
    """Health thresholds applied by the classifier."""
    min_blocks_per_24h: int = DEFAULT_MIN_BLOCKS_PER_24H
    max_block_delay_minutes: int = DEFAULT_MAX_BLOCK_DELAY_MINUTES


@dataclass(frozen=True)
class ValidatorStatus:
    """Terminal, immutable health status of one validator for one cycle."""
    address: str
    short_address: str
    timestamp: datetime
    is_active: bool = False
    is_jailed: bool = False
    blocks_validated_24h: int = 0
    last_block_number: Optional[int] = None
    last_block_time: Optional[datetime] = None
    issues: Tuple[str, ...] = field(default_factory=tuple)
    severity: Severity = Severity.ERROR
    blocks_estimated: bool = False

    @property
    def is_healthy(self) -> bool:
        return self.severity == Severity.HEALTHY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "short_address": self.short_address,
            "timestamp": self.timestamp.isoformat(),
            "is_active": self.is_active,
            "is_jailed": self.is_jailed,
            "blocks_validated_24h": self.blocks_validated_24h,
            "last_block_number": self.last_block_number,
            "last_block_time": self.last_block_time.isoformat() if self.last_block_time else None,
            "issues": list(self.issues),
            "severity": self.severity.value,
            "blocks_estimated": self.blocks_estimated,
        }
