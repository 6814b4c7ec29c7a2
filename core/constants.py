# PATH: core/constants.py
"""
Constants for VALMON.

Contains enums, defaults, and the heuristic constants used by the
resolution pipeline.
"""

from enum import Enum
from typing import Final

# =============================================================================
# CHAIN DEFAULTS (Oasys mainnet)
# =============================================================================

DEFAULT_EXPLORER_API_BASE: Final[str] = "https://explorer.oasys.games/api"

# Oasys staking/validator system contract
DEFAULT_STAKING_CONTRACT: Final[str] = "0x0000000000000000000000000000000000001000"

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

# =============================================================================
# MONITORING THRESHOLDS
# =============================================================================

DEFAULT_MIN_BLOCKS_PER_24H = 24
DEFAULT_MAX_BLOCK_DELAY_MINUTES = 30
DEFAULT_CHECK_INTERVAL_MINUTES = 15
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10

# =============================================================================
# HEURISTICS
# These are approximations, not measured against the real contract layout.
# =============================================================================

# Display unit conversion for stake (18 decimals)
WEI_PER_TOKEN = 10**18

# ABI word size
WORD_BYTES = 32

# validators(address) struct must be at least 8 words to be trusted
MIN_STRUCT_BYTES = 8 * WORD_BYTES

# Shorter responses get a degraded single-value parse
MIN_DEGRADED_BYTES = 2 * WORD_BYTES

# RPC sampling window: 10 blocks ~ 10 minutes of chain time
DEFAULT_SAMPLE_BLOCKS = 10

# 10-minute slices per hour x hours per day
SAMPLE_EXTRAPOLATION_FACTOR = 24 * 6

LOOKBACK_HOURS = 24


class Severity(str, Enum):
    """Validator health severity, in precedence order."""
    HEALTHY = "HEALTHY"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def icon(self) -> str:
        return _SEVERITY_ICON[self]

    @property
    def color(self) -> str:
        """Slack attachment color for alerts of this severity."""
        return _SEVERITY_COLOR[self]


_SEVERITY_RANK = {
    Severity.HEALTHY: 0,
    Severity.WARNING: 1,
    Severity.CRITICAL: 2,
    Severity.ERROR: 3,
}

_SEVERITY_ICON = {
    Severity.HEALTHY: "✅",
    Severity.WARNING: "⚠️",
    Severity.CRITICAL: "🚨",
    Severity.ERROR: "🔥",
}

_SEVERITY_COLOR = {
    Severity.HEALTHY: "good",
    Severity.WARNING: "warning",
    Severity.CRITICAL: "danger",
    Severity.ERROR: "danger",
}


class ProbeTier(str, Enum):
    """Which contract probe tier produced a result."""
    VALIDATOR_INFO = "validator_info"
    IS_VALIDATOR = "is_validator"
    VALIDATOR_COUNT = "validator_count"


class BlockSource(str, Enum):
    """Where block production data came from."""
    EXPLORER = "EXPLORER"
    RPC_SAMPLE = "RPC_SAMPLE"


class ErrorCode(str, Enum):
    """Error codes carried by VALMON exceptions."""
    # Infrastructure errors
    INFRA_RPC_ERROR = "INFRA_RPC_ERROR"
    INFRA_EXPLORER_ERROR = "INFRA_EXPLORER_ERROR"

    # Input errors
    INVALID_ADDRESS = "INVALID_ADDRESS"
    CONFIG_INVALID = "CONFIG_INVALID"

    UNKNOWN = "UNKNOWN"
