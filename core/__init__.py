"""
core - Core utilities and models for VALMON.

This package contains:
- models.py: Data models (addresses, probe results, block reports, statuses)
- constants.py: Enums, defaults and heuristic constants
- exceptions.py: Typed exceptions with error codes
- result.py: Ok/Err result types for best-effort calls
- time.py: UTC helpers and timestamp parsing
- logging.py: Structured JSON logging
"""

from core.constants import (
    BlockSource,
    ErrorCode,
    ProbeTier,
    Severity,
)
from core.exceptions import (
    ConfigError,
    ExplorerError,
    InfraError,
    RPCError,
    ValidationError,
    ValmonError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    BlockCount,
    BlockProductionReport,
    ContractProbeResult,
    Thresholds,
    ValidatorStatus,
    as_report,
    normalize_address,
    short_address,
)
from core.result import Err, Ok, Result

__all__ = [
    # Constants
    "BlockSource",
    "ErrorCode",
    "ProbeTier",
    "Severity",
    # Exceptions
    "ConfigError",
    "ExplorerError",
    "InfraError",
    "RPCError",
    "ValidationError",
    "ValmonError",
    # Models
    "BlockCount",
    "BlockProductionReport",
    "ContractProbeResult",
    "Thresholds",
    "ValidatorStatus",
    "as_report",
    "normalize_address",
    "short_address",
    # Results
    "Err",
    "Ok",
    "Result",
    # Logging
    "get_logger",
    "setup_logging",
]
