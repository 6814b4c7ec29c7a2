# PATH: core/exceptions.py
"""
Typed exceptions for VALMON.

Infra errors (RPC, explorer, timeouts) are distinguished from input and
configuration errors so the pipeline can recover from the former and fail
fast on the latter.
"""

from typing import Optional

from core.constants import ErrorCode


class ValmonError(Exception):
    """Base exception for VALMON."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class InfraError(ValmonError):
    """Infrastructure-related errors (RPC, explorer, timeouts)."""
    pass


class RPCError(InfraError):
    """RPC call failed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.INFRA_RPC_ERROR, details)


class ExplorerError(InfraError):
    """Explorer API call failed or returned an unusable body."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.INFRA_EXPLORER_ERROR, details)


class ValidationError(ValmonError):
    """Input failed validation (e.g. malformed address)."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.INVALID_ADDRESS, details)


class ConfigError(ValmonError):
    """Configuration is missing or invalid."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.CONFIG_INVALID, details)
