# PATH: core/result.py
"""
Result types for best-effort acquisition calls.

Data-acquisition boundaries return Ok(value) or Err(reason) instead of
raising, so fallback logic is an explicit branch:

    result = explorer.get_validated_blocks(address)
    if isinstance(result, Err):
        ...fallback...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful acquisition."""
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed acquisition with a human-readable reason."""
    reason: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
