# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for VALMON tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

VALIDATOR = "0x1234567890abcdef1234567890abcdef12345678"
OWNER = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
OPERATOR = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"
OTHER = "0xcccccccccccccccccccccccccccccccccccccccc"


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def abi_word(value: int) -> bytes:
    return value.to_bytes(32, "big")


def abi_address(address: str) -> bytes:
    return bytes(12) + bytes.fromhex(address[2:])


def validator_struct(
    stake: int,
    owner: str = OWNER,
    operator: str = OPERATOR,
    jailed: bool = False,
    jailed_word: int = -1,
) -> bytes:
    """8-word validators(address) payload; jailed flag in the last or penultimate word."""
    words = [abi_word(stake), abi_address(owner), abi_address(operator)] + [abi_word(0)] * 5
    if jailed:
        words[jailed_word] = abi_word(1)
    return b"".join(words)


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def struct_hex():
    """Factory for hex-encoded validator structs."""
    def build(*args, **kwargs) -> str:
        return "0x" + validator_struct(*args, **kwargs).hex()
    return build
