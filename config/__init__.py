# PATH: config/__init__.py
"""
Configuration loading for VALMON.

Values come from config/monitor.yaml, overridden by environment variables
(a .env file is honoured via python-dotenv):

    VALMON_VALIDATORS     comma-separated validator addresses
    VALMON_RPC_URL        comma-separated RPC endpoints
    VALMON_EXPLORER_API   explorer API base URL
    SLACK_WEBHOOK_URL     Slack incoming webhook (never stored in YAML)

The resulting MonitorConfig is immutable and passed explicitly through
the pipeline.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from core.constants import (
    DEFAULT_CHECK_INTERVAL_MINUTES,
    DEFAULT_EXPLORER_API_BASE,
    DEFAULT_MAX_BLOCK_DELAY_MINUTES,
    DEFAULT_MIN_BLOCKS_PER_24H,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SAMPLE_BLOCKS,
    DEFAULT_STAKING_CONTRACT,
)
from core.exceptions import ConfigError, ValidationError
from core.models import Thresholds, normalize_address

CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG_FILE = CONFIG_DIR / "monitor.yaml"


def load_yaml(path: Path) -> Dict[str, Any]:
    """
    Load a YAML mapping.

    Args:
        path: YAML file path

    Returns:
        Parsed YAML as dict

    Raises:
        ConfigError: If the file is missing, not YAML, or not a mapping
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file is not valid YAML: {path}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


@dataclass(frozen=True)
class MonitorConfig:
    """Full monitor configuration."""
    validator_addresses: tuple[str, ...] = ()
    rpc_urls: tuple[str, ...] = ()
    explorer_api_base: Optional[str] = DEFAULT_EXPLORER_API_BASE
    staking_contract: str = DEFAULT_STAKING_CONTRACT
    thresholds: Thresholds = field(default_factory=Thresholds)
    sample_blocks: int = DEFAULT_SAMPLE_BLOCKS
    check_interval_minutes: int = DEFAULT_CHECK_INTERVAL_MINUTES
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    send_success_notifications: bool = False
    send_daily_summary: bool = True
    slack_webhook_url: Optional[str] = field(default=None, repr=False)


def _split_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(part).strip() for part in value if str(part).strip()]
    raise ConfigError(f"Expected a list or comma-separated string, got {type(value).__name__}")


def normalize_addresses(values: list[str]) -> tuple[str, ...]:
    """Normalize and de-duplicate addresses, keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        try:
            seen.setdefault(normalize_address(value), None)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid validator address in config: {value!r}",
                details={"value": value},
            ) from e
    return tuple(seen)


def _int_setting(data: Mapping[str, Any], key: str, default: int, minimum: int = 0) -> int:
    value = data.get(key, default)
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from e
    if number < minimum:
        raise ConfigError(f"{key} must be >= {minimum}, got {number}")
    return number


def _float_setting(data: Mapping[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}") from e
    if not number > 0:
        raise ConfigError(f"{key} must be > 0, got {number}")
    return number


def build_monitor_config(
    data: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> MonitorConfig:
    """
    Build a MonitorConfig from parsed YAML plus environment overrides.

    Raises:
        ConfigError: On invalid values or when no RPC endpoint is configured
    """
    env = os.environ if environ is None else environ

    addresses = _split_list(env.get("VALMON_VALIDATORS") or data.get("validator_addresses"))
    rpc_urls = _split_list(env.get("VALMON_RPC_URL") or data.get("rpc_urls"))
    if not rpc_urls:
        raise ConfigError("No RPC endpoint configured (rpc_urls / VALMON_RPC_URL)")

    explorer = env.get("VALMON_EXPLORER_API") or data.get("explorer_api_base", DEFAULT_EXPLORER_API_BASE)

    staking_contract = data.get("staking_contract", DEFAULT_STAKING_CONTRACT)
    try:
        staking_contract = normalize_address(staking_contract)
    except ValidationError as e:
        raise ConfigError(f"Invalid staking_contract: {staking_contract!r}") from e

    thresholds_data = data.get("thresholds") or {}
    thresholds = Thresholds(
        min_blocks_per_24h=_int_setting(thresholds_data, "min_blocks_per_24h", DEFAULT_MIN_BLOCKS_PER_24H),
        max_block_delay_minutes=_int_setting(thresholds_data, "max_block_delay_minutes", DEFAULT_MAX_BLOCK_DELAY_MINUTES),
    )

    notifications = data.get("notifications") or {}

    return MonitorConfig(
        validator_addresses=normalize_addresses(addresses),
        rpc_urls=tuple(rpc_urls),
        explorer_api_base=explorer or None,
        staking_contract=staking_contract,
        thresholds=thresholds,
        sample_blocks=_int_setting(data, "sample_blocks", DEFAULT_SAMPLE_BLOCKS, minimum=1),
        check_interval_minutes=_int_setting(data, "check_interval_minutes", DEFAULT_CHECK_INTERVAL_MINUTES, minimum=1),
        request_timeout_seconds=_float_setting(data, "request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT_SECONDS),
        send_success_notifications=bool(notifications.get("send_success_notifications", False)),
        send_daily_summary=bool(notifications.get("send_daily_summary", True)),
        slack_webhook_url=env.get("SLACK_WEBHOOK_URL") or None,
    )


def load_monitor_config(config_path: Path | None = None) -> MonitorConfig:
    """
    Load monitor configuration from YAML and the environment.

    Args:
        config_path: Path to a YAML file (default: config/monitor.yaml)

    Returns:
        MonitorConfig
    """
    load_dotenv()
    return build_monitor_config(load_yaml(config_path or DEFAULT_CONFIG_FILE))
