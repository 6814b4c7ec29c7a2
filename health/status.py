"""
health/status.py - Validator status classification.

classify() is a pure function: identical inputs always give the same
issues (same order) and severity. Rules are evaluated independently and
every one that applies is listed:

    1. not active                 -> "validator not active"
    2. jailed                     -> "validator is jailed"
    3. blocks_24h < minimum       -> "low block production: ..."
    4. last block too old         -> "no blocks in N minutes (max: M)"
       last block unknown         -> "no recent blocks found"

Severity:
    no issues                     -> HEALTHY
    issues, active and not jailed -> WARNING
    otherwise                     -> CRITICAL
    pipeline failure              -> ERROR (no partial classification)
"""

from datetime import datetime
from typing import Optional

from core.constants import Severity
from core.exceptions import ValidationError
from core.logging import get_logger
from core.models import (
    BlockProductionReport,
    Thresholds,
    ValidatorStatus,
    normalize_address,
    short_address,
)
from core.result import Err
from core.time import minutes_since, now_utc
from health.blocks import BlockProductionResolver
from staking.probe import ContractProbe

logger = get_logger(__name__)


def find_issues(
    is_active: bool,
    is_jailed: bool,
    report: BlockProductionReport,
    thresholds: Thresholds,
    now: datetime,
) -> list[str]:
    issues = []

    if not is_active:
        issues.append("validator not active")

    if is_jailed:
        issues.append("validator is jailed")

    if report.count_24h < thresholds.min_blocks_per_24h:
        issues.append(
            f"low block production: {report.count_24h} blocks in 24h "
            f"(min: {thresholds.min_blocks_per_24h})"
        )

    if report.newest_block_time is not None:
        idle_minutes = minutes_since(report.newest_block_time, now)
        if idle_minutes > thresholds.max_block_delay_minutes:
            issues.append(
                f"no blocks in {round(idle_minutes)} minutes "
                f"(max: {thresholds.max_block_delay_minutes})"
            )
    else:
        issues.append("no recent blocks found")

    return issues


def severity_for(issues: list[str], is_active: bool, is_jailed: bool) -> Severity:
    if not issues:
        return Severity.HEALTHY
    if is_active and not is_jailed:
        return Severity.WARNING
    return Severity.CRITICAL


def classify(
    address: str,
    is_active: bool,
    is_jailed: bool,
    report: BlockProductionReport,
    thresholds: Thresholds,
    now: datetime,
) -> ValidatorStatus:
    """Classify one validator from already-acquired data."""
    canonical = normalize_address(address)
    issues = find_issues(is_active, is_jailed, report, thresholds, now)

    return ValidatorStatus(
        address=canonical,
        short_address=short_address(canonical),
        timestamp=now,
        is_active=is_active,
        is_jailed=is_jailed,
        blocks_validated_24h=report.count_24h,
        last_block_number=report.newest_block_number,
        last_block_time=report.newest_block_time,
        issues=tuple(issues),
        severity=severity_for(issues, is_active, is_jailed),
        blocks_estimated=report.is_estimate,
    )


def error_status(address: str, message: str, now: datetime) -> ValidatorStatus:
    """Status for a validator whose data could not be resolved."""
    try:
        canonical = normalize_address(address)
        display = short_address(canonical)
    except ValidationError:
        canonical = str(address)
        display = canonical

    return ValidatorStatus(
        address=canonical,
        short_address=display,
        timestamp=now,
        issues=(f"Error fetching data: {message}",),
        severity=Severity.ERROR,
    )


class StatusResolver:
    """Runs probe -> block production -> classify for one validator."""

    def __init__(
        self,
        probe: ContractProbe,
        blocks: BlockProductionResolver,
        thresholds: Thresholds,
    ):
        self.probe = probe
        self.blocks = blocks
        self.thresholds = thresholds

    def check(self, address: str, now: Optional[datetime] = None) -> ValidatorStatus:
        """
        Resolve and classify address.

        Never raises: any failure of the pipeline becomes an ERROR status.
        """
        now = now or now_utc()

        try:
            status = self._check(address, now)
        except Exception as e:
            logger.error(
                "Validator resolution failed",
                extra={"context": {"address": address, "error": str(e)}},
                exc_info=True,
            )
            status = error_status(address, str(e), now)

        logger.info(
            f"Validator {status.short_address}: {status.severity.value} "
            f"({status.blocks_validated_24h} blocks/24h)",
            extra={"context": {"issues": list(status.issues)}},
        )
        return status

    def _check(self, address: str, now: datetime) -> ValidatorStatus:
        canonical = normalize_address(address)

        probed = self.probe.probe(canonical)
        is_active = probed.is_active if probed else False
        is_jailed = probed.is_jailed if probed else False

        # Blocks are attributed to the operator when one is registered
        producer = (probed.block_producer if probed else None) or canonical

        resolved = self.blocks.resolve(producer, now)
        if isinstance(resolved, Err):
            return error_status(canonical, resolved.reason, now)

        return classify(canonical, is_active, is_jailed, resolved.value, self.thresholds, now)
