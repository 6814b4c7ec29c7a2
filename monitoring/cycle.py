"""
monitoring/cycle.py - One monitoring cycle over all configured validators.

Validators are resolved sequentially and independently. A failure for one
validator is contained in its ERROR status; an exception escaping the loop
aborts the rest of the cycle and is reported as a single "Monitor Error"
alert.
"""

from contextlib import ExitStack
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from chains.explorer import ExplorerClient
from chains.providers import RPCProvider
from config import MonitorConfig
from core.logging import get_logger
from core.models import ValidatorStatus
from core.time import now_utc
from health.blocks import BlockProductionResolver
from health.status import StatusResolver
from monitoring.alerts import (
    Notifier,
    format_cycle_error,
    generate_daily_summary,
    process_results,
)
from staking.probe import ContractProbe

logger = get_logger(__name__)


@dataclass
class CycleReport:
    """Outcome of one cycle."""
    started_at: datetime
    results: list[ValidatorStatus] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Pipeline:
    """Owns the network clients behind a StatusResolver."""

    def __init__(self, config: MonitorConfig):
        self._stack = ExitStack()
        self.provider = self._stack.enter_context(
            RPCProvider(list(config.rpc_urls), timeout_seconds=config.request_timeout_seconds)
        )
        self.explorer = None
        if config.explorer_api_base:
            self.explorer = self._stack.enter_context(
                ExplorerClient(config.explorer_api_base, timeout_seconds=config.request_timeout_seconds)
            )
        self.resolver = StatusResolver(
            probe=ContractProbe(self.provider, config.staking_contract),
            blocks=BlockProductionResolver(self.explorer, self.provider, config.sample_blocks),
            thresholds=config.thresholds,
        )

    def close(self) -> None:
        self._stack.close()

    def __enter__(self) -> "Pipeline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def check_validators(
    config: MonitorConfig,
    resolver: StatusResolver,
    now: Optional[datetime] = None,
) -> list[ValidatorStatus]:
    """Resolve every configured validator in order."""
    results = []
    for address in config.validator_addresses:
        logger.info("Checking validator", extra={"context": {"address": address}})
        results.append(resolver.check(address, now=now))
    return results


def run_cycle(
    config: MonitorConfig,
    notifier: Notifier,
    resolver: Optional[StatusResolver] = None,
    now: Optional[datetime] = None,
) -> CycleReport:
    """
    Run one monitoring cycle and dispatch alerts.

    Args:
        config: Monitor configuration
        notifier: Notification sink
        resolver: Pre-built resolver (a network-backed one is built if None)
        now: Resolution instant (defaults to now)
    """
    report = CycleReport(started_at=now or now_utc())
    logger.info(
        "Starting validator monitoring cycle",
        extra={"context": {"validators": len(config.validator_addresses)}},
    )

    try:
        if resolver is None:
            with Pipeline(config) as pipeline:
                report.results = check_validators(config, pipeline.resolver, now)
                logger.debug(
                    "RPC stats",
                    extra={"context": pipeline.provider.get_stats_summary()},
                )
        else:
            report.results = check_validators(config, resolver, now)

        process_results(report.results, notifier, config.send_success_notifications)

    except Exception as e:
        logger.error(
            "Error in monitoring cycle",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        report.error = str(e)
        notifier.send(format_cycle_error(e), "danger")
        return report

    logger.info("Monitoring cycle completed", extra={"context": {"checked": len(report.results)}})
    return report


def run_daily_summary(
    config: MonitorConfig,
    notifier: Notifier,
    resolver: Optional[StatusResolver] = None,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    Resolve every validator and send the daily summary.

    Returns:
        The summary text, or None if the run failed
    """
    now = now or now_utc()
    logger.info("Generating daily summary")

    try:
        if resolver is None:
            with Pipeline(config) as pipeline:
                results = check_validators(config, pipeline.resolver, now)
        else:
            results = check_validators(config, resolver, now)

        summary = generate_daily_summary(results, now)
    except Exception as e:
        logger.error(
            "Error generating daily summary",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        notifier.send(f"🚨 *Daily Summary Error*: {e}", "danger")
        return None

    notifier.send(summary, "good")
    return summary


def announce_startup(config: MonitorConfig, notifier: Notifier) -> bool:
    """Send the monitor-started confirmation."""
    message = (
        "✅ *Oasys Validator Monitor Started*\n\n"
        f"• Monitoring {len(config.validator_addresses)} validator(s)\n"
        f"• Check interval: {config.check_interval_minutes} minutes\n"
        f"• Daily summary: {'Enabled' if config.send_daily_summary else 'Disabled'}\n\n"
        "Monitor is now active! 🚀"
    )
    return notifier.send(message, "good")
