#!/usr/bin/env python3
"""
run_monitor.py - CLI entrypoint for the validator monitor.

Usage:
    python run_monitor.py check
    python run_monitor.py watch --interval 15
    python run_monitor.py summary
    python run_monitor.py status 0x1234...5678
"""

import signal
import sys
import time
from datetime import date
from pathlib import Path
from typing import Optional

import click

from config import MonitorConfig, load_monitor_config
from core.exceptions import ConfigError, ValidationError
from core.logging import get_logger, setup_logging
from core.models import ValidatorStatus, normalize_address
from core.time import now_utc
from monitoring.alerts import JST
from monitoring.cycle import (
    Pipeline,
    announce_startup,
    run_cycle,
    run_daily_summary,
)
from monitoring.notifier import SlackNotifier

logger = get_logger("valmon.cli")

# Graceful shutdown flag
_shutdown_requested = False


def handle_shutdown(signum: int, frame: object) -> None:
    """Handle shutdown signals."""
    global _shutdown_requested
    _shutdown_requested = True
    logger.info("Shutdown requested", extra={"context": {"signal": signum}})


def _load_config(config_path: Optional[str]) -> MonitorConfig:
    try:
        return load_monitor_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def _echo_results(results: list[ValidatorStatus]) -> None:
    click.echo("\n" + "=" * 72)
    click.echo(f"{'VALIDATOR':<22} {'STATUS':<9} {'BLOCKS/24H':>10}  ISSUES")
    click.echo("=" * 72)
    for status in results:
        blocks = f"{status.blocks_validated_24h}{'~' if status.blocks_estimated else ''}"
        issues = "; ".join(status.issues) or "-"
        click.echo(f"{status.short_address:<22} {status.severity.value:<9} {blocks:>10}  {issues}")
    click.echo("=" * 72)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    help="Path to monitor YAML (default: config/monitor.yaml)",
)
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON log format",
)
@click.option(
    "--log-file",
    default=None,
    help="Also write JSON logs to this file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[str],
    log_level: str,
    json_logs: bool,
    log_file: Optional[str],
) -> None:
    """
    VALMON - Oasys validator health monitor.
    """
    setup_logging(level=log_level, log_file=log_file, json_format=json_logs)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Run one monitoring cycle and send alerts."""
    config = _load_config(ctx.obj["config_path"])
    notifier = SlackNotifier(config.slack_webhook_url, config.request_timeout_seconds)
    try:
        report = run_cycle(config, notifier)
    finally:
        notifier.close()

    _echo_results(report.results)
    if not report.ok:
        click.echo(f"Cycle failed: {report.error}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--interval",
    "-i",
    default=None,
    type=int,
    help="Minutes between cycles (default: check_interval_minutes from config)",
)
@click.option(
    "--summary-hour",
    default=9,
    type=click.IntRange(0, 23),
    help="Hour (JST) at which the daily summary is sent",
)
@click.pass_context
def watch(ctx: click.Context, interval: Optional[int], summary_hour: int) -> None:
    """Run monitoring cycles periodically until interrupted."""
    config = _load_config(ctx.obj["config_path"])
    interval_minutes = interval or config.check_interval_minutes

    signal.signal(signal.SIGINT, handle_shutdown)
    signal.signal(signal.SIGTERM, handle_shutdown)

    notifier = SlackNotifier(config.slack_webhook_url, config.request_timeout_seconds)
    if not notifier.configured:
        logger.warning("Slack webhook URL not configured. Set SLACK_WEBHOOK_URL.")

    logger.info(
        "Starting validator monitor",
        extra={"context": {
            "validators": len(config.validator_addresses),
            "interval_minutes": interval_minutes,
            "daily_summary": config.send_daily_summary,
        }},
    )
    announce_startup(config, notifier)

    last_summary: Optional[date] = None
    cycle_count = 0

    try:
        while not _shutdown_requested:
            cycle_count += 1
            run_cycle(config, notifier)

            local_now = now_utc().astimezone(JST)
            if (
                config.send_daily_summary
                and local_now.hour >= summary_hour
                and last_summary != local_now.date()
            ):
                run_daily_summary(config, notifier)
                last_summary = local_now.date()

            # Sleep in short steps so signals are honoured promptly
            deadline = time.monotonic() + interval_minutes * 60
            while not _shutdown_requested and time.monotonic() < deadline:
                time.sleep(1)

    except KeyboardInterrupt:
        logger.info("Monitor interrupted")
    finally:
        notifier.close()

    logger.info("Validator monitor stopped", extra={"context": {"cycles": cycle_count}})


@cli.command()
@click.pass_context
def summary(ctx: click.Context) -> None:
    """Resolve every validator and send the daily summary."""
    config = _load_config(ctx.obj["config_path"])
    notifier = SlackNotifier(config.slack_webhook_url, config.request_timeout_seconds)
    try:
        text = run_daily_summary(config, notifier)
    finally:
        notifier.close()

    if text is None:
        sys.exit(1)
    click.echo(text)


@cli.command()
@click.argument("address")
@click.pass_context
def status(ctx: click.Context, address: str) -> None:
    """Resolve a single validator without sending notifications."""
    config = _load_config(ctx.obj["config_path"])
    try:
        address = normalize_address(address)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="ADDRESS") from e

    with Pipeline(config) as pipeline:
        result = pipeline.resolver.check(address)

    _echo_results([result])
    for key, value in result.to_dict().items():
        click.echo(f"{key}: {value}")


if __name__ == "__main__":
    cli()
