"""
monitoring/alerts.py - Grouping and message formatting for validator statuses.

Messages use Slack mrkdwn (*bold*). Sampled (RPC fallback) block counts
are marked "(est.)" so they are not mistaken for explorer data.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Protocol

from core.constants import Severity
from core.logging import get_logger
from core.models import ValidatorStatus
from core.time import minutes_since, now_utc

logger = get_logger(__name__)

# Daily summaries are rendered in the operators' timezone
JST = timezone(timedelta(hours=9), "JST")


class Notifier(Protocol):
    def send(self, message: str, color: str = "good") -> bool: ...


def group_by_severity(results: Iterable[ValidatorStatus]) -> dict[Severity, list[ValidatorStatus]]:
    """Group statuses by severity, every severity present as a key."""
    groups: dict[Severity, list[ValidatorStatus]] = {severity: [] for severity in Severity}
    for status in results:
        groups[status.severity].append(status)
    return groups


def _blocks(status: ValidatorStatus) -> str:
    suffix = " (est.)" if status.blocks_estimated else ""
    return f"{status.blocks_validated_24h}{suffix}"


def format_critical_alert(validators: list[ValidatorStatus]) -> str:
    lines = [f"🚨 *CRITICAL ALERT* - {len(validators)} validator(s) have critical issues!", ""]
    for v in validators:
        state = "🟢 Active" if v.is_active else "🔴 Inactive"
        if v.is_jailed:
            state += " 🔒 Jailed"
        lines.append(f"*{v.short_address}*")
        lines.append(f"• Status: {state}")
        lines.append(f"• Blocks (24h): {_blocks(v)}")
        lines.append(f"• Issues: {', '.join(v.issues)}")
        lines.append("")
    lines.append("⚡ *Immediate action required!*")
    return "\n".join(lines)


def format_warning_alert(validators: list[ValidatorStatus]) -> str:
    lines = [f"⚠️ *WARNING* - {len(validators)} validator(s) need attention", ""]
    for v in validators:
        lines.append(f"*{v.short_address}*")
        lines.append(f"• Blocks (24h): {_blocks(v)}")
        lines.append(f"• Issues: {', '.join(v.issues)}")
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def format_error_alert(validators: list[ValidatorStatus]) -> str:
    lines = [f"🔥 *MONITOR ERROR* - Unable to check {len(validators)} validator(s)", ""]
    for v in validators:
        lines.append(f"*{v.short_address}*")
        lines.append(f"• Error: {', '.join(v.issues)}")
        lines.append("")
    lines.append("🔧 Please check the monitoring system")
    return "\n".join(lines)


def format_success_message(validators: list[ValidatorStatus]) -> str:
    lines = [f"✅ *All Clear* - {len(validators)} validator(s) operating normally", ""]
    lines.extend(f"• {v.short_address}: {_blocks(v)} blocks/24h" for v in validators)
    return "\n".join(lines)


def format_cycle_error(error: BaseException) -> str:
    return f"🚨 *Monitor Error*: {error}"


def generate_daily_summary(results: list[ValidatorStatus], now: Optional[datetime] = None) -> str:
    """Daily report: overview, per-validator details and totals."""
    now = now or now_utc()
    local = now.astimezone(JST)
    groups = group_by_severity(results)

    lines = [f"📊 *Daily Validator Summary* - {local:%Y/%m/%d}", ""]

    lines.append("*📈 Status Overview*")
    lines.append(f"• ✅ Healthy: {len(groups[Severity.HEALTHY])}")
    lines.append(f"• ⚠️ Warning: {len(groups[Severity.WARNING])}")
    lines.append(f"• 🚨 Critical: {len(groups[Severity.CRITICAL])}")
    lines.append(f"• 🔥 Error: {len(groups[Severity.ERROR])}")
    lines.append("")

    lines.append("*📋 Validator Details*")
    for v in results:
        lines.append(f"{v.severity.icon} *{v.short_address}*")
        lines.append(f"   • Blocks (24h): {_blocks(v)}")
        if v.last_block_time is not None:
            age = round(minutes_since(v.last_block_time, now))
            lines.append(f"   • Last block: {age} minutes ago")
        if v.issues:
            lines.append(f"   • Issues: {', '.join(v.issues)}")
        lines.append("")

    total_blocks = sum(v.blocks_validated_24h for v in results)
    avg_blocks = round(total_blocks / len(results)) if results else 0
    network_ok = not groups[Severity.CRITICAL] and not groups[Severity.ERROR]

    lines.append("*⚡ Performance Metrics*")
    lines.append(f"• Total blocks (24h): {total_blocks}")
    lines.append(f"• Average per validator: {avg_blocks}")
    lines.append(f"• Network health: {'🟢 Good' if network_ok else '🔴 Issues detected'}")
    lines.append("")
    lines.append(f"Generated at {local:%H:%M:%S} JST")

    return "\n".join(lines)


def process_results(
    results: list[ValidatorStatus],
    notifier: Notifier,
    send_success: bool = False,
) -> dict[Severity, list[ValidatorStatus]]:
    """
    Send alerts for one cycle's results.

    Critical and error alerts go out as "danger", warnings as "warning".
    An all-clear is sent only when send_success is enabled.
    """
    groups = group_by_severity(results)
    critical = groups[Severity.CRITICAL]
    warnings = groups[Severity.WARNING]
    errors = groups[Severity.ERROR]
    healthy = groups[Severity.HEALTHY]

    logger.info(
        "Status summary",
        extra={"context": {
            "healthy": len(healthy),
            "warning": len(warnings),
            "critical": len(critical),
            "error": len(errors),
        }},
    )

    if critical:
        notifier.send(format_critical_alert(critical), Severity.CRITICAL.color)

    if warnings:
        notifier.send(format_warning_alert(warnings), Severity.WARNING.color)

    if errors:
        notifier.send(format_error_alert(errors), Severity.ERROR.color)

    if send_success and healthy and not (critical or warnings or errors):
        notifier.send(format_success_message(healthy), Severity.HEALTHY.color)

    return groups
