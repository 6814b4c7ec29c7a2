"""
Monitoring package for VALMON.

Cycle orchestration, alert formatting and notification delivery.
"""

from monitoring.alerts import (
    format_critical_alert,
    format_error_alert,
    format_success_message,
    format_warning_alert,
    generate_daily_summary,
    group_by_severity,
    process_results,
)
from monitoring.cycle import (
    CycleReport,
    Pipeline,
    announce_startup,
    check_validators,
    run_cycle,
    run_daily_summary,
)
from monitoring.notifier import SlackNotifier

__all__ = [
    "CycleReport",
    "Pipeline",
    "SlackNotifier",
    "announce_startup",
    "check_validators",
    "format_critical_alert",
    "format_error_alert",
    "format_success_message",
    "format_warning_alert",
    "generate_daily_summary",
    "group_by_severity",
    "process_results",
    "run_cycle",
    "run_daily_summary",
]
