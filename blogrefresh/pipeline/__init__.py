"""Batch jobs: discovery and refresh."""

from .discovery import DiscoveryJob, print_discovery_summary
from .models import (
    DiscoveryReport,
    InvalidTransition,
    LinkOutcome,
    LinkStatus,
    RecordOutcome,
    RefreshReport,
    RefreshState,
)
from .refresh import RefreshJob, print_refresh_summary

__all__ = [
    "DiscoveryJob",
    "DiscoveryReport",
    "InvalidTransition",
    "LinkOutcome",
    "LinkStatus",
    "RecordOutcome",
    "RefreshJob",
    "RefreshReport",
    "RefreshState",
    "print_discovery_summary",
    "print_refresh_summary",
]
