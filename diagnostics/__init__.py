"""Diagnostics helpers for why-no-sound."""

from diagnostics.aggregator import aggregate
from diagnostics.models import (
    CheckIdentity,
    Finding,
    FindingInvariantError,
    Report,
    Severity,
)
from diagnostics.render import format_json, format_text

__all__ = [
    "CheckIdentity",
    "Finding",
    "FindingInvariantError",
    "Report",
    "Severity",
    "aggregate",
    "format_json",
    "format_text",
]
