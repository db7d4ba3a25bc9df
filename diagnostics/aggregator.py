"""Aggregate probe findings into a prioritized diagnosis."""

from __future__ import annotations

from collections.abc import Iterable

from core.logging import logger
from diagnostics.models import (
    CheckIdentity,
    Finding,
    FindingInvariantError,
    Report,
    Severity,
    ordered_identities,
)


def validate_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Return findings in priority order, or raise if any check is missing or repeated."""

    by_identity: dict[CheckIdentity, Finding] = {}
    for finding in findings:
        if finding.identity in by_identity:
            raise FindingInvariantError(f"Duplicate finding for check '{finding.identity.value}'")
        by_identity[finding.identity] = finding

    missing = [identity.value for identity in ordered_identities() if identity not in by_identity]
    if missing:
        raise FindingInvariantError(f"No finding for check(s): {', '.join(missing)}")

    return [by_identity[identity] for identity in ordered_identities()]


def select_root_cause(ordered: Iterable[Finding]) -> Finding | None:
    """Return the most upstream error, falling back to the most upstream warning."""

    ordered = list(ordered)
    for severity in (Severity.ERROR, Severity.WARNING):
        for finding in ordered:
            if finding.severity is severity:
                return finding
    return None


def build_remediations(ordered: Iterable[Finding]) -> tuple[str, ...]:
    """Collect fix suggestions for issues in priority order, dropping repeats."""

    plan: list[str] = []
    for finding in ordered:
        if not finding.severity.counts_as_issue:
            continue
        suggestion = finding.suggestion
        if not suggestion or not suggestion.strip():
            continue
        if suggestion not in plan:
            plan.append(suggestion)
    return tuple(plan)


def build_summary(
    error_count: int,
    warning_count: int,
    unknown_count: int,
    root_cause: Finding | None,
) -> str:
    if error_count == 0 and warning_count == 0:
        summary = (
            "Audio system appears healthy. If you still have no sound, "
            "the issue may be application-specific."
        )
    elif error_count == 0:
        summary = (
            f"No critical issues found, but {warning_count} warning(s) detected "
            "that may affect audio."
        )
    else:
        cause = root_cause.message if root_cause is not None else "unknown"
        summary = (
            f"Found {error_count} error(s) and {warning_count} warning(s). "
            f"Most likely cause: {cause}"
        )

    if unknown_count:
        summary += f" {unknown_count} check(s) were inconclusive and could not be verified."
    return summary


def aggregate(findings: Iterable[Finding]) -> Report:
    """Build the report for one run.

    Args:
        findings: Exactly one finding per check identity, in any order.

    Returns:
        Immutable report with counts, root cause and remediation plan.

    Raises:
        FindingInvariantError: If a check is missing or reported twice.
    """

    ordered = validate_findings(findings)

    error_count = sum(1 for f in ordered if f.severity is Severity.ERROR)
    warning_count = sum(1 for f in ordered if f.severity is Severity.WARNING)
    unknown_count = sum(1 for f in ordered if f.severity is Severity.UNKNOWN)

    root_cause = select_root_cause(ordered)
    remediations = build_remediations(ordered)

    if root_cause is not None:
        logger.debug(
            "Root cause: %s (%s)",
            root_cause.identity.value,
            root_cause.severity.value,
        )

    return Report(
        findings=tuple(ordered),
        error_count=error_count,
        warning_count=warning_count,
        unknown_count=unknown_count,
        root_cause=root_cause,
        remediations=remediations,
        summary=build_summary(error_count, warning_count, unknown_count, root_cause),
    )
