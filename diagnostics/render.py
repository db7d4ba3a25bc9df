"""Text and JSON rendering for diagnostic reports."""

from __future__ import annotations

import json
from typing import Any

from diagnostics.models import Finding, Report

RULE = "─" * 41


def verdict_line(report: Report) -> str:
    if report.error_count:
        return "❌ DIAGNOSIS: Issues detected"
    if report.warning_count:
        return "⚠️  DIAGNOSIS: Potential issues"
    if report.unknown_count:
        return (
            "✅ DIAGNOSIS: No issues detected "
            f"({report.unknown_count} check(s) inconclusive)"
        )
    return "✅ DIAGNOSIS: System looks healthy"


def format_text(report: Report, debug: bool = False) -> str:
    """Return a human-friendly diagnostics report."""

    lines = ["", "🔊 why-no-sound — Linux Audio Diagnostic", RULE, ""]

    for finding in report.findings:
        lines.append(f"{finding.severity.glyph} {finding.message}")
        if finding.suggestion:
            lines.append(f"   👉 Fix: {finding.suggestion}")
        if debug and finding.evidence:
            lines.append("")
            lines.append(f"   [DEBUG: {finding.identity.value}]")
            lines.extend(f"   | {line}" for line in finding.evidence.splitlines())
            lines.append("")

    lines.extend(["", RULE, verdict_line(report), "", report.summary])

    if report.root_cause is not None:
        lines.extend(["", "🎯 Probable root cause:", f"   {report.root_cause.message}"])

    if report.remediations:
        lines.extend(["", "📋 Suggested fixes (in order):"])
        lines.extend(
            f"   {index}. {remediation}"
            for index, remediation in enumerate(report.remediations, start=1)
        )

    lines.append("")
    return "\n".join(lines)


def finding_to_dict(finding: Finding, include_evidence: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "identity": finding.identity.value,
        "severity": finding.severity.value,
        "message": finding.message,
        "suggestion": finding.suggestion,
    }
    if include_evidence:
        data["evidence"] = finding.evidence
    return data


def report_to_dict(report: Report, include_evidence: bool = False) -> dict[str, Any]:
    """Serialize a report field-for-field for machine consumption."""

    root_cause = report.root_cause.identity.value if report.root_cause is not None else None
    return {
        "findings": [finding_to_dict(f, include_evidence) for f in report.findings],
        "errorCount": report.error_count,
        "warningCount": report.warning_count,
        "unknownCount": report.unknown_count,
        "healthy": report.healthy,
        "summary": report.summary,
        "rootCause": root_cause,
        "remediations": list(report.remediations),
    }


def format_json(report: Report, include_evidence: bool = False) -> str:
    return json.dumps(report_to_dict(report, include_evidence), indent=2, ensure_ascii=False)
