"""Tests for report rendering."""

from __future__ import annotations

import json

from diagnostics.aggregator import aggregate
from diagnostics.models import CheckIdentity, Finding
from diagnostics.render import format_json, format_text, report_to_dict


def test_text_lists_checks_verdict_and_fixes(findings_with) -> None:
    """Human output shows glyphs, root cause and a numbered fix list."""

    report = aggregate(
        findings_with(
            sink_validity=Finding.error(
                CheckIdentity.SINK_VALIDITY,
                "HDMI disconnected",
                "switch to Built-in Audio",
            )
        )
    )

    text = format_text(report)

    assert "❌ HDMI disconnected" in text
    assert "   👉 Fix: switch to Built-in Audio" in text
    assert "❌ DIAGNOSIS: Issues detected" in text
    assert "🎯 Probable root cause:" in text
    assert "   1. switch to Built-in Audio" in text


def test_text_healthy(findings_with) -> None:
    text = format_text(aggregate(findings_with()))

    assert "✅ DIAGNOSIS: System looks healthy" in text
    assert "Probable root cause" not in text
    assert "Suggested fixes" not in text


def test_text_all_unknown_is_distinct(all_unknown) -> None:
    """Inconclusive runs must not read as verified healthy."""

    text = format_text(aggregate(all_unknown))

    assert "System looks healthy" not in text
    assert "6 check(s) inconclusive" in text
    assert text.count("❓") == 6


def test_text_debug_includes_evidence(findings_with) -> None:
    finding = Finding.ok(CheckIdentity.AUDIO_STACK, "running", evidence="$ pactl info\nServer Name: x")
    report = aggregate(findings_with(audio_stack=finding))

    assert "[DEBUG: audio_stack]" in format_text(report, debug=True)
    assert "[DEBUG: audio_stack]" not in format_text(report)


def test_json_fields(findings_with) -> None:
    """JSON output serializes the report field for field."""

    report = aggregate(
        findings_with(
            audio_stack=Finding.error(CheckIdentity.AUDIO_STACK, "PipeWire not running", "start pipewire"),
        )
    )

    data = json.loads(format_json(report))

    assert data["errorCount"] == 1
    assert data["warningCount"] == 0
    assert data["unknownCount"] == 0
    assert data["healthy"] is False
    assert data["rootCause"] == "audio_stack"
    assert data["remediations"] == ["start pipewire"]
    assert [f["identity"] for f in data["findings"]][0] == "audio_stack"
    assert data["findings"][0] == {
        "identity": "audio_stack",
        "severity": "error",
        "message": "PipeWire not running",
        "suggestion": "start pipewire",
    }


def test_json_evidence_only_when_requested(findings_with) -> None:
    finding = Finding.ok(CheckIdentity.AUDIO_STACK, "running", evidence="raw")
    report = aggregate(findings_with(audio_stack=finding))

    assert "evidence" not in report_to_dict(report)["findings"][0]
    assert report_to_dict(report, include_evidence=True)["findings"][0]["evidence"] == "raw"


def test_json_healthy_has_null_root_cause(findings_with) -> None:
    data = report_to_dict(aggregate(findings_with()))

    assert data["rootCause"] is None
    assert data["remediations"] == []
