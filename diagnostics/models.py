"""Models for diagnostics findings and reports."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Severity(str, Enum):
    """Severity of a single finding."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    UNKNOWN = "unknown"

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @property
    def counts_as_issue(self) -> bool:
        """Return True for severities that fail the verdict."""

        return self in (Severity.WARNING, Severity.ERROR)


_GLYPHS = {
    Severity.OK: "✅",
    Severity.WARNING: "⚠️",
    Severity.ERROR: "❌",
    Severity.UNKNOWN: "❓",
}


class CheckIdentity(str, Enum):
    """Diagnostic dimensions probed on every run."""

    AUDIO_STACK = "audio_stack"
    DEVICE_PRESENCE = "device_presence"
    SINK_VALIDITY = "sink_validity"
    MUTE_STATE = "mute_state"
    SINK_INPUTS = "sink_inputs"
    BLUETOOTH = "bluetooth"

    @property
    def rank(self) -> int:
        """Causal priority; lower ranks are further upstream."""

        return PRIORITY_RANK[self]


PRIORITY_RANK = {
    CheckIdentity.AUDIO_STACK: 0,
    CheckIdentity.DEVICE_PRESENCE: 1,
    CheckIdentity.SINK_VALIDITY: 2,
    CheckIdentity.MUTE_STATE: 3,
    CheckIdentity.SINK_INPUTS: 4,
    CheckIdentity.BLUETOOTH: 5,
}


def ordered_identities() -> list[CheckIdentity]:
    """Return every check identity in priority order."""

    return sorted(CheckIdentity, key=lambda identity: identity.rank)


class FindingInvariantError(RuntimeError):
    """Raised when a finding set does not hold exactly one finding per check."""


@dataclass(frozen=True)
class Finding:
    """Outcome of a single probe."""

    identity: CheckIdentity
    severity: Severity
    message: str
    suggestion: str | None = None
    evidence: str | None = None

    @classmethod
    def ok(cls, identity: CheckIdentity, message: str, *, evidence: str | None = None) -> "Finding":
        return cls(identity=identity, severity=Severity.OK, message=message, evidence=evidence)

    @classmethod
    def warning(
        cls,
        identity: CheckIdentity,
        message: str,
        suggestion: str | None = None,
        *,
        evidence: str | None = None,
    ) -> "Finding":
        return cls(
            identity=identity,
            severity=Severity.WARNING,
            message=message,
            suggestion=suggestion,
            evidence=evidence,
        )

    @classmethod
    def error(
        cls,
        identity: CheckIdentity,
        message: str,
        suggestion: str | None = None,
        *,
        evidence: str | None = None,
    ) -> "Finding":
        return cls(
            identity=identity,
            severity=Severity.ERROR,
            message=message,
            suggestion=suggestion,
            evidence=evidence,
        )

    @classmethod
    def unknown(
        cls,
        identity: CheckIdentity,
        message: str,
        suggestion: str | None = None,
        *,
        evidence: str | None = None,
    ) -> "Finding":
        """Build a finding for a fact the probe could not determine."""

        return cls(
            identity=identity,
            severity=Severity.UNKNOWN,
            message=message,
            suggestion=suggestion,
            evidence=evidence,
        )

    def without_evidence(self) -> "Finding":
        return replace(self, evidence=None)


@dataclass(frozen=True)
class Report:
    """Aggregated result of one diagnostic run."""

    findings: tuple[Finding, ...]
    error_count: int
    warning_count: int
    unknown_count: int
    root_cause: Finding | None
    remediations: tuple[str, ...]
    summary: str

    @property
    def healthy(self) -> bool:
        """Return True when no errors or warnings were found."""

        return self.error_count == 0 and self.warning_count == 0

    @property
    def inconclusive(self) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.severity is Severity.UNKNOWN)

    def without_evidence(self) -> "Report":
        """Return a copy of the report with raw probe evidence removed."""

        root_cause = self.root_cause.without_evidence() if self.root_cause is not None else None
        return replace(
            self,
            findings=tuple(f.without_evidence() for f in self.findings),
            root_cause=root_cause,
        )
