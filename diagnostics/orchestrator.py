"""Run every audio probe and collect one finding per check."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from core.logging import logger
from diagnostics.aggregator import validate_findings
from diagnostics.models import CheckIdentity, Finding, FindingInvariantError, ordered_identities
from probes import PROBES
from probes.context import ProbeContext

Probe = Callable[[ProbeContext], Finding]


def run_probe(identity: CheckIdentity, probe: Probe, context: ProbeContext) -> Finding:
    """Run one probe, converting any exception into an inconclusive finding."""

    logger.debug("Running probe: %s", identity.value)
    try:
        finding = probe(context)
    except Exception as exc:  # noqa: BLE001 - diagnostics must keep running
        logger.exception("Probe failed: %s", identity.value)
        return Finding.unknown(identity, f"Probe raised exception: {exc}")

    if not isinstance(finding, Finding) or finding.identity is not identity:
        raise FindingInvariantError(
            f"Probe for '{identity.value}' returned {finding!r} instead of its own finding"
        )
    logger.debug("Finding: %s -> %s: %s", identity.value, finding.severity.value, finding.message)
    return finding


def run_all(
    context: ProbeContext | None = None,
    probes: Mapping[CheckIdentity, Probe] | None = None,
) -> frozenset[Finding]:
    """Run all probes sequentially in priority order.

    Args:
        context: Optional per-run probe inputs; a live context is built when omitted.
        probes: Optional probe registry override for offline testing.

    Returns:
        One finding per known check identity.

    Raises:
        FindingInvariantError: If any check identity has no probe or no finding.
    """

    registry = PROBES if probes is None else probes
    ctx = context if context is not None else ProbeContext.from_config()

    findings: list[Finding] = []
    for identity in ordered_identities():
        probe = registry.get(identity)
        if probe is None:
            logger.error("No probe registered for check: %s", identity.value)
            continue
        findings.append(run_probe(identity, probe, ctx))

    validate_findings(findings)
    return frozenset(findings)
