"""Probe for ALSA sound card presence."""

from __future__ import annotations

from diagnostics.models import CheckIdentity, Finding
from probes.command_hal import format_evidence
from probes.context import ProbeContext

IDENTITY = CheckIdentity.DEVICE_PRESENCE
NO_DEVICE_FIX = "Possible cause: missing driver or disabled device in BIOS"


def probe(context: ProbeContext) -> Finding:
    """Check that at least one sound card is present.

    Args:
        context: Per-run probe inputs.

    Returns:
        Finding describing audio device presence.
    """

    output = context.run("aplay", "-l")
    evidence = format_evidence(output)

    if output.missing:
        return Finding.unknown(
            IDENTITY,
            "Cannot check audio devices (aplay not installed)",
            "Install alsa-utils package for full diagnostics",
            evidence=evidence,
        )
    if output.timed_out:
        return Finding.unknown(IDENTITY, "Cannot check audio devices (aplay timed out)", evidence=evidence)
    if output.denied:
        return Finding.unknown(
            IDENTITY,
            "Cannot check audio devices (aplay could not be executed)",
            "Check permissions on the aplay binary",
            evidence=evidence,
        )

    if "no soundcards found" in output.stdout or "no soundcards found" in output.stderr:
        return Finding.error(IDENTITY, "No audio devices detected", NO_DEVICE_FIX, evidence=evidence)

    card_count = sum(1 for line in output.stdout.splitlines() if line.startswith("card "))
    if card_count:
        return Finding.ok(IDENTITY, f"{card_count} audio device(s) detected", evidence=evidence)

    if not output.success:
        detail = output.stderr.strip().splitlines()[0] if output.stderr.strip() else "aplay failed"
        return Finding.unknown(
            IDENTITY,
            f"Cannot check audio devices ({detail})",
            evidence=evidence,
        )

    return Finding.error(IDENTITY, "No audio devices detected", NO_DEVICE_FIX, evidence=evidence)
