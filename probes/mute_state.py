"""Probe for sink mute state and volume level."""

from __future__ import annotations

from diagnostics.models import CheckIdentity, Finding
from probes.command_hal import format_evidence
from probes.context import ProbeContext
from probes.pactl import find_sink, get_default_sink, parse_sinks

IDENTITY = CheckIdentity.MUTE_STATE


def probe(context: ProbeContext) -> Finding:
    """Check whether the default sink is muted or nearly silent.

    Args:
        context: Per-run probe inputs.

    Returns:
        Finding describing mute state.
    """

    default_output, default_sink = get_default_sink(context)
    if not default_sink:
        return Finding.unknown(
            IDENTITY,
            "Cannot check mute state (no default sink)",
            "Set a default output device first",
            evidence=format_evidence(default_output),
        )

    sinks_output = context.run("pactl", "list", "sinks")
    evidence = format_evidence(default_output, sinks_output)
    if not sinks_output.success:
        return Finding.unknown(
            IDENTITY,
            "Cannot check mute state (unable to list sinks)",
            "Ensure audio server is running",
            evidence=evidence,
        )

    sink = find_sink(parse_sinks(sinks_output.stdout), default_sink)
    if sink is None or sink.mute is None:
        return Finding.unknown(
            IDENTITY,
            "Could not determine mute state",
            "Check sound settings manually",
            evidence=evidence,
        )

    if sink.mute:
        return Finding.error(
            IDENTITY,
            "Output is muted",
            "Unmute in sound settings or press the mute key",
            evidence=evidence,
        )

    volume = sink.volume_percent
    if volume is None:
        return Finding.ok(IDENTITY, "Output is not muted", evidence=evidence)

    if volume < context.low_volume_percent:
        return Finding.warning(
            IDENTITY,
            f"Volume is very low ({volume}%)",
            "Increase volume in sound settings",
            evidence=evidence,
        )

    return Finding.ok(IDENTITY, f"Output is not muted (volume: {volume}%)", evidence=evidence)
