"""Probe for the default output sink."""

from __future__ import annotations

from diagnostics.models import CheckIdentity, Finding
from probes.command_hal import format_evidence
from probes.context import ProbeContext
from probes.pactl import find_sink, get_default_sink, parse_sinks

IDENTITY = CheckIdentity.SINK_VALIDITY


def probe(context: ProbeContext) -> Finding:
    """Check the default sink exists, is awake and is not an unplugged HDMI port.

    Args:
        context: Per-run probe inputs.

    Returns:
        Finding describing default sink validity.
    """

    default_output, default_sink = get_default_sink(context)
    if default_output.inconclusive:
        return Finding.unknown(
            IDENTITY,
            "Cannot determine default sink (pactl unavailable or not responding)",
            evidence=format_evidence(default_output),
        )
    if not default_output.success:
        return Finding.error(
            IDENTITY,
            "Cannot determine default sink (audio server not responding)",
            "Ensure PipeWire or PulseAudio is running",
            evidence=format_evidence(default_output),
        )
    if not default_sink:
        return Finding.error(
            IDENTITY,
            "No default sink configured",
            "Set a default output device in your sound settings",
            evidence=format_evidence(default_output),
        )

    sinks_output = context.run("pactl", "list", "sinks")
    evidence = format_evidence(default_output, sinks_output)
    if not sinks_output.success:
        return Finding.unknown(IDENTITY, "Cannot list sinks", "Check audio server status", evidence=evidence)

    sink = find_sink(parse_sinks(sinks_output.stdout), default_sink)
    if sink is None:
        return Finding.error(
            IDENTITY,
            f"Default sink '{default_sink}' not found in sink list",
            "Your default audio device may have been removed. Select a new output device.",
            evidence=evidence,
        )

    description = sink.description or sink.name
    if sink.is_hdmi and sink.active_port_availability == "not available":
        return Finding.error(
            IDENTITY,
            f"Default output is HDMI ({description}) but appears disconnected",
            "Switch output to Built-in Audio or connect your HDMI display",
            evidence=evidence,
        )

    if sink.state.upper() == "SUSPENDED":
        return Finding.warning(
            IDENTITY,
            "Default sink is SUSPENDED (no active audio streams)",
            "This is normal when nothing is playing. Try playing audio.",
            evidence=evidence,
        )

    return Finding.ok(IDENTITY, f"Default sink: {description}", evidence=evidence)
