"""Probe for playback streams routed away from the default sink."""

from __future__ import annotations

from diagnostics.models import CheckIdentity, Finding
from probes.command_hal import format_evidence
from probes.context import ProbeContext
from probes.pactl import get_default_sink, parse_sink_inputs, parse_sinks

IDENTITY = CheckIdentity.SINK_INPUTS


def probe(context: ProbeContext) -> Finding:
    """Check that active streams play to the default sink.

    Args:
        context: Per-run probe inputs.

    Returns:
        Finding describing stream routing.
    """

    default_output, default_sink = get_default_sink(context)
    if not default_sink:
        return Finding.unknown(
            IDENTITY,
            "Cannot check stream routing (no default sink)",
            "Set a default output device first",
            evidence=format_evidence(default_output),
        )

    inputs_output = context.run("pactl", "list", "sink-inputs")
    if not inputs_output.success:
        return Finding.unknown(
            IDENTITY,
            "Cannot list active audio streams",
            "Ensure audio server is running",
            evidence=format_evidence(default_output, inputs_output),
        )

    inputs = parse_sink_inputs(inputs_output.stdout)
    if not inputs:
        return Finding.ok(
            IDENTITY,
            "No active audio streams (nothing playing)",
            evidence=format_evidence(default_output, inputs_output),
        )

    sinks_output = context.run("pactl", "list", "sinks")
    evidence = format_evidence(default_output, inputs_output, sinks_output)
    if not sinks_output.success:
        return Finding.unknown(
            IDENTITY,
            "Cannot resolve stream targets (unable to list sinks)",
            "Ensure audio server is running",
            evidence=evidence,
        )

    sink_names = {sink.index: sink.name for sink in parse_sinks(sinks_output.stdout)}

    misrouted: list[str] = []
    for stream in inputs:
        sink_name = sink_names.get(stream.sink_index, "")
        if sink_name and sink_name != default_sink:
            misrouted.append(f"'{stream.app_name}' is playing to '{sink_name}'")

    if misrouted:
        return Finding.warning(
            IDENTITY,
            f"{len(misrouted)} stream(s) playing to non-default output: {', '.join(misrouted)}",
            "Move streams to default output in sound settings or pavucontrol",
            evidence=evidence,
        )

    return Finding.ok(IDENTITY, f"{len(inputs)} active stream(s) correctly routed", evidence=evidence)
