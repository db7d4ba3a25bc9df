"""Probe for the audio service stack (PipeWire, WirePlumber, PulseAudio)."""

from __future__ import annotations

from diagnostics.models import CheckIdentity, Finding
from probes.command_hal import CommandOutput, format_evidence
from probes.context import ProbeContext

IDENTITY = CheckIdentity.AUDIO_STACK


def _is_active(output: CommandOutput) -> bool:
    return output.stdout.strip() == "active"


def _server_name(output: CommandOutput) -> str:
    for line in output.stdout.splitlines():
        stripped = line.strip()
        if stripped.startswith("Server Name:"):
            return stripped[len("Server Name:"):].strip()
    return ""


def probe(context: ProbeContext) -> Finding:
    """Detect whether a usable audio server is running.

    Args:
        context: Per-run probe inputs.

    Returns:
        Finding describing the audio service stack.
    """

    pipewire = context.run("systemctl", "--user", "is-active", "pipewire")
    wireplumber = context.run("systemctl", "--user", "is-active", "wireplumber")
    pactl_info = context.run("pactl", "info")
    evidence = format_evidence(pipewire, wireplumber, pactl_info)

    if not context.has("systemctl") and not context.has("pactl"):
        return Finding.unknown(
            IDENTITY,
            "Cannot check audio server (systemctl and pactl not installed)",
            "Install pulseaudio-utils or pipewire-pulse for full diagnostics",
            evidence=evidence,
        )

    pipewire_running = _is_active(pipewire)
    wireplumber_running = _is_active(wireplumber)
    pactl_works = pactl_info.success
    is_pipewire_pulse = "pipewire" in _server_name(pactl_info).lower()

    if pipewire_running and wireplumber_running:
        return Finding.ok(IDENTITY, "PipeWire and WirePlumber are running", evidence=evidence)

    if pipewire_running:
        return Finding.warning(
            IDENTITY,
            "PipeWire is running but WirePlumber is not",
            "Start WirePlumber: systemctl --user start wireplumber",
            evidence=evidence,
        )

    if pactl_works and not is_pipewire_pulse:
        return Finding.ok(IDENTITY, "PulseAudio is running (legacy mode)", evidence=evidence)

    if pactl_works:
        # pipewire-pulse answers while systemd reports the unit inactive
        return Finding.ok(IDENTITY, "PipeWire is running (socket-activated)", evidence=evidence)

    if pactl_info.inconclusive:
        return Finding.unknown(
            IDENTITY,
            "Cannot confirm audio server status (pactl unavailable or not responding)",
            "Check your audio server manually: systemctl --user status pipewire",
            evidence=evidence,
        )

    return Finding.error(
        IDENTITY,
        "No audio server detected",
        "Start PipeWire: systemctl --user start pipewire pipewire-pulse wireplumber",
        evidence=evidence,
    )
