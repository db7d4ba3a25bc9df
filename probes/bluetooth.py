"""Probe for Bluetooth headsets stuck in call (HSP/HFP) mode."""

from __future__ import annotations

from dataclasses import replace

from diagnostics.models import CheckIdentity, Finding
from probes.command_hal import CommandOutput, format_evidence
from probes.context import ProbeContext
from probes.pactl import CardInfo, get_default_sink, parse_cards

IDENTITY = CheckIdentity.BLUETOOTH

_CALL_PROFILE_MARKERS = ("hsp", "hfp", "headset-head-unit", "handsfree")
_EVIDENCE_MARKERS = (
    "Name:",
    "bluez",
    "bluetooth",
    "Active Profile:",
    "a2dp",
    "hsp",
    "hfp",
    "headset",
)


def is_call_profile(profile: str) -> bool:
    lowered = profile.lower()
    return any(marker in lowered for marker in _CALL_PROFILE_MARKERS)


def has_a2dp(card: CardInfo) -> bool:
    return any("a2dp" in name.lower() and available for name, available in card.profiles.items())


def is_active_output(card: CardInfo, default_sink: str) -> bool:
    """Return True when the default sink belongs to this card."""

    address = card.bluetooth_address
    if not default_sink or address is None:
        return False
    return address in default_sink.upper().replace(":", "_")


def _filtered_evidence(default_output: CommandOutput, cards_output: CommandOutput) -> str:
    lines = [
        line
        for line in cards_output.stdout.splitlines()
        if any(marker in line for marker in _EVIDENCE_MARKERS)
    ]
    filtered = replace(cards_output, stdout="\n".join(lines))
    return format_evidence(default_output, filtered)


def probe(context: ProbeContext) -> Finding:
    """Check whether a Bluetooth output is using a low-quality call profile.

    Args:
        context: Per-run probe inputs.

    Returns:
        Finding describing the Bluetooth audio profile.
    """

    default_output, default_sink = get_default_sink(context)
    cards_output = context.run("pactl", "list", "cards")
    evidence = _filtered_evidence(default_output, cards_output)

    if not cards_output.success:
        return Finding.unknown(
            IDENTITY,
            "Cannot check Bluetooth audio profile (unable to list cards)",
            evidence=evidence,
        )

    bt_cards = [card for card in parse_cards(cards_output.stdout) if card.is_bluetooth]
    if not bt_cards:
        return Finding.ok(IDENTITY, "No Bluetooth audio devices connected", evidence=evidence)

    issues: list[str] = []
    has_active_bt = False
    a2dp_available = False
    for card in bt_cards:
        if is_active_output(card, default_sink):
            has_active_bt = True
        if not is_call_profile(card.active_profile):
            continue
        if has_a2dp(card):
            a2dp_available = True
            issues.append(
                f"'{card.display_name}' is in call/headset mode ({card.active_profile}), A2DP available"
            )
        else:
            issues.append(
                f"'{card.display_name}' is in call/headset mode ({card.active_profile}), A2DP not available"
            )

    if issues:
        detail = "; ".join(issues)
        if a2dp_available and has_active_bt:
            return Finding.error(
                IDENTITY,
                f"Bluetooth headset in call mode: {detail}",
                "Switch Bluetooth profile to A2DP (high-quality audio) in sound settings",
                evidence=evidence,
            )
        if has_active_bt:
            return Finding.warning(
                IDENTITY,
                f"Bluetooth in low-quality mode: {detail}",
                "A2DP profile may not be available. Check if device supports it.",
                evidence=evidence,
            )
        return Finding.warning(
            IDENTITY,
            f"Bluetooth device in call mode but not active output: {detail}",
            "If using Bluetooth, switch profile to A2DP for better quality",
            evidence=evidence,
        )

    if has_active_bt:
        return Finding.ok(IDENTITY, "Bluetooth audio profile is optimal (A2DP)", evidence=evidence)
    return Finding.ok(IDENTITY, "Bluetooth device connected with correct profile", evidence=evidence)
