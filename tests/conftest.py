"""Shared fixtures for offline audio diagnostics tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from config.controller import ConfigController
from diagnostics.models import CheckIdentity, Finding, Severity, ordered_identities
from probes.command_hal import FakeCommandRunner
from probes.context import PROBE_COMMANDS, ProbeContext

BUILTIN_SINK = "alsa_output.pci-0000_00_1f.3.analog-stereo"
HDMI_SINK = "alsa_output.pci-0000_01_00.1.hdmi-stereo"
BT_SINK = "bluez_output.00_1B_66_AA_BB_CC.1"

SINKS_OUTPUT = """\
Sink #47
    State: RUNNING
    Name: alsa_output.pci-0000_00_1f.3.analog-stereo
    Description: Built-in Audio Analog Stereo
    Driver: PipeWire
    Mute: no
    Volume: front-left: 42597 /  65% / -11.23 dB,   front-right: 42597 /  65% / -11.23 dB
            balance 0.00
    Base Volume: 65536 / 100% / 0.00 dB
    Properties:
        alsa.card = "0"
        device.description = "Built-in Audio Analog Stereo"
    Ports:
        analog-output-speaker: Speakers (type: Speaker, priority: 10000, availability unknown)
        analog-output-headphones: Headphones (type: Headphones, priority: 9900, availability group: Legacy 2, not available)
    Active Port: analog-output-speaker
    Formats:
        pcm

Sink #52
    State: SUSPENDED
    Name: alsa_output.pci-0000_01_00.1.hdmi-stereo
    Description: HDMI / DisplayPort Audio
    Driver: PipeWire
    Mute: no
    Volume: front-left: 65536 / 100% / 0.00 dB,   front-right: 65536 / 100% / 0.00 dB
    Ports:
        hdmi-output-0: HDMI / DisplayPort (type: HDMI, priority: 5900, not available)
    Active Port: hdmi-output-0
"""

SINK_INPUTS_OUTPUT = """\
Sink Input #83
    Driver: PipeWire
    Client: 82
    Sink: 52
    Mute: no
    Properties:
        media.name = "Playback"
        application.name = "Firefox"

Sink Input #90
    Driver: PipeWire
    Sink: 47
    Properties:
        media.name = "Music"
"""

CARDS_OUTPUT = """\
Card #40
    Name: alsa_card.pci-0000_00_1f.3
    Driver: alsa
    Properties:
        device.description = "Built-in Audio"
    Profiles:
        output:analog-stereo+input:analog-stereo: Analog Stereo Duplex (sinks: 1, sources: 1, priority: 6565, available: yes)
        off: Off (sinks: 0, sources: 0, priority: 0, available: yes)
    Active Profile: output:analog-stereo+input:analog-stereo

Card #60
    Name: bluez_card.00_1B_66_AA_BB_CC
    Driver: module-bluez5-device.c
    Owner Module: n/a
    Properties:
        device.description = "WH-1000XM4"
        device.api = "bluez5"
    Profiles:
        off: Off (sinks: 0, sources: 0, priority: 0, available: yes)
        a2dp-sink: High Fidelity Playback (A2DP Sink) (sinks: 1, sources: 0, priority: 16, available: yes)
        headset-head-unit: Headset Head Unit (HSP/HFP) (sinks: 1, sources: 1, priority: 1, available: yes)
    Active Profile: headset-head-unit
    Ports:
        headset-output: Headset (type: Headset, priority: 0, latency offset: 0 usec, availability unknown)
            Properties:
                port.type = "headset"
            Part of profile(s): a2dp-sink, headset-head-unit
"""

APLAY_OUTPUT = """\
**** List of PLAYBACK Hardware Devices ****
card 0: PCH [HDA Intel PCH], device 0: ALC257 Analog [ALC257 Analog]
  Subdevices: 1/1
  Subdevice #0: subdevice #0
card 0: PCH [HDA Intel PCH], device 3: HDMI 0 [HDMI 0]
  Subdevices: 1/1
  Subdevice #0: subdevice #0
"""

PACTL_INFO_PIPEWIRE = """\
Server String: /run/user/1000/pulse/native
Server Name: PulseAudio (on PipeWire 1.0.5)
Default Sink: alsa_output.pci-0000_00_1f.3.analog-stereo
"""

PACTL_INFO_PULSE = """\
Server String: /run/user/1000/pulse/native
Server Name: pulseaudio
Default Sink: alsa_output.pci-0000_00_1f.3.analog-stereo
"""


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    ConfigController.reset_instance()
    yield
    ConfigController.reset_instance()


@pytest.fixture
def make_context() -> Callable[..., ProbeContext]:
    """Return a factory for offline probe contexts."""

    def _make(
        runner: FakeCommandRunner,
        available: Iterable[str] = PROBE_COMMANDS,
        low_volume_percent: int = 5,
    ) -> ProbeContext:
        return ProbeContext(
            runner=runner,
            available_commands=frozenset(available),
            timeout_s=1.0,
            low_volume_percent=low_volume_percent,
        )

    return _make


@pytest.fixture
def healthy_runner() -> FakeCommandRunner:
    """Fake host with PipeWire running and the built-in card as default output."""

    runner = FakeCommandRunner()
    runner.add(("systemctl", "--user", "is-active", "pipewire"), stdout="active\n")
    runner.add(("systemctl", "--user", "is-active", "wireplumber"), stdout="active\n")
    runner.add(("pactl", "info"), stdout=PACTL_INFO_PIPEWIRE)
    runner.add(("aplay", "-l"), stdout=APLAY_OUTPUT)
    runner.add(("pactl", "get-default-sink"), stdout=f"{BUILTIN_SINK}\n")
    runner.add(("pactl", "list", "sinks"), stdout=SINKS_OUTPUT)
    runner.add(("pactl", "list", "sink-inputs"), stdout="")
    runner.add(("pactl", "list", "cards"), stdout=CARDS_OUTPUT.split("Card #60")[0])
    return runner


@pytest.fixture
def findings_with() -> Callable[..., set[Finding]]:
    """Return a factory building a complete finding set, Ok unless overridden."""

    def _build(**overrides: Finding) -> set[Finding]:
        findings = set()
        for identity in ordered_identities():
            finding = overrides.get(identity.value)
            if finding is None:
                finding = Finding.ok(identity, f"{identity.value} ok")
            findings.add(finding)
        return findings

    return _build


@pytest.fixture
def all_unknown() -> set[Finding]:
    return {
        Finding(identity=identity, severity=Severity.UNKNOWN, message=f"{identity.value} unknown")
        for identity in CheckIdentity
    }
