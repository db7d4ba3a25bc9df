"""Parsers for `pactl list` text output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from probes.command_hal import CommandOutput
from probes.context import ProbeContext

_FIELD_PATTERN = re.compile(r"^(?P<key>[A-Z][A-Za-z ]*):\s*(?P<value>.*)$")
_PROPERTY_PATTERN = re.compile(r'^(?P<key>[\w.\-]+) = "?(?P<value>.*?)"?$')
_ENTRY_PATTERN = re.compile(r"^(?P<name>.+?): (?P<rest>.*)$")
_PERCENT_PATTERN = re.compile(r"(\d+)%")
_BLUEZ_ADDRESS_PATTERN = re.compile(r"([0-9A-Fa-f]{2}(?:[_:][0-9A-Fa-f]{2}){5})")

SECTIONS = {"Properties", "Ports", "Profiles", "Formats"}


@dataclass
class _Block:
    """One `Sink #N` style record split into fields and sections."""

    index: int | None
    fields: dict[str, str] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    entries: dict[str, list[str]] = field(default_factory=dict)


def _split_blocks(text: str, header: str) -> list[_Block]:
    pattern = re.compile(rf"^{re.escape(header)} #(\d+)\s*$")
    blocks: list[_Block] = []
    current: _Block | None = None
    section: str | None = None
    section_indent = 0

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        indent = len(raw_line) - len(raw_line.lstrip())

        header_match = pattern.match(line)
        if header_match:
            current = _Block(index=int(header_match.group(1)))
            blocks.append(current)
            section = None
            continue
        if current is None:
            continue

        if section is not None and indent > section_indent:
            if section == "Properties":
                prop_match = _PROPERTY_PATTERN.match(line)
                if prop_match:
                    current.properties.setdefault(prop_match.group("key"), prop_match.group("value"))
            else:
                current.entries[section].append(line)
            continue

        section = None
        field_match = _FIELD_PATTERN.match(line)
        if not field_match:
            continue
        key = field_match.group("key")
        value = field_match.group("value").strip()
        if key in SECTIONS and not value:
            section = key
            section_indent = indent
            current.entries.setdefault(key, [])
            continue
        current.fields.setdefault(key, value)

    return blocks


def _port_availability(description: str) -> str:
    lowered = description.lower()
    if "not available" in lowered:
        return "not available"
    if "availability unknown" in lowered:
        return "unknown"
    if "available" in lowered:
        return "available"
    return "unknown"


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class SinkInfo:
    """Fields of one output sink."""

    index: int | None
    name: str
    description: str = ""
    state: str = ""
    mute: bool | None = None
    volume_percent: int | None = None
    active_port: str = ""
    ports: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    @property
    def is_hdmi(self) -> bool:
        return "hdmi" in self.name.lower() or "hdmi" in self.description.lower()

    @property
    def active_port_availability(self) -> str:
        return self.ports.get(self.active_port, "unknown")


def parse_sinks(text: str) -> list[SinkInfo]:
    """Parse `pactl list sinks` output."""

    sinks: list[SinkInfo] = []
    for block in _split_blocks(text, "Sink"):
        name = block.fields.get("Name", "")
        if not name:
            continue

        mute_value = block.fields.get("Mute")
        mute = None if mute_value is None else mute_value.lower() == "yes"

        volume_percent = None
        volume_match = _PERCENT_PATTERN.search(block.fields.get("Volume", ""))
        if volume_match:
            volume_percent = int(volume_match.group(1))

        ports: dict[str, str] = {}
        for entry in block.entries.get("Ports", []):
            if entry.startswith("Part of"):
                continue
            entry_match = _ENTRY_PATTERN.match(entry)
            if entry_match:
                ports[entry_match.group("name")] = _port_availability(entry_match.group("rest"))

        sinks.append(
            SinkInfo(
                index=block.index,
                name=name,
                description=block.fields.get("Description", ""),
                state=block.fields.get("State", ""),
                mute=mute,
                volume_percent=volume_percent,
                active_port=block.fields.get("Active Port", ""),
                ports=ports,
            )
        )
    return sinks


def find_sink(sinks: list[SinkInfo], name: str) -> SinkInfo | None:
    for sink in sinks:
        if sink.name == name:
            return sink
    return None


@dataclass(frozen=True)
class SinkInputInfo:
    """A playback stream bound to a sink."""

    index: int | None
    sink_index: int | None
    app_name: str


def parse_sink_inputs(text: str) -> list[SinkInputInfo]:
    """Parse `pactl list sink-inputs` output."""

    inputs: list[SinkInputInfo] = []
    for block in _split_blocks(text, "Sink Input"):
        app_name = (
            block.properties.get("application.name")
            or block.properties.get("media.name")
            or "Unknown"
        )
        inputs.append(
            SinkInputInfo(
                index=block.index,
                sink_index=_parse_int(block.fields.get("Sink")),
                app_name=app_name,
            )
        )
    return inputs


@dataclass(frozen=True)
class CardInfo:
    """A sound card and its profiles."""

    name: str
    description: str = ""
    active_profile: str = ""
    profiles: dict[str, bool] = field(default_factory=dict, hash=False, compare=False)

    @property
    def is_bluetooth(self) -> bool:
        lowered = self.name.lower()
        return "bluez" in lowered or "bluetooth" in lowered

    @property
    def bluetooth_address(self) -> str | None:
        """Return the device address in `AA_BB_CC_DD_EE_FF` form."""

        match = _BLUEZ_ADDRESS_PATTERN.search(self.name)
        if not match:
            return None
        return match.group(1).replace(":", "_").upper()

    @property
    def display_name(self) -> str:
        return self.description or self.name


def parse_cards(text: str) -> list[CardInfo]:
    """Parse `pactl list cards` output."""

    cards: list[CardInfo] = []
    for block in _split_blocks(text, "Card"):
        name = block.fields.get("Name", "")
        if not name:
            continue

        profiles: dict[str, bool] = {}
        for entry in block.entries.get("Profiles", []):
            if entry.startswith("Part of"):
                continue
            entry_match = _ENTRY_PATTERN.match(entry)
            if not entry_match:
                continue
            rest = entry_match.group("rest").lower()
            profiles[entry_match.group("name")] = "available: no" not in rest

        cards.append(
            CardInfo(
                name=name,
                description=block.properties.get("device.description", ""),
                active_profile=block.fields.get("Active Profile", ""),
                profiles=profiles,
            )
        )
    return cards


def get_default_sink(context: ProbeContext) -> tuple[CommandOutput, str]:
    """Return the raw `pactl get-default-sink` output and the trimmed sink name."""

    output = context.run("pactl", "get-default-sink")
    name = output.stdout.strip() if output.success else ""
    return output, name
