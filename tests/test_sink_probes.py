"""Tests for default sink, mute state and stream routing probes."""

from __future__ import annotations

from conftest import BUILTIN_SINK, HDMI_SINK, SINK_INPUTS_OUTPUT, SINKS_OUTPUT

from diagnostics.models import Severity
from probes import mute_state, sink_inputs, sink_validity
from probes.command_hal import FakeCommandRunner


def _runner(default_sink: str, sinks: str = SINKS_OUTPUT) -> FakeCommandRunner:
    runner = FakeCommandRunner()
    runner.add(("pactl", "get-default-sink"), stdout=f"{default_sink}\n")
    runner.add(("pactl", "list", "sinks"), stdout=sinks)
    return runner


def test_sink_validity_ok(make_context) -> None:
    """A running built-in sink should pass."""

    result = sink_validity.probe(make_context(_runner(BUILTIN_SINK)))

    assert result.severity is Severity.OK
    assert result.message == "Default sink: Built-in Audio Analog Stereo"


def test_sink_validity_disconnected_hdmi(make_context) -> None:
    """An HDMI default sink with an unavailable port should be an error."""

    result = sink_validity.probe(make_context(_runner(HDMI_SINK)))

    assert result.severity is Severity.ERROR
    assert "HDMI" in result.message
    assert result.suggestion == "Switch output to Built-in Audio or connect your HDMI display"


def test_sink_validity_suspended_warns(make_context) -> None:
    """A suspended sink should warn."""

    sinks = SINKS_OUTPUT.replace("State: RUNNING", "State: SUSPENDED")

    result = sink_validity.probe(make_context(_runner(BUILTIN_SINK, sinks)))

    assert result.severity is Severity.WARNING


def test_sink_validity_missing_sink(make_context) -> None:
    """A default sink absent from the sink list should be an error."""

    result = sink_validity.probe(make_context(_runner("alsa_output.usb-gone")))

    assert result.severity is Severity.ERROR
    assert "not found" in result.message


def test_sink_validity_empty_default(make_context) -> None:
    """No configured default sink should be an error."""

    result = sink_validity.probe(make_context(_runner("")))

    assert result.severity is Severity.ERROR
    assert result.message == "No default sink configured"


def test_sink_validity_server_down(make_context) -> None:
    """pactl failing to reach a server should be an error."""

    runner = FakeCommandRunner().add(
        ("pactl", "get-default-sink"),
        stderr="Connection failure: Connection refused",
        returncode=1,
    )

    result = sink_validity.probe(make_context(runner))

    assert result.severity is Severity.ERROR
    assert "not responding" in result.message


def test_sink_validity_pactl_not_executable(make_context) -> None:
    """An exec failure is inconclusive rather than a server fault."""

    runner = FakeCommandRunner().add(
        ("pactl", "get-default-sink"),
        stderr="Failed to execute command: [Errno 13] Permission denied",
        denied=True,
    )

    result = sink_validity.probe(make_context(runner))

    assert result.severity is Severity.UNKNOWN


def test_sink_validity_without_pactl(make_context) -> None:
    """Without pactl the default sink cannot be checked."""

    result = sink_validity.probe(make_context(FakeCommandRunner(), available={"aplay"}))

    assert result.severity is Severity.UNKNOWN


def test_mute_state_not_muted(make_context) -> None:
    """An unmuted sink at normal volume should pass."""

    result = mute_state.probe(make_context(_runner(BUILTIN_SINK)))

    assert result.severity is Severity.OK
    assert result.message == "Output is not muted (volume: 65%)"


def test_mute_state_muted(make_context) -> None:
    """A muted default sink should be an error."""

    sinks = SINKS_OUTPUT.replace("Mute: no", "Mute: yes", 1)

    result = mute_state.probe(make_context(_runner(BUILTIN_SINK, sinks)))

    assert result.severity is Severity.ERROR
    assert result.message == "Output is muted"


def test_mute_state_low_volume(make_context) -> None:
    """Volume below the configured threshold should warn."""

    sinks = SINKS_OUTPUT.replace("42597 /  65%", "1966 /   3%")

    result = mute_state.probe(make_context(_runner(BUILTIN_SINK, sinks)))

    assert result.severity is Severity.WARNING
    assert "3%" in result.message


def test_mute_state_threshold_from_context(make_context) -> None:
    """The low-volume threshold comes from the probe context."""

    result = mute_state.probe(make_context(_runner(BUILTIN_SINK), low_volume_percent=70))

    assert result.severity is Severity.WARNING


def test_mute_state_without_default_sink(make_context) -> None:
    """Mute state cannot be checked without a default sink."""

    result = mute_state.probe(make_context(_runner("")))

    assert result.severity is Severity.UNKNOWN


def test_sink_inputs_nothing_playing(make_context) -> None:
    """No streams should pass."""

    runner = _runner(BUILTIN_SINK).add(("pactl", "list", "sink-inputs"), stdout="")

    result = sink_inputs.probe(make_context(runner))

    assert result.severity is Severity.OK
    assert "nothing playing" in result.message


def test_sink_inputs_misrouted(make_context) -> None:
    """A stream on a non-default sink should warn and name the app."""

    runner = _runner(BUILTIN_SINK).add(("pactl", "list", "sink-inputs"), stdout=SINK_INPUTS_OUTPUT)

    result = sink_inputs.probe(make_context(runner))

    assert result.severity is Severity.WARNING
    assert result.message.startswith("1 stream(s) playing to non-default output")
    assert f"'Firefox' is playing to '{HDMI_SINK}'" in result.message


def test_sink_inputs_correctly_routed(make_context) -> None:
    """Streams on the default sink should pass."""

    inputs = SINK_INPUTS_OUTPUT.replace("Sink: 52", "Sink: 47")
    runner = _runner(BUILTIN_SINK).add(("pactl", "list", "sink-inputs"), stdout=inputs)

    result = sink_inputs.probe(make_context(runner))

    assert result.severity is Severity.OK
    assert result.message == "2 active stream(s) correctly routed"


def test_sink_inputs_listing_fails(make_context) -> None:
    """A failing sink-input listing is inconclusive."""

    runner = _runner(BUILTIN_SINK).add(
        ("pactl", "list", "sink-inputs"),
        stderr="Connection failure",
        returncode=1,
    )

    result = sink_inputs.probe(make_context(runner))

    assert result.severity is Severity.UNKNOWN


def test_sink_inputs_unresolved_targets(make_context) -> None:
    """Streams cannot be judged when the sink list is unavailable."""

    runner = FakeCommandRunner()
    runner.add(("pactl", "get-default-sink"), stdout=f"{BUILTIN_SINK}\n")
    runner.add(("pactl", "list", "sink-inputs"), stdout=SINK_INPUTS_OUTPUT)
    runner.add(("pactl", "list", "sinks"), stderr="Connection failure", returncode=1)

    result = sink_inputs.probe(make_context(runner))

    assert result.severity is Severity.UNKNOWN
    assert result.message == "Cannot resolve stream targets (unable to list sinks)"
