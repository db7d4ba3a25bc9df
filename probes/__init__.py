"""Audio subsystem probes, one per check identity."""

from diagnostics.models import CheckIdentity
from probes import audio_stack, bluetooth, device_presence, mute_state, sink_inputs, sink_validity
from probes.context import ProbeContext, detect_available_commands

PROBES = {
    CheckIdentity.AUDIO_STACK: audio_stack.probe,
    CheckIdentity.DEVICE_PRESENCE: device_presence.probe,
    CheckIdentity.SINK_VALIDITY: sink_validity.probe,
    CheckIdentity.MUTE_STATE: mute_state.probe,
    CheckIdentity.SINK_INPUTS: sink_inputs.probe,
    CheckIdentity.BLUETOOTH: bluetooth.probe,
}

__all__ = [
    "PROBES",
    "ProbeContext",
    "detect_available_commands",
]
