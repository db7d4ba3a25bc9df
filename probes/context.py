"""Per-run inputs shared by all audio probes."""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Mapping

from probes.command_hal import CommandOutput, CommandRunner, SubprocessRunner

PROBE_COMMANDS = ("systemctl", "pactl", "aplay")

DEFAULT_TIMEOUT_S = 5.0
DEFAULT_LOW_VOLUME_PERCENT = 5


def detect_available_commands(
    commands: Iterable[str] = PROBE_COMMANDS,
    available: Iterable[str] | None = None,
) -> frozenset[str]:
    """Return the subset of commands installed on this host.

    Args:
        commands: Command names to look up.
        available: Optional override set for offline testing.

    Returns:
        Names of commands that can be executed.
    """

    if available is not None:
        allowed = set(available)
        return frozenset(name for name in commands if name in allowed)
    return frozenset(name for name in commands if shutil.which(name) is not None)


@dataclass(frozen=True)
class ProbeContext:
    """Inputs for a single diagnostic run."""

    runner: CommandRunner = field(default_factory=SubprocessRunner)
    available_commands: frozenset[str] = frozenset(PROBE_COMMANDS)
    timeout_s: float = DEFAULT_TIMEOUT_S
    low_volume_percent: int = DEFAULT_LOW_VOLUME_PERCENT

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any] | None = None,
        runner: CommandRunner | None = None,
        available_commands: Iterable[str] | None = None,
    ) -> "ProbeContext":
        """Build a live context from the loaded configuration."""

        probes_cfg = (config or {}).get("probes") or {}
        return cls(
            runner=runner if runner is not None else SubprocessRunner(),
            available_commands=detect_available_commands(available=available_commands),
            timeout_s=float(probes_cfg.get("timeout_s", DEFAULT_TIMEOUT_S)),
            low_volume_percent=int(
                probes_cfg.get("low_volume_percent", DEFAULT_LOW_VOLUME_PERCENT)
            ),
        )

    def has(self, command: str) -> bool:
        return command in self.available_commands

    def run(self, program: str, *args: str) -> CommandOutput:
        """Run a command unless it is known to be missing."""

        argv = (program, *args)
        if not self.has(program):
            return CommandOutput.not_found(argv)
        return self.runner.run(argv, self.timeout_s)
