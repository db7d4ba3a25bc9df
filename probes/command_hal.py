"""Thin command execution HAL for audio probes."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from typing import Protocol

from core.logging import logger


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of one external command."""

    argv: tuple[str, ...]
    stdout: str = ""
    stderr: str = ""
    returncode: int | None = 0
    missing: bool = False
    timed_out: bool = False
    denied: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.inconclusive

    @property
    def inconclusive(self) -> bool:
        """Return True when the command never produced a usable answer."""

        return self.missing or self.timed_out or self.denied

    @classmethod
    def not_found(cls, argv: tuple[str, ...]) -> "CommandOutput":
        return cls(
            argv=argv,
            stderr=f"{argv[0]}: command not found",
            returncode=None,
            missing=True,
        )


class CommandRunner(Protocol):
    """Minimal command runner interface used by probes."""

    def run(self, argv: tuple[str, ...], timeout_s: float) -> CommandOutput:
        """Run a command and capture its output."""


class SubprocessRunner:
    """Run commands with subprocess, never raising to the caller."""

    def run(self, argv: tuple[str, ...], timeout_s: float) -> CommandOutput:
        env = dict(os.environ)
        env["LC_ALL"] = "C"
        try:
            result = subprocess.run(
                list(argv),
                check=False,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout_s,
                env=env,
            )
        except FileNotFoundError:
            logger.debug("Command not found: %s", argv[0])
            return CommandOutput.not_found(argv)
        except subprocess.TimeoutExpired as exc:
            logger.warning("Command timed out after %.1fs: %s", timeout_s, " ".join(argv))
            return CommandOutput(
                argv=argv,
                stdout=_decode(exc.stdout),
                stderr=_decode(exc.stderr) or f"timed out after {timeout_s:.1f}s",
                returncode=None,
                timed_out=True,
            )
        except OSError as exc:
            logger.debug("Command failed to start: %s (%s)", argv[0], exc)
            return CommandOutput(
                argv=argv,
                stderr=f"Failed to execute command: {exc}",
                returncode=None,
                denied=True,
            )

        return CommandOutput(
            argv=argv,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )


def _decode(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


@dataclass
class FakeCommandRunner:
    """Fake command runner for offline diagnostics."""

    outputs: dict[tuple[str, ...], CommandOutput] = field(default_factory=dict)
    calls: list[tuple[str, ...]] = field(default_factory=list)

    def add(
        self,
        argv: tuple[str, ...],
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = 0,
        *,
        timed_out: bool = False,
        denied: bool = False,
    ) -> "FakeCommandRunner":
        """Register a canned output for a command line."""

        self.outputs[argv] = CommandOutput(
            argv=argv,
            stdout=stdout,
            stderr=stderr,
            returncode=None if timed_out or denied else returncode,
            timed_out=timed_out,
            denied=denied,
        )
        return self

    def run(self, argv: tuple[str, ...], timeout_s: float) -> CommandOutput:
        """Return the canned output, or a not-found result for unknown commands."""

        self.calls.append(argv)
        output = self.outputs.get(argv)
        if output is None:
            return CommandOutput.not_found(argv)
        return output


def format_evidence(*outputs: CommandOutput) -> str:
    """Render command outputs as a shell-like transcript."""

    blocks: list[str] = []
    for output in outputs:
        lines = [f"$ {' '.join(output.argv)}"]
        body = output.stdout.rstrip()
        if body:
            lines.append(body)
        err = output.stderr.rstrip()
        if err:
            lines.append(f"[stderr] {err}")
        if output.timed_out:
            lines.append("[timed out]")
        elif output.returncode not in (0, None):
            lines.append(f"[exit {output.returncode}]")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)
