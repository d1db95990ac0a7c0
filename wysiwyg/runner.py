"""Command runner used to invoke the external build tool.

The controller only talks to a `CommandRunner`, so tests can hand it a fake
instead of spawning real processes.
"""

import logging
import signal as signals
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a finished process.

    `signal` is set when the process was killed, in which case `returncode`
    is None.
    """

    returncode: Optional[int]
    signal: Optional[int] = None
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.signal is None and self.returncode == 0


class CommandRunner(Protocol):
    def run(self, program: str, args: Sequence[str], cwd: Path) -> CommandResult:
        """Run `program` with `args` in `cwd` and wait for it to finish.

        Raises:
            OSError: If the program cannot be started
        """
        ...


class SubprocessRunner:
    """Runs commands synchronously with `subprocess.run`."""

    def run(self, program: str, args: Sequence[str], cwd: Path) -> CommandResult:
        command = [program, *args]
        logger.info(f"Running {' '.join(command)!r} in {cwd}")
        completed = subprocess.run(
            command, cwd=str(cwd), capture_output=True, text=True, check=False
        )
        logger.debug(f"{program} exited with {completed.returncode}")

        # POSIX reports death by signal as a negative return code
        if completed.returncode < 0:
            return CommandResult(
                returncode=None,
                signal=-completed.returncode,
                stdout=completed.stdout,
                stderr=completed.stderr,
            )
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )


def describe_signal(signum: int) -> str:
    try:
        return signals.Signals(signum).name
    except ValueError:
        return str(signum)
