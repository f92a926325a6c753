"""
External command execution for tk.

Every command is run with an argument list (no shell), and is bounded by the
run-wide Deadline. Output handling is selected with a Mode:

    Mode.OS         - stdout and stderr go to the terminal
    Mode.STDERR_OS  - stdout is captured, stderr goes to the terminal
    Mode.CAPTURE    - stdout and stderr are captured, stdout is returned
"""
import enum
import subprocess
import time

from tk.shared.errors import CommandError
from tk.shared.tools import tk_log


class Mode(enum.Enum):
    OS = "os"
    STDERR_OS = "stderr_os"
    CAPTURE = "capture"


class Deadline:
    """A single upper bound shared by every external call of a run."""

    def __init__(self, seconds: float, clock=time.monotonic):
        self._clock = clock
        self.seconds = seconds
        self.expires_at: float = clock() + seconds

    def remaining(self) -> float:
        """Returns the seconds left before the deadline, never below zero."""
        return max(0.0, self.expires_at - self._clock())

    def expired(self) -> bool:
        return self.remaining() <= 0


def exec_command(
    cmd: list,
    mode: Mode = Mode.STDERR_OS,
    deadline: Deadline | None = None,
    input: str | None = None,
    verbose: bool = False,
) -> str:
    """Runs an external command and returns its captured stdout.

    Args:
        cmd (list): The command and its arguments.
        mode (Mode): Where the command output goes.
        deadline (Deadline, optional): Bounds the command runtime.
        input (str, optional): Data written to the command stdin.
        verbose (bool): Echo the command before running it.

    Returns:
        str: The stdout of the command, empty when not captured.

    Raises:
        CommandError: The command is missing, exited non-zero, or ran past the deadline.
    """
    _timeout = None
    if deadline is not None:
        if deadline.expired():
            raise CommandError(f"{cmd[0]}: deadline exceeded", cmd=cmd)
        _timeout = deadline.remaining()

    if verbose:
        tk_log(f"running {' '.join(cmd)}", level="debug")

    _stdout = None if mode == Mode.OS else subprocess.PIPE
    _stderr = subprocess.PIPE if mode == Mode.CAPTURE else None

    try:
        _res = subprocess.run(
            cmd,
            input=input,
            stdout=_stdout,
            stderr=_stderr,
            text=True,
            timeout=_timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise CommandError(f"{cmd[0]}: command not found", cmd=cmd) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"{cmd[0]}: deadline exceeded", cmd=cmd) from e

    if _res.returncode != 0:
        raise CommandError(
            f"{cmd[0]} exited with status {_res.returncode}",
            cmd=cmd,
            returncode=_res.returncode,
            stderr=_res.stderr or "",
        )

    return _res.stdout or ""
