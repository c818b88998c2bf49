"""Running external programs.

Providers that live in separate executables are driven through
``execute``, which never raises for a program that fails or cannot be
started; the outcome is always described by an ``ExecutionResult``.
"""

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

# Exit codes reported when the program could not be run at all (as a shell would)
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126
EXIT_TIMED_OUT = -1


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running a program."""

    success: bool
    exit_code: int
    output: str
    error: str


def execute(
    path: Path | str,
    args: Sequence[str] = (),
    stdin: str | None = None,
    *,
    merge_environment: bool = True,
    env: Mapping[str, str] | None = None,
    trim_output: bool = True,
    timeout: float | None = None,
) -> ExecutionResult:
    """Run a program and capture its output.

    Args:
        path: Program to run
        args: Arguments passed after the program
        stdin: Text fed to the program's standard input
        merge_environment: Start from the parent environment
        env: Extra environment variables
        trim_output: Strip surrounding whitespace from stdout and stderr
        timeout: Seconds to wait before giving up; None waits forever

    Returns:
        ExecutionResult; ``success`` is True iff the exit code is 0
    """
    environment = dict(os.environ) if merge_environment else {}
    if env:
        environment.update(env)

    command = [str(path), *args]
    try:
        proc = subprocess.run(
            command,
            input=stdin if stdin is not None else "",
            capture_output=True,
            text=True,
            errors="replace",
            env=environment,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError:
        return ExecutionResult(False, EXIT_NOT_FOUND, "", f"{path}: not found")
    except PermissionError:
        return ExecutionResult(False, EXIT_NOT_EXECUTABLE, "", f"{path}: permission denied")
    except OSError as e:
        return ExecutionResult(False, EXIT_NOT_EXECUTABLE, "", f"{path}: {e}")
    except subprocess.TimeoutExpired:
        return ExecutionResult(False, EXIT_TIMED_OUT, "", f"{path}: timed out after {timeout}s")

    output = proc.stdout or ""
    error = proc.stderr or ""
    if trim_output:
        output = output.strip()
        error = error.strip()
    return ExecutionResult(proc.returncode == 0, proc.returncode, output, error)
