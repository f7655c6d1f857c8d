"""Subprocess helpers that attach operation context to failures."""

import subprocess
from pathlib import Path


def run_subprocess_with_context(
    *,
    cmd: list[str],
    operation_context: str,
    cwd: Path,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run a command and raise a descriptive error when it fails.

    Args:
        cmd: Command and arguments
        operation_context: Human-readable description of what the command does,
            e.g. "list local branches"
        cwd: Working directory
        check: If True, raise RuntimeError on non-zero exit

    Returns:
        The completed process with text stdout/stderr

    Raises:
        RuntimeError: If check is True and the command exits non-zero, or if the
            executable cannot be found
    """
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise RuntimeError(f"Failed to {operation_context}: {cmd[0]} not found") from exc

    if check and result.returncode != 0:
        stderr = result.stderr.strip()
        message = f"Failed to {operation_context}\nCommand: {' '.join(cmd)}"
        if stderr:
            message += f"\nstderr: {stderr}"
        raise RuntimeError(message)

    return result
