# devdoctor/core/command.py

import shlex
import subprocess

from devdoctor.core.logger import LoggerProxy

log = LoggerProxy(__name__)


class CommandResult:
    """Holds the result of a command execution."""

    def __init__(self, returncode: int, stdout: str, stderr: str, success: bool):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.success = success

    @property
    def output(self) -> str:
        """stdout and stderr joined; some tools print their version on stderr."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


def run_command(
    cmd_list: list[str],
    dry_run: bool = False,
    check: bool = True,  # If True, non-zero exit code is considered failure
    capture: bool = True,
    text: bool = True,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """
    Runs an external command using subprocess.

    Args:
        cmd_list: Command and arguments as a list of strings.
        dry_run: If True, print the command instead of running it.
        check: If True, non-zero exit codes indicate failure.
        capture: If True, capture stdout and stderr.
        text: If True, decode stdout/stderr as text.
        cwd: Directory to run the command in.
        env: Environment variables dictionary for the subprocess.
        timeout: Seconds to wait before giving up on the process.

    Returns:
        CommandResult object with success status, return code, stdout, stderr.
    """
    cmd_str = shlex.join(cmd_list)
    log.debug("Running: %s%s", cmd_str, f" in {cwd}" if cwd else "")

    if dry_run:
        print(f"DRYRUN: Would execute: {cmd_str}")
        return CommandResult(returncode=0, stdout="", stderr="", success=True)

    try:
        process = subprocess.run(
            cmd_list,
            check=False,  # We check manually based on the 'check' flag
            capture_output=capture,
            text=text,
            cwd=cwd,
            env=env,
            timeout=timeout,
        )
    except FileNotFoundError:
        log.debug("Command not found: %s", cmd_list[0])
        return CommandResult(
            returncode=-1,
            stdout="",
            stderr=f"Command not found: {cmd_list[0]}",
            success=False,
        )
    except subprocess.TimeoutExpired:
        log.warning("Command timed out after %ss: %s", timeout, cmd_str)
        return CommandResult(
            returncode=-1, stdout="", stderr=f"Timed out after {timeout}s", success=False
        )
    except OSError as e:
        log.error("An unexpected error occurred running command: %s", cmd_str, exc_info=True)
        return CommandResult(returncode=-1, stdout="", stderr=str(e), success=False)

    stdout = process.stdout.strip() if process.stdout else ""
    stderr = process.stderr.strip() if process.stderr else ""

    if stdout:
        log.debug("STDOUT: %s", stdout)
    if stderr:
        log.debug("STDERR (RC=%s): %s", process.returncode, stderr)

    success = process.returncode == 0
    if check and not success:
        log.error("Command failed with exit code %s: %s", process.returncode, cmd_str)
    else:
        log.debug("Command finished with exit code %s.", process.returncode)
    return CommandResult(process.returncode, stdout, stderr, success=success)
