# devdoctor/core/ownership.py

from pathlib import Path

from devdoctor.core.command import run_command
from devdoctor.core.logger import LoggerProxy
from devdoctor.core.task import TaskResult
from devdoctor.core.types import Platform, Severity

log = LoggerProxy(__name__)

TASK_NAME = "Profile Ownership"


def repair_profile_ownership(
    profile_dir: Path,
    sudo_user: str | None,
    platform: Platform,
    dry_run: bool = False,
) -> TaskResult:
    """
    Hand the profile directory back to the invoking user after a sudo install.

    Running the installer under sudo leaves the profile directory owned by
    root, so the user who started the install can no longer write to it.
    """
    if platform is Platform.WINDOWS:
        return TaskResult(
            name=TASK_NAME,
            success=True,
            messages=[(Severity.DEBUG, "Ownership repair is not needed on Windows.")],
        )
    if not sudo_user:
        return TaskResult(
            name=TASK_NAME,
            success=True,
            messages=[(Severity.DEBUG, "Not running under sudo; nothing to repair.")],
        )
    if not profile_dir.exists():
        return TaskResult(
            name=TASK_NAME,
            success=True,
            messages=[(Severity.DEBUG, f"{profile_dir} does not exist; skipping.")],
        )

    log.info("Restoring ownership of %s to %s", profile_dir, sudo_user)
    result = run_command(["chown", "-R", sudo_user, str(profile_dir)], dry_run=dry_run, check=False)

    if not result.success:
        return TaskResult(
            name=TASK_NAME,
            success=False,
            messages=[
                (
                    Severity.ERROR,
                    f"Could not change owner of {profile_dir} to {sudo_user}: {result.stderr}",
                )
            ],
        )

    return TaskResult(
        name=TASK_NAME,
        success=True,
        changed=not dry_run,
        messages=[(Severity.INFO, f"{profile_dir} is now owned by {sudo_user}.")],
    )
