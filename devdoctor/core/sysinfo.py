"""
Default capability snapshot provider.

Probes the host for the toolchain pieces the doctor cares about. Every probe is
best effort: anything that fails, times out or prints something unexpected is
reported as "not detected".
"""

from __future__ import annotations

import re
import shutil
from collections.abc import Mapping
from pathlib import Path

from devdoctor.core.command import run_command
from devdoctor.core.logger import LoggerProxy
from devdoctor.core.types import CapabilitySnapshot, Platform

log = LoggerProxy(__name__)

DEFAULT_TIMEOUT = 10.0

ADB_VERSION_RE = re.compile(r"Android Debug Bridge version (\S+)")
ANT_VERSION_RE = re.compile(r"Apache Ant(?:\(TM\))? version (\S+)")
JAVA_VERSION_RE = re.compile(r"javac (\S+)")
XCODE_VERSION_RE = re.compile(r"Xcode (\S+)")

MOBILE_DEVICE_FRAMEWORK = Path("/System/Library/PrivateFrameworks/MobileDevice.framework")
ANDROID_HOME_VARS = ("ANDROID_HOME", "ANDROID_SDK_ROOT")
ANDROID_SDK_MARKERS = ("platform-tools", "tools")


def parse_version(pattern: re.Pattern[str], text: str) -> str | None:
    """Return the first capture group of ``pattern`` in ``text``, or None."""
    match = pattern.search(text or "")
    return match.group(1) if match else None


def _probe(args: list[str], env: Mapping[str, str], timeout: float) -> str | None:
    """Run a tool found on the PATH from ``env`` and return its combined output."""
    exe = shutil.which(args[0], path=env.get("PATH"))
    if exe is None:
        log.debug("%s not found on PATH", args[0])
        return None
    result = run_command([exe, *args[1:]], check=False, env=dict(env), timeout=timeout)
    if not result.success:
        log.debug("%s exited with RC=%s", args[0], result.returncode)
        return None
    return result.output


def detect_adb(env: Mapping[str, str], timeout: float = DEFAULT_TIMEOUT) -> str | None:
    output = _probe(["adb", "version"], env, timeout)
    return parse_version(ADB_VERSION_RE, output) if output else None


def detect_ant(env: Mapping[str, str], timeout: float = DEFAULT_TIMEOUT) -> str | None:
    output = _probe(["ant", "-version"], env, timeout)
    return parse_version(ANT_VERSION_RE, output) if output else None


def detect_java(env: Mapping[str, str], timeout: float = DEFAULT_TIMEOUT) -> str | None:
    # JDK 8 and older print the javac version on stderr
    output = _probe(["javac", "-version"], env, timeout)
    return parse_version(JAVA_VERSION_RE, output) if output else None


def detect_xcode(
    platform: Platform, env: Mapping[str, str], timeout: float = DEFAULT_TIMEOUT
) -> str | None:
    if platform is not Platform.DARWIN:
        return None
    output = _probe(["xcodebuild", "-version"], env, timeout)
    return parse_version(XCODE_VERSION_RE, output) if output else None


def detect_android_sdk(env: Mapping[str, str], timeout: float = DEFAULT_TIMEOUT) -> bool:
    """
    The SDK counts as installed when the legacy ``android`` tool answers, or
    when ANDROID_HOME / ANDROID_SDK_ROOT points at an SDK layout.
    """
    output = _probe(["android", "-h"], env, timeout)
    if output and "android" in output.lower():
        return True

    for var in ANDROID_HOME_VARS:
        sdk_root = env.get(var)
        if not sdk_root:
            continue
        root = Path(sdk_root).expanduser()
        if any((root / marker).is_dir() for marker in ANDROID_SDK_MARKERS):
            log.debug("Android SDK found via %s=%s", var, root)
            return True
    return False


def detect_itunes(platform: Platform, env: Mapping[str, str]) -> bool:
    if platform is Platform.DARWIN:
        return MOBILE_DEVICE_FRAMEWORK.exists()
    if platform is Platform.WINDOWS:
        common = env.get("CommonProgramFiles") or env.get("COMMONPROGRAMFILES")
        if not common:
            return False
        return (Path(common) / "Apple" / "Mobile Device Support").is_dir()
    return False


def collect_snapshot(
    platform: Platform,
    env: Mapping[str, str],
    timeout: float = DEFAULT_TIMEOUT,
) -> CapabilitySnapshot:
    """Probe the host and return an immutable capability snapshot."""
    log.info("Collecting toolchain information...")
    snapshot = CapabilitySnapshot(
        adb_version=detect_adb(env, timeout),
        ant_version=detect_ant(env, timeout),
        android_sdk_installed=detect_android_sdk(env, timeout),
        xcode_version=detect_xcode(platform, env, timeout),
        itunes_installed=detect_itunes(platform, env),
        java_version=detect_java(env, timeout),
    )
    log.debug("Capability snapshot: %s", snapshot.as_dict())
    return snapshot
