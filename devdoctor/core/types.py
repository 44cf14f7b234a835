# devdoctor/core/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(Enum):
    """
    Represents the severity levels for logging or messaging.

    Provides a mapping between severity levels and their corresponding
    logger method names.
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    def log_method(self) -> str:
        return self.value


class Persona(Enum):
    """Product variant of the CLI, keyed by its client name."""

    PRIMARY = "tns"
    LEGACY = "appbuilder"

    @property
    def product_name(self) -> str:
        return "NativeScript" if self is Persona.PRIMARY else "AppBuilder"


class Platform(Enum):
    """Coarse host OS classification."""

    WINDOWS = "windows"
    DARWIN = "darwin"
    OTHER = "other"

    @classmethod
    def from_sys_platform(cls, value: str) -> Platform:
        if value.startswith("win"):
            return cls.WINDOWS
        if value == "darwin":
            return cls.DARWIN
        return cls.OTHER


def _none_if_empty(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class CapabilitySnapshot:
    """
    Facts about third-party tooling detected on the host.

    A version field of ``None`` means the tool was not detected. Empty strings
    are normalised to ``None`` so there is a single "missing" state.
    """

    adb_version: str | None = None
    ant_version: str | None = None
    android_sdk_installed: bool = False
    xcode_version: str | None = None
    itunes_installed: bool = False
    java_version: str | None = None

    def __post_init__(self) -> None:
        for name in ("adb_version", "ant_version", "xcode_version", "java_version"):
            object.__setattr__(self, name, _none_if_empty(getattr(self, name)))

    def as_dict(self) -> dict[str, Any]:
        return {
            "adb_version": self.adb_version,
            "ant_version": self.ant_version,
            "android_sdk_installed": self.android_sdk_installed,
            "xcode_version": self.xcode_version,
            "itunes_installed": self.itunes_installed,
            "java_version": self.java_version,
        }


@dataclass(frozen=True)
class ToolWarning:
    """A missing or misconfigured capability plus how to fix it."""

    rule: str
    headline: str
    detail: str
    tip: str | None = None
    severity: Severity = field(default=Severity.WARNING)

    def as_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule,
            "severity": self.severity.value,
            "headline": self.headline,
            "detail": self.detail,
            "tip": self.tip,
        }
