"""
Warning composition for the post-install doctor.

A fixed, ordered rule table is evaluated against a capability snapshot for the
active persona and host platform. Each rule carries its own persona gate,
platform gate and predicate; rules never look at each other, so the output
order is always the table order.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from devdoctor.core.types import CapabilitySnapshot, Persona, Platform, ToolWarning

ANDROID_SDK_REQUIREMENTS_URL = "http://developer.android.com/sdk/index.html#Requirements"
ANT_MANUAL_URL = "http://ant.apache.org/manual/index.html"
ITUNES_URL = "http://www.apple.com"
JDK8_INSTALL_URL = (
    "http://docs.oracle.com/javase/8/docs/technotes/guides/install/install_overview.html"
)
JDK7_INSTALL_URL = "http://docs.oracle.com/javase/7/docs/webnotes/install/"

PACKAGE_MANAGER_TIPS: dict[Platform, str] = {
    Platform.WINDOWS: (
        "To avoid setting up the necessary environment variables, you can use the "
        "chocolatey package manager to install the Android SDK and its dependencies."
    ),
    Platform.DARWIN: (
        "To avoid setting up the necessary environment variables, you can use the "
        "Homebrew package manager to install the Android SDK and its dependencies."
    ),
}

BOTH_PERSONAS = frozenset(Persona)
PRIMARY_ONLY = frozenset({Persona.PRIMARY})
ANY_PLATFORM = frozenset(Platform)
DARWIN_ONLY = frozenset({Platform.DARWIN})

Message = Callable[[Persona], str]


@dataclass(frozen=True)
class Rule:
    key: str
    personas: frozenset[Persona]
    platforms: frozenset[Platform]
    fires: Callable[[CapabilitySnapshot], bool]
    headline: str
    detail: Message
    tip_eligible: bool = False

    def applies(self, snapshot: CapabilitySnapshot, persona: Persona, platform: Platform) -> bool:
        if persona not in self.personas:
            return False
        if platform not in self.platforms:
            return False
        return self.fires(snapshot)


def _lines(*parts: str) -> str:
    return "\n".join(parts)


def _adb_detail(persona: Persona) -> str:
    return _lines(
        f"For Android-related operations, the {persona.product_name} CLI will use "
        "a built-in version of adb.",
        "To avoid possible issues with the native Android emulator, Genymotion or connected",
        "Android devices, verify that you have installed the latest Android SDK and",
        f"its dependencies as described in {ANDROID_SDK_REQUIREMENTS_URL}",
    )


def _ant_detail(persona: Persona) -> str:
    return _lines(
        "You will not be able to build your projects for Android.",
        "To be able to build for Android, download and install Apache Ant and",
        f"its dependencies as described in {ANT_MANUAL_URL}",
    )


def _android_sdk_detail(persona: Persona) -> str:
    if persona is Persona.PRIMARY:
        return _lines(
            "You will not be able to build your projects for Android and run them "
            "in the native emulator.",
            "To be able to build for Android and run apps in the native emulator, "
            "verify that you have",
            "installed the latest Android SDK and its dependencies as described in "
            f"{ANDROID_SDK_REQUIREMENTS_URL}",
        )
    return _lines(
        "You will not be able to run your apps in the native emulator. "
        "To be able to run apps",
        "in the native Android emulator, verify that you have installed the latest Android SDK",
        f"and its dependencies as described in {ANDROID_SDK_REQUIREMENTS_URL}",
    )


def _xcode_detail(persona: Persona) -> str:
    return _lines(
        "You will not be able to build your projects for iOS or run them in the iOS Simulator.",
        "To be able to build for iOS and run apps in the native emulator, "
        "verify that you have installed Xcode.",
    )


def _itunes_detail(persona: Persona) -> str:
    return _lines(
        "You will not be able to work with iOS devices via cable connection.",
        "To be able to work with connected iOS devices,",
        f"download and install iTunes from {ITUNES_URL}",
    )


def _java_detail(persona: Persona) -> str:
    return _lines(
        "You will not be able to work with the Android SDK and you might not be able",
        "to perform some Android-related operations. To ensure that you can develop and",
        "test your apps for Android, verify that you have installed the JDK as",
        f"described in {JDK8_INSTALL_URL} (for JDK 8)",
        f"or {JDK7_INSTALL_URL} (for JDK 7).",
    )


# Table order is output order.
RULES: tuple[Rule, ...] = (
    Rule(
        key="adb",
        personas=BOTH_PERSONAS,
        platforms=ANY_PLATFORM,
        fires=lambda s: s.adb_version is None,
        headline="adb from the Android SDK is not installed or is not configured properly.",
        detail=_adb_detail,
        tip_eligible=True,
    ),
    Rule(
        key="ant",
        personas=PRIMARY_ONLY,
        platforms=ANY_PLATFORM,
        fires=lambda s: s.ant_version is None,
        headline="Apache Ant is not installed or is not configured properly.",
        detail=_ant_detail,
        tip_eligible=True,
    ),
    Rule(
        key="android-sdk",
        personas=BOTH_PERSONAS,
        platforms=ANY_PLATFORM,
        fires=lambda s: not s.android_sdk_installed,
        headline="The Android SDK is not installed or is not configured properly.",
        detail=_android_sdk_detail,
        tip_eligible=True,
    ),
    Rule(
        key="xcode",
        personas=PRIMARY_ONLY,
        platforms=DARWIN_ONLY,
        fires=lambda s: s.xcode_version is None,
        headline="Xcode is not installed or is not configured properly.",
        detail=_xcode_detail,
    ),
    Rule(
        key="itunes",
        personas=BOTH_PERSONAS,
        platforms=ANY_PLATFORM,
        fires=lambda s: not s.itunes_installed,
        headline="iTunes is not installed.",
        detail=_itunes_detail,
    ),
    Rule(
        key="java",
        personas=BOTH_PERSONAS,
        platforms=ANY_PLATFORM,
        fires=lambda s: s.java_version is None,
        headline="The Java Development Kit (JDK) is not installed or is not configured properly.",
        detail=_java_detail,
    ),
)


def package_manager_tip(platform: Platform) -> str | None:
    """Package-manager suggestion for the host platform, if there is one."""
    return PACKAGE_MANAGER_TIPS.get(platform)


def compose(
    snapshot: CapabilitySnapshot,
    persona: Persona,
    platform: Platform,
    *,
    tip_once: bool = False,
) -> list[ToolWarning]:
    """
    Evaluate the rule table and return the warnings that fire, in table order.

    Every tip-eligible warning carries the platform's package-manager tip. With
    ``tip_once`` only the first tip-eligible warning carries it.
    """
    tip = package_manager_tip(platform)
    tip_given = False
    warnings: list[ToolWarning] = []

    for rule in RULES:
        if not rule.applies(snapshot, persona, platform):
            continue

        rule_tip = None
        if rule.tip_eligible and tip and not (tip_once and tip_given):
            rule_tip = tip
            tip_given = True

        warnings.append(
            ToolWarning(
                rule=rule.key,
                headline=rule.headline,
                detail=rule.detail(persona),
                tip=rule_tip,
            )
        )

    return warnings
