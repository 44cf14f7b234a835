import itertools

import pytest

from devdoctor.core.composer import (
    PACKAGE_MANAGER_TIPS,
    RULES,
    compose,
    package_manager_tip,
)
from devdoctor.core.types import CapabilitySnapshot, Persona, Platform, Severity

TABLE_ORDER = ["adb", "ant", "android-sdk", "xcode", "itunes", "java"]
TIP_RULES = {"adb", "ant", "android-sdk"}


def _keys(warnings):
    return [w.rule for w in warnings]


def test_rule_table_order_is_fixed():
    assert [r.key for r in RULES] == TABLE_ORDER
    assert {r.key for r in RULES if r.tip_eligible} == TIP_RULES


@pytest.mark.parametrize("persona", list(Persona))
@pytest.mark.parametrize("platform", list(Platform))
def test_healthy_host_has_no_warnings(healthy_snapshot, persona, platform):
    assert compose(healthy_snapshot, persona, platform) == []


@pytest.mark.parametrize("platform", list(Platform))
def test_legacy_never_sees_ant_or_xcode(bare_snapshot, platform):
    warnings = compose(bare_snapshot, Persona.LEGACY, platform)
    assert _keys(warnings) == ["adb", "android-sdk", "itunes", "java"]
    assert not any("Ant" in w.headline or "Xcode" in w.headline for w in warnings)


@pytest.mark.parametrize("platform", list(Platform))
@pytest.mark.parametrize("persona", list(Persona))
@pytest.mark.parametrize("xcode_version", [None, "15.0"])
def test_xcode_warning_boundaries(healthy_snapshot, platform, persona, xcode_version):
    snapshot = CapabilitySnapshot(**{**healthy_snapshot.as_dict(), "xcode_version": xcode_version})
    warnings = compose(snapshot, persona, platform)

    expected = persona is Persona.PRIMARY and platform is Platform.DARWIN and xcode_version is None
    assert ("xcode" in _keys(warnings)) is expected


def _snapshot_missing(missing: set[str]) -> CapabilitySnapshot:
    return CapabilitySnapshot(
        adb_version=None if "adb" in missing else "1.0.41",
        ant_version=None if "ant" in missing else "1.10.14",
        android_sdk_installed="android-sdk" not in missing,
        xcode_version=None if "xcode" in missing else "15.0",
        itunes_installed="itunes" not in missing,
        java_version=None if "java" in missing else "17.0.2",
    )


@pytest.mark.parametrize(
    "missing",
    [set(combo) for n in range(len(TABLE_ORDER) + 1) for combo in itertools.combinations(TABLE_ORDER, n)],
)
@pytest.mark.parametrize("platform", list(Platform))
@pytest.mark.parametrize("persona", list(Persona))
def test_output_follows_table_order(missing, persona, platform):
    warnings = compose(_snapshot_missing(missing), persona, platform)

    gated_out = set()
    if persona is Persona.LEGACY:
        gated_out |= {"ant", "xcode"}
    if platform is not Platform.DARWIN:
        gated_out.add("xcode")
    gated_in = [key for key in TABLE_ORDER if key not in gated_out]
    assert _keys(warnings) == [key for key in gated_in if key in missing]


@pytest.mark.parametrize("platform", [Platform.WINDOWS, Platform.DARWIN])
def test_tip_follows_every_tip_eligible_warning(bare_snapshot, platform):
    warnings = compose(bare_snapshot, Persona.PRIMARY, platform)

    for w in warnings:
        if w.rule in TIP_RULES:
            assert w.tip == PACKAGE_MANAGER_TIPS[platform]
        else:
            assert w.tip is None
    assert sum(1 for w in warnings if w.tip) == 3


def test_no_tip_on_other_platform(bare_snapshot):
    warnings = compose(bare_snapshot, Persona.PRIMARY, Platform.OTHER)
    assert warnings
    assert all(w.tip is None for w in warnings)


def test_tip_once_attaches_tip_to_first_eligible_warning_only(bare_snapshot):
    warnings = compose(bare_snapshot, Persona.PRIMARY, Platform.WINDOWS, tip_once=True)
    tipped = [w.rule for w in warnings if w.tip]
    assert tipped == ["adb"]


def test_package_manager_tip_names_platform_tool():
    assert "chocolatey" in package_manager_tip(Platform.WINDOWS)
    assert "Homebrew" in package_manager_tip(Platform.DARWIN)
    assert package_manager_tip(Platform.OTHER) is None


def test_compose_is_idempotent(bare_snapshot):
    first = compose(bare_snapshot, Persona.PRIMARY, Platform.DARWIN)
    second = compose(bare_snapshot, Persona.PRIMARY, Platform.DARWIN)
    assert first == second


def test_compose_does_not_touch_snapshot(bare_snapshot):
    before = bare_snapshot.as_dict()
    compose(bare_snapshot, Persona.PRIMARY, Platform.DARWIN)
    assert bare_snapshot.as_dict() == before


def test_all_warnings_are_warning_severity(bare_snapshot):
    warnings = compose(bare_snapshot, Persona.PRIMARY, Platform.DARWIN)
    assert {w.severity for w in warnings} == {Severity.WARNING}


def test_primary_on_darwin_missing_adb_and_xcode():
    snapshot = CapabilitySnapshot(
        adb_version=None,
        ant_version="1.9",
        android_sdk_installed=True,
        xcode_version=None,
        itunes_installed=True,
        java_version="1.8",
    )
    warnings = compose(snapshot, Persona.PRIMARY, Platform.DARWIN)

    assert _keys(warnings) == ["adb", "xcode"]
    assert warnings[0].tip == PACKAGE_MANAGER_TIPS[Platform.DARWIN]
    assert warnings[1].tip is None
    assert "NativeScript CLI" in warnings[0].detail


def test_legacy_on_windows_missing_adb_and_xcode():
    snapshot = CapabilitySnapshot(
        adb_version=None,
        ant_version="1.9",
        android_sdk_installed=True,
        xcode_version=None,
        itunes_installed=True,
        java_version="1.8",
    )
    warnings = compose(snapshot, Persona.LEGACY, Platform.WINDOWS)

    assert _keys(warnings) == ["adb"]
    assert warnings[0].tip == PACKAGE_MANAGER_TIPS[Platform.WINDOWS]
    assert "AppBuilder CLI" in warnings[0].detail


def test_android_sdk_wording_differs_per_persona(bare_snapshot):
    primary = compose(bare_snapshot, Persona.PRIMARY, Platform.OTHER)
    legacy = compose(bare_snapshot, Persona.LEGACY, Platform.OTHER)

    primary_sdk = next(w for w in primary if w.rule == "android-sdk")
    legacy_sdk = next(w for w in legacy if w.rule == "android-sdk")
    assert primary_sdk.headline == legacy_sdk.headline
    assert "build your projects for Android" in primary_sdk.detail
    assert "build your projects for Android" not in legacy_sdk.detail
    assert "developer.android.com" in legacy_sdk.detail


def test_java_detail_links_both_jdk_guides(bare_snapshot):
    java = compose(bare_snapshot, Persona.LEGACY, Platform.OTHER)[-1]
    assert java.rule == "java"
    assert "(for JDK 8)" in java.detail
    assert "(for JDK 7)." in java.detail
