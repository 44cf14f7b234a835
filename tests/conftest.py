import pytest

from devdoctor.core.types import CapabilitySnapshot


@pytest.fixture
def healthy_snapshot() -> CapabilitySnapshot:
    """Every capability present."""
    return CapabilitySnapshot(
        adb_version="1.0.41",
        ant_version="1.10.14",
        android_sdk_installed=True,
        xcode_version="15.0",
        itunes_installed=True,
        java_version="17.0.2",
    )


@pytest.fixture
def bare_snapshot() -> CapabilitySnapshot:
    """Nothing detected."""
    return CapabilitySnapshot()
