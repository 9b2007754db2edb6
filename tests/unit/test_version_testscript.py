"""Unit tests for the aetest version script sections."""

from __future__ import annotations

import functools
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

pytest.importorskip("pyats.aetest")

from netlab_pipeline.validation import version_testscript  # noqa: E402
from netlab_pipeline.validation.version_checker import VersionChecker  # noqa: E402

EXPECTED_VERSION = "15.9(3)M6"


class SectionFailed(Exception):
    """Stands in for the signal aetest raises from ``self.failed``."""


@pytest.fixture
def section() -> MagicMock:
    """Section instance whose ``failed`` stops execution like aetest does."""
    section = MagicMock()
    section.failed.side_effect = SectionFailed
    return section


@pytest.fixture
def stub_checker(stub_driver_cls: Any) -> Any:
    """Patch the script's checker to use the stub driver."""
    checker = functools.partial(VersionChecker, driver_factory=stub_driver_cls)
    with patch.object(version_testscript, "VersionChecker", side_effect=checker):
        yield


def compare(section: MagicMock, testbed: SimpleNamespace) -> None:
    version_testscript.VerifySoftwareVersion.compare_versions(
        section,
        testbed=testbed,
        expected_os="ios",
        expected_version=EXPECTED_VERSION,
        jump_host_alias="terminal_server",
    )


class TestCommonSetup:
    """Tests for the setup section."""

    def test_missing_testbed_fails(self, section: MagicMock) -> None:
        with pytest.raises(SectionFailed):
            version_testscript.CommonSetup.check_testbed(section, testbed=None)
        assert "--testbed" in section.failed.call_args.args[0]

    def test_testbed_accepted(self, section: MagicMock, fake_testbed: SimpleNamespace) -> None:
        version_testscript.CommonSetup.check_testbed(section, testbed=fake_testbed)
        section.failed.assert_not_called()


@pytest.mark.usefixtures("stub_checker")
class TestVerifySoftwareVersion:
    """Tests for the version comparison test section."""

    def test_all_devices_pass(self, section: MagicMock, fake_testbed: SimpleNamespace) -> None:
        compare(section, fake_testbed)
        section.failed.assert_not_called()
        section.passed.assert_called_once()
        assert "3/3 passed" in section.passed.call_args.args[0]

    def test_mismatch_fails_with_offenders(
        self, section: MagicMock, fake_testbed: SimpleNamespace, device_factory: Any
    ) -> None:
        fake_testbed.devices["R2"] = device_factory("R2", version="15.6(2)T")
        with pytest.raises(SectionFailed):
            compare(section, fake_testbed)
        assert "mismatched: R2" in section.failed.call_args.args[0]
        section.passed.assert_not_called()


class TestCommonCleanup:
    """Tests for the cleanup section."""

    def test_connected_devices_disconnected(self, section: MagicMock) -> None:
        connected = [MagicMock(**{"is_connected.return_value": True}) for _ in range(2)]
        idle = MagicMock(**{"is_connected.return_value": False})
        testbed = SimpleNamespace(devices={"R1": connected[0], "R2": connected[1], "SW1": idle})

        version_testscript.CommonCleanup.disconnect(section, testbed=testbed)

        for device in connected:
            device.disconnect.assert_called_once()
        idle.disconnect.assert_not_called()
