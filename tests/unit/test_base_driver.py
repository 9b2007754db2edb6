"""Unit tests for the BaseDriver abstract class and its data models."""

from __future__ import annotations

from typing import Any

import pytest

from netlab_pipeline.core.base_driver import BaseDriver
from netlab_pipeline.core.exceptions import ConnectionError, PipelineError
from netlab_pipeline.core.models import PlatformInfo


class TestBaseDriver:
    """Tests for concrete behaviour shared by every driver."""

    @pytest.fixture
    def driver(self, stub_driver_cls: type[BaseDriver], device_factory: Any) -> BaseDriver:
        return stub_driver_cls(device_factory("R1"))

    def test_context_manager(self, driver: BaseDriver) -> None:
        assert not driver.is_connected
        with driver:
            assert driver.is_connected
        assert not driver.is_connected

    def test_hostname(self, driver: BaseDriver) -> None:
        assert driver.hostname == "R1"

    def test_push_requires_connection(self, driver: BaseDriver) -> None:
        with pytest.raises(ConnectionError, match="Not connected"):
            driver.push_config("hostname R1")

    def test_exit_swallows_disconnect_errors(
        self, stub_driver_cls: type[BaseDriver], device_factory: Any
    ) -> None:

        class FlakyDriver(stub_driver_cls):  # type: ignore[misc,valid-type]
            def disconnect(self) -> None:
                raise RuntimeError("socket already closed")

        with FlakyDriver(device_factory("R1")) as drv:
            drv.push_config("hostname R1")

    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            BaseDriver("R1")  # type: ignore[abstract]

    def test_repr_shows_state(self, driver: BaseDriver) -> None:
        assert "disconnected" in repr(driver)
        driver.connect()
        assert "R1 connected" in repr(driver)


class TestPipelineError:
    """Tests for exception message formatting."""

    def test_message_only(self) -> None:
        assert str(PipelineError("boom")) == "boom"

    def test_device_and_details(self) -> None:
        exc = PipelineError("push failed", device="R1", details={"line": 3})
        assert str(exc) == "[R1] push failed (line=3)"
        assert exc.device == "R1"
        assert exc.details == {"line": 3}


class TestPlatformInfo:
    """Tests for building PlatformInfo from parser output."""

    def test_from_nested_genie_output(self) -> None:
        parsed = {
            "version": {
                "os": "IOS",
                "version": "15.9(3)M6 ",
                "platform": "IOSv",
                "hostname": "R1",
            }
        }
        info = PlatformInfo.from_show_version(parsed)
        assert info == PlatformInfo(os="IOS", version="15.9(3)M6", platform="IOSv")

    def test_from_flat_output(self) -> None:
        info = PlatformInfo.from_show_version({"os": "NX-OS", "version": "9.3(8)"})
        assert info.os == "NX-OS"
        assert info.version == "9.3(8)"
        assert info.platform == ""

    def test_chassis_used_when_no_platform(self) -> None:
        info = PlatformInfo.from_show_version({"version": {"os": "IOS-XE", "version": "17.3.3", "chassis": "C8000V"}})
        assert info.platform == "C8000V"
