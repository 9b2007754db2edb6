"""Verify the software version running on every testbed device.

Connects to each device except the jump host, parses ``show version``
and compares the result against one expected OS family and version.
The outcome is a single ``ValidationReport``; any mismatch or
unreachable device fails the whole run.

Usage::

    checker = VersionChecker(expected_os="ios", expected_version="15.9(3)M6")
    report = checker.check(load_testbed(Path("testbed.yaml")))
    assert report.passed, report.summary()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..core.base_driver import BaseDriver
from ..core.config import DEFAULT_JUMP_HOST_ALIAS
from ..core.exceptions import PipelineError
from ..core.validator import ValidationReport, ValidationResult, VersionValidator
from ..drivers.pyats_driver import PyatsDriver

logger = logging.getLogger(__name__)


class VersionChecker:
    """Aggregate version check across a testbed.

    Args:
        expected_os: OS family subject to the check (case-insensitive).
        expected_version: Version string every checked device must report.
        jump_host_alias: Device excluded from the check.
        driver_factory: Callable wrapping a testbed device in a
            ``BaseDriver``.

    """

    def __init__(
        self,
        expected_os: str,
        expected_version: str,
        jump_host_alias: str = DEFAULT_JUMP_HOST_ALIAS,
        driver_factory: Callable[[Any], BaseDriver] = PyatsDriver,
    ) -> None:
        """Initialize the checker with expectations and a driver factory."""
        self._validator = VersionValidator(expected_os, expected_version)
        self._jump_host_alias = jump_host_alias
        self._driver_factory = driver_factory
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def check(self, testbed: Any) -> ValidationReport:
        """Check every non-jump-host device in ``testbed``.

        Args:
            testbed: Loaded testbed exposing a ``devices`` mapping.

        Returns:
            A ``ValidationReport`` whose ``passed`` flag is the run result.

        """
        report = ValidationReport(name=str(getattr(testbed, "name", "testbed")))
        for name, device in testbed.devices.items():
            if self.is_jump_host(name, device):
                self._logger.debug("Skipping jump host %s", name)
                continue
            result = self.check_device(device)
            report.add(result)
            self._log_result(result)

        level = logging.INFO if report.passed else logging.ERROR
        self._logger.log(level, "Version check: %s", report.summary())
        return report

    def is_jump_host(self, name: str, device: Any) -> bool:
        """Return ``True`` if the testbed key or the device alias is the jump host."""
        return self._jump_host_alias in (name, getattr(device, "alias", name))

    def check_device(self, device: Any) -> ValidationResult:
        """Connect to one device and validate its version.

        Connection and parsing errors produce a failing result instead of
        propagating, so one bad device does not hide the others.
        """
        name = str(device.name)
        try:
            with self._driver_factory(device) as driver:
                info = driver.get_platform_info()
        except PipelineError as exc:
            return self._validator.device_unreachable(name, exc)
        return self._validator.assert_version(name, info)

    def _log_result(self, result: ValidationResult) -> None:
        level = logging.INFO if result.passed else logging.ERROR
        self._logger.log(level, "%s: %s", result.device, result.message)
