"""Assertion-style validators for post-deployment verification.

Each assertion compares what a device reported against an expectation
and returns a ``ValidationResult`` instead of raising, so a whole run can
be accumulated into one ``ValidationReport`` and judged at the end.

Usage::

    validator = VersionValidator(expected_os="ios", expected_version="15.9(3)M6")
    result = validator.assert_version("R1", platform_info)
    if not result.passed:
        print(result.message)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .models import PlatformInfo

logger = logging.getLogger(__name__)


class Severity(StrEnum):
    """Severity level for validation results."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


@dataclass
class ValidationResult:
    """Outcome of a single validation assertion.

    Attributes:
        name: Short identifier for the assertion.
        passed: Whether the assertion succeeded.
        message: Human-readable description of the outcome.
        severity: Impact level if the assertion failed.
        expected: The expected value or condition.
        actual: The observed value.
        device: Name of the target device.
        details: Additional context for troubleshooting.

    """

    name: str
    passed: bool
    message: str
    severity: Severity = Severity.MEDIUM
    expected: Any = None
    actual: Any = None
    device: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def skipped(self) -> bool:
        """Return ``True`` if the device was not subject to the check."""
        return bool(self.details.get("skipped", False))


@dataclass
class ValidationReport:
    """Aggregated collection of validation results for one run.

    Attributes:
        name: Label of the run (usually the testbed name).
        results: Ordered list of individual validation outcomes.

    """

    name: str
    results: list[ValidationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """Return ``True`` only if every result passed."""
        return all(r.passed for r in self.results)

    @property
    def pass_count(self) -> int:
        """Number of passing assertions."""
        return sum(1 for r in self.results if r.passed)

    @property
    def fail_count(self) -> int:
        """Number of failing assertions."""
        return sum(1 for r in self.results if not r.passed)

    @property
    def skip_count(self) -> int:
        """Number of devices left out of the comparison."""
        return sum(1 for r in self.results if r.skipped)

    @property
    def failures(self) -> list[ValidationResult]:
        """Return only the failing results."""
        return [r for r in self.results if not r.passed]

    def add(self, result: ValidationResult) -> None:
        """Append a validation result to the report."""
        self.results.append(result)

    def summary(self) -> str:
        """Return a one-line summary string."""
        total = len(self.results)
        return (
            f"[{self.name}] {self.pass_count}/{total} passed, "
            f"{self.fail_count}/{total} failed, {self.skip_count} skipped"
        )


class VersionValidator:
    """Assertions over ``show version`` data.

    The OS comparison is case-insensitive; the version comparison is exact
    after trimming surrounding whitespace.

    Args:
        expected_os: OS family subject to the version check (e.g. ``ios``).
        expected_version: Version string every device of that family must run.

    """

    def __init__(self, expected_os: str, expected_version: str) -> None:
        """Initialize the validator with the expected OS family and version."""
        self._expected_os = expected_os.strip().lower()
        self._expected_version = expected_version.strip()
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def expected_os(self) -> str:
        """Return the normalised OS family."""
        return self._expected_os

    @property
    def expected_version(self) -> str:
        """Return the expected version string."""
        return self._expected_version

    def assert_version(self, device: str, info: PlatformInfo) -> ValidationResult:
        """Assert that a device runs the expected software version.

        Devices reporting a different OS family are not compared; they
        yield a passing, ``skipped`` result.

        Args:
            device: Name of the device.
            info: Platform data reported by the device.

        Returns:
            A ``ValidationResult`` indicating pass, fail or skip.

        """
        reported_os = info.os.strip().lower()
        if reported_os != self._expected_os:
            return ValidationResult(
                name="software_version",
                passed=True,
                message=f"OS '{info.os}' is outside family '{self._expected_os}', not checked",
                severity=Severity.INFO,
                expected=self._expected_os,
                actual=info.os,
                device=device,
                details={"skipped": True},
            )

        if info.version.strip() == self._expected_version:
            return ValidationResult(
                name="software_version",
                passed=True,
                message=f"Running expected version {info.version}",
                severity=Severity.INFO,
                expected=self._expected_version,
                actual=info.version,
                device=device,
            )

        return ValidationResult(
            name="software_version",
            passed=False,
            message=f"Running version {info.version}, expected {self._expected_version}",
            severity=Severity.HIGH,
            expected=self._expected_version,
            actual=info.version,
            device=device,
            details={"platform": info.platform},
        )

    def device_unreachable(self, device: str, error: Exception) -> ValidationResult:
        """Build a failing result for a device that could not be queried."""
        return ValidationResult(
            name="software_version",
            passed=False,
            message=f"Version could not be collected: {error}",
            severity=Severity.CRITICAL,
            expected=self._expected_version,
            device=device,
            details={"error": str(error)},
        )
