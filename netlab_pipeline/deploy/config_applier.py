"""Push rendered configuration files to testbed devices.

Every regular file in the configuration directory is matched to a
testbed device by its base name (the part before the first ``.``, so
``R1.conf`` targets ``R1``).  Matched files are pushed verbatim; files
without a matching device are skipped.

Devices are processed sequentially and independently: a device that
cannot be reached or rejects its configuration is recorded as failed and
the remaining files are still applied.  Nothing is retried or rolled back.

Usage::

    applier = ConfigApplier(load_testbed(Path("testbed.yaml")))
    report = applier.apply(Path("configs"))
    if not report.succeeded:
        sys.exit(1)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.base_driver import BaseDriver
from ..core.exceptions import PipelineError
from ..drivers.pyats_driver import PyatsDriver

logger = logging.getLogger(__name__)


def device_name_for(path: Path) -> str:
    """Derive the target device name from a configuration file name."""
    return Path(path).name.split(".", 1)[0]


@dataclass
class ApplyReport:
    """Outcome of one apply run.

    Attributes:
        applied: Devices that accepted their configuration.
        skipped: File names with no matching testbed device.
        failed: Device name to error message for failed pushes.

    """

    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        """Return ``True`` if no device failed."""
        return not self.failed

    def summary(self) -> str:
        """Return a one-line summary string."""
        return (
            f"{len(self.applied)} applied, {len(self.skipped)} skipped, "
            f"{len(self.failed)} failed"
        )


class ConfigApplier:
    """Apply a directory of rendered configurations to a testbed.

    Args:
        testbed: Loaded testbed exposing a ``devices`` mapping of name to
            device object.
        driver_factory: Callable wrapping a testbed device in a
            ``BaseDriver``.

    """

    def __init__(
        self,
        testbed: Any,
        driver_factory: Callable[[Any], BaseDriver] = PyatsDriver,
    ) -> None:
        """Initialize the applier with a testbed and driver factory."""
        self._testbed = testbed
        self._driver_factory = driver_factory
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def apply(self, config_dir: Path) -> ApplyReport:
        """Push every matching configuration file in ``config_dir``.

        Args:
            config_dir: Directory of ``<device>.<ext>`` files.

        Returns:
            An ``ApplyReport`` listing applied, skipped and failed items.

        Raises:
            PipelineError: If ``config_dir`` is not a directory.

        """
        config_dir = Path(config_dir)
        if not config_dir.is_dir():
            raise PipelineError(f"Configuration directory not found: {config_dir}")

        report = ApplyReport()
        devices = self._testbed.devices
        for path in sorted(p for p in config_dir.iterdir() if p.is_file()):
            name = device_name_for(path)
            if not name or name not in devices:
                self._logger.info("Skipping %s: no device '%s' in testbed", path.name, name)
                report.skipped.append(path.name)
                continue

            try:
                self.apply_file(devices[name], path)
            except PipelineError as exc:
                self._logger.error("Configuration of %s failed: %s", name, exc)
                report.failed[name] = str(exc)
                continue
            report.applied.append(name)

        level = logging.INFO if report.succeeded else logging.WARNING
        self._logger.log(level, "Apply finished: %s", report.summary())
        return report

    def apply_file(self, device: Any, path: Path) -> None:
        """Connect to one device and push the full text of ``path``.

        Raises:
            PipelineError: If the file cannot be read, the connection fails
                or the device rejects the configuration.

        """
        try:
            config = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise PipelineError(
                f"Cannot read configuration file {path}",
                device=str(device.name),
                details={"error": str(exc)},
            ) from exc

        with self._driver_factory(device) as driver:
            driver.push_config(config)
        self._logger.info("Applied %s to %s", Path(path).name, device.name)
