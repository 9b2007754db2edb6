"""pyATS / Unicon device driver.

Implements ``BaseDriver`` on top of a device object from a loaded pyATS
testbed.  Unicon owns the session: when the testbed routes a device's
connection through the jump host proxy, ``connect`` transparently goes
through it.  Genie parsers turn ``show version`` into structured data.

Requires:
    - pyats[library]

Usage::

    testbed = load_testbed(Path("testbed.yaml"))
    with PyatsDriver(testbed.devices["R1"]) as drv:
        drv.push_config(Path("configs/R1.conf").read_text())
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.base_driver import BaseDriver
from ..core.exceptions import (
    CommandExecutionError,
    ConfigPushError,
    ConnectionError,
)
from ..core.models import PlatformInfo

logger = logging.getLogger(__name__)

SHOW_VERSION = "show version"


class PyatsDriver(BaseDriver):
    """Driver for a pyATS testbed device.

    Args:
        device: A ``pyats.topology.Device`` (or any object exposing
            ``name``, ``connect``, ``disconnect``, ``configure``
            and ``parse``).
        log_stdout: Echo the Unicon session to stdout.
        learn_hostname: Let Unicon learn the prompt hostname instead of
            trusting the testbed name.

    """

    def __init__(
        self,
        device: Any,
        log_stdout: bool = False,
        learn_hostname: bool = True,
    ) -> None:
        """Initialize the driver around a testbed device object."""
        super().__init__(str(device.name))
        self._device = device
        self._log_stdout = log_stdout
        self._learn_hostname = learn_hostname

    @property
    def device(self) -> Any:
        """Return the wrapped testbed device."""
        return self._device

    # -- Connection lifecycle -----------------------------------------------

    def connect(self) -> None:
        """Open a Unicon session to the device.

        Raises:
            ConnectionError: If the session cannot be established.

        """
        try:
            self._device.connect(
                log_stdout=self._log_stdout,
                learn_hostname=self._learn_hostname,
            )
        except Exception as exc:
            raise ConnectionError(
                f"Failed to connect: {exc}",
                device=self.hostname,
            ) from exc
        self._connected = True
        self._logger.info("Connected to %s", self.hostname)

    def disconnect(self) -> None:
        """Close the Unicon session.  Idempotent."""
        if not self._connected:
            return
        try:
            self._device.disconnect()
        except Exception:
            self._logger.debug("Error closing session to %s", self.hostname, exc_info=True)
        finally:
            self._connected = False
        self._logger.info("Disconnected from %s", self.hostname)

    # -- Configuration and commands -----------------------------------------

    def push_config(self, config: str) -> bool:
        """Send configuration text through the device's configure service.

        Args:
            config: Configuration commands, one per line.

        Returns:
            ``True`` once the device accepted every line.

        Raises:
            ConfigPushError: If Unicon reports an error.

        """
        self._ensure_connected()
        try:
            self._device.configure(config)
        except Exception as exc:
            raise ConfigPushError(
                f"Config push failed: {exc}",
                device=self.hostname,
            ) from exc
        self._logger.info(
            "Pushed %d configuration line(s) to %s",
            len([line for line in config.splitlines() if line.strip()]),
            self.hostname,
        )
        return True

    def get_platform_info(self) -> PlatformInfo:
        """Parse ``show version`` with Genie.

        Raises:
            CommandExecutionError: If parsing fails or yields no version.

        """
        self._ensure_connected()
        try:
            parsed = self._device.parse(SHOW_VERSION)
        except Exception as exc:
            raise CommandExecutionError(
                f"Could not parse '{SHOW_VERSION}': {exc}",
                device=self.hostname,
                details={"command": SHOW_VERSION},
            ) from exc

        info = PlatformInfo.from_show_version(dict(parsed))
        if not info.version:
            raise CommandExecutionError(
                "No version in parsed output",
                device=self.hostname,
                details={"command": SHOW_VERSION},
            )
        self._logger.debug("%s reports %s %s", self.hostname, info.os, info.version)
        return info
