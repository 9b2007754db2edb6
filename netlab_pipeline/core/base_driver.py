"""Abstract base class for device session drivers.

Defines the contract the configuration applier and the version checker
rely on, independent of the library that actually talks to the device.

Usage::

    with PyatsDriver(testbed.devices["R1"]) as driver:
        driver.push_config(text)
        info = driver.get_platform_info()
"""

from __future__ import annotations

import abc
import logging

from .exceptions import ConnectionError
from .models import PlatformInfo

logger = logging.getLogger(__name__)


class BaseDriver(abc.ABC):
    """Abstract base class for a single-device management session.

    Subclasses **must** implement every ``@abstractmethod``.  The stages
    only ever talk to devices through this interface.

    The driver supports context-manager usage for automatic connect/disconnect::

        with SomeDriver(device) as drv:
            drv.get_platform_info()

    Args:
        hostname: Name of the managed device.

    """

    def __init__(self, hostname: str) -> None:
        """Initialize the driver for the named device."""
        self._hostname = hostname
        self._connected: bool = False
        self._logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    # -- Properties ---------------------------------------------------------

    @property
    def hostname(self) -> str:
        """Return the name of the managed device."""
        return self._hostname

    @property
    def is_connected(self) -> bool:
        """Return ``True`` if the driver currently holds an open session."""
        return self._connected

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> BaseDriver:
        """Open a connection to the device upon entering a ``with`` block."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Ensure the connection is closed when leaving a ``with`` block."""
        try:
            self.disconnect()
        except Exception:
            self._logger.exception("Error during disconnect in __exit__")

    # -- Abstract methods ---------------------------------------------------

    @abc.abstractmethod
    def connect(self) -> None:
        """Establish a management session to the device.

        Raises:
            ConnectionError: If the connection cannot be established.

        """

    @abc.abstractmethod
    def disconnect(self) -> None:
        """Gracefully close the management session.

        Implementations must be idempotent: calling ``disconnect`` on an
        already-closed session is a no-op.
        """

    @abc.abstractmethod
    def push_config(self, config: str) -> bool:
        """Push configuration text to the device.

        Args:
            config: Configuration commands, one per line.

        Returns:
            ``True`` once the device accepted the configuration.

        Raises:
            ConfigPushError: If the device rejects the configuration.

        """

    @abc.abstractmethod
    def get_platform_info(self) -> PlatformInfo:
        """Return the device's operating system and software version.

        Raises:
            CommandExecutionError: If the version cannot be determined.

        """

    # -- Internal helpers ---------------------------------------------------

    def _ensure_connected(self) -> None:
        """Raise if no session is open."""
        if not self._connected:
            raise ConnectionError(
                "Not connected, call connect() first",
                device=self.hostname,
            )

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"<{self.__class__.__name__} {self.hostname} {state}>"
