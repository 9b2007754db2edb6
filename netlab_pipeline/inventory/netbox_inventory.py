"""NetBox inventory access through pynetbox.

Wraps the pynetbox API client to provide the two lookups the pipeline
needs: every device carrying a tag, and a single device by name.  Each
device is returned as a ``DeviceRecord`` whose ``config_context`` is the
rendered NetBox config context, copied into plain Python containers.

Usage::

    inventory = NetBoxInventory(url="https://netbox.lab", token="...")
    for record in inventory.devices_by_tag("router"):
        print(record.name, record.config_context)
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.exceptions import InventoryError
from ..core.models import DeviceRecord

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    """Recursively convert pynetbox records and containers to builtins."""
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if hasattr(value, "serialize") and callable(value.serialize):
        return _plain(value.serialize())
    return value


class NetBoxInventory:
    """Query NetBox for devices and their configuration context.

    The pynetbox client is created lazily on first use; an already
    constructed API object may be injected instead.

    Args:
        url: Base URL of the NetBox instance.
        token: API token.
        verify_ssl: Verify the server TLS certificate.
        api: Optional pre-built ``pynetbox.api`` object.

    """

    def __init__(
        self,
        url: str = "",
        token: str = "",
        verify_ssl: bool = True,
        api: Any = None,
    ) -> None:
        """Initialize the inventory with connection parameters or a client."""
        self._url = url
        self._token = token
        self._verify_ssl = verify_ssl
        self._api = api
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def api(self) -> Any:
        """Return the pynetbox client, creating it on first access.

        Raises:
            InventoryError: If pynetbox is missing or no URL is configured.

        """
        if self._api is None:
            if not self._url:
                raise InventoryError("NetBox URL is not configured")
            try:
                import pynetbox
            except ImportError:
                raise InventoryError(
                    "pynetbox is not installed. Install with: pip install pynetbox"
                ) from None
            self._api = pynetbox.api(self._url, token=self._token)
            self._api.http_session.verify = self._verify_ssl
            if not self._verify_ssl:
                self._logger.warning("NetBox TLS verification disabled for %s", self._url)
        return self._api

    def devices_by_tag(self, tag: str) -> list[DeviceRecord]:
        """Return every device carrying ``tag``.

        Args:
            tag: Tag slug as stored in NetBox.

        Returns:
            Device records in the order NetBox returned them.

        Raises:
            InventoryError: If the query fails.

        """
        try:
            devices = list(self.api.dcim.devices.filter(tag=tag))
        except InventoryError:
            raise
        except Exception as exc:
            raise InventoryError(
                f"Failed to query devices tagged '{tag}'",
                details={"error": str(exc)},
            ) from exc

        records = [self._to_record(device) for device in devices]
        self._logger.info("NetBox returned %d device(s) tagged '%s'", len(records), tag)
        return records

    @staticmethod
    def _to_record(device: Any) -> DeviceRecord:
        """Convert a pynetbox device record to a ``DeviceRecord``."""
        context = getattr(device, "config_context", None) or {}
        tags = getattr(device, "tags", None) or []
        return DeviceRecord(
            name=str(device.name) if device.name is not None else "",
            config_context=_plain(context),
            tags=tuple(_tag_slug(t) for t in tags),
        )


def _tag_slug(tag: Any) -> str:
    """Return the slug of a nested tag record, dict or plain string."""
    if isinstance(tag, dict):
        return str(tag.get("slug", ""))
    return str(getattr(tag, "slug", tag))
