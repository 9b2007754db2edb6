"""NetBox-backed device inventory.

Supplies the template compiler with the devices carrying a given tag and
the per-device configuration context used as template variables.
"""

from .netbox_inventory import NetBoxInventory

__all__ = ["NetBoxInventory"]
