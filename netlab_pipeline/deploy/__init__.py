"""Configuration deployment onto lab devices."""

from .config_applier import ApplyReport, ConfigApplier, device_name_for

__all__ = ["ApplyReport", "ConfigApplier", "device_name_for"]
