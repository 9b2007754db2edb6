"""Custom exception hierarchy for the lab pipeline.

All pipeline exceptions inherit from ``PipelineError`` so the CLI can map
every expected failure to a single non-zero exit while still allowing
granular catch clauses inside the stages.

Exception tree::

    PipelineError
    ├── ConnectionError
    ├── ConfigPushError
    ├── CommandExecutionError
    ├── InventoryError
    ├── MappingError
    ├── TemplateRenderError
    └── TestbedError
        └── LabNotFoundError
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description.
        device: Optional device name that triggered the error.
        details: Optional mapping of additional contextual data.

    """

    def __init__(
        self,
        message: str,
        device: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize with a message, optional device context, and details."""
        self.message = message
        self.device = device
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional device context."""
        parts: list[str] = []
        if self.device:
            parts.append(f"[{self.device}]")
        parts.append(self.message)
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)


class ConnectionError(PipelineError):
    """Raised when a device connection attempt fails or times out.

    Examples:
        - Jump host proxy unreachable
        - Authentication failure
        - Unicon state machine never reaches enable mode

    """


class ConfigPushError(PipelineError):
    """Raised when pushing configuration text to a device fails.

    Examples:
        - Invalid input detected by the device CLI
        - Session dropped mid-push

    """


class CommandExecutionError(PipelineError):
    """Raised when an exec command or its parser fails on a device.

    Examples:
        - ``show version`` returned no parsable output
        - Genie has no parser for the device OS

    """


class InventoryError(PipelineError):
    """Raised when the NetBox inventory cannot be queried.

    Examples:
        - API unreachable or token rejected
        - Device not present in NetBox

    """


class MappingError(PipelineError):
    """Raised when the tag to template mapping file is unusable.

    Examples:
        - File missing or not valid JSON
        - Top-level value is not an object
        - Non-string template name

    """


class TemplateRenderError(PipelineError):
    """Raised when a device configuration cannot be rendered.

    Examples:
        - Template file not found in the template directory
        - Variable missing from the device config context
        - Template syntax error

    """


class TestbedError(PipelineError):
    """Raised when a testbed descriptor cannot be produced or loaded.

    Examples:
        - Descriptor has no ``devices`` section
        - Jump host entry missing from the descriptor
        - pyATS loader rejects the YAML

    """


class LabNotFoundError(TestbedError):
    """Raised when no lab on the controller matches the requested title."""
