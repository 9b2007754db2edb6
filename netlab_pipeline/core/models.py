"""Data models handed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class DeviceRecord:
    """A device as described by the inventory.

    Attributes:
        name: Unique device name.
        config_context: Open-ended key/value data used as template
            variables.  Leaf values may be strings, numbers, booleans,
            lists or nested mappings.
        tags: Tag slugs attached to the device.

    """

    name: str
    config_context: dict[str, Any] = field(default_factory=dict)
    tags: tuple[str, ...] = ()


@dataclass
class RenderedConfig:
    """Configuration text rendered for one device.

    Attributes:
        device: Device name the text belongs to.
        template: Template file name used for rendering.
        tag: Inventory tag that selected the device.
        text: Rendered configuration text.
        path: File the text was written to, once persisted.

    """

    device: str
    template: str
    tag: str
    text: str
    path: Path | None = None


@dataclass(frozen=True)
class PlatformInfo:
    """Normalised ``show version`` data.

    Attributes:
        os: Operating system name as reported by the device.
        version: Software version string.
        platform: Hardware or virtual platform, if reported.

    """

    os: str
    version: str
    platform: str = ""

    @classmethod
    def from_show_version(cls, parsed: dict[str, Any]) -> PlatformInfo:
        """Build from a Genie ``show version`` parse result.

        Genie nests the data under a ``version`` key for IOS-family
        parsers; flat dictionaries are accepted as well.
        """
        data = parsed.get("version", parsed)
        if not isinstance(data, dict):
            data = parsed
        return cls(
            os=str(data.get("os", "")),
            version=str(data.get("version", "")).strip(),
            platform=str(data.get("platform", data.get("chassis", ""))),
        )
