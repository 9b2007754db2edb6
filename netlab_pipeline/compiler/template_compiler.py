"""Render per-device configuration files from Jinja2 templates.

A JSON mapping ties inventory tags to template files.  For every tag the
compiler asks the inventory for the matching devices and renders the
tag's template with each device's configuration context, writing one
``<device>.<ext>`` file per device.

Rendering is strict: a missing template, a syntax error or a variable
absent from the context stops the run with ``TemplateRenderError``.

Usage::

    compiler = TemplateCompiler(
        inventory=NetBoxInventory(url, token),
        mapping=load_mapping(Path("templates/mapping.json")),
        template_dir=Path("templates"),
    )
    compiler.compile(Path("configs"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    UndefinedError,
)

from ..core.exceptions import MappingError, TemplateRenderError
from ..core.models import DeviceRecord, RenderedConfig

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "conf"


class DeviceSource(Protocol):
    """Anything that can list devices by tag (e.g. ``NetBoxInventory``)."""

    def devices_by_tag(self, tag: str) -> list[DeviceRecord]: ...


def load_mapping(path: Path) -> dict[str, str]:
    """Load and validate a tag to template mapping file.

    Args:
        path: JSON file holding a flat object of strings.

    Returns:
        The mapping, in file order.

    Raises:
        MappingError: If the file is missing, malformed, or not a flat
            string to string object.

    """
    path = Path(path)
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise MappingError(f"Mapping file not found: {path}") from None
    except (OSError, json.JSONDecodeError) as exc:
        raise MappingError(
            f"Mapping file is not valid JSON: {path}",
            details={"error": str(exc)},
        ) from exc

    if not isinstance(raw, dict):
        raise MappingError(
            f"Mapping must be a JSON object, got {type(raw).__name__}",
            details={"path": str(path)},
        )
    for tag, template in raw.items():
        if not isinstance(template, str) or not template:
            raise MappingError(
                f"Template for tag '{tag}' must be a non-empty string",
                details={"path": str(path)},
            )
    logger.debug("Loaded %d mapping entries from %s", len(raw), path)
    return dict(raw)


class TemplateCompiler:
    """Compile device configurations from inventory data.

    Args:
        inventory: Source of devices per tag.
        mapping: Tag to template file name mapping.
        template_dir: Directory the templates (and their includes) live in.
        extension: Extension given to the rendered files.

    """

    def __init__(
        self,
        inventory: DeviceSource,
        mapping: dict[str, str],
        template_dir: Path,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        """Initialize the compiler and its Jinja2 environment."""
        self._inventory = inventory
        self._mapping = dict(mapping)
        self._template_dir = Path(template_dir)
        self._extension = extension.lstrip(".")
        self._env = Environment(
            loader=FileSystemLoader(str(self._template_dir)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def render(self, device: DeviceRecord, template_name: str, tag: str = "") -> RenderedConfig:
        """Render one template for one device.

        Args:
            device: Device whose config context supplies the variables.
            template_name: Template file relative to the template directory.
            tag: Tag that selected the device, kept for logging.

        Returns:
            The rendered configuration (not yet written).

        Raises:
            TemplateRenderError: If the template is missing or cannot be
                rendered with the device's context.

        """
        try:
            template = self._env.get_template(template_name)
            text = template.render(device.config_context)
        except TemplateNotFound as exc:
            raise TemplateRenderError(
                f"Template not found: {exc.name}",
                device=device.name,
                details={"template_dir": str(self._template_dir)},
            ) from exc
        except UndefinedError as exc:
            raise TemplateRenderError(
                f"Undefined template variable: {exc.message}",
                device=device.name,
                details={"template": template_name},
            ) from exc
        except TemplateError as exc:
            raise TemplateRenderError(
                f"Template error: {exc}",
                device=device.name,
                details={"template": template_name},
            ) from exc
        return RenderedConfig(device=device.name, template=template_name, tag=tag, text=text)

    def compile(self, output_dir: Path) -> list[RenderedConfig]:
        """Render and write a configuration file for every mapped device.

        Args:
            output_dir: Destination directory, created if absent.

        Returns:
            The rendered configurations, in processing order.

        Raises:
            InventoryError: If the inventory cannot be queried.
            TemplateRenderError: If any device fails to render.

        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        rendered: list[RenderedConfig] = []
        written: dict[str, str] = {}
        for tag, template_name in self._mapping.items():
            devices = self._inventory.devices_by_tag(tag)
            if not devices:
                self._logger.warning("No devices tagged '%s'", tag)
                continue

            for device in devices:
                if not device.name:
                    self._logger.warning("Skipping unnamed device tagged '%s'", tag)
                    continue
                if device.name in written:
                    self._logger.warning(
                        "%s already rendered from tag '%s', overwriting with tag '%s'",
                        device.name,
                        written[device.name],
                        tag,
                    )
                config = self.render(device, template_name, tag)
                config.path = self._write(output_dir, config)
                written[device.name] = tag
                rendered.append(config)
                self._logger.info(
                    "Rendered %s (tags: %s) with %s -> %s",
                    device.name,
                    ", ".join(device.tags) or "-",
                    template_name,
                    config.path,
                )

        self._logger.info("Compiled %d configuration file(s) into %s", len(written), output_dir)
        return rendered

    def _write(self, output_dir: Path, config: RenderedConfig) -> Path:
        """Persist a rendered configuration as ``<device>.<ext>``."""
        safe_name = config.device.replace("/", "_").replace("\\", "_")
        path = output_dir / f"{safe_name}.{self._extension}"
        with path.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(config.text)
        return path
