"""pyATS testbed descriptor handling.

The descriptor exported by the lab controller is plain YAML with a
``devices`` mapping.  One entry, the jump host (``terminal_server`` in a
CML export), fronts every other device and ships with placeholder
credentials that have to be replaced before the testbed is usable.

Two views of the same file are used by the pipeline:

- the raw descriptor (``dict``), patched and persisted by the retriever;
- the loaded pyATS ``Testbed`` object, used to connect to devices.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..core.config import DEFAULT_JUMP_HOST_ALIAS
from ..core.exceptions import TestbedError

logger = logging.getLogger(__name__)


def parse_descriptor(text: str) -> dict[str, Any]:
    """Parse testbed YAML text into a descriptor mapping.

    Raises:
        TestbedError: If the text is not YAML or has no ``devices`` mapping.

    """
    try:
        descriptor = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise TestbedError("Testbed descriptor is not valid YAML", details={"error": str(exc)}) from exc
    if not isinstance(descriptor, dict) or not isinstance(descriptor.get("devices"), dict):
        raise TestbedError("Testbed descriptor has no 'devices' mapping")
    return descriptor


def read_descriptor(path: Path) -> dict[str, Any]:
    """Read a testbed descriptor from disk."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TestbedError(f"Cannot read testbed file: {path}", details={"error": str(exc)}) from exc
    return parse_descriptor(text)


def write_descriptor(descriptor: dict[str, Any], path: Path) -> Path:
    """Persist a descriptor as YAML, keeping key order."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(descriptor, fh, default_flow_style=False, sort_keys=False)
    logger.info("Testbed written to %s", path)
    return path


def patch_jump_host_credentials(
    descriptor: dict[str, Any],
    username: str,
    password: str,
    alias: str = DEFAULT_JUMP_HOST_ALIAS,
) -> dict[str, Any]:
    """Replace the jump host's default credentials in place.

    Args:
        descriptor: Parsed testbed descriptor.
        username: Login username for the jump host.
        password: Login password for the jump host.
        alias: Device name of the jump host in the descriptor.

    Returns:
        The same descriptor, for chaining.

    Raises:
        TestbedError: If the descriptor lacks the jump host entry.

    """
    devices = descriptor.get("devices")
    if not isinstance(devices, dict):
        raise TestbedError("Testbed descriptor has no 'devices' mapping")
    jump_host = devices.get(alias)
    if not isinstance(jump_host, dict):
        raise TestbedError(
            f"Jump host '{alias}' not found in testbed",
            details={"devices": ", ".join(sorted(devices))},
        )

    credentials = jump_host.setdefault("credentials", {})
    if not isinstance(credentials, dict):
        credentials = jump_host["credentials"] = {}
    credentials["default"] = {"username": username, "password": password}
    logger.debug("Patched credentials of jump host %s", alias)
    return descriptor


def load_testbed(path: Path) -> Any:
    """Load a testbed file into a pyATS ``Testbed`` object.

    Raises:
        TestbedError: If pyATS is missing or rejects the file.

    """
    path = Path(path)
    if not path.is_file():
        raise TestbedError(f"Testbed file not found: {path}")
    try:
        from pyats.topology import loader
    except ImportError:
        raise TestbedError(
            "pyats is not installed. Install with: pip install 'pyats[library]'"
        ) from None
    try:
        testbed = loader.load(str(path))
    except Exception as exc:
        raise TestbedError(
            f"pyATS could not load testbed {path}",
            details={"error": str(exc)},
        ) from exc
    logger.info("Loaded testbed '%s' with %d device(s)", testbed.name, len(testbed.devices))
    return testbed
