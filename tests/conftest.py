"""Shared pytest fixtures for the lab pipeline test suite.

Provides device records, an in-memory inventory, template directories,
fake testbeds and a stub driver so every stage can be exercised without
NetBox, CML or real devices.
"""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from netlab_pipeline.core.base_driver import BaseDriver
from netlab_pipeline.core.exceptions import ConfigPushError, ConnectionError
from netlab_pipeline.core.models import DeviceRecord, PlatformInfo

EXPECTED_VERSION = "15.9(3)M6"

# ---------------------------------------------------------------------------
# Inventory fixtures
# ---------------------------------------------------------------------------


class FakeInventory:
    """In-memory stand-in for ``NetBoxInventory``."""

    def __init__(self, devices_by_tag: dict[str, list[DeviceRecord]]) -> None:
        self._devices = devices_by_tag
        self.queries: list[str] = []

    def devices_by_tag(self, tag: str) -> list[DeviceRecord]:
        self.queries.append(tag)
        return list(self._devices.get(tag, []))


@pytest.fixture
def inventory_cls() -> type[FakeInventory]:
    """The ``FakeInventory`` class, for ad-hoc inventories."""
    return FakeInventory


@pytest.fixture
def r1_record() -> DeviceRecord:
    """Router R1 with a minimal context."""
    return DeviceRecord(name="R1", config_context={"motd": "Hello"}, tags=("router",))


@pytest.fixture
def sample_inventory(r1_record: DeviceRecord) -> FakeInventory:
    """Inventory with two routers and one switch."""
    return FakeInventory(
        {
            "router": [
                r1_record,
                DeviceRecord(name="R2", config_context={"motd": "Branch"}, tags=("router",)),
            ],
            "switch": [
                DeviceRecord(
                    name="SW1",
                    config_context={"motd": "Access", "vlans": [{"id": 10, "name": "users"}]},
                    tags=("switch",),
                ),
            ],
        }
    )


# ---------------------------------------------------------------------------
# Template fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Template directory with a banner include, router and switch templates."""
    root = tmp_path / "templates"
    (root / "common").mkdir(parents=True)
    (root / "common" / "banner.j2").write_text("banner motd ^{{ motd }}^\n", encoding="utf-8")
    (root / "router.tpl.conf").write_text(
        'hostname {{ hostname | default("router") }}\n{% include "common/banner.j2" %}\nend\n',
        encoding="utf-8",
    )
    (root / "switch.tpl.conf").write_text(
        '{% include "common/banner.j2" %}\n'
        "{% for vlan in vlans %}\n"
        "vlan {{ vlan.id }}\n"
        " name {{ vlan.name }}\n"
        "{% endfor %}\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def mapping() -> dict[str, str]:
    """Tag to template mapping matching ``template_dir``."""
    return {"router": "router.tpl.conf", "switch": "switch.tpl.conf"}


# ---------------------------------------------------------------------------
# Testbed and driver fixtures
# ---------------------------------------------------------------------------


def make_device(
    name: str,
    os_name: str = "IOS",
    version: str = EXPECTED_VERSION,
    fail_connect: bool = False,
    fail_push: bool = False,
) -> SimpleNamespace:
    """Build a fake testbed device understood by ``StubDriver``."""
    return SimpleNamespace(
        name=name,
        os_name=os_name,
        version=version,
        fail_connect=fail_connect,
        fail_push=fail_push,
        pushed=[],
        sessions=0,
    )


class StubDriver(BaseDriver):
    """Driver over a ``make_device`` namespace, recording what it is asked."""

    def __init__(self, device: SimpleNamespace) -> None:
        super().__init__(device.name)
        self._device = device

    def connect(self) -> None:
        if self._device.fail_connect:
            raise ConnectionError("unreachable", device=self.hostname)
        self._device.sessions += 1
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False

    def push_config(self, config: str) -> bool:
        self._ensure_connected()
        if self._device.fail_push:
            raise ConfigPushError("% Invalid input detected", device=self.hostname)
        self._device.pushed.append(config)
        return True

    def get_platform_info(self) -> PlatformInfo:
        self._ensure_connected()
        return PlatformInfo(os=self._device.os_name, version=self._device.version, platform="IOSv")


@pytest.fixture
def stub_driver_cls() -> type[StubDriver]:
    """The ``StubDriver`` class, for use as a driver factory."""
    return StubDriver


@pytest.fixture
def device_factory() -> Any:
    """Expose ``make_device`` to tests."""
    return make_device


@pytest.fixture
def fake_testbed() -> SimpleNamespace:
    """Testbed with a jump host and three IOS routers on the expected version."""
    devices = {
        "terminal_server": make_device("terminal_server", os_name="linux", version="n/a"),
        "R1": make_device("R1"),
        "R2": make_device("R2"),
        "SW1": make_device("SW1"),
    }
    return SimpleNamespace(name="lab-testbed", devices=devices)


@pytest.fixture
def cml_testbed_yaml() -> str:
    """Testbed YAML as exported by a CML controller."""
    return """\
testbed:
  name: lab-testbed
devices:
  terminal_server:
    os: linux
    type: linux
    credentials:
      default:
        username: '%ENV{PYATS_USERNAME}'
        password: '%ENV{PYATS_PASSWORD}'
    connections:
      cli:
        protocol: ssh
        ip: 192.0.2.10
        port: 22
  R1:
    os: ios
    type: router
    series: iosv
    credentials:
      default:
        username: cisco
        password: cisco
    connections:
      defaults:
        class: unicon.Unicon
      a:
        protocol: telnet
        proxy: terminal_server
        command: open /lab/R1/0
"""


# ---------------------------------------------------------------------------
# Pytest configuration
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
