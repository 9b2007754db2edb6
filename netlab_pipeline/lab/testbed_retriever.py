"""Export the pyATS testbed of a running CML lab.

Looks the lab up by title on the CML controller through ``virl2_client``,
exports its pyATS testbed, replaces the jump host's placeholder
credentials and writes the result to disk for the following stages.

Usage::

    retriever = TestbedRetriever(
        url="https://cml.lab", username="admin", password="...",
        jump_host_username="admin", jump_host_password="...",
    )
    retriever.retrieve("Branch Lab", Path("testbed.yaml"))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..core.config import DEFAULT_JUMP_HOST_ALIAS
from ..core.exceptions import LabNotFoundError, TestbedError
from .testbed import parse_descriptor, patch_jump_host_credentials, write_descriptor

logger = logging.getLogger(__name__)


class TestbedRetriever:
    """Fetch, patch and persist a lab's pyATS testbed descriptor.

    The ``virl2_client.ClientLibrary`` is created lazily; an existing
    client may be injected instead.

    Args:
        url: Base URL of the CML controller.
        username: CML login username.
        password: CML login password.
        jump_host_username: Username written into the jump host entry.
        jump_host_password: Password written into the jump host entry.
        jump_host_alias: Device name of the jump host in the testbed.
        verify_ssl: Verify the controller TLS certificate.
        client: Optional pre-built CML client.

    """

    def __init__(
        self,
        url: str = "",
        username: str = "",
        password: str = "",
        jump_host_username: str = "",
        jump_host_password: str = "",
        jump_host_alias: str = DEFAULT_JUMP_HOST_ALIAS,
        verify_ssl: bool = False,
        client: Any = None,
    ) -> None:
        """Initialize the retriever with controller and jump host credentials."""
        self._url = url
        self._username = username
        self._password = password
        self._jump_host_username = jump_host_username or username
        self._jump_host_password = jump_host_password or password
        self._jump_host_alias = jump_host_alias
        self._verify_ssl = verify_ssl
        self._client = client
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def client(self) -> Any:
        """Return the CML client, logging in on first access.

        Raises:
            TestbedError: If virl2_client is missing or the login fails.

        """
        if self._client is None:
            try:
                from virl2_client import ClientLibrary
            except ImportError:
                raise TestbedError(
                    "virl2_client is not installed. Install with: pip install virl2-client"
                ) from None
            try:
                self._client = ClientLibrary(
                    self._url,
                    self._username,
                    self._password,
                    ssl_verify=self._verify_ssl,
                )
            except Exception as exc:
                raise TestbedError(
                    f"Cannot log in to CML controller {self._url}",
                    details={"error": str(exc)},
                ) from exc
        return self._client

    def find_lab(self, title: str) -> Any:
        """Return the first lab whose title matches.

        Raises:
            LabNotFoundError: If no lab carries ``title``.

        """
        labs = list(self.client.find_labs_by_title(title))
        if not labs:
            raise LabNotFoundError(f"Lab '{title}' not found on {self._url or 'controller'}")
        if len(labs) > 1:
            self._logger.warning(
                "%d labs titled '%s', using the first (id %s)",
                len(labs),
                title,
                getattr(labs[0], "id", "?"),
            )
        return labs[0]

    def fetch_descriptor(self, title: str) -> dict[str, Any]:
        """Export the lab's testbed and patch the jump host credentials.

        Raises:
            LabNotFoundError: If the lab does not exist.
            TestbedError: If the export is unusable or lacks the jump host.

        """
        lab = self.find_lab(title)
        try:
            testbed_yaml = lab.get_pyats_testbed()
        except Exception as exc:
            raise TestbedError(
                f"Testbed export failed for lab '{title}'",
                details={"error": str(exc)},
            ) from exc

        descriptor = parse_descriptor(testbed_yaml)
        patch_jump_host_credentials(
            descriptor,
            self._jump_host_username,
            self._jump_host_password,
            alias=self._jump_host_alias,
        )
        self._logger.info(
            "Exported testbed for lab '%s' (%d device(s))",
            title,
            len(descriptor["devices"]),
        )
        return descriptor

    def retrieve(self, title: str, output_path: Path) -> Path:
        """Fetch the patched descriptor and write it to ``output_path``."""
        descriptor = self.fetch_descriptor(title)
        return write_descriptor(descriptor, Path(output_path))
