"""Environment-driven settings shared by every pipeline stage.

Credentials and endpoints are read from the process environment (or a
``.env`` file loaded by the CLI), never from source.  Secrets are held as
``SecretStr`` so they stay masked in logs and reprs.

Usage::

    settings = PipelineSettings.from_env()
    inventory = NetBoxInventory(
        settings.netbox_url, settings.netbox_token.get_secret_value()
    )
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import PipelineError

DEFAULT_JUMP_HOST_ALIAS = "terminal_server"
DEFAULT_TEMPLATE_DIR = Path("templates")
DEFAULT_MAPPING_NAME = "mapping.json"
DEFAULT_CONFIG_EXTENSION = "conf"
DEFAULT_EXPECTED_OS = "ios"
DEFAULT_EXPECTED_VERSION = "15.9(3)M6"


class PipelineSettings(BaseSettings):
    """Runtime settings, one field per environment variable.

    Field names map to upper-case variables (``netbox_url`` reads
    ``NETBOX_URL``).  The jump host credentials read
    ``TERMINAL_SERVER_USERNAME`` / ``TERMINAL_SERVER_PASSWORD`` and fall
    back to the CML login when unset.  Empty variables count as unset.

    Attributes:
        netbox_url: Base URL of the NetBox API.
        netbox_token: NetBox API token.
        netbox_verify_ssl: Verify the NetBox TLS certificate.
        cml_url: Base URL of the CML controller.
        cml_username: CML login username.
        cml_password: CML login password.
        cml_verify_ssl: Verify the CML TLS certificate.
        jump_host_username: Username written into the jump host entry.
        jump_host_password: Password written into the jump host entry.
        jump_host_alias: Testbed device name of the jump host.
        template_dir: Directory holding the Jinja2 templates.
        mapping_file: Tag to template JSON mapping, defaults to
            ``<template_dir>/mapping.json``.
        config_extension: Extension of rendered configuration files.
        expected_os: OS family whose version is checked.
        expected_version: Version string every checked device must report.
        log_level: Root logging level name.

    """

    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_ignore_empty=True)

    netbox_url: str = "http://localhost:8000"
    netbox_token: SecretStr = SecretStr("")
    netbox_verify_ssl: bool = True

    cml_url: str = "https://localhost"
    cml_username: str = "admin"
    cml_password: SecretStr = SecretStr("")
    cml_verify_ssl: bool = False

    jump_host_username: str = Field(
        default="",
        validation_alias=AliasChoices("TERMINAL_SERVER_USERNAME", "jump_host_username"),
    )
    jump_host_password: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("TERMINAL_SERVER_PASSWORD", "jump_host_password"),
    )
    jump_host_alias: str = DEFAULT_JUMP_HOST_ALIAS

    template_dir: Path = DEFAULT_TEMPLATE_DIR
    mapping_file: Path | None = None
    config_extension: str = DEFAULT_CONFIG_EXTENSION

    expected_os: str = DEFAULT_EXPECTED_OS
    expected_version: str = DEFAULT_EXPECTED_VERSION

    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _apply_fallbacks(self) -> PipelineSettings:
        if not self.jump_host_username:
            self.jump_host_username = self.cml_username
        if not self.jump_host_password.get_secret_value():
            self.jump_host_password = self.cml_password
        if self.mapping_file is None:
            self.mapping_file = self.template_dir / DEFAULT_MAPPING_NAME
        return self

    @classmethod
    def from_env(cls) -> PipelineSettings:
        """Build settings from the process environment.

        Raises:
            PipelineError: If a variable holds a value of the wrong type.

        """
        try:
            return cls()
        except ValidationError as exc:
            raise PipelineError(
                "Invalid pipeline settings in environment",
                details={"error": str(exc).replace("\n", " ")},
            ) from exc
