"""Command-line entry point, one sub-command per pipeline stage.

Usage::

    netlab-pipeline get-testbed "Branch Lab" testbed.yaml
    netlab-pipeline compile configs/
    netlab-pipeline apply testbed.yaml configs/
    netlab-pipeline check-version testbed.yaml

Exit codes: ``0`` on success, ``1`` on any pipeline failure (lookup
errors, failed pushes, version mismatches), ``2`` on bad arguments.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .compiler.template_compiler import TemplateCompiler, load_mapping
from .core.config import DEFAULT_MAPPING_NAME, PipelineSettings
from .core.exceptions import PipelineError
from .deploy.config_applier import ConfigApplier
from .inventory.netbox_inventory import NetBoxInventory
from .lab.testbed import load_testbed
from .lab.testbed_retriever import TestbedRetriever
from .validation.version_checker import VersionChecker

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure root logging once for a CLI run."""
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=True)


# -- Stage commands ----------------------------------------------------------


def cmd_compile(args: argparse.Namespace, settings: PipelineSettings) -> int:
    """Render one configuration file per inventory device."""
    template_dir = Path(args.templates) if args.templates else settings.template_dir
    if args.mapping:
        mapping_file = Path(args.mapping)
    elif args.templates:
        mapping_file = template_dir / DEFAULT_MAPPING_NAME
    else:
        mapping_file = settings.mapping_file
    inventory = NetBoxInventory(
        url=settings.netbox_url,
        token=settings.netbox_token.get_secret_value(),
        verify_ssl=settings.netbox_verify_ssl,
    )
    compiler = TemplateCompiler(
        inventory=inventory,
        mapping=load_mapping(mapping_file),
        template_dir=template_dir,
        extension=args.extension or settings.config_extension,
    )
    compiler.compile(Path(args.output_dir))
    return 0


def cmd_get_testbed(args: argparse.Namespace, settings: PipelineSettings) -> int:
    """Export the lab's testbed with real jump host credentials."""
    retriever = TestbedRetriever(
        url=settings.cml_url,
        username=settings.cml_username,
        password=settings.cml_password.get_secret_value(),
        jump_host_username=settings.jump_host_username,
        jump_host_password=settings.jump_host_password.get_secret_value(),
        jump_host_alias=settings.jump_host_alias,
        verify_ssl=settings.cml_verify_ssl,
    )
    retriever.retrieve(args.lab_title, Path(args.output_file))
    return 0


def cmd_apply(args: argparse.Namespace, settings: PipelineSettings) -> int:
    """Push rendered configurations to the matching testbed devices."""
    applier = ConfigApplier(load_testbed(Path(args.testbed_file)))
    report = applier.apply(Path(args.config_dir))
    return 0 if report.succeeded else 1


def cmd_check_version(args: argparse.Namespace, settings: PipelineSettings) -> int:
    """Fail unless every checked device runs the expected version."""
    checker = VersionChecker(
        expected_os=args.expected_os or settings.expected_os,
        expected_version=args.expected_version or settings.expected_version,
        jump_host_alias=settings.jump_host_alias,
    )
    report = checker.check(load_testbed(Path(args.testbed_file)))
    return 0 if report.passed else 1


# -- Parser --------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-parser per stage."""
    parser = argparse.ArgumentParser(
        prog="netlab-pipeline",
        description="NetBox -> Jinja2 -> CML -> pyATS lab configuration pipeline",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Render device configurations")
    compile_parser.add_argument("output_dir", help="Directory for rendered files")
    compile_parser.add_argument("--mapping", help="Tag to template JSON mapping")
    compile_parser.add_argument("--templates", help="Template directory")
    compile_parser.add_argument("--extension", help="Extension of rendered files")
    compile_parser.set_defaults(handler=cmd_compile)

    testbed_parser = subparsers.add_parser("get-testbed", help="Export a lab's pyATS testbed")
    testbed_parser.add_argument("lab_title", help="Title of the CML lab")
    testbed_parser.add_argument("output_file", help="Testbed YAML to write")
    testbed_parser.set_defaults(handler=cmd_get_testbed)

    apply_parser = subparsers.add_parser("apply", help="Push rendered configurations")
    apply_parser.add_argument("testbed_file", help="Testbed YAML")
    apply_parser.add_argument("config_dir", help="Directory of rendered files")
    apply_parser.set_defaults(handler=cmd_apply)

    check_parser = subparsers.add_parser("check-version", help="Verify device software versions")
    check_parser.add_argument("testbed_file", help="Testbed YAML")
    check_parser.add_argument("--expected-version", help="Version every device must run")
    check_parser.add_argument("--expected-os", help="OS family subject to the check")
    check_parser.set_defaults(handler=cmd_check_version)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one pipeline stage and return its exit code."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        settings = PipelineSettings.from_env()
    except PipelineError as exc:
        setup_logging(args.log_level or "INFO", verbose=args.verbose)
        logger.error("%s", exc)
        return 1
    setup_logging(args.log_level or settings.log_level, verbose=args.verbose)

    try:
        return args.handler(args, settings)
    except PipelineError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
