"""pyATS aetest script running the version check inside the harness.

Run standalone::

    python -m netlab_pipeline.validation.version_testscript \\
        --testbed testbed.yaml --expected-version "15.9(3)M6"

or from a pyATS job with ``run(testscript=..., testbed=...)``.  The
harness reports the aggregate verdict; per-device outcomes are logged.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pyats import aetest

from ..core.config import PipelineSettings
from .version_checker import VersionChecker

logger = logging.getLogger(__name__)


class CommonSetup(aetest.CommonSetup):
    """Validate the parameters handed to the script."""

    @aetest.subsection
    def check_testbed(self, testbed):
        if testbed is None:
            self.failed("No testbed supplied, use --testbed")
        logger.info("Testbed '%s' with %d device(s)", testbed.name, len(testbed.devices))


class VerifySoftwareVersion(aetest.Testcase):
    """Every device of the expected OS family runs the expected version."""

    @aetest.test
    def compare_versions(self, testbed, expected_os, expected_version, jump_host_alias):
        checker = VersionChecker(
            expected_os=expected_os,
            expected_version=expected_version,
            jump_host_alias=jump_host_alias,
        )
        report = checker.check(testbed)
        if not report.passed:
            offenders = ", ".join(r.device for r in report.failures)
            self.failed(f"{report.summary()}; mismatched: {offenders}")
        self.passed(report.summary())


class CommonCleanup(aetest.CommonCleanup):
    """Close any session left open on the testbed."""

    @aetest.subsection
    def disconnect(self, testbed):
        for device in testbed.devices.values():
            if device.is_connected():
                device.disconnect()


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and hand control to aetest."""
    from pyats.topology import loader

    settings = PipelineSettings.from_env()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--testbed", dest="testbed", type=loader.load, required=True)
    parser.add_argument("--expected-os", default=settings.expected_os)
    parser.add_argument("--expected-version", default=settings.expected_version)
    parser.add_argument("--jump-host-alias", default=settings.jump_host_alias)
    args, remaining = parser.parse_known_args(argv)
    sys.argv = sys.argv[:1] + remaining

    aetest.main(
        testable=sys.modules[__name__],
        testbed=args.testbed,
        expected_os=args.expected_os,
        expected_version=args.expected_version,
        jump_host_alias=args.jump_host_alias,
    )


if __name__ == "__main__":
    main()
