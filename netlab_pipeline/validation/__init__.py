"""Post-deployment verification of lab devices.

``VersionChecker`` is importable without the pyATS harness; the aetest
script in ``version_testscript`` wraps it for pyATS job runs.
"""

from .version_checker import VersionChecker

__all__ = ["VersionChecker"]
