"""Device session drivers.

``PyatsDriver`` subclasses ``BaseDriver`` and talks to devices of a
loaded pyATS testbed through Unicon, parsing output with Genie.
"""

from .pyats_driver import PyatsDriver

__all__ = ["PyatsDriver"]
