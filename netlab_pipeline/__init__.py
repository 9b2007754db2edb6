"""NetLab Pipeline.

Compile device configurations from NetBox, fetch the pyATS testbed of a
CML lab, push the rendered configurations and verify software versions,
one CI stage at a time.
"""

__version__ = "1.0.0"
