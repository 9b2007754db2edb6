"""Lab controller access and pyATS testbed descriptor handling."""

from .testbed import (
    load_testbed,
    parse_descriptor,
    patch_jump_host_credentials,
    read_descriptor,
    write_descriptor,
)
from .testbed_retriever import TestbedRetriever

__all__ = [
    "TestbedRetriever",
    "load_testbed",
    "parse_descriptor",
    "patch_jump_host_credentials",
    "read_descriptor",
    "write_descriptor",
]
