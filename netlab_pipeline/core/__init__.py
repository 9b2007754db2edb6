"""Core module providing base abstractions, settings, and validation logic.

This module contains the foundational components shared by every pipeline
stage: the exception hierarchy, environment-driven settings, the data
models passed between stages, the abstract driver contract, and the
version validator.
"""

from .exceptions import (
    CommandExecutionError,
    ConfigPushError,
    ConnectionError,
    InventoryError,
    LabNotFoundError,
    MappingError,
    PipelineError,
    TemplateRenderError,
    TestbedError,
)

__all__ = [
    "CommandExecutionError",
    "ConfigPushError",
    "ConnectionError",
    "InventoryError",
    "LabNotFoundError",
    "MappingError",
    "PipelineError",
    "TemplateRenderError",
    "TestbedError",
]
