"""Configuration compilation from inventory data and Jinja2 templates."""

from .template_compiler import TemplateCompiler, load_mapping

__all__ = ["TemplateCompiler", "load_mapping"]
