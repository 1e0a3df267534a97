"""Template compilation pipeline.

parse_template -> resolve_segments -> compile_template, with the format
dispatcher supplying capability rules and value formatters.
"""

from simple_error.template.compiler import (
    CompiledPlaceholder,
    EnumDescriptor,
    Renderer,
    compile_descriptor,
    compile_template,
)
from simple_error.template.dispatch import (
    capabilities_of,
    dispatch,
    render_structured,
)
from simple_error.template.parser import parse_template
from simple_error.template.resolver import BoundPlaceholder, resolve_segments

__all__ = [
    "BoundPlaceholder",
    "CompiledPlaceholder",
    "EnumDescriptor",
    "Renderer",
    "capabilities_of",
    "compile_descriptor",
    "compile_template",
    "dispatch",
    "parse_template",
    "render_structured",
    "resolve_segments",
]
