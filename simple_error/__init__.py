"""Template-driven display for error enums.

Provides declarative error enums whose variants carry a display template,
compiled once into immutable renderers.

Usage:
    from simple_error import SimpleError, error

    class StorageError(SimpleError):
        NotFound = error("no such key: {key}", key=str)
        Corrupt = error("bad block {0:?} at 0x{1:0x}", Block, int)
        Closed = error("store is closed")

    str(StorageError.Corrupt(Block(id=7), 4096))  # "bad block Block { id: 7 } at 0x1000"

The lower-level pipeline is available for other type-definition layers:

    renderer = compile_template(VariantShape.named(message=Capability.DEFAULT),
                                "hello {message}")
    render(renderer, {"message": "world"})  # "hello world"
"""

import logging

from simple_error.config import EngineSettings, configure, get_settings, reset_settings
from simple_error.derive import SimpleError, VariantDecl, error
from simple_error.engine import EnumRenderEngine, render
from simple_error.errors import (
    CapabilityError,
    CompileError,
    DeclarationError,
    IndexOutOfRangeError,
    ShapeMismatchError,
    TemplateSyntaxError,
    UnitPlaceholderError,
    UnknownFieldError,
)
from simple_error.registry import DescriptorRegistry, get_registry
from simple_error.template import (
    EnumDescriptor,
    Renderer,
    compile_descriptor,
    compile_template,
    parse_template,
)
from simple_error.types import (
    Capability,
    FieldSpec,
    FormatKind,
    Index,
    Literal,
    Name,
    Placeholder,
    ShapeKind,
    VariantShape,
)

__all__ = [
    # Main API
    "SimpleError",
    "VariantDecl",
    "error",
    # Pipeline
    "EnumDescriptor",
    "EnumRenderEngine",
    "Renderer",
    "compile_descriptor",
    "compile_template",
    "parse_template",
    "render",
    # Types
    "Capability",
    "FieldSpec",
    "FormatKind",
    "Index",
    "Literal",
    "Name",
    "Placeholder",
    "ShapeKind",
    "VariantShape",
    # Errors
    "CapabilityError",
    "CompileError",
    "DeclarationError",
    "IndexOutOfRangeError",
    "ShapeMismatchError",
    "TemplateSyntaxError",
    "UnitPlaceholderError",
    "UnknownFieldError",
    # Registry and settings
    "DescriptorRegistry",
    "EngineSettings",
    "configure",
    "get_registry",
    "get_settings",
    "reset_settings",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
