"""Renderer compiler.

Turns (shape, template) into an immutable Renderer. Parsing, resolution
and capability checks all happen here, once; the resulting Renderer only
concatenates literals and pre-selected formatter output.

Usage:
    shape = VariantShape.positional(Capability.ALL, Capability.DEFAULT)
    renderer = compile_template(shape, "hello {0:?} {1}", variant="Unnamed")
    renderer.render((X(value=42), 45))   # "hello X { value: 42 } 45"
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from simple_error.errors import CapabilityError, CompileError, DeclarationError
from simple_error.template.dispatch import REQUIRED_CAPABILITY, Formatter, formatter_for
from simple_error.template.parser import parse_template
from simple_error.template.resolver import Accessor, BoundPlaceholder, resolve_segments
from simple_error.types import FormatKind, Literal, ShapeKind, VariantShape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledPlaceholder:
    """Field accessor plus the formatter chosen for its format kind."""

    key: int | str
    kind: FormatKind
    accessor: Accessor
    formatter: Formatter

    def __call__(self, values: Any) -> str:
        return self.formatter(self.accessor(values))


@dataclass(frozen=True)
class Renderer:
    """Compiled, immutable rendering procedure for one variant."""

    variant: str
    template: str
    shape: VariantShape
    segments: tuple[Literal | CompiledPlaceholder, ...]

    @property
    def used_fields(self) -> tuple[int | str, ...]:
        """Field keys referenced by the template, first-use order, no repeats."""
        seen: dict[int | str, None] = {}
        for seg in self.segments:
            if isinstance(seg, CompiledPlaceholder):
                seen.setdefault(seg.key, None)
        return tuple(seen)

    def render(self, values: Any = ()) -> str:
        """Render field values: a sequence (positional), mapping (named) or nothing (unit)."""
        return "".join(
            seg.text if isinstance(seg, Literal) else seg(values)
            for seg in self.segments
        )


def _check_capability(bound: BoundPlaceholder, template: str) -> None:
    required = REQUIRED_CAPABILITY[bound.kind]
    if not bound.field.supports(required):
        raise CapabilityError(
            f"field {bound.field.key!r} does not support {bound.kind.name.lower()} "
            f"formatting (requires {required.name.lower()} capability)",
            placeholder=str(bound.placeholder),
            template=template,
            offset=bound.placeholder.offset,
        )


def compile_template(shape: VariantShape, template: str, variant: str = "") -> Renderer:
    """Compile a template against a variant shape.

    Args:
        shape: The variant's field structure and capabilities
        template: Template text, e.g. "hello {message}"
        variant: Variant tag, used for error messages and the Renderer

    Returns:
        Immutable Renderer

    Raises:
        CompileError: any syntax, resolution or capability failure. The
            error's ``variant`` attribute is set to ``variant``.
    """
    try:
        if not isinstance(template, str):
            raise DeclarationError(
                f"template must be a string, got {type(template).__name__}"
            )
        segments = parse_template(template)
        resolved = resolve_segments(segments, shape, template)

        compiled: list[Literal | CompiledPlaceholder] = []
        for seg in resolved:
            if isinstance(seg, Literal):
                compiled.append(seg)
                continue
            _check_capability(seg, template)
            compiled.append(
                CompiledPlaceholder(
                    key=seg.field.key,
                    kind=seg.kind,
                    accessor=seg.accessor,
                    formatter=formatter_for(seg.kind),
                )
            )
    except CompileError as e:
        if not e.variant:
            e.variant = variant or None
        logger.info("[COMPILE] Rejected template for %s: %s", variant or "<anonymous>", e)
        raise

    logger.debug(
        "[COMPILE] Variant %s: %d segment(s), fields=%s",
        variant or "<anonymous>",
        len(compiled),
        [seg.key for seg in compiled if isinstance(seg, CompiledPlaceholder)],
    )
    return Renderer(
        variant=variant,
        template=template,
        shape=shape,
        segments=tuple(compiled),
    )


@dataclass(frozen=True)
class EnumDescriptor:
    """Variant tag -> Renderer for one enum type. Read-only once built."""

    name: str
    renderers: Mapping[str, Renderer]

    def __getitem__(self, tag: str) -> Renderer:
        return self.renderers[tag]

    def __contains__(self, tag: object) -> bool:
        return tag in self.renderers

    def __len__(self) -> int:
        return len(self.renderers)

    @property
    def variants(self) -> tuple[str, ...]:
        return tuple(self.renderers)


def compile_descriptor(
    name: str,
    variants: Mapping[str, tuple[VariantShape, str]],
) -> EnumDescriptor:
    """Compile every variant of an enum into an EnumDescriptor.

    Args:
        name: Enum type name
        variants: tag -> (shape, template), in declaration order

    Raises:
        CompileError: on the first variant that fails to compile
    """
    renderers = {
        tag: compile_template(shape, template, variant=f"{name}.{tag}")
        for tag, (shape, template) in variants.items()
    }
    logger.debug("[COMPILE] Enum %s: %d variant(s)", name, len(renderers))
    return EnumDescriptor(name=name, renderers=MappingProxyType(renderers))


def shape_kind_label(shape: VariantShape) -> str:
    """Short label used in introspection output."""
    if shape.kind is ShapeKind.POSITIONAL:
        return f"positional({shape.arity})"
    return shape.kind.name.lower()
