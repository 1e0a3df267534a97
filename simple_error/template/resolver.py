"""Placeholder resolution.

Binds each placeholder's reference to a field of the variant's shape.
Positional refs bind to tuple indexes, named refs to mapping keys.
"""

import operator
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from simple_error.errors import (
    IndexOutOfRangeError,
    ShapeMismatchError,
    UnitPlaceholderError,
    UnknownFieldError,
)
from simple_error.types import (
    FieldSpec,
    FormatKind,
    Index,
    Literal,
    Placeholder,
    Segment,
    ShapeKind,
    VariantShape,
)

# Reads one field out of a variant's field values (sequence or mapping)
Accessor = Callable[[Any], Any]


@dataclass(frozen=True)
class BoundPlaceholder:
    """A placeholder whose reference has been bound to a concrete field."""

    field: FieldSpec
    kind: FormatKind
    accessor: Accessor
    placeholder: Placeholder


ResolvedSegment = Literal | BoundPlaceholder


def _bind(placeholder: Placeholder, shape: VariantShape, template: str) -> BoundPlaceholder:
    ref = placeholder.ref
    location = {
        "placeholder": str(placeholder),
        "template": template,
        "offset": placeholder.offset,
    }

    if isinstance(ref, Index):
        if shape.kind is ShapeKind.NAMED:
            raise ShapeMismatchError(
                f"positional reference {{{ref.value}}} used on a variant with named "
                f"fields ({', '.join(shape.field_names())})",
                **location,
            )
        if ref.value >= shape.arity:
            raise IndexOutOfRangeError(
                f"index {ref.value} out of range for variant with {shape.arity} field(s)",
                **location,
            )
        spec = shape.fields[ref.value]
    else:
        spec = shape.field(ref.value) if shape.kind is ShapeKind.NAMED else None
        if spec is None:
            known = ", ".join(shape.field_names()) or "none"
            raise UnknownFieldError(
                f"unknown field {ref.value!r} (declared: {known})",
                **location,
            )

    return BoundPlaceholder(
        field=spec,
        kind=placeholder.kind,
        accessor=operator.itemgetter(spec.key),
        placeholder=placeholder,
    )


def resolve_segments(
    segments: tuple[Segment, ...],
    shape: VariantShape,
    template: str = "",
) -> tuple[ResolvedSegment, ...]:
    """Bind every placeholder in ``segments`` against ``shape``.

    Args:
        segments: Output of parse_template
        shape: The owning variant's field structure
        template: Original template text, used in error messages

    Raises:
        UnitPlaceholderError: any placeholder on a Unit variant
        ShapeMismatchError: index reference on a Named variant
        IndexOutOfRangeError: index >= positional arity
        UnknownFieldError: name not declared on the variant
    """
    resolved: list[ResolvedSegment] = []
    for seg in segments:
        if isinstance(seg, Literal):
            resolved.append(seg)
            continue
        if shape.kind is ShapeKind.UNIT:
            raise UnitPlaceholderError(
                "variant has no fields, placeholders are not allowed",
                placeholder=str(seg),
                template=template,
                offset=seg.offset,
            )
        resolved.append(_bind(seg, shape, template))
    return tuple(resolved)
