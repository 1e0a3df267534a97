"""Declarative error enums.

Subclass SimpleError and declare each variant with error():

    class SomeError(SimpleError):
        Unit = error("hello unit")
        Unnamed = error("hello {0:?} {1}", UnnamedStructValue, int)
        Named = error("hello {message}", message=str)

    str(SomeError.Named(message="world"))   # "hello world"

Positional field types make a positional variant, keyword field types a
named one, no types a unit variant. Each declaration is replaced by a
variant subclass of the enum, and the templates are compiled when the
class is created (or on first render, see config.eager_compile).
"""

import logging
import operator
import threading
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar

from simple_error.config import get_eager_compile, get_validate_values
from simple_error.errors import DeclarationError
from simple_error.registry import get_registry
from simple_error.template.compiler import EnumDescriptor, compile_descriptor
from simple_error.template.dispatch import capabilities_of, render_structured
from simple_error.types import Capability, ShapeKind, VariantShape

logger = logging.getLogger(__name__)

_compile_lock = threading.Lock()


@dataclass(frozen=True)
class VariantDecl:
    """A variant declaration: template plus field types."""

    template: Any
    positional: tuple[Any, ...] = ()
    named: tuple[tuple[str, Any], ...] = ()

    @property
    def kind(self) -> ShapeKind:
        if self.named:
            return ShapeKind.NAMED
        if self.positional:
            return ShapeKind.POSITIONAL
        return ShapeKind.UNIT

    def field_types(self) -> tuple[tuple[int | str, Any], ...]:
        if self.named:
            return self.named
        return tuple(enumerate(self.positional))

    def shape(self) -> VariantShape:
        if self.named:
            return VariantShape.named(**{name: capabilities_of(tp) for name, tp in self.named})
        if self.positional:
            return VariantShape.positional(*(capabilities_of(tp) for tp in self.positional))
        return VariantShape.unit()


def error(template: str, *field_types: Any, **named_field_types: Any) -> VariantDecl:
    """Declare an error variant and the template used to display it.

    Args:
        template: Display template, e.g. "bad state {0:?} (code 0x{1:0x})"
        *field_types: Types of positional fields
        **named_field_types: Types of named fields

    Raises:
        DeclarationError: both positional and named fields given
    """
    if field_types and named_field_types:
        raise DeclarationError("a variant has either positional or named fields, not both")
    return VariantDecl(template, field_types, tuple(named_field_types.items()))


def _is_type_like(tp: Any) -> bool:
    return tp is Any or tp is None or isinstance(tp, type) or typing.get_origin(tp) is not None


def _check_decl(enum_name: str, tag: str, decl: VariantDecl) -> None:
    variant = f"{enum_name}.{tag}"
    if tag.startswith("_") or hasattr(SimpleError, tag):
        raise DeclarationError(f"variant name {tag!r} is reserved", variant=variant)
    for key, tp in decl.field_types():
        if not _is_type_like(tp):
            raise DeclarationError(
                f"field {key!r} must be declared with a type, got {tp!r}",
                variant=variant,
            )
    for name, _ in decl.named:
        if not name.isidentifier() or name.startswith("_") or hasattr(SimpleError, name):
            raise DeclarationError(f"invalid field name {name!r}", variant=variant)


def _integral_keys(decl: VariantDecl) -> frozenset[int | str]:
    return frozenset(
        key
        for key, tp in decl.field_types()
        if Capability.INTEGRAL in capabilities_of(tp)
    )


def _restore(variant_cls: type, values: Any) -> "SimpleError":
    if isinstance(values, Mapping):
        return variant_cls(**values)
    return variant_cls(*values)


class SimpleError(Exception):
    """Base class for error enums whose variants carry display templates."""

    __variant_tag__: ClassVar[str | None] = None
    __variant_decl__: ClassVar[VariantDecl | None] = None
    __integral_fields__: ClassVar[frozenset] = frozenset()
    __enum__: ClassVar[type | None] = None

    _variants: ClassVar[Mapping[str, type]] = MappingProxyType({})
    _descriptor: ClassVar[EnumDescriptor | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "__variant_tag__" in cls.__dict__:
            return

        for base in cls.__mro__[1:]:
            if base.__dict__.get("__enum__") is base:
                raise DeclarationError(
                    f"cannot subclass error enum {base.__qualname__}; declare a new enum instead"
                )

        decls = {
            tag: value for tag, value in cls.__dict__.items() if isinstance(value, VariantDecl)
        }
        if not decls:
            raise DeclarationError(
                f"{cls.__qualname__} declares no variants (use Name = error('...'))"
            )

        variants = {}
        for tag, decl in decls.items():
            _check_decl(cls.__qualname__, tag, decl)
            variant_cls = type(
                tag,
                (cls,),
                {
                    "__variant_tag__": tag,
                    "__variant_decl__": decl,
                    "__integral_fields__": _integral_keys(decl),
                    "__module__": cls.__module__,
                    "__qualname__": f"{cls.__qualname__}.{tag}",
                    "__doc__": f"{cls.__qualname__}.{tag}: {decl.template!r}",
                },
            )
            setattr(cls, tag, variant_cls)
            variants[tag] = variant_cls

        cls.__enum__ = cls
        cls._variants = MappingProxyType(variants)
        cls._descriptor = None
        logger.debug("[DERIVE] Declared enum %s: %s", cls.__qualname__, ", ".join(variants))

        if get_eager_compile():
            cls.descriptor()

    # =========================================================================
    # Class-level API
    # =========================================================================

    @classmethod
    def variants(cls) -> Mapping[str, type]:
        """Variant tag -> variant class, in declaration order."""
        return cls.__enum__._variants if cls.__enum__ else cls._variants

    @classmethod
    def descriptor(cls) -> EnumDescriptor:
        """Compiled descriptor for this enum, compiling it on first use."""
        enum = cls.__enum__
        if enum is None:
            raise TypeError(f"{cls.__qualname__} declares no variants")
        descriptor = enum.__dict__.get("_descriptor")
        if descriptor is not None:
            return descriptor

        with _compile_lock:
            descriptor = enum.__dict__.get("_descriptor")
            if descriptor is None:
                descriptor = compile_descriptor(
                    enum.__qualname__,
                    {
                        tag: (variant.__variant_decl__.shape(), variant.__variant_decl__.template)
                        for tag, variant in enum._variants.items()
                    },
                )
                enum._descriptor = descriptor
                get_registry().register(enum, descriptor)
        return descriptor

    # =========================================================================
    # Instances
    # =========================================================================

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        decl = type(self).__variant_decl__
        if decl is None:
            names = ", ".join(type(self).variants())
            raise TypeError(
                f"{type(self).__qualname__} is an error enum; instantiate a variant ({names})"
            )
        name = type(self).__qualname__

        if decl.kind is ShapeKind.NAMED:
            field_names = [n for n, _ in decl.named]
            if len(args) > len(field_names):
                raise TypeError(
                    f"{name}() takes {len(field_names)} field(s) but {len(args)} were given"
                )
            values = dict(zip(field_names, args))
            for key, value in kwargs.items():
                if key not in field_names:
                    raise TypeError(f"{name}() got an unexpected field {key!r}")
                if key in values:
                    raise TypeError(f"{name}() got multiple values for field {key!r}")
                values[key] = value
            missing = [n for n in field_names if n not in values]
            if missing:
                raise TypeError(f"{name}() missing field(s): {', '.join(missing)}")
            super().__init__()
            for key in field_names:
                setattr(self, key, values[key])
        else:
            if kwargs:
                raise TypeError(f"{name}() takes no keyword fields")
            if len(args) != len(decl.positional):
                raise TypeError(
                    f"{name}() takes {len(decl.positional)} field(s) but {len(args)} were given"
                )
            super().__init__(*args)

        if get_validate_values():
            self._validate_integral()

    def _validate_integral(self) -> None:
        values = self.field_values()
        for key in type(self).__integral_fields__:
            value = values[key]
            if isinstance(value, bool):
                raise TypeError(f"field {key!r} of {type(self).__qualname__} must be an integer")
            try:
                operator.index(value)
            except TypeError:
                raise TypeError(
                    f"field {key!r} of {type(self).__qualname__} must be an integer, "
                    f"got {type(value).__name__}"
                ) from None

    @property
    def tag(self) -> str:
        return type(self).__variant_tag__

    def field_values(self) -> tuple | dict:
        """Field values in the form the renderer reads them."""
        decl = type(self).__variant_decl__
        if decl.kind is ShapeKind.NAMED:
            return {name: getattr(self, name) for name, _ in decl.named}
        return self.args

    def __getitem__(self, index: int) -> Any:
        return self.args[index]

    def __str__(self) -> str:
        return self.descriptor()[self.tag].render(self.field_values())

    def __structured__(self) -> str:
        values = self.field_values()
        if isinstance(values, dict):
            body = ", ".join(f"{k}: {render_structured(v)}" for k, v in values.items())
            return f"{self.tag} {{ {body} }}"
        if values:
            return f"{self.tag}({', '.join(render_structured(v) for v in values)})"
        return self.tag

    def __repr__(self) -> str:
        return f"{type(self).__enum__.__qualname__}.{self.__structured__()}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SimpleError):
            return NotImplemented
        return type(self) is type(other) and self.field_values() == other.field_values()

    def __hash__(self) -> int:
        return hash((type(self), self.tag))

    def __reduce__(self):
        return (_restore, (type(self), self.field_values()))
