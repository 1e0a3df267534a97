"""Core data types for simple_error.

All data structures are frozen dataclasses with attribute access.
Shapes describe a variant's fields; segments describe a parsed template.

Use attribute access: shape.kind, placeholder.ref, etc.
"""

from dataclasses import dataclass
from enum import Enum, Flag, auto


class Capability(Flag):
    """Renderings a field's type supports."""

    DEFAULT = 1  # str(value), always present
    STRUCTURED = 2  # debug-style rendering
    INTEGRAL = 4  # hex-renderable

    ALL = 7


class ShapeKind(Enum):
    """Arity/naming structure of a variant's fields."""

    UNIT = auto()
    POSITIONAL = auto()
    NAMED = auto()


class FormatKind(Enum):
    """Requested rendering for a placeholder."""

    DEFAULT = auto()  # {0}
    STRUCTURED = auto()  # {0:?}
    HEX = auto()  # {0:0x}


@dataclass(frozen=True)
class FieldSpec:
    """One field of a variant: its key and what it can render as.

    Positional fields are keyed by index, named fields by name.
    """

    key: int | str
    capabilities: Capability = Capability.DEFAULT

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities


@dataclass(frozen=True)
class VariantShape:
    """Field structure of a single variant."""

    kind: ShapeKind
    fields: tuple[FieldSpec, ...] = ()

    @classmethod
    def unit(cls) -> "VariantShape":
        return cls(ShapeKind.UNIT)

    @classmethod
    def positional(cls, *capabilities: Capability) -> "VariantShape":
        """Build a positional shape, one capability set per field.

        Usage:
            VariantShape.positional(Capability.ALL, Capability.DEFAULT)
        """
        return cls(
            ShapeKind.POSITIONAL,
            tuple(
                FieldSpec(i, caps | Capability.DEFAULT)
                for i, caps in enumerate(capabilities)
            ),
        )

    @classmethod
    def named(cls, **capabilities: Capability) -> "VariantShape":
        """Build a named shape from field name -> capability set."""
        return cls(
            ShapeKind.NAMED,
            tuple(
                FieldSpec(name, caps | Capability.DEFAULT)
                for name, caps in capabilities.items()
            ),
        )

    @property
    def arity(self) -> int:
        return len(self.fields)

    def field(self, key: int | str) -> FieldSpec | None:
        """Look up a field by index or name, None if absent."""
        for spec in self.fields:
            if spec.key == key and type(spec.key) is type(key):
                return spec
        return None

    def field_names(self) -> tuple[str, ...]:
        return tuple(str(spec.key) for spec in self.fields)


# =============================================================================
# Template segments
# =============================================================================


@dataclass(frozen=True)
class Index:
    """Positional reference, e.g. {0}."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Name:
    """Named reference, e.g. {message}."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Literal:
    """Verbatim template text (escaped braces already collapsed)."""

    text: str


@dataclass(frozen=True)
class Placeholder:
    """A {ref:spec} span in a template."""

    ref: Index | Name
    kind: FormatKind = FormatKind.DEFAULT
    source: str = ""  # original text including braces
    offset: int = 0  # position of the opening brace

    def __str__(self) -> str:
        return self.source or f"{{{self.ref}}}"


Segment = Literal | Placeholder
