"""Compile-time errors for template binding.

Every failure is detected while a template is compiled against its
variant, never while an instance is rendered. All errors derive from
CompileError so callers can catch the whole family at once.
"""


class CompileError(ValueError):
    """A template could not be bound to its variant.

    Attributes:
        reason: Human-readable cause, without location details
        variant: Variant tag the template belongs to (filled in by the compiler)
        placeholder: Offending placeholder text, if any
        template: The full template string, if known
        offset: Position of the offending span within the template
    """

    def __init__(
        self,
        reason: str,
        *,
        variant: str | None = None,
        placeholder: str | None = None,
        template: str | None = None,
        offset: int | None = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.variant = variant
        self.placeholder = placeholder
        self.template = template
        self.offset = offset

    def __str__(self) -> str:
        parts = []
        if self.variant:
            parts.append(f"variant {self.variant}")
        if self.placeholder:
            parts.append(f"placeholder {self.placeholder}")
        if self.offset is not None:
            parts.append(f"at offset {self.offset}")
        location = f" ({', '.join(parts)})" if parts else ""
        template = f" in template {self.template!r}" if self.template is not None else ""
        return f"{self.reason}{location}{template}"


class TemplateSyntaxError(CompileError):
    """Malformed placeholder: unterminated brace, bad reference or spec."""


class UnitPlaceholderError(CompileError):
    """A placeholder appears in a template bound to a field-less variant."""


class IndexOutOfRangeError(CompileError):
    """Positional reference is not below the variant's field count."""


class UnknownFieldError(CompileError):
    """Named reference matches no declared field."""


class ShapeMismatchError(CompileError):
    """Reference kind does not fit the variant's shape kind."""


class CapabilityError(CompileError):
    """Requested format kind is not supported by the field's type."""


class DeclarationError(CompileError):
    """A variant declaration itself is malformed."""
