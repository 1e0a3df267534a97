"""Tests for declarative error enums."""

import pickle
from dataclasses import dataclass

import pytest

from simple_error import SimpleError, error
from simple_error.config import configure
from simple_error.errors import (
    CapabilityError,
    DeclarationError,
    IndexOutOfRangeError,
    TemplateSyntaxError,
    UnitPlaceholderError,
    UnknownFieldError,
)


@dataclass
class UnnamedStructValue:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class State:
    code: int


class Opaque:
    pass


class SomeError(SimpleError):
    Unit = error("hello unit")
    Unnamed = error("hello {0:?} {1}", UnnamedStructValue, int)
    UnnamedPlain = error("hello {0} {1}", UnnamedStructValue, int)
    Named = error("hello {message}", message=str)
    Detailed = error("Unnamed error: {0:?}, {1}, 0x{2:0x}", State, str, int)


class TestDisplay:
    """str() of variant instances."""

    def test_unit(self):
        assert str(SomeError.Unit()) == "hello unit"

    def test_named(self):
        assert str(SomeError.Named(message="world")) == "hello world"

    def test_unnamed_default(self):
        assert str(SomeError.UnnamedPlain(UnnamedStructValue(42), 45)) == "hello 42 45"

    def test_unnamed_structured(self):
        assert (
            str(SomeError.Unnamed(UnnamedStructValue(value=42), 45))
            == "hello UnnamedStructValue { value: 42 } 45"
        )

    def test_structured_and_hex(self):
        err = SomeError.Detailed(State(code=2), "state error", 32)
        assert str(err) == "Unnamed error: State { code: 2 }, state error, 0x20"

    def test_raised_message(self):
        with pytest.raises(SomeError, match="hello world"):
            raise SomeError.Named(message="world")


class TestVariants:
    """Variant classes and instance behavior."""

    def test_variants_are_enum_subclasses(self):
        assert issubclass(SomeError.Named, SomeError)
        assert issubclass(SomeError, Exception)
        assert list(SomeError.variants()) == [
            "Unit",
            "Unnamed",
            "UnnamedPlain",
            "Named",
            "Detailed",
        ]

    def test_tag_and_fields(self):
        err = SomeError.Unnamed(UnnamedStructValue(1), 2)
        assert err.tag == "Unnamed"
        assert err.args == (UnnamedStructValue(1), 2)
        assert err[1] == 2

    def test_named_fields_are_attributes(self):
        err = SomeError.Named(message="world")
        assert err.message == "world"
        assert err.field_values() == {"message": "world"}
        assert err.args == ()

    def test_named_accepts_positional_in_declared_order(self):
        assert SomeError.Named("world") == SomeError.Named(message="world")

    def test_repr_is_structured(self):
        assert repr(SomeError.Unit()) == "SomeError.Unit"
        assert repr(SomeError.Named(message="x")) == "SomeError.Named { message: 'x' }"
        assert (
            repr(SomeError.Unnamed(UnnamedStructValue(1), 2))
            == "SomeError.Unnamed(UnnamedStructValue { value: 1 }, 2)"
        )

    def test_equality(self):
        assert SomeError.Named(message="a") == SomeError.Named(message="a")
        assert SomeError.Named(message="a") != SomeError.Named(message="b")
        assert SomeError.Unit() != SomeError.Named(message="a")
        assert hash(SomeError.Unit()) == hash(SomeError.Unit())

    def test_pickle_round_trip(self):
        err = SomeError.Named(message="world")
        restored = pickle.loads(pickle.dumps(err))
        assert restored == err
        assert str(restored) == "hello world"

    def test_self_referencing_field_renders(self):
        class ListError(SimpleError):
            V = error("got {0:?}", list)

        items = []
        items.append(items)
        assert str(ListError.V(items)) == "got [...]"

    def test_nested_enum_structured(self):
        class Outer(SimpleError):
            Wrapped = error("outer: {0:?}", SomeError)

        inner = SomeError.Named(message="hi")
        assert str(Outer.Wrapped(inner)) == "outer: Named { message: 'hi' }"


class TestConstruction:
    """Argument checking when building instances."""

    def test_enum_itself_cannot_be_instantiated(self):
        with pytest.raises(TypeError, match="instantiate a variant"):
            SomeError()

    def test_wrong_positional_count(self):
        with pytest.raises(TypeError, match="takes 2 field"):
            SomeError.Unnamed(UnnamedStructValue(1))

    def test_unit_takes_no_fields(self):
        with pytest.raises(TypeError):
            SomeError.Unit("extra")

    def test_missing_named_field(self):
        with pytest.raises(TypeError, match="missing field"):
            SomeError.Named()

    def test_unexpected_named_field(self):
        with pytest.raises(TypeError, match="unexpected field"):
            SomeError.Named(message="x", other=1)

    def test_duplicate_named_field(self):
        with pytest.raises(TypeError, match="multiple values"):
            SomeError.Named("x", message="y")

    def test_positional_rejects_keywords(self):
        with pytest.raises(TypeError, match="keyword"):
            SomeError.Unnamed(UnnamedStructValue(1), value=2)

    def test_integral_field_validated(self):
        with pytest.raises(TypeError, match="must be an integer"):
            SomeError.Detailed(State(2), "x", "32")

    def test_bool_rejected_for_integral_field(self):
        with pytest.raises(TypeError, match="must be an integer"):
            SomeError.Detailed(State(2), "x", True)

    def test_validation_can_be_disabled(self, clean_settings):
        configure(validate_values=False)
        err = SomeError.Unnamed(UnnamedStructValue(1), "not an int")
        assert err.args[1] == "not an int"


class TestDeclarationErrors:
    """Failures surface when the class statement runs."""

    def test_index_out_of_range(self, registry):
        with pytest.raises(IndexOutOfRangeError) as exc_info:

            class Bad(SimpleError):
                Two = error("{5}", int, int)

        assert exc_info.value.variant.endswith("Bad.Two")
        assert registry.count() == 0

    def test_unknown_field(self, registry):
        with pytest.raises(UnknownFieldError):

            class Bad(SimpleError):
                V = error("{unknown}", message=str)

    def test_unit_placeholder(self, registry):
        with pytest.raises(UnitPlaceholderError):

            class Bad(SimpleError):
                V = error("hello {0}")

    def test_capability(self, registry):
        with pytest.raises(CapabilityError):

            class Bad(SimpleError):
                V = error("{0:?}", Opaque)

    def test_hex_on_string(self, registry):
        with pytest.raises(CapabilityError):

            class Bad(SimpleError):
                V = error("{name:0x}", name=str)

    def test_syntax(self, registry):
        with pytest.raises(TemplateSyntaxError):

            class Bad(SimpleError):
                V = error("hello {")

    def test_non_string_template(self, registry):
        with pytest.raises(DeclarationError, match="must be a string"):

            class Bad(SimpleError):
                V = error(42)

    def test_mixed_fields(self):
        with pytest.raises(DeclarationError, match="not both"):
            error("{0}", int, name=str)

    def test_non_type_field(self, registry):
        with pytest.raises(DeclarationError, match="must be declared with a type"):

            class Bad(SimpleError):
                V = error("{0}", "int")

    def test_reserved_field_name(self, registry):
        with pytest.raises(DeclarationError, match="invalid field name"):

            class Bad(SimpleError):
                V = error("{args}", args=str)

    @pytest.mark.parametrize("name", ["tag", "descriptor", "field_values", "variants"])
    def test_field_name_shadowing_enum_api(self, registry, name):
        with pytest.raises(DeclarationError, match="invalid field name"):

            class Bad(SimpleError):
                V = error(f"got {{{name}}}", **{name: str})

    def test_reserved_variant_name(self, registry):
        with pytest.raises(DeclarationError, match="reserved"):

            class Bad(SimpleError):
                descriptor = error("shadowed")

    def test_no_variants(self):
        with pytest.raises(DeclarationError, match="declares no variants"):

            class Empty(SimpleError):
                pass

    def test_cannot_extend_enum(self):
        with pytest.raises(DeclarationError, match="cannot subclass"):

            class More(SomeError):
                Extra = error("extra")


class TestLazyCompile:
    """Compilation deferred to first render."""

    def test_errors_surface_on_first_render(self, clean_settings, registry):
        configure(eager_compile=False)

        class Late(SimpleError):
            Ok = error("fine")
            Bad = error("{9}", int)

        assert registry.count() == 0
        with pytest.raises(IndexOutOfRangeError):
            str(Late.Ok())

    def test_compiles_once(self, clean_settings, registry):
        configure(eager_compile=False)

        class Late(SimpleError):
            V = error("v={0}", int)

        assert str(Late.V(1)) == "v=1"
        descriptor = Late.descriptor()
        assert str(Late.V(2)) == "v=2"
        assert Late.descriptor() is descriptor
        assert registry.get(Late) is descriptor
