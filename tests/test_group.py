import pytest

from json_variants import (
    ConfigurationError,
    PolymorphicSerializer,
    RuleSet,
    TypeGroup,
    type_id,
    std_rules,
)
from json_variants.group import DeclaredType, VariantEntry, declared_type_ids
from json_variants.helpers import JSON2PY, PY2JSON
from json_variants.options import Options, pascal_case

from . import types_variants as tv

from enum import Enum, IntEnum
import attr
import types


def test_type_id_declares():
    "Test that type_id records the discriminator on the class."

    assert declared_type_ids(tv.Circle) == ("circle",)
    assert declared_type_ids(tv.Square) == (4,)


def test_type_id_stacked_order():
    "Test that stacked declarations keep the top-most first."

    assert declared_type_ids(tv.Polygon) == ("poly", 7)


def test_type_id_enum_members():
    "Test that enum members declared as discriminators are kept as plain values."

    class Kind(IntEnum):
        ROUND = 3

    class Tag(str, Enum):
        FLAT = "flat"

    @type_id(Kind.ROUND)
    @attr.s
    class Round(tv.Shape):
        pass

    @type_id(Tag.FLAT)
    @attr.s
    class Flat(tv.Shape):
        pass

    assert declared_type_ids(Round) == (3,)
    assert type(declared_type_ids(Round)[0]) is int
    assert declared_type_ids(Flat) == ("flat",)
    assert type(declared_type_ids(Flat)[0]) is str

    shapes = PolymorphicSerializer([TypeGroup.of(Round, Flat)]).typed(tv.Shape)

    assert shapes.encode(Round()) == '{"$type":3}'
    assert shapes.encode(Flat()) == '{"$type":"flat"}'
    assert shapes.decode(shapes.encode(Round())) == Round()
    assert shapes.decode(shapes.encode(Flat())) == Flat()


def test_type_id_not_inherited():
    "Test that a subclass of a declared variant has no discriminator of its own."

    @attr.s
    class BigCircle(tv.Circle):
        pass

    assert declared_type_ids(BigCircle) == ()


@pytest.mark.parametrize("value", [True, 1.5, None, b"circle", 2 ** 31, -(2 ** 31) - 1])
def test_type_id_rejects(value):
    "Test that a discriminator must be a string or a 32-bit integer."

    with pytest.raises(ConfigurationError):
        type_id(value)


@pytest.mark.parametrize("value", ["", "x", 0, 2 ** 31 - 1, -(2 ** 31)])
def test_type_id_accepts(value):
    "Test the limits of valid discriminators."

    @type_id(value)
    @attr.s
    class Thing:
        pass

    assert declared_type_ids(Thing) == (value,)


def test_declared_type_rejects_bad_value():
    "Test that a discriminator set by hand is still validated."

    @attr.s
    class Thing:
        pass

    Thing.__json_type_ids__ = (1.5,)

    with pytest.raises(ConfigurationError):
        DeclaredType.from_class(Thing)


def test_declared_type_rejects_non_record():
    "Test that only attrs classes and dataclasses can be declared."

    class Plain:
        pass

    with pytest.raises(ConfigurationError):
        TypeGroup.of(Plain)

    with pytest.raises(ConfigurationError):
        TypeGroup.of("Circle")


def test_group_types_in_order():
    "Test that a group keeps its declaration order."

    assert tv.shapes.types == (tv.Circle, tv.Square, tv.Blob)
    assert tv.shapes.name == "shapes"


def test_group_default_name():
    assert TypeGroup.of(tv.Circle, tv.Square).name == "Circle, Square"


def test_variants_of():
    "Test that only assignable types with a discriminator are variants."

    assert tv.shapes.variants_of(tv.Shape) == (
        VariantEntry(tv.Circle, "circle"),
        VariantEntry(tv.Square, 4),
    )
    assert tv.shapes.variants_of(tv.ITest) == ()


def test_variants_of_first_wins():
    "Test that a type with several discriminators is advertised with its first."

    group = TypeGroup.of(tv.Polygon)

    assert group.variants_of(tv.Shape) == (VariantEntry(tv.Polygon, "poly"),)


def test_variants_of_narrower_base():
    "Test that a variant can be requested as its own base."

    assert tv.shapes.variants_of(tv.Circle) == (VariantEntry(tv.Circle, "circle"),)


def test_from_descriptor_group():
    assert TypeGroup.from_descriptor(tv.shapes) is tv.shapes


def test_from_descriptor_class():
    "Test that a class listing __json_types__ materializes as a group."

    group = TypeGroup.from_descriptor(tv.GeometryContext)

    assert group.types == (tv.Circle, tv.Square)
    assert group.name == "GeometryContext"


def test_from_descriptor_module():
    "Test that a module listing __json_types__ materializes as a group."

    module = types.ModuleType("geometry")
    module.__json_types__ = [tv.Square]

    group = TypeGroup.from_descriptor(module)

    assert group.types == (tv.Square,)
    assert group.name == "geometry"


@pytest.mark.parametrize("descriptor", [object(), "shapes", type("Bare", (), {})])
def test_from_descriptor_missing(descriptor):
    "Test that a descriptor without types can't be materialized."

    with pytest.raises(ConfigurationError):
        TypeGroup.from_descriptor(descriptor)


def test_from_descriptor_not_sequence():
    class Bad:
        __json_types__ = "Circle"

    with pytest.raises(ConfigurationError):
        TypeGroup.from_descriptor(Bad)


def test_default_rule_shared():
    "Test that the default rule is built once per group."

    assert tv.shapes.default_rule() is tv.shapes.default_rule()
    assert tv.shapes.create_rule(Options()) is not tv.shapes.default_rule()


def test_group_rule_only_its_types():
    "Test that a group's rule leaves other types alone."

    rule = tv.group1.default_rule()
    rs = RuleSet(*std_rules())

    assert rule(verb=PY2JSON, typ=tv.Class2, ctx=rs) is None
    assert rule(verb=PY2JSON, typ=int, ctx=rs) is None
    assert rule(verb="unknown", typ=tv.Circle, ctx=rs) is None


def test_group_rule_plain_record():
    "Test that a group encodes its records as plain objects, without a discriminator."

    rs = RuleSet(tv.shapes.default_rule(), *std_rules())

    assert rs.lookup(verb=PY2JSON, typ=tv.Square)(tv.Square(2.0)) == {
        "side": 2.0,
        "label": None,
    }
    assert rs.lookup(verb=JSON2PY, typ=tv.Circle)({"Radius": 1.5}) == tv.Circle(1.5)


def test_group_rule_options():
    "Test that a rule created for options honors naming and omit_none."

    options = Options(naming=pascal_case, omit_none=True)
    rs = RuleSet(tv.shapes.create_rule(options), *options.rules)

    assert rs.lookup(verb=PY2JSON, typ=tv.Square)(tv.Square(2.0)) == {"Side": 2.0}
    # An explicit json_name beats the naming policy.
    assert rs.lookup(verb=PY2JSON, typ=tv.Circle)(tv.Circle(1.0)) == {"Radius": 1.0}
    assert rs.lookup(verb=JSON2PY, typ=tv.Square)({"Side": 3.0}) == tv.Square(3.0)


def test_group_rule_unknown_member_type():
    "Test that a member type no rule handles is a configuration error."

    class Opaque:
        pass

    @attr.s
    class Holder:
        thing = attr.ib(type=Opaque)

    rs = RuleSet(TypeGroup.of(Holder).default_rule(), *std_rules())

    with pytest.raises(ConfigurationError, match="thing"):
        rs.lookup(verb=PY2JSON, typ=Holder)
