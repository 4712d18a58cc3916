"""
Declaring concrete variants and bundling them into type groups.

A concrete variant is an attrs class or a dataclass tagged with one or more discriminators::

    @type_id("circle")
    @attr.s
    class Circle(Shape):
        radius = attr.ib(type=float)

A type group lists the classes it declares. Several groups, each declaring part of one or
more hierarchies, can be registered together.
"""

from .action import convert_dict_to_record, convert_record_to_dict
from .errors import ConfigurationError
from .helpers import PY2JSON, VERBS, issub_safe
from .product import build_members, is_record

import attr
from functools import partial
import logging

logger = logging.getLogger(__name__)

#: Class attribute holding the discriminators declared by ``type_id``, first declared first.
TYPE_IDS = "__json_type_ids__"

#: Attribute of a module or class that lists the types of a type group descriptor.
GROUP_TYPES = "__json_types__"

_INT32 = range(-(2 ** 31), 2 ** 31)


def check_type_id(value, owner=None):
    """
    Validate a discriminator, which must be a string or a 32-bit signed integer.

    Subclasses such as IntEnum or StrEnum members are reduced to the plain str or int that
    JSON carries.
    """
    where = " on {}".format(owner.__qualname__) if owner is not None else ""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ConfigurationError(
            "Discriminator {!r}{} must be a string or an integer".format(value, where)
        )
    if isinstance(value, int) and value not in _INT32:
        raise ConfigurationError(
            "Discriminator {!r}{} is out of 32-bit range".format(value, where)
        )
    return int(value) if isinstance(value, int) else str.__str__(value)


def type_id(value):
    """
    Class decorator declaring the discriminator that identifies a concrete variant.

    It may be stacked; the top-most declaration is the one written when encoding.
    Discriminators aren't inherited by subclasses.
    """
    value = check_type_id(value)

    def decorate(cls):
        setattr(cls, TYPE_IDS, (value,) + tuple(cls.__dict__.get(TYPE_IDS, ())))
        return cls

    return decorate


def declared_type_ids(cls):
    return tuple(check_type_id(value, cls) for value in cls.__dict__.get(TYPE_IDS, ()))


@attr.s(frozen=True, slots=True)
class DeclaredType:
    typ = attr.ib(type=type)
    type_ids = attr.ib(type=tuple, default=())

    @classmethod
    def from_class(cls, typ):
        if not isinstance(typ, type):
            raise ConfigurationError("Can't declare {!r}; it isn't a class".format(typ))
        if not is_record(typ):
            raise ConfigurationError(
                "Can't declare {}; only attrs classes and dataclasses are supported".format(
                    typ.__qualname__
                )
            )
        return cls(typ=typ, type_ids=declared_type_ids(typ))


@attr.s(frozen=True, slots=True)
class VariantEntry:
    "A concrete type and the discriminator that identifies it under some base type."
    typ = attr.ib(type=type)
    type_id = attr.ib()


def group_records(verb, typ, ctx, *, types, naming=None, omit_none=False):
    """
    Rule handling exactly the record types a group declares, as plain JSON objects.

    Types outside the group are left to the other rules.
    """
    if verb not in VERBS or typ not in types:
        return
    members = build_members(verb, typ, ctx, naming=naming)
    if verb == PY2JSON:
        return partial(convert_record_to_dict, members=members, omit_none=omit_none)
    else:
        return partial(convert_dict_to_record, members=members, con=typ)


@attr.s(frozen=True, eq=False, repr=False)
class TypeGroup:
    """
    An immutable bundle of declared concrete types.

    Besides listing its variants, a group provides its own rule for the types it declares:
    ``default_rule()`` is built once and shared, ``create_rule(options)`` builds a fresh rule
    honoring a caller's options.
    """

    name = attr.ib(type=str)
    declared = attr.ib(type=tuple, converter=tuple)
    _default = attr.ib(init=False)

    @_default.default
    def _build_default(self):
        return self.create_rule(None)

    @classmethod
    def of(cls, *types, name=None):
        "Build a group declaring the given classes, in order."
        declared = tuple(DeclaredType.from_class(typ) for typ in types)
        if name is None:
            name = ", ".join(decl.typ.__qualname__ for decl in declared)
        return cls(name=name, declared=declared)

    @classmethod
    def from_descriptor(cls, descriptor):
        """
        Materialize a group from a descriptor: a TypeGroup, or a module or class listing its
        types in ``__json_types__``.
        """
        if isinstance(descriptor, cls):
            return descriptor
        try:
            types = getattr(descriptor, GROUP_TYPES)
        except AttributeError:
            raise ConfigurationError(
                "Type group descriptor {!r} has no {}".format(descriptor, GROUP_TYPES)
            ) from None
        if isinstance(types, (str, bytes)) or not hasattr(types, "__iter__"):
            raise ConfigurationError(
                "{}.{} must be a sequence of classes".format(descriptor, GROUP_TYPES)
            )
        name = getattr(descriptor, "__qualname__", None) or getattr(
            descriptor, "__name__", repr(descriptor)
        )
        return cls.of(*types, name=name)

    @property
    def types(self):
        return tuple(decl.typ for decl in self.declared)

    def variants_of(self, base):
        """
        The declared types assignable to ``base`` that carry a discriminator, in declaration
        order. A type declared with several discriminators is advertised with its first.
        """
        return tuple(
            VariantEntry(typ=decl.typ, type_id=decl.type_ids[0])
            for decl in self.declared
            if decl.type_ids and issub_safe(decl.typ, base)
        )

    def default_rule(self):
        return self._default

    def create_rule(self, options):
        types = frozenset(self.types)
        if options is None:
            return partial(group_records, types=types)
        return partial(
            group_records, types=types, naming=options.naming, omit_none=options.omit_none
        )

    def __repr__(self):
        return "<TypeGroup {} of {} types>".format(self.name, len(self.declared))
