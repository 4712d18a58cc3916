"""
A module to describe the members of concrete variants, which are attrs classes or dataclasses.
"""

from .errors import ConfigurationError
from .helpers import JSON_NAME, SENTINEL, resolve_fwd_ref

import attr
import dataclasses


class Member:
    """
    Describes one member of a product type as it appears in a JSON object.

    A Member is associated with an action, specifically, its "inner" field directs how to
    process the member's value, not necessarily what the member's type is.

    Fields:
      name: the attribute name on the Python object
      init_name: the constructor argument name
      json_name: the member name in the JSON object
      typ: the declared type, with forward references resolved
      is_required: True if decoding must find the member
      inner: the action for the verb the member map was built for
    """

    __slots__ = ("name", "init_name", "json_name", "typ", "is_required", "default", "inner")

    def __init__(self, name, typ, is_required, init_name=None, json_name=None, default=SENTINEL):
        self.name = name
        self.init_name = init_name or name
        self.json_name = json_name or self.init_name
        self.typ = typ
        self.is_required = is_required
        self.default = default
        self.inner = None

    def __repr__(self):
        return "<Member {!r} as {!r}; {}>".format(
            self.name, self.json_name, "required" if self.is_required else "optional"
        )


def _is_missing(value):
    return value is attr.NOTHING or value is dataclasses.MISSING


def is_field_required(field):
    "Determine if a field can calculate its default value."
    if not _is_missing(field.default):
        return False
    return _is_missing(getattr(field, "default_factory", attr.NOTHING))


def _fields(typ):
    """
    Find the init fields of an attrs class or a dataclass, paired with their constructor
    names. Returns None for any other type.
    """
    try:
        fields = typ.__attrs_attrs__
    except AttributeError:
        pass
    else:
        # attrs strips leading underscores from private attributes in ``__init__``.
        return [
            (field, getattr(field, "alias", None) or field.name.lstrip("_"))
            for field in fields
            if field.init
        ]
    if dataclasses.is_dataclass(typ) and isinstance(typ, type):
        return [(field, field.name) for field in dataclasses.fields(typ) if field.init]
    return None


def is_record(typ):
    "True if the type is an attrs class or a dataclass."
    return _fields(typ) is not None


def build_members(verb, typ, ctx, naming=None):
    """
    Examine an attrs or dataclass type and construct its member map for a verb.

    The JSON name of a member is its ``json_name`` metadata, else the naming policy applied
    to its constructor name, else the constructor name.

    Raises ConfigurationError listing every member whose type no rule handles.
    """
    fields = _fields(typ)
    if fields is None:
        return None

    result = []
    failed = []
    for field, init_name in fields:
        json_name = (field.metadata or {}).get(JSON_NAME)
        if not json_name and naming is not None:
            json_name = naming(init_name)
        member = Member(
            name=field.name,
            init_name=init_name,
            json_name=json_name,
            typ=field.type,
            is_required=is_field_required(field),
            default=field.default,
        )
        if member.typ is None:
            failed.append("find the type of {}".format(member.name))
            continue
        try:
            member.typ = resolve_fwd_ref(member.typ, typ)
        except (NameError, TypeError) as exc:
            failed.append("resolve {!r} for {} ({})".format(member.typ, member.name, exc))
            continue
        member.inner = ctx.lookup(verb=verb, typ=member.typ, accept_missing=True)
        if member.inner is None:
            failed.append("get {} for {}".format(member.typ, member.name))
        result.append(member)

    if failed:
        raise ConfigurationError(
            "{}({}) failed while trying to: {}".format(
                verb, typ.__qualname__, ", ".join(failed)
            )
        )
    return tuple(result)
