"""
These are standard rules to handle the types that appear as members of concrete variants.

All rules take a verb, a Python type and a context, which is generally a RuleSet. A rule
returns a conversion function for that verb, or None if it doesn't handle the type.
"""

from .helpers import (
    has_origin,
    get_origin,
    is_union,
    issub_safe,
    NoneType,
    JSON2PY,
    PY2JSON,
    VERBS,
)
from .action import (
    convert_atom,
    convert_collection,
    convert_decimal_str,
    convert_enum_str,
    convert_float,
    convert_float_json,
    convert_mapping,
    convert_none,
    convert_optional,
    convert_parse_str,
    convert_str_decimal,
    convert_str_enum,
    convert_str_timedelta,
    convert_timedelta_str,
)

from collections import OrderedDict
from datetime import datetime, date, time, timedelta
from decimal import Decimal
from enum import Enum
from functools import partial


def atoms(verb, typ, ctx):
    "Rule to handle null, strings, booleans and integers."
    if typ is NoneType:
        return convert_none if verb in VERBS else None
    for base in (str, bool, int):  # n.b. bool is a subclass of int.
        if typ == base:
            if verb == PY2JSON:
                return base
            elif verb == JSON2PY:
                return partial(convert_atom, typ=base)


def floats(verb, typ, ctx):
    """
    Rule to handle floats.

    JSON doesn't distinguish integers from floats, and many generators write floats with an
    integral value as integers, so both decode to a Python float. NaN and the infinities
    aren't JSON numbers and are refused on encode.
    """
    if typ == float:
        if verb == PY2JSON:
            return convert_float_json
        elif verb == JSON2PY:
            return convert_float


def decimals_as_str(verb, typ, ctx):
    """
    Rule to handle decimals as strings, so no precision is lost to a float round trip.

    This rule will fail if passed a signalling NaN.
    """
    if typ == Decimal:
        if verb == PY2JSON:
            return convert_decimal_str
        elif verb == JSON2PY:
            return partial(convert_str_decimal, con=Decimal)


def iso_dates(verb, typ, ctx):
    """
    Rule to handle iso formatted datetimes, dates and times, plus timedeltas as ISO8601
    durations.
    """
    if typ not in (date, datetime, time, timedelta):
        return
    if verb == PY2JSON:
        return convert_timedelta_str if typ == timedelta else typ.isoformat
    elif verb == JSON2PY:
        parser = convert_str_timedelta if typ == timedelta else typ.fromisoformat
        return partial(convert_parse_str, parser=parser)


def enums(verb, typ, ctx):
    "Rule to convert between enumerated types and their member names."
    if issub_safe(typ, Enum):
        if verb == PY2JSON:
            return partial(convert_enum_str, typ=typ)
        elif verb == JSON2PY:
            return partial(convert_str_enum, mapping=dict(typ.__members__))


def optional(verb, typ, ctx):
    """
    Handle an ``Optional[inner]``, or ``inner | None``, by passing ``None`` through.

    This is how a member refers to a polymorphic base that may be absent, e.g.
    ``Optional[Shape]``.
    """
    if verb not in VERBS:
        return
    if not is_union(typ) or len(typ.__args__) != 2 or NoneType not in typ.__args__:
        return
    (inner,) = [arg for arg in typ.__args__ if arg is not NoneType]
    inner = ctx.lookup(verb=verb, typ=inner)
    return partial(convert_optional, inner=inner)


def lists(verb, typ, ctx):
    """
    Handle a ``List[type]`` or ``Tuple[type, ...]``.

    The ellipsis indicates a homogenous tuple; fixed tuples aren't supported.
    """
    if verb not in VERBS:
        return
    if has_origin(typ, list, num_args=1):
        (inner,) = typ.__args__
    elif has_origin(typ, tuple, num_args=2) and typ.__args__[1] is Ellipsis:
        inner = typ.__args__[0]
    else:
        return
    inner = ctx.lookup(verb=verb, typ=inner)
    con = list if verb == PY2JSON else get_origin(typ)
    return partial(convert_collection, inner=inner, con=con)


def sets(verb, typ, ctx):
    "Handle a ``Set[type]`` or ``FrozenSet[type]`` as an array."
    if verb not in VERBS:
        return
    if not has_origin(typ, (set, frozenset), num_args=1):
        return
    (inner,) = typ.__args__
    inner = ctx.lookup(verb=verb, typ=inner)
    con = list if verb == PY2JSON else get_origin(typ)
    return partial(convert_collection, inner=inner, con=con)


def _stringly(verb, typ):
    "Handle the types that reliably convert to and from object keys."
    if typ == str:
        return str
    elif typ == int:
        return str if verb == PY2JSON else int
    elif issub_safe(typ, Enum):
        return enums(verb=verb, typ=typ, ctx=None)


def dicts(verb, typ, ctx):
    "Handle a ``Dict[key, value]`` where key is a string, integer or enum type."
    if verb not in VERBS:
        return
    if not has_origin(typ, (dict, OrderedDict), num_args=2):
        return
    (key_type, val_type) = typ.__args__
    key = _stringly(verb, key_type)
    if key is None:
        return
    val = ctx.lookup(verb=verb, typ=val_type)
    con = dict if verb == PY2JSON else get_origin(typ)
    return partial(convert_mapping, key=key, val=val, con=con)


def std_rules(
    floats=floats,
    decimals=decimals_as_str,
    dates=iso_dates,
    enums=enums,
    lists=lists,
    sets=sets,
    dicts=dicts,
    extras=(),
):
    """
    The primitive rules a base configuration starts with. The arguments here are to make it
    easy to override.

    For example, to swap in a custom date rule just call ``std_rules(dates=my_dates)``.
    """
    return (enums, atoms, floats, decimals, dates, optional, lists, sets, dicts) + tuple(
        extras
    )
