from .errors import DecodeError, ErrorContext, UnsupportedTypeError, err_ctx

from datetime import timedelta
from decimal import InvalidOperation
import math
import re


def convert_atom(value, *, typ):
    # bool is a subclass of int, but true is never a number.
    if not isinstance(value, typ) or (typ is not bool and isinstance(value, bool)):
        raise DecodeError(
            "Expected {}, got {!r}".format(typ.__name__, type(value).__name__)
        )
    return value


def convert_none(value):
    if value is not None:
        raise DecodeError("Expected null")
    return None


def convert_float(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError("Expected a number, got {!r}".format(type(value).__name__))
    return float(value)


def convert_float_json(value):
    value = float(value)
    if not math.isfinite(value):
        raise ValueError("Won't save {!r}; JSON has no such number".format(value))
    return value


def convert_decimal_str(value):
    result = str(value)
    if result == "sNaN":
        raise InvalidOperation("Won't save signalling NaN")
    return result


def convert_str_decimal(value, *, con):
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise DecodeError("Expected a decimal string, got {!r}".format(value))
    try:
        return con(value)
    except ArithmeticError as exc:
        raise DecodeError("Invalid decimal {!r}".format(value)) from exc


def convert_parse_str(value, *, parser):
    if not isinstance(value, str):
        raise DecodeError("Expected a string, got {!r}".format(type(value).__name__))
    try:
        return parser(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(str(exc)) from exc


def convert_enum_str(value, *, typ):
    return typ(value).name


def convert_str_enum(value, *, mapping):
    try:
        return mapping[value]
    except (KeyError, TypeError):
        raise DecodeError(
            "Expected one of {}, got {!r}".format(", ".join(mapping), value)
        ) from None


def convert_timedelta_str(dur):
    "Barebones support for storing a timedelta as an ISO8601 duration."
    micro = ".{:06d}".format(dur.microseconds) if dur.microseconds else ""
    return "P{:d}DT{:d}{}S".format(dur.days, dur.seconds, micro)


_iso8601_duration = re.compile(
    r"^P(?!$)([-+]?\d+(?:[.,]\d+)?W)?"
    r"([-+]?\d+(?:[.,]\d+)?D)?"
    r"(?:(T)(?=[0-9+-])"
    r"([-+]?\d+(?:[.,]\d+)?H)?"
    r"([-+]?\d+(?:[.,]\d+)?M)?"
    r"([-+]?\d+(?:[.,]\d+)?S)?)?$"
)
_duration_args = {
    "PW": "weeks",
    "PD": "days",
    "TH": "hours",
    "TM": "minutes",
    "TS": "seconds",
}


def convert_str_timedelta(dur):
    match = _iso8601_duration.match(dur.upper().replace(",", "."))
    if not match:
        raise ValueError("Value was not an ISO8601 duration.")
    section = "P"
    args = {}
    for elem in match.groups():
        if elem is None:
            continue
        if elem == "T":
            section = "T"
            continue
        value = float(elem[:-1])
        if value:
            args[_duration_args[section + elem[-1]]] = value
    return timedelta(**args)


def convert_optional(value, *, inner):
    if value is None:
        return None
    return inner(value)


def convert_collection(value, *, inner, con):
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise DecodeError("Expected an array, got {!r}".format(type(value).__name__))
    return con(
        err_ctx("[{}]".format(i), lambda: inner(val)) for i, val in enumerate(value)
    )


def convert_mapping(value, *, key, val, con):
    if not isinstance(value, dict):
        raise DecodeError("Expected an object, got {!r}".format(type(value).__name__))
    return con(err_ctx("[{!r}]".format(k), lambda: (key(k), val(v))) for k, v in value.items())


def convert_record_to_dict(value, *, members, omit_none):
    """
    Write the members of an attrs or dataclass instance in declaration order.
    """
    out = {}
    for member in members:
        with ErrorContext(".", member.name):
            field = getattr(value, member.name)
            if field is None and omit_none:
                continue
            out[member.json_name] = member.inner(field)
    return out


def convert_dict_to_record(value, *, members, con):
    """
    Construct an attrs or dataclass instance from a JSON object.

    Members missing from the object take their defaults; a missing member without a default
    is a decode error rather than a constructor TypeError.
    """
    if not isinstance(value, dict):
        raise DecodeError("Expected an object, got {!r}".format(type(value).__name__))
    args = {}
    for member in members:
        with ErrorContext("[{!r}]".format(member.json_name)):
            try:
                arg = value[member.json_name]
            except KeyError:
                if member.is_required:
                    raise DecodeError("Missing required member") from None
            else:
                args[member.init_name] = member.inner(arg)
    return con(**args)


def convert_variant_to_json(value, *, field, encoders, typename):
    """
    Write a polymorphic value: the discriminator first, then the members of its concrete
    type. Only exact runtime types are matched.
    """
    try:
        type_id, encoder = encoders[type(value)]
    except KeyError:
        raise UnsupportedTypeError(
            "Runtime type {} is not a declared variant of {}".format(
                type(value).__qualname__, typename
            )
        ) from None
    out = {field: type_id}
    with ErrorContext("<", type(value).__qualname__, ">"):
        out.update(encoder(value))
    return out


def discriminator_key(type_id):
    # Keep 1 and "1" apart, and never let true collide with 1.
    if isinstance(type_id, bool) or not isinstance(type_id, (str, int)):
        return None
    return (int if isinstance(type_id, int) else str, type_id)


def convert_json_to_variant(value, *, field, decoders, typename):
    """
    Read a polymorphic value by looking up its discriminator in the compiled variant table.
    """
    if not isinstance(value, dict):
        raise DecodeError(
            "Expected an object for {}, got {!r}".format(typename, type(value).__name__)
        )
    try:
        type_id = value[field]
    except KeyError:
        raise DecodeError(
            "Missing discriminator {!r} for {}".format(field, typename)
        ) from None
    try:
        typ, decoder = decoders[discriminator_key(type_id)]
    except KeyError:
        raise DecodeError(
            "Unknown discriminator {!r} for {}".format(type_id, typename)
        ) from None
    with ErrorContext("<", typ.__qualname__, ">"):
        return decoder({k: v for k, v in value.items() if k != field})
