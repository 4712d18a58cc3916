from .types import (  # noqa
    has_origin,
    get_origin,
    get_args,
    is_generic,
    is_union,
    issub_safe,
    NoneType,
    resolve_fwd_ref,
)
from .errors import ErrorContext, err_ctx  # noqa

JSON2PY = "json_to_python"
PY2JSON = "python_to_json"
VERBS = (JSON2PY, PY2JSON)

#: The reserved member that names the concrete variant of a polymorphic value.
TYPE_FIELD = "$type"

#: Field metadata key overriding the JSON member name of an attrs or dataclass field.
JSON_NAME = "json_name"

SENTINEL = object()
