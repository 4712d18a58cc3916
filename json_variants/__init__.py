"""
The JSON variants library encodes and decodes values of an open set of related types as JSON,
tagging each object with a ``$type`` discriminator that names its concrete variant.

Concrete variants are attrs classes or dataclasses declared with ``type_id``; type groups
bundle them; a serializer compiles, for each base type, which variants it advertises.
"""

from .combine import Config, combine  # noqa
from .errors import (  # noqa
    ConfigurationError,
    DecodeError,
    EncodeError,
    UnsupportedTypeError,
    VariantError,
)
from .group import DeclaredType, TypeGroup, VariantEntry, type_id  # noqa
from .helpers import JSON2PY, PY2JSON, JSON_NAME, TYPE_FIELD  # noqa
from .options import Options, camel_case, pascal_case  # noqa
from .registration import Registration, Services  # noqa
from .ruleset import RuleSet, set_trace  # noqa
from .serializer import PolymorphicSerializer, TypedSerializer  # noqa
from .std import std_rules  # noqa
from .variants import CompiledResolution, compile_resolution, resolve_variants  # noqa
