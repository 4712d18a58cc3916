from importlib import import_module
import inspect
import logging
import types
import typing as t

logger = logging.getLogger(__name__)
_eval_type = t._eval_type
_eval_kwargs = (
    {"type_params": ()} if "type_params" in inspect.signature(_eval_type).parameters else {}
)
NoneType = type(None)

# ``X | Y`` builds a types.UnionType from Python 3.10 on.
_UNION_TYPES = tuple(filter(None, (getattr(types, "UnionType", None),)))


def is_union(typ):
    "True for ``Union[...]``, ``Optional[...]`` and ``X | Y``."
    return getattr(typ, "__origin__", None) is t.Union or isinstance(typ, _UNION_TYPES)


def has_origin(typ, origin, num_args=None):
    """
    Determines if a concrete class (a generic class with arguments) matches an origin
    and has a specified number of arguments.

    This does a direct match rather than a subclass check, so ``List[int]`` has the
    origin ``list`` but ``list`` itself has no origin.
    """
    t_origin = getattr(typ, "__origin__", None)
    if t_origin is None:
        return False
    if not isinstance(origin, tuple):
        origin = (origin,)
    return t_origin in origin and (num_args is None or len(get_args(typ)) == num_args)


def get_origin(typ):
    """
    Get the constructor origin of a generic type. For example, List is constructed with
    list. Plain classes are their own origin.
    """
    return getattr(typ, "__origin__", None) or typ


def get_args(typ):
    return getattr(typ, "__args__", ())


def is_generic(typ):
    "Return true iff the instance (which should be a type value) is a generic type."
    return isinstance(typ, t._GenericAlias)


def issub_safe(sub, sup):
    """
    Safe version of issubclass that only compares regular types.

    Generic aliases, type variables and forward references are never subclasses of
    anything.
    """
    try:
        return not is_generic(sub) and issubclass(sub, sup)
    except TypeError:
        return False


def resolve_fwd_ref(typ, context_class):
    """
    Tries to resolve a forward reference given a containing class. This does nothing for
    regular types.

    Strings are treated as forward references, so ``attr.ib(type="Node")`` and
    ``Optional["Node"]`` both resolve against the module that defines the class.
    """
    if isinstance(typ, str):
        typ = t.ForwardRef(typ)
    try:
        namespace = vars(import_module(context_class.__module__))
    except (AttributeError, ImportError):
        logger.warning("Couldn't determine module of %r", context_class)
        return typ
    namespace = dict(namespace)
    namespace.setdefault(context_class.__name__, context_class)
    resolved = _eval_type(typ, namespace, {}, **_eval_kwargs)
    return typ if resolved is None else resolved
