from warnings import warn
import logging
import threading

logger = logging.getLogger(__name__)


class UnhashableType(UserWarning):
    pass


class ForwardAction:
    """
    A mutable callable. Since actions are simply functions, this lets us create a
    promise of a function and replace it when we have the actual function ready. This is
    how a variant whose member refers back to its own base type gets compiled.
    """

    __slots__ = ("__call__",)

    def __init__(self, call):
        self.__call__ = call

    def __repr__(self):
        return "<fwd {!r}>".format(self.__call__)


class SimpleCache:
    """
    Memoizes the actions a RuleSet computes, keyed by verb and type.
    """

    def __init__(self):
        self.cache = {}

    def get(self, verb, typ):
        result = self._lookup(verb, typ)
        return result if result is not NotImplemented else None

    def _lookup(self, verb, typ):
        try:
            return self.cache.get((verb, typ))
        except TypeError:
            warn(
                "Type {} is unhashable; json_variants can't cache it".format(typ),
                category=UnhashableType,
            )
            return NotImplemented

    def in_flight(self, verb, typ):
        """
        Called when we begin determining the action for a type. We construct a forward
        action that will be fulfilled by the ``complete`` call.
        """
        if self._lookup(verb, typ) is None:

            def unfulfilled(value):
                raise TypeError(
                    "Forward reference was never fulfilled to {} for {}".format(
                        verb, typ
                    )
                )

            forward = ForwardAction(unfulfilled)
            self.cache[verb, typ] = forward
            return forward

    def de_flight(self, verb, typ, forward):
        "If a lookup fails, this removes the entry so that further attempts can be made."
        if forward is not None and self._lookup(verb, typ) is forward:
            del self.cache[verb, typ]

    def complete(self, verb, typ, action):
        """
        Once a type is complete, we fulfill any ForwardActions and replace the cache
        entry with the actual action.
        """
        present = self._lookup(verb, typ)
        if present is NotImplemented:
            return
        elif isinstance(present, ForwardAction):
            present.__call__ = action
        self.cache[verb, typ] = action


class ConfigurationCache:
    """
    Memoizes compiled configurations by base type and base options.

    Options are keyed by identity: two equal but distinct ``Options`` objects get two
    entries. Nothing is ever evicted, so callers should create few, long-lived options
    objects rather than one per call.

    Concurrent misses on the same key may compile twice; the configurations are
    interchangeable and the last one stored wins. An entry is only stored once fully built.
    """

    def __init__(self, compute):
        self._compute = compute
        self._entries = {}
        self._lock = threading.Lock()

    def get_or_compute(self, base, options=None):
        key = (base, options)
        try:
            return self._entries[key]
        except KeyError:
            pass
        logger.debug("compiling configuration for %r with %r", base, options)
        config = self._compute(base, options)
        with self._lock:
            self._entries[key] = config
        return config

    def __len__(self):
        return len(self._entries)
