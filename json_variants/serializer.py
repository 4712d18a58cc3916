"""
The encode / decode entry points.

``PolymorphicSerializer`` takes the base type of every call explicitly. ``TypedSerializer``
is bound to one base type and compiles its default configuration once, when it's created.
Both route every operation through a compiled ``Config`` and the standard library ``json``
module, so the discriminator is written the same way whichever entry point is used.
"""

from .cache import ConfigurationCache
from .combine import combine
from .errors import DecodeError
from .group import TypeGroup

import inspect
import io
import json
import logging
import threading

import ijson
from ijson.common import ObjectBuilder

logger = logging.getLogger(__name__)


def _dumps(config, value):
    return json.dumps(config.encode(value), **config.dumps_kwargs)


def _reject_constant(name):
    raise DecodeError("Malformed JSON: {} is not a JSON number".format(name))


def _loads(config, text):
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise DecodeError("Malformed JSON: {}".format(exc)) from exc
    except UnicodeDecodeError as exc:
        raise DecodeError("JSON input isn't valid UTF-8: {}".format(exc)) from exc
    return config.decode(data)


def _write(config, value, sink):
    text = _dumps(config, value)
    if isinstance(sink, io.TextIOBase):
        sink.write(text)
    else:
        sink.write(text.encode("utf-8"))


async def _maybe_await(result):
    if inspect.isawaitable(result):
        return await result
    return result


async def _write_async(config, value, stream):
    data = _dumps(config, value).encode("utf-8")
    await _maybe_await(stream.write(data))
    drain = getattr(stream, "drain", None)
    if drain is not None:
        await drain()


async def _read_async(config, stream):
    return _loads(config, await _maybe_await(stream.read()))


async def _iter_async(config, stream):
    """
    Decode each element of a root-level array as soon as its last event arrives.

    Members of an element have the prefix ``item`` or a longer one; the element's own closing
    event is the only ``end_*`` event with the prefix ``item``.
    """
    started = False
    builder = None
    try:
        async for prefix, event, value in ijson.parse_async(stream, use_float=True):
            if not started:
                if event != "start_array":
                    raise DecodeError(
                        "Expected an array at the root, got {}".format(event)
                    )
                started = True
            elif builder is not None:
                builder.event(event, value)
                if prefix == "item" and event in ("end_map", "end_array"):
                    yield config.decode(builder.value)
                    builder = None
            elif event in ("start_map", "start_array"):
                builder = ObjectBuilder()
                builder.event(event, value)
            elif prefix == "item":
                yield config.decode(value)
    except ijson.JSONError as exc:
        raise DecodeError("Malformed JSON: {}".format(exc)) from exc


class PolymorphicSerializer:
    """
    Encodes and decodes values of any base type declared by the registered type groups.

    Configurations are cached by base type and options identity for the life of the
    serializer, which is meant to be created once and shared.
    """

    def __init__(self, groups):
        self.groups = tuple(TypeGroup.from_descriptor(group) for group in groups)
        self._configs = ConfigurationCache(self._compute)
        self._typed = {}
        self._lock = threading.Lock()

    def _compute(self, base, options):
        return combine(base, self.groups, options)

    def create_config(self, typ, options=None):
        return self._configs.get_or_compute(typ, options)

    def typed(self, base):
        "The serializer bound to ``base``; one instance per base type."
        try:
            return self._typed[base]
        except KeyError:
            pass
        typed = TypedSerializer(self, base)
        with self._lock:
            return self._typed.setdefault(base, typed)

    def encode(self, value, typ, options=None):
        return _dumps(self.create_config(typ, options), value)

    def encode_to(self, value, typ, sink, options=None):
        "Write to a text sink (``io.TextIOBase``) or, as UTF-8, to a binary sink."
        _write(self.create_config(typ, options), value, sink)

    async def encode_async(self, value, typ, stream, options=None):
        "Write UTF-8 JSON to an ``asyncio.StreamWriter``-like stream and drain it."
        await _write_async(self.create_config(typ, options), value, stream)

    def decode(self, text, typ, options=None):
        return _loads(self.create_config(typ, options), text)

    async def decode_async(self, stream, typ, options=None):
        "Read a stream to its end and decode a single value."
        return await _read_async(self.create_config(typ, options), stream)

    def __repr__(self):
        return "<PolymorphicSerializer of {} groups>".format(len(self.groups))


class TypedSerializer:
    """
    A serializer bound to one base type. Get it from ``PolymorphicSerializer.typed``.
    """

    def __init__(self, serializer, base):
        self.serializer = serializer
        self.base = base
        self.default_config = serializer.create_config(base)

    def create_config(self, options=None):
        if options is None:
            return self.default_config
        return self.serializer.create_config(self.base, options)

    def encode(self, value, options=None):
        return _dumps(self.create_config(options), value)

    def encode_to(self, value, sink, options=None):
        _write(self.create_config(options), value, sink)

    async def encode_async(self, value, stream, options=None):
        await _write_async(self.create_config(options), value, stream)

    def decode(self, text, options=None):
        return _loads(self.create_config(options), text)

    async def decode_async(self, stream, options=None):
        return await _read_async(self.create_config(options), stream)

    def decode_sequence_async(self, stream, options=None):
        """
        Decode a root-level JSON array lazily, one element at a time as bytes arrive.

        The returned async iterator consumes the stream once. A root that isn't an array
        raises DecodeError.
        """
        return _iter_async(self.create_config(options), stream)

    def __repr__(self):
        return "<TypedSerializer for {!r}>".format(self.base)
