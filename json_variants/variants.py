from .action import (
    convert_json_to_variant,
    convert_variant_to_json,
    discriminator_key,
)
from .errors import ConfigurationError
from .helpers import JSON2PY, PY2JSON, TYPE_FIELD

import attr
from functools import partial
import logging

logger = logging.getLogger(__name__)


def resolve_variants(base, groups):
    """
    Collect the variants of ``base`` from every group: group registration order, then
    declaration order within each group.
    """
    entries = tuple(entry for group in groups for entry in group.variants_of(base))
    logger.debug(
        "resolved %d variants of %r from %d groups", len(entries), base, len(groups)
    )
    return entries


@attr.s(frozen=True, repr=False)
class CompiledResolution:
    """
    How one base type is encoded and decoded polymorphically: which variants it advertises,
    under which discriminator field, failing on anything unrecognized.

    ``rule`` only matches the base type itself, so it can sit in front of other rules
    without interfering with them.
    """

    base = attr.ib()
    entries = attr.ib(type=tuple, converter=tuple)
    field = attr.ib(type=str, default=TYPE_FIELD)

    def rule(self, verb, typ, ctx):
        if typ != self.base:
            return
        typename = getattr(self.base, "__qualname__", repr(self.base))
        if verb == PY2JSON:
            encoders = {}
            for entry in self.entries:
                encoders.setdefault(
                    entry.typ, (entry.type_id, self._members(verb, entry.typ, ctx))
                )
            return partial(
                convert_variant_to_json,
                field=self.field,
                encoders=encoders,
                typename=typename,
            )
        elif verb == JSON2PY:
            decoders = {
                discriminator_key(entry.type_id): (
                    entry.typ,
                    self._members(verb, entry.typ, ctx),
                )
                for entry in self.entries
            }
            return partial(
                convert_json_to_variant,
                field=self.field,
                decoders=decoders,
                typename=typename,
            )

    def _members(self, verb, typ, ctx):
        "Find the plain member action of a variant."
        if typ != self.base:
            return ctx.lookup(verb=verb, typ=typ)
        # A declared class used as its own base: looking it up would find this rule again.
        for rule in ctx.rules:
            if rule == self.rule:
                continue
            action = rule(verb=verb, typ=typ, ctx=ctx)
            if action is not None:
                return action
        raise ConfigurationError(
            "Failed: {}({}) has no member rule".format(verb, typ.__qualname__)
        )

    def __repr__(self):
        return "<CompiledResolution {!r}: {}>".format(
            self.base,
            ", ".join("{!r}={}".format(e.type_id, e.typ.__qualname__) for e in self.entries),
        )


def compile_resolution(base, entries):
    """
    Compile the variants of ``base`` into a resolution.

    A variant listed twice with the same discriminator is kept once. Two different types
    sharing a discriminator is a ConfigurationError.
    """
    seen = {}
    unique = []
    for entry in entries:
        key = discriminator_key(entry.type_id)
        if key is None:
            raise ConfigurationError(
                "Discriminator {!r} on {} must be a string or an integer".format(
                    entry.type_id, entry.typ.__qualname__
                )
            )
        other = seen.setdefault(key, entry.typ)
        if other is not entry.typ:
            raise ConfigurationError(
                "Discriminator {!r} of {} collides with {} as variants of {!r}".format(
                    entry.type_id, entry.typ.__qualname__, other.__qualname__, base
                )
            )
        if entry in unique:
            continue
        unique.append(entry)
    return CompiledResolution(base=base, entries=unique)
