from .errors import DecodeError, EncodeError, VariantError
from .helpers import JSON2PY, PY2JSON
from .options import dumps_kwargs
from .ruleset import RuleSet
from .std import std_rules
from .variants import compile_resolution, resolve_variants

import attr
import logging

logger = logging.getLogger(__name__)


@attr.s(frozen=True, repr=False)
class Config:
    """
    A compiled, combined configuration for one base type and one base options object.

    Every action reachable from the base type is built when the configuration is, so a
    Config is read-only afterwards and safe to share between threads.
    """

    base = attr.ib()
    options = attr.ib()
    resolution = attr.ib()
    ruleset = attr.ib()
    encoder = attr.ib()
    decoder = attr.ib()

    @property
    def dumps_kwargs(self):
        if self.options is None:
            return dumps_kwargs()
        return self.options.dumps_kwargs()

    def encode(self, value):
        "Convert a Python value to JSON-compatible values. None is written as null."
        if value is None:
            return None
        try:
            return self.encoder(value)
        except VariantError:
            raise
        except (ValueError, TypeError, KeyError, AttributeError, ArithmeticError) as exc:
            raise EncodeError(*exc.args) from exc

    def decode(self, data):
        "Convert JSON-compatible values to a Python value. null reads as None."
        if data is None:
            return None
        try:
            return self.decoder(data)
        except VariantError:
            raise
        except (ValueError, TypeError, KeyError, ArithmeticError) as exc:
            raise DecodeError(*exc.args) from exc

    def __repr__(self):
        return "<Config for {!r}; {} variants>".format(
            self.base, len(self.resolution.entries)
        )


def combine(base, groups, options=None):
    """
    Build the configuration for ``base``.

    The compiled resolution of ``base`` is tried first, then the rule of every group in
    registration order, then the primitive rules. Without options, each group's shared
    default rule is used; with options, each group builds a rule for them.

    A base without variants still gets its resolution, so encoding any value as it raises
    UnsupportedTypeError and decoding raises DecodeError.
    """
    resolution = compile_resolution(base, resolve_variants(base, groups))
    rules = [resolution.rule]
    if options is None:
        rules.extend(group.default_rule() for group in groups)
        rules.extend(std_rules())
    else:
        rules.extend(group.create_rule(options) for group in groups)
        rules.extend(options.rules)
    ruleset = RuleSet(*rules)
    config = Config(
        base=base,
        options=options,
        resolution=resolution,
        ruleset=ruleset,
        encoder=ruleset.lookup(verb=PY2JSON, typ=base),
        decoder=ruleset.lookup(verb=JSON2PY, typ=base),
    )
    logger.debug("compiled %r", config)
    return config
