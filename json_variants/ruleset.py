from .cache import SimpleCache
from .errors import ConfigurationError

import logging

logger = logging.getLogger(__name__)
TRACE = 5


def trace(fmt, *args, _logger=logger, _TRACE=TRACE):
    "Trace a log message. Avoids issues with applications setting `style`."
    if _logger.isEnabledFor(_TRACE):
        _logger.log(_TRACE, fmt.format(*args))


def set_trace(enabled=True):
    logger.level = TRACE if enabled else logging.WARNING


class RuleSet:
    """
    An ordered chain of rules. The first rule to return an action for a verb and type wins,
    and the action is memoized.

    A combined configuration puts the compiled resolution of its base type first, so the
    base type always gets discriminator handling, then the rules of each type group in
    registration order, then the primitive rules.
    """

    def __init__(self, *rules, cache=None):
        self.rules = rules
        self.cache = cache or SimpleCache()

    def lookup(self, verb, typ, accept_missing=False):
        trace("lookup({!s}, {!r}): start", verb, typ)
        if typ is None:
            if not accept_missing:
                raise ConfigurationError("Attempted to find {} for 'None'".format(verb))
            return None

        action = self.cache.get(verb=verb, typ=typ)
        if action is not None:
            trace("lookup({!s}, {!r}): cached", verb, typ)
            return action

        forward = self.cache.in_flight(verb=verb, typ=typ)

        try:
            for rule in self.rules:
                action = rule(verb=verb, typ=typ, ctx=self)
                if action is not None:
                    self.cache.complete(verb=verb, typ=typ, action=action)
                    trace("lookup({!s}, {!r}): computed", verb, typ)
                    return action
        finally:
            self.cache.de_flight(verb=verb, typ=typ, forward=forward)

        trace("lookup({!s}, {!r}): no rule", verb, typ)
        if not accept_missing:
            raise ConfigurationError("Failed: lookup({!s}, {!r})".format(verb, typ))

    def __repr__(self):
        return "<RuleSet of {} rules>".format(len(self.rules))
