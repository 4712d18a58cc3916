class VariantError(Exception):
    "Base class of every error raised while configuring or running a polymorphic codec."


class ConfigurationError(VariantError, TypeError):
    """
    The declarations can't be compiled: a discriminator that isn't a string or a 32-bit
    integer, a type group descriptor that doesn't list its types, a member type no rule
    handles, or two variants advertising the same discriminator.
    """


class UnsupportedTypeError(VariantError, TypeError):
    """
    A value's runtime type is not a declared variant of the base type it was encoded as.
    """


class EncodeError(VariantError, ValueError):
    """
    A member of a declared variant holds a value JSON can't represent, such as NaN, or one
    that doesn't match its declared type.
    """


class DecodeError(VariantError, ValueError):
    """
    JSON input can't be decoded: malformed text, a missing or unknown discriminator, a
    missing required member, or a member with the wrong shape.
    """


class _Context:
    """
    Stash contextual information in an exception. As we don't know exactly when an exception
    is displayed to a user, this class tries to keep it always up to date.
    """

    __slots__ = ("original", "context", "lead")

    def __init__(self, original, lead, context):
        self.original = original
        self.lead = lead
        self.context = [context]

    def __str__(self):
        return "{}{}{}".format(
            self.original, self.lead, "".join(map(str, reversed(self.context)))
        )

    def __repr__(self):
        return repr(self.__str__())

    @classmethod
    def add(cls, exc, context):
        args = exc.args
        if args and isinstance(args[0], cls):
            args[0].context.append(context)
            return
        args = list(exc.args)
        if args:
            args[0] = cls(args[0], "; at ", context)
        else:
            args.append(cls("", "At ", context))
        exc.args = tuple(args)


class ErrorContext:
    """
    Inject contextual information into an exception message.

    >>> with ErrorContext('<Circle>'):
    ...   with ErrorContext("['Radius']"):
    ...     float('wide')
    Traceback (most recent call last):
    ValueError: could not convert string to float: 'wide'; at <Circle>['Radius']

    The innermost context is attached first; as the exception walks up the stack outer
    contexts are inserted in front of it. Whitespace is never injected, so names should be
    bracketed, e.g. `<Class>` or `['member']`.
    """

    def __init__(self, *context):
        self.context = context

    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_value is not None:
            _Context.add(exc_value, "".join(self.context))


def err_ctx(context, func):
    """
    Execute a callable, decorating exceptions raised with error context.

    ``err_ctx(context, func)`` has the same effect as:

        with ErrorContext(context):
            return func()
    """
    try:
        return func()
    except Exception as exc:
        _Context.add(exc, context)
        raise
