from .std import std_rules

import attr


def camel_case(name):
    "Naming policy: ``line_width`` becomes ``lineWidth``."
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def pascal_case(name):
    "Naming policy: ``line_width`` becomes ``LineWidth``."
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


@attr.s(frozen=True, eq=False)
class Options:
    """
    A base configuration supplied by the caller.

    Options compare and hash by identity, so compiled configurations are cached per options
    object, not per distinct set of settings. Compiling a configuration never changes them.

    Fields:
      indent: passed to ``json.dumps``; None writes compact text
      ensure_ascii: passed to ``json.dumps``
      naming: a ``str -> str`` policy for member names without ``json_name`` metadata
      omit_none: skip members whose value is None
      rules: the primitive rules, see ``std_rules``
    """

    indent = attr.ib(default=None)
    ensure_ascii = attr.ib(default=False, type=bool)
    naming = attr.ib(default=None)
    omit_none = attr.ib(default=False, type=bool)
    rules = attr.ib(factory=std_rules, converter=tuple)

    def dumps_kwargs(self):
        return dumps_kwargs(indent=self.indent, ensure_ascii=self.ensure_ascii)


def dumps_kwargs(indent=None, ensure_ascii=False):
    return {
        "indent": indent,
        "ensure_ascii": ensure_ascii,
        "separators": (",", ":") if indent is None else (",", ": "),
        "allow_nan": False,
    }
