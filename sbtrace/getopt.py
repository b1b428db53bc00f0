"""Minimal command-line option scanner accepting '-x' and '/x' forms."""

from __future__ import annotations

import enum
import string
from typing import Iterator, NamedTuple, Sequence


class ArgKind(enum.Enum):
    OPTION = enum.auto()
    STANDALONE = enum.auto()
    INVALID = enum.auto()


class ParsedArg(NamedTuple):
    kind: ArgKind
    option: str | None
    value: str | None
    index: int


def _is_option_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in string.punctuation)


def _is_option_like(arg: str) -> bool:
    return arg[:1] in ("-", "/")


def iter_options(argv: Sequence[str], valid_opts: str) -> Iterator[ParsedArg]:
    """Scan ``argv[1:]``, yielding one entry per option or argument.

    A character followed by ':' in ``valid_opts`` takes a parameter, either
    attached (``-ofile``) or as the next argument unless that looks like an
    option. Unknown options and bare prefixes are reported as INVALID with
    the whole argument as value.
    """
    index = 1
    while index < len(argv):
        arg = argv[index]
        start = index
        if _is_option_like(arg):
            ch = arg[1:2]
            if ch and _is_option_char(ch) and ch in valid_opts:
                value = None
                pos = valid_opts.index(ch)
                if valid_opts[pos + 1:pos + 2] == ":":
                    attached = arg[2:]
                    if attached:
                        value = attached
                    elif index + 1 < len(argv) and not _is_option_like(argv[index + 1]):
                        index += 1
                        value = argv[index]
                yield ParsedArg(ArgKind.OPTION, ch, value, start)
            else:
                yield ParsedArg(ArgKind.INVALID, None, arg, start)
        else:
            yield ParsedArg(ArgKind.STANDALONE, None, arg, start)
        index += 1


def getopt(argv: Sequence[str], optstring: str) -> tuple[list[tuple[str, str | None]], list[str]]:
    """Collect options up to the first standalone argument.

    Returns the options as ``(char, parameter)`` pairs and the arguments
    that remain. An unknown option is returned as the character after its
    prefix, paired with the whole argument.
    """
    options: list[tuple[str, str | None]] = []
    for parsed in iter_options(argv, optstring):
        if parsed.kind is ArgKind.STANDALONE:
            return options, list(argv[parsed.index:])
        if parsed.kind is ArgKind.INVALID:
            options.append((parsed.value[1:2], parsed.value))
        else:
            options.append((parsed.option, parsed.value))
    return options, []