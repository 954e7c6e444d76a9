"""Parsing of the textual filter syntax ``[!]{matcher}{op}{pattern}``."""

from __future__ import annotations

import logging
import re

from watchfilter.errors import ParseError
from watchfilter.filter import (
    ExactPattern,
    Filter,
    GlobPattern,
    Matcher,
    Op,
    Pattern,
    RegexPattern,
    SetPattern,
)

log = logging.getLogger(__name__)

_MATCHER_NAMES = (
    ("tag", Matcher.TAG),
    ("path", Matcher.PATH),
    ("type", Matcher.FILE_TYPE),
    ("kind", Matcher.FILE_EVENT_KIND),
    ("fek", Matcher.FILE_EVENT_KIND),
    ("source", Matcher.SOURCE),
    ("src", Matcher.SOURCE),
    ("priority", Matcher.PRIORITY),
    ("process", Matcher.PROCESS),
    ("pid", Matcher.PROCESS),
    ("signal", Matcher.SIGNAL),
    ("sig", Matcher.SIGNAL),
    ("complete", Matcher.PROCESS_COMPLETION),
    ("exit", Matcher.PROCESS_COMPLETION),
)

_OP_SYMBOLS = ("==", "!=", "~=", "~!", "*=", "*!", ":=", ":!", "=")

_AUTO_GLOB = frozenset({Matcher.PATH, Matcher.FILE_EVENT_KIND, Matcher.PROCESS_COMPLETION})


def _take_matcher(src: str, rest: str) -> tuple[Matcher, str]:
    lowered = rest.lower()
    for name, matcher in _MATCHER_NAMES:
        if lowered.startswith(name):
            return matcher, rest[len(name):]
    raise ParseError(src, "unknown matcher")


def _take_op(src: str, rest: str) -> tuple[Op, str]:
    for symbol in _OP_SYMBOLS:
        if rest.startswith(symbol):
            return Op(symbol), rest[len(symbol):]
    raise ParseError(src, "unknown operator")


def _take_pattern(src: str, rest: str) -> str:
    for quote in ('"', "'"):
        if rest.startswith(quote):
            end = rest.find(quote, 1)
            if end > 1:
                return rest[1:end]
    if not rest:
        raise ParseError(src, "empty pattern")
    return rest


def _build_pattern(src: str, op: Op, matcher: Matcher, text: str) -> Pattern:
    if (op is Op.AUTO and matcher in _AUTO_GLOB) or op in (Op.GLOB, Op.NOT_GLOB):
        return GlobPattern(text)
    if op in (Op.AUTO, Op.IN_SET, Op.NOT_IN_SET):
        return SetPattern(frozenset(part.strip() for part in text.split(",")))
    if op in (Op.REGEX, Op.NOT_REGEX):
        try:
            return RegexPattern(re.compile(text))
        except re.error as err:
            raise ParseError(src, f"invalid regex: {err}") from err
    return ExactPattern(text)


def parse_filter(text: str) -> Filter:
    """Parse one filter expression, raising :class:`ParseError` when it is malformed."""
    rest = text
    negate = rest.startswith("!")
    if negate:
        rest = rest[1:]
    matcher, rest = _take_matcher(text, rest)
    op, rest = _take_op(text, rest)
    pattern_text = _take_pattern(text, rest)

    if op is Op.AUTO:
        resolved = Op.GLOB if matcher in _AUTO_GLOB else Op.IN_SET
    else:
        resolved = op

    parsed = Filter(
        in_path=None,
        on=matcher,
        op=resolved,
        pat=_build_pattern(text, op, matcher, pattern_text),
        negate=negate,
    )
    log.debug("parsed tagged filter %r into %r", text, parsed)
    return parsed