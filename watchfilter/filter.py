"""Tagged filters: what they match on, how, and against which pattern."""

from __future__ import annotations

import enum
import logging
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

from watchfilter.errors import FilterIoError, GlobError
from watchfilter.events import (
    FileEventKindTag,
    PathTag,
    ProcessCompletionTag,
    ProcessTag,
    SignalTag,
    SourceTag,
)
from watchfilter.gitignore import glob_match

log = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class Matcher(enum.Enum):
    """What a filter matches on."""

    TAG = "tag"
    PATH = "path"
    FILE_TYPE = "type"
    FILE_EVENT_KIND = "kind"
    SOURCE = "source"
    PROCESS = "process"
    SIGNAL = "signal"
    PROCESS_COMPLETION = "complete"
    PRIORITY = "priority"


class Op(enum.Enum):
    """How a filter's pattern is applied to a tag's value."""

    AUTO = "="
    EQUAL = "=="
    NOT_EQUAL = "!="
    REGEX = "~="
    NOT_REGEX = "~!"
    GLOB = "*="
    NOT_GLOB = "*!"
    IN_SET = ":="
    NOT_IN_SET = ":!"


@dataclass(frozen=True)
class ExactPattern:
    """An exact string."""

    value: str


@dataclass(frozen=True, eq=False)
class RegexPattern:
    """A compiled regular expression; equal when the expression text is equal."""

    regex: re.Pattern

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegexPattern):
            return NotImplemented
        return self.regex.pattern == other.regex.pattern

    def __hash__(self) -> int:
        return hash(self.regex.pattern)


@dataclass(frozen=True)
class GlobPattern:
    """A glob, kept as text since path globs are compiled together."""

    glob: str


@dataclass(frozen=True)
class SetPattern:
    """A set of exact strings."""

    values: frozenset


Pattern = Union[ExactPattern, RegexPattern, GlobPattern, SetPattern]


@dataclass(frozen=True)
class Filter:
    """A tagged filter.

    ``negate`` makes a positive match override earlier negative matches on the same
    matcher, while a negative match of this filter is ignored.
    """

    in_path: Optional[PathLike]
    on: Matcher
    op: Op
    pat: Pattern
    negate: bool = False

    def matches(self, subject: str) -> bool:
        """Match the filter's op and pattern against a subject string."""
        op, pat = self.op, self.pat
        if isinstance(pat, ExactPattern) and op in (Op.EQUAL, Op.NOT_EQUAL):
            equal = subject.casefold() == pat.value.casefold()
            return equal if op is Op.EQUAL else not equal
        if isinstance(pat, RegexPattern) and op in (Op.REGEX, Op.NOT_REGEX):
            found = pat.regex.search(subject) is not None
            return found if op is Op.REGEX else not found
        if op in (Op.IN_SET, Op.NOT_IN_SET):
            if isinstance(pat, SetPattern):
                inside = subject in pat.values
            elif isinstance(pat, ExactPattern):
                inside = subject == pat.value
            else:
                return self._mismatch()
            return inside if op is Op.IN_SET else not inside
        if isinstance(pat, GlobPattern) and op in (Op.GLOB, Op.NOT_GLOB):
            try:
                found = glob_match(pat.glob, subject)
            except GlobError as err:
                log.warning("failed to compile glob for non-path match, skipping (pass): %s", err)
                return True
            return found if op is Op.GLOB else not found
        return self._mismatch()

    def _mismatch(self) -> bool:
        log.warning("trying to match pattern %r with op %r, that cannot work", self.pat, self.op)
        return False

    @classmethod
    def from_glob_ignore(cls, in_path: Optional[PathLike], glob: str) -> "Filter":
        """Build a path NotGlob filter from a gitignore-style line; a leading ``!`` negates."""
        negate = glob.startswith("!")
        if negate:
            glob = glob[1:]
        return cls(in_path=in_path, on=Matcher.PATH, op=Op.NOT_GLOB, pat=GlobPattern(glob), negate=negate)

    def canonicalised(self) -> "Filter":
        """Return the filter with its ``in_path`` made absolute and resolved."""
        if self.in_path is None:
            return self
        try:
            resolved = Path(self.in_path).resolve(strict=True)
        except OSError as err:
            raise FilterIoError("canonicalise Filter in_path", err) from err
        return replace(self, in_path=resolved)


_TAG_MATCHERS = {
    FileEventKindTag: (Matcher.FILE_EVENT_KIND,),
    SourceTag: (Matcher.SOURCE,),
    ProcessTag: (Matcher.PROCESS,),
    SignalTag: (Matcher.SIGNAL,),
    ProcessCompletionTag: (Matcher.PROCESS_COMPLETION,),
}


def matchers_for_tag(tag: object) -> tuple[Matcher, ...]:
    """Return the matchers that apply to a tag."""
    if isinstance(tag, PathTag):
        if tag.file_type is None:
            return (Matcher.PATH,)
        return (Matcher.PATH, Matcher.FILE_TYPE)
    found = _TAG_MATCHERS.get(type(tag))
    if found is None:
        log.warning("unhandled tag: %r", tag)
        return ()
    return found