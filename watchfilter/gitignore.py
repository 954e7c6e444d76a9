"""Gitignore-style glob compilation and matching."""

from __future__ import annotations

import enum
import functools
import os
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Union

from watchfilter.errors import GlobError

PathLike = Union[str, os.PathLike]


def _translate(pattern: str, literal_separator: bool) -> str:
    star = "[^/]*" if literal_separator else ".*"
    one = "[^/]" if literal_separator else "."
    out: list[str] = []
    i, n = 0, len(pattern)
    in_alt = False
    while i < n:
        c = pattern[i]
        if c == "\\":
            if i + 1 >= n:
                raise GlobError(f"dangling escape in {pattern!r}")
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif c == "/" and pattern.startswith("/**", i) and (i + 3 == n or pattern[i + 3] == "/"):
            if i + 3 == n:
                out.append("/.*")
                i = n
            else:
                out.append("(?:/|/.*/)")
                i += 4
        elif c == "*":
            if pattern.startswith("**", i) and i == 0 and n == 2:
                out.append(".*")
                i = 2
            elif i == 0 and pattern.startswith("**/"):
                out.append("(?:/?|.*/)")
                i = 3
            elif pattern.startswith("**", i):
                out.append(star)
                i += 2
            else:
                out.append(star)
                i += 1
        elif c == "?":
            out.append(one)
            i += 1
        elif c == "[":
            i = _translate_class(pattern, i, literal_separator, out)
        elif c == "{":
            if in_alt:
                raise GlobError(f"nested alternates in {pattern!r}")
            in_alt = True
            out.append("(?:")
            i += 1
        elif c == "}" and in_alt:
            in_alt = False
            out.append(")")
            i += 1
        elif c == "," and in_alt:
            out.append("|")
            i += 1
        else:
            out.append(re.escape(c))
            i += 1
    if in_alt:
        raise GlobError(f"unclosed alternate in {pattern!r}")
    return "(?s)" + "".join(out)


def _translate_class(pattern: str, start: int, literal_separator: bool, out: list[str]) -> int:
    n = len(pattern)
    j = start + 1
    negated = j < n and pattern[j] in "!^"
    if negated:
        j += 1
    items: list[str] = []
    first = True
    while True:
        if j >= n:
            raise GlobError(f"unclosed character class in {pattern!r}")
        ch = pattern[j]
        if ch == "]" and not first:
            break
        first = False
        if j + 2 < n and pattern[j + 1] == "-" and pattern[j + 2] != "]":
            lo, hi = ch, pattern[j + 2]
            if lo > hi:
                raise GlobError(f"invalid range {lo}-{hi} in {pattern!r}")
            items.append(f"{re.escape(lo)}-{re.escape(hi)}")
            j += 3
        else:
            items.append(re.escape(ch))
            j += 1
    body = "".join(items)
    if negated:
        out.append(f"[^{body}{'/' if literal_separator else ''}]")
    else:
        out.append(f"[{body}]")
    return j + 1


@functools.lru_cache(maxsize=512)
def _compile(pattern: str, literal_separator: bool) -> re.Pattern:
    return re.compile(_translate(pattern, literal_separator))


def glob_match(pattern: str, subject: str) -> bool:
    """Match a plain glob (where ``*`` may cross ``/``) against a string."""
    return _compile(pattern, False).fullmatch(subject) is not None


@dataclass(frozen=True)
class _Glob:
    from_path: Optional[PurePath]
    original: str
    actual: str
    is_whitelist: bool
    is_only_dir: bool
    regex: re.Pattern


class MatchKind(enum.Enum):
    NONE = "none"
    IGNORE = "ignore"
    WHITELIST = "whitelist"


@dataclass(frozen=True)
class Match:
    """The outcome of matching a path: nothing, an ignore, or a whitelist."""

    kind: MatchKind
    glob: Optional[_Glob] = None

    @property
    def is_none(self) -> bool:
        return self.kind is MatchKind.NONE

    @property
    def is_ignore(self) -> bool:
        return self.kind is MatchKind.IGNORE

    @property
    def is_whitelist(self) -> bool:
        return self.kind is MatchKind.WHITELIST

    @property
    def from_path(self) -> Optional[PurePath]:
        return self.glob.from_path if self.glob else None


_NO_MATCH = Match(MatchKind.NONE)


def _under(path: PathLike, prefix: PathLike) -> bool:
    return PurePath(os.fspath(path)).is_relative_to(PurePath(os.fspath(prefix)))


class Gitignore:
    """A compiled set of gitignore globs rooted at a directory."""

    def __init__(self, root: PathLike, globs: tuple[_Glob, ...]) -> None:
        self.root = PurePath(os.fspath(root))
        self.globs = globs

    def __repr__(self) -> str:
        return f"Gitignore(root={self.root!r}, globs={len(self.globs)})"

    def num_ignores(self) -> int:
        return sum(1 for g in self.globs if not g.is_whitelist)

    def num_whitelists(self) -> int:
        return sum(1 for g in self.globs if g.is_whitelist)

    def _strip(self, path: PathLike) -> str:
        p = PurePath(os.fspath(path))
        if self.root != PurePath(".") and p.is_relative_to(self.root):
            rel = p.relative_to(self.root).as_posix()
            return "" if rel == "." else rel
        return p.as_posix()

    def _matched_stripped(self, path: str, is_dir: bool) -> Match:
        for glob in reversed(self.globs):
            if glob.regex.fullmatch(path) is None:
                continue
            if glob.is_only_dir and not is_dir:
                continue
            kind = MatchKind.WHITELIST if glob.is_whitelist else MatchKind.IGNORE
            return Match(kind, glob)
        return _NO_MATCH

    def matched(self, path: PathLike, is_dir: bool) -> Match:
        """Match the path alone; the last matching glob wins."""
        if not self.globs:
            return _NO_MATCH
        return self._matched_stripped(self._strip(path), is_dir)

    def matched_path_or_any_parents(self, path: PathLike, is_dir: bool) -> Match:
        """Match the path, then each of its parents up to the root."""
        if not self.globs:
            return _NO_MATCH
        stripped = self._strip(path)
        if stripped.startswith("/"):
            raise ValueError("path is expected to be under the root")
        found = self._matched_stripped(stripped, is_dir)
        if not found.is_none:
            return found
        while stripped:
            stripped = stripped.rpartition("/")[0]
            found = self._matched_stripped(stripped, True)
            if not found.is_none:
                return found
        return _NO_MATCH


class GitignoreBuilder:
    """Collects gitignore lines and compiles them into a :class:`Gitignore`."""

    def __init__(self, root: PathLike) -> None:
        self.root = PurePath(os.fspath(root))
        self._globs: list[_Glob] = []

    def add_line(self, from_path: Optional[PathLike], line: str) -> "GitignoreBuilder":
        """Add one gitignore line; comments and blank lines are skipped."""
        if line.startswith("#"):
            return self
        if not line.endswith("\\ "):
            line = line.rstrip()
        if not line:
            return self
        original = line
        is_whitelist = False
        is_absolute = False
        if line.startswith("\\!") or line.startswith("\\#"):
            line = line[1:]
            is_absolute = line.startswith("/")
        else:
            if line.startswith("!"):
                is_whitelist = True
                line = line[1:]
            if line.startswith("/"):
                line = line[1:]
                is_absolute = True
        is_only_dir = False
        if line.endswith("/"):
            is_only_dir = True
            line = line[:-1]
        actual = line
        if not is_absolute and "/" not in line:
            if not (actual.startswith("**/") or actual == "**"):
                actual = "**/" + actual
        if actual.endswith("/**"):
            actual += "/*"
        regex = _compile(actual, True)
        self._globs.append(
            _Glob(
                from_path=None if from_path is None else PurePath(os.fspath(from_path)),
                original=original,
                actual=actual,
                is_whitelist=is_whitelist,
                is_only_dir=is_only_dir,
                regex=regex,
            )
        )
        return self

    def build(self) -> Gitignore:
        return Gitignore(self.root, tuple(self._globs))