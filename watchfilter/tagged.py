"""A filterer that matches on any event tag, with several matching operators."""

from __future__ import annotations

import copy
import logging
import os
import threading
from pathlib import Path, PurePath
from typing import Iterable, Iterator, Optional, Union

from watchfilter.errors import FilterIoError
from watchfilter.events import (
    CustomSignal,
    Event,
    FileEventKindTag,
    FileType,
    PathTag,
    Priority,
    ProcessCompletionTag,
    ProcessEndKind,
    ProcessTag,
    Signal,
    SignalTag,
    SourceTag,
)
from watchfilter.filter import Filter, GlobPattern, Matcher, Op, matchers_for_tag
from watchfilter.gitignore import Gitignore, GitignoreBuilder, Match
from watchfilter.ignore_filterer import IgnoreFile, IgnoreFilterer

log = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

_GLOB_OPS = (Op.GLOB, Op.NOT_GLOB)
_SIGNALS_BY_NUMBER = {sig.value: sig for sig in Signal}


def _canonicalise(path: PathLike, about: str) -> Path:
    try:
        return Path(path).resolve(strict=True)
    except OSError as err:
        raise FilterIoError(about, err) from err


def _relative(path: PurePath, base: PurePath) -> str:
    rel = str(path.relative_to(base))
    return "" if rel == "." else rel


def _strip_root(path: PurePath) -> str:
    if path.is_relative_to("/"):
        return _relative(path, PurePath("/"))
    return str(path)


def _signal_names(sig: Union[Signal, CustomSignal]) -> tuple[str, int]:
    if isinstance(sig, CustomSignal):
        known = _SIGNALS_BY_NUMBER.get(sig.number)
        if known is None:
            return "UNK", sig.number
        sig = known
    if isinstance(sig, Signal):
        return sig.short_name, sig.value
    return "UNK", 0


def _fold(start: bool, outcomes: Iterable[tuple[Filter, bool]]) -> bool:
    """Combine filter outcomes: plain filters AND together, a matching negated one passes."""
    verdict = start
    for flt, applies in outcomes:
        if flt.negate:
            if applies:
                return True
        else:
            verdict = verdict and applies
    return verdict


def _is_path_glob(tag: object, matcher: Matcher, flt: Filter) -> bool:
    return (
        isinstance(tag, PathTag)
        and matcher is Matcher.PATH
        and flt.on is Matcher.PATH
        and flt.op in _GLOB_OPS
        and isinstance(flt.pat, GlobPattern)
    )


class TaggedFilterer:
    """Checks events against tagged filters, grouped by matcher and applied in add order.

    ``origin`` resolves filter paths given without an ``in_path`` and anchors ignore
    files; ``workdir`` is tried first when resolving relative filter paths.
    """

    def __init__(self, origin: PathLike, workdir: PathLike) -> None:
        self.origin = _canonicalise(origin, "canonicalise origin on new tagged filterer")
        self.workdir = _canonicalise(workdir, "canonicalise workdir on new tagged filterer")
        self._lock = threading.RLock()
        self._filters: dict[Matcher, tuple[Filter, ...]] = {}
        self._ignore_filterer = IgnoreFilterer(self.origin)
        self._glob_compiled: Optional[Gitignore] = None
        self._not_glob_compiled: Optional[Gitignore] = None

    def __repr__(self) -> str:
        count = sum(len(fs) for fs in self._filters.values())
        return f"TaggedFilterer(origin={self.origin!r}, workdir={self.workdir!r}, filters={count})"

    def check_event(self, event: Event, priority: Priority) -> bool:
        """Return True if the event passes every filter group that applies to it."""
        filters = self._filters

        priority_filters = filters.get(Matcher.PRIORITY)
        if priority_filters is not None and not _fold(
            True, self._priority_outcomes(priority_filters, priority)
        ):
            log.debug("priority fails check, failing entire event")
            return False

        if not self._ignore_filterer.check_event(event, priority):
            log.debug("internal ignore filterer matched (fail)")
            return False

        if not filters:
            return True

        for tag in event.tags:
            for matcher in matchers_for_tag(tag):
                tag_filters = filters.get(matcher)
                if not tag_filters:
                    continue
                if not self._tag_passes(tag, matcher, tag_filters):
                    log.debug("matcher %s fails check on %r, failing entire event", matcher, tag)
                    return False
        return True

    @staticmethod
    def _priority_outcomes(
        filters: Iterable[Filter], priority: Priority
    ) -> Iterator[tuple[Filter, bool]]:
        for flt in filters:
            if priority is Priority.URGENT:
                raise ValueError("urgent events bypass filtering")
            yield flt, flt.matches(priority.value)

    def _tag_passes(self, tag: object, matcher: Matcher, tag_filters: tuple[Filter, ...]) -> bool:
        tag_match = True
        if matcher is Matcher.PATH and isinstance(tag, PathTag):
            tag_match = self._compiled_globs_pass(tag)

        remaining = [f for f in tag_filters if not _is_path_glob(tag, matcher, f)]
        if not remaining and tag_match:
            return True
        return _fold(tag_match, self._tag_outcomes(remaining, tag))

    def _tag_outcomes(self, filters: Iterable[Filter], tag: object) -> Iterator[tuple[Filter, bool]]:
        for flt in filters:
            applies = self._match_tag(flt, tag)
            if applies is not None:
                yield flt, applies

    def _lookup(self, compiled: Gitignore, path: PurePath, is_dir: bool) -> Match:
        if path.is_relative_to(self.origin):
            return compiled.matched_path_or_any_parents(path, is_dir)
        return compiled.matched(path, is_dir)

    def _compiled_globs_pass(self, tag: PathTag) -> bool:
        path = PurePath(os.fspath(tag.path))
        is_dir = tag.file_type is FileType.DIR
        tag_match = True

        def in_scope(found: Match) -> bool:
            scope = found.from_path
            return scope is None or path.is_relative_to(scope)

        globs = self._glob_compiled
        if globs is not None:
            found = self._lookup(globs, path, is_dir)
            if found.is_none:
                tag_match = False

        not_globs = self._not_glob_compiled
        if not_globs is not None:
            found = self._lookup(not_globs, path, is_dir)
            if found.is_ignore and in_scope(found):
                tag_match = False
            elif found.is_whitelist:
                tag_match = True

        return tag_match

    def _match_tag(self, flt: Filter, tag: object) -> Optional[bool]:
        """Apply a filter to a tag; None when the filter does not apply to it."""
        on = flt.on
        if on is Matcher.TAG:
            return flt.matches(tag.name)

        if isinstance(tag, PathTag):
            if on is Matcher.PATH:
                return self._match_path(flt, PurePath(os.fspath(tag.path)))
            if on is Matcher.FILE_TYPE and tag.file_type is not None:
                return flt.matches(str(tag.file_type))
            return None

        if isinstance(tag, FileEventKindTag) and on is Matcher.FILE_EVENT_KIND:
            return flt.matches(tag.kind)
        if isinstance(tag, SourceTag) and on is Matcher.SOURCE:
            return flt.matches(str(tag.source))
        if isinstance(tag, ProcessTag) and on is Matcher.PROCESS:
            return flt.matches(str(tag.pid))
        if isinstance(tag, SignalTag) and on is Matcher.SIGNAL:
            text, number = _signal_names(tag.signal)
            return flt.matches(text) or flt.matches(f"SIG{text}") or flt.matches(str(number))
        if isinstance(tag, ProcessCompletionTag) and on is Matcher.PROCESS_COMPLETION:
            return self._match_completion(flt, tag)
        return None

    def _match_path(self, flt: Filter, path: PurePath) -> Optional[bool]:
        if flt.in_path is not None:
            ctx = PurePath(os.fspath(flt.in_path))
            if not path.is_relative_to(ctx):
                return None
            resolved = _relative(path, ctx)
        elif path.is_relative_to(self.workdir):
            resolved = _relative(path, self.workdir)
        elif path.is_relative_to(self.origin):
            resolved = _relative(path, self.origin)
        else:
            resolved = _strip_root(path)

        if flt.op in _GLOB_OPS:
            return None
        return flt.matches(resolved)

    @staticmethod
    def _match_completion(flt: Filter, tag: ProcessCompletionTag) -> bool:
        end = tag.end
        if end is None:
            return flt.matches("_")
        kind = end.kind
        if kind is ProcessEndKind.SUCCESS:
            return flt.matches("success")
        if kind is ProcessEndKind.CONTINUED:
            return flt.matches("continued")
        if kind is ProcessEndKind.EXIT_ERROR:
            return flt.matches(f"error({end.value})")
        if kind is ProcessEndKind.EXIT_STOP:
            return flt.matches(f"stop({end.value})")
        if kind is ProcessEndKind.EXCEPTION:
            return flt.matches(f"exception({end.value & 0xFFFFFFFF:X})")
        text, number = _signal_names(end.value)
        return (
            flt.matches(f"signal({text})")
            or flt.matches(f"signal(SIG{text})")
            or flt.matches(f"signal({number})")
        )

    def add_filters(self, filters: Iterable[Filter]) -> None:
        """Add filters, recompiling the path glob matchers when glob filters are added."""
        filters = list(filters)
        log.debug("adding filters to filterer: %r", filters)
        ops = {f.op for f in filters}
        canonical = [f.canonicalised() for f in filters]

        with self._lock:
            updated = {matcher: list(fs) for matcher, fs in self._filters.items()}
            for flt in canonical:
                updated.setdefault(flt.on, []).append(flt)
            self._filters = {matcher: tuple(fs) for matcher, fs in updated.items()}

            if Op.GLOB in ops:
                self._glob_compiled = self._compile_globs(Op.GLOB)
            if Op.NOT_GLOB in ops:
                self._not_glob_compiled = self._compile_globs(Op.NOT_GLOB)

    def _compile_globs(self, op: Op) -> Optional[Gitignore]:
        path_filters = self._filters.get(Matcher.PATH)
        if path_filters is None:
            return None
        builder = GitignoreBuilder(self.origin)
        for flt in path_filters:
            if flt.op is op and isinstance(flt.pat, GlobPattern):
                line = f"!{flt.pat.glob}" if flt.negate else flt.pat.glob
                builder.add_line(flt.in_path, line)
        return builder.build()

    def add_ignore_file(self, file: IgnoreFile) -> None:
        """Read a gitignore-style file and add it to the internal ignore filterer."""
        with self._lock:
            fresh = copy.copy(self._ignore_filterer)
            fresh.add_file(file)
            self._ignore_filterer = fresh

    def clear_filters(self) -> None:
        """Remove every filter and reset the compiled glob matchers."""
        log.debug("removing all filters from filterer")
        with self._lock:
            self._filters = {}
            self._glob_compiled = self._compile_globs(Op.GLOB)
            self._not_glob_compiled = self._compile_globs(Op.NOT_GLOB)