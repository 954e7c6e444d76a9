"""A path-only filterer built from filter globs, ignore globs and file extensions."""

from __future__ import annotations

import logging
import os
from pathlib import PurePath
from typing import Iterable, Optional, Union

from watchfilter.errors import GlobError
from watchfilter.events import Event, FileType, Priority
from watchfilter.gitignore import Gitignore, GitignoreBuilder
from watchfilter.ignore_filterer import IgnoreFile, IgnoreFilterer

log = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
GlobLine = tuple[str, Optional[PathLike]]


def _extension(path: PurePath) -> Optional[str]:
    """Return the text after the last dot of the file name, or None if it has none."""
    name = path.name
    if not name or name == "..":
        return None
    before, dot, after = name.rpartition(".")
    if not dot or not before:
        return None
    return after


def _build(origin: PurePath, lines: Iterable[GlobLine]) -> Gitignore:
    builder = GitignoreBuilder(origin)
    for line, in_path in lines:
        try:
            builder.add_line(in_path, line)
        except GlobError as err:
            raise GlobError(err.message, file=in_path) from err
    return builder.build()


class GlobsetFilterer:
    """A simple path filterer in the style of the older watchexec filter.

    Only paths matching ``filters`` pass (if any are given), paths matching ``ignores``
    never pass, and ``extensions`` admits files by extension. Filter and ignore entries
    are ``(glob, in_path)`` pairs, where a None ``in_path`` makes the glob global.
    Events without paths always pass.
    """

    def __init__(
        self,
        origin: PathLike,
        filters: Iterable[GlobLine] = (),
        ignores: Iterable[GlobLine] = (),
        ignore_files: Iterable[IgnoreFile] = (),
        extensions: Iterable[str] = (),
    ) -> None:
        self.origin = PurePath(os.fspath(origin))
        self.filters = _build(self.origin, filters)
        self.ignores = _build(self.origin, ignores)
        self.extensions = tuple(extensions)
        self.ignore_files = IgnoreFilterer(self.origin, ignore_files)
        log.debug(
            "globset filterer built: origin=%s filters=%d neg_filters=%d ignores=%d "
            "neg_ignores=%d in_ignore_files=%d extensions=%d",
            self.origin,
            self.filters.num_ignores(),
            self.filters.num_whitelists(),
            self.ignores.num_ignores(),
            self.ignores.num_whitelists(),
            self.ignore_files.num_ignores(),
            len(self.extensions),
        )

    def __repr__(self) -> str:
        return (
            f"GlobsetFilterer(origin={self.origin!r}, filters={self.filters.num_ignores()}, "
            f"ignores={self.ignores.num_ignores()}, extensions={list(self.extensions)!r})"
        )

    def check_event(self, event: Event, priority: Priority) -> bool:
        """Return True if any path of the event passes; non-path events always pass."""
        if not self.ignore_files.check_event(event, priority):
            log.debug("internal ignore filterer matched (fail)")
            return False

        paths = list(event.paths())
        if not paths:
            return True
        return any(self._path_passes(path, file_type) for path, file_type in paths)

    def _rebased_filter_match(self, path: PurePath, is_dir: bool) -> bool:
        # Older releases matched filters against "origin//relative", which after the
        # root is stripped leaves a leading slash; kept for compatibility.
        if os.name != "posix" or not path.is_relative_to(self.origin):
            return False
        based = path.relative_to(self.origin).as_posix()
        if based == ".":
            based = ""
        return self.filters._matched_stripped("/" + based, is_dir).is_ignore

    def _path_passes(self, raw: PathLike, file_type: Optional[FileType]) -> bool:
        path = PurePath(os.fspath(raw))
        is_dir = file_type is FileType.DIR

        if self.ignores.matched(path, is_dir).is_ignore:
            return False

        filtered = False
        if self.filters.num_ignores() > 0:
            filtered = True
            if self.filters.matched(path, is_dir).is_ignore:
                return True
            if self._rebased_filter_match(path, is_dir):
                return True

        if self.extensions:
            filtered = True
            if is_dir:
                return False
            ext = _extension(path)
            if ext is None:
                return False
            if ext in self.extensions:
                return True

        return not filtered