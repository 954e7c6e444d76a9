"""A filterer backed by gitignore-style ignore files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any, Iterable, Optional, Union

from watchfilter.errors import FilterIoError
from watchfilter.events import Event, FileType, Priority
from watchfilter.gitignore import GitignoreBuilder, Match, _under

PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class IgnoreFile:
    """An ignore file, the directory it applies in, and the project type it applies to."""

    path: PathLike
    applies_in: Optional[PathLike] = None
    applies_to: Any = None


class IgnoreFilterer:
    """Rejects events whose paths are ignored by the loaded ignore files."""

    def __init__(self, origin: PathLike, files: Iterable[IgnoreFile] = ()) -> None:
        self.origin = PurePath(os.fspath(origin))
        self._lines: tuple[tuple[Optional[PathLike], str], ...] = ()
        self._compiled = GitignoreBuilder(self.origin).build()
        for file in files:
            self.add_file(file)

    def __repr__(self) -> str:
        return f"IgnoreFilterer(origin={self.origin!r}, ignores={self.num_ignores()})"

    def _scoped(self, line: str, applies_in: Optional[PathLike]) -> str:
        stripped = line.strip()
        if applies_in is None or not stripped or stripped.startswith("#"):
            return line
        base = PurePath(os.fspath(applies_in))
        if not base.is_relative_to(self.origin):
            return line
        rel = base.relative_to(self.origin).as_posix()
        if rel == ".":
            return line
        negate = line.startswith("!")
        body = line[1:] if negate else line
        if body.startswith("/"):
            scoped = f"{rel}{body}"
        elif "/" in body.rstrip("/"):
            scoped = f"{rel}/{body}"
        else:
            scoped = f"{rel}/**/{body}"
        return ("!" if negate else "") + scoped

    def add_file(self, file: IgnoreFile) -> None:
        """Read an ignore file and add its lines."""
        try:
            text = Path(file.path).read_text(encoding="utf-8")
        except OSError as err:
            raise FilterIoError("ignore file load", err) from err
        lines = self._lines + tuple(
            (file.applies_in, self._scoped(line, file.applies_in)) for line in text.splitlines()
        )
        builder = GitignoreBuilder(self.origin)
        for from_path, line in lines:
            builder.add_line(from_path, line)
        self._compiled = builder.build()
        self._lines = lines

    def num_ignores(self) -> int:
        return self._compiled.num_ignores()

    def _match_path(self, path: PathLike, is_dir: bool) -> Match:
        if _under(path, self.origin):
            return self._compiled.matched_path_or_any_parents(path, is_dir)
        return self._compiled.matched(path, is_dir)

    def check_event(self, event: Event, priority: Priority) -> bool:
        """Return False if the event is ignored by the ignore files; priority is unused."""
        passes = True
        for path, file_type in event.paths():
            found = self._match_path(path, file_type is FileType.DIR)
            if found.is_ignore:
                scope = found.from_path
                if scope is None or _under(path, scope):
                    passes = False
            elif found.is_whitelist:
                passes = True
        return passes