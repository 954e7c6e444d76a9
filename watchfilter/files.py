"""Filter files: loading them and finding them from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from watchfilter.errors import FilterIoError
from watchfilter.filter import Filter
from watchfilter.ignore_filterer import IgnoreFile
from watchfilter.parse import parse_filter


@dataclass(frozen=True)
class FilterFile:
    """A file of tagged filters; it is located like an ignore file but parsed differently."""

    file: IgnoreFile

    def load(self) -> list[Filter]:
        """Read and parse the file, skipping blank lines and ``#`` comments.

        Each filter's ``in_path`` is the file's ``applies_in``.
        """
        try:
            content = Path(self.file.path).read_text(encoding="utf-8")
        except OSError as err:
            raise FilterIoError("filter file load", err) from err
        return [
            replace(parse_filter(line), in_path=self.file.applies_in)
            for line in content.splitlines()
            if line and not line.startswith("#")
        ]


def _discover(path: Path, files: list[IgnoreFile], errors: list[OSError]) -> bool:
    try:
        found = path.is_file()
        if found:
            path.stat()
    except FileNotFoundError:
        return False
    except OSError as err:
        errors.append(err)
        return False
    if found:
        files.append(IgnoreFile(path))
    return found


def discover_files_from_environment() -> tuple[list[FilterFile], list[OSError]]:
    """Find filter files named by the environment.

    Files listed in ``WATCHEXEC_FILTER_FILES`` (comma-separated) are all taken; then the
    first existing one of the per-user config locations. Missing files are skipped
    silently; other errors are returned next to the files found.
    """
    files: list[IgnoreFile] = []
    errors: list[OSError] = []

    for entry in os.environ.get("WATCHEXEC_FILTER_FILES", "").split(","):
        if entry:
            _discover(Path(entry), files, errors)

    candidates = []
    for var, relative in (
        ("XDG_CONFIG_HOME", "watchexec/filter"),
        ("APPDATA", "watchexec/filter"),
        ("USERPROFILE", ".watchexec/filter"),
        ("HOME", ".watchexec/filter"),
    ):
        home = os.environ.get(var)
        if home is not None:
            candidates.append(Path(home) / relative)

    for candidate in candidates:
        if _discover(candidate, files, errors):
            break

    return [FilterFile(f) for f in files], errors