"""Exceptions raised by the filterers."""

from __future__ import annotations


class FiltererError(Exception):
    """Base class for every error raised by a filterer."""


class ParseError(FiltererError, ValueError):
    """A textual filter could not be parsed."""

    def __init__(self, src: str, reason: str) -> None:
        self.src = src
        self.reason = reason
        super().__init__(f"cannot parse filter `{src}`: {reason}")


class GlobError(FiltererError, ValueError):
    """A glob pattern could not be compiled."""

    def __init__(self, message: str, file: object = None) -> None:
        self.message = message
        self.file = file
        super().__init__(f"cannot parse glob: {message}")


class FilterIoError(FiltererError, OSError):
    """An I/O operation failed, with some context on what it was about."""

    def __init__(self, about: str, err: BaseException) -> None:
        self.about = about
        self.err = err
        super().__init__(f"io({about}): {err}")