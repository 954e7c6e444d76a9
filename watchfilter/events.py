"""Event and tag types that filterers operate on."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Optional, Union


class FileType(enum.Enum):
    """The type of a filesystem object."""

    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


class Priority(enum.Enum):
    """The priority of an event."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class Source(enum.Enum):
    """Where an event came from."""

    FILESYSTEM = "filesystem"
    KEYBOARD = "keyboard"
    MOUSE = "mouse"
    OS = "os"
    TIME = "time"
    INTERNAL = "internal"

    def __str__(self) -> str:
        return self.value


class Signal(enum.Enum):
    """A well-known signal, valued by its conventional number."""

    HANGUP = 1
    INTERRUPT = 2
    QUIT = 3
    FORCE_STOP = 9
    USER1 = 10
    USER2 = 12
    TERMINATE = 15

    @property
    def short_name(self) -> str:
        return _SIGNAL_NAMES[self]


_SIGNAL_NAMES = {
    Signal.HANGUP: "HUP",
    Signal.INTERRUPT: "INT",
    Signal.QUIT: "QUIT",
    Signal.FORCE_STOP: "KILL",
    Signal.USER1: "USR1",
    Signal.USER2: "USR2",
    Signal.TERMINATE: "TERM",
}


@dataclass(frozen=True)
class CustomSignal:
    """A signal given only by its number."""

    number: int


AnySignal = Union[Signal, CustomSignal]


class ProcessEndKind(enum.Enum):
    """How a process ended."""

    SUCCESS = "success"
    EXIT_ERROR = "error"
    EXIT_SIGNAL = "signal"
    EXIT_STOP = "stop"
    EXCEPTION = "exception"
    CONTINUED = "continued"


@dataclass(frozen=True)
class ProcessEnd:
    """The end of a process: a kind, and a code or signal where the kind carries one."""

    kind: ProcessEndKind
    value: Optional[Union[int, Signal, CustomSignal]] = None


@dataclass(frozen=True)
class PathTag:
    """A filesystem path, with its file type when known."""

    name: ClassVar[str] = "Path"
    path: Union[str, os.PathLike]
    file_type: Optional[FileType] = None


@dataclass(frozen=True)
class FileEventKindTag:
    """The kind of a filesystem event, in its textual form, e.g. ``Create(File)``."""

    name: ClassVar[str] = "FileEventKind"
    kind: str


@dataclass(frozen=True)
class SourceTag:
    """The source of an event."""

    name: ClassVar[str] = "Source"
    source: Source


@dataclass(frozen=True)
class ProcessTag:
    """The id of the process that caused an event."""

    name: ClassVar[str] = "Process"
    pid: int


@dataclass(frozen=True)
class SignalTag:
    """A signal sent to the main process."""

    name: ClassVar[str] = "Signal"
    signal: AnySignal


@dataclass(frozen=True)
class ProcessCompletionTag:
    """The completion of a subprocess; ``end`` is None when unknown."""

    name: ClassVar[str] = "ProcessCompletion"
    end: Optional[ProcessEnd] = None


Tag = Union[PathTag, FileEventKindTag, SourceTag, ProcessTag, SignalTag, ProcessCompletionTag]


@dataclass
class Event:
    """An event: a list of tags and free-form metadata."""

    tags: list = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def paths(self) -> Iterator[tuple[Union[str, os.PathLike], Optional[FileType]]]:
        """Yield ``(path, file_type)`` for every path tag."""
        for tag in self.tags:
            if isinstance(tag, PathTag):
                yield tag.path, tag.file_type