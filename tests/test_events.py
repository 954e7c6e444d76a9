from watchfilter.events import (
    Event,
    FileType,
    PathTag,
    ProcessEnd,
    ProcessEndKind,
    Signal,
    Source,
    SourceTag,
)


def test_paths_yields_only_path_tags_in_order():
    event = Event(
        tags=[
            PathTag("/a", FileType.FILE),
            SourceTag(Source.KEYBOARD),
            PathTag("/b"),
        ]
    )
    assert list(event.paths()) == [("/a", FileType.FILE), ("/b", None)]


def test_non_path_event_has_no_paths():
    assert list(Event(tags=[SourceTag(Source.MOUSE)]).paths()) == []


def test_display_forms():
    event = Event(tags=[PathTag("/a", FileType.DIR), SourceTag(Source.KEYBOARD)])
    [(path, file_type)] = list(event.paths())
    assert path == "/a"
    assert str(file_type) == "dir"
    assert str(Source.KEYBOARD) == "keyboard"


def test_signal_names_and_numbers():
    interrupt = Signal(2)
    assert interrupt is Signal.INTERRUPT
    assert interrupt.short_name == "INT"
    assert Signal.TERMINATE.short_name == "TERM"


def test_process_end_equality():
    assert ProcessEnd(ProcessEndKind.EXIT_ERROR, 1) == ProcessEnd(ProcessEndKind.EXIT_ERROR, 1)
    assert ProcessEnd(ProcessEndKind.SUCCESS) != ProcessEnd(ProcessEndKind.CONTINUED)