import re

import pytest

from watchfilter.errors import FilterIoError
from watchfilter.events import (
    FileType,
    PathTag,
    ProcessCompletionTag,
    ProcessTag,
    SignalTag,
    Signal,
    Source,
    SourceTag,
)
from watchfilter.filter import (
    ExactPattern,
    Filter,
    GlobPattern,
    Matcher,
    Op,
    RegexPattern,
    SetPattern,
    matchers_for_tag,
)


def make(op, pat, on=Matcher.SOURCE):
    return Filter(in_path=None, on=on, op=op, pat=pat)


def test_exact_is_case_insensitive():
    f = make(Op.EQUAL, ExactPattern("keyboard"))
    assert f.matches("KeyBoard") is True
    assert f.matches("mouse") is False


def test_not_equal():
    f = make(Op.NOT_EQUAL, ExactPattern("mouse"))
    assert f.matches("MOUSE") is False
    assert f.matches("keyboard") is True


def test_regex_searches():
    f = make(Op.REGEX, RegexPattern(re.compile("(keyboard|mouse)")))
    assert f.matches("keyboard") is True
    assert f.matches("internal") is False
    nf = make(Op.NOT_REGEX, RegexPattern(re.compile("(keyboard|mouse)")))
    assert nf.matches("internal") is True


def test_glob_and_not_glob():
    f = make(Op.GLOB, GlobPattern("*i*m*"))
    assert f.matches("filesystem") is True
    assert f.matches("time") is True
    assert f.matches("internal") is False
    nf = make(Op.NOT_GLOB, GlobPattern("Create(*)"))
    assert nf.matches("Create(File)") is False
    assert nf.matches("Modify(Any)") is True


def test_glob_crosses_separators():
    f = make(Op.GLOB, GlobPattern("Modify(Data(*))"))
    assert f.matches("Modify(Data(Content))") is True


def test_invalid_glob_passes():
    f = make(Op.GLOB, GlobPattern("a["))
    assert f.matches("anything") is True


def test_set_membership():
    f = make(Op.IN_SET, SetPattern(frozenset({"keyboard", "mouse"})))
    assert f.matches("mouse") is True
    assert f.matches("internal") is False
    nf = make(Op.NOT_IN_SET, SetPattern(frozenset({"keyboard", "mouse"})))
    assert nf.matches("mouse") is False
    assert nf.matches("internal") is True


def test_set_op_on_exact_is_case_sensitive():
    f = make(Op.IN_SET, ExactPattern("keyboard"))
    assert f.matches("keyboard") is True
    assert f.matches("KEYBOARD") is False
    nf = make(Op.NOT_IN_SET, ExactPattern("keyboard"))
    assert nf.matches("KEYBOARD") is True


def test_mismatched_op_and_pattern_fails():
    f = make(Op.REGEX, ExactPattern("keyboard"))
    assert f.matches("keyboard") is False
    g = make(Op.AUTO, GlobPattern("*"))
    assert g.matches("keyboard") is False


def test_from_glob_ignore():
    f = Filter.from_glob_ignore(None, "*.toml")
    assert f == Filter(None, Matcher.PATH, Op.NOT_GLOB, GlobPattern("*.toml"), False)
    n = Filter.from_glob_ignore("/base", "!keep.toml")
    assert n.negate is True
    assert n.pat == GlobPattern("keep.toml")
    assert n.in_path == "/base"


def test_regex_pattern_equality_by_text():
    assert RegexPattern(re.compile("^fo+$")) == RegexPattern(re.compile("^fo+$"))
    assert RegexPattern(re.compile("a")) != RegexPattern(re.compile("b"))


def test_canonicalised_resolves(tmp_path):
    sub = tmp_path / "sub"
    sub.mkdir()
    f = Filter.from_glob_ignore(sub / ".." / "sub", "x")
    canon = f.canonicalised()
    assert canon.in_path == sub.resolve()
    assert canon.pat == f.pat


def test_canonicalised_without_path_is_unchanged():
    f = Filter.from_glob_ignore(None, "x")
    assert f.canonicalised() == f


def test_canonicalised_missing_path_raises(tmp_path):
    f = Filter.from_glob_ignore(tmp_path / "missing", "x")
    with pytest.raises(FilterIoError) as info:
        f.canonicalised()
    assert info.value.about == "canonicalise Filter in_path"


def test_matchers_for_tag():
    assert matchers_for_tag(PathTag("/a")) == (Matcher.PATH,)
    assert matchers_for_tag(PathTag("/a", FileType.DIR)) == (Matcher.PATH, Matcher.FILE_TYPE)
    assert matchers_for_tag(SourceTag(Source.KEYBOARD)) == (Matcher.SOURCE,)
    assert matchers_for_tag(ProcessTag(1234)) == (Matcher.PROCESS,)
    assert matchers_for_tag(SignalTag(Signal.INTERRUPT)) == (Matcher.SIGNAL,)
    assert matchers_for_tag(ProcessCompletionTag(None)) == (Matcher.PROCESS_COMPLETION,)
    assert matchers_for_tag(object()) == ()