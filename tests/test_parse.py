import re

import pytest

from watchfilter.errors import ParseError
from watchfilter.filter import (
    ExactPattern,
    Filter,
    GlobPattern,
    Matcher,
    Op,
    RegexPattern,
    SetPattern,
)
from watchfilter.parse import parse_filter


@pytest.mark.parametrize("text", ["", "!", "foobar"])
def test_invalid_filters(text):
    with pytest.raises(ParseError) as info:
        parse_filter(text)
    assert info.value.src == text


def test_path_auto_op():
    assert parse_filter("path=foo") == Filter(None, Matcher.PATH, Op.GLOB, GlobPattern("foo"), False)


def test_fek_auto_op():
    assert parse_filter("fek=foo") == Filter(
        None, Matcher.FILE_EVENT_KIND, Op.GLOB, GlobPattern("foo"), False
    )


def test_other_auto_op():
    assert parse_filter("type=foo") == Filter(
        None, Matcher.FILE_TYPE, Op.IN_SET, SetPattern(frozenset({"foo"})), False
    )


def test_op_equal():
    assert parse_filter("path==foo") == Filter(None, Matcher.PATH, Op.EQUAL, ExactPattern("foo"), False)


def test_op_not_equal():
    assert parse_filter("path!=foo") == Filter(
        None, Matcher.PATH, Op.NOT_EQUAL, ExactPattern("foo"), False
    )


def test_op_regex():
    assert parse_filter("path~=^fo+$") == Filter(
        None, Matcher.PATH, Op.REGEX, RegexPattern(re.compile("^fo+$")), False
    )


def test_op_not_regex():
    assert parse_filter("path~!f(o|al)+") == Filter(
        None, Matcher.PATH, Op.NOT_REGEX, RegexPattern(re.compile("f(o|al)+")), False
    )


def test_op_glob():
    assert parse_filter("path*=**/foo") == Filter(
        None, Matcher.PATH, Op.GLOB, GlobPattern("**/foo"), False
    )


def test_op_not_glob():
    assert parse_filter("path*!foo.*") == Filter(
        None, Matcher.PATH, Op.NOT_GLOB, GlobPattern("foo.*"), False
    )


def test_op_in_set():
    assert parse_filter("path:=foo,bar") == Filter(
        None, Matcher.PATH, Op.IN_SET, SetPattern(frozenset({"foo", "bar"})), False
    )


def test_op_not_in_set():
    assert parse_filter("path:!baz,qux") == Filter(
        None, Matcher.PATH, Op.NOT_IN_SET, SetPattern(frozenset({"baz", "qux"})), False
    )


def test_quoted_single():
    assert parse_filter("path='blanche neige'") == Filter(
        None, Matcher.PATH, Op.GLOB, GlobPattern("blanche neige"), False
    )


def test_quoted_double():
    assert parse_filter('path="et les sept nains"') == Filter(
        None, Matcher.PATH, Op.GLOB, GlobPattern("et les sept nains"), False
    )


def test_negate():
    assert parse_filter("!path~=^f[om]+$") == Filter(
        None, Matcher.PATH, Op.REGEX, RegexPattern(re.compile("^f[om]+$")), True
    )


@pytest.mark.parametrize(
    "first, others",
    [
        ("source:=keyboard,mouse", ["source=keyboard,mouse"]),
        ("kind*=Create(*)", ["fek*=Create(*)", "kind=Create(*)", "fek=Create(*)"]),
        ("process:=1234", ["pid:=1234", "process=1234", "pid=1234"]),
        ("process==1234", ["pid==1234"]),
        ("signal=INT", ["sig=INT", "signal:=INT", "sig:=INT"]),
        ("complete=_", ["complete*=_", "exit=_", "exit*=_"]),
    ],
)
def test_equivalent_spellings(first, others):
    expected = parse_filter(first)
    for other in others:
        assert parse_filter(other) == expected


def test_matcher_is_case_insensitive():
    assert parse_filter("PATH=foo") == parse_filter("path=foo")


def test_set_values_are_trimmed():
    assert parse_filter("pid= 123 , 456").pat == SetPattern(frozenset({"123", "456"}))


def test_invalid_regex_is_parse_error():
    with pytest.raises(ParseError):
        parse_filter("path~=(")


def test_missing_pattern_is_parse_error():
    with pytest.raises(ParseError):
        parse_filter("path==")


def test_unterminated_quote_keeps_text():
    assert parse_filter('path=="foo').pat == ExactPattern('"foo')