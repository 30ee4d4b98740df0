import pytest
from mountfs import PatternSyntaxError, compile_glob
from mountfs._glob import (
    MatchAlternative,
    MatchAny,
    MatchCharacter,
    MatchCollection,
    MatchOne,
)


def test_literal_characters():
    assert compile_glob("ab") == (MatchCharacter("a"), MatchCharacter("b"))


def test_one_and_any():
    assert compile_glob("?*") == (MatchOne(), MatchAny())


def test_empty_pattern():
    assert compile_glob("") == ()


def test_alternative():
    assert compile_glob("{foo,bar}") == (MatchAlternative(("foo", "bar")),)


def test_alternative_escapes_decode():
    (node,) = compile_glob(r"{a\,b,c\}d,e\\f}")
    assert node == MatchAlternative(("a,b", "c}d", "e\\f"))


def test_collection_with_range():
    assert compile_glob("[a-cx]") == (MatchCollection((("a", "c"), "x")),)


def test_collection_escaped_bracket():
    assert compile_glob(r"[\]a]") == (MatchCollection(("]", "a")),)


def test_collection_trailing_dash_is_literal():
    assert compile_glob("[a-]") == (MatchCollection(("a", "-")),)


def test_escaped_metacharacter_is_literal():
    assert compile_glob(r"\*\?") == (MatchCharacter("*"), MatchCharacter("?"))


def test_mixed():
    nodes = compile_glob("*.{py,txt}")
    assert nodes == (
        MatchAny(),
        MatchCharacter("."),
        MatchAlternative(("py", "txt")),
    )


# ---------------------------------------------------------------------------
# syntax errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "pattern",
    [
        "{a,b",  # unterminated alternative
        "[abc",  # unterminated collection
        "abc\\",  # dangling escape
        "{}",  # empty alternative
        "{a,}",  # empty option
        "[]",  # empty class
        "a}",  # stray close brace
        "a]",  # stray close bracket
        "a,b",  # comma outside an alternative
        "{a*,b}",  # metacharacter inside an option
        "[a*]",  # metacharacter inside a class
        "[z-a]",  # reversed range
    ],
)
def test_syntax_errors(pattern):
    with pytest.raises(PatternSyntaxError):
        compile_glob(pattern)


def test_syntax_error_reports_position():
    with pytest.raises(PatternSyntaxError) as exc_info:
        compile_glob("ab{cd")
    assert exc_info.value.pattern == "ab{cd"
    assert exc_info.value.position == 2


def test_syntax_error_is_value_error():
    with pytest.raises(ValueError):
        compile_glob("[")


def test_escaped_metacharacter_inside_alternative_is_literal():
    assert compile_glob(r"{a\*,b\?}") == (MatchAlternative(("a*", "b?")),)
