"""Unit tests for grammarconv.wildcards.lexer: parsing of ``{...}`` tokens."""
from __future__ import annotations

import pytest

from grammarconv.wildcards.lexer import WildcardError, extract_wildcard
from grammarconv.wildcards.tokens import WildcardToken


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def lex(source: str, pos: int = 0) -> WildcardToken:
    token, _ = extract_wildcard(source, pos)
    return token


# ---------------------------------------------------------------------------
# Basic forms
# ---------------------------------------------------------------------------


class TestBasicForms:
    def test_name_only(self) -> None:
        token = lex("{name}")
        assert token.name == "name"
        assert token.type is None
        assert token.obfuscated is False
        assert token.id is None

    def test_name_and_type(self) -> None:
        token = lex("{location beacon}")
        assert token.name == "location"
        assert token.type == "beacon"

    def test_colon_form_equals_space_form(self) -> None:
        assert lex("{location:beacon}") == lex("{location beacon}")

    def test_numeric_id(self) -> None:
        token = lex("{placement 2}")
        assert token.type is None
        assert token.id == 2

    def test_type_and_id(self) -> None:
        token = lex("{object alike 1}")
        assert token.type == "alike"
        assert token.id == 1

    def test_name_and_type_are_lowercased(self) -> None:
        token = lex("{Location Beacon}")
        assert token.name == "location"
        assert token.type == "beacon"

    def test_surrounding_whitespace_ignored(self) -> None:
        assert lex("{  name   }") == lex("{name}")


# ---------------------------------------------------------------------------
# Obfuscation marker
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("source", [
    "{location?}",
    "{location? beacon}",
    "{location beacon?}",
    "{location:beacon?}",
    "{location?:beacon}",
])
def test_question_mark_marks_obfuscated(source: str) -> None:
    token = lex(source)
    assert token.obfuscated is True
    assert token.name == "location"


def test_marker_does_not_leak_into_type() -> None:
    assert lex("{location beacon?}").type == "beacon"


# ---------------------------------------------------------------------------
# Clauses
# ---------------------------------------------------------------------------


class TestClauses:
    def test_where_clause_captured(self) -> None:
        token = lex('{name 1 where Gender="male"}')
        assert token.id == 1
        assert token.where == 'Gender="male"'

    def test_meta_payload_captured(self) -> None:
        token = lex("{void meta: ask for the {object 1}}")
        assert token.name == "void"
        assert token.metadata == "ask for the {object 1}"

    def test_meta_is_not_a_type(self) -> None:
        token = lex("{question meta: answer it}")
        assert token.type is None


# ---------------------------------------------------------------------------
# Cursor and span
# ---------------------------------------------------------------------------


class TestCursor:
    def test_end_is_past_closing_brace(self) -> None:
        source = "go to the {room} now"
        token, end = extract_wildcard(source, source.index("{"))
        assert source[end:] == " now"
        assert token.span == (10, 16)

    def test_nested_braces_balance(self) -> None:
        source = "{void meta: {name} and {object}} tail"
        _, end = extract_wildcard(source, 0)
        assert source[end:] == " tail"

    def test_end_always_advances(self) -> None:
        _, end = extract_wildcard("x{name}", 1)
        assert end > 1


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_unterminated_raises(self) -> None:
        with pytest.raises(WildcardError, match="Unterminated"):
            extract_wildcard("bring {object", 6)

    def test_empty_raises(self) -> None:
        with pytest.raises(WildcardError, match="Empty"):
            extract_wildcard("{ }", 0)

    def test_invalid_name_raises(self) -> None:
        with pytest.raises(WildcardError, match="Invalid wildcard name"):
            extract_wildcard("{1abc}", 0)

    def test_not_at_brace_raises(self) -> None:
        with pytest.raises(WildcardError):
            extract_wildcard("name}", 0)

    def test_error_carries_position(self) -> None:
        with pytest.raises(WildcardError) as info:
            extract_wildcard("ab {", 3)
        assert info.value.position == 3
        assert info.value.source == "ab {"

    def test_error_is_value_error(self) -> None:
        assert issubclass(WildcardError, ValueError)
