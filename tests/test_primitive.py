"""Tests for keyword, punct, joined_punct and the filter_map helpers."""

import pytest

from tokentree import (
    CombinatorConfigError,
    IdentToken,
    Literal,
    LiteralToken,
    Punct,
    PunctToken,
    Spacing,
    TokenInput,
    end,
    filter_ident,
    filter_literal,
    filter_map,
    filter_punct,
    joined_punct,
    keyword,
    punct,
)


def src(source: str) -> TokenInput:
    return TokenInput.from_source(source)


class TestKeyword:
    """keyword(name) matches one exact identifier."""

    def test_match(self) -> None:
        result = keyword("struct").parse_result(src("struct Foo"))
        assert (result.offset, result.value) == (1, None)

    def test_other_identifier(self) -> None:
        err = keyword("struct").parse_result(src("enum")).error
        assert err.expected == {IdentToken.new("struct")}
        assert err.found == IdentToken.new("enum")

    def test_non_identifier(self) -> None:
        err = keyword("s").parse_result(src('"s"')).error
        assert err.found == LiteralToken.new('"s"')

    def test_end_of_input(self) -> None:
        err = keyword("s").parse_result(src("")).error
        assert err.found is None
        assert "expected `s`, found end of input" in str(err)

    @pytest.mark.parametrize("name", ["", "1x", "a-b", "a b"])
    def test_invalid_name_rejected_at_construction(self, name: str) -> None:
        with pytest.raises(CombinatorConfigError):
            keyword(name)

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            keyword("+")


class TestPunct:
    """punct(char) matches one punctuation character, whatever its spacing."""

    @pytest.mark.parametrize("source", ["+", "+ a", "+=", "+a"])
    def test_matches_any_spacing(self, source: str) -> None:
        assert punct("+").parse_result(src(source)).offset == 1

    def test_other_char(self) -> None:
        result = punct("+").parse_result(src("-"))
        assert not result.ok
        assert result.offset == 0
        err = result.error
        assert err.expected == {PunctToken.new("+")}
        assert err.found == PunctToken.new("-")

    @pytest.mark.parametrize("char", ["", "+=", "a", "(", " "])
    def test_invalid_char_rejected(self, char: str) -> None:
        with pytest.raises(CombinatorConfigError):
            punct(char)


class TestJoinedPunct:
    """joined_punct(pattern) matches adjacent punctuation as one operator."""

    def test_adjacent(self) -> None:
        value = joined_punct("+=").then_ignore(end()).parse(src("+="))
        assert value == [Punct("+", Spacing.JOINT), Punct("=", Spacing.ALONE)]

    def test_last_char_may_be_joint(self) -> None:
        """In ``+=+`` the operator is followed by more punctuation."""
        result = joined_punct("+=").parse_result(src("+=+"))
        assert result.offset == 2
        assert [p.char for p in result.value] == ["+", "="]
        assert result.value[1].spacing is Spacing.JOINT

    def test_separated_rejected(self) -> None:
        """``+ =`` is two operators, not one."""
        result = joined_punct("+=").parse_result(src("+ ="))
        assert not result.ok
        assert result.offset == 0
        assert result.error.expected == {PunctToken.new("+", Spacing.JOINT)}
        assert result.error.found == PunctToken.new("+", Spacing.ALONE)
        assert result.error.location.col_offset == 1

    def test_wrong_last_char(self) -> None:
        """The error points past the matched prefix; the cursor stays put."""
        result = joined_punct("+=").parse_result(src("+-"))
        assert result.offset == 0
        err = result.error
        assert err.offset == 1
        assert err.expected == {PunctToken.new("=")}
        assert err.location.col_offset == 2

    def test_three_chars(self) -> None:
        value = joined_punct("..=").parse(src("..= x"))
        assert "".join(p.char for p in value) == "..="

    def test_single_char(self) -> None:
        assert joined_punct("=").parse(src("= x")) == [Punct("=")]

    def test_truncated(self) -> None:
        result = joined_punct("::").parse_result(src(":"))
        assert not result.ok
        assert result.offset == 0

    def test_path_separator(self) -> None:
        parser = keyword("a").ignore_then(joined_punct("::")).ignore_then(keyword("b"))
        assert parser.parse_result(src("a::b")).ok
        assert not parser.parse_result(src("a: :b")).ok

    @pytest.mark.parametrize("pattern", ["", "+a", "a", "+ "])
    def test_invalid_pattern_rejected(self, pattern: str) -> None:
        with pytest.raises(CombinatorConfigError):
            joined_punct(pattern)


class TestFilterHelpers:
    """filter_literal, filter_ident and filter_punct narrow through filter_map."""

    def test_filter_literal(self) -> None:
        assert filter_map(filter_literal).parse(src("1.5")) == Literal("1.5")

    def test_filter_ident(self) -> None:
        assert filter_map(filter_ident).parse(src("kg")).name == "kg"

    def test_filter_punct(self) -> None:
        assert filter_map(filter_punct).parse(src("^")).char == "^"

    def test_mismatch_has_unspecified_expectation(self) -> None:
        err = filter_map(filter_literal).parse_result(src("kg")).error
        assert err.expected == frozenset()
        assert str(err) == "1:1 found `kg`"
