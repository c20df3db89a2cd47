"""Tests for the native lexer that builds token trees from source text.

Covers atom recognition, punctuation spacing, group assembly, source
positions, and every LexError path.
"""

import pytest

from tokentree import (
    Delimiter,
    Group,
    Ident,
    LexError,
    Literal,
    NestingDepthError,
    ParseConfig,
    Punct,
    Spacing,
    TokenStream,
    parse_config_context,
)
from tokentree.native import TokenTreeLexer, lex_token_stream


def lex(source: str) -> list:
    return list(TokenStream.from_str(source))


class TestAtoms:
    """Identifiers, literals and punctuation."""

    def test_identifiers(self) -> None:
        """Identifiers include underscores and digits after the first char."""
        assert lex("foo _bar baz9") == [Ident("foo"), Ident("_bar"), Ident("baz9")]

    def test_unicode_identifier(self) -> None:
        assert lex("größe") == [Ident("größe")]

    def test_integer_and_suffix(self) -> None:
        assert lex("42 7u8 0xff") == [Literal("42"), Literal("7u8"), Literal("0xff")]

    def test_float_with_exponent(self) -> None:
        """Fraction, signed exponent and suffix form one literal."""
        assert lex("1.5e-3f32") == [Literal("1.5e-3f32")]

    def test_hex_has_no_signed_exponent(self) -> None:
        """In hex, ``e`` is a digit, so a following sign is an operator."""
        assert lex("0x1e+5") == [Literal("0x1e"), Punct("+"), Literal("5")]
        assert lex("1e+5") == [Literal("1e+5")]

    def test_range_is_not_a_float(self) -> None:
        """A dot not followed by a digit ends the number."""
        assert lex("1..2") == [
            Literal("1"),
            Punct(".", Spacing.JOINT),
            Punct(".", Spacing.ALONE),
            Literal("2"),
        ]

    def test_string_with_escapes(self) -> None:
        assert lex(r'"a\"b"') == [Literal(r'"a\"b"')]

    def test_character_literals(self) -> None:
        assert lex(r"'x' '\''") == [Literal("'x'"), Literal(r"'\''")]

    def test_quote_without_close_is_punct(self) -> None:
        """A lifetime-style quote is punctuation followed by an identifier."""
        assert lex("'a") == [Punct("'"), Ident("a")]

    def test_comments_are_skipped(self) -> None:
        assert lex("a // line\n/* block */ b") == [Ident("a"), Ident("b")]


class TestSpacing:
    """Punctuation is joint only when directly followed by more punctuation."""

    def test_joined_operator(self) -> None:
        assert lex("+=") == [Punct("+", Spacing.JOINT), Punct("=", Spacing.ALONE)]

    def test_separated_operator(self) -> None:
        assert lex("+ =") == [Punct("+", Spacing.ALONE), Punct("=", Spacing.ALONE)]

    def test_punct_before_ident_is_alone(self) -> None:
        assert lex("^x")[0] == Punct("^", Spacing.ALONE)

    def test_comment_start_breaks_joint(self) -> None:
        """A comment opener is not punctuation."""
        assert lex("+// c\n=")[0].spacing is Spacing.ALONE

    def test_char_literal_breaks_joint(self) -> None:
        """A quote opening a character literal is not punctuation."""
        assert lex("+'a'") == [Punct("+", Spacing.ALONE), Literal("'a'")]

    def test_lifetime_quote_keeps_joint(self) -> None:
        """A quote that lexes as punctuation still glues to the previous char."""
        assert lex("&'a") == [Punct("&", Spacing.JOINT), Punct("'", Spacing.ALONE), Ident("a")]

    def test_stream_renders_spacing(self) -> None:
        assert str(TokenStream.from_str("a  +=   b")) == "a += b"


class TestGroups:
    """Delimited groups become nested token trees."""

    def test_nested_groups(self) -> None:
        stream = TokenStream.from_str("f(a, [b])")
        assert len(stream) == 2
        group = stream[1]
        assert isinstance(group, Group)
        assert group.delimiter is Delimiter.PARENTHESIS
        assert list(group.stream)[:2] == [Ident("a"), Punct(",")]
        inner = group.stream[2]
        assert isinstance(inner, Group)
        assert inner.delimiter is Delimiter.BRACKET

    def test_empty_group(self) -> None:
        (group,) = lex("{}")
        assert group.delimiter is Delimiter.BRACE
        assert group.stream.is_empty()

    def test_group_spans(self) -> None:
        """Open and close spans point at the delimiter characters."""
        (group,) = lex("( a )")
        assert group.span_open.col_offset == 1
        assert group.span_close.col_offset == 5
        assert (group.span.start, group.span.end) == (0, 5)

    def test_class_interface(self) -> None:
        stream = TokenTreeLexer("f(a, b)").lex()
        assert [type(tree).__name__ for tree in stream] == ["Ident", "Group"]

    def test_empty_source(self) -> None:
        assert lex_token_stream("   \n").is_empty()


class TestPositions:
    """Spans record offsets, lines and columns."""

    def test_line_and_column(self) -> None:
        a, b = lex("a\n  bc")
        assert (a.span.lineno, a.span.col_offset) == (1, 1)
        assert (b.span.lineno, b.span.col_offset) == (2, 3)
        assert (b.span.start, b.span.end) == (4, 6)
        assert b.span.end_col_offset == 5

    def test_source_file_recorded(self) -> None:
        (ident,) = lex_token_stream("x", source_file="unit.rs")
        assert ident.span.source_file == "unit.rs"
        assert str(ident.span) == "unit.rs:1:1"


class TestLexErrors:
    """Malformed source raises LexError with a location."""

    @pytest.mark.parametrize(
        ("source", "fragment"),
        [
            ("(a", "unclosed delimiter '('"),
            ("a)", "unexpected closing delimiter ')'"),
            ("(a]", "mismatched closing delimiter ']'"),
            ('"abc', "unterminated string literal"),
            ("/* abc", "unterminated block comment"),
            ("a \\ b", "unexpected character '\\\\'"),
            ("`", "unexpected character '`'"),
        ],
    )
    def test_error_messages(self, source: str, fragment: str) -> None:
        with pytest.raises(LexError) as exc_info:
            TokenStream.from_str(source)
        assert fragment in str(exc_info.value)
        assert exc_info.value.span is not None

    def test_unclosed_points_at_opener(self) -> None:
        with pytest.raises(LexError) as exc_info:
            TokenStream.from_str("a (b")
        assert exc_info.value.span.col_offset == 3
        assert str(exc_info.value).startswith("1:3 ")

    def test_error_carries_source_file(self) -> None:
        with pytest.raises(LexError) as exc_info:
            lex_token_stream("\n)", source_file="lib.rs")
        assert str(exc_info.value).startswith("lib.rs:2:1 ")


class TestNestingDepth:
    """Group nesting is capped by ParseConfig.max_nesting_depth."""

    def test_at_limit_is_accepted(self) -> None:
        with parse_config_context(ParseConfig(max_nesting_depth=2)):
            assert len(lex("((a))")) == 1

    def test_beyond_limit_raises(self) -> None:
        with parse_config_context(ParseConfig(max_nesting_depth=2)):
            with pytest.raises(NestingDepthError) as exc_info:
                TokenStream.from_str("(((a)))")
        assert exc_info.value.limit == 2
        assert exc_info.value.span.col_offset == 3

    def test_limit_disabled(self) -> None:
        """Without a limit, depth costs heap memory only."""
        depth = 5000
        source = "(" * depth + "x" + ")" * depth
        with parse_config_context(ParseConfig(max_nesting_depth=None)):
            stream = TokenStream.from_str(source)
        assert len(stream) == 1

    def test_default_limit(self) -> None:
        with pytest.raises(NestingDepthError):
            TokenStream.from_str("[" * 300 + "]" * 300)
