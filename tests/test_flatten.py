"""Tests for flattening token trees and rebuilding them."""

import pytest

from tokentree import (
    Delimiter,
    Group,
    GroupEnd,
    GroupStart,
    Ident,
    IdentToken,
    Location,
    ParseConfig,
    TokenStream,
    flatten,
    parse_config_context,
    unflatten,
)


def texts(source: str) -> list[str]:
    return [str(token) for token, _ in flatten(TokenStream.from_str(source))]


class TestFlatten:
    """Groups become start marker, contents, end marker."""

    def test_flat_stream_unchanged(self) -> None:
        assert texts("a + 1") == ["a", "+", "1"]

    def test_nested_groups(self) -> None:
        assert texts("f(a, [b])") == ["f", "(", "a", ",", "[", "b", "]", ")"]

    def test_markers_carry_delimiter(self) -> None:
        tokens = [token for token, _ in flatten(TokenStream.from_str("{[]}"))]
        assert tokens == [
            GroupStart(Delimiter.BRACE),
            GroupStart(Delimiter.BRACKET),
            GroupEnd(Delimiter.BRACKET),
            GroupEnd(Delimiter.BRACE),
        ]

    def test_marker_locations(self) -> None:
        """Markers sit at their delimiter characters."""
        pairs = flatten(TokenStream.from_str("f( x )"))
        columns = [location.col_offset for _, location in pairs]
        assert columns == [1, 2, 4, 6]

    def test_atom_locations(self) -> None:
        pairs = flatten(TokenStream.from_str("a\nbb"))
        assert [(loc.lineno, loc.col_offset) for _, loc in pairs] == [(1, 1), (2, 1)]

    def test_empty_stream(self) -> None:
        assert flatten(TokenStream()) == []

    def test_invisible_group(self) -> None:
        """NONE-delimited groups still produce markers, at synthetic locations."""
        stream = TokenStream.of([Group(Delimiter.NONE, TokenStream.of([Ident("x")]))])
        pairs = flatten(stream)
        assert [token for token, _ in pairs] == [
            GroupStart(Delimiter.NONE),
            IdentToken.new("x"),
            GroupEnd(Delimiter.NONE),
        ]
        assert pairs[0][1] == Location.call_site()

    def test_deep_nesting_is_iterative(self) -> None:
        """Depth far beyond the recursion limit flattens without error."""
        depth = 5000
        with parse_config_context(ParseConfig(max_nesting_depth=None)):
            stream = TokenStream.from_str("(" * depth + ")" * depth)
        pairs = flatten(stream)
        assert len(pairs) == 2 * depth
        assert pairs[0][0] == GroupStart(Delimiter.PARENTHESIS)
        assert pairs[-1][0] == GroupEnd(Delimiter.PARENTHESIS)


class TestUnflatten:
    """unflatten rebuilds the tree flatten took apart."""

    def test_round_trip(self) -> None:
        stream = TokenStream.from_str("f(a, [b]) { c += 1 }")
        assert unflatten(flatten(stream)) == stream

    def test_restores_delimiter_spans(self) -> None:
        stream = TokenStream.from_str("(x)")
        (group,) = unflatten(flatten(stream))
        assert group.span_open.col_offset == 1
        assert group.span_close.col_offset == 3

    def test_unbalanced_end(self) -> None:
        pairs = [(GroupEnd(Delimiter.PARENTHESIS), Location.call_site())]
        with pytest.raises(ValueError, match="unbalanced"):
            unflatten(pairs)

    def test_mismatched_end(self) -> None:
        pairs = [
            (GroupStart(Delimiter.BRACE), Location.call_site()),
            (GroupEnd(Delimiter.BRACKET), Location.call_site()),
        ]
        with pytest.raises(ValueError, match="unbalanced"):
            unflatten(pairs)

    def test_unclosed(self) -> None:
        pairs = [(GroupStart(Delimiter.BRACE), Location.call_site())]
        with pytest.raises(ValueError, match="unclosed"):
            unflatten(pairs)

    def test_atoms_only(self) -> None:
        pairs = [(IdentToken.new("a"), Location.call_site())]
        assert list(unflatten(pairs)) == [Ident("a")]
