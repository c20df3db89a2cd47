"""Primitive parsers for token-level matching.

Grammars over flattened token trees are built from these primitives and
the combinators in ``tokentree.combinators``:

- ``keyword("struct")`` matches one exact identifier.
- ``punct("+")`` matches one punctuation character, glued to the next
  character or not.
- ``joined_punct("+=")`` matches a multi-character operator whose
  characters are written without spaces between them.

None of them keep state between runs, and none consume input on failure.
Invalid arguments are rejected with CombinatorConfigError when the parser
is built, never while parsing.

Usage:
    >>> from tokentree import TokenInput, keyword, punct, filter_map, filter_ident
    >>> parser = filter_map(filter_ident).then_ignore(punct("+")).then(filter_map(filter_ident))
    >>> left, right = parser.parse(TokenInput.from_source("a + b"))
    >>> (left.name, right.name)
    ('a', 'b')

"""

from __future__ import annotations

from tokentree.combinators import Parser, any_token, filter_map
from tokentree.errors import CombinatorConfigError, ParseError
from tokentree.location import Location
from tokentree.native.tree import PUNCT_CHARS, Ident, Literal, Punct, Spacing
from tokentree.tokens import IdentToken, Ok, PunctToken, Token


def _check_punct_char(char: str) -> None:
    if char not in PUNCT_CHARS:
        raise CombinatorConfigError(f"{char!r} is not a punctuation character")


def keyword(name: str) -> Parser[None]:
    """Accept exactly the identifier ``name``; output None.

    Raises:
        CombinatorConfigError: If ``name`` is not a valid identifier
    """
    if not name.isidentifier():
        raise CombinatorConfigError(f"{name!r} is not a valid keyword")
    expected = IdentToken.new(name)

    def check(location: Location, token: Token) -> Ok[None] | ParseError:
        narrowed = token.into_ident()
        if isinstance(narrowed, Ok) and narrowed.value == name:
            return Ok(None)
        return ParseError.expected_input_found(location, (expected,), token)

    return filter_map(check, expected=(expected,))


def punct(char: str) -> Parser[None]:
    """Accept a single punctuation token ``char``, joined or not; output None.

    Raises:
        CombinatorConfigError: If ``char`` is not a punctuation character
    """
    _check_punct_char(char)
    expected = PunctToken.new(char, Spacing.ALONE)

    def check(location: Location, token: Token) -> Ok[None] | ParseError:
        narrowed = token.into_punct()
        if isinstance(narrowed, Ok) and narrowed.value.char == char:
            return Ok(None)
        return ParseError.expected_input_found(location, (expected,), token)

    return filter_map(check, expected=(expected,))


def joined_punct(pattern: str) -> Parser[list[Punct]]:
    """Accept a run of joined punctuation, such as ``+=`` or ``::``.

    Every character except the last must be joint (immediately followed by
    the next punctuation character). The last character may have any
    spacing, so ``joined_punct("+=")`` matches ``+=`` and the start of
    ``+=+``, but not ``+ =``. Outputs the matched Punct values.

    Raises:
        CombinatorConfigError: If ``pattern`` is empty or contains a
            character that is not punctuation
    """
    if not pattern:
        raise CombinatorConfigError("joined punctuation pattern must not be empty")
    for char in pattern:
        _check_punct_char(char)

    leading = [PunctToken.new(char, Spacing.JOINT) for char in pattern[:-1]]
    last = pattern[-1]
    last_expected = PunctToken.new(last, Spacing.ALONE)

    def check_leading(
        items: list[tuple[Token, Location]], _location: Location
    ) -> Ok[list[Punct]] | ParseError:
        puncts: list[Punct] = []
        for (token, location), expected in zip(items, leading):
            narrowed = token.into_punct()
            if not isinstance(narrowed, Ok) or narrowed.value != expected.punct:
                return ParseError.expected_input_found(location, (expected,), token)
            puncts.append(narrowed.value)
        return Ok(puncts)

    def check_last(location: Location, token: Token) -> Ok[Punct] | ParseError:
        narrowed = token.into_punct()
        if isinstance(narrowed, Ok) and narrowed.value.char == last:
            return narrowed
        return ParseError.expected_input_found(location, (last_expected,), token)

    return (
        any_token()
        .map_with_location(lambda token, location: (token, location))
        .repeated()
        .exactly(len(leading))
        .try_map(check_leading)
        .chain(filter_map(check_last, expected=(last_expected,)))
    )


# =============================================================================
# filter_map helpers
# =============================================================================


def filter_literal(location: Location, token: Token) -> Ok[Literal] | ParseError:
    """Convert a token to its Literal, or fail with an unspecified expectation."""
    narrowed = token.into_literal()
    if isinstance(narrowed, Ok):
        return narrowed
    return ParseError.expected_input_found(location, (), narrowed.token)


def filter_ident(location: Location, token: Token) -> Ok[Ident] | ParseError:
    """Convert a token to its Ident, or fail with an unspecified expectation."""
    narrowed = token.into_ident()
    if isinstance(narrowed, Ok):
        return narrowed
    return ParseError.expected_input_found(location, (), narrowed.token)


def filter_punct(location: Location, token: Token) -> Ok[Punct] | ParseError:
    """Convert a token to its Punct, or fail with an unspecified expectation."""
    narrowed = token.into_punct()
    if isinstance(narrowed, Ok):
        return narrowed
    return ParseError.expected_input_found(location, (), narrowed.token)


__all__ = [
    "filter_ident",
    "filter_literal",
    "filter_punct",
    "joined_punct",
    "keyword",
    "punct",
]
