"""The flat token sequence as combinator input.

TokenInput holds the output of ``flatten`` as two parallel tuples (tokens
and locations) and implements the Input/SliceInput protocols on top of
them. It is built once per parse and never mutated.

Usage:
    >>> tokens = TokenInput.from_source("a += 1")
    >>> tokens.next(0)
    (1, IdentToken('a'))
    >>> tokens.slice(1, 3)
    (PunctToken('+', JOINT), PunctToken('=', ALONE))

"""

from __future__ import annotations

from collections.abc import Iterable

from tokentree.flatten import flatten
from tokentree.location import Location
from tokentree.native.tree import TokenStream
from tokentree.tokens import Token


class TokenInput:
    """Immutable, index-addressable sequence of (token, location) pairs.

    Thread Safety:
        Never mutated after construction; safe to share and to replay from
        any offset.

    """

    __slots__ = ("_tokens", "_locations", "_eoi")

    def __init__(
        self,
        pairs: Iterable[tuple[Token, Location]],
        eoi: Location | None = None,
    ) -> None:
        """Initialize from flattened pairs.

        Args:
            pairs: (token, location) pairs, usually from ``flatten``
            eoi: Location reported for errors at end of input. Defaults to
                the call-site location.
        """
        pairs = tuple(pairs)
        self._tokens: tuple[Token, ...] = tuple(token for token, _ in pairs)
        self._locations: tuple[Location, ...] = tuple(location for _, location in pairs)
        self._eoi = eoi or Location.call_site()

    @classmethod
    def from_stream(cls, stream: TokenStream, eoi: Location | None = None) -> TokenInput:
        """Flatten ``stream`` and wrap the result."""
        return cls(flatten(stream), eoi)

    @classmethod
    def from_source(cls, source: str, source_file: str | None = None) -> TokenInput:
        """Lex ``source`` into token trees, then flatten and wrap them.

        Raises:
            LexError: If the source cannot be tokenized
            NestingDepthError: If groups nest deeper than the configured limit
        """
        return cls.from_stream(TokenStream.from_str(source, source_file))

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"TokenInput({len(self._tokens)} tokens)"

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    @property
    def locations(self) -> tuple[Location, ...]:
        return self._locations

    @property
    def eoi(self) -> Location:
        """Location reported for failures at end of input."""
        return self._eoi

    # =========================================================================
    # Input protocol
    # =========================================================================

    def start(self) -> int:
        return 0

    def next(self, offset: int) -> tuple[int, Token | None]:
        """Read the token at ``offset``.

        Returns:
            ``(offset + 1, token)`` when in bounds, otherwise
            ``(offset, None)``: at end of input the offset does not move.
        """
        if 0 <= offset < len(self._tokens):
            return offset + 1, self._tokens[offset]
        return offset, None

    def span(self, start: int, end: int) -> Location:
        """Location covering the tokens in ``[start, end)``.

        Locations are joined left to right. A failed join drops what was
        accumulated and the next location starts over. If nothing is left
        at the end (empty range, or the last join failed), the call-site
        location is returned instead; this never raises.
        """
        acc: Location | None = None
        for location in self._locations[max(start, 0) : end]:
            acc = location if acc is None else acc.join(location)
        return acc if acc is not None else Location.call_site()

    def location_at(self, offset: int) -> Location:
        """Location of the token at ``offset``, or the end-of-input location."""
        if 0 <= offset < len(self._locations):
            return self._locations[offset]
        return self._eoi

    # =========================================================================
    # SliceInput protocol
    # =========================================================================

    def slice(self, start: int, end: int) -> tuple[Token, ...]:
        return self._tokens[start:end]

    def slice_from(self, start: int) -> tuple[Token, ...]:
        return self._tokens[start:]


def stream_from_tokens(stream: TokenStream) -> TokenInput:
    """Build parser input from a token stream.

    End-of-input errors are reported at the mixed-site location.
    """
    return TokenInput.from_stream(stream, eoi=Location.mixed_site())
