"""Protocols defining the input contract of the combinator engine.

The engine in ``tokentree.combinators`` never touches a concrete token
container. It drives any object satisfying Input: a cursor that starts at
an offset, steps forward one token at a time, and maps offset ranges back
to source locations. SliceInput adds contiguous random access.

Offsets are opaque to the engine apart from ordering: a larger offset means
more input consumed. Backtracking is done by calling ``next`` again from an
earlier offset, which is why implementations must be immutable.

Thread Safety:
    Protocols are purely structural; no runtime overhead.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from tokentree.location import Location
from tokentree.tokens import Token


@runtime_checkable
class Input(Protocol):
    """Cursor-based access to a token sequence.

    Implemented by: TokenInput
    Required by: Parser (tokentree.combinators)
    """

    def start(self) -> int: ...
    def next(self, offset: int) -> tuple[int, Token | None]: ...
    def span(self, start: int, end: int) -> Location: ...
    def location_at(self, offset: int) -> Location: ...


@runtime_checkable
class SliceInput(Input, Protocol):
    """Input that also exposes contiguous runs of tokens."""

    def slice(self, start: int, end: int) -> Sequence[Token]: ...
    def slice_from(self, start: int) -> Sequence[Token]: ...
