"""Exception classes for tokentree.

Provides standardized exceptions for error handling throughout tokentree.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tokentree.location import Location
    from tokentree.native.span import NativeSpan
    from tokentree.tokens import Token


class TokenTreeError(Exception):
    """Base exception for all tokentree errors.

    Subclass this for specific error categories.
    """

    pass


class LexError(TokenTreeError):
    """Error while building a token tree from source text.

    Raised by the native lexer for unterminated literals, stray characters
    and unbalanced delimiters.
    """

    def __init__(self, message: str, span: NativeSpan | None = None) -> None:
        """Initialize lex error with optional span.

        Args:
            message: Error description
            span: Where in the source the error occurred (optional)
        """
        self.message = message
        self.span = span
        prefix = f"{span} " if span is not None else ""
        super().__init__(f"{prefix}{message}")


class NestingDepthError(TokenTreeError):
    """Input nested deeper than ParseConfig.max_nesting_depth allows.

    Raised by the native lexer for deeply nested groups, and by recursive
    parsers that re-enter themselves more often than the budget allows.
    """

    def __init__(self, limit: int, span: NativeSpan | None = None) -> None:
        self.limit = limit
        self.span = span
        prefix = f"{span} " if span is not None else ""
        super().__init__(f"{prefix}nested deeper than {limit} levels")


class CombinatorConfigError(TokenTreeError, ValueError):
    """A combinator was built with invalid arguments.

    This is a programming error in the grammar, raised when the combinator
    is constructed and before any input is examined.
    """

    pass


class ParseError(TokenTreeError):
    """A token did not satisfy what the parser expected.

    Carries structured data rather than just a message so that callers can
    render their own diagnostics.

    Attributes:
        location: Where the failure happened (never None)
        expected: Tokens that would have been accepted; None stands for
            end of input. May be empty when unspecified.
        found: The token actually found, or None at end of input
        offset: Cursor position of the failure, used to rank errors from
            alternative branches
        label: Optional name of the grammar rule that failed
    """

    def __init__(
        self,
        location: Location,
        expected: Iterable[Token | None] = (),
        found: Token | None = None,
        *,
        offset: int | None = None,
        label: str | None = None,
    ) -> None:
        self.location = location
        self.expected: frozenset[Token | None] = frozenset(expected)
        self.found = found
        self.offset = offset
        self.label = label
        super().__init__(self.message)

    @classmethod
    def expected_input_found(
        cls,
        location: Location,
        expected: Iterable[Token | None],
        found: Token | None,
    ) -> ParseError:
        """Create an error for an unexpected token (or end of input)."""
        return cls(location, expected, found)

    @property
    def message(self) -> str:
        """Human readable description including the location prefix."""
        parts = [str(self.location)]
        if self.label:
            parts.append(f"in {self.label}:")
        if self.expected:
            descriptions = sorted(_describe(token) for token in self.expected)
            if len(descriptions) == 1:
                parts.append(f"expected {descriptions[0]},")
            else:
                parts.append(f"expected one of {', '.join(descriptions)},")
        parts.append(f"found {_describe(self.found)}")
        return " ".join(parts)

    def at_offset(self, offset: int) -> ParseError:
        """Return this error positioned at ``offset`` unless it already has one."""
        if self.offset is not None:
            return self
        return ParseError(
            self.location, self.expected, self.found, offset=offset, label=self.label
        )

    def with_label(self, label: str) -> ParseError:
        """Return a copy of this error attributed to the rule ``label``."""
        return ParseError(
            self.location, self.expected, self.found, offset=self.offset, label=label
        )

    def merge(self, other: ParseError) -> ParseError:
        """Combine two errors reported at the same offset.

        Expected sets are unioned; location, found token and label come from
        this error, falling back to ``other``'s label.
        """
        return ParseError(
            self.location,
            self.expected | other.expected,
            self.found,
            offset=self.offset,
            label=self.label or other.label,
        )


def _describe(token: Token | None) -> str:
    if token is None:
        return "end of input"
    return token.describe()
