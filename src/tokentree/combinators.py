"""A small parser-combinator engine over the Input protocol.

A Parser wraps a pure function ``(input, offset) -> Result``. Combinators
build bigger parsers out of smaller ones; backtracking is simply running a
parser again from an earlier offset, which is safe because inputs are
immutable.

Result contract:
- On success, ``offset`` is where the next parser should continue.
- On failure, ``offset`` is the offset the parser was started at. Nothing
  is ever consumed by a failed parser.

Errors from alternatives that were tried and abandoned are not thrown away:
each result carries the furthest error seen so far (``alt`` on success).
When the overall parse fails, the error that got furthest into the input is
reported, with expected sets of equally far errors merged. This is what
makes ``s ^ "abc"`` report the literal instead of the ``^``.

Usage:
    >>> from tokentree import TokenInput, keyword, punct, filter_map, filter_ident
    >>> assign = keyword("let").ignore_then(filter_map(filter_ident)).then_ignore(punct("="))
    >>> assign.parse(TokenInput.from_source("let x ="))
    Ident(name='x', ...)

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from contextvars import ContextVar
from dataclasses import dataclass
from functools import reduce
from typing import Any, Generic, TypeVar

from tokentree.config import get_parse_config
from tokentree.errors import NestingDepthError, ParseError
from tokentree.location import Location
from tokentree.protocols import Input
from tokentree.tokens import Ok, Token
from tokentree.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")

# Active re-entries of recursive parsers in the current context
_recursion_depth: ContextVar[int] = ContextVar("tokentree_recursion_depth", default=0)


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Outcome of running a parser at one offset.

    Attributes:
        offset: Next offset on success, start offset on failure
        value: Parsed value (None on failure)
        error: The failure, or None on success
        alt: On success, the furthest error met by abandoned alternatives
    """

    offset: int
    value: T | None = None
    error: ParseError | None = None
    alt: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _furthest(a: ParseError | None, b: ParseError | None) -> ParseError | None:
    """Pick the error that got further into the input; merge ties."""
    if a is None:
        return b
    if b is None:
        return a
    if a.offset > b.offset:
        return a
    if b.offset > a.offset:
        return b
    return a.merge(b)


def _failure(offset: int, error: ParseError) -> Result[Any]:
    return Result(offset, error=error)


def _error_at(inp: Input, offset: int, expected: Iterable[Token | None] = ()) -> ParseError:
    _, found = inp.next(offset)
    return ParseError(inp.location_at(offset), expected, found, offset=offset)


class Parser(Generic[T]):
    """A composable parser producing values of type T."""

    __slots__ = ("_run",)

    def __init__(self, run: Callable[[Input, int], Result[T]]) -> None:
        self._run = run

    def run(self, inp: Input, offset: int) -> Result[T]:
        """Run this parser at ``offset``."""
        return self._run(inp, offset)

    def parse_result(self, inp: Input) -> Result[T]:
        """Run from the start of ``inp``; the error, if any, is the furthest one."""
        return self._run(inp, inp.start())

    def parse(self, inp: Input) -> T:
        """Run from the start of ``inp`` and return the value.

        The whole input does not have to be consumed; add ``then_ignore(end())``
        for that.

        Raises:
            ParseError: The furthest failure, if the parser did not succeed
            NestingDepthError: If a recursive parser nests deeper than the
                configured budget
        """
        result = self.parse_result(inp)
        if result.error is not None:
            logger.debug("Parse failed: %s", result.error)
            raise result.error
        return result.value  # type: ignore[return-value]

    # =========================================================================
    # Sequencing
    # =========================================================================

    def _sequence(self, other: Parser[U], combine: Callable[[T, U], Any]) -> Parser[Any]:
        def run(inp: Input, offset: int) -> Result[Any]:
            first = self._run(inp, offset)
            if first.error is not None:
                return first
            second = other._run(inp, first.offset)
            if second.error is not None:
                return _failure(offset, _furthest(second.error, first.alt))
            return Result(
                second.offset,
                combine(first.value, second.value),
                alt=_furthest(first.alt, second.alt),
            )

        return Parser(run)

    def then(self, other: Parser[U]) -> Parser[tuple[T, U]]:
        """Run ``self`` then ``other``; output both values as a tuple."""
        return self._sequence(other, lambda a, b: (a, b))

    def ignore_then(self, other: Parser[U]) -> Parser[U]:
        return self._sequence(other, lambda a, b: b)

    def then_ignore(self, other: Parser[Any]) -> Parser[T]:
        return self._sequence(other, lambda a, b: a)

    def chain(self, other: Parser[Any]) -> Parser[list[Any]]:
        """Run ``self`` then ``other`` and concatenate their outputs into a list.

        List outputs are spliced in; any other output is appended as one item.
        """

        def as_list(value: Any) -> list[Any]:
            return list(value) if isinstance(value, list) else [value]

        return self._sequence(other, lambda a, b: as_list(a) + as_list(b))

    def delimited_by(self, start: Parser[Any], end: Parser[Any]) -> Parser[T]:
        return start.ignore_then(self).then_ignore(end)

    # =========================================================================
    # Alternation
    # =========================================================================

    def or_(self, other: Parser[U]) -> Parser[T | U]:
        """Try ``self``; if it fails, try ``other`` from the same offset."""

        def run(inp: Input, offset: int) -> Result[Any]:
            first = self._run(inp, offset)
            if first.error is None:
                return first
            second = other._run(inp, offset)
            if second.error is None:
                return Result(second.offset, second.value, alt=_furthest(first.error, second.alt))
            return _failure(offset, _furthest(first.error, second.error))

        return Parser(run)

    __or__ = or_

    def or_not(self) -> Parser[T | None]:
        """Make this parser optional; output None when it does not match."""

        def run(inp: Input, offset: int) -> Result[Any]:
            result = self._run(inp, offset)
            if result.error is None:
                return result
            return Result(offset, None, alt=result.error)

        return Parser(run)

    # =========================================================================
    # Mapping
    # =========================================================================

    def map(self, fn: Callable[[T], U]) -> Parser[U]:
        def run(inp: Input, offset: int) -> Result[Any]:
            result = self._run(inp, offset)
            if result.error is not None:
                return result
            return Result(result.offset, fn(result.value), alt=result.alt)  # type: ignore[arg-type]

        return Parser(run)

    def to(self, value: U) -> Parser[U]:
        return self.map(lambda _: value)

    def ignored(self) -> Parser[None]:
        return self.map(lambda _: None)

    def map_with_location(self, fn: Callable[[T, Location], U]) -> Parser[U]:
        """Like ``map``, also passing the location of the consumed tokens."""

        def run(inp: Input, offset: int) -> Result[Any]:
            result = self._run(inp, offset)
            if result.error is not None:
                return result
            location = inp.span(offset, result.offset)
            return Result(result.offset, fn(result.value, location), alt=result.alt)  # type: ignore[arg-type]

        return Parser(run)

    def try_map(self, fn: Callable[[T, Location], Ok[U] | ParseError]) -> Parser[U]:
        """Validate and convert the output; a returned ParseError fails the parser."""

        def run(inp: Input, offset: int) -> Result[Any]:
            result = self._run(inp, offset)
            if result.error is not None:
                return result
            outcome = fn(result.value, inp.span(offset, result.offset))  # type: ignore[arg-type]
            if isinstance(outcome, ParseError):
                return _failure(offset, _furthest(outcome.at_offset(offset), result.alt))
            return Result(result.offset, outcome.value, alt=result.alt)

        return Parser(run)

    def foldl(self, fn: Callable[[Any, Any], Any]) -> Parser[Any]:
        """Fold a ``(first, [rest...])`` output from the left."""
        return self.map(lambda pair: reduce(fn, pair[1], pair[0]))

    def labelled(self, label: str) -> Parser[T]:
        """Attribute failures of this parser to the rule ``label``."""

        def run(inp: Input, offset: int) -> Result[Any]:
            result = self._run(inp, offset)
            if result.error is not None and result.error.label is None:
                return _failure(offset, result.error.with_label(label))
            return result

        return Parser(run)

    # =========================================================================
    # Repetition
    # =========================================================================

    def repeated(self) -> Repeated[T]:
        """Match this parser zero or more times; output a list."""
        return Repeated(self)


class Repeated(Parser[list[T]]):
    """Repetition with optional bounds, output as a list.

    Stops at the first failure, at ``at_most`` items, or after an item that
    consumed nothing (which would otherwise repeat forever).
    """

    __slots__ = ("_item", "_at_least", "_at_most")

    def __init__(self, item: Parser[T], at_least: int = 0, at_most: int | None = None) -> None:
        super().__init__(self._repeat)
        self._item = item
        self._at_least = at_least
        self._at_most = at_most

    def at_least(self, count: int) -> Repeated[T]:
        return Repeated(self._item, count, self._at_most)

    def at_most(self, count: int) -> Repeated[T]:
        return Repeated(self._item, self._at_least, count)

    def exactly(self, count: int) -> Repeated[T]:
        return Repeated(self._item, count, count)

    def _repeat(self, inp: Input, offset: int) -> Result[list[T]]:
        values: list[T] = []
        position = offset
        alt: ParseError | None = None

        while self._at_most is None or len(values) < self._at_most:
            result = self._item._run(inp, position)
            if result.error is not None:
                alt = _furthest(alt, result.error)
                break
            alt = _furthest(alt, result.alt)
            values.append(result.value)  # type: ignore[arg-type]
            if result.offset == position:
                break
            position = result.offset

        if len(values) < self._at_least:
            return _failure(offset, alt or _error_at(inp, position))
        return Result(position, values, alt=alt)


# =============================================================================
# Primitive parsers
# =============================================================================


def any_token() -> Parser[Token]:
    """Match any single token; fail only at end of input."""

    def run(inp: Input, offset: int) -> Result[Token]:
        next_offset, token = inp.next(offset)
        if token is None:
            return _failure(offset, _error_at(inp, offset))
        return Result(next_offset, token)

    return Parser(run)


def just(expected: Token) -> Parser[Token]:
    """Match one token equal to ``expected``."""
    return filter_token(lambda token: token == expected, expected=(expected,))


def filter_token(predicate: Callable[[Token], bool], expected: Iterable[Token] = ()) -> Parser[Token]:
    """Match one token for which ``predicate`` holds."""
    expected = tuple(expected)

    def run(inp: Input, offset: int) -> Result[Token]:
        next_offset, token = inp.next(offset)
        if token is None or not predicate(token):
            return _failure(offset, _error_at(inp, offset, expected))
        return Result(next_offset, token)

    return Parser(run)


def filter_map(
    fn: Callable[[Location, Token], Ok[U] | ParseError],
    expected: Iterable[Token] = (),
) -> Parser[U]:
    """Match one token and convert it with ``fn``.

    ``fn`` receives the token's location and the token, and returns either
    ``Ok(value)`` or a ParseError. ``expected`` is reported when the input
    has already ended.
    """
    expected = tuple(expected)

    def run(inp: Input, offset: int) -> Result[U]:
        next_offset, token = inp.next(offset)
        if token is None:
            return _failure(offset, _error_at(inp, offset, expected))
        outcome = fn(inp.span(offset, next_offset), token)
        if isinstance(outcome, ParseError):
            return _failure(offset, outcome.at_offset(offset))
        return Result(next_offset, outcome.value)

    return Parser(run)


def end() -> Parser[None]:
    """Match the end of input."""

    def run(inp: Input, offset: int) -> Result[None]:
        _, token = inp.next(offset)
        if token is not None:
            return _failure(offset, _error_at(inp, offset, (None,)))
        return Result(offset, None)

    return Parser(run)


def empty() -> Parser[None]:
    """Match nothing, always successfully."""
    return Parser(lambda inp, offset: Result(offset, None))


def recursive(build: Callable[[Parser[T]], Parser[T]]) -> Parser[T]:
    """Define a parser that refers to itself.

    ``build`` receives a placeholder for the parser being defined and returns
    its definition.

    Each parser nesting level costs Python stack frames, so re-entry is
    capped by ``ParseConfig.max_nesting_depth``: more than that many active
    re-entries raise NestingDepthError at the current token. With one
    re-entry per group, this matches the lexer's group nesting limit.

    Example:
        >>> nested = recursive(lambda inner: inner.delimited_by(
        ...     just(GroupStart(Delimiter.PARENTHESIS)),
        ...     just(GroupEnd(Delimiter.PARENTHESIS)),
        ... ).or_(filter_map(filter_ident)))

    """
    definition: list[Parser[T]] = []

    def run(inp: Input, offset: int) -> Result[T]:
        depth = _recursion_depth.get()
        limit = get_parse_config().max_nesting_depth
        if limit is not None and depth > limit:
            raise NestingDepthError(limit, inp.location_at(offset).to_native())
        token = _recursion_depth.set(depth + 1)
        try:
            return definition[0]._run(inp, offset)
        finally:
            _recursion_depth.reset(token)

    placeholder: Parser[T] = Parser(run)
    definition.append(build(placeholder))
    return placeholder


__all__ = [
    "Parser",
    "Repeated",
    "Result",
    "any_token",
    "empty",
    "end",
    "filter_map",
    "filter_token",
    "just",
    "recursive",
]
