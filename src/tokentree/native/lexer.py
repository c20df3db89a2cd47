"""Source text to token trees.

Builds the host's nested token trees from source text, the way a compiler
hands token trees to a syntax extension. Groups are assembled on an explicit
stack of open frames, so nesting depth never turns into Python call depth;
the depth is still capped by ``ParseConfig.max_nesting_depth``.

Thread Safety:
    Lexer instances are single-use. Create one per source string.
    All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from dataclasses import dataclass, field

from tokentree.config import get_parse_config
from tokentree.errors import LexError, NestingDepthError
from tokentree.native.span import NativeSpan
from tokentree.native.tree import (
    PUNCT_CHARS,
    Delimiter,
    Group,
    Ident,
    Literal,
    Punct,
    Spacing,
    TokenStream,
    TokenTree,
)
from tokentree.utils.logger import get_logger

logger = get_logger(__name__)

_OPENERS = {d.open: d for d in (Delimiter.PARENTHESIS, Delimiter.BRACE, Delimiter.BRACKET)}
_CLOSERS = {d.close: d for d in (Delimiter.PARENTHESIS, Delimiter.BRACE, Delimiter.BRACKET)}


@dataclass(slots=True)
class _Frame:
    """An open group waiting for its closing delimiter."""

    delimiter: Delimiter | None
    span_open: NativeSpan | None
    trees: list[TokenTree] = field(default_factory=list)


class TokenTreeLexer:
    """Single-pass lexer producing a TokenStream.

    Usage:
        >>> stream = TokenTreeLexer("f(a, b)").lex()
        >>> [type(tree).__name__ for tree in stream]
        ['Ident', 'Group']

    """

    __slots__ = (
        "_source",
        "_source_len",
        "_source_file",
        "_pos",
        "_lineno",
        "_col",
    )

    def __init__(self, source: str, source_file: str | None = None) -> None:
        self._source = source
        self._source_len = len(source)
        self._source_file = source_file
        self._pos = 0
        self._lineno = 1
        self._col = 1

    def lex(self) -> TokenStream:
        """Tokenize the whole source.

        Raises:
            LexError: On unterminated literals or comments, stray characters,
                and unbalanced delimiters
            NestingDepthError: If groups nest deeper than the configured limit
        """
        limit = get_parse_config().max_nesting_depth
        root = _Frame(None, None)
        stack = [root]

        while True:
            self._skip_trivia()
            if self._pos >= self._source_len:
                break

            char = self._source[self._pos]
            if char in _OPENERS:
                span = self._consume_span(1)
                if limit is not None and len(stack) > limit:
                    raise NestingDepthError(limit, span)
                stack.append(_Frame(_OPENERS[char], span))
            elif char in _CLOSERS:
                span = self._consume_span(1)
                frame = stack[-1]
                if frame.delimiter is None:
                    raise LexError(f"unexpected closing delimiter {char!r}", span)
                if frame.delimiter.close != char:
                    raise LexError(
                        f"mismatched closing delimiter {char!r}, "
                        f"expected {frame.delimiter.close!r}",
                        span,
                    )
                stack.pop()
                group = Group(frame.delimiter, TokenStream.of(frame.trees), frame.span_open, span)
                stack[-1].trees.append(group)
            else:
                stack[-1].trees.append(self._lex_atom(char))

        if len(stack) > 1:
            frame = stack[-1]
            raise LexError(f"unclosed delimiter {frame.delimiter.open!r}", frame.span_open)

        logger.debug("Lexed %d top-level token trees from %s", len(root.trees), self._source_file or "<string>")
        return TokenStream.of(root.trees)

    # =========================================================================
    # Atoms
    # =========================================================================

    def _lex_atom(self, char: str) -> TokenTree:
        if char == '"':
            return self._lex_string()
        if char == "'" and self._at_char_literal():
            return self._lex_character()
        if char.isdigit():
            return self._lex_number()
        if char.isidentifier():
            return self._lex_ident()
        if char in PUNCT_CHARS:
            return self._lex_punct(char)

        span = self._consume_span(1)
        raise LexError(f"unexpected character {char!r}", span)

    def _lex_ident(self) -> Ident:
        start = self._mark()
        while self._pos < self._source_len:
            char = self._source[self._pos]
            if not f"_{char}".isidentifier():
                break
            self._advance()
        name = self._source[start[0] : self._pos]
        return Ident(name, self._span_from(start))

    def _lex_number(self) -> Literal:
        start = self._mark()
        prefixed = self._source.startswith(("0x", "0b", "0o"), self._pos)
        self._consume_word(exponent=not prefixed)
        if not prefixed and self._peek() == "." and self._peek(1).isdigit():
            self._advance()
            self._consume_word()
        return Literal(self._source[start[0] : self._pos], self._span_from(start))

    def _consume_word(self, exponent: bool = True) -> None:
        """Consume digits, letters and underscores, and signed exponents if allowed."""
        while self._pos < self._source_len:
            char = self._source[self._pos]
            if exponent and char in "eE" and self._peek(1) in ("+", "-") and self._peek(2).isdigit():
                self._advance()
                self._advance()
                continue
            if not (char == "_" or char.isalnum()):
                break
            self._advance()

    def _lex_string(self) -> Literal:
        start = self._mark()
        self._advance()
        while self._pos < self._source_len:
            char = self._source[self._pos]
            if char == "\\":
                self._advance()
                if self._pos < self._source_len:
                    self._advance()
                continue
            self._advance()
            if char == '"':
                return Literal(self._source[start[0] : self._pos], self._span_from(start))
        raise LexError("unterminated string literal", self._span_from(start))

    def _at_char_literal(self) -> bool:
        """Check whether the quote at the cursor opens a character literal.

        A quote that does not close one character later is lifetime-style
        punctuation, as in ``'a``.
        """
        if self._peek(1) == "\\":
            return self._source.find("'", self._pos + 3) != -1
        return self._peek(1) not in ("", "'") and self._peek(2) == "'"

    def _lex_character(self) -> Literal:
        start = self._mark()
        self._advance()
        if self._peek() == "\\":
            self._advance()
        if self._pos < self._source_len:
            self._advance()
        while self._pos < self._source_len and self._source[self._pos] != "'":
            self._advance()
        if self._pos >= self._source_len:
            raise LexError("unterminated character literal", self._span_from(start))
        self._advance()
        return Literal(self._source[start[0] : self._pos], self._span_from(start))

    def _lex_punct(self, char: str) -> Punct:
        span = self._consume_span(1)
        following = self._peek()
        joint = following in PUNCT_CHARS and not self._at_comment()
        if following == "'" and self._at_char_literal():
            joint = False
        return Punct(char, Spacing.JOINT if joint else Spacing.ALONE, span)

    # =========================================================================
    # Trivia
    # =========================================================================

    def _at_comment(self) -> bool:
        return self._source.startswith(("//", "/*"), self._pos)

    def _skip_trivia(self) -> None:
        while self._pos < self._source_len:
            char = self._source[self._pos]
            if char.isspace():
                self._advance()
            elif self._source.startswith("//", self._pos):
                while self._pos < self._source_len and self._source[self._pos] != "\n":
                    self._advance()
            elif self._source.startswith("/*", self._pos):
                start = self._mark()
                end = self._source.find("*/", self._pos + 2)
                if end == -1:
                    raise LexError("unterminated block comment", self._span_from(start))
                while self._pos < end + 2:
                    self._advance()
            else:
                return

    # =========================================================================
    # Position tracking
    # =========================================================================

    def _peek(self, ahead: int = 0) -> str:
        pos = self._pos + ahead
        return self._source[pos] if pos < self._source_len else ""

    def _advance(self) -> None:
        if self._source[self._pos] == "\n":
            self._lineno += 1
            self._col = 1
        else:
            self._col += 1
        self._pos += 1

    def _mark(self) -> tuple[int, int, int]:
        return (self._pos, self._lineno, self._col)

    def _span_from(self, start: tuple[int, int, int]) -> NativeSpan:
        pos, lineno, col = start
        return NativeSpan(
            start=pos,
            end=self._pos,
            lineno=lineno,
            col_offset=col,
            end_lineno=self._lineno,
            end_col_offset=self._col,
            source_file=self._source_file,
        )

    def _consume_span(self, count: int) -> NativeSpan:
        start = self._mark()
        for _ in range(count):
            self._advance()
        return self._span_from(start)


def lex_token_stream(source: str, source_file: str | None = None) -> TokenStream:
    """Tokenize ``source`` into a TokenStream.

    Args:
        source: Source text
        source_file: Optional source file path recorded in every span

    Raises:
        LexError: If the source cannot be tokenized
        NestingDepthError: If groups nest deeper than the configured limit
    """
    return TokenTreeLexer(source, source_file).lex()
