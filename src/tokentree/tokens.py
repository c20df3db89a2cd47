"""Flat tokens for combinator parsing.

A Token is one element of the flattened token sequence: a literal, an
identifier, a punctuation character, or the start/end marker of a group.
Tokens are a closed set of variants that share one base class.

Equality is semantic rather than structural:
- literals compare by their source text,
- identifiers compare by name,
- punctuation compares by character and spacing,
- group markers compare by delimiter.
Spans never take part in equality or hashing, and tokens of different
variants are never equal.

Narrowing:
``as_<kind>()`` returns the inner value or None. ``into_<kind>()`` returns
``Ok(inner)`` or ``Err(token)`` holding the original token, so a failed
match can hand the token back to an alternative branch unchanged.

Thread Safety:
    Tokens are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar, Generic, TypeVar

from tokentree.native.span import NativeSpan
from tokentree.native.tree import Delimiter, Ident, Literal, Punct, Spacing

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful narrowing or filtering."""

    value: T

    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    """Failed narrowing; ``token`` is the original token, untouched."""

    token: Token

    def is_ok(self) -> bool:
        return False


class TokenKind(Enum):
    """The variants of Token."""

    LITERAL = auto()
    IDENT = auto()
    PUNCT = auto()
    START_DELIM = auto()
    END_DELIM = auto()


class Token:
    """Base class of the flat token variants."""

    __slots__ = ()

    kind: ClassVar[TokenKind]
    _native_types: ClassVar[tuple[type, ...]] = ()

    @property
    def inner(self) -> Any:
        """The wrapped host value (or delimiter)."""
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Token):
            return self.kind is other.kind and self.inner == other.inner
        if isinstance(other, self._native_types):
            return self.inner == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.inner)

    def describe(self) -> str:
        """Render the token for diagnostics."""
        return f"`{self}`"

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def is_literal(self) -> bool:
        return self.kind is TokenKind.LITERAL

    def is_ident(self) -> bool:
        return self.kind is TokenKind.IDENT

    def is_punct(self) -> bool:
        return self.kind is TokenKind.PUNCT

    def is_start_delim(self) -> bool:
        return self.kind is TokenKind.START_DELIM

    def is_end_delim(self) -> bool:
        return self.kind is TokenKind.END_DELIM

    def is_delim(self) -> bool:
        """Whether this token is a group marker, start or end."""
        return self.is_start_delim() or self.is_end_delim()

    # -------------------------------------------------------------------------
    # Narrowing
    # -------------------------------------------------------------------------

    def as_literal(self) -> Literal | None:
        return self.inner if self.is_literal() else None

    def as_ident(self) -> Ident | None:
        return self.inner if self.is_ident() else None

    def as_punct(self) -> Punct | None:
        return self.inner if self.is_punct() else None

    def as_start_delim(self) -> Delimiter | None:
        return self.inner if self.is_start_delim() else None

    def as_end_delim(self) -> Delimiter | None:
        return self.inner if self.is_end_delim() else None

    def as_delim(self) -> Delimiter | None:
        return self.inner if self.is_delim() else None

    def into_literal(self) -> Ok[Literal] | Err:
        return Ok(self.inner) if self.is_literal() else Err(self)

    def into_ident(self) -> Ok[Ident] | Err:
        return Ok(self.inner) if self.is_ident() else Err(self)

    def into_punct(self) -> Ok[Punct] | Err:
        return Ok(self.inner) if self.is_punct() else Err(self)

    def into_start_delim(self) -> Ok[Delimiter] | Err:
        return Ok(self.inner) if self.is_start_delim() else Err(self)

    def into_end_delim(self) -> Ok[Delimiter] | Err:
        return Ok(self.inner) if self.is_end_delim() else Err(self)

    def into_delim(self) -> Ok[Delimiter] | Err:
        return Ok(self.inner) if self.is_delim() else Err(self)


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class LiteralToken(Token):
    """A literal such as ``1`` or ``"foo"``."""

    literal: Literal

    kind: ClassVar[TokenKind] = TokenKind.LITERAL
    _native_types: ClassVar[tuple[type, ...]] = (Literal,)

    @classmethod
    def new(cls, text: str) -> LiteralToken:
        return cls(Literal(text, NativeSpan.mixed_site()))

    @property
    def inner(self) -> Literal:
        return self.literal

    def __str__(self) -> str:
        return self.literal.text

    def __repr__(self) -> str:
        return f"LiteralToken({self.literal.text!r})"


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class IdentToken(Token):
    """An identifier or keyword."""

    ident: Ident

    kind: ClassVar[TokenKind] = TokenKind.IDENT
    _native_types: ClassVar[tuple[type, ...]] = (Ident,)

    @classmethod
    def new(cls, name: str) -> IdentToken:
        return cls(Ident(name, NativeSpan.mixed_site()))

    @property
    def inner(self) -> Ident:
        return self.ident

    def __str__(self) -> str:
        return self.ident.name

    def __repr__(self) -> str:
        return f"IdentToken({self.ident.name!r})"


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class PunctToken(Token):
    """A single punctuation character, with its spacing."""

    punct: Punct

    kind: ClassVar[TokenKind] = TokenKind.PUNCT
    _native_types: ClassVar[tuple[type, ...]] = (Punct,)

    @classmethod
    def new(cls, char: str, spacing: Spacing = Spacing.ALONE) -> PunctToken:
        return cls(Punct(char, spacing, NativeSpan.mixed_site()))

    @property
    def inner(self) -> Punct:
        return self.punct

    def describe(self) -> str:
        if self.punct.spacing is Spacing.JOINT:
            return f"`{self.punct.char}` (joint)"
        return f"`{self.punct.char}`"

    def __str__(self) -> str:
        return self.punct.char

    def __repr__(self) -> str:
        return f"PunctToken({self.punct.char!r}, {self.punct.spacing.name})"


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class GroupStart(Token):
    """Opening marker of a flattened group."""

    delimiter: Delimiter

    kind: ClassVar[TokenKind] = TokenKind.START_DELIM

    @property
    def inner(self) -> Delimiter:
        return self.delimiter

    def describe(self) -> str:
        if self.delimiter is Delimiter.NONE:
            return "start of invisible group"
        return f"`{self.delimiter.open}`"

    def __str__(self) -> str:
        return self.delimiter.open

    def __repr__(self) -> str:
        return f"GroupStart({self.delimiter.name})"


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class GroupEnd(Token):
    """Closing marker of a flattened group."""

    delimiter: Delimiter

    kind: ClassVar[TokenKind] = TokenKind.END_DELIM

    @property
    def inner(self) -> Delimiter:
        return self.delimiter

    def describe(self) -> str:
        if self.delimiter is Delimiter.NONE:
            return "end of invisible group"
        return f"`{self.delimiter.close}`"

    def __str__(self) -> str:
        return self.delimiter.close

    def __repr__(self) -> str:
        return f"GroupEnd({self.delimiter.name})"


__all__ = [
    "Err",
    "GroupEnd",
    "GroupStart",
    "IdentToken",
    "LiteralToken",
    "Ok",
    "PunctToken",
    "Token",
    "TokenKind",
]
