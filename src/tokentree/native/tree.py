"""Host token trees.

The host represents syntax as a sequence of token trees: identifiers,
punctuation characters, literals, and delimited groups that contain further
token trees. These types are what an extension receives before adaptation.

Thread Safety:
    All types here are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from tokentree.native.span import NativeSpan

PUNCT_CHARS = frozenset("=<>!~+-*/%^&|@.,;:#$?'")

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


class Spacing(Enum):
    """Whether a punctuation character is glued to the next one."""

    ALONE = "alone"
    JOINT = "joint"


class Delimiter(Enum):
    """The brackets enclosing a group.

    NONE is an invisible delimiter: the group exists in the tree but has no
    characters in the source.
    """

    PARENTHESIS = ("(", ")")
    BRACE = ("{", "}")
    BRACKET = ("[", "]")
    NONE = ("", "")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]


@dataclass(frozen=True, slots=True, eq=False)
class Ident:
    """An identifier or keyword.

    Identifiers compare equal to other identifiers, and to plain strings,
    by name alone; the span never takes part in comparison.
    """

    name: str
    span: NativeSpan = field(default_factory=NativeSpan.call_site)

    def __post_init__(self) -> None:
        if not self.name.isidentifier():
            raise ValueError(f"{self.name!r} is not a valid identifier")

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Ident):
            return self.name == other.name
        if isinstance(other, str):
            return self.name == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name)


@dataclass(frozen=True, slots=True)
class Punct:
    """A single punctuation character and its spacing."""

    char: str
    spacing: Spacing = Spacing.ALONE
    span: NativeSpan = field(default_factory=NativeSpan.call_site, compare=False)

    def __post_init__(self) -> None:
        if len(self.char) != 1 or self.char not in PUNCT_CHARS:
            raise ValueError(f"{self.char!r} is not a punctuation character")

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True, slots=True)
class Literal:
    """A literal token: number, string or character, kept as raw source text.

    Two literals are equal when their source text is equal.
    """

    text: str
    span: NativeSpan = field(default_factory=NativeSpan.call_site, compare=False)

    def __str__(self) -> str:
        return self.text

    @classmethod
    def integer(cls, value: int, span: NativeSpan | None = None) -> Literal:
        return cls(str(value), span or NativeSpan.call_site())

    @classmethod
    def float_(cls, value: float, span: NativeSpan | None = None) -> Literal:
        text = repr(value)
        if text in ("inf", "-inf", "nan"):
            raise ValueError(f"{value!r} cannot be written as a literal")
        if "." not in text and "e" not in text:
            text += ".0"
        return cls(text, span or NativeSpan.call_site())

    @classmethod
    def string(cls, value: str, span: NativeSpan | None = None) -> Literal:
        body = "".join(_STRING_ESCAPES.get(char, char) for char in value)
        return cls(f'"{body}"', span or NativeSpan.call_site())

    @classmethod
    def character(cls, value: str, span: NativeSpan | None = None) -> Literal:
        if len(value) != 1:
            raise ValueError("character literals hold exactly one character")
        if value == "'":
            body = "\\'"
        elif value == '"':
            body = '"'
        else:
            body = _STRING_ESCAPES.get(value, value)
        return cls(f"'{body}'", span or NativeSpan.call_site())


@dataclass(frozen=True, slots=True)
class Group:
    """A delimited group of token trees, such as ``(a + b)``."""

    delimiter: Delimiter
    stream: TokenStream
    span_open: NativeSpan = field(default_factory=NativeSpan.call_site, compare=False)
    span_close: NativeSpan = field(default_factory=NativeSpan.call_site, compare=False)

    @property
    def span(self) -> NativeSpan:
        """Span of the whole group, from open to close delimiter."""
        return self.span_open.join(self.span_close) or self.span_open

    def __str__(self) -> str:
        return f"{self.delimiter.open}{self.stream}{self.delimiter.close}"


TokenTree = Group | Ident | Punct | Literal


@dataclass(frozen=True, slots=True)
class TokenStream:
    """An immutable sequence of token trees."""

    trees: tuple[TokenTree, ...] = ()

    @classmethod
    def of(cls, trees: Iterable[TokenTree]) -> TokenStream:
        return cls(tuple(trees))

    @classmethod
    def from_str(cls, source: str, source_file: str | None = None) -> TokenStream:
        """Lex ``source`` into a token stream.

        Raises:
            LexError: If the source cannot be tokenized
        """
        # Imported here to avoid a circular import at module load
        from tokentree.native.lexer import lex_token_stream

        return lex_token_stream(source, source_file=source_file)

    def __iter__(self) -> Iterator[TokenTree]:
        return iter(self.trees)

    def __len__(self) -> int:
        return len(self.trees)

    def __getitem__(self, index: int) -> TokenTree:
        return self.trees[index]

    def is_empty(self) -> bool:
        return not self.trees

    def __str__(self) -> str:
        out: list[str] = []
        for i, tree in enumerate(self.trees):
            out.append(str(tree))
            joint = isinstance(tree, Punct) and tree.spacing is Spacing.JOINT
            if i + 1 < len(self.trees) and not joint:
                out.append(" ")
        return "".join(out)
