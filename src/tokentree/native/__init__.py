"""The host side: spans, token trees, and a lexer that builds them.

Everything above this package treats these types as opaque input handed
over by the host.

Architecture:
native/
├── __init__.py    # Re-exports
├── span.py        # NativeSpan (real and synthetic source ranges)
├── tree.py        # Ident, Punct, Literal, Group, TokenStream
└── lexer.py       # TokenTreeLexer, lex_token_stream

Usage:
    >>> from tokentree.native import TokenStream
    >>> stream = TokenStream.from_str("m^2 / (kg s)")
    >>> len(stream)
    5

"""

from tokentree.native.lexer import TokenTreeLexer, lex_token_stream
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

__all__ = [
    "PUNCT_CHARS",
    "Delimiter",
    "Group",
    "Ident",
    "Literal",
    "NativeSpan",
    "Punct",
    "Spacing",
    "TokenStream",
    "TokenTree",
    "TokenTreeLexer",
    "lex_token_stream",
]
