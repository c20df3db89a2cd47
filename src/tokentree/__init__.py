"""
tokentree: parser combinators over token trees.

Flattens nested token trees (identifiers, punctuation, literals and
delimited groups) into an indexable token sequence with joinable source
locations, and provides the primitive parsers grammars are built from.
Zero runtime dependencies.

Quick Start:
    >>> from tokentree import ParseError, TokenInput, end, filter_map, filter_literal, keyword, punct
    >>> parser = keyword("s").ignore_then(punct("^")).ignore_then(filter_map(filter_literal))
    >>> str(parser.then_ignore(end()).parse(TokenInput.from_source("s^2")))
    '2'

Errors:
    >>> try:
    ...     keyword("s").parse(TokenInput.from_source("m"))
    ... except ParseError as err:
    ...     print(err)
    1:1 expected `s`, found `m`

Architecture:
    native/         Host spans, token trees and the source lexer
    location.py     Joinable Location wrapper
    tokens.py       Flat Token variants, equality and narrowing
    flatten.py      Token trees <-> flat (token, location) pairs
    input.py        TokenInput: cursor, slice and span access
    combinators.py  Parser engine
    primitive.py    keyword, punct, joined_punct
"""

from tokentree.combinators import (
    Parser,
    Repeated,
    Result,
    any_token,
    empty,
    end,
    filter_map,
    filter_token,
    just,
    recursive,
)
from tokentree.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from tokentree.errors import (
    CombinatorConfigError,
    LexError,
    NestingDepthError,
    ParseError,
    TokenTreeError,
)
from tokentree.flatten import flatten, unflatten
from tokentree.input import TokenInput, stream_from_tokens
from tokentree.location import Location
from tokentree.native import (
    Delimiter,
    Group,
    Ident,
    Literal,
    NativeSpan,
    Punct,
    Spacing,
    TokenStream,
    TokenTree,
)
from tokentree.primitive import (
    filter_ident,
    filter_literal,
    filter_punct,
    joined_punct,
    keyword,
    punct,
)
from tokentree.protocols import Input, SliceInput
from tokentree.tokens import (
    Err,
    GroupEnd,
    GroupStart,
    IdentToken,
    LiteralToken,
    Ok,
    PunctToken,
    Token,
    TokenKind,
)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
    # Errors
    "CombinatorConfigError",
    "LexError",
    "NestingDepthError",
    "ParseError",
    "TokenTreeError",
    # Host token trees
    "Delimiter",
    "Group",
    "Ident",
    "Literal",
    "NativeSpan",
    "Punct",
    "Spacing",
    "TokenStream",
    "TokenTree",
    # Locations and tokens
    "Err",
    "GroupEnd",
    "GroupStart",
    "IdentToken",
    "LiteralToken",
    "Location",
    "Ok",
    "PunctToken",
    "Token",
    "TokenKind",
    # Flattening and input
    "Input",
    "SliceInput",
    "TokenInput",
    "flatten",
    "stream_from_tokens",
    "unflatten",
    # Combinators
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
    # Primitives
    "filter_ident",
    "filter_literal",
    "filter_punct",
    "joined_punct",
    "keyword",
    "punct",
    "__version__",
]
