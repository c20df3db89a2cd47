"""Flattening token trees into token sequences.

A token stream is a tree: groups contain further token trees. Combinator
parsers want a flat, indexable sequence instead, so each group is replaced
by a GroupStart marker, its flattened contents, and a GroupEnd marker:

    f(a, [b])   ->   f ( a , [ b ] )

Markers carry the group's delimiter and the location of the delimiter
character they stand for, so a sequence can always be turned back into the
original tree (see ``unflatten``).

Traversal keeps an explicit stack of open groups instead of recursing, so
deeply nested input only costs heap memory.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from tokentree.location import Location
from tokentree.native.span import NativeSpan
from tokentree.native.tree import (
    Delimiter,
    Group,
    Ident,
    Punct,
    TokenStream,
    TokenTree,
)
from tokentree.tokens import GroupEnd, GroupStart, IdentToken, LiteralToken, PunctToken, Token
from tokentree.utils.logger import get_logger

logger = get_logger(__name__)


def flatten(stream: TokenStream) -> list[tuple[Token, Location]]:
    """Flatten a token stream into (token, location) pairs.

    Every group becomes a GroupStart at its opening delimiter, its
    flattened contents, then a GroupEnd at its closing delimiter. Both
    markers carry the group's delimiter. Never fails.

    Example:
        >>> [str(token) for token, _ in flatten(TokenStream.from_str("f(a)"))]
        ['f', '(', 'a', ')']

    """
    out: list[tuple[Token, Location]] = []
    stack: list[tuple[Iterator[TokenTree], Group | None]] = [(iter(stream), None)]

    while stack:
        trees, group = stack[-1]
        tree = next(trees, None)

        if tree is None:
            stack.pop()
            if group is not None:
                out.append((GroupEnd(group.delimiter), Location.from_native(group.span_close)))
            continue

        if isinstance(tree, Group):
            out.append((GroupStart(tree.delimiter), Location.from_native(tree.span_open)))
            stack.append((iter(tree.stream), tree))
        elif isinstance(tree, Ident):
            out.append((IdentToken(tree), Location.from_native(tree.span)))
        elif isinstance(tree, Punct):
            out.append((PunctToken(tree), Location.from_native(tree.span)))
        else:
            out.append((LiteralToken(tree), Location.from_native(tree.span)))

    logger.debug("Flattened %d token trees into %d tokens", len(stream), len(out))
    return out


@dataclass(slots=True)
class _OpenGroup:
    delimiter: Delimiter
    span_open: NativeSpan
    trees: list[TokenTree] = field(default_factory=list)


def unflatten(pairs: Iterable[tuple[Token, Location]]) -> TokenStream:
    """Rebuild the token stream that ``flatten`` produced.

    Raises:
        ValueError: If the group markers are unbalanced or mismatched
    """
    root: list[TokenTree] = []
    stack: list[_OpenGroup] = []

    for token, location in pairs:
        trees = stack[-1].trees if stack else root
        if isinstance(token, GroupStart):
            stack.append(_OpenGroup(token.delimiter, location.to_native()))
        elif isinstance(token, GroupEnd):
            if not stack or stack[-1].delimiter is not token.delimiter:
                raise ValueError(f"unbalanced group end {token!r} at {location}")
            frame = stack.pop()
            group = Group(frame.delimiter, TokenStream.of(frame.trees), frame.span_open, location.to_native())
            (stack[-1].trees if stack else root).append(group)
        else:
            trees.append(token.inner)

    if stack:
        raise ValueError(f"unclosed group {stack[-1].delimiter.name}")
    return TokenStream.of(root)
