"""Three tokens: an identifier, a punctuation character, an identifier.

The smallest useful grammar, built from ``filter_token`` alone.

    python examples/simple_expr.py "a + b"

"""

import sys
from dataclasses import dataclass

from tokentree import Parser, Token, TokenInput, filter_token


@dataclass(frozen=True, slots=True)
class SimpleExpr:
    left: Token
    middle: Token
    right: Token


def parser() -> Parser[SimpleExpr]:
    return (
        filter_token(Token.is_ident)
        .then(filter_token(Token.is_punct))
        .then(filter_token(Token.is_ident))
        .map(lambda parts: SimpleExpr(parts[0][0], parts[0][1], parts[1]))
    )


if __name__ == "__main__":
    print(parser().parse(TokenInput.from_source(" ".join(sys.argv[1:]) or "a + b")))
