"""SI unit expressions, parsed from token trees.

Parses expressions such as ``m^2 / kg s^2`` into the exponents of the seven
SI base units. Juxtaposition multiplies, ``/`` divides everything to its
right up to the next ``/``, and ``^`` raises to an integer power, optionally
negative. Parentheses group.

Run it directly to evaluate an expression:

    python examples/units.py "m^2 / kg s^2"

"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from enum import Enum
from functools import reduce

from tokentree import (
    Delimiter,
    Group,
    GroupEnd,
    GroupStart,
    Ident,
    Literal,
    Location,
    Ok,
    ParseError,
    Parser,
    Punct,
    Spacing,
    Token,
    TokenInput,
    TokenStream,
    end,
    filter_map,
    just,
    keyword,
    punct,
    recursive,
)


class UnitName(Enum):
    SECOND = "s"
    METER = "m"
    KILOGRAM = "kg"
    AMPERE = "A"
    KELVIN = "K"
    MOLE = "mol"
    CANDELA = "cd"


@dataclass(frozen=True, slots=True)
class SiUnit:
    """Exponents of the SI base units."""

    seconds: int = 0
    meters: int = 0
    kilograms: int = 0
    amperes: int = 0
    kelvins: int = 0
    mols: int = 0
    candelas: int = 0

    @classmethod
    def unitless(cls) -> SiUnit:
        return cls()

    @classmethod
    def of(cls, name: UnitName) -> SiUnit:
        return cls(**{_FIELD_BY_UNIT[name]: 1})

    def raise_to(self, n: int) -> SiUnit:
        return SiUnit(*(getattr(self, f.name) * n for f in fields(self)))

    def mul(self, other: SiUnit) -> SiUnit:
        return SiUnit(*(getattr(self, f.name) + getattr(other, f.name) for f in fields(self)))

    def div(self, other: SiUnit) -> SiUnit:
        return SiUnit(*(getattr(self, f.name) - getattr(other, f.name) for f in fields(self)))

    def to_token_stream(self) -> TokenStream:
        """Render as a struct expression, ``units::SiUnit { meters: 2, ..units::SiUnit::unitless() }``.

        Only non-zero exponents are listed.
        """
        body: list = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value:
                body += [Ident(f.name), Punct(":"), Literal.integer(value), Punct(",")]
        body += [Punct(".", Spacing.JOINT), Punct("."), *_path("units", "SiUnit", "unitless")]
        body.append(Group(Delimiter.PARENTHESIS, TokenStream()))

        trees = [*_path("units", "SiUnit"), Group(Delimiter.BRACE, TokenStream.of(body))]
        return TokenStream.of(trees)


_FIELD_BY_UNIT = {
    UnitName.SECOND: "seconds",
    UnitName.METER: "meters",
    UnitName.KILOGRAM: "kilograms",
    UnitName.AMPERE: "amperes",
    UnitName.KELVIN: "kelvins",
    UnitName.MOLE: "mols",
    UnitName.CANDELA: "candelas",
}


def _path(*segments: str) -> list:
    trees: list = []
    for i, segment in enumerate(segments):
        if i:
            trees += [Punct(":", Spacing.JOINT), Punct(":")]
        trees.append(Ident(segment))
    return trees


# =============================================================================
# Expression tree
# =============================================================================


@dataclass(frozen=True, slots=True)
class Unit:
    name: UnitName


@dataclass(frozen=True, slots=True)
class Paren:
    inner: UnitExpr


@dataclass(frozen=True, slots=True)
class Pow:
    base: UnitExpr
    exponent: int


@dataclass(frozen=True, slots=True)
class Mul:
    left: UnitExpr
    right: UnitExpr


@dataclass(frozen=True, slots=True)
class Div:
    left: UnitExpr
    right: UnitExpr


UnitExpr = Unit | Paren | Pow | Mul | Div


def evaluate(expr: UnitExpr) -> SiUnit:
    """Reduce an expression tree to base-unit exponents.

    Products and quotients fold into left-nested trees as long as the input,
    so the walk keeps its own stack of pending nodes.
    """
    pending: list[tuple[UnitExpr, bool]] = [(expr, False)]
    values: list[SiUnit] = []
    while pending:
        node, children_done = pending.pop()
        match node:
            case Unit(name):
                values.append(SiUnit.of(name))
            case Paren(inner):
                pending.append((inner, False))
            case Pow(base, exponent):
                if children_done:
                    values.append(values.pop().raise_to(exponent))
                else:
                    pending += [(node, True), (base, False)]
            case Mul(left, right) | Div(left, right):
                if children_done:
                    rhs = values.pop()
                    lhs = values.pop()
                    values.append(lhs.mul(rhs) if isinstance(node, Mul) else lhs.div(rhs))
                else:
                    pending += [(node, True), (right, False), (left, False)]
            case _:
                raise TypeError(f"not a unit expression: {node!r}")
    return values.pop()


# =============================================================================
# Grammar
# =============================================================================


def _exponent(location: Location, token: Token) -> Ok[int] | ParseError:
    literal = token.as_literal()
    if literal is not None and literal.text.isdecimal():
        return Ok(int(literal.text))
    return ParseError.expected_input_found(location, (), token)


def unit_name_parser() -> Parser[UnitName]:
    return reduce(Parser.or_, (keyword(name.value).to(name) for name in UnitName))


def unit_expr_parser() -> Parser[UnitExpr]:
    def build(expr: Parser[UnitExpr]) -> Parser[UnitExpr]:
        atom = unit_name_parser().map(Unit).or_(
            expr.delimited_by(
                just(GroupStart(Delimiter.PARENTHESIS)),
                just(GroupEnd(Delimiter.PARENTHESIS)),
            ).map(Paren)
        )

        exponent = (
            punct("-")
            .to(-1)
            .or_not()
            .then(filter_map(_exponent))
            .map(lambda pair: (pair[0] or 1) * pair[1])
        )
        power = atom.then(punct("^").ignore_then(exponent).or_not()).map(
            lambda pair: pair[0] if pair[1] is None else Pow(pair[0], pair[1])
        )

        product = power.then(power.repeated()).foldl(Mul)
        return product.then(punct("/").ignore_then(product).repeated()).foldl(Div)

    return recursive(build)


def unit(source: str) -> SiUnit:
    """Parse and evaluate a unit expression.

    Raises:
        LexError: If ``source`` is not valid token-tree text
        ParseError: If the tokens do not form a unit expression
        NestingDepthError: If parentheses nest deeper than the configured limit
    """
    expr = unit_expr_parser().then_ignore(end()).parse(TokenInput.from_source(source))
    return evaluate(expr)


if __name__ == "__main__":
    result = unit(" ".join(sys.argv[1:]) or "m^2 / kg s^2")
    print(result)
    print(result.to_token_stream())
