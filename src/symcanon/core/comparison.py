"""
The total order that fixes operand order in commutative operations.
"""
import fractions
import functools
import typing

from symcanon.core import expression
from symcanon.core.expression import Kind


RANKS = {
    Kind.NUMBER: 0,
    Kind.CONSTANT: 1,
    Kind.VARIABLE: 2,
    Kind.NEGATE: 3,
    Kind.ABSOLUTE: 3,
    Kind.ADD: 4,
    Kind.SUBTRACT: 5,
    Kind.MULTIPLY: 6,
    Kind.DIVIDE: 7,
    Kind.ROOT: 8,
    Kind.POWER: 9,
}
"""The relative order of each kind of expression."""

_KINDS = tuple(Kind)

_UNIT = fractions.Fraction(1)


def unwrap(
    this: expression.Expression,
) -> typing.Tuple[fractions.Fraction, expression.Expression]:
    """Split `this` into a numeric factor and a symbolic core.

    A product with a leading numeric coefficient gives the coefficient and the
    product of the remaining operands; a negation gives -1 and the negated
    operand. Any other expression is its own core, with a factor of 1.
    """
    if this.kind == Kind.NEGATE:
        return -_UNIT, this.operand
    if this.kind == Kind.MULTIPLY:
        first, *rest = this.operands
        if first.kind == Kind.NUMBER:
            core = (
                rest[0] if len(rest) == 1
                else expression.Variadic(Kind.MULTIPLY, rest)
            )
            return first.value, core
    return _UNIT, this


def compare(
    this: expression.Expression,
    that: expression.Expression,
) -> int:
    """Compare two expressions in canonical order.

    Returns
    -------
    int
        A negative value if `this` sorts before `that`, a positive value if it
        sorts after, and 0 if the two are structurally equal.
    """
    if this is that:
        return 0
    factor0, core0 = unwrap(this)
    factor1, core1 = unwrap(that)
    return (
        _sign(RANKS[core0.kind], RANKS[core1.kind])
        or _compare_cores(core0, core1)
        or _sign(factor0, factor1)
    )


def _compare_cores(
    this: expression.Expression,
    that: expression.Expression,
) -> int:
    """Compare two cores of equal rank."""
    if this.kind != that.kind:
        return _sign(_KINDS.index(this.kind), _KINDS.index(that.kind))
    kind = this.kind
    if kind == Kind.NUMBER:
        return _sign(this.value, that.value)
    if kind == Kind.CONSTANT:
        return _sign(this.sort_order, that.sort_order)
    if kind == Kind.VARIABLE:
        # Code-point order on `str` is the byte order of the UTF-8 encoding.
        return _sign(this.name, that.name)
    if kind == Kind.ROOT:
        result = _sign(this.degree, that.degree)
        if result:
            return result
    return _compare_sequences(this.operands, that.operands)


def _compare_sequences(
    these: typing.Sequence[expression.Expression],
    those: typing.Sequence[expression.Expression],
) -> int:
    """Compare operands pairwise, then by count."""
    for this, that in zip(these, those):
        result = compare(this, that)
        if result:
            return result
    return _sign(len(these), len(those))


def _sign(a, b) -> int:
    """Three-way comparison of two ordered values."""
    return (a > b) - (a < b)


key = functools.cmp_to_key(compare)
"""A sort key for canonical order."""


def sort(
    operands: typing.Iterable[expression.Expression],
) -> typing.Tuple[expression.Expression, ...]:
    """Sort `operands` in canonical order."""
    return tuple(sorted(operands, key=key))
