"""
Smart constructors for canonical symbolic expressions.

Every function in this module returns an expression in canonical form, so
two mathematically equal constructions that the rewrite rules recognize give
equal (and, while both are alive, identical) expressions::

    >>> t = variable('t')
    >>> power(2, t) * 8 == power(2, 3 + t)
    True

Arguments may be expressions or anything `asexpression` accepts.
"""
import builtins
import decimal
import fractions
import numbers
import operator as standard
import typing

import numpy

from symcanon.core import expression
from symcanon.core import rational
from symcanon.core import simplify


Expression = expression.Expression

ZERO = expression.ZERO
ONE = expression.ONE
pi = expression.PI
e = expression.E


class UnknownConstantError(KeyError):
    """There is no constant with the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __str__(self) -> str:
        available = ', '.join(repr(k) for k in expression.CONSTANTS)
        return f"No constant named {self.name!r} (available: {available})"


Numeric = typing.Union[int, fractions.Fraction, decimal.Decimal, float]


def number(
    value: Numeric,
    denominator: typing.Union[int, fractions.Fraction]=1,
) -> expression.Number:
    """Create a number from an integer, rational, or decimal value.

    Parameters
    ----------
    value : integer, rational, `decimal.Decimal`, or float
        The numerator. Decimal and float values are first converted exactly by
        `from_decimal`.

    denominator : integer or rational, default=1
        The denominator, which must not be zero.

    Returns
    -------
    `~expression.Number`
        The reduced number. Zero and one are always the `ZERO` and `ONE`
        singletons.

    Raises
    ------
    `~rational.DivisionByZero`
        The denominator is zero.
    """
    if isinstance(value, (decimal.Decimal, float)):
        value = rational.from_decimal(value)
    return expression.Number(rational.make(value, denominator))


def from_decimal(value: typing.Union[str, decimal.Decimal, float, int]):
    """Create a number from an exact decimal literal (e.g., '0.25' -> 1/4)."""
    return expression.Number(rational.from_decimal(value))


def variable(name: str) -> expression.Variable:
    """Get the variable called `name`."""
    if not isinstance(name, str):
        raise TypeError(f"Variable name must be a string, not {type(name)}")
    if not name:
        raise ValueError("Variable name must not be empty")
    return expression.Variable(name)


def constant(name: str) -> expression.Constant:
    """Get the named constant (e.g., 'pi' or 'e')."""
    try:
        return expression.CONSTANTS[name]
    except KeyError:
        raise UnknownConstantError(name) from None


def asexpression(value: typing.Any) -> Expression:
    """Convert `value` to an expression, if possible.

    Expressions pass through unchanged. Integers, rationals, `decimal.Decimal`
    values, and floats (via their shortest decimal representation) become
    numbers. Numpy scalars and zero-dimensional arrays convert through their
    Python equivalents.

    Raises
    ------
    TypeError
        There is no exact expression for `value`.
    """
    if isinstance(value, Expression):
        return value
    if isinstance(value, numpy.ndarray):
        if value.ndim != 0:
            raise TypeError(
                f"Can't convert an array with shape {value.shape}"
                " to an expression"
            ) from None
        value = value.item()
    elif isinstance(value, numpy.generic):
        value = value.item()
    if isinstance(value, bool):
        raise TypeError(f"Can't convert {value!r} to an expression") from None
    if isinstance(value, numbers.Rational):
        return number(value)
    if isinstance(value, (decimal.Decimal, float)):
        return from_decimal(value)
    raise TypeError(
        f"Can't convert {value!r} of type {type(value)} to an expression"
    ) from None


def negate(this) -> Expression:
    """The canonical negation of `this`."""
    return simplify.negate(asexpression(this))


def absolute(this) -> Expression:
    """The canonical absolute value of `this`."""
    return simplify.absolute(asexpression(this))


abs = absolute


def root(this, degree: int) -> Expression:
    """The canonical principal `degree`-th root of `this`.

    Raises
    ------
    `~expression.InvalidRootDegree`
        `degree` is not an integer greater than 1.
    """
    return simplify.root(asexpression(this), degree)


def sqrt(this) -> Expression:
    """The canonical principal square root of `this`."""
    return root(this, 2)


def power(base, exponent) -> Expression:
    """The canonical value of `base` raised to `exponent`."""
    return simplify.power(asexpression(base), asexpression(exponent))


def divide(dividend, divisor) -> Expression:
    """The canonical quotient of two operands.

    Raises
    ------
    `~rational.DivisionByZero`
        The divisor is zero.
    """
    return simplify.divide(asexpression(dividend), asexpression(divisor))


def subtract(minuend, subtrahend) -> Expression:
    """The canonical difference of two operands."""
    return simplify.subtract(asexpression(minuend), asexpression(subtrahend))


def add(*operands) -> Expression:
    """The canonical sum of any number of operands."""
    return simplify.add(*(asexpression(operand) for operand in operands))


def multiply(*operands) -> Expression:
    """The canonical product of any number of operands."""
    return simplify.multiply(*(asexpression(operand) for operand in operands))


def _identity(this: Expression) -> Expression:
    return this


OPERATIONS = {
    standard.add: add,
    standard.sub: subtract,
    standard.mul: multiply,
    standard.truediv: divide,
    standard.pow: power,
    standard.neg: negate,
    standard.pos: _identity,
    builtins.abs: absolute,
}
"""The constructor that implements each standard operator."""
