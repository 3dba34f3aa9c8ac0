"""
Exact rational arithmetic for the numeric leaves of an expression.
"""
import decimal
import fractions
import math
import numbers
import typing


Rational = typing.TypeVar('Rational')
Rational = typing.Union[int, fractions.Fraction]


class DivisionByZero(ZeroDivisionError):
    """Attempted to divide by an exact zero."""

    def __init__(self, dividend: typing.Any=None) -> None:
        self.dividend = dividend

    def __str__(self) -> str:
        if self.dividend is None:
            return "Division by zero"
        return f"Can't divide {self.dividend} by zero"


def make(numerator: Rational, denominator: Rational=1) -> fractions.Fraction:
    """Create a rational number in lowest terms.

    Parameters
    ----------
    numerator : integer or rational
        The numerator, which carries the sign of the result.

    denominator : integer or rational, default=1
        The denominator, which must not be zero.

    Returns
    -------
    `fractions.Fraction`
        The reduced rational, with a positive denominator.

    Raises
    ------
    DivisionByZero
        The denominator is zero.
    """
    numerator = _asrational(numerator)
    denominator = _asrational(denominator)
    if denominator == 0:
        raise DivisionByZero(numerator) from None
    return fractions.Fraction(numerator, denominator)


def _asrational(value) -> Rational:
    """Convert `value` to a built-in rational type."""
    if isinstance(value, bool):
        raise TypeError(f"Can't use {value!r} as a rational number")
    if isinstance(value, numbers.Integral):
        # because numpy integer types are registered as `numbers.Integral`
        return int(value)
    if isinstance(value, numbers.Rational):
        return fractions.Fraction(value.numerator, value.denominator)
    raise TypeError(
        f"Can't use {value!r} of type {type(value)} as a rational number"
    ) from None


def from_decimal(value: typing.Union[str, int, float, decimal.Decimal]):
    """Convert an exact decimal literal to a rational number.

    The digits of `value` become the numerator and the matching power of ten
    becomes the denominator, which `make` then reduces to lowest terms (e.g.,
    '0.08' -> 8/100 -> 2/25). A `float` is converted through its shortest
    `repr`, so ``from_decimal(0.1) == 1/10``.
    """
    if isinstance(value, float):
        # float() first because numpy.float64 subclasses float
        value = repr(float(value))
    try:
        number = decimal.Decimal(value)
    except (decimal.InvalidOperation, TypeError, ValueError):
        raise ValueError(
            f"Can't convert {value!r} to a decimal number"
        ) from None
    if not number.is_finite():
        raise ValueError(f"Can't convert {value!r} to a rational number")
    sign, digits, exponent = number.as_tuple()
    scaled = int(''.join(str(digit) for digit in digits))
    if sign:
        scaled = -scaled
    if exponent >= 0:
        return make(scaled * 10**exponent)
    return make(scaled, 10**-exponent)


def add(a: fractions.Fraction, b: fractions.Fraction) -> fractions.Fraction:
    """Compute a + b."""
    return a + b


def multiply(a: fractions.Fraction, b: fractions.Fraction):
    """Compute a * b."""
    return a * b


def divide(a: fractions.Fraction, b: fractions.Fraction):
    """Compute a / b, which requires a non-zero `b`."""
    if b == 0:
        raise DivisionByZero(a) from None
    return a / b


def power(base: fractions.Fraction, exponent: int) -> fractions.Fraction:
    """Raise `base` to an integral power."""
    if base == 0 and exponent < 0:
        raise DivisionByZero(1) from None
    return fractions.Fraction(base) ** int(exponent)


def multiplicity(base: int, value: fractions.Fraction) -> int:
    """Count the factors of `base` in `value`.

    The result is the number of times `base` divides the numerator of `value`
    minus the number of times it divides the denominator, so it is negative
    when `base` only appears below the line. Zero has no defined multiplicity
    and gives 0.
    """
    if base < 2:
        raise ValueError(f"Can't count factors of {base}")
    if value == 0:
        return 0
    return _count(base, value.numerator) - _count(base, value.denominator)


def _count(base: int, n: int) -> int:
    """Count how many times `base` divides the non-zero integer `n`."""
    n = abs(n)
    count = 0
    while n % base == 0:
        n //= base
        count += 1
    return count


def content(values: typing.Iterable[fractions.Fraction]):
    """The largest positive rational that divides every value to an integer.

    This is the greatest common divisor of the numerators over the least
    common multiple of the denominators (e.g., 2/3 and 4/9 give 2/9).
    """
    numerator = 0
    denominator = 1
    for value in values:
        numerator = math.gcd(numerator, value.numerator)
        denominator = (
            denominator * value.denominator
            // math.gcd(denominator, value.denominator)
        )
    if numerator == 0:
        raise ValueError("Content of all-zero values is undefined")
    return fractions.Fraction(numerator, denominator)


def nth_root(value: fractions.Fraction, degree: int):
    """The exact rational `degree`-th root of `value`, or `None`.

    Even roots of negative values have no real root and give `None`.
    """
    if value < 0:
        if degree % 2 == 0:
            return None
        root = nth_root(-value, degree)
        return None if root is None else -root
    numerator = _integer_root(value.numerator, degree)
    denominator = _integer_root(value.denominator, degree)
    if numerator is None or denominator is None:
        return None
    return fractions.Fraction(numerator, denominator)


def _integer_root(n: int, degree: int):
    """The exact integer `degree`-th root of non-negative `n`, or `None`."""
    if n < 2:
        return n
    if degree >= n.bit_length():
        # The only candidate is 1, and 1 ** degree != n.
        return None
    x = 1 << -(-n.bit_length() // degree)
    while True:
        y = ((degree - 1) * x + n // x ** (degree - 1)) // degree
        if y >= x:
            break
        x = y
    return x if x ** degree == n else None
