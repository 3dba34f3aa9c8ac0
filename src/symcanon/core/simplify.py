"""
Rewrite rules applied by the smart constructors.

Each public function in this module takes canonical operands and returns the
canonical expression for the corresponding operation. A rule set that
discovers a different shape calls the matching constructor again, so every
result is a fixed point of the rules. Products, quotients, and powers share a
single collector (`_Product`) that reduces its operands to a numeric
coefficient and a map from base to summed exponent; sums share `_Sum`, which
reduces its operands to a numeric constant and a map from comparator core to
numeric factor.
"""
import fractions
import functools
import logging
import numbers
import threading
import typing

import symcanon
from symcanon.core import comparison
from symcanon.core import expression
from symcanon.core import rational
from symcanon.core.expression import Kind


logger = logging.getLogger(__name__)

ZERO = expression.ZERO
ONE = expression.ONE
MINUS_ONE = expression.MINUS_ONE


class RewriteLimitError(RuntimeError):
    """The rewrite rules nested deeper than the configured limit.

    Every rule set terminates on finite input, so this error indicates a defect
    in the rules rather than a problem with the caller's expression.
    """

    def __init__(self, rule: str, limit: int) -> None:
        self.rule = rule
        self.limit = limit

    def __str__(self) -> str:
        return (
            f"Rewriting nested more than {self.limit} steps"
            f" (last rule: {self.rule!r})"
        )


MAX_DEPTH = 200
"""The rewrite-depth limit when no settings file provides one."""


@functools.lru_cache(maxsize=None)
def max_depth() -> int:
    """The maximum number of nested rewrite steps in one construction."""
    try:
        return int(symcanon.Environment('rewrite')['max_depth'])
    except KeyError as err:
        logger.warning("Using max_depth = %d (%s)", MAX_DEPTH, err)
        return MAX_DEPTH


_state = threading.local()


def rule(func):
    """Run a rule set under the per-thread rewrite-depth guard."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        depth = getattr(_state, 'depth', 0)
        limit = max_depth()
        if depth >= limit:
            logger.error(
                "Rewrite depth limit %d reached in %s", limit, func.__name__
            )
            raise RewriteLimitError(func.__name__, limit)
        _state.depth = depth + 1
        try:
            return func(*args, **kwargs)
        finally:
            _state.depth = depth
    return wrapper


def number(value) -> expression.Number:
    """Create a canonical number from a built-in rational value."""
    return expression.Number(rational.make(value))


def _is_zero(this: expression.Expression) -> bool:
    return this.kind == Kind.NUMBER and this.value == 0


def _is_integer(this: expression.Expression) -> bool:
    return this.kind == Kind.NUMBER and this.is_integer()


def _is_even(this: expression.Expression) -> bool:
    return _is_integer(this) and this.numerator % 2 == 0


def _is_negative(this: expression.Expression) -> bool:
    """True if the leading numeric factor of `this` is negative."""
    if this.kind == Kind.NUMBER:
        return this.value < 0
    return comparison.unwrap(this)[0] < 0


def _has_coefficient(this: expression.Expression) -> bool:
    """True if `this` is a product with a leading numeric coefficient."""
    return (
        this.kind == Kind.MULTIPLY
        and this.operands[0].kind == Kind.NUMBER
    )


def _is_manifest_square(this: expression.Expression) -> bool:
    """True if `this` is syntactically non-negative as an even power."""
    if this.kind == Kind.POWER:
        return _is_even(this.second)
    if this.kind == Kind.MULTIPLY:
        return all(
            _is_manifest_square(operand)
            or (operand.kind == Kind.NUMBER and operand.value > 0)
            for operand in this.operands
        )
    return False


def _terms(this: expression.Expression):
    """The summands of a sum or difference."""
    if this.kind == Kind.ADD:
        return this.operands
    if this.kind == Kind.SUBTRACT:
        return (this.first, negate(this.second))
    return (this,)


_SUMS = frozenset({Kind.ADD, Kind.SUBTRACT})


def _primitive(
    this: expression.Expression,
) -> typing.Tuple[fractions.Fraction, expression.Expression]:
    """Split a sum into its signed numeric content and primitive part.

    The content divides every numeric factor of the sum to an integer, and its
    sign makes the term with the lowest-ordered core positive, so a sum and
    any non-zero multiple of it share one primitive part (e.g., ``-2*x - 4*y``
    gives ``(-2, x + 2*y)``).
    """
    terms = comparison.sort(_terms(this))
    factors = [
        term.value if term.kind == Kind.NUMBER else comparison.unwrap(term)[0]
        for term in terms
    ]
    content = rational.content(factors)
    leading = next(
        factor for term, factor in zip(terms, factors)
        if term.kind != Kind.NUMBER
    )
    if leading < 0:
        content = -content
    if content == 1:
        return content, this
    factor = number(1 / content)
    return content, add(*(multiply(factor, term) for term in terms))


# Unary operations

@rule
def negate(this: expression.Expression) -> expression.Expression:
    """Canonical -this."""
    kind = this.kind
    if kind == Kind.NEGATE:
        return this.operand
    if kind == Kind.NUMBER:
        return number(-this.value)
    if kind == Kind.ADD:
        return add(*(negate(operand) for operand in this.operands))
    if kind == Kind.SUBTRACT:
        return add(this.second, negate(this.first))
    if _has_coefficient(this):
        return multiply(MINUS_ONE, this)
    return expression.Unary(Kind.NEGATE, this)


@rule
def absolute(this: expression.Expression) -> expression.Expression:
    """Canonical |this|."""
    kind = this.kind
    if kind == Kind.ABSOLUTE:
        return this
    if kind == Kind.NUMBER:
        return number(abs(this.value))
    if kind == Kind.NEGATE:
        return absolute(this.operand)
    if _is_manifest_square(this):
        return this
    if _has_coefficient(this):
        factor, core = comparison.unwrap(this)
        return multiply(number(abs(factor)), absolute(core))
    if kind in _SUMS:
        content, primitive = _primitive(this)
        if content != 1:
            return multiply(number(abs(content)), absolute(primitive))
    return expression.Unary(Kind.ABSOLUTE, this)


def _root_degree(degree) -> int:
    """Validate the degree of a root."""
    if isinstance(degree, expression.Number) and degree.is_integer():
        degree = degree.numerator
    if (
        isinstance(degree, bool)
        or not isinstance(degree, numbers.Integral)
        or degree < 2
    ): raise expression.InvalidRootDegree(degree)
    return int(degree)


@rule
def root(this: expression.Expression, degree: int) -> expression.Expression:
    """Canonical principal `degree`-th root of `this`."""
    degree = _root_degree(degree)
    if this is ZERO or this is ONE:
        return this
    if this.kind == Kind.NUMBER:
        value = rational.nth_root(this.value, degree)
        if value is not None:
            return number(value)
    if (
        this.kind == Kind.POWER
        and _is_integer(this.second)
        and this.second.numerator == degree
    ):
        base = this.first
        return absolute(base) if degree % 2 == 0 else base
    return expression.Unary(Kind.ROOT, this, degree)


# Powers

@rule
def power(
    base: expression.Expression,
    exponent: expression.Expression,
) -> expression.Expression:
    """Canonical base ** exponent."""
    if _is_zero(exponent):
        return ONE
    if exponent == ONE:
        return base
    if base is ONE:
        return ONE
    if _is_integer(exponent):
        if base.kind == Kind.NUMBER:
            return number(rational.power(base.value, exponent.numerator))
        return _integer_power(base, exponent)
    if base.kind == Kind.NUMBER and exponent.kind == Kind.NUMBER:
        value = rational.nth_root(base.value, exponent.denominator)
        if value is not None:
            return power(number(value), number(exponent.numerator))
    if _is_negative(exponent):
        return divide(ONE, power(base, negate(exponent)))
    if exponent.kind == Kind.NUMBER and exponent.numerator == 1:
        return root(base, exponent.denominator)
    return expression.Binary(Kind.POWER, base, exponent)


def _integer_power(
    base: expression.Expression,
    exponent: expression.Number,
) -> expression.Expression:
    """Raise a symbolic base to an integer power other than 0 or 1."""
    n = exponent.numerator
    if n < 0:
        return divide(ONE, power(base, number(-n)))
    kind = base.kind
    if kind == Kind.ROOT and n % base.degree == 0:
        return power(base.operand, number(n // base.degree))
    if kind == Kind.ABSOLUTE and n % 2 == 0:
        return power(base.operand, exponent)
    if kind == Kind.POWER:
        return power(base.first, multiply(base.second, exponent))
    if kind == Kind.MULTIPLY:
        return multiply(*(power(operand, exponent) for operand in base.operands))
    if kind == Kind.DIVIDE:
        return divide(power(base.first, exponent), power(base.second, exponent))
    if kind == Kind.NEGATE:
        sign = MINUS_ONE if n % 2 else ONE
        return multiply(sign, power(base.operand, exponent))
    if kind in _SUMS:
        content, primitive = _primitive(base)
        if content != 1:
            scale = number(rational.power(content, n))
            return multiply(scale, power(primitive, exponent))
    return expression.Binary(Kind.POWER, base, exponent)


# Products and quotients

class _Product:
    """The numeric coefficient and base-exponent groups of a product."""

    def __init__(self) -> None:
        self.coefficient = fractions.Fraction(1)
        self.groups: typing.Dict[
            expression.Expression,
            typing.List[expression.Expression],
        ] = {}

    def collect(self, this: expression.Expression, inverse: bool=False):
        """Add the factors of `this` (or of 1 / `this`) to the product."""
        kind = this.kind
        if kind == Kind.NUMBER:
            if inverse:
                self.coefficient = rational.divide(self.coefficient, this.value)
            else:
                self.coefficient = rational.multiply(self.coefficient, this.value)
        elif kind == Kind.NEGATE:
            self.coefficient = -self.coefficient
            self.collect(this.operand, inverse)
        elif kind == Kind.MULTIPLY:
            for operand in this.operands:
                self.collect(operand, inverse)
        elif kind == Kind.DIVIDE:
            self.collect(this.first, inverse)
            self.collect(this.second, not inverse)
        elif kind == Kind.POWER:
            exponent = this.second
            self._append(this.first, negate(exponent) if inverse else exponent)
        elif kind in _SUMS:
            content, primitive = _primitive(this)
            self.collect(number(content), inverse)
            self._append(primitive, MINUS_ONE if inverse else ONE)
        else:
            self._append(this, MINUS_ONE if inverse else ONE)

    def _append(self, base, exponent) -> None:
        self.groups.setdefault(base, []).append(exponent)

    def assemble(self) -> expression.Expression:
        """Build the canonical product."""
        coefficient = self.coefficient
        pending = []
        for base in comparison.sort(self.groups):
            exponents = self.groups[base]
            exponent = exponents[0] if len(exponents) == 1 else add(*exponents)
            if _is_zero(exponent):
                continue
            if base.kind == Kind.NUMBER and _is_integer(exponent):
                coefficient *= rational.power(base.value, exponent.numerator)
                continue
            pending.append((base, exponent))
        numerator = []
        denominator = []
        for base, exponent in pending:
            if _is_foldable(base, exponent):
                m = rational.multiplicity(base.numerator, coefficient)
                if m:
                    exponent = add(exponent, number(m))
                    coefficient /= rational.power(base.value, m)
            if _is_negative(exponent):
                denominator.append((base, negate(exponent)))
            else:
                numerator.append((base, exponent))
        above = [power(base, exponent) for base, exponent in numerator]
        below = [power(base, exponent) for base, exponent in denominator]
        pairs = zip(numerator + denominator, above + below)
        if not all(_is_plain_power(term, *pair) for pair, term in pairs):
            logger.debug("Re-collecting a product after rewriting its factors")
            return divide(multiply(number(coefficient), *above), multiply(*below))
        return _scale(coefficient, _quotient(above, below))


def _is_foldable(base, exponent) -> bool:
    """True if a numeric coefficient can fold into this power's exponent."""
    return (
        base.kind == Kind.NUMBER
        and base.is_integer()
        and base.numerator >= 2
        and exponent.kind != Kind.NUMBER
    )


_COLLECTED = frozenset({Kind.NUMBER, Kind.NEGATE, Kind.MULTIPLY, Kind.DIVIDE})


def _is_plain_power(term, base, exponent) -> bool:
    """True if `term` is `base` raised to `exponent` with no rewriting.

    A term that `_Product.collect` would split further (e.g., a product that
    was the base of a power) is never plain.
    """
    if term.kind in _COLLECTED:
        return False
    if exponent == ONE:
        return term == base
    return (
        term.kind == Kind.POWER
        and term.first == base
        and term.second == exponent
    )


def _product_of(terms: typing.Sequence[expression.Expression]):
    """The raw product of sorted, canonical, non-numeric factors."""
    if not terms:
        return None
    if len(terms) == 1:
        return terms[0]
    return expression.Variadic(Kind.MULTIPLY, terms)


def _quotient(above, below):
    """The raw quotient of two lists of canonical factors."""
    top = _product_of(comparison.sort(above))
    if not below:
        return top
    return expression.Binary(
        Kind.DIVIDE,
        top or ONE,
        _product_of(comparison.sort(below)),
    )


def _scale(
    coefficient: fractions.Fraction,
    core: typing.Optional[expression.Expression],
) -> expression.Expression:
    """Apply a non-zero numeric coefficient to a canonical core."""
    if core is None:
        return number(coefficient)
    if coefficient == 1:
        return core
    if core.kind in _SUMS:
        factor = number(coefficient)
        return add(*(multiply(factor, term) for term in _terms(core)))
    if coefficient == -1:
        return expression.Unary(Kind.NEGATE, core)
    factors = core.operands if core.kind == Kind.MULTIPLY else (core,)
    return expression.Variadic(
        Kind.MULTIPLY,
        (number(coefficient), *factors),
    )


@rule
def multiply(*operands: expression.Expression) -> expression.Expression:
    """Canonical product of any number of operands."""
    if any(_is_zero(operand) for operand in operands):
        return ZERO
    product = _Product()
    for operand in operands:
        product.collect(operand)
    return product.assemble()


@rule
def divide(
    dividend: expression.Expression,
    divisor: expression.Expression,
) -> expression.Expression:
    """Canonical dividend / divisor."""
    if _is_zero(divisor):
        raise rational.DivisionByZero(dividend) from None
    if _is_zero(dividend):
        return ZERO
    product = _Product()
    product.collect(dividend)
    product.collect(divisor, inverse=True)
    return product.assemble()


# Sums and differences

class _Sum:
    """The numeric constant and like-term factors of a sum."""

    def __init__(self) -> None:
        self.constant = fractions.Fraction(0)
        self.terms: typing.Dict[
            expression.Expression,
            fractions.Fraction,
        ] = {}

    def collect(self, this: expression.Expression) -> None:
        """Add the terms of `this` to the sum."""
        kind = this.kind
        if kind == Kind.NUMBER:
            self.constant = rational.add(self.constant, this.value)
        elif kind in _SUMS:
            for term in _terms(this):
                self.collect(term)
        else:
            factor, core = comparison.unwrap(this)
            self.terms[core] = self.terms.get(core, 0) + factor

    def assemble(self) -> expression.Expression:
        """Build the canonical sum."""
        terms = []
        for core, factor in self.terms.items():
            if factor == 0:
                continue
            term = core if factor == 1 else multiply(number(factor), core)
            terms.append(term)
            if comparison.unwrap(term) != (factor, core):
                break
        else:
            return self._combine(terms)
        logger.debug("Re-collecting a sum after rewriting a scaled term")
        scaled = [
            core if factor == 1 else multiply(number(factor), core)
            for core, factor in self.terms.items() if factor != 0
        ]
        return add(number(self.constant), *scaled)

    def _combine(self, terms) -> expression.Expression:
        operands = comparison.sort(terms)
        if self.constant:
            operands = (number(self.constant), *operands)
        if not operands:
            return ZERO
        if len(operands) == 1:
            return operands[0]
        if len(operands) == 2:
            a, b = operands
            if b.kind == Kind.NEGATE and a.kind != Kind.NEGATE:
                return expression.Binary(Kind.SUBTRACT, a, b.operand)
            if a.kind == Kind.NEGATE and b.kind != Kind.NEGATE:
                return expression.Binary(Kind.SUBTRACT, b, a.operand)
        return expression.Variadic(Kind.ADD, operands)


@rule
def add(*operands: expression.Expression) -> expression.Expression:
    """Canonical sum of any number of operands."""
    total = _Sum()
    for operand in operands:
        total.collect(operand)
    return total.assemble()


@rule
def subtract(
    minuend: expression.Expression,
    subtrahend: expression.Expression,
) -> expression.Expression:
    """Canonical minuend - subtrahend."""
    return add(minuend, negate(subtrahend))
