import decimal
import fractions

import numpy
import pytest

from symcanon.core import rational
from symcanon.core import symbolic
from symcanon.core.expression import Kind


@pytest.mark.symbolic
def test_number():
    """Create numbers from several numeric types."""
    cases = {
        symbolic.number(3): 3,
        symbolic.number(6, 4): fractions.Fraction(3, 2),
        symbolic.number(fractions.Fraction(1, 4)): fractions.Fraction(1, 4),
        symbolic.number(decimal.Decimal('0.25')): fractions.Fraction(1, 4),
        symbolic.number(0.5): fractions.Fraction(1, 2),
        symbolic.number(numpy.int64(-7)): -7,
    }
    for this, expected in cases.items():
        assert this.kind == Kind.NUMBER
        assert this.value == expected
    assert symbolic.number(0) is symbolic.ZERO
    assert symbolic.number(5, 5) is symbolic.ONE
    assert symbolic.number(6, 4).numerator == 3
    assert symbolic.number(6, 4).denominator == 2
    assert symbolic.number(3, -6) == symbolic.number(-1, 2)


@pytest.mark.symbolic
def test_number_errors():
    """Reject invalid numeric input."""
    with pytest.raises(rational.DivisionByZero):
        symbolic.number(2, 0)
    for value in ('1', True, None, complex(1, 1)):
        with pytest.raises(TypeError):
            symbolic.number(value)
    with pytest.raises(ValueError):
        symbolic.number(float('inf'))


@pytest.mark.symbolic
def test_variable():
    """Variables are identified by name."""
    t = symbolic.variable('t')
    assert t.kind == Kind.VARIABLE
    assert t.name == 't'
    assert symbolic.variable('t') is t
    assert symbolic.variable('𝓉') is not t
    assert symbolic.variable('𝓉').name == '𝓉'
    with pytest.raises(ValueError):
        symbolic.variable('')
    with pytest.raises(TypeError):
        symbolic.variable(3)


@pytest.mark.symbolic
def test_constant():
    """Look up the named constants."""
    assert symbolic.constant('pi') is symbolic.pi
    assert symbolic.constant('e') is symbolic.e
    assert symbolic.pi != symbolic.e
    with pytest.raises(symbolic.UnknownConstantError) as exc:
        symbolic.constant('tau')
    assert isinstance(exc.value, KeyError)
    assert 'tau' in str(exc.value)


@pytest.mark.symbolic
def test_asexpression():
    """Convert supported values to expressions."""
    t = symbolic.variable('t')
    cases = [
        (t, t),
        (4, symbolic.number(4)),
        (fractions.Fraction(2, 6), symbolic.number(1, 3)),
        (decimal.Decimal('1.5'), symbolic.number(3, 2)),
        (0.1, symbolic.number(1, 10)),
        (numpy.int64(3), symbolic.number(3)),
        (numpy.float64(0.25), symbolic.number(1, 4)),
        (numpy.array(7), symbolic.number(7)),
    ]
    for value, expected in cases:
        assert symbolic.asexpression(value) is expected
    invalid = ['t', True, numpy.bool_(True), None, complex(1, 2), [1, 2]]
    for value in invalid:
        with pytest.raises(TypeError):
            symbolic.asexpression(value)
    with pytest.raises(TypeError):
        symbolic.asexpression(numpy.array([1, 2]))


@pytest.mark.symbolic
def test_operators(t, x):
    """Standard operators build canonical expressions."""
    assert +t is t
    assert -t == symbolic.negate(t)
    assert abs(-t) == symbolic.absolute(t)
    assert t + 1 == symbolic.add(t, 1)
    assert 1 - t == symbolic.subtract(1, t)
    assert (1 - t).kind == Kind.SUBTRACT
    assert t * 2.5 == symbolic.number(5, 2) * t
    assert x / t == symbolic.divide(x, t)
    assert t ** x == symbolic.power(t, x)
    assert 2 ** t == symbolic.power(2, t)
    assert t ** 0.5 == symbolic.power(t, symbolic.number(1, 2))
    assert t ** 0.5 is symbolic.sqrt(t)


@pytest.mark.symbolic
def test_abs_alias(t):
    """Provide `abs` as another name for `absolute`."""
    assert symbolic.abs is symbolic.absolute
    assert symbolic.abs(-t) is symbolic.absolute(t)
    assert symbolic.abs(-3) == 3
    assert abs(-t) is symbolic.abs(t)


@pytest.mark.symbolic
def test_operators_reject_unknown_operands(t):
    """Unsupported operands raise the standard error."""
    for value in ('a', None, [1], complex(0, 1)):
        with pytest.raises(TypeError):
            t + value
        with pytest.raises(TypeError):
            value * t


@pytest.mark.symbolic
def test_numpy_operands(t):
    """Numpy scalars defer to symbolic operators."""
    assert numpy.int64(3) * t == 3 * t
    assert t * numpy.int64(3) == 3 * t
    assert numpy.float64(0.5) + t == symbolic.number(1, 2) + t


@pytest.mark.symbolic
def test_hashable(t, x):
    """Equal expressions collapse in sets and dictionaries."""
    assert len({t + x, x + t, symbolic.add(x, t)}) == 1
    assert len({t * x, x * t}) == 1
    lookup = {t + 1: 'sum'}
    assert lookup[1 + t] == 'sum'


@pytest.mark.symbolic
def test_structure(t):
    """Inspect the structure of a canonical expression."""
    total = symbolic.add(t, symbolic.pi, 735, symbolic.power(t, 2))
    assert total.kind == Kind.ADD
    kinds = [operand.kind for operand in total.operands]
    assert kinds == [Kind.NUMBER, Kind.CONSTANT, Kind.VARIABLE, Kind.POWER]
    power = total.operands[-1]
    assert power.first is t
    assert power.second == 2
    radical = symbolic.root(t, 3)
    assert radical.kind == Kind.ROOT
    assert radical.degree == 3
    assert radical.operand is t
