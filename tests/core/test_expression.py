import copy
import fractions
import pickle

import pytest

from symcanon.core import expression
from symcanon.core.expression import Kind


@pytest.mark.expression
def test_singletons():
    """The common numbers always refer to the same node."""
    assert expression.Number(0) is expression.ZERO
    assert expression.Number(fractions.Fraction(2, 2)) is expression.ONE
    assert expression.Number(-1) is expression.MINUS_ONE
    assert expression.ZERO.value == 0
    assert expression.ONE.value == 1


@pytest.mark.expression
def test_interning():
    """Structurally equal nodes are the same object."""
    t = expression.Variable('t')
    assert expression.Variable('t') is t
    assert expression.Variable('u') is not t
    power = expression.Binary(Kind.POWER, t, expression.Number(2))
    again = expression.Binary(Kind.POWER, t, expression.Number(2))
    assert again is power
    total = expression.Variadic(Kind.ADD, [expression.ONE, t])
    assert expression.Variadic(Kind.ADD, (expression.ONE, t)) is total


@pytest.mark.expression
def test_number():
    """Access the value of a number."""
    this = expression.Number(fractions.Fraction(-6, 4))
    assert this.kind == Kind.NUMBER
    assert this.value == fractions.Fraction(-3, 2)
    assert this.numerator == -3
    assert this.denominator == 2
    assert not this.is_integer()
    assert expression.Number(4).is_integer()
    assert this.operands == ()
    assert int(expression.Number(4)) == 4
    assert float(this) == -1.5
    with pytest.raises(TypeError):
        int(this)


@pytest.mark.expression
def test_number_equality():
    """A number equals and hashes like the equivalent Python rational."""
    three = expression.Number(3)
    assert three == 3
    assert three == fractions.Fraction(6, 2)
    assert hash(three) == hash(3)
    assert three != 4
    assert three != expression.Number(4)
    assert expression.Number(1) != True
    assert {3: 'three'}[three] == 'three'
    quarter = expression.Number(fractions.Fraction(1, 4))
    assert quarter == fractions.Fraction(1, 4)
    assert hash(quarter) == hash(fractions.Fraction(1, 4))


@pytest.mark.expression
def test_constant():
    """Access the attributes of the built-in constants."""
    assert expression.PI.kind == Kind.CONSTANT
    assert expression.PI.name == 'pi'
    assert expression.PI.symbol == 'π'
    assert expression.E.symbol == 'e'
    assert expression.PI.sort_order < expression.E.sort_order
    assert expression.CONSTANTS == {'pi': expression.PI, 'e': expression.E}
    assert expression.Constant('pi', 0, 'π') is expression.PI


@pytest.mark.expression
def test_unary():
    """Create and inspect single-operand nodes."""
    t = expression.Variable('t')
    negation = expression.Unary(Kind.NEGATE, t)
    assert negation.kind == Kind.NEGATE
    assert negation.operand is t
    assert negation.operands == (t,)
    assert negation.degree is None
    root = expression.Unary(Kind.ROOT, t, 3)
    assert root.degree == 3
    assert root != expression.Unary(Kind.ROOT, t, 4)
    for degree in (None, 1, 0, -2):
        with pytest.raises(expression.InvalidRootDegree):
            expression.Unary(Kind.ROOT, t, degree)
    with pytest.raises(ValueError):
        expression.Unary(Kind.ADD, t)


@pytest.mark.expression
def test_binary():
    """Create and inspect two-operand nodes."""
    t = expression.Variable('t')
    x = expression.Variable('x')
    quotient = expression.Binary(Kind.DIVIDE, t, x)
    assert quotient.kind == Kind.DIVIDE
    assert quotient.first is t
    assert quotient.second is x
    assert quotient.operands == (t, x)
    assert quotient != expression.Binary(Kind.DIVIDE, x, t)
    assert quotient != expression.Binary(Kind.SUBTRACT, t, x)
    with pytest.raises(ValueError):
        expression.Binary(Kind.NEGATE, t, x)


@pytest.mark.expression
def test_variadic():
    """Create and inspect many-operand nodes."""
    t = expression.Variable('t')
    x = expression.Variable('x')
    y = expression.Variable('y')
    product = expression.Variadic(Kind.MULTIPLY, [t, x, y])
    assert product.kind == Kind.MULTIPLY
    assert product.operands == (t, x, y)
    assert isinstance(product.operands, tuple)
    with pytest.raises(ValueError):
        expression.Variadic(Kind.ADD, [t])
    with pytest.raises(ValueError):
        expression.Variadic(Kind.POWER, [t, x])


@pytest.mark.expression
def test_repr():
    """Display nodes in constructor form."""
    t = expression.Variable('t')
    two = expression.Number(2)
    cases = {
        expression.Number(fractions.Fraction(1, 4)): "Number(1/4)",
        expression.Number(-3): "Number(-3)",
        expression.PI: "Constant('pi')",
        t: "Variable('t')",
        expression.Unary(Kind.NEGATE, t): "Negate(Variable('t'))",
        expression.Unary(Kind.ROOT, t, 3): "Root(Variable('t'), 3)",
        expression.Binary(Kind.POWER, t, two): (
            "Power(Variable('t'), Number(2))"
        ),
        expression.Variadic(Kind.ADD, [two, t]): (
            "Add(Number(2), Variable('t'))"
        ),
    }
    for node, expected in cases.items():
        assert repr(node) == expected


@pytest.mark.expression
def test_copy():
    """Copying or pickling a node gives back the interned node."""
    t = expression.Variable('t')
    nodes = [
        expression.Number(fractions.Fraction(2, 3)),
        expression.PI,
        t,
        expression.Unary(Kind.ROOT, t, 3),
        expression.Binary(Kind.POWER, t, expression.PI),
        expression.Variadic(Kind.MULTIPLY, [expression.E, t]),
    ]
    for node in nodes:
        assert copy.copy(node) is node
        assert copy.deepcopy(node) is node
        assert pickle.loads(pickle.dumps(node)) is node
