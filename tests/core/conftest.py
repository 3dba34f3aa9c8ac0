import pytest

from symcanon.core import symbolic


@pytest.fixture
def t():
    """A variable used throughout the rewrite tests."""
    return symbolic.variable('t')


@pytest.fixture
def w():
    return symbolic.variable('w')


@pytest.fixture
def x():
    return symbolic.variable('x')


@pytest.fixture
def y():
    return symbolic.variable('y')


@pytest.fixture
def z():
    return symbolic.variable('z')


@pytest.fixture
def samples(t, x, y):
    """A representative expression of each kind."""
    return [
        t,
        symbolic.number(3),
        symbolic.number(-2, 7),
        symbolic.pi,
        t + x,
        t - x,
        3 * t,
        t * x,
        t / x,
        symbolic.power(t, x),
        symbolic.power(t, 2),
        symbolic.sqrt(t),
        symbolic.root(y, 5),
        symbolic.absolute(t),
        (t + x) * y,
    ]
