import abc
import operator as standard
import typing


Self = typing.TypeVar('Self', bound='Additive')


class Additive(abc.ABC):
    """Abstract base class for additive objects."""

    __slots__ = ()

    @abc.abstractmethod
    def __add__(self: Self, other) -> Self:
        pass

    @abc.abstractmethod
    def __radd__(self: Self, other) -> Self:
        pass

    @abc.abstractmethod
    def __sub__(self: Self, other) -> Self:
        pass

    @abc.abstractmethod
    def __rsub__(self: Self, other) -> Self:
        pass


Self = typing.TypeVar('Self', bound='Multiplicative')


class Multiplicative(abc.ABC):
    """Abstract base class for multiplicative objects."""

    __slots__ = ()

    @abc.abstractmethod
    def __mul__(self: Self, other) -> Self:
        pass

    @abc.abstractmethod
    def __rmul__(self: Self, other) -> Self:
        pass

    @abc.abstractmethod
    def __truediv__(self: Self, other) -> Self:
        pass

    @abc.abstractmethod
    def __rtruediv__(self: Self, other) -> Self:
        pass

    @abc.abstractmethod
    def __pow__(self: Self, other) -> Self:
        pass

    @abc.abstractmethod
    def __rpow__(self: Self, other) -> Self:
        pass


class Operable(Additive, Multiplicative):
    """ABC for immutable objects that build new objects from operators.

    Concrete subclasses must define an `implement` method that computes the
    result of a given standard operation on specific operands. This class
    defines the unary operators (`__abs__`, `__neg__`, `__pos__`) and the
    forward and reflected binary arithmetic operators required by
    `~algebraic.Additive` and `~algebraic.Multiplicative` in terms of
    `implement`. There are no in-place operators, so ``x += y`` rebinds `x` to
    a new object.

    The `mode` argument of `implement` is one of

    - 'unary': `func` takes only this object
    - 'forward': this object is the first operand (e.g., ``self + other``)
    - 'reverse': this object is the second operand (e.g., ``other + self``)

    Any binary operator may return `NotImplemented` when `implement` does.
    """

    __slots__ = ()

    def __abs__(self):
        """Called for abs(self)."""
        return self.implement(abs, 'unary')

    def __pos__(self):
        """Called for +self."""
        return self.implement(standard.pos, 'unary')

    def __neg__(self):
        """Called for -self."""
        return self.implement(standard.neg, 'unary')

    def __add__(self, other):
        """Called for self + other."""
        return self.implement(standard.add, 'forward', other)

    def __radd__(self, other):
        """Called for other + self."""
        return self.implement(standard.add, 'reverse', other)

    def __sub__(self, other):
        """Called for self - other."""
        return self.implement(standard.sub, 'forward', other)

    def __rsub__(self, other):
        """Called for other - self."""
        return self.implement(standard.sub, 'reverse', other)

    def __mul__(self, other):
        """Called for self * other."""
        return self.implement(standard.mul, 'forward', other)

    def __rmul__(self, other):
        """Called for other * self."""
        return self.implement(standard.mul, 'reverse', other)

    def __truediv__(self, other):
        """Called for self / other."""
        return self.implement(standard.truediv, 'forward', other)

    def __rtruediv__(self, other):
        """Called for other / self."""
        return self.implement(standard.truediv, 'reverse', other)

    def __pow__(self, other):
        """Called for self ** other."""
        return self.implement(standard.pow, 'forward', other)

    def __rpow__(self, other):
        """Called for other ** self."""
        return self.implement(standard.pow, 'reverse', other)

    @abc.abstractmethod
    def implement(self, func: typing.Callable, mode: str, *others):
        """Implement a standard operator."""
        pass
