"""
Immutable nodes of a symbolic expression tree.

Every node is interned: creating a node that is structurally equal to a live
node returns the live node. Application code should not create nodes
directly, since these classes perform no rewriting; the smart constructors in
`~symbolic` do that before a node exists.
"""
import enum
import fractions
import numbers
import typing

from symcanon.core import algebraic
from symcanon.core import iterables


class Kind(enum.Enum):
    """The variant tag of an expression node."""

    NUMBER = 'number'
    CONSTANT = 'constant'
    VARIABLE = 'variable'
    NEGATE = 'negate'
    ABSOLUTE = 'absolute'
    ROOT = 'root'
    POWER = 'power'
    DIVIDE = 'divide'
    SUBTRACT = 'subtract'
    ADD = 'add'
    MULTIPLY = 'multiply'


UNARY = frozenset({Kind.NEGATE, Kind.ABSOLUTE, Kind.ROOT})
BINARY = frozenset({Kind.POWER, Kind.DIVIDE, Kind.SUBTRACT})
VARIADIC = frozenset({Kind.ADD, Kind.MULTIPLY})


class InvalidRootDegree(ValueError):
    """The degree of a root is not an integer greater than 1."""

    def __init__(self, degree: typing.Any) -> None:
        self.degree = degree

    def __str__(self) -> str:
        return f"Root degree must be an integer >= 2, not {self.degree!r}"


class Expression(algebraic.Operable, metaclass=iterables.InstanceSet):
    """Base class for symbolic expressions.

    Instances are immutable and interned. Two expressions are equal if they
    have the same kind and equal fields, recursively; because the smart
    constructors always produce canonical trees, structural equality is
    mathematical equality for everything the rewrite rules cover.
    """

    __slots__ = ('_hash', '__weakref__')

    kind: Kind = None

    # Let numpy defer to our reflected operators.
    __array_ufunc__ = None

    @property
    def operands(self) -> typing.Tuple['Expression', ...]:
        """The direct sub-expressions of this expression."""
        return ()

    def _fields(self) -> tuple:
        """The values that determine structural equality."""
        return ()

    def implement(self, func, mode, *others):
        """Build the canonical result of a standard operator."""
        from symcanon.core import symbolic
        operation = symbolic.OPERATIONS.get(func)
        if operation is None:
            return NotImplemented
        if mode == 'unary':
            return operation(self)
        try:
            other = symbolic.asexpression(others[0])
        except TypeError:
            return NotImplemented
        if mode == 'forward':
            return operation(self, other)
        if mode == 'reverse':
            return operation(other, self)
        raise ValueError(f"Unknown operator mode {mode!r}")

    def __eq__(self, other) -> bool:
        """True if two expressions have identical canonical structure."""
        if self is other:
            return True
        if not isinstance(other, Expression):
            return NotImplemented
        return (
            other.kind == self.kind
            and other._hash == self._hash
            and other._fields() == self._fields()
        )

    def __ne__(self, other) -> bool:
        """True if two expressions differ in canonical structure."""
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return self._hash

    def __reduce__(self):
        """Support copying and pickling by re-interning."""
        return (type(self), self._fields())

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


class Number(Expression):
    """An exact rational number in lowest terms."""

    __slots__ = ('_value',)

    kind = Kind.NUMBER

    @classmethod
    def _generate_key(cls, value: fractions.Fraction):
        return fractions.Fraction(value)

    def __init__(self, value: fractions.Fraction) -> None:
        self._value = fractions.Fraction(value)
        self._hash = hash(self._value)

    @property
    def value(self) -> fractions.Fraction:
        """The value of this number."""
        return self._value

    @property
    def numerator(self) -> int:
        """The numerator, which carries the sign."""
        return self._value.numerator

    @property
    def denominator(self) -> int:
        """The (positive) denominator."""
        return self._value.denominator

    def is_integer(self) -> bool:
        """True if this number has denominator 1."""
        return self._value.denominator == 1

    def _fields(self) -> tuple:
        return (self._value,)

    def __eq__(self, other) -> bool:
        """True if `other` is the same number.

        A number also compares equal to the equivalent Python rational (e.g.,
        ``Number(3) == 3``), and hashes like it.
        """
        if isinstance(other, numbers.Rational) and not isinstance(other, bool):
            return self._value == other
        return super().__eq__(other)

    def __hash__(self) -> int:
        return self._hash

    def __int__(self):
        """Called for int(self) on an integral number."""
        if self.is_integer():
            return self._value.numerator
        raise TypeError(f"Can't convert {self!r} to an integer") from None

    def __float__(self):
        """Called for float(self)."""
        return float(self._value)

    def __repr__(self) -> str:
        return f"Number({self._value})"


class Constant(Expression):
    """A named mathematical constant.

    The sort order fixes the relative position of constants in a commutative
    operation.
    """

    __slots__ = ('_name', '_sort_order', '_symbol')

    kind = Kind.CONSTANT

    @classmethod
    def _generate_key(cls, name: str, sort_order: int, symbol: str=None):
        return name

    def __init__(self, name: str, sort_order: int, symbol: str=None) -> None:
        self._name = name
        self._sort_order = sort_order
        self._symbol = symbol or name
        self._hash = hash((self.kind, name))

    @property
    def name(self) -> str:
        """The identifying name of this constant."""
        return self._name

    @property
    def sort_order(self) -> int:
        """The position of this constant relative to other constants."""
        return self._sort_order

    @property
    def symbol(self) -> str:
        """The conventional symbol for this constant."""
        return self._symbol

    def _fields(self) -> tuple:
        return (self._name, self._sort_order, self._symbol)

    def __repr__(self) -> str:
        return f"Constant({self._name!r})"


class Variable(Expression):
    """A variable, identified solely by its name."""

    __slots__ = ('_name',)

    kind = Kind.VARIABLE

    @classmethod
    def _generate_key(cls, name: str):
        return name

    def __init__(self, name: str) -> None:
        self._name = name
        self._hash = hash((self.kind, name))

    @property
    def name(self) -> str:
        """The name of this variable."""
        return self._name

    def _fields(self) -> tuple:
        return (self._name,)

    def __repr__(self) -> str:
        return f"Variable({self._name!r})"


class Unary(Expression):
    """A negation, absolute value, or root of one operand."""

    __slots__ = ('_kind', '_operand', '_degree')

    @classmethod
    def _generate_key(cls, kind: Kind, operand: Expression, degree: int=None):
        return (kind, operand, degree)

    def __init__(
        self,
        kind: Kind,
        operand: Expression,
        degree: int=None,
    ) -> None:
        if kind not in UNARY:
            raise ValueError(f"{kind} is not a unary operation")
        if kind == Kind.ROOT and (degree is None or degree < 2):
            raise InvalidRootDegree(degree)
        self._kind = kind
        self._operand = operand
        self._degree = degree if kind == Kind.ROOT else None
        self._hash = hash((kind, operand, self._degree))

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def operand(self) -> Expression:
        """The single operand."""
        return self._operand

    @property
    def operands(self) -> typing.Tuple[Expression]:
        return (self._operand,)

    @property
    def degree(self) -> typing.Optional[int]:
        """The degree of a root, or `None` for other operations."""
        return self._degree

    def _fields(self) -> tuple:
        return (self._kind, self._operand, self._degree)

    def __repr__(self) -> str:
        name = self._kind.name.title()
        if self._kind == Kind.ROOT:
            return f"{name}({self._operand!r}, {self._degree})"
        return f"{name}({self._operand!r})"


class Binary(Expression):
    """A power, quotient, or difference of two ordered operands."""

    __slots__ = ('_kind', '_first', '_second')

    @classmethod
    def _generate_key(cls, kind: Kind, first: Expression, second: Expression):
        return (kind, first, second)

    def __init__(
        self,
        kind: Kind,
        first: Expression,
        second: Expression,
    ) -> None:
        if kind not in BINARY:
            raise ValueError(f"{kind} is not a binary operation")
        self._kind = kind
        self._first = first
        self._second = second
        self._hash = hash((kind, first, second))

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def first(self) -> Expression:
        """The base, dividend, or minuend."""
        return self._first

    @property
    def second(self) -> Expression:
        """The exponent, divisor, or subtrahend."""
        return self._second

    @property
    def operands(self) -> typing.Tuple[Expression, Expression]:
        return (self._first, self._second)

    def _fields(self) -> tuple:
        return (self._kind, self._first, self._second)

    def __repr__(self) -> str:
        name = self._kind.name.title()
        return f"{name}({self._first!r}, {self._second!r})"


class Variadic(Expression):
    """A sum or product of two or more sorted, flattened operands."""

    __slots__ = ('_kind', '_operands')

    @classmethod
    def _generate_key(cls, kind: Kind, operands: typing.Sequence[Expression]):
        return (kind, tuple(operands))

    def __init__(
        self,
        kind: Kind,
        operands: typing.Sequence[Expression],
    ) -> None:
        if kind not in VARIADIC:
            raise ValueError(f"{kind} is not a variadic operation")
        operands = tuple(operands)
        if len(operands) < 2:
            raise ValueError(
                f"{kind.name.title()} needs at least two operands"
            ) from None
        self._kind = kind
        self._operands = operands
        self._hash = hash((kind, operands))

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def operands(self) -> typing.Tuple[Expression, ...]:
        return self._operands

    def _fields(self) -> tuple:
        return (self._kind, self._operands)

    def __repr__(self) -> str:
        name = self._kind.name.title()
        return f"{name}({', '.join(repr(operand) for operand in self._operands)})"


ZERO = Number(0)
"""The additive identity."""

ONE = Number(1)
"""The multiplicative identity."""

MINUS_ONE = Number(-1)

PI = Constant('pi', 0, 'π')
E = Constant('e', 1, 'e')

CONSTANTS = {constant.name: constant for constant in (PI, E)}
"""The available named constants."""
