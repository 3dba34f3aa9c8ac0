import abc
import threading
import weakref


class InstanceSet(abc.ABCMeta):
    """A metaclass for sets of interned instances.

    Using this class as a metaclass will ensure that only one live instance of
    the object class exists for a given combination of initializing arguments.
    Given a concrete implementation of `_generate_key` on the instance class,
    this metaclass will simply return the appropriate existing instance instead
    of creating a new one.

    The instance table holds weak references, so an instance disappears from
    the table once nothing else refers to it. Instance classes must therefore
    support weak references (e.g., by including '__weakref__' in
    `__slots__`).

    See https://refactoring.guru/design-patterns/singleton/python/example
    """

    _instances = weakref.WeakValueDictionary()
    _lock = threading.RLock()

    def __call__(self, *args, **kwargs):
        """Ensure that only one instance of the given object exists."""
        key = (self, self._generate_key(*args, **kwargs))
        with InstanceSet._lock:
            existing = InstanceSet._instances.get(key)
            if existing is not None:
                return existing
            instance = super().__call__(*args, **kwargs)
            InstanceSet._instances[key] = instance
            return instance

    def _generate_key(self, *args, **kwargs):
        """Generate a unique instance key.

        Instance classes must override this method with one that maps the given
        arguments to a valid dictionary key, which will be associated with a
        unique instance.
        """
        raise TypeError(
            "Can't generate unique mapping key from arguments"
        ) from None

    def count(self) -> int:
        """The number of live instances of this class."""
        with InstanceSet._lock:
            return sum(1 for cls, _ in InstanceSet._instances.keys() if cls is self)
