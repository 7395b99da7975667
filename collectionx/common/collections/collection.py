from __future__ import annotations

import functools
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from random import Random
from typing import Any, Callable, Optional, TypeVar, Union

from typing_extensions import Self

from collectionx.common.collections.itertools import (
    normalize_index,
    nth,
    sample_distinct,
    tail,
    take,
)
from collectionx.common.config import CollectionConfig
from collectionx.common.logger import Logger

logger = Logger()

K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")

# Values of these types compare by value in `Collection.equals`; anything else by identity.
_PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)
_MISSING: Any = object()

_EntriesLike = Union[Mapping[K, V], Iterable[tuple[K, V]]]


class EmptyReductionException(TypeError):
    """Raised when reducing an empty Collection without an initial value."""

    def __init__(
        self, message: str = "Reduce of empty collection with no initial value"
    ):
        super().__init__(message)


def _strictly_equal(first: Any, second: Any) -> bool:
    if first is second:
        return True
    # True == 1 in Python, so bools only match bools.
    if isinstance(first, bool) or isinstance(second, bool):
        return type(first) is type(second) and first == second
    return (
        isinstance(first, _PRIMITIVE_TYPES)
        and isinstance(second, _PRIMITIVE_TYPES)
        and first == second
    )


class Collection(MutableMapping[K, V]):
    """An insertion ordered mapping with list-like utility methods.

    Entries iterate in insertion order until the collection is re-ordered with
    :meth:`sort` or :meth:`reverse`. Updating an existing key keeps its position.
    Accessors that find nothing return None (or a short list) instead of raising.

    Callbacks are called with ``(value, key)``; ``reduce`` callbacks with
    ``(accumulator, value, key)``; sort comparators with ``(value_a, value_b, key_a, key_b)``.

    Type Parameters:
        K: The type of keys in the collection, must be hashable
        V: The type of values in the collection

    Example:
        >>> users = Collection([("u1", "ada"), ("u2", "bob"), ("u3", "cy")])
        >>> users.first(2)
        ['ada', 'bob']
        >>> users.filter(lambda name, _: name != "bob").key_array()
        ['u1', 'u3']
    """

    def __init__(
        self,
        entries: Optional[_EntriesLike[K, V]] = None,
        config: Optional[CollectionConfig] = None,
    ) -> None:
        """Initialize a Collection.

        Args:
            entries: Optional mapping or iterable of ``(key, value)`` pairs. For repeated keys the
                last value wins and the key keeps its first position.
            config: Optional CollectionConfig; defaults to ``CollectionConfig()``.
        """
        self._config: CollectionConfig = config or CollectionConfig()
        self._rng = Random(self._config.random_seed)
        self._entries: dict[K, V] = dict(entries) if entries is not None else {}
        self._array: Optional[list[V]] = None
        self._key_array: Optional[list[K]] = None

    @property
    def config(self) -> CollectionConfig:
        return self._config

    @property
    def size(self) -> int:
        """The number of entries in the collection."""
        return len(self._entries)

    # Mapping protocol

    def __getitem__(self, key: K) -> V:
        return self._entries[key]

    def __setitem__(self, key: K, value: V) -> None:
        self.set(key, value)

    def __delitem__(self, key: K) -> None:
        if not self.delete(key):
            raise KeyError(key)

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._entries.items())!r})"

    def __copy__(self) -> Self:
        return self.clone()

    # Mutation primitives

    def set(self, key: K, value: V) -> Self:
        """Sets the value for a key, appending the key if it is new.

        Args:
            key: The key to set
            value: The value to associate with the key

        Returns:
            Self: This collection, for chaining
        """
        self._invalidate_views()
        self._entries[key] = value
        return self

    def delete(self, key: K) -> bool:
        """Removes a key if present.

        Args:
            key: The key to remove

        Returns:
            bool: Whether an entry was removed
        """
        self._invalidate_views()
        if key not in self._entries:
            return False
        del self._entries[key]
        return True

    def has(self, key: K) -> bool:
        return key in self._entries

    def clear(self) -> None:
        self._invalidate_views()
        self._entries.clear()

    # Cached views

    def array(self) -> list[V]:
        """Returns the values in order, as a list cached until the collection changes.

        The cache is rebuilt whenever a key is set or deleted, the collection is re-ordered,
        or the length of the cached list no longer matches the collection.

        Warning: the returned list is the cache itself. Mutating it in place changes what
        later ``array()`` calls return until the collection next changes. Use
        :meth:`to_snapshot_list` for a list that is safe to mutate.

        Returns:
            list[V]: The values in iteration order
        """
        if not self._config.cache_views:
            return list(self._entries.values())
        if self._array is None or len(self._array) != len(self._entries):
            logger.debug(f"Rebuilding cached value array of {len(self._entries)} entries")
            self._array = list(self._entries.values())
        return self._array

    def key_array(self) -> list[K]:
        """Returns the keys in order, cached the same way as :meth:`array`.

        The same warning about mutating the returned list applies.

        Returns:
            list[K]: The keys in iteration order
        """
        if not self._config.cache_views:
            return list(self._entries.keys())
        if self._key_array is None or len(self._key_array) != len(self._entries):
            logger.debug(f"Rebuilding cached key array of {len(self._entries)} entries")
            self._key_array = list(self._entries.keys())
        return self._key_array

    def _invalidate_views(self) -> None:
        self._array = None
        self._key_array = None

    # Positional access

    def first(self, amount: Optional[float] = None) -> Union[Optional[V], list[V]]:
        """Obtains the first value(s) in this collection.

        Args:
            amount (Optional[float]): Number of values to obtain from the beginning, truncated
                toward zero. A negative amount obtains values from the end instead,
                i.e. ``first(-2) == last(2)``.

        Returns:
            The first value (None if empty) when no amount is given, otherwise a list of
            at most ``amount`` values
        """
        if amount is None:
            return next(iter(self._entries.values()), None)
        if amount < 0:
            return self.last(-amount)
        return take(self._entries.values(), amount)

    def first_key(self, amount: Optional[float] = None) -> Union[Optional[K], list[K]]:
        """Obtains the first key(s) in this collection. See :meth:`first`."""
        if amount is None:
            return next(iter(self._entries), None)
        if amount < 0:
            return self.last_key(-amount)
        return take(self._entries.keys(), amount)

    def last(self, amount: Optional[float] = None) -> Union[Optional[V], list[V]]:
        """Obtains the last value(s) in this collection.

        Args:
            amount (Optional[float]): Number of values to obtain from the end, truncated toward
                zero. A negative amount obtains values from the beginning instead.

        Returns:
            The last value (None if empty) when no amount is given, otherwise a list of
            at most ``amount`` values, in iteration order
        """
        if amount is None:
            return next(reversed(self._entries.values()), None)
        if amount < 0:
            return self.first(-amount)
        return tail(self._entries.values(), amount)

    def last_key(self, amount: Optional[float] = None) -> Union[Optional[K], list[K]]:
        """Obtains the last key(s) in this collection. See :meth:`last`."""
        if amount is None:
            return next(reversed(self._entries.keys()), None)
        if amount < 0:
            return self.first_key(-amount)
        return tail(self._entries.keys(), amount)

    def at(self, index: float) -> Optional[V]:
        """Returns the value at a position, where negative positions count back from the end.

        Args:
            index (float): The position; fractional positions are truncated toward zero

        Returns:
            Optional[V]: The value, or None if the position is out of range
        """
        position = normalize_index(index, len(self._entries))
        return None if position is None else nth(self._entries.values(), position)

    def key_at(self, index: float) -> Optional[K]:
        """Returns the key at a position. See :meth:`at`."""
        position = normalize_index(index, len(self._entries))
        return None if position is None else nth(self._entries.keys(), position)

    # Random access

    def random(self, amount: Optional[float] = None) -> Union[Optional[V], list[V]]:
        """Obtains random value(s) from this collection.

        Each position is drawn at most once, so the returned list never holds the
        same entry twice.

        Args:
            amount (Optional[float]): Number of values to draw, truncated toward zero

        Returns:
            A single value (None if empty) when no amount is given, otherwise a list of
            ``min(amount, size)`` values
        """
        values = list(self._entries.values())
        if amount is None:
            return self._rng.choice(values) if values else None
        return sample_distinct(values, amount, self._rng)

    def random_key(self, amount: Optional[float] = None) -> Union[Optional[K], list[K]]:
        """Obtains random key(s) from this collection. See :meth:`random`."""
        keys = list(self._entries.keys())
        if amount is None:
            return self._rng.choice(keys) if keys else None
        return sample_distinct(keys, amount, self._rng)

    # Search

    def find(self, fn: Callable[[V, K], bool]) -> Optional[V]:
        """Returns the first value for which ``fn(value, key)`` is truthy, or None.

        To look up by key use :meth:`get` instead.
        """
        for key, value in self._entries.items():
            if fn(value, key):
                return value
        return None

    def find_key(self, fn: Callable[[V, K], bool]) -> Optional[K]:
        """Returns the first key for which ``fn(value, key)`` is truthy, or None."""
        for key, value in self._entries.items():
            if fn(value, key):
                return key
        return None

    def sweep(self, fn: Callable[[V, K], bool]) -> int:
        """Removes the entries for which ``fn(value, key)`` is truthy.

        The entries are snapshotted before the first call to ``fn``, so ``fn`` may
        delete the key it is called with.

        Args:
            fn: The predicate selecting entries to remove

        Returns:
            int: The number of removed entries
        """
        previous_size = len(self._entries)
        for key, value in list(self._entries.items()):
            if fn(value, key):
                self.delete(key)
        removed = previous_size - len(self._entries)
        logger.debug(f"Swept {removed} of {previous_size} entries")
        return removed

    def has_all(self, *keys: K) -> bool:
        return all(key in self._entries for key in keys)

    def has_any(self, *keys: K) -> bool:
        return any(key in self._entries for key in keys)

    # Transforms

    def filter(self, fn: Callable[[V, K], bool]) -> Self:
        """Returns a new collection holding the entries for which ``fn(value, key)`` is truthy.

        Example:
            >>> Collection([("a", 1), ("b", 2), ("c", 3)]).filter(lambda v, _: v % 2 == 1).array()
            [1, 3]
        """
        results = self._new_collection()
        for key, value in self._entries.items():
            if fn(value, key):
                results.set(key, value)
        return results

    def partition(self, fn: Callable[[V, K], bool]) -> tuple[Self, Self]:
        """Splits the collection in two by a predicate.

        Args:
            fn: The predicate, called as ``fn(value, key)``

        Returns:
            tuple[Self, Self]: The entries that passed, and the entries that failed

        Example:
            >>> passed, failed = collection.partition(lambda guild, _: guild.member_count > 250)
        """
        passed = self._new_collection()
        failed = self._new_collection()
        for key, value in self._entries.items():
            if fn(value, key):
                passed.set(key, value)
            else:
                failed.set(key, value)
        return passed, failed

    def map(self, fn: Callable[[V, K], T]) -> list[T]:
        """Maps each entry to ``fn(value, key)``, returning the results as a list."""
        return [fn(value, key) for key, value in self._entries.items()]

    def map_values(self, fn: Callable[[V, K], T]) -> Collection[K, T]:
        """Returns a new collection with the same keys and values replaced by ``fn(value, key)``."""
        return self._new_collection(
            (key, fn(value, key)) for key, value in self._entries.items()
        )

    def flat_map(self, fn: Callable[[V, K], Mapping[T, Any]]) -> Collection[T, Any]:
        """Maps each entry to a collection and merges the results into one.

        Later results overwrite earlier ones on key collisions.

        Args:
            fn: Called as ``fn(value, key)``, must return a Collection (or any Mapping)

        Returns:
            The merged collection
        """
        collections = self.map(fn)
        return self._new_collection().concat(*collections)

    def each(self, fn: Callable[[V, K], Any]) -> Self:
        """Calls ``fn(value, key)`` for every entry and returns this collection.

        Example:
            >>> (
            ...     collection.each(lambda user, _: print(user.name))
            ...     .filter(lambda user, _: user.bot)
            ...     .each(lambda user, _: print(user.name))
            ... )
        """
        for key, value in self._entries.items():
            fn(value, key)
        return self

    def tap(self, fn: Callable[[Self], Any]) -> Self:
        """Calls ``fn`` with this collection and returns this collection."""
        fn(self)
        return self

    # Aggregation

    def some(self, fn: Callable[[V, K], bool]) -> bool:
        return any(fn(value, key) for key, value in self._entries.items())

    def every(self, fn: Callable[[V, K], bool]) -> bool:
        return all(fn(value, key) for key, value in self._entries.items())

    def reduce(self, fn: Callable[[Any, V, K], T], initial: Any = _MISSING) -> T:
        """Folds the entries, in order, into a single value.

        Args:
            fn: Called as ``fn(accumulator, value, key)``, returns the next accumulator
            initial: Starting accumulator. If omitted, the first value seeds the
                accumulator and folding starts at the second entry.

        Returns:
            The final accumulator

        Raises:
            EmptyReductionException: If the collection is empty and no initial value is given

        Example:
            >>> collection.reduce(lambda total, guild, _: total + guild.member_count, 0)
        """
        entries = iter(self._entries.items())
        if initial is _MISSING:
            try:
                _, accumulator = next(entries)
            except StopIteration:
                raise EmptyReductionException() from None
        else:
            accumulator = initial
        for key, value in entries:
            accumulator = fn(accumulator, value, key)
        return accumulator

    # Whole collection operations

    def clone(self) -> Self:
        """Creates a shallow copy of this collection, sharing its config."""
        return self._new_collection(self._entries)

    def concat(self, *collections: Mapping[K, V]) -> Self:
        """Combines this collection with others into a new collection.

        Entries are applied in argument order, later ones overwriting earlier ones.
        None of the source collections are modified.

        Example:
            >>> merged = some_collection.concat(other_collection, another_collection)
        """
        combined = self.clone()
        for collection in collections:
            for key, value in collection.items():
                combined.set(key, value)
        return combined

    def equals(self, collection: Optional[Mapping[K, V]]) -> bool:
        """Checks if this collection shares identical key-value pairings with another.

        Unlike ``==``, which compares values with ``==``, values must be the same object
        or equal primitives (None, bool, int, float, complex, str, bytes). Two
        collections holding equal but distinct lists are not ``equals``.

        Args:
            collection: The collection (or any Mapping) to compare with

        Returns:
            bool: Whether the collections have identical contents
        """
        if collection is None:
            return False
        if collection is self:
            return True
        if len(self._entries) != len(collection):
            return False
        for key, value in self._entries.items():
            if key not in collection or not _strictly_equal(value, collection[key]):
                return False
        return True

    def intersect(self, other: Mapping[K, T]) -> Collection[K, T]:
        """Returns the entries of ``other`` whose keys are also in this collection, in ``other``'s order."""
        results = self._new_collection()
        for key, value in other.items():
            if key in self._entries:
                results.set(key, value)
        return results

    def difference(self, other: Mapping[K, V]) -> Self:
        """Returns the entries whose keys are in exactly one of the two collections.

        Entries only in ``other`` come first, then entries only in this collection.
        """
        results = self._new_collection()
        for key, value in other.items():
            if key not in self._entries:
                results.set(key, value)
        for key, value in self._entries.items():
            if key not in other:
                results.set(key, value)
        return results

    def reverse(self) -> Self:
        """Reverses the iteration order in place and returns this collection."""
        self._entries = dict(reversed(self._entries.items()))
        self._invalidate_views()
        return self

    def to_snapshot_list(self) -> list[V]:
        """Returns a new list of the values in order, i.e. for ``json.dumps``. Keys are dropped."""
        return list(self._entries.values())

    # Sorting

    def sort(
        self, compare: Optional[Callable[[V, V, K, K], int]] = None
    ) -> Self:
        """Sorts the entries in place and returns this collection.

        The sort is stable. Without a comparator values are ordered ascending by their
        natural ordering, so they must be mutually comparable.

        Args:
            compare: Three-way comparator called as ``compare(value_a, value_b, key_a, key_b)``;
                negative puts a first, positive puts b first, zero keeps their relative order.

        Example:
            >>> collection.sort(lambda a, b, *_: a.created_timestamp - b.created_timestamp)
        """
        entries = list(self._entries.items())
        if compare is None:
            entries.sort(key=lambda entry: entry[1])
        else:
            entries.sort(
                key=functools.cmp_to_key(
                    lambda first, second: compare(
                        first[1], second[1], first[0], second[0]
                    )
                )
            )
        self._entries = dict(entries)
        self._invalidate_views()
        logger.debug(f"Sorted {len(entries)} entries")
        return self

    def sorted(self, compare: Optional[Callable[[V, V, K, K], int]] = None) -> Self:
        """Returns a sorted copy of this collection, leaving this one unchanged. See :meth:`sort`."""
        return self.clone().sort(compare)

    def _new_collection(self, entries: Optional[_EntriesLike[Any, Any]] = None) -> Any:
        """Creates the collection returned by derived operations such as :meth:`filter`.

        Subclasses whose constructor takes different arguments should override this.
        """
        return type(self)(entries, config=self._config)
