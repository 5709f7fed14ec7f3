"""Key-addressed front end for DisjointForest."""

from typing import Callable, Generic, Hashable, Iterator, TypeVar

from disjoint_sets.forest.disjoint_forest import DisjointForest
from disjoint_sets.forest.result_types import Replacement

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class KeyedIndex(Generic[K, V]):
    """Maps keys onto slots of a DisjointForest.

    Each key remembers the slot created when it was inserted. The mapping is
    never rewritten by merges; class resolution always goes through the
    forest. Class ids returned here are forest ids, not keys.

    Attributes:
        keys_to_ids: Dictionary mapping each key to its original slot id.
    """

    def __init__(self) -> None:
        """Initialize empty index."""
        self.keys_to_ids: dict[K, int] = {}
        self._forest: DisjointForest[V] = DisjointForest()

    def __len__(self) -> int:
        """Number of forest slots, including ones no longer reachable by key."""
        return len(self._forest)

    def __contains__(self, key: object) -> bool:
        return key in self.keys_to_ids

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={self.keys_to_ids!r}, forest={self._forest!r})"

    def is_empty(self) -> bool:
        return self._forest.is_empty()

    def keys(self) -> Iterator[K]:
        """Iterate over the mapped keys in insertion order."""
        return iter(self.keys_to_ids)

    def as_forest(self) -> DisjointForest[V]:
        """Get the underlying forest, for lookups by raw slot id."""
        return self._forest

    def insert(self, key: K, value: V) -> int:
        """Insert ``value`` as a new class and map ``key`` to its slot.

        An existing mapping for an equal key is overwritten. The old slot
        stays in the forest and keeps taking part in merges, but is only
        reachable by its id.

        Returns:
            The id of the new slot.
        """
        i = self._forest.insert(value)
        self.keys_to_ids[key] = i
        return i

    def index_of(self, key: K) -> int | None:
        """Get the slot id created for ``key``, or None if it is not mapped."""
        return self.keys_to_ids.get(key)

    def resolve(self, key: K) -> int | None:
        """Get the class id of ``key``, or None if it is not mapped."""
        i = self.index_of(key)
        if i is None:
            return None
        return self._forest.resolve(i)

    def get_with_class(self, key: K) -> tuple[int, V] | None:
        """Get ``(class_id, value)`` for ``key``, or None if it is not mapped."""
        i = self.index_of(key)
        if i is None:
            return None
        return self._forest.resolve_with_value(i)

    def get(self, key: K) -> V | None:
        """Get the value of the class containing ``key``."""
        i = self.index_of(key)
        if i is None:
            return None
        return self._forest.get(i)

    def replace(self, key: K, value: V) -> Replacement[V]:
        """Swap in a new value for the class containing ``key``.

        Returns:
            ``Replacement(True, old_value)``, or ``Replacement(False, value)``
            when ``key`` is not mapped.
        """
        i = self.index_of(key)
        if i is None:
            return Replacement(replaced=False, value=value)
        return self._forest.replace(i, value)

    def _ids(self, a: K, b: K) -> tuple[int, int] | None:
        ai = self.index_of(a)
        bi = self.index_of(b)
        if ai is None or bi is None:
            return None
        return ai, bi

    def merge(self, a: K, b: K, combine: Callable[[V, V], V]) -> int | None:
        """Merge the classes of keys ``a`` and ``b``.

        If either key is not mapped nothing happens and ``combine`` is not
        called. Otherwise behaves like ``DisjointForest.merge``.

        Returns:
            The surviving class id, or None if either key is not mapped.
        """
        ids = self._ids(a, b)
        if ids is None:
            return None
        return self._forest.merge(ids[0], ids[1], combine)

    def try_merge(self, a: K, b: K, combine: Callable[[V, V], V]) -> int | None:
        """Merge the classes of keys ``a`` and ``b`` with a fallible combine.

        If ``combine`` raises, the underlying forest is cleared (see
        ``DisjointForest.try_merge``), the key map is emptied as well, and the
        exception propagates. Ids inserted afterwards start again at 0.

        Returns:
            The surviving class id, or None if either key is not mapped.
        """
        ids = self._ids(a, b)
        if ids is None:
            return None
        try:
            return self._forest.try_merge(ids[0], ids[1], combine)
        except BaseException:
            self.keys_to_ids = {}
            raise

    def classes(self) -> Iterator[tuple[int, V]]:
        """Yield ``(class_id, value)`` for every class, by forest id."""
        return self._forest.classes()

    def into_classes(self) -> Iterator[tuple[int, V]]:
        """Take every class out, leaving the index empty."""
        self.keys_to_ids = {}
        forest, self._forest = self._forest, DisjointForest()
        return forest.into_classes()
