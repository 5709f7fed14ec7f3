"""Disjoint forest (union-find) that carries one value per equivalence class.

Slots are addressed by the integer id returned from ``insert``. A slot either
holds the value of its class (a class holder) or points toward another slot
(an indirection). Ids are never reused, so an id stays a valid lookup key for
as long as the forest lives, even after its slot has been merged away.
"""

from dataclasses import dataclass
import logging
from typing import Callable, Generic, Iterable, Iterator, TypeVar

from disjoint_sets.forest.result_types import Replacement

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


@dataclass(slots=True)
class _Indirection:
    """Pointer from a demoted slot toward its class holder.

    A negative target marks a slot whose value is detached mid-merge.
    """

    target: int


class DisjointForest(Generic[T]):
    """Array-backed union-find forest with a value attached to every class.

    Reads compress paths: after ``resolve`` every indirection visited on the
    way points straight at the representative. The mutable accessors
    (``get_mut``, ``get_mut_with_class``) walk the chain without rewriting it.

    Merging keeps the smaller of the two representative ids as the survivor,
    so the surviving id does not depend on argument order.

    The forest is not safe for concurrent use, including concurrent reads,
    since reads rewrite indirections.
    """

    def __init__(self) -> None:
        """Initialize an empty forest."""
        self._slots: list = []

    @classmethod
    def with_capacity(cls, capacity: int) -> "DisjointForest[T]":
        """Create an empty forest expected to hold ``capacity`` elements.

        Python lists grow on demand, so the capacity is only validated.

        Raises:
            ValueError: If capacity is negative.
        """
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        return cls()

    @classmethod
    def from_iterable(cls, values: Iterable[T]) -> "DisjointForest[T]":
        """Create a forest with one singleton class per value, in order."""
        forest = cls()
        forest.extend(values)
        return forest

    def __len__(self) -> int:
        """Number of slots, class holders and indirections alike."""
        return len(self._slots)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._slots!r})"

    def is_empty(self) -> bool:
        return not self._slots

    def num_classes(self) -> int:
        """Get number of distinct classes."""
        return sum(1 for slot in self._slots if not isinstance(slot, _Indirection))

    def copy(self) -> "DisjointForest[T]":
        """Copy the slot structure. Values are shared, not copied."""
        return self.map(lambda value: value)

    def clear(self) -> None:
        """Drop every slot. All previously issued ids stop resolving."""
        self._slots.clear()

    def insert(self, value: T) -> int:
        """Add a new singleton class holding ``value``.

        Returns:
            The id of the new slot, equal to the previous length.
        """
        i = len(self._slots)
        self._slots.append(value)
        return i

    def extend(self, values: Iterable[T]) -> None:
        """Insert every value as its own class, in order."""
        for value in values:
            self.insert(value)

    def _find(self, i: int, compress: bool) -> int | None:
        if not 0 <= i < len(self._slots):
            return None

        path: list[_Indirection] = []
        slot = self._slots[i]
        while isinstance(slot, _Indirection):
            if slot.target < 0:
                return None
            path.append(slot)
            i = slot.target
            slot = self._slots[i]

        if compress:
            for indirection in path:
                indirection.target = i  # Path compression
        return i

    def resolve(self, i: int) -> int | None:
        """Find the class id of slot ``i`` with path compression.

        Args:
            i: Slot id returned by ``insert``.

        Returns:
            The id of the representative slot, or None if ``i`` is out of range.
        """
        return self._find(i, compress=True)

    def resolve_with_value(self, i: int) -> tuple[int, T] | None:
        """Find the class id of slot ``i`` and the value of that class.

        Args:
            i: Slot id returned by ``insert``.

        Returns:
            ``(class_id, value)``, or None if ``i`` is out of range.
        """
        c = self._find(i, compress=True)
        if c is None:
            return None
        return c, self._slots[c]

    def get(self, i: int) -> T | None:
        """Get the value of the class containing slot ``i``.

        Returns None if ``i`` is out of range. Use ``resolve_with_value`` when
        stored values may themselves be None.
        """
        found = self.resolve_with_value(i)
        return None if found is None else found[1]

    def get_mut_with_class(self, i: int) -> tuple[int, T] | None:
        """Like ``resolve_with_value`` but leaves indirections untouched.

        Meant for callers about to mutate the returned value in place.
        """
        c = self._find(i, compress=False)
        if c is None:
            return None
        return c, self._slots[c]

    def get_mut(self, i: int) -> T | None:
        """Like ``get`` but leaves indirections untouched."""
        found = self.get_mut_with_class(i)
        return None if found is None else found[1]

    def is_connected(self, a: int, b: int) -> bool:
        """Check if slots ``a`` and ``b`` belong to the same class.

        Returns:
            True if both ids resolve to the same class, False otherwise
            (including when either id is out of range).
        """
        ac = self.resolve(a)
        return ac is not None and ac == self.resolve(b)

    def replace(self, i: int, value: T) -> Replacement[T]:
        """Swap in a new value for the class containing slot ``i``.

        Args:
            i: Slot id in the class to update.
            value: New value for the class.

        Returns:
            ``Replacement(True, old_value)`` on success, or
            ``Replacement(False, value)`` when ``i`` is out of range.
        """
        c = self._find(i, compress=False)
        if c is None:
            return Replacement(replaced=False, value=value)
        old = self._slots[c]
        self._slots[c] = value
        return Replacement(replaced=True, value=old)

    def _resolve_pair(self, a: int, b: int) -> tuple[int, int] | None:
        ac = self.resolve(a)
        if ac is None:
            return None
        bc = self.resolve(b)
        if bc is None:
            return None
        return ac, bc

    def _detach(self, c: int) -> T:
        value = self._slots[c]
        self._slots[c] = _Indirection(-1)
        return value

    def _attach(self, ac: int, bc: int, value: T) -> int:
        survivor, demoted = min(ac, bc), max(ac, bc)
        self._slots[survivor] = value
        self._slots[demoted] = _Indirection(survivor)
        return survivor

    def merge(self, a: int, b: int, combine: Callable[[T, T], T]) -> int | None:
        """Merge the classes containing slots ``a`` and ``b``.

        ``combine`` is called as ``combine(value_of_a, value_of_b)`` and its
        result becomes the value of the merged class. It is not called when
        both slots already share a class.

        ``combine`` is expected not to raise. If it does, both classes get
        their values back and the exception propagates. While ``combine``
        runs, ids in either class do not resolve.

        Args:
            a: Slot id in the first class.
            b: Slot id in the second class.
            combine: Function merging the two class values.

        Returns:
            The id of the surviving class (the smaller representative id), or
            None if either id is out of range.
        """
        pair = self._resolve_pair(a, b)
        if pair is None:
            return None
        ac, bc = pair
        if ac == bc:
            return ac

        av = self._detach(ac)
        bv = self._detach(bc)
        try:
            value = combine(av, bv)
        except BaseException:
            self._slots[ac] = av
            self._slots[bc] = bv
            raise
        return self._attach(ac, bc, value)

    def try_merge(self, a: int, b: int, combine: Callable[[T, T], T]) -> int | None:
        """Merge the classes containing ``a`` and ``b`` with a fallible combine.

        Both values are detached before ``combine`` runs. If ``combine``
        raises, the forest is cleared entirely and the exception propagates:
        every id issued before the call, related to the merge or not, stops
        resolving.

        Args:
            a: Slot id in the first class.
            b: Slot id in the second class.
            combine: Function merging the two class values; may raise.

        Returns:
            The id of the surviving class, or None if either id is out of range.
        """
        pair = self._resolve_pair(a, b)
        if pair is None:
            return None
        ac, bc = pair
        if ac == bc:
            return ac

        av = self._detach(ac)
        bv = self._detach(bc)
        try:
            value = combine(av, bv)
        except BaseException as e:
            logger.warning(
                f"combine failed merging classes {ac} and {bc}, "
                f"clearing {len(self._slots)} slots: {e!r}"
            )
            self.clear()
            raise
        return self._attach(ac, bc, value)

    def map(self, transform: Callable[[T], U]) -> "DisjointForest[U]":
        """Build a forest with the same ids and classes and transformed values.

        ``transform`` is applied once to every class value, in id order.
        Indirections are copied as they are.
        """
        mapped: DisjointForest[U] = DisjointForest()
        mapped._slots = [
            _Indirection(slot.target) if isinstance(slot, _Indirection) else transform(slot)
            for slot in self._slots
        ]
        return mapped

    def classes(self) -> Iterator[tuple[int, T]]:
        """Yield ``(class_id, value)`` for every class, in increasing id order.

        The generator reads the live slot list lazily; do not modify the
        forest while consuming it.
        """
        for i, slot in enumerate(self._slots):
            if not isinstance(slot, _Indirection):
                yield i, slot

    def into_classes(self) -> Iterator[tuple[int, T]]:
        """Take every class out of the forest.

        The slots are detached when this method is called, leaving the forest
        empty; the returned generator then yields ``(class_id, value)`` in
        increasing id order.
        """
        slots, self._slots = self._slots, []
        return (
            (i, slot) for i, slot in enumerate(slots) if not isinstance(slot, _Indirection)
        )
