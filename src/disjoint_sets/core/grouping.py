"""Class grouping of keyed items using KeyedIndex."""

from dataclasses import dataclass
import logging
from typing import Any, Hashable

import pandas as pd

from disjoint_sets.core.combine import get_combiner
from disjoint_sets.core.config import GroupingConfig
from disjoint_sets.forest import KeyedIndex

logger = logging.getLogger(__name__)


@dataclass
class KeyedClass:
    """An equivalence class with its merged value."""

    class_id: int  # Forest id of the representative
    value: Any
    members: list[Hashable]  # Keys resolving to this class

    @property
    def size(self) -> int:
        """Number of keyed members in the class."""
        return len(self.members)

    @property
    def is_singleton(self) -> bool:
        """True if the class has at most one keyed member."""
        return self.size <= 1


@dataclass
class MergeSummary:
    """Counts of what happened while merging a pairs table.

    Attributes:
        merged: Pairs that joined two different classes
        redundant: Pairs whose keys already shared a class
        skipped: Pairs naming a key that is not in the index
    """

    merged: int = 0
    redundant: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.merged + self.redundant + self.skipped


class ClassGrouper:
    """Builds equivalence classes from an items table and a pairs table."""

    def __init__(self, config: GroupingConfig | None = None) -> None:
        """
        Initialize with grouping configuration.

        Args:
            config: Column names, combine function and failure policy.
                Defaults to GroupingConfig().
        """
        self.config = config or GroupingConfig()
        self.combine = get_combiner(self.config.combine)

    def build_index(self, items: pd.DataFrame) -> KeyedIndex:
        """
        Insert one slot per items row.

        Args:
            items: DataFrame with key and value columns

        Returns:
            KeyedIndex holding every row as a singleton class

        Raises:
            KeyError: If the key or value column is missing
        """
        self._require_columns(items, [self.config.key_column, self.config.value_column])

        index: KeyedIndex = KeyedIndex()
        keys = items[self.config.key_column].tolist()
        values = items[self.config.value_column].tolist()
        for key, value in zip(keys, values):
            if key in index:
                logger.warning(
                    f"Duplicate key {key!r}: slot {index.index_of(key)} is no longer reachable by key"
                )
            index.insert(key, value)

        logger.debug(f"Built index with {len(index)} slots")
        return index

    def index_from_pairs(self, pairs: pd.DataFrame) -> KeyedIndex:
        """
        Insert one slot with value 1 per distinct key in the pairs table.

        Keys get slots in order of first appearance, reading each row left
        then right.
        """
        self._require_columns(pairs, [self.config.left_column, self.config.right_column])

        index: KeyedIndex = KeyedIndex()
        for left, right in self._pair_rows(pairs):
            for key in (left, right):
                if key not in index:
                    index.insert(key, 1)

        logger.debug(f"Built index with {len(index)} slots from pairs")
        return index

    def merge_pairs(self, index: KeyedIndex, pairs: pd.DataFrame) -> MergeSummary:
        """
        Merge the classes of every pair of keys.

        In strict mode a failing combine function clears the index and the
        error propagates. Otherwise the failing merge is undone before the
        error propagates.

        Args:
            index: Index to merge into
            pairs: DataFrame with left and right key columns

        Returns:
            MergeSummary of the processed pairs
        """
        self._require_columns(pairs, [self.config.left_column, self.config.right_column])
        merge = index.try_merge if self.config.strict else index.merge

        summary = MergeSummary()
        for left, right in self._pair_rows(pairs):
            left_class = index.resolve(left)
            right_class = index.resolve(right)
            if left_class is None or right_class is None:
                missing = left if left_class is None else right
                logger.warning(f"Skipping pair ({left!r}, {right!r}): unknown key {missing!r}")
                summary.skipped += 1
                continue

            if left_class == right_class:
                summary.redundant += 1
            else:
                summary.merged += 1
            merge(left, right, self.combine)

        logger.debug(
            f"Processed {summary.total} pairs: {summary.merged} merged, "
            f"{summary.redundant} redundant, {summary.skipped} skipped"
        )
        return summary

    def collect(self, index: KeyedIndex) -> list[KeyedClass]:
        """
        Get all classes with their member keys, ordered by class id.

        Classes whose slots are no longer reachable by any key are included
        with an empty member list.
        """
        members: dict[int, list[Hashable]] = {}
        for key in index.keys():
            class_id = index.resolve(key)
            if class_id is not None:
                members.setdefault(class_id, []).append(key)

        return [
            KeyedClass(
                class_id=class_id,
                value=value,
                members=sorted(members.get(class_id, []), key=str),
            )
            for class_id, value in index.classes()
        ]

    def group(self, items: pd.DataFrame | None, pairs: pd.DataFrame) -> list[KeyedClass]:
        """
        Build classes from items and pairs.

        Args:
            items: Items table, or None to derive keys from the pairs table
            pairs: Pairs of keys to merge

        Returns:
            List of KeyedClass ordered by class id
        """
        index = self.index_from_pairs(pairs) if items is None else self.build_index(items)
        self.merge_pairs(index, pairs)
        return self.collect(index)

    def _pair_rows(self, pairs: pd.DataFrame) -> list[tuple[Any, Any]]:
        return list(
            zip(
                pairs[self.config.left_column].tolist(),
                pairs[self.config.right_column].tolist(),
            )
        )

    @staticmethod
    def _require_columns(df: pd.DataFrame, columns: list[str]) -> None:
        missing = [col for col in columns if col not in df.columns]
        if missing:
            raise KeyError(f"Missing required columns: {missing}")
