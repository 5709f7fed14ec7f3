"""Union-find collections that attach a value to every equivalence class.

This package provides:
- DisjointForest: array-backed forest addressed by integer slot ids
- KeyedIndex: the same forest addressed by hashable keys
- Replacement: outcome of replacing a class value
"""

from disjoint_sets.forest.disjoint_forest import DisjointForest
from disjoint_sets.forest.keyed_index import KeyedIndex
from disjoint_sets.forest.result_types import Replacement

__all__ = [
    "DisjointForest",
    "KeyedIndex",
    "Replacement",
]
