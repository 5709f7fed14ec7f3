"""Disjoint-set collections with per-class values."""

from disjoint_sets.forest import DisjointForest, KeyedIndex, Replacement

__version__ = "0.1.0"

__all__ = [
    "DisjointForest",
    "KeyedIndex",
    "Replacement",
]
