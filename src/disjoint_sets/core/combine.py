"""Named combine functions for merging class values."""

from typing import Any, Callable

Combiner = Callable[[Any, Any], Any]


def _concat(a: Any, b: Any) -> str:
    return f"{a}|{b}"


def _collect(a: Any, b: Any) -> list:
    left = a if isinstance(a, list) else [a]
    right = b if isinstance(b, list) else [b]
    return left + right


def _equal(a: Any, b: Any) -> Any:
    """Keep the shared value; fail if the two classes disagree."""
    if a != b:
        raise ValueError(f"Cannot merge classes with different values: {a!r} != {b!r}")
    return a


COMBINERS: dict[str, Combiner] = {
    "sum": lambda a, b: a + b,
    "min": min,
    "max": max,
    "first": lambda a, b: a,
    "last": lambda a, b: b,
    "concat": _concat,
    "collect": _collect,
    "equal": _equal,
}

COMBINER_NAMES: tuple[str, ...] = tuple(COMBINERS)


def get_combiner(name: str) -> Combiner:
    """Look up a combine function by name.

    Args:
        name: One of COMBINER_NAMES.

    Returns:
        Function taking ``(value_a, value_b)`` and returning the merged value.

    Raises:
        ValueError: If name is not a known combiner.
    """
    try:
        return COMBINERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown combiner '{name}'. Choose from: {', '.join(COMBINER_NAMES)}"
        ) from None
