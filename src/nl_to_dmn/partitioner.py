"""Split large rule lists into several decision tables."""

from typing import Sequence, TypeVar

T = TypeVar("T")


def partition(rules: Sequence[T], max_size: int) -> list[list[T]]:
    """
    Split rules into contiguous chunks of at most ``max_size``.

    A ``max_size`` of zero or less disables partitioning. Order is preserved
    and no rule is dropped; only the last chunk may be shorter.

    Example:
        >>> partition([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if max_size <= 0 or len(rules) <= max_size:
        return [list(rules)]
    return [list(rules[i:i + max_size]) for i in range(0, len(rules), max_size)]


def partition_names(base_name: str, count: int, suffix: str = ".dmn") -> list[str]:
    """File names for ``count`` partitions: ``base.dmn`` or ``base_part1.dmn``..."""
    if count <= 1:
        return [f"{base_name}{suffix}"]
    return [f"{base_name}_part{i}{suffix}" for i in range(1, count + 1)]
