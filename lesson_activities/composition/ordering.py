"""
List ordering primitives shared by the activity list and the nested
order managers. Pure functions over Python lists; no store access.

Every scope (lesson, vocabulary activity, quiz, question) is kept at
order values 0..n-1 by rewriting the whole scope after each change.
"""

from enum import Enum
from typing import Any, Dict, List, Sequence, TypeVar

T = TypeVar("T")


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


def clamp_index(index: int, length: int) -> int:
    """Clamp index into [0, length - 1]; 0 for an empty list."""
    if length <= 0:
        return 0
    return max(0, min(index, length - 1))


def move_to_index(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """
    Return a copy of items with the element at from_index reinserted at
    to_index (clamped). Moving to the current index returns an equal list.
    """
    result = list(items)
    if not 0 <= from_index < len(result):
        raise IndexError(f"index {from_index} out of range for {len(result)} items")
    target = clamp_index(to_index, len(result))
    element = result.pop(from_index)
    result.insert(target, element)
    return result


def swap_adjacent(items: Sequence[T], index: int, direction: Direction) -> List[T]:
    """
    Swap the element at index with its neighbour in direction.

    Moving the first element up, the last element down, or an index that
    does not exist leaves the list unchanged.
    """
    result = list(items)
    neighbour = index - 1 if Direction(direction) == Direction.UP else index + 1
    if not 0 <= index < len(result) or not 0 <= neighbour < len(result):
        return result
    result[index], result[neighbour] = result[neighbour], result[index]
    return result


def order_changes(records: Sequence[Any], field: str = "order") -> List[Dict[str, Any]]:
    """
    Batch rows that bring records to field == position.

    Records already at their position are skipped, so applying the result
    twice writes nothing the second time.
    """
    changes = []
    for position, record in enumerate(records):
        if getattr(record, field) != position:
            changes.append({"id": record.id, field: position})
    return changes


def is_contiguous(values: Sequence[int]) -> bool:
    """True when values are exactly {0, ..., n-1} with no duplicates."""
    return sorted(values) == list(range(len(values)))
