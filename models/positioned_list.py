"""
PositionedList model for keeping items in a collaboratively edited order.

Each item carries a fractional position (see fractional_indexing). Inserting
or moving an item assigns it a new position between its neighbours; no other
item is renumbered, so only the moved item needs to be written back to storage.
"""

from typing import Any, Iterable, Iterator, List, Optional, Tuple

from fractional_indexing import generate_position_between, validate_position


class PositionedList:
    """
    In-memory list of (position, item) entries kept sorted by position.

    Positions compare as plain strings, matching ORDER BY position COLLATE "C".
    """

    def __init__(self, items: Optional[Iterable[Any]] = None):
        self._entries: List[Tuple[str, Any]] = []
        for item in items or []:
            self.append(item)

    @classmethod
    def from_positions(cls, entries: Iterable[Tuple[str, Any]]) -> "PositionedList":
        """
        Build a list from stored (position, item) pairs, in any order.

        Raises:
            ValueError: If a position is invalid or appears twice
        """
        result = cls()
        seen = set()
        for position, item in entries:
            if not validate_position(position):
                raise ValueError(f"Invalid position: {position!r}")
            if position in seen:
                raise ValueError(f"Duplicate position: {position!r}")
            seen.add(position)
            result._entries.append((position, item))
        result._entries.sort(key=lambda entry: entry[0])
        return result

    def _check_index(self, index: int, upper: int) -> None:
        if not 0 <= index <= upper:
            raise IndexError(f"index {index} out of range for list of length {len(self)}")

    def insert(self, index: int, item: Any) -> str:
        """
        Insert item so that it ends up at index, and return its new position.

        Args:
            index: 0 for the head, len(self) for the tail

        Raises:
            IndexError: If index is outside 0..len(self)
        """
        self._check_index(index, len(self._entries))
        before = self._entries[index - 1][0] if index > 0 else None
        after = self._entries[index][0] if index < len(self._entries) else None
        position = generate_position_between(before, after)
        self._entries.insert(index, (position, item))
        return position

    def append(self, item: Any) -> str:
        return self.insert(len(self._entries), item)

    def remove(self, index: int) -> Any:
        """Remove and return the item at index."""
        self._check_index(index, len(self._entries) - 1)
        return self._entries.pop(index)[1]

    def move(self, old_index: int, new_index: int) -> str:
        """
        Move an item, returning its new position.

        new_index is counted after the item has been taken out, as with
        ``lst.insert(new_index, lst.pop(old_index))``.
        """
        self._check_index(old_index, len(self._entries) - 1)
        self._check_index(new_index, len(self._entries) - 1)
        item = self.remove(old_index)
        return self.insert(new_index, item)

    def position(self, index: int) -> str:
        self._check_index(index, len(self._entries) - 1)
        return self._entries[index][0]

    def positions(self) -> List[str]:
        return [position for position, _ in self._entries]

    def items(self) -> List[Any]:
        return [item for _, item in self._entries]

    def entries(self) -> List[Tuple[str, Any]]:
        return list(self._entries)

    def is_ordered(self) -> bool:
        """True if positions are strictly increasing."""
        positions = self.positions()
        return all(a < b for a, b in zip(positions, positions[1:]))

    def __getitem__(self, index):
        """Item at index, or a list of items for a slice."""
        if isinstance(index, slice):
            return [item for _, item in self._entries[index]]
        return self._entries[index][1]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items())

    def __repr__(self):
        return f"PositionedList({self.entries()!r})"
