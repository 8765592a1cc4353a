"""Ordered header multimap keyed by lowercase name."""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple


class HeaderSet:
    """Ordered multimap of header names to values.

    Pairs live in a single backing list in insertion order; an index maps
    each lowercase name to the positions of its pairs. Deleted slots are
    left as ``None`` until the next compaction so positions stay valid.
    """

    def __init__(self):
        self._pairs: List[Optional[Tuple[str, str]]] = []
        self._index: Dict[str, List[int]] = {}
        self._dead = 0

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "HeaderSet":
        """Build a set accumulating every pair, lowercasing names."""
        headers = cls()
        for name, value in pairs:
            headers.append(name, value)
        return headers

    def append(self, name: str, value: str) -> None:
        """Add a value, keeping existing values for the name."""
        key = name.lower()
        self._index.setdefault(key, []).append(len(self._pairs))
        self._pairs.append((key, value))

    def set(self, name: str, value: str) -> None:
        """Replace all values for the name with a single value."""
        self.delete(name)
        self.append(name, value)

    def delete(self, name: str) -> None:
        """Remove all values for the name; absent names are ignored."""
        positions = self._index.pop(name.lower(), None)
        if not positions:
            return
        for position in positions:
            self._pairs[position] = None
        self._dead += len(positions)
        if self._dead > len(self._pairs) // 2:
            self._compact()

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value for the name."""
        positions = self._index.get(name.lower())
        if not positions:
            return default
        return self._pairs[positions[0]][1]

    def get_all(self, name: str) -> List[str]:
        return [self._pairs[p][1] for p in self._index.get(name.lower(), [])]

    def names(self) -> List[str]:
        """Distinct names currently present."""
        return list(self._index)

    def copy(self) -> "HeaderSet":
        return HeaderSet.from_pairs(self)

    def _compact(self) -> None:
        pairs = [pair for pair in self._pairs if pair is not None]
        self._pairs = []
        self._index = {}
        self._dead = 0
        for name, value in pairs:
            self.append(name, value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return (pair for pair in self._pairs if pair is not None)

    def __len__(self) -> int:
        return len(self._pairs) - self._dead

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderSet):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"HeaderSet({list(self)!r})"
