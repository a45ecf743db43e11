"""Case-insensitive ingredient collection owned by the orchestrator."""

from typing import Iterable, Iterator, List, Optional, Tuple


def normalize_name(name: str) -> str:
    """Display form used after an image merge: first letter uppercase, rest lowercase."""
    lowered = name.strip().lower()
    return lowered[:1].upper() + lowered[1:]


class IngredientSet:
    """Insertion-ordered ingredient names, unique under case-insensitive comparison.

    Manual entries keep the casing they were typed with until the next
    merge_identified(), which rewrites every entry to its normalized form.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._items: List[str] = []
        self.replace(names)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._items))

    def __getitem__(self, index: int) -> str:
        return self._items[index]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.strip().lower()
        return any(item.lower() == key for item in self._items)

    def __repr__(self) -> str:
        return f"IngredientSet({self._items!r})"

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._items)

    def add(self, name: str) -> bool:
        """Append name unless an entry already matches it ignoring case.

        Returns:
            True if the name was added.
        """
        name = name.strip()
        if not name or name in self:
            return False
        self._items.append(name)
        return True

    def remove_at(self, index: int) -> Optional[str]:
        """Remove the entry at index. Out-of-range indices (negative included) are ignored.

        Returns:
            The removed name, or None if nothing was removed.
        """
        if not 0 <= index < len(self._items):
            return None
        return self._items.pop(index)

    def merge_identified(self, names: Iterable[str]) -> Tuple[str, ...]:
        """Union identified names into the set and normalize the casing of every entry.

        Existing entries keep their positions; new names follow in the order given.

        Returns:
            The rewritten contents.
        """
        merged = dict.fromkeys(item.lower() for item in self._items)
        for name in names:
            key = name.strip().lower()
            if key:
                merged.setdefault(key)
        self._items = [normalize_name(key) for key in merged]
        return self.snapshot()

    def replace(self, names: Iterable[str]) -> None:
        """Replace the contents wholesale, keeping the given casing."""
        self._items = []
        for name in names:
            self.add(name)
