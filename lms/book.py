from __future__ import annotations

from typing import List, Optional, Tuple

BookKey = Tuple[str, str]


class Book:
    """A catalog entry: every copy of one title by one author."""

    def __init__(self, name: str, author: str, inventory: int = 0,
                 borrowed_by: Optional[List[str]] = None) -> None:
        self.name = name
        self.author = author
        self.inventory = inventory
        # one entry per copy currently out, in borrow order
        self.borrowed_by: List[str] = list(borrowed_by or [])

    @property
    def total_copies(self) -> int:
        """Copies on the shelf plus copies out on loan."""
        return self.inventory + len(self.borrowed_by)

    @property
    def is_borrowed(self) -> bool:
        return len(self.borrowed_by) > 0

    def __str__(self) -> str:
        return f"{self.name} - {self.author} - Inventory: {self.inventory}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "author": self.author,
            "inventory": self.inventory,
            "borrowed_by": list(self.borrowed_by),
        }
