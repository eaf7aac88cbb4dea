"""Kakebo budget categories (the envelopes)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Category(Enum):
    """The closed set of envelopes every expense falls into."""

    SURVIVAL = "Survival"
    LEISURE = "Leisure"
    CULTURE = "Culture"
    EXTRAS = "Extras"
    UNCATEGORIZED = "Uncategorized"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "Category":
        """Map a classifier label such as ``"SURVIVAL"`` onto a category.

        Unknown, empty or missing labels fall back to ``EXTRAS``. The explicit
        ``UNCATEGORIZED`` label is honoured.
        """

        if not isinstance(label, str):
            return cls.EXTRAS
        key = label.strip().upper()
        if not key:
            return cls.EXTRAS
        try:
            return cls[key]
        except KeyError:
            return cls.EXTRAS

    @classmethod
    def classifiable(cls) -> tuple["Category", ...]:
        """Categories a classifier is allowed to answer with."""

        return (cls.SURVIVAL, cls.LEISURE, cls.CULTURE, cls.EXTRAS)

    @property
    def label(self) -> str:
        """Wire label used when talking to classifiers (``"SURVIVAL"``)."""

        return self.name

    @property
    def display(self) -> "CategoryDisplay":
        return CATEGORY_DISPLAY[self]


@dataclass(frozen=True, slots=True)
class CategoryDisplay:
    """Presentation metadata for a category."""

    title: str
    color: str
    hint: str


CATEGORY_DISPLAY: dict[Category, CategoryDisplay] = {
    Category.SURVIVAL: CategoryDisplay(
        "Survival", "#ef4444", "Essentials and fixed bills: rent, power, groceries"
    ),
    Category.LEISURE: CategoryDisplay(
        "Leisure & Vices", "#f59e0b", "Restaurants, streaming, hobbies, treats"
    ),
    Category.CULTURE: CategoryDisplay(
        "Culture & Study", "#3b82f6", "Books, courses, work software"
    ),
    Category.EXTRAS: CategoryDisplay(
        "Extras", "#8b5cf6", "Repairs, emergencies, gifts"
    ),
    Category.UNCATEGORIZED: CategoryDisplay(
        "Uncategorized", "#cbd5e1", "Not classified yet"
    ),
}

_missing = set(Category) - set(CATEGORY_DISPLAY)
if _missing:  # pragma: no cover - import-time guard
    raise RuntimeError(f"CATEGORY_DISPLAY lacks entries for {sorted(c.name for c in _missing)}")
del _missing


__all__ = ["Category", "CategoryDisplay", "CATEGORY_DISPLAY"]
