from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)

CategoryId = int | str


@dataclass(frozen=True)
class CategoryEntry:
    id: CategoryId
    name: str


@dataclass(frozen=True)
class CategoryResolution:
    resolved: dict[str, CategoryId] = field(default_factory=dict)
    unmatched: tuple[str, ...] = ()

    @property
    def ids(self) -> list[CategoryId]:
        unique: list[CategoryId] = []
        for category_id in self.resolved.values():
            if category_id not in unique:
                unique.append(category_id)
        return unique


def parse_category_field(value: str | Sequence[str] | None) -> list[str]:
    """Turn ``"Marketing, Tech"`` or ``["Marketing", "Tech"]`` into clean category names."""
    if value is None:
        return []
    parts = value.split(",") if isinstance(value, str) else value
    return [part.strip() for part in parts if isinstance(part, str) and part.strip()]


def resolve_categories(
    requested: Sequence[str],
    directory: Iterable[CategoryEntry],
) -> CategoryResolution:
    lookup: dict[str, CategoryId] = {}
    for entry in directory:
        key = entry.name.strip().lower()
        if key and key not in lookup:
            lookup[key] = entry.id

    resolved: dict[str, CategoryId] = {}
    unmatched: list[str] = []
    for name in requested:
        category_id = lookup.get(name.strip().lower())
        if category_id is None:
            logger.warning("Category %r not found in CMS; skipping", name)
            unmatched.append(name)
            continue
        resolved[name] = category_id

    return CategoryResolution(resolved=resolved, unmatched=tuple(unmatched))
