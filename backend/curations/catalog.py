# FILE: curations/catalog.py
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .constants.categories import CATEGORY_KEYS
from .errors import InvalidInput
from .logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Item:
    category: str
    name: str
    image: str
    description: str
    link: str
    search: str

    def to_dict(self) -> dict:
        return asdict(self)


def searchable_text(name: str, description: str) -> str:
    return f"{name} {description}".lower()


def _item_from_raw(raw: dict, position: int) -> Item:
    category = (raw.get("category") or "").strip().lower()
    if category not in CATEGORY_KEYS:
        raise InvalidInput(f"catalog item #{position}: unknown category {raw.get('category')!r}")

    name = raw.get("name") or ""
    description = raw.get("description") or ""
    # search may be precomputed in the source; lowercase it either way
    search = (raw.get("search") or searchable_text(name, description)).lower()

    return Item(
        category=category,
        name=name,
        image=raw.get("image") or "",
        description=description,
        link=raw.get("link") or "",
        search=search,
    )


def load_items(path: Path) -> List[Item]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise InvalidInput(f"catalog {path} must hold a JSON array")
    items = [_item_from_raw(r, i) for i, r in enumerate(raw)]
    logger.info("Loaded %d catalog items from %s", len(items), path)
    return items


class Catalog:
    """Read-only list of curated items. Order is the source order."""

    def __init__(self, items: List[Item]):
        self._items = tuple(items)

    @classmethod
    def from_file(cls, path: Path) -> "Catalog":
        return cls(load_items(path))

    def __len__(self) -> int:
        return len(self._items)

    def all(self) -> List[Item]:
        return list(self._items)

    def by_category(self, category: Optional[str]) -> List[Item]:
        if not category:
            return self.all()
        key = category.strip().lower()
        return [it for it in self._items if it.category == key]

    def categories(self) -> Dict[str, List[Item]]:
        grouped: Dict[str, List[Item]] = {key: [] for key in CATEGORY_KEYS}
        for it in self._items:
            grouped[it.category].append(it)
        return grouped

    def search(self, query: Optional[str]) -> List[Item]:
        """
        Plain substring match against each item's ``search`` text.
        Blank query returns the whole catalog.
        """
        q = (query or "").strip().lower()
        if not q:
            return self.all()
        return [it for it in self._items if q in it.search]
