"""
Menu Catalog

The fixed list of dishes the restaurant sells. Built once at startup,
read-only afterwards, so it needs no locking.

Usage:
    catalog = Catalog.default()
    items = catalog.resolve([1, 1, 3, 99])  # 99 is silently dropped
"""

import json
import logging
from collections import Counter
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from order_backend.errors import CatalogLoadError
from order_backend.models import MenuItem

logger = logging.getLogger(__name__)


DEFAULT_MENU = (
    MenuItem(id=1, name="Nasi Goreng", price=Decimal("25000")),
    MenuItem(id=2, name="Mie Goreng", price=Decimal("20000")),
    MenuItem(id=3, name="Ayam Bakar", price=Decimal("30000")),
)


class _MenuFileEntry(BaseModel):
    id: int
    name: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0)


_menu_file_adapter = TypeAdapter(list[_MenuFileEntry])


class Catalog:
    """
    Immutable lookup table of menu items.

    Ids are expected to be unique. If a menu does contain duplicates,
    ``resolve`` returns every match for an id rather than the first.
    """

    def __init__(self, items: Iterable[MenuItem]):
        self._items = tuple(items)

        duplicates = [
            item_id
            for item_id, count in Counter(i.id for i in self._items).items()
            if count > 1
        ]
        if duplicates:
            logger.warning(f"Menu contains duplicate item ids: {sorted(duplicates)}")

    @classmethod
    def default(cls) -> "Catalog":
        """The restaurant's built-in menu."""
        return cls(DEFAULT_MENU)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "Catalog":
        """
        Load a menu from a JSON array of ``{id, name, price}`` objects.

        Raises:
            CatalogLoadError: File missing, not JSON, or entries invalid
        """
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            entries = _menu_file_adapter.validate_python(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise CatalogLoadError(f"Could not load menu from {path}: {e}") from e

        logger.info(f"Loaded {len(entries)} menu items from {path}")
        return cls(
            MenuItem(id=e.id, name=e.name, price=e.price) for e in entries
        )

    def list(self) -> List[MenuItem]:
        """Return the full catalog."""
        return list(self._items)

    def get(self, item_id: int) -> Optional[MenuItem]:
        """Return the first item with this id, or None."""
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def resolve(self, item_ids: Iterable[int]) -> List[MenuItem]:
        """
        Look up item ids, in order, dropping ids that are not on the menu.

        Each occurrence of an id is resolved on its own, so ``[1, 1]``
        yields the dish twice.
        """
        resolved = []
        for item_id in item_ids:
            for item in self._items:
                if item.id == item_id:
                    resolved.append(item)
        return resolved

    def __len__(self) -> int:
        return len(self._items)

