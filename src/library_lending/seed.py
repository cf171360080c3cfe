"""
Starter catalog loaded when a library is created.

These are the titles the library opens with; further items are added at
runtime through the registry.
"""

import logging

from .models import EBook, ItemBase, parse_item

logger = logging.getLogger(__name__)

STARTER_CATALOG: list[dict] = [
    {"kind": "book", "title": "The Master and Margarita", "creator": "Mikhail Bulgakov"},
    {"kind": "book", "title": "War and Peace", "creator": "Lev Tolstoy"},
    {
        "kind": "ebook",
        "title": "The Lord of the Rings",
        "creator": "J. R. R. Tolkien",
        "file_size_mb": 500,
    },
    {"kind": "book", "title": "Cloud Atlas", "creator": "David Mitchell"},
]


def starter_items() -> list[ItemBase]:
    """Fresh item instances for the starter catalog."""
    items = [parse_item(entry) for entry in STARTER_CATALOG]
    ebooks = sum(1 for item in items if isinstance(item, EBook))
    logger.debug("Prepared %d starter items (%d e-books)", len(items), ebooks)
    return items
