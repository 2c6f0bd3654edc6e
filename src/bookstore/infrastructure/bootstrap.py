"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from bookstore.infrastructure.persistence.json_book_catalog import JsonBookCatalog
from bookstore.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)

DATA_DIR_ENV = "BOOKSTORE_DATA_DIR"

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def data_dir() -> Path:
    """``$BOOKSTORE_DATA_DIR`` if set, else ``<repo>/data``.  Read on every call."""
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else _DEFAULT_DATA_DIR


def book_catalog() -> JsonBookCatalog:
    return JsonBookCatalog(data_dir() / "books.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(data_dir() / "orders.json")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
