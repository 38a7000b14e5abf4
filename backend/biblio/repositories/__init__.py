"""Repository package exposing persistence-layer access for domain models."""

from __future__ import annotations

from biblio.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    paginate_select,
)
from biblio.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "Page",
    "Pagination",
    "paginate_select",
    "UserRepository",
]
