"""
The library index enumerates the series the user has catalogued, each with the
TheTVDB id it is matched to and the metadata language it should be fetched in.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from tvdb_sync.exceptions import LibraryIndexError
from tvdb_sync.models.sync import LibraryItemRef

log = logging.getLogger(__name__)


class LibraryIndex(Protocol):
    """Anything that can list the library's series references."""

    def list_series(self) -> list[LibraryItemRef]: ...


class StaticLibraryIndex:
    """An in-memory library, for embedding the engine in another application."""

    def __init__(self, items: list[LibraryItemRef]):
        self._items = list(items)

    def list_series(self) -> list[LibraryItemRef]:
        return list(self._items)


class JsonLibraryIndex:
    """
    Reads the library from a JSON file of the form::

        [
            {"name": "The Wire", "tvdb_id": "79126", "language": "en"},
            {"name": "Dark", "tvdb_id": "334824", "language": "de"}
        ]

    Entries without a TheTVDB id are not matched to the provider and are ignored.
    Entries without a language fall back to the configured preferred language.
    """

    def __init__(self, library_path: Path, default_language: str = "en"):
        self.library_path = library_path
        self.default_language = default_language

    def list_series(self) -> list[LibraryItemRef]:
        if not self.library_path.is_file():
            raise LibraryIndexError(
                f"Library file not found at '{self.library_path}'."
            )
        try:
            with open(self.library_path, encoding="utf-8") as f:
                entries = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise LibraryIndexError(f"Could not read library file: {e}") from e

        if not isinstance(entries, list):
            raise LibraryIndexError("Library file must contain a JSON list of series.")

        items = []
        for position, entry in enumerate(entries):
            ref = self._parse_entry(entry, position)
            if ref is not None:
                items.append(ref)
        log.debug(f"Loaded {len(items)} series references from {self.library_path}")
        return items

    def _parse_entry(self, entry: Any, position: int) -> LibraryItemRef | None:
        if not isinstance(entry, dict):
            raise LibraryIndexError(f"Library entry #{position} is not an object.")

        tvdb_id = str(entry.get("tvdb_id") or "").strip()
        name = str(entry.get("name") or "").strip()
        if not tvdb_id:
            log.debug(f"Skipping library entry '{name or position}' without a tvdb_id.")
            return None

        language = str(entry.get("language") or "").strip() or self.default_language
        return LibraryItemRef(external_id=tvdb_id, preferred_language=language, name=name)
