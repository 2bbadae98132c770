"""Catalogue source backed by JSON data files."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from kitchen_planner.domain.orders import IngredientMeta
from kitchen_planner.services.catalogue import (
    Catalogue,
    CatalogueError,
    load_catalogue,
    normalize_recipe,
    parse_ingredient_metadata,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogueFile:
    """One recipe file, the key holding its records and their category."""

    filename: str
    key: str
    source_category: str


DATA_FILES = (
    CatalogueFile("soups.json", "soups", "soup"),
    CatalogueFile("desserts.json", "desserts", "dessert"),
    CatalogueFile("meat.json", "recipes", "meat"),
    CatalogueFile("fish.json", "fish", "fish"),
    CatalogueFile("vegetarian.json", "vegetarian", "vegetarian"),
    CatalogueFile("dinner.json", "dinner", "dinner"),
)
PORTION_ESTIMATES_FILE = "portion_estimates.json"
ORDER_META_FILE = "order_meta.json"


@dataclass
class JsonCatalogueSource:
    """Reads recipes and ingredient metadata from a data directory."""

    data_dir: Path
    files: tuple[CatalogueFile, ...] = DATA_FILES

    def load_raw_metadata(self) -> dict[str, dict[str, object]]:
        """Return the raw ingredient metadata table."""
        raw = self._read(ORDER_META_FILE, required=True)
        if not isinstance(raw, dict):
            raise CatalogueError(f"{ORDER_META_FILE} must contain an object")
        return raw

    def load_metadata(self) -> dict[str, IngredientMeta]:
        """Return validated ingredient metadata keyed by ingredient id."""
        return parse_ingredient_metadata(self.load_raw_metadata())

    def load_catalogue(self) -> Catalogue:
        """Read every recipe file, normalize legacy records and validate."""
        estimates = self._read(PORTION_ESTIMATES_FILE, required=False) or {}
        metadata = self.load_raw_metadata()
        records: list[dict[str, object]] = []
        for catalogue_file in self.files:
            content = self._read(catalogue_file.filename, required=False)
            if content is None:
                continue
            for raw in _records(content, catalogue_file):
                records.append(
                    normalize_recipe(
                        raw, catalogue_file.source_category, estimates, metadata
                    )
                )
        return load_catalogue(records)

    def _read(self, filename: str, *, required: bool) -> object | None:
        path = self.data_dir / filename
        if not path.exists():
            if required:
                raise CatalogueError(f"Missing data file: {path}")
            _logger.warning("Data file not found, skipping: %s", path)
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CatalogueError(f"Invalid JSON in {path}: {exc}") from exc


def _records(content: object, catalogue_file: CatalogueFile) -> list[dict[str, object]]:
    if isinstance(content, list):
        section: object = content
    elif isinstance(content, dict):
        section = content.get(catalogue_file.key, content.get("recipes", []))
    else:
        raise CatalogueError(f"Unexpected content in {catalogue_file.filename}")
    if isinstance(section, dict):
        section = [item for group in section.values() for item in group]
    if not isinstance(section, list):
        raise CatalogueError(
            f"{catalogue_file.filename}: '{catalogue_file.key}' must be a list"
        )
    return section
