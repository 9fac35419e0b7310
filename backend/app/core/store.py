"""Flat JSON file store for filament records.

The whole collection is read and rewritten on every operation. There is no
locking, no atomic rename and no backup of the previous file.
"""

import json
import logging
import time
from pathlib import Path

from backend.app.core.config import settings

logger = logging.getLogger(__name__)


class FilamentStore:
    """Durable home for the full list of filament records."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_all(self) -> list[dict]:
        """Return the stored collection.

        A missing file is initialised to an empty list first. Content that is
        not a JSON list is treated as an empty collection.
        """
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("[]", encoding="utf-8")
            logger.info(f"Created empty filament store at {self.path}")

        raw = self.path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Filament store {self.path} is not valid JSON, treating as empty: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Filament store {self.path} does not hold a list, treating as empty")
            return []
        return data

    def save_all(self, records: list) -> None:
        """Overwrite the file with the full collection."""
        self.path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug(f"Saved {len(records)} filaments to {self.path}")

    @staticmethod
    def next_id(records: list) -> int:
        """Millisecond timestamp, bumped past the largest id already in use."""
        candidate = int(time.time() * 1000)
        existing = [r.get("id") for r in records if isinstance(r, dict)]
        highest = max((i for i in existing if isinstance(i, int) and not isinstance(i, bool)), default=0)
        return max(candidate, highest + 1)

    @staticmethod
    def find_index(records: list, filament_id: int) -> int | None:
        for idx, record in enumerate(records):
            if isinstance(record, dict) and record.get("id") == filament_id:
                return idx
        return None


filament_store = FilamentStore(settings.data_file)


def get_store() -> FilamentStore:
    return filament_store
