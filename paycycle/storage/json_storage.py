# paycycle/storage/json_storage.py

import json
import logging
import os
from pathlib import Path

from paycycle.errors import PersistenceError
from paycycle.storage.base import BaseStorage

logger = logging.getLogger(__name__)


class JsonStorage(BaseStorage):
    """
    Keeps the whole collection in a single JSON file (a list of user records).
    A missing file reads as an empty collection; every save rewrites the file.
    """
    def __init__(self, config):
        self.path = Path(config.get('data_file', 'data/transactions.json'))

    def load(self):
        if not self.path.exists():
            logger.info("No data file at %s, starting empty", self.path)
            return []
        try:
            with self.path.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Malformed data file {self.path}: {exc}") from exc
        except OSError as exc:
            raise PersistenceError(f"Could not read {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise PersistenceError(
                f"Expected a list of user records in {self.path}, got {type(data).__name__}"
            )
        return data

    def save(self, records):
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open('w', encoding='utf-8') as f:
                json.dump(records, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc
        logger.info("Wrote %d user record(s) to %s", len(records), self.path)
