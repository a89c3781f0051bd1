# paycycle/storage/base.py
from abc import ABC, abstractmethod


class BaseStorage(ABC):
    @abstractmethod
    def load(self):
        """
        Return the stored collection as a list of
        ``{"userId": ..., "transactions": [...]}`` dicts.
        Raise PersistenceError if it cannot be read.
        """
        pass

    @abstractmethod
    def save(self, records):
        """Overwrite the stored collection with ``records``."""
        pass
