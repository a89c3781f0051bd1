# paycycle/outputs/base.py
from abc import ABC, abstractmethod

class BaseOutput(ABC):
    @abstractmethod
    def write(self, user_id, buckets):
        """Write a user's report buckets to the chosen sink and return its path."""
        pass
