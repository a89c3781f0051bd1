from pathlib import Path

import pytest

from paycycle.manual import import_records, load_records
from paycycle.storage.json_storage import JsonStorage
from paycycle.store import TransactionStore

REPORT_EXAMPLE = Path(__file__).parent / "fixtures" / "report_example.json"


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "transactions.json"


@pytest.fixture
def store(data_file):
    return TransactionStore(JsonStorage({"data_file": str(data_file)}))


@pytest.fixture
def report_store(store):
    """A store seeded with the report example (users 123 and 987)."""
    import_records(store, load_records(REPORT_EXAMPLE))
    return store


@pytest.fixture
def report_example():
    return REPORT_EXAMPLE
