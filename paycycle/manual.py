# paycycle/manual.py
import yaml

from paycycle.utils import to_decimal, to_utc_datetime


def load_records(path):
    """Load user records from a YAML (or JSON) file."""
    with open(path, encoding='utf-8') as f:
        data = yaml.safe_load(f) or []
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of user records in {path}")
    return data


def import_records(store, records):
    """
    Add every transaction in ``records`` to ``store``.
    Each record looks like {userId, transactions: [{amount, description, date}]}.
    The whole batch is checked first, so a bad entry leaves the store untouched.
    Returns the number of transactions added.
    """
    for entry in records:
        if entry.get('userId') is None or entry.get('userId') == '':
            raise ValueError(f"Missing 'userId' in record: {entry}")
        for tx in entry.get('transactions') or []:
            to_decimal(tx.get('amount'))
            to_utc_datetime(tx.get('date'))

    count = 0
    for entry in records:
        for tx in entry.get('transactions') or []:
            store.add(
                entry['userId'],
                tx.get('amount'),
                tx.get('description', ''),
                tx.get('date'),
            )
            count += 1
    return count
