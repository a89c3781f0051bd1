from decimal import Decimal

import pytest

from paycycle.manual import import_records, load_records


def test_load_yaml_records(tmp_path):
    path = tmp_path / "records.yaml"
    path.write_text(
        """\
- userId: 42
  transactions:
    - amount: 10.5
      description: Farmers Market
      date: 2018-09-28
    - amount: -3
"""
    )
    records = load_records(path)
    assert records[0]["userId"] == 42
    assert len(records[0]["transactions"]) == 2


def test_import_records(store, tmp_path):
    path = tmp_path / "records.yaml"
    path.write_text(
        """\
- userId: 42
  transactions:
    - amount: 10.5
      description: Farmers Market
      date: 2018-09-28
    - amount: -3
      date: 2018-09-30T10:00:00Z
- userId: "7"
  transactions: []
"""
    )
    assert import_records(store, load_records(path)) == 2
    assert store.get_sum_by_user_id("42") == Decimal("7.5")
    assert [tx.description for tx in store.get_by_user_id("42")] == ["Farmers Market", ""]
    # A user without transactions is not created
    assert store.get_user_index() == {"42": 0}


def test_import_requires_user_id(store):
    with pytest.raises(ValueError, match="Missing 'userId'"):
        import_records(store, [{"transactions": [{"amount": 1}]}])


@pytest.mark.parametrize(
    "bad_entry",
    [
        {"transactions": [{"amount": 2}]},
        {"userId": "", "transactions": []},
        {"userId": "8", "transactions": [{"amount": "lots"}]},
        {"userId": "8", "transactions": [{"amount": 2, "date": "not a date"}]},
    ],
)
def test_import_leaves_store_untouched_on_bad_entry(store, bad_entry):
    records = [
        {"userId": "7", "transactions": [{"amount": 1}, {"amount": 2}]},
        bad_entry,
    ]
    with pytest.raises(ValueError):
        import_records(store, records)
    assert store.get_data() == []
    assert store.get_user_index() == {}


def test_load_rejects_non_list(tmp_path):
    path = tmp_path / "records.yaml"
    path.write_text("userId: 1\n")
    with pytest.raises(ValueError):
        load_records(path)


def test_report_example_fixture(report_example, store):
    assert import_records(store, load_records(report_example)) == 8
    assert [rec.user_id for rec in store.get_data()] == ["123", "987"]
