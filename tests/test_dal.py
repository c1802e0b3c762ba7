import pytest

from conftest import make_expenses
from expense_api.core.errors import StoreError
from expense_api.db.dal import Database


@pytest.fixture
def memdb():
    database = Database.open(":memory:")
    yield database
    database.close()


def test_insert_returns_full_row(memdb):
    row = memdb.insert_expense(make_expenses()[0])
    assert row["expense_id"] == 1
    assert row["name"] == "coffee"
    assert row["amount"] == "4.50"
    assert row["date"].endswith("Z")


def test_get_missing_returns_none(memdb):
    assert memdb.get_expense(42) is None


def test_list_in_insertion_order(memdb):
    for e in make_expenses():
        memdb.insert_expense(e)
    assert [r["name"] for r in memdb.list_expenses()] == ["coffee", "rent", "bus pass"]
    assert memdb.count_expenses() == 3


def test_update_touches_only_given_columns(memdb):
    original = memdb.insert_expense(make_expenses()[1])
    assert memdb.update_expense(original["expense_id"], {"amount": "1300.00"}) == 1
    updated = memdb.get_expense(original["expense_id"])
    assert updated == {**original, "amount": "1300.00"}


def test_update_missing_row_affects_nothing(memdb):
    assert memdb.update_expense(7, {"name": "ghost"}) == 0


def test_update_rejects_unknown_columns(memdb):
    row = memdb.insert_expense(make_expenses()[0])
    with pytest.raises(ValueError):
        memdb.update_expense(row["expense_id"], {"date": "2000-01-01T00:00:00.000Z"})
    with pytest.raises(ValueError):
        memdb.update_expense(row["expense_id"], {})


def test_delete_reports_rows_affected(memdb):
    row = memdb.insert_expense(make_expenses()[0])
    assert memdb.delete_expense(row["expense_id"]) == 1
    assert memdb.delete_expense(row["expense_id"]) == 0
    assert memdb.count_expenses() == 0


def test_ids_not_reused_after_delete(memdb):
    first = memdb.insert_expense(make_expenses()[0])
    memdb.delete_expense(first["expense_id"])
    second = memdb.insert_expense(make_expenses()[0])
    assert second["expense_id"] == first["expense_id"] + 1


def test_driver_errors_become_store_errors(memdb):
    memdb.close()
    with pytest.raises(StoreError):
        memdb.list_expenses()


def test_open_creates_schema_on_file(tmp_path):
    path = tmp_path / "expenses.sqlite3"
    database = Database.open(path)
    database.insert_expense(make_expenses()[0])
    database.close()

    reopened = Database.open(path)
    assert reopened.count_expenses() == 1
    reopened.close()
