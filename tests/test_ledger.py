import pytest

from budget_planner.lib.budget.ledger import Ledger, is_valid_entry, parse_amount
from budget_planner.lib.budget.models import Expense, ExpenseDraft, ExpenseType


def test_parse_amount_accepts_thousands_separators():
    assert parse_amount('1,250.5') == 1250.5
    assert parse_amount(' 300 ') == 300.0
    assert parse_amount(42) == 42.0


def test_parse_amount_rejects_garbage():
    assert parse_amount('') is None
    assert parse_amount('abc') is None
    assert parse_amount(None) is None
    assert parse_amount('inf') is None
    assert parse_amount(True) is None


def test_is_valid_entry():
    assert is_valid_entry('Rent', 100)
    assert not is_valid_entry('   ', 100)
    assert not is_valid_entry('Rent', 0)
    assert not is_valid_entry('Rent', -5)
    assert not is_valid_entry('Rent', None)


def test_add_prepends_with_unique_ids():
    ledger = Ledger()
    first = ledger.add('Rent', 3000, ExpenseType.NEED)
    second = ledger.add('  Dining ', 500, ExpenseType.WANT, note='weekends')

    assert [e.name for e in ledger] == ['Dining', 'Rent']
    assert first.id != second.id
    assert second.note == 'weekends'
    assert len(ledger) == 2


def test_add_rejects_invalid_entry():
    ledger = Ledger()
    with pytest.raises(ValueError):
        ledger.add('', 100, ExpenseType.NEED)
    with pytest.raises(ValueError):
        ledger.add('Rent', 0, ExpenseType.NEED)
    assert not ledger


def test_extend_puts_last_draft_first():
    ledger = Ledger()
    ledger.extend([
        ExpenseDraft('Rent', 3000, ExpenseType.NEED),
        ExpenseDraft('Fuel', 400, ExpenseType.NEED),
    ])
    assert [e.name for e in ledger] == ['Fuel', 'Rent']


def test_update_keeps_position():
    ledger = Ledger()
    rent = ledger.add('Rent', 3000, ExpenseType.NEED)
    ledger.add('Dining', 500, ExpenseType.WANT)

    updated = ledger.update(Expense(id=rent.id, name='Rent', amount=3200, category=ExpenseType.NEED))

    assert updated.amount == 3200
    assert [e.name for e in ledger] == ['Dining', 'Rent']
    assert ledger.get(rent.id).amount == 3200


def test_update_unknown_id_raises():
    ledger = Ledger()
    with pytest.raises(ValueError):
        ledger.update(Expense(id='missing', name='Rent', amount=1, category=ExpenseType.NEED))


def test_remove():
    ledger = Ledger()
    rent = ledger.add('Rent', 3000, ExpenseType.NEED)
    assert ledger.remove(rent.id)
    assert not ledger.remove(rent.id)
    assert len(ledger) == 0


def test_duplicate_ids_rejected():
    expense = Expense(id='a', name='Rent', amount=1, category=ExpenseType.NEED)
    with pytest.raises(ValueError):
        Ledger([expense, expense])


def test_records_round_trip_and_legacy_keys():
    ledger = Ledger.from_records([
        {'id': 'a', 'name': 'Rent', 'amount': 3000, 'category': 'need', 'note': ''},
        {'id': 'b', 'name': 'Dining', 'amount': '450', 'type': 'wants', 'notes': 'old'},
    ])
    assert ledger.get('b').category == ExpenseType.WANT
    assert ledger.get('b').note == 'old'
    assert ledger.to_records()[0] == {
        'id': 'a', 'name': 'Rent', 'amount': 3000.0, 'category': 'need', 'note': '',
    }
    assert [e.id for e in ledger.by_category(ExpenseType.WANT)] == ['b']
