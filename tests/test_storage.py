import json

from budget_planner.lib.budget.models import BudgetRule, Expense, ExpenseType
from budget_planner.lib.budget.storage import (
    EXPENSES_KEY,
    RULE_KEY,
    SALARY_KEY,
    VISITORS_KEY,
    BudgetStorage,
)


def _storage(tmp_path):
    return BudgetStorage(tmp_path / 'store.json')


def test_missing_store_reads_defaults(tmp_path):
    storage = _storage(tmp_path)
    assert storage.load_expenses() == []
    assert storage.load_salary() == 0.0
    assert storage.load_rule() == BudgetRule.default()
    assert storage.visitor_count() == 0


def test_round_trip_preserves_records(tmp_path):
    storage = _storage(tmp_path)
    expenses = [
        Expense(id='b', name='Dining', amount=450.5, category=ExpenseType.WANT, note='weekends'),
        Expense(id='a', name='إيجار', amount=3000, category=ExpenseType.NEED),
    ]
    storage.save_expenses(expenses)
    storage.save_salary(10000)
    storage.save_rule(BudgetRule(needs=60, wants=20, savings=20))

    reloaded = BudgetStorage(tmp_path / 'store.json')
    assert reloaded.load_expenses() == expenses
    assert reloaded.load_salary() == 10000
    assert reloaded.load_rule() == BudgetRule(needs=60, wants=20, savings=20)


def test_values_are_stored_as_strings(tmp_path):
    storage = _storage(tmp_path)
    storage.save_salary(8500)
    storage.save_rule(BudgetRule.default())
    raw = json.loads((tmp_path / 'store.json').read_text(encoding='utf-8'))
    assert all(isinstance(v, str) for v in raw.values())
    assert json.loads(raw[RULE_KEY]) == {'needs': 50.0, 'wants': 30.0, 'savings': 20.0}


def test_corrupt_store_reads_defaults(tmp_path):
    (tmp_path / 'store.json').write_text('{not json', encoding='utf-8')
    storage = _storage(tmp_path)
    assert storage.load_expenses() == []
    assert storage.load_salary() == 0.0


def test_malformed_entries_read_as_defaults(tmp_path):
    (tmp_path / 'store.json').write_text(json.dumps({
        EXPENSES_KEY: '[{"id": "a", "name": "Rent", "amount": "x", "category": "need"},'
                      ' {"id": "b", "name": "Fuel", "amount": 300, "category": "need"},'
                      ' {"id": "b", "name": "Dup", "amount": 10, "category": "want"}]',
        SALARY_KEY: '-100',
        RULE_KEY: '{"needs": "lots"}',
        VISITORS_KEY: 'many',
    }), encoding='utf-8')
    storage = _storage(tmp_path)

    assert [e.name for e in storage.load_expenses()] == ['Fuel']
    assert storage.load_salary() == 0.0
    assert storage.load_rule() == BudgetRule.default()
    assert storage.visitor_count() == 0


def test_increment_visitors(tmp_path):
    storage = _storage(tmp_path)
    assert storage.increment_visitors() == 1
    assert storage.increment_visitors() == 2


def test_reset_keeps_visitor_counter(tmp_path):
    storage = _storage(tmp_path)
    storage.save_salary(5000)
    storage.increment_visitors()
    storage.reset()

    assert storage.load_salary() == 0.0
    assert storage.get_item(SALARY_KEY) is None
    assert storage.visitor_count() == 1
