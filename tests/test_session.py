import types

from budget_planner import session
from budget_planner.lib.budget.gate import Step
from budget_planner.lib.budget.models import BudgetRule, Expense, ExpenseDraft, ExpenseType
from budget_planner.lib.budget.storage import BudgetStorage


def _fake_streamlit(monkeypatch):
    state = {}
    monkeypatch.setattr(session, 'st', types.SimpleNamespace(session_state=state))
    return state


def test_first_visit_starts_at_salary(monkeypatch, tmp_path):
    state = _fake_streamlit(monkeypatch)
    storage = BudgetStorage(tmp_path / 'store.json')

    session.init_state(storage)

    assert session.get_flow().step == Step.SALARY
    assert session.get_salary() == 0.0
    assert session.get_rule() == BudgetRule.default()
    assert state['chat_log'] == []
    assert state[session.VISITORS_KEY] == 1


def test_visit_counted_once_per_session(monkeypatch, tmp_path):
    _fake_streamlit(monkeypatch)
    storage = BudgetStorage(tmp_path / 'store.json')
    session.init_state(storage)
    session.init_state(storage)
    assert storage.visitor_count() == 1


def test_returning_user_with_expenses_lands_on_dashboard(monkeypatch, tmp_path):
    storage = BudgetStorage(tmp_path / 'store.json')
    storage.save_salary(9000)
    storage.save_expenses([Expense(id='a', name='Rent', amount=3000, category=ExpenseType.NEED)])
    _fake_streamlit(monkeypatch)

    session.init_state(storage)

    assert session.get_flow().step == Step.DASHBOARD
    assert [e.name for e in session.expenses_snapshot()] == ['Rent']


def test_returning_user_without_expenses_goes_to_wizard(monkeypatch, tmp_path):
    storage = BudgetStorage(tmp_path / 'store.json')
    storage.save_salary(9000)
    _fake_streamlit(monkeypatch)
    session.init_state(storage)
    assert session.get_flow().step == Step.WIZARD


def test_changes_are_persisted(monkeypatch, tmp_path):
    _fake_streamlit(monkeypatch)
    storage = BudgetStorage(tmp_path / 'store.json')
    session.init_state(storage)

    session.set_salary(storage, 12000)
    session.set_rule(storage, BudgetRule(needs=60, wants=20, savings=20))
    added = session.add_drafts(storage, [ExpenseDraft('Rent', 4000, ExpenseType.NEED)])
    rent = added[0]
    session.save_expense(storage, Expense(id=rent.id, name='Rent', amount=4200, category=ExpenseType.NEED))
    session.save_expense(storage, Expense(id='', name='Gym', amount=150, category=ExpenseType.WANT))

    assert storage.load_salary() == 12000
    assert storage.load_rule().needs == 60
    assert [(e.name, e.amount) for e in storage.load_expenses()] == [('Gym', 150), ('Rent', 4200)]

    assert session.delete_expense(storage, rent.id)
    assert not session.delete_expense(storage, rent.id)
    assert [e.name for e in storage.load_expenses()] == ['Gym']


def test_invalid_salary_becomes_zero(monkeypatch, tmp_path):
    _fake_streamlit(monkeypatch)
    storage = BudgetStorage(tmp_path / 'store.json')
    session.init_state(storage)
    assert session.set_salary(storage, float('nan')) == 0.0
    assert session.set_salary(storage, -10) == 0.0
    assert session.set_salary(storage, None) == 0.0


def test_reset_state_keeps_visitors(monkeypatch, tmp_path):
    state = _fake_streamlit(monkeypatch)
    storage = BudgetStorage(tmp_path / 'store.json')
    session.init_state(storage)
    session.set_salary(storage, 5000)
    session.add_drafts(storage, [ExpenseDraft('Rent', 2000, ExpenseType.NEED)])
    state['editing_id'] = 'x'

    session.reset_state(storage)

    assert session.get_flow().step == Step.SALARY
    assert len(session.get_ledger()) == 0
    assert state['editing_id'] is None
    assert storage.load_salary() == 0.0
    assert storage.load_expenses() == []
    assert storage.visitor_count() == 1


def test_saving_expense_drops_pending_warning(monkeypatch, tmp_path):
    _fake_streamlit(monkeypatch)
    storage = BudgetStorage(tmp_path / 'store.json')
    session.init_state(storage)
    session.set_salary(storage, 10000)
    session.add_drafts(storage, [ExpenseDraft('Dining', 3500, ExpenseType.WANT)])
    flow = session.get_flow()
    flow.go_to(Step.EXPENSES)
    flow.next(session.get_salary(), session.expenses_snapshot(), session.get_rule())
    assert flow.pending is not None

    session.save_expense(storage, Expense(id='', name='Rent', amount=7000, category=ExpenseType.NEED))

    assert flow.pending is None
    assert flow.dismiss_warning(session.get_salary(), session.expenses_snapshot(), session.get_rule()) == Step.EXPENSES
    assert flow.next(session.get_salary(), session.expenses_snapshot(), session.get_rule()).blocked


def test_deleting_expense_drops_pending_block(monkeypatch, tmp_path):
    _fake_streamlit(monkeypatch)
    storage = BudgetStorage(tmp_path / 'store.json')
    session.init_state(storage)
    session.set_salary(storage, 5000)
    added = session.add_drafts(storage, [
        ExpenseDraft('Rent', 4000, ExpenseType.NEED),
        ExpenseDraft('Car', 2000, ExpenseType.NEED),
    ])
    flow = session.get_flow()
    flow.go_to(Step.EXPENSES)
    assert flow.next(session.get_salary(), session.expenses_snapshot(), session.get_rule()).blocked
    assert flow.pending.overage.amount == 1000

    session.delete_expense(storage, added[1].id)

    assert flow.pending is None
