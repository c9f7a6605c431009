"""Session state helpers.

Streamlit reruns the script on every interaction; the working budget lives
in ``st.session_state`` and is written back to :class:`BudgetStorage`
after every change to the ledger, the salary or the rule.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional

import streamlit as st

from . import config
from .lib.budget.gate import Step, StepFlow
from .lib.budget.ledger import Ledger
from .lib.budget.models import BudgetRule, Expense, ExpenseDraft
from .lib.budget.storage import BudgetStorage

LEDGER_KEY = 'ledger'
SALARY_KEY = 'salary'
RULE_KEY = 'rule'
FLOW_KEY = 'flow'
LANG_KEY = 'lang'
VISIT_KEY = 'visit_counted'
VISITORS_KEY = 'visitors'

TRANSIENT_KEYS = (
    'wizard',
    'recommendation',
    'chat_log',
    'editing_id',
    'entry_warning',
    'form_open',
)


def _initial_step(salary: float, ledger: Ledger) -> Step:
    if salary <= 0:
        return Step.SALARY
    if ledger:
        return Step.DASHBOARD
    return Step.WIZARD


def init_state(storage: BudgetStorage) -> None:
    """Load persisted state into the session once and count the visit."""
    state = st.session_state
    if LEDGER_KEY not in state:
        state[LEDGER_KEY] = Ledger(storage.load_expenses())
    if SALARY_KEY not in state:
        state[SALARY_KEY] = storage.load_salary()
    if RULE_KEY not in state:
        state[RULE_KEY] = storage.load_rule()
    if LANG_KEY not in state:
        state[LANG_KEY] = config.DEFAULT_LANGUAGE
    if FLOW_KEY not in state:
        state[FLOW_KEY] = StepFlow(_initial_step(state[SALARY_KEY], state[LEDGER_KEY]))
    if not state.get(VISIT_KEY):
        state[VISITORS_KEY] = storage.increment_visitors()
        state[VISIT_KEY] = True
    for key in TRANSIENT_KEYS:
        if key not in state:
            state[key] = [] if key == 'chat_log' else None


def persist_state(storage: BudgetStorage) -> None:
    """Write the ledger, salary and rule from the session to storage."""
    state = st.session_state
    storage.save_expenses(state[LEDGER_KEY].expenses)
    storage.save_salary(state[SALARY_KEY])
    storage.save_rule(state[RULE_KEY])


def get_ledger() -> Ledger:
    return st.session_state[LEDGER_KEY]


def get_salary() -> float:
    return st.session_state[SALARY_KEY]


def get_rule() -> BudgetRule:
    return st.session_state[RULE_KEY]


def get_flow() -> StepFlow:
    return st.session_state[FLOW_KEY]


def get_lang() -> str:
    return st.session_state.get(LANG_KEY, config.DEFAULT_LANGUAGE)


def expenses_snapshot() -> List[Expense]:
    return get_ledger().expenses


def _ledger_changed() -> None:
    """Drop a gate result computed against the previous ledger, salary or rule."""
    flow = st.session_state.get(FLOW_KEY)
    if flow is not None:
        flow.clear_pending()


def set_salary(storage: BudgetStorage, salary: Optional[float]) -> float:
    """Store a new salary; blank, negative or non-finite input becomes 0."""
    value = float(salary) if salary is not None else 0.0
    if not math.isfinite(value) or value < 0:
        value = 0.0
    st.session_state[SALARY_KEY] = value
    _ledger_changed()
    persist_state(storage)
    return value


def set_rule(storage: BudgetStorage, rule: BudgetRule) -> None:
    st.session_state[RULE_KEY] = rule
    _ledger_changed()
    persist_state(storage)


def add_drafts(storage: BudgetStorage, drafts: Iterable[ExpenseDraft]) -> List[Expense]:
    added = get_ledger().extend(drafts)
    _ledger_changed()
    persist_state(storage)
    return added


def save_expense(storage: BudgetStorage, expense: Expense) -> Expense:
    """Update an existing expense or add it with a new id when it has none."""
    ledger = get_ledger()
    if expense.id and ledger.get(expense.id) is not None:
        saved = ledger.update(expense)
    else:
        saved = ledger.add(expense.name, expense.amount, expense.category, expense.note)
    _ledger_changed()
    persist_state(storage)
    return saved


def delete_expense(storage: BudgetStorage, expense_id: str) -> bool:
    removed = get_ledger().remove(expense_id)
    if removed:
        _ledger_changed()
        persist_state(storage)
    return removed


def reset_state(storage: BudgetStorage) -> None:
    """Forget everything except the visitor counter and the language."""
    storage.reset()
    state = st.session_state
    state[LEDGER_KEY] = Ledger()
    state[SALARY_KEY] = 0.0
    state[RULE_KEY] = BudgetRule.default()
    state[FLOW_KEY] = StepFlow(Step.SALARY)
    for key in TRANSIENT_KEYS:
        state[key] = [] if key == 'chat_log' else None
