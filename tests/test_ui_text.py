import pytest

from budget_planner.lib.budget import ui_components
from budget_planner.lib.budget.gate import Step
from budget_planner.lib.budget.models import Expense, ExpenseType
from budget_planner.lib.config import get_text


@pytest.mark.parametrize('step', list(Step))
def test_step_titles_exist_in_both_languages(step):
    key = ui_components.STEP_TITLE_KEYS[step]
    assert get_text('ar', key) != get_text('en', key)


def test_gate_messages_are_formatted_per_language():
    values = dict(current='11,000 SAR', limit='10,000 SAR', amount='1,000 SAR')
    english = get_text('en', 'ui_gate_block', **values)
    arabic = get_text('ar', 'ui_gate_block', **values)

    assert english.startswith('Your expenses (11,000 SAR) exceed your salary')
    assert '1,000 SAR' in arabic
    assert arabic != english


def test_expense_table_headers_follow_language():
    expenses = [Expense(id='1', name='Rent', amount=2500, category=ExpenseType.NEED)]

    english = ui_components.expenses_dataframe(expenses, 10000, 'en')
    arabic = ui_components.expenses_dataframe(expenses, 10000, 'ar')

    assert list(english.columns) == ['Name', 'Category', 'Amount', '% of salary', 'Note']
    assert list(arabic.columns)[0] == 'الاسم'
    assert english.iloc[0]['% of salary'] == 25
