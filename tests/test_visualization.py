from budget_planner.lib.budget.calculations import compute_metrics
from budget_planner.lib.budget.models import BudgetRule, Expense, ExpenseType
from budget_planner.visualization import (
    category_breakdown,
    create_category_pie_chart,
    create_target_vs_actual_chart,
    target_vs_actual,
)


def _metrics(salary=10000):
    return compute_metrics(salary, [
        Expense(id='1', name='Rent', amount=4500, category=ExpenseType.NEED),
        Expense(id='2', name='Dining', amount=1234, category=ExpenseType.WANT),
    ])


def test_breakdown_uses_savings_capacity():
    df = category_breakdown(_metrics(), 'en')
    assert list(df['Category']) == ['Need', 'Want', 'Saving & Investment']
    assert list(df['Value']) == [4500, 1234, 4266]


def test_breakdown_drops_zero_slices():
    df = category_breakdown(compute_metrics(0, []), 'en')
    assert df.empty
    assert len(create_category_pie_chart(compute_metrics(0, []), 'en').data) == 0


def test_target_vs_actual_rounds_to_one_decimal():
    df = target_vs_actual(10000, _metrics(), BudgetRule.default(), 'en')
    assert list(df['Actual']) == [45.0, 12.3, 42.7]
    assert list(df['Target']) == [50, 30, 20]


def test_pie_chart_has_one_trace():
    fig = create_category_pie_chart(_metrics(), 'en')
    assert len(fig.data) == 1
    assert fig.data[0].hole == 0.5


def test_bar_chart_groups_target_and_actual():
    fig = create_target_vs_actual_chart(10000, _metrics(), BudgetRule.default(), 'en')
    assert [trace.name for trace in fig.data] == ['Target', 'Actual']
    assert fig.layout.barmode == 'group'


def test_bar_chart_empty_without_salary():
    fig = create_target_vs_actual_chart(0, _metrics(0), BudgetRule.default(), 'en')
    assert len(fig.data) == 0
