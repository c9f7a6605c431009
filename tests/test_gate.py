from budget_planner.lib.budget.gate import (
    ALLOW,
    BLOCK,
    WARN,
    Step,
    StepFlow,
    evaluate_dashboard_transition,
    reduction_suggestions,
)
from budget_planner.lib.budget.models import BudgetRule, Expense, ExpenseType


def _expense(eid, name, amount, category):
    return Expense(id=eid, name=name, amount=amount, category=category)


def _wants_heavy():
    return [
        _expense('1', 'Rent', 4000, ExpenseType.NEED),
        _expense('2', 'Dining', 2000, ExpenseType.WANT),
        _expense('3', 'Shopping', 1000, ExpenseType.WANT),
        _expense('4', 'Streaming', 500, ExpenseType.WANT),
    ]


def test_block_when_total_exceeds_salary():
    result = evaluate_dashboard_transition(
        5000, [_expense('1', 'Rent', 5001, ExpenseType.NEED)], BudgetRule.default()
    )
    assert result.decision == BLOCK
    assert result.blocked
    assert result.overage.amount == 1


def test_total_equal_to_salary_is_not_blocked():
    expenses = [
        _expense('1', 'Rent', 2500, ExpenseType.NEED),
        _expense('2', 'Dining', 1500, ExpenseType.WANT),
        _expense('3', 'Savings', 1000, ExpenseType.SAVING),
    ]
    result = evaluate_dashboard_transition(5000, expenses, BudgetRule.default())
    assert result.decision == ALLOW


def test_wants_warning_with_suggestions():
    result = evaluate_dashboard_transition(10000, _wants_heavy(), BudgetRule.default())

    assert result.decision == WARN
    warning = result.warning
    assert warning.category == ExpenseType.WANT
    assert warning.excess_amount == 500
    assert [s.name for s in warning.suggestions] == ['Dining', 'Shopping', 'Streaming']
    assert warning.suggestions[0].reduce_by == 500
    assert warning.suggestions[2].reduce_by == 500


def test_wants_checked_before_needs():
    expenses = [
        _expense('1', 'Rent', 6000, ExpenseType.NEED),
        _expense('2', 'Dining', 3500, ExpenseType.WANT),
    ]
    result = evaluate_dashboard_transition(10000, expenses, BudgetRule.default())
    assert result.decision == WARN
    assert result.warning.category == ExpenseType.WANT


def test_needs_warning_when_wants_fit():
    expenses = [_expense('1', 'Rent', 6000, ExpenseType.NEED)]
    result = evaluate_dashboard_transition(10000, expenses, BudgetRule.default())
    assert result.decision == WARN
    assert result.warning.category == ExpenseType.NEED
    assert result.warning.ceiling == 5000


def test_savings_never_warns():
    expenses = [_expense('1', 'Emergency fund', 9000, ExpenseType.SAVING)]
    result = evaluate_dashboard_transition(10000, expenses, BudgetRule.default())
    assert result.decision == ALLOW


def test_sub_unit_excess_is_ignored():
    expenses = [_expense('1', 'Dining', 3000.3, ExpenseType.WANT)]
    result = evaluate_dashboard_transition(10000, expenses, BudgetRule.default())
    assert result.decision == ALLOW


def test_reduction_suggestions_cap_at_amount():
    expenses = [
        _expense('1', 'Gym', 200, ExpenseType.WANT),
        _expense('2', 'Dining', 900, ExpenseType.WANT),
    ]
    suggestions = reduction_suggestions(expenses, ExpenseType.WANT, 500)
    assert [(s.name, s.reduce_by) for s in suggestions] == [('Dining', 500), ('Gym', 200)]


def test_reduction_suggestions_limit():
    expenses = [_expense(str(i), f"W{i}", 100 + i, ExpenseType.WANT) for i in range(5)]
    assert len(reduction_suggestions(expenses, ExpenseType.WANT, 50)) == 3
    assert len(reduction_suggestions(expenses, ExpenseType.WANT, 50, limit=1)) == 1


def test_flow_walks_forward_and_back():
    flow = StepFlow()
    rule = BudgetRule.default()
    assert flow.next(0, [], rule).blocked
    assert flow.step == Step.SALARY

    flow.next(10000, [], rule)
    assert flow.step == Step.WIZARD
    flow.next(10000, [], rule)
    assert flow.step == Step.ADVISOR
    flow.back()
    assert flow.step == Step.WIZARD


def test_flow_keeps_review_step_on_warning_until_dismissed():
    flow = StepFlow(Step.EXPENSES)
    result = flow.next(10000, _wants_heavy(), BudgetRule.default())

    assert result.decision == WARN
    assert flow.step == Step.EXPENSES
    assert flow.pending is result

    assert flow.dismiss_warning(10000, _wants_heavy(), BudgetRule.default()) == Step.DASHBOARD
    assert flow.pending is None


def test_flow_block_cannot_be_dismissed():
    flow = StepFlow(Step.EXPENSES)
    over = [_expense('1', 'Rent', 5001, ExpenseType.NEED)]
    flow.next(5000, over, BudgetRule.default())

    assert flow.dismiss_warning(5000, over, BudgetRule.default()) == Step.EXPENSES
    assert flow.pending is not None
    flow.edit_expenses()
    assert flow.pending is None
    assert flow.step == Step.EXPENSES


def test_dismissing_stale_warning_rechecks_salary():
    rule = BudgetRule.default()
    expenses = [_expense('1', 'Dining', 3500, ExpenseType.WANT)]
    flow = StepFlow(Step.EXPENSES)
    assert flow.next(10000, expenses, rule).decision == WARN

    expenses.append(_expense('2', 'Rent', 7000, ExpenseType.NEED))

    assert flow.dismiss_warning(10000, expenses, rule) == Step.EXPENSES
    assert flow.pending.decision == BLOCK
    assert flow.pending.overage.amount == 500
    assert flow.dismiss_warning(10000, expenses, rule) == Step.EXPENSES


def test_dismissing_warning_after_fix_goes_to_dashboard():
    rule = BudgetRule.default()
    flow = StepFlow(Step.EXPENSES)
    flow.next(10000, [_expense('1', 'Dining', 3500, ExpenseType.WANT)], rule)

    fixed = [_expense('1', 'Dining', 2500, ExpenseType.WANT)]
    assert flow.dismiss_warning(10000, fixed, rule) == Step.DASHBOARD
    assert flow.pending is None


def test_flow_reset():
    flow = StepFlow(Step.DASHBOARD)
    assert flow.reset() == Step.SALARY


def test_block_reports_current_and_limit():
    expenses = [
        _expense('1', 'Rent', 3000, ExpenseType.NEED),
        _expense('2', 'Dining', 2001, ExpenseType.WANT),
    ]
    overage = evaluate_dashboard_transition(5000, expenses, BudgetRule.default()).overage
    assert (overage.current, overage.limit) == (5001, 5000)


def test_two_wants_suggestions_start_with_largest():
    expenses = [
        _expense('1', 'Shopping', 1500, ExpenseType.WANT),
        _expense('2', 'Dining', 2000, ExpenseType.WANT),
    ]
    warning = evaluate_dashboard_transition(10000, expenses, BudgetRule.default()).warning
    assert warning.excess_amount == 500
    assert [(s.name, s.reduce_by) for s in warning.suggestions] == [('Dining', 500), ('Shopping', 500)]
