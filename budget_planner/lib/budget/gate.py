"""Step progression for the budgeting flow.

The flow is linear: salary entry, expense wizard, advisor, expense review,
dashboard.  Only the move from expense review to the dashboard carries
logic: it is refused while total spend exceeds the salary, and it raises a
dismissible warning when Wants (checked first) or Needs exceed their share
of the salary under the active rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, List, Optional

from ..config import get_config_value
from .calculations import compute_metrics, round_half_up
from .models import BudgetRule, Expense, ExpenseType, ReductionSuggestion


class Step(IntEnum):
    SALARY = 1
    WIZARD = 2
    ADVISOR = 3
    EXPENSES = 4
    DASHBOARD = 5


ALLOW = 'allow'
BLOCK = 'block'
WARN = 'warn'

# Categories whose ceiling is checked at the dashboard transition, in order.
CEILING_CHECK_ORDER = (ExpenseType.WANT, ExpenseType.NEED)


@dataclass(frozen=True)
class Overage:
    """Total spend above the salary; blocks the dashboard transition."""
    current: float
    limit: float

    @property
    def amount(self) -> float:
        return self.current - self.limit


@dataclass(frozen=True)
class CategoryWarning:
    """A category above its ceiling; the user may dismiss it and continue."""
    category: ExpenseType
    actual: float
    ceiling: float
    suggestions: List[ReductionSuggestion] = field(default_factory=list)

    @property
    def excess_amount(self) -> float:
        return self.actual - self.ceiling


@dataclass(frozen=True)
class GateResult:
    decision: str
    overage: Optional[Overage] = None
    warning: Optional[CategoryWarning] = None

    @property
    def allowed(self) -> bool:
        return self.decision == ALLOW

    @property
    def blocked(self) -> bool:
        return self.decision == BLOCK


def reduction_suggestions(
    expenses: Iterable[Expense],
    category: ExpenseType,
    excess: float,
    limit: Optional[int] = None,
) -> List[ReductionSuggestion]:
    """Largest expenses of a category, each with a reduction capped at the excess."""
    if limit is None:
        limit = int(get_config_value('budget', 'constants', 'max_suggestions', default=3))
    candidates = sorted(
        (e for e in expenses if e.category == category),
        key=lambda e: e.amount,
        reverse=True,
    )
    return [
        ReductionSuggestion(
            expense_id=e.id,
            name=e.name,
            amount=e.amount,
            reduce_by=min(e.amount, excess),
        )
        for e in candidates[:limit]
    ]


def evaluate_dashboard_transition(
    salary: float,
    expenses: Iterable[Expense],
    rule: BudgetRule,
) -> GateResult:
    """Decide whether the expense review may advance to the dashboard.

    Returns:
        ``block`` with the overage when rounded total spend exceeds the
        salary; otherwise ``warn`` for the first category (Wants, then
        Needs) whose rounded total exceeds its rounded ceiling; otherwise
        ``allow``.  Savings never triggers a warning here.
    """
    items = list(expenses)
    metrics = compute_metrics(salary, items)

    if round_half_up(metrics.total_expenses) > salary:
        return GateResult(BLOCK, overage=Overage(current=metrics.total_expenses, limit=salary))

    for category in CEILING_CHECK_ORDER:
        ceiling = rule.target_for(category) * salary / 100
        actual = metrics.total_for(category)
        if round_half_up(actual) > round_half_up(ceiling):
            excess = actual - ceiling
            return GateResult(
                WARN,
                warning=CategoryWarning(
                    category=category,
                    actual=actual,
                    ceiling=ceiling,
                    suggestions=reduction_suggestions(items, category, excess),
                ),
            )

    return GateResult(ALLOW)


class StepFlow:
    """Current position in the flow plus any pending dashboard warning."""

    def __init__(self, step: Step = Step.SALARY):
        self.step = Step(step)
        self.pending: Optional[GateResult] = None

    def next(self, salary: float, expenses: Iterable[Expense], rule: BudgetRule) -> GateResult:
        """Try to move one step forward.

        Leaving the salary step needs a positive salary.  Leaving the
        expense review runs :func:`evaluate_dashboard_transition`; a block
        or warning keeps the flow on the review step and is kept in
        ``pending`` until resolved.
        """
        if self.step == Step.DASHBOARD:
            return GateResult(ALLOW)

        if self.step == Step.SALARY and not (salary and salary > 0):
            return GateResult(BLOCK, overage=None)

        if self.step == Step.EXPENSES:
            result = evaluate_dashboard_transition(salary, expenses, rule)
            if not result.allowed:
                self.pending = result
                return result

        self.pending = None
        self.step = Step(self.step + 1)
        return GateResult(ALLOW)

    def back(self) -> Step:
        self.pending = None
        if self.step > Step.SALARY:
            self.step = Step(self.step - 1)
        return self.step

    def dismiss_warning(self, salary: float, expenses: Iterable[Expense], rule: BudgetRule) -> Step:
        """Accept a pending category warning and continue to the dashboard.

        The gate runs again first: if the ledger changed since the warning
        and now exceeds the salary, the block replaces the warning and the
        flow stays on the review step.  A pending block cannot be dismissed.
        """
        if self.pending is None or self.pending.decision != WARN:
            return self.step

        result = evaluate_dashboard_transition(salary, expenses, rule)
        if result.decision == BLOCK:
            self.pending = result
            return self.step

        self.pending = None
        self.step = Step.DASHBOARD
        return self.step

    def clear_pending(self) -> None:
        """Forget a pending block or warning once the ledger it describes has changed."""
        self.pending = None

    def edit_expenses(self) -> Step:
        """Drop any pending block or warning and stay on the expense review."""
        self.pending = None
        self.step = Step.EXPENSES
        return self.step

    def go_to(self, step: Step) -> Step:
        self.pending = None
        self.step = Step(step)
        return self.step

    def reset(self) -> Step:
        return self.go_to(Step.SALARY)
