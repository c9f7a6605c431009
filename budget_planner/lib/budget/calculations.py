"""Budget calculation utilities.

This module provides the derived dashboard metrics (per-category totals,
remaining salary, savings capacity) and the comparison of those metrics
against the active budget rule.  Everything here is pure: the same salary
and ledger always produce the same numbers.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from ..config import get_config_value
from .models import (
    BudgetAnalysis,
    BudgetRule,
    CategoryAnalysis,
    DashboardMetrics,
    Expense,
    ExpenseType,
)


def _tolerance() -> float:
    return float(get_config_value('budget', 'constants', 'tolerance_points', default=5))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2).

    Threshold checks compare rounded currency units, so a floating point
    residue of a fraction of a unit never flips a comparison.
    """
    return int(math.floor(value + 0.5))


def compute_metrics(salary: float, expenses: Iterable[Expense]) -> DashboardMetrics:
    """Calculate the dashboard totals for a salary and a ledger snapshot.

    Args:
        salary: Net monthly salary
        expenses: Current expenses (any order)

    Returns:
        DashboardMetrics with per-category sums, total spend, remaining
        salary (may be negative) and savings capacity, which is
        ``max(0, salary - needs - wants)`` and therefore differs from the
        sum of expenses tagged as savings

    Example:
        >>> m = compute_metrics(10000, [])
        >>> m.remaining_salary, m.total_savings_calculated
        (10000, 10000)
    """
    items = list(expenses)
    total_needs = sum(e.amount for e in items if e.category == ExpenseType.NEED)
    total_wants = sum(e.amount for e in items if e.category == ExpenseType.WANT)
    total_savings_expenses = sum(e.amount for e in items if e.category == ExpenseType.SAVING)

    total_expenses = total_needs + total_wants + total_savings_expenses
    remaining_salary = salary - total_expenses
    total_savings_calculated = max(0, salary - total_needs - total_wants)

    return DashboardMetrics(
        total_needs=total_needs,
        total_wants=total_wants,
        total_savings_expenses=total_savings_expenses,
        total_expenses=total_expenses,
        remaining_salary=remaining_salary,
        total_savings_calculated=total_savings_calculated,
    )


def category_percent(value: float, salary: float) -> float:
    """Share of salary in percent; 0 when there is no salary."""
    if not salary or salary <= 0:
        return 0.0
    return value * 100 / salary


def _analyze_category(
    category: ExpenseType,
    actual_pct: float,
    target_pct: float,
    tolerance: float,
    is_minimum: bool = False,
) -> CategoryAnalysis:
    diff = actual_pct - target_pct
    if is_minimum:
        status = 'under' if diff < -tolerance else 'ok'
    else:
        status = 'over' if diff > tolerance else 'ok'
    return CategoryAnalysis(category=category, actual_pct=actual_pct, target_pct=target_pct, status=status)


def analyze_budget(
    metrics: DashboardMetrics,
    salary: float,
    rule: BudgetRule,
    tolerance: Optional[float] = None,
) -> BudgetAnalysis:
    """Compare actual category shares of salary with the rule's targets.

    Needs and Wants are flagged ``over`` when they exceed their target by
    more than the tolerance; Savings (measured as savings capacity) is
    flagged ``under`` when it falls short by more than the tolerance.  A
    difference of exactly the tolerance is not flagged.

    The budget is balanced when Needs and Wants are both within the
    tolerance band and Savings is at least ``target - tolerance``.
    """
    tol = _tolerance() if tolerance is None else float(tolerance)

    needs = _analyze_category(
        ExpenseType.NEED, category_percent(metrics.total_needs, salary), rule.needs, tol,
    )
    wants = _analyze_category(
        ExpenseType.WANT, category_percent(metrics.total_wants, salary), rule.wants, tol,
    )
    savings = _analyze_category(
        ExpenseType.SAVING,
        category_percent(metrics.total_savings_calculated, salary),
        rule.savings,
        tol,
        is_minimum=True,
    )

    balanced = (
        abs(needs.difference) <= tol
        and abs(wants.difference) <= tol
        and savings.actual_pct >= rule.savings - tol
    )
    return BudgetAnalysis(needs=needs, wants=wants, savings=savings, balanced=balanced)


def expense_share(amount: float, salary: float) -> int:
    """Whole-percent share of salary for one expense, rounded up."""
    if not salary or salary <= 0:
        return 0
    return int(math.ceil(amount * 100 / salary))


def share_band(amount: float, salary: float) -> str:
    """Badge band for an expense share: 'none', 'low' (<=5%), 'medium' (<=15%) or 'high'."""
    if not salary or salary <= 0:
        return 'none'
    pct = amount * 100 / salary
    if pct <= 5:
        return 'low'
    if pct <= 15:
        return 'medium'
    return 'high'
