"""Budget checks for a single expense entry.

Adding or editing an expense that would push total spend past the salary
produces a warning with a concrete suggestion.  The warning is advisory:
the form still offers "save anyway".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..common.formatting import format_currency
from ..config import get_text
from .calculations import category_percent, round_half_up
from .models import BudgetRule, Expense, ExpenseType


@dataclass(frozen=True)
class EntryWarning:
    deficit: float
    advice: str  # 'wants_high', 'trim_want', 'review_need' or 'generic'
    candidate: Optional[Expense] = None
    wants_pct: float = 0.0
    wants_target: float = 0.0

    def message(self, lang: str) -> str:
        return get_text(lang, 'entry_over_salary', deficit=format_currency(self.deficit))

    def advice_text(self, lang: str) -> str:
        deficit = format_currency(self.deficit)
        values = {
            'deficit': deficit,
            'name': self.candidate.name if self.candidate else '',
            'wants_pct': round_half_up(self.wants_pct),
            'wants_target': f"{self.wants_target:g}",
        }
        return get_text(lang, f"advice_{self.advice}", **values)


def _largest(expenses: List[Expense], category: ExpenseType) -> Optional[Expense]:
    matching = [e for e in expenses if e.category == category]
    if not matching:
        return None
    return max(matching, key=lambda e: e.amount)


def check_entry(
    salary: float,
    expenses: Iterable[Expense],
    amount: float,
    rule: Optional[BudgetRule] = None,
    editing: Optional[Expense] = None,
) -> Optional[EntryWarning]:
    """Check whether saving an entry would exceed the salary.

    Args:
        salary: Net monthly salary
        expenses: Current ledger snapshot
        amount: Amount of the new or edited expense
        rule: Active rule; its Wants target decides the ``wants_high`` advice
        editing: The expense being edited, if any (its old amount is replaced)

    Returns:
        None when the entry fits, otherwise an EntryWarning whose advice
        points at the largest Want, else the largest Need, else nothing
    """
    rule = rule or BudgetRule.default()
    items = list(expenses)
    current_total = sum(e.amount for e in items)
    delta = amount - editing.amount if editing is not None else amount

    if current_total + delta <= salary:
        return None

    deficit = current_total + delta - salary
    others = [e for e in items if editing is None or e.id != editing.id]
    wants_total = sum(e.amount for e in others if e.category == ExpenseType.WANT)
    wants_pct = category_percent(wants_total, salary)

    largest_want = _largest(others, ExpenseType.WANT)
    largest_need = _largest(others, ExpenseType.NEED)

    if wants_pct > rule.wants and largest_want is not None:
        advice, candidate = 'wants_high', largest_want
    elif largest_want is not None:
        advice, candidate = 'trim_want', largest_want
    elif largest_need is not None:
        advice, candidate = 'review_need', largest_need
    else:
        advice, candidate = 'generic', None

    return EntryWarning(
        deficit=deficit,
        advice=advice,
        candidate=candidate,
        wants_pct=wants_pct,
        wants_target=rule.wants,
    )
