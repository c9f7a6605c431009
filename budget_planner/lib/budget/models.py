"""Data models for the budget planner."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class ExpenseType(str, Enum):
    """The three mutually exclusive expense categories."""

    NEED = 'need'
    WANT = 'want'
    SAVING = 'saving'

    @classmethod
    def parse(cls, value: Any) -> 'ExpenseType':
        """Resolve a category from its code, English name or Arabic label.

        Raises:
            ValueError: If the value names no known category
        """
        if isinstance(value, cls):
            return value
        key = str(value or '').strip().lower()
        found = _ALIASES.get(key)
        if found is None:
            raise ValueError(f"Unknown expense category: {value!r}")
        return found


_ALIASES: Dict[str, ExpenseType] = {
    'need': ExpenseType.NEED,
    'needs': ExpenseType.NEED,
    'احتياج': ExpenseType.NEED,
    'want': ExpenseType.WANT,
    'wants': ExpenseType.WANT,
    'رغبة': ExpenseType.WANT,
    'saving': ExpenseType.SAVING,
    'savings': ExpenseType.SAVING,
    'saving & investment': ExpenseType.SAVING,
    'ادخار واستثمار': ExpenseType.SAVING,
    'ادخار': ExpenseType.SAVING,
}


@dataclass
class Expense:
    """Single expense record owned by the ledger."""
    id: str
    name: str
    amount: float
    category: ExpenseType
    note: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'category': self.category.value,
            'note': self.note,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Expense':
        """Build an expense from a stored record.

        Accepts the older ``type``/``notes`` keys as well.

        Raises:
            ValueError: If the record has no id, a blank name, a non-positive
                amount or an unknown category
        """
        expense_id = str(data.get('id') or '').strip()
        name = str(data.get('name') or '').strip()
        try:
            amount = float(data.get('amount'))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Expense amount is not a number: {data.get('amount')!r}") from e
        category = ExpenseType.parse(data.get('category', data.get('type')))
        note = data.get('note', data.get('notes')) or ''
        if not expense_id:
            raise ValueError("Expense record has no id")
        if not name:
            raise ValueError("Expense name cannot be empty")
        if not math.isfinite(amount) or amount <= 0:
            raise ValueError(f"Expense amount must be positive, got {amount}")
        return cls(id=expense_id, name=name, amount=amount, category=category, note=str(note))


@dataclass
class ExpenseDraft:
    """An expense that has not been assigned an id yet (wizard or chat output)."""
    name: str
    amount: float
    category: ExpenseType
    note: str = ''


@dataclass(frozen=True)
class BudgetRule:
    """Target split of salary across the three categories, in percent.

    The three values are independent; they are not required to sum to 100.
    """
    needs: float = 50.0
    wants: float = 30.0
    savings: float = 20.0

    @classmethod
    def default(cls) -> 'BudgetRule':
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BudgetRule':
        """Build a rule from a ``{needs, wants, savings}`` mapping.

        Raises:
            ValueError: If a value is missing, not a number or negative
        """
        values = {}
        for key in ('needs', 'wants', 'savings'):
            raw = data[key] if key in data else None
            if raw is None or isinstance(raw, bool):
                raise ValueError(f"Budget rule is missing '{key}'")
            try:
                value = float(raw)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Budget rule '{key}' is not a number: {raw!r}") from e
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Budget rule '{key}' must be a non-negative number, got {raw!r}")
            values[key] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def target_for(self, category: ExpenseType) -> float:
        return {
            ExpenseType.NEED: self.needs,
            ExpenseType.WANT: self.wants,
            ExpenseType.SAVING: self.savings,
        }[category]

    def label(self) -> str:
        """Short ``50/30/20`` style label."""
        return '/'.join(f"{v:g}" for v in (self.needs, self.wants, self.savings))


@dataclass(frozen=True)
class DashboardMetrics:
    """Totals derived from the salary and the ledger; never stored."""
    total_needs: float
    total_wants: float
    total_savings_expenses: float
    total_expenses: float
    remaining_salary: float
    total_savings_calculated: float

    def total_for(self, category: ExpenseType) -> float:
        return {
            ExpenseType.NEED: self.total_needs,
            ExpenseType.WANT: self.total_wants,
            ExpenseType.SAVING: self.total_savings_expenses,
        }[category]


@dataclass(frozen=True)
class CategoryAnalysis:
    """Actual versus target share of salary for one category."""
    category: ExpenseType
    actual_pct: float
    target_pct: float
    status: str  # 'over', 'under' or 'ok'

    @property
    def difference(self) -> float:
        return self.actual_pct - self.target_pct

    @property
    def flagged(self) -> bool:
        return self.status != 'ok'


@dataclass(frozen=True)
class BudgetAnalysis:
    """Comparison of the current budget against the active rule."""
    needs: CategoryAnalysis
    wants: CategoryAnalysis
    savings: CategoryAnalysis
    balanced: bool

    def rows(self) -> List[CategoryAnalysis]:
        return [self.needs, self.wants, self.savings]


@dataclass(frozen=True)
class ReductionSuggestion:
    """An expense proposed for reduction when a category exceeds its ceiling."""
    expense_id: str
    name: str
    amount: float
    reduce_by: float


@dataclass
class Recommendation:
    """Advisor output: an optional rule plus a short explanation."""
    message: str
    rule: Optional[BudgetRule] = None
    source: str = 'local'
    error: Optional[str] = None


@dataclass
class ChatExtraction:
    """Expenses and rule extracted from a free-text chat message."""
    message: str
    expenses: List[ExpenseDraft] = field(default_factory=list)
    rule: Optional[BudgetRule] = None
    source: str = 'local'
    error: Optional[str] = None
