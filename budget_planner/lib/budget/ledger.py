"""The expense ledger: an ordered collection of expenses, unique by id.

New entries are prepended so the most recent expense is listed first.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import replace
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .models import Expense, ExpenseDraft, ExpenseType


def parse_amount(text: Any) -> Optional[float]:
    """Parse a user-entered amount; returns None for blank or non-numeric input.

    Example:
        >>> parse_amount('1,250.5')
        1250.5
        >>> parse_amount('abc') is None
        True
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        cleaned = str(text).replace(',', '').strip()
        if not cleaned:
            return None
        try:
            value = float(cleaned)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def is_valid_entry(name: Optional[str], amount: Optional[float]) -> bool:
    """True when the name is non-blank and the amount is a positive finite number."""
    if not name or not name.strip():
        return False
    if amount is None or isinstance(amount, bool):
        return False
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0


def _new_id() -> str:
    return uuid.uuid4().hex


class Ledger:
    """Ordered, id-unique collection of expenses."""

    def __init__(self, expenses: Optional[Iterable[Expense]] = None):
        self._items: List[Expense] = []
        for expense in expenses or []:
            if self.get(expense.id) is not None:
                raise ValueError(f"Duplicate expense id: {expense.id}")
            self._items.append(expense)

    def __iter__(self) -> Iterator[Expense]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    @property
    def expenses(self) -> List[Expense]:
        """Snapshot of the ledger in display order."""
        return list(self._items)

    def get(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self._items if e.id == expense_id), None)

    def add(
        self,
        name: str,
        amount: float,
        category: ExpenseType,
        note: str = '',
    ) -> Expense:
        """Create an expense with a fresh id and put it at the top of the ledger.

        Raises:
            ValueError: If the name is blank or the amount is not positive
        """
        if not is_valid_entry(name, amount):
            raise ValueError(f"Invalid expense entry: name={name!r}, amount={amount!r}")
        expense = Expense(
            id=_new_id(),
            name=name.strip(),
            amount=float(amount),
            category=ExpenseType.parse(category),
            note=note or '',
        )
        self._items.insert(0, expense)
        return expense

    def extend(self, drafts: Iterable[ExpenseDraft]) -> List[Expense]:
        """Add several drafts; the last draft ends up first, as if added one by one."""
        return [self.add(d.name, d.amount, d.category, d.note) for d in drafts]

    def update(self, expense: Expense) -> Expense:
        """Replace the expense with the same id, keeping its position.

        Raises:
            ValueError: If no expense has that id or the new values are invalid
        """
        if not is_valid_entry(expense.name, expense.amount):
            raise ValueError(f"Invalid expense entry: name={expense.name!r}, amount={expense.amount!r}")
        for index, current in enumerate(self._items):
            if current.id == expense.id:
                updated = replace(
                    expense,
                    name=expense.name.strip(),
                    amount=float(expense.amount),
                    category=ExpenseType.parse(expense.category),
                )
                self._items[index] = updated
                return updated
        raise ValueError(f"Unknown expense id: {expense.id}")

    def remove(self, expense_id: str) -> bool:
        """Delete an expense; returns False when the id was not present."""
        before = len(self._items)
        self._items = [e for e in self._items if e.id != expense_id]
        return len(self._items) != before

    def clear(self) -> None:
        self._items = []

    def by_category(self, category: ExpenseType) -> List[Expense]:
        return [e for e in self._items if e.category == category]

    def to_records(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._items]

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> 'Ledger':
        """Rebuild a ledger from stored records.

        Raises:
            ValueError: If a record is invalid or an id repeats
        """
        return cls(Expense.from_dict(record) for record in records)
