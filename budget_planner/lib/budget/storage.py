"""Budget state persistence.

State lives in a small JSON key-value file whose entries are strings, the
same shape as browser local storage: the serialized expense list, the
salary, the budget rule and a visitor counter.  Any entry that cannot be
read is treated as absent so loading never fails.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ...config import STORE_PATH
from ..common.file_operations import atomic_write, ensure_directory
from .models import BudgetRule, Expense

logger = logging.getLogger(__name__)

EXPENSES_KEY = 'qawam_expenses'
SALARY_KEY = 'qawam_salary'
RULE_KEY = 'qawam_rule'
VISITORS_KEY = 'qawam_visitors'


class BudgetStorage:
    """Handles reading and writing of the persisted budget state."""

    def __init__(self, store_path: Optional[Path] = None):
        """Initialize budget storage.

        Args:
            store_path: Optional custom path for the key-value file.
                        Defaults to STORE_PATH from config.
        """
        self.store_path = Path(store_path) if store_path else STORE_PATH

    # ------------------------------------------------------------------
    # Raw key-value access
    # ------------------------------------------------------------------

    def _read_all(self) -> Dict[str, str]:
        if not self.store_path.exists():
            return {}
        try:
            with self.store_path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read budget store {self.store_path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring budget store {self.store_path}: not a JSON object")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        ensure_directory(self.store_path.parent)
        try:
            atomic_write(self.store_path, json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True))
        except OSError as e:
            raise OSError(f"Failed to save budget store to {self.store_path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_items(self, *keys: str) -> None:
        data = self._read_all()
        if not any(k in data for k in keys):
            return
        for key in keys:
            data.pop(key, None)
        self._write_all(data)

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def load_expenses(self) -> List[Expense]:
        """Load the stored ledger.

        Returns:
            Expenses in stored order; an unreadable list reads as empty and
            individual invalid or duplicate records are skipped
        """
        raw = self.get_item(EXPENSES_KEY)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored expenses are not valid JSON, starting empty: {e}")
            return []
        if not isinstance(records, list):
            return []

        expenses: List[Expense] = []
        seen = set()
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                expense = Expense.from_dict(record)
            except ValueError as e:
                logger.warning(f"Skipping stored expense {record.get('id')!r}: {e}")
                continue
            if expense.id in seen:
                continue
            seen.add(expense.id)
            expenses.append(expense)
        return expenses

    def save_expenses(self, expenses: Iterable[Expense]) -> None:
        payload = [e.to_dict() for e in expenses]
        self.set_item(EXPENSES_KEY, json.dumps(payload, ensure_ascii=False))

    # ------------------------------------------------------------------
    # Salary
    # ------------------------------------------------------------------

    def load_salary(self) -> float:
        """Stored salary, or 0 when missing, unreadable, negative or not finite."""
        raw = self.get_item(SALARY_KEY)
        if raw is None:
            return 0.0
        try:
            value = float(raw)
        except ValueError:
            return 0.0
        if not math.isfinite(value) or value < 0:
            return 0.0
        return value

    def save_salary(self, salary: float) -> None:
        self.set_item(SALARY_KEY, repr(float(salary)))

    # ------------------------------------------------------------------
    # Budget rule
    # ------------------------------------------------------------------

    def load_rule(self) -> BudgetRule:
        raw = self.get_item(RULE_KEY)
        if not raw:
            return BudgetRule.default()
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("rule is not an object")
            return BudgetRule.from_dict(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Stored budget rule is invalid, using default: {e}")
            return BudgetRule.default()

    def save_rule(self, rule: BudgetRule) -> None:
        self.set_item(RULE_KEY, json.dumps(rule.to_dict()))

    # ------------------------------------------------------------------
    # Visitor counter
    # ------------------------------------------------------------------

    def visitor_count(self) -> int:
        raw = self.get_item(VISITORS_KEY)
        try:
            return max(0, int(raw)) if raw is not None else 0
        except ValueError:
            return 0

    def increment_visitors(self) -> int:
        count = self.visitor_count() + 1
        self.set_item(VISITORS_KEY, str(count))
        return count

    def reset(self) -> None:
        """Forget the ledger, salary and rule; the visitor counter is kept."""
        self.remove_items(EXPENSES_KEY, SALARY_KEY, RULE_KEY)


_default_storage: Optional[BudgetStorage] = None


def get_default_storage() -> BudgetStorage:
    global _default_storage
    if _default_storage is None:
        _default_storage = BudgetStorage()
    return _default_storage

