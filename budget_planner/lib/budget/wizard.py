"""Guided expense collection.

The wizard walks a configured checklist of common monthly obligations, asks
for an amount for each one the user has, then lets the user add any number
of custom expenses before finishing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..config import get_budget_config, get_config_value
from .categorization import categorize_expense
from .ledger import is_valid_entry
from .models import ExpenseDraft, ExpenseType

WIZARD_NOTE = 'Manual Wizard Entry'
WIZARD_CUSTOM_NOTE = 'Manual Wizard Entry (Custom)'


def checklist_items(lang: str) -> List[Dict[str, str]]:
    """Configured checklist for a language (empty for unknown languages)."""
    return list(get_budget_config()['checklist'].get(lang, []))


class ExpenseWizard:
    """State of one pass through the expense checklist."""

    def __init__(self, lang: str, items: Optional[List[Dict[str, str]]] = None):
        self.lang = lang
        self.items = items if items is not None else checklist_items(lang)
        self.index = 0
        self.collected: List[ExpenseDraft] = []
        self.awaiting_amount = False
        self.custom_phase = not self.items

    @property
    def current_item(self) -> Optional[Dict[str, str]]:
        if self.custom_phase or self.index >= len(self.items):
            return None
        return self.items[self.index]

    @property
    def progress(self) -> float:
        """Percent of the checklist already answered; 100 in the custom phase."""
        if self.custom_phase:
            return 100.0
        return self.index / len(self.items) * 100

    def answer(self, has_expense: bool) -> None:
        """Answer the current checklist question; "no" skips to the next item."""
        if self.custom_phase:
            return
        if has_expense:
            self.awaiting_amount = True
        else:
            self._advance()

    def cancel_amount(self) -> None:
        self.awaiting_amount = False

    def confirm_amount(self, amount: Any) -> bool:
        """Record the amount for the current checklist item and move on.

        Returns:
            False (and changes nothing) when the amount is not positive
        """
        item = self.current_item
        if item is None or not is_valid_entry(item['name'], amount):
            return False
        self.collected.append(ExpenseDraft(
            name=item['name'],
            amount=float(amount),
            category=categorize_expense(item['name'], self.lang),
            note=WIZARD_NOTE,
        ))
        self._advance()
        return True

    def add_custom(self, name: str, amount: Any) -> bool:
        """Add an unlisted expense during the custom phase.

        Custom expenses use the configured custom category (Want by default);
        the advisor and the review screen can refine it later.
        """
        if not self.custom_phase or not is_valid_entry(name, amount):
            return False
        category = ExpenseType.parse(
            get_config_value('budget', 'constants', 'custom_category', default='want')
        )
        self.collected.append(ExpenseDraft(
            name=name.strip(),
            amount=float(amount),
            category=category,
            note=WIZARD_CUSTOM_NOTE,
        ))
        return True

    def finish(self) -> List[ExpenseDraft]:
        """Collected drafts in the order they were entered."""
        return list(self.collected)

    @property
    def total(self) -> float:
        return sum(d.amount for d in self.collected)

    def _advance(self) -> None:
        self.awaiting_amount = False
        if self.index < len(self.items) - 1:
            self.index += 1
        else:
            self.custom_phase = True
