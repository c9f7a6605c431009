"""Expense categorization utilities.

This module maps known expense names to their Needs / Wants / Savings
category using the configured lookup table, and lists the suggested names
offered by the entry form.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..config import get_budget_config
from .models import ExpenseType


def _get_mapping(lang: Optional[str]) -> Dict[str, str]:
    """Get the name → category mapping for a language (all languages if None)."""
    mapping = get_budget_config()['mapping']
    if lang is None:
        merged: Dict[str, str] = {}
        for entries in mapping.values():
            merged.update(entries)
        return merged
    return mapping.get(lang, {})


def default_category() -> ExpenseType:
    """Category assigned to names that are not in the mapping."""
    config = get_budget_config()
    return ExpenseType.parse(config['constants']['default_category'])


def categorize_expense(name: str, lang: Optional[str] = None) -> ExpenseType:
    """Categorize an expense name into Need, Want or Saving.

    Args:
        name: The expense name to categorize
        lang: Restrict the lookup to one language's mapping (None searches all)

    Returns:
        The mapped category, or the configured default for unmapped names

    Example:
        >>> categorize_expense('Restaurants & Cafes')
        <ExpenseType.WANT: 'want'>
        >>> categorize_expense('Something new')
        <ExpenseType.NEED: 'need'>
    """
    mapping = _get_mapping(lang)
    key = (name or '').strip()

    if key in mapping:
        return ExpenseType.parse(mapping[key])

    lowered = key.lower()
    for known, category in mapping.items():
        if known.lower() == lowered:
            return ExpenseType.parse(category)

    return default_category()


def suggested_expenses(lang: str) -> List[str]:
    """Names offered as quick picks in the expense form, in configured order."""
    return list(_get_mapping(lang).keys())


def category_label(category: ExpenseType, lang: str) -> str:
    """Display label for a category in the given language."""
    labels = get_budget_config()['labels']
    return labels.get(lang, labels['en'])[category.value]


def category_color(category: ExpenseType) -> str:
    return get_budget_config()['colors'][category.value]
