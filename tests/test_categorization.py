from budget_planner.lib.budget.categorization import (
    categorize_expense,
    category_color,
    category_label,
    suggested_expenses,
)
from budget_planner.lib.budget.models import ExpenseType


def test_known_names_map_to_categories():
    assert categorize_expense('Car Installment') == ExpenseType.NEED
    assert categorize_expense('Restaurants & Cafes') == ExpenseType.WANT
    assert categorize_expense('Emergency Savings') == ExpenseType.SAVING
    assert categorize_expense('المطاعم والكافيهات') == ExpenseType.WANT


def test_lookup_is_case_insensitive():
    assert categorize_expense('  car wash ', 'en') == ExpenseType.WANT


def test_unknown_names_default_to_need():
    assert categorize_expense('Something new') == ExpenseType.NEED
    assert categorize_expense('') == ExpenseType.NEED


def test_language_scoped_lookup():
    assert categorize_expense('Investment', 'ar') == ExpenseType.NEED
    assert categorize_expense('Investment', 'en') == ExpenseType.SAVING


def test_suggestions_and_labels():
    assert 'Car Installment' in suggested_expenses('en')
    assert category_label(ExpenseType.SAVING, 'en') == 'Saving & Investment'
    assert category_label(ExpenseType.NEED, 'ar') == 'احتياج'
    assert category_label(ExpenseType.WANT, 'xx') == 'Want'
    assert category_color(ExpenseType.NEED).startswith('#')
