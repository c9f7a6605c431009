"""Budget-specific utilities and business logic.

This module provides all budget-related functionality including:
- Expense records, the ledger and the budget rule
- Dashboard metrics and target-vs-actual analysis
- The per-entry salary check and the dashboard gate
- The guided expense wizard and categorization
- Key-value storage of the working budget

The Streamlit screens live in ``ui_components`` and are imported directly
by the app so this package stays importable without a running Streamlit
session.
"""

from .models import (
    ExpenseType,
    Expense,
    ExpenseDraft,
    BudgetRule,
    DashboardMetrics,
    CategoryAnalysis,
    BudgetAnalysis,
    ReductionSuggestion,
    Recommendation,
    ChatExtraction,
)
from .ledger import (
    Ledger,
    parse_amount,
    is_valid_entry,
)
from .calculations import (
    round_half_up,
    compute_metrics,
    category_percent,
    analyze_budget,
    expense_share,
    share_band,
)
from .categorization import (
    categorize_expense,
    category_label,
    category_color,
    suggested_expenses,
)
from .entry import (
    EntryWarning,
    check_entry,
)
from .gate import (
    Step,
    StepFlow,
    GateResult,
    Overage,
    CategoryWarning,
    reduction_suggestions,
    evaluate_dashboard_transition,
)
from .wizard import (
    ExpenseWizard,
    checklist_items,
)
from .storage import (
    BudgetStorage,
    get_default_storage,
)

__all__ = [
    # Models
    'ExpenseType',
    'Expense',
    'ExpenseDraft',
    'BudgetRule',
    'DashboardMetrics',
    'CategoryAnalysis',
    'BudgetAnalysis',
    'ReductionSuggestion',
    'Recommendation',
    'ChatExtraction',
    # Ledger
    'Ledger',
    'parse_amount',
    'is_valid_entry',
    # Calculations
    'round_half_up',
    'compute_metrics',
    'category_percent',
    'analyze_budget',
    'expense_share',
    'share_band',
    # Categorization
    'categorize_expense',
    'category_label',
    'category_color',
    'suggested_expenses',
    # Entry check
    'EntryWarning',
    'check_entry',
    # Gate
    'Step',
    'StepFlow',
    'GateResult',
    'Overage',
    'CategoryWarning',
    'reduction_suggestions',
    'evaluate_dashboard_transition',
    # Wizard
    'ExpenseWizard',
    'checklist_items',
    # Storage
    'BudgetStorage',
    'get_default_storage',
]
