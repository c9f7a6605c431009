"""Library modules shared by the budget planner screens.

Structure:
    - common/: Formatting and file helpers
    - config/: JSON configuration (labels, mapping, checklist, texts)
    - budget/: Budget domain logic and the Streamlit components
"""

__all__ = ['common', 'config', 'budget']
