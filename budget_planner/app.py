"""QAWAM budget planner - Streamlit app.

One page, five steps: salary, expense wizard, advisor, expense review and
the dashboard.  The current step lives in the session's ``StepFlow``.
"""

from __future__ import annotations

import logging

import streamlit as st

from . import config
from .lib.budget.gate import Step
from .lib.budget.storage import get_default_storage
from .lib.budget.ui_components import (
    render_advisor_step,
    render_dashboard,
    render_expenses_step,
    render_salary_step,
    render_sidebar,
    render_wizard_step,
    step_title,
)
from .session import get_flow, get_lang, init_state

logger = logging.getLogger(__name__)

STEP_RENDERERS = {
    Step.SALARY: render_salary_step,
    Step.WIZARD: render_wizard_step,
    Step.ADVISOR: render_advisor_step,
    Step.EXPENSES: render_expenses_step,
    Step.DASHBOARD: render_dashboard,
}


def main():
    """Main entry point for the budget planner."""
    st.set_page_config(
        page_title="QAWAM Budget Planner",
        page_icon="💰",
        layout="wide",
        initial_sidebar_state="expanded"
    )
    logging.basicConfig(level=config.LOG_LEVEL)

    config.ensure_data_directories()
    storage = get_default_storage()
    init_state(storage)

    render_sidebar(storage)
    if get_lang() == 'ar':
        st.markdown('<style>.main .block-container { direction: rtl; }</style>', unsafe_allow_html=True)

    step = get_flow().step
    st.title(step_title(step))
    STEP_RENDERERS[step](storage)
