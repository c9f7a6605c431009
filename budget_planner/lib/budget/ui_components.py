"""UI components for the budget planner.

This module provides all Streamlit rendering functions, organized by step:
salary entry, expense wizard, advisor, expense review (form, table and the
dashboard gate) and the dashboard itself (metrics, analysis, charts,
report export and the advisor chat).
"""

from __future__ import annotations

from typing import List, Optional

import pandas as pd
import streamlit as st

from ... import config, session
from ...advisor import default_advisor, extract_from_chat, recommend_with_fallback
from ...report import ReportExportError, build_report_bytes, build_report_filename, write_report
from ...visualization import create_category_pie_chart, create_target_vs_actual_chart
from ..common.formatting import format_currency, format_percent
from ..config import get_text
from .calculations import analyze_budget, compute_metrics, expense_share, share_band
from .categorization import categorize_expense, category_label, suggested_expenses
from .entry import EntryWarning, check_entry
from .gate import BLOCK, WARN, GateResult, Step
from .ledger import is_valid_entry, parse_amount
from .models import BudgetAnalysis, BudgetRule, DashboardMetrics, Expense, ExpenseType
from .storage import BudgetStorage
from .wizard import ExpenseWizard

STEP_TITLE_KEYS = {
    Step.SALARY: 'step_salary',
    Step.WIZARD: 'step_wizard',
    Step.ADVISOR: 'step_advisor',
    Step.EXPENSES: 'step_expenses',
    Step.DASHBOARD: 'step_dashboard',
}

BAND_ICONS = {'none': '⚪', 'low': '🟢', 'medium': '🟠', 'high': '🔴'}


def _rerun() -> None:
    if hasattr(st, 'rerun'):
        st.rerun()
    else:
        st.experimental_rerun()


def _t(key: str, **values) -> str:
    return get_text(session.get_lang(), key, **values)


def _currency() -> str:
    return get_text(session.get_lang(), 'currency')


def step_title(step: Step) -> str:
    return _t(STEP_TITLE_KEYS[step])


# ============================================================================
# Sidebar
# ============================================================================

def render_sidebar(storage: BudgetStorage) -> None:
    """Language switch, active rule, visitor counter and the reset button."""
    with st.sidebar:
        lang = st.radio(
            _t('ui_language'),
            options=['ar', 'en'],
            format_func=lambda code: 'العربية' if code == 'ar' else 'English',
            index=0 if session.get_lang() == 'ar' else 1,
            horizontal=True,
        )
        st.session_state[session.LANG_KEY] = lang

        rule = session.get_rule()
        st.caption(_t('ui_active_rule', rule=rule.label()))
        flow = session.get_flow()
        st.progress(int(flow.step) / len(Step), text=step_title(flow.step))

        visitors = st.session_state.get(session.VISITORS_KEY)
        if visitors:
            st.caption(_t('ui_visits', count=f"{visitors:,}"))

        st.divider()
        confirm = st.checkbox(_t('ui_reset_confirm'))
        if st.button(_t('ui_reset'), disabled=not confirm, use_container_width=True):
            session.reset_state(storage)
            _rerun()


# ============================================================================
# Step 1: salary
# ============================================================================

def render_salary_step(storage: BudgetStorage) -> None:
    salary = session.get_salary()
    st.subheader(_t('ui_salary_first') if salary <= 0 else _t('ui_salary_heading'))
    value = st.number_input(
        _t('ui_salary_label', currency=_currency()),
        min_value=0.0,
        value=float(salary),
        step=500.0,
        format="%.2f",
    )
    if value != salary:
        session.set_salary(storage, value)

    if st.button(_t('ui_next'), type="primary", disabled=value <= 0):
        session.get_flow().next(value, session.expenses_snapshot(), session.get_rule())
        _rerun()


# ============================================================================
# Step 2: wizard
# ============================================================================

def render_wizard_step(storage: BudgetStorage) -> None:
    lang = session.get_lang()
    wizard: Optional[ExpenseWizard] = st.session_state.get('wizard')
    if wizard is None or wizard.lang != lang:
        wizard = ExpenseWizard(lang)
        st.session_state['wizard'] = wizard

    st.progress(wizard.progress / 100)
    item = wizard.current_item

    if item is not None:
        st.markdown(_t('ui_wizard_prompt'))
        st.markdown(f"### {item['name']}")
        st.caption(item['description'])
        st.caption(_t('ui_wizard_hint'))

        if not wizard.awaiting_amount:
            col_no, col_yes = st.columns(2)
            if col_no.button(_t('ui_no'), use_container_width=True):
                wizard.answer(False)
                _rerun()
            if col_yes.button(_t('ui_yes'), type="primary", use_container_width=True):
                wizard.answer(True)
                _rerun()
        else:
            amount_text = st.text_input(_t('ui_enter_monthly_amount'), key=f"wizard_amount_{wizard.index}")
            col_back, col_ok = st.columns(2)
            if col_back.button(_t('ui_back'), use_container_width=True):
                wizard.cancel_amount()
                _rerun()
            if col_ok.button(_t('ui_confirm_next'), type="primary", use_container_width=True):
                if wizard.confirm_amount(parse_amount(amount_text)):
                    _rerun()
    else:
        st.markdown(_t('ui_other_expenses_heading'))
        st.caption(_t('ui_other_expenses_hint'))
        with st.form("wizard_custom", clear_on_submit=True):
            name = st.text_input(_t('ui_expense_name'))
            amount_text = st.text_input(_t('ui_monthly_amount'))
            if st.form_submit_button(_t('ui_add_another')):
                wizard.add_custom(name, parse_amount(amount_text))

        for draft in wizard.collected:
            st.write(f"• {draft.name}: {format_currency(draft.amount, _currency())}")

        if st.button(_t('ui_finish_list'), type="primary"):
            session.add_drafts(storage, wizard.finish())
            st.session_state['wizard'] = None
            st.session_state['recommendation'] = None
            session.get_flow().next(session.get_salary(), session.expenses_snapshot(), session.get_rule())
            _rerun()

    if st.button(_t('ui_back_to_salary')):
        session.get_flow().back()
        _rerun()


# ============================================================================
# Step 3: advisor
# ============================================================================

def render_rule(rule: BudgetRule, lang: str) -> None:
    cols = st.columns(3)
    cols[0].metric(category_label(ExpenseType.NEED, lang), f"{rule.needs:g}%")
    cols[1].metric(category_label(ExpenseType.WANT, lang), f"{rule.wants:g}%")
    cols[2].metric(category_label(ExpenseType.SAVING, lang), f"{rule.savings:g}%")


def render_advisor_step(storage: BudgetStorage) -> None:
    lang = session.get_lang()
    recommendation = st.session_state.get('recommendation')
    if recommendation is None:
        with st.spinner(_t('ui_analyzing')):
            recommendation = recommend_with_fallback(
                default_advisor(lang), session.get_salary(), session.expenses_snapshot(), lang
            )
        st.session_state['recommendation'] = recommendation
        if recommendation.rule is not None:
            session.set_rule(storage, recommendation.rule)

    st.success(_t('ui_analysis_done'))
    st.write(recommendation.message)
    if recommendation.error:
        with st.expander(_t('ui_advisor_diagnostics')):
            st.code(recommendation.error)

    st.markdown(_t('ui_recommended_rule'))
    render_rule(session.get_rule(), lang)
    render_rule_editor(storage)

    col_back, col_next = st.columns(2)
    if col_back.button(_t('ui_back_arrow'), use_container_width=True):
        session.get_flow().back()
        _rerun()
    if col_next.button(_t('ui_view_results'), type="primary", use_container_width=True):
        session.get_flow().next(session.get_salary(), session.expenses_snapshot(), session.get_rule())
        _rerun()


def render_rule_editor(storage: BudgetStorage) -> None:
    """Manual override of the three target percentages (no sum constraint)."""
    rule = session.get_rule()
    with st.expander(_t('ui_adjust_rule')):
        cols = st.columns(3)
        needs = cols[0].slider(_t('ui_needs_pct'), 0, 100, int(round(rule.needs)))
        wants = cols[1].slider(_t('ui_wants_pct'), 0, 100, int(round(rule.wants)))
        savings = cols[2].slider(_t('ui_savings_pct'), 0, 100, int(round(rule.savings)))
        if needs + wants + savings != 100:
            st.caption(_t('ui_targets_sum', total=needs + wants + savings))
        updated = BudgetRule(needs=needs, wants=wants, savings=savings)
        if updated != rule and st.button(_t('ui_apply_rule')):
            session.set_rule(storage, updated)
            _rerun()


# ============================================================================
# Step 4: expenses
# ============================================================================

def render_expense_table(storage: BudgetStorage, editable: bool = True) -> None:
    expenses = session.expenses_snapshot()
    salary = session.get_salary()
    lang = session.get_lang()
    if not expenses:
        st.info(_t('ui_no_expenses'))
        return
    if not editable:
        st.dataframe(expenses_dataframe(expenses, salary, lang), hide_index=True, use_container_width=True)
        return

    for expense in expenses:
        band = share_band(expense.amount, salary)
        cols = st.columns([4, 2, 2, 1, 1, 1])
        cols[0].markdown(f"**{expense.name}**" + (f"  \n_{expense.note}_" if expense.note else ""))
        cols[1].write(category_label(expense.category, lang))
        cols[2].write(format_currency(expense.amount, _currency()))
        cols[3].write(f"{BAND_ICONS[band]} {expense_share(expense.amount, salary)}%")
        if cols[4].button("✏️", key=f"edit_{expense.id}", help=_t('ui_edit')):
            st.session_state['editing_id'] = expense.id
            st.session_state['entry_warning'] = None
            st.session_state['form_open'] = True
            _rerun()
        if cols[5].button("🗑️", key=f"delete_{expense.id}", help=_t('ui_delete')):
            session.delete_expense(storage, expense.id)
            _rerun()


def expenses_dataframe(expenses: List[Expense], salary: float, lang: str) -> pd.DataFrame:
    columns = [get_text(lang, key) for key in (
        'ui_col_name', 'ui_col_category', 'ui_col_amount', 'ui_col_share', 'ui_col_note'
    )]
    return pd.DataFrame(
        [
            [e.name, category_label(e.category, lang), e.amount, expense_share(e.amount, salary), e.note]
            for e in expenses
        ],
        columns=columns,
    )


def _save_pending(storage: BudgetStorage, expense: Expense) -> None:
    session.save_expense(storage, expense)
    st.session_state['entry_warning'] = None
    st.session_state['editing_id'] = None
    st.session_state['form_open'] = False


def render_expense_form(storage: BudgetStorage) -> None:
    """Add or edit one expense, warning (but not blocking) when it exceeds the salary."""
    lang = session.get_lang()
    ledger = session.get_ledger()
    editing_id = st.session_state.get('editing_id')
    editing = ledger.get(editing_id) if editing_id else None

    st.markdown(_t('ui_edit_expense') if editing else _t('ui_add_new_expense'))
    suggestions = [''] + suggested_expenses(lang)
    picked = st.selectbox(_t('ui_quick_pick'), suggestions, key=f"pick_{editing_id}") if not editing else ''

    with st.form(f"expense_form_{editing_id or 'new'}"):
        name = st.text_input(_t('ui_name'), value=editing.name if editing else picked)
        amount_text = st.text_input(_t('ui_amount'), value=f"{editing.amount:g}" if editing else '')
        categories = list(ExpenseType)
        default_category = editing.category if editing else categorize_expense(name or picked, lang)
        category = st.selectbox(
            _t('ui_category'),
            categories,
            index=categories.index(default_category),
            format_func=lambda c: category_label(c, lang),
        )
        note = st.text_input(_t('ui_note'), value=editing.note if editing else '')
        submitted = st.form_submit_button(_t('ui_save'), type="primary")

    if submitted:
        amount = parse_amount(amount_text)
        if not is_valid_entry(name, amount):
            return
        candidate = Expense(
            id=editing.id if editing else '',
            name=name.strip(),
            amount=amount,
            category=category,
            note=note,
        )
        warning = check_entry(session.get_salary(), ledger.expenses, amount, session.get_rule(), editing)
        if warning is None:
            _save_pending(storage, candidate)
            _rerun()
            return
        st.session_state['entry_warning'] = (warning, candidate)

    pending = st.session_state.get('entry_warning')
    if pending:
        warning, candidate = pending
        render_entry_warning(warning, lang)
        col_force, col_cancel = st.columns(2)
        if col_force.button(_t('ui_save_anyway'), use_container_width=True):
            _save_pending(storage, candidate)
            _rerun()
        if col_cancel.button(_t('ui_cancel'), use_container_width=True):
            st.session_state['entry_warning'] = None
            st.session_state['editing_id'] = None
            st.session_state['form_open'] = False
            _rerun()


def render_entry_warning(warning: EntryWarning, lang: str) -> None:
    st.error(warning.message(lang))
    st.info(warning.advice_text(lang))


def render_gate_result(result: GateResult, lang: str) -> None:
    """Show why the dashboard transition stopped and the ways forward."""
    flow = session.get_flow()
    currency = _currency()
    if result.decision == BLOCK and result.overage is not None:
        overage = result.overage
        st.error(_t(
            'ui_gate_block',
            current=format_currency(overage.current, currency),
            limit=format_currency(overage.limit, currency),
            amount=format_currency(overage.amount, currency),
        ))
        if st.button(_t('ui_edit_expenses')):
            flow.edit_expenses()
            _rerun()
    elif result.decision == WARN and result.warning is not None:
        warning = result.warning
        label = category_label(warning.category, lang)
        st.warning(_t(
            'ui_gate_warn',
            label=label,
            actual=format_currency(warning.actual, currency),
            ceiling=format_currency(warning.ceiling, currency),
            excess=format_currency(warning.excess_amount, currency),
        ))
        for suggestion in warning.suggestions:
            st.write(_t(
                'ui_reduce_item',
                name=suggestion.name,
                amount=format_currency(suggestion.amount, currency),
                reduce_by=format_currency(suggestion.reduce_by, currency),
            ))
        col_edit, col_continue = st.columns(2)
        if col_edit.button(_t('ui_edit_expenses'), use_container_width=True):
            flow.edit_expenses()
            _rerun()
        if col_continue.button(_t('ui_continue_anyway'), type="primary", use_container_width=True):
            flow.dismiss_warning(session.get_salary(), session.expenses_snapshot(), session.get_rule())
            _rerun()


def render_expenses_step(storage: BudgetStorage) -> None:
    salary = session.get_salary()
    metrics = compute_metrics(salary, session.expenses_snapshot())
    render_metrics(metrics, salary)
    render_expense_table(storage)

    if st.session_state.get('form_open') or st.button(_t('ui_add_expense')):
        st.session_state['form_open'] = True
        render_expense_form(storage)

    flow = session.get_flow()
    if flow.pending is not None:
        render_gate_result(flow.pending, session.get_lang())
        return

    col_back, col_next = st.columns(2)
    if col_back.button(_t('ui_back_arrow'), use_container_width=True):
        flow.back()
        _rerun()
    if col_next.button(_t('ui_go_dashboard'), type="primary", use_container_width=True):
        flow.next(salary, session.expenses_snapshot(), session.get_rule())
        _rerun()


# ============================================================================
# Step 5: dashboard
# ============================================================================

def render_metrics(metrics: DashboardMetrics, salary: float) -> None:
    currency = _currency()
    cols = st.columns(4)
    cols[0].metric(_t('ui_net_salary'), format_currency(salary, currency))
    cols[1].metric(_t('ui_total_expenses'), format_currency(metrics.total_expenses, currency))
    cols[2].metric(_t('ui_remaining'), format_currency(metrics.remaining_salary, currency))
    cols[3].metric(_t('ui_savings_capacity'), format_currency(metrics.total_savings_calculated, currency))
    if metrics.remaining_salary > 0:
        st.caption(_t('ui_unallocated', amount=format_currency(metrics.remaining_salary, currency)))


def render_analysis_cards(analysis: BudgetAnalysis, lang: str) -> None:
    if analysis.balanced:
        st.success(_t('ui_balanced'))
    cols = st.columns(3)
    for col, row in zip(cols, analysis.rows()):
        with col:
            st.markdown(f"**{category_label(row.category, lang)}**")
            st.markdown(_t('ui_target_line', actual=format_percent(row.actual_pct), target=f"{row.target_pct:g}"))
            st.progress(min(max(row.actual_pct, 0.0), 100.0) / 100)
            if row.status == 'over':
                st.error(_t('ui_above_target', diff=round(row.difference)))
            elif row.status == 'under':
                st.error(_t('ui_below_target', diff=abs(round(row.difference))))
            else:
                st.success(_t('ui_within_target'))


def render_export_buttons(salary: float, expenses: List[Expense], rule: BudgetRule, lang: str) -> None:
    cols = st.columns(2)
    for col, (fmt, label, mime) in zip(cols, [
        ('html', _t('ui_download_html'), 'text/html'),
        ('md', _t('ui_download_md'), 'text/markdown'),
    ]):
        try:
            data = build_report_bytes(fmt, salary=salary, expenses=expenses, rule=rule, lang=lang)
        except ReportExportError as e:
            col.error(_t('ui_export_error', error=e))
            continue
        col.download_button(label, data=data, file_name=build_report_filename(fmt), mime=mime)

    if st.button(_t('ui_save_copy')):
        target = config.REPORTS_DIR / build_report_filename('html')
        try:
            data = build_report_bytes('html', salary=salary, expenses=expenses, rule=rule, lang=lang)
            write_report(target, data)
        except ReportExportError as e:
            st.error(_t('ui_export_error', error=e))
        else:
            st.success(_t('ui_report_saved', path=target))


def render_chat_panel(storage: BudgetStorage) -> None:
    """Free-text assistant that pre-fills expenses and may suggest a rule."""
    lang = session.get_lang()
    log = st.session_state.setdefault('chat_log', [])
    with st.expander(_t('ui_ask_assistant'), expanded=bool(log)):
        for role, text in log:
            with st.chat_message(role):
                st.write(text)
        prompt = st.chat_input(_t('ui_chat_placeholder'))
        if not prompt:
            return
        log.append(('user', prompt))
        with st.spinner(_t('ui_thinking')):
            extraction = extract_from_chat(
                prompt, session.get_salary(), session.expenses_snapshot(), lang, advisor=default_advisor(lang)
            )
        reply = [extraction.message] if extraction.message else []
        if extraction.expenses:
            session.add_drafts(storage, extraction.expenses)
            reply.append(_t('ui_chat_added', items=", ".join(
                f"{d.name} ({format_currency(d.amount, _currency())})" for d in extraction.expenses
            )))
        if extraction.rule is not None:
            session.set_rule(storage, extraction.rule)
            reply.append(_t('ui_chat_rule_set', rule=extraction.rule.label()))
        if extraction.error:
            reply.append(_t('ui_chat_diagnostics', error=extraction.error))
        log.append(('assistant', "\n\n".join(reply) or "..."))
        _rerun()


def render_dashboard(storage: BudgetStorage) -> None:
    lang = session.get_lang()
    salary = session.get_salary()
    rule = session.get_rule()
    expenses = session.expenses_snapshot()
    metrics = compute_metrics(salary, expenses)

    render_metrics(metrics, salary)
    if salary > 0:
        render_analysis_cards(analyze_budget(metrics, salary, rule), lang)

    chart_cols = st.columns(2)
    chart_cols[0].plotly_chart(create_category_pie_chart(metrics, lang), use_container_width=True)
    chart_cols[1].plotly_chart(create_target_vs_actual_chart(salary, metrics, rule, lang), use_container_width=True)

    st.subheader(_t('ui_expenses_heading'))
    render_expense_table(storage)
    if st.session_state.get('form_open') or st.button(_t('ui_add_expense')):
        st.session_state['form_open'] = True
        render_expense_form(storage)

    render_chat_panel(storage)
    st.divider()
    render_export_buttons(salary, expenses, rule, lang)

    if st.button(_t('ui_back_to_review')):
        session.get_flow().back()
        _rerun()
