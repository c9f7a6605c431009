"""Plotly visualisation helpers for the budget planner.

Each function takes the derived dashboard metrics (and, where needed, the
salary and the active rule) and returns a ``plotly.graph_objects.Figure``
that Streamlit renders via ``st.plotly_chart`` and the report embeds as
HTML.
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .lib.budget.calculations import category_percent
from .lib.budget.categorization import category_color, category_label
from .lib.budget.models import BudgetRule, DashboardMetrics, ExpenseType
from .lib.config import get_budget_config


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def category_breakdown(metrics: DashboardMetrics, lang: str) -> pd.DataFrame:
    """Rows for the breakdown chart: needs, wants and savings capacity.

    Zero-valued slices are left out.
    """
    rows = [
        (ExpenseType.NEED, metrics.total_needs),
        (ExpenseType.WANT, metrics.total_wants),
        (ExpenseType.SAVING, metrics.total_savings_calculated),
    ]
    return pd.DataFrame(
        [
            {
                "Category": category_label(category, lang),
                "Value": value,
                "Color": category_color(category),
            }
            for category, value in rows
            if value > 0
        ],
        columns=["Category", "Value", "Color"],
    )


def create_category_pie_chart(metrics: DashboardMetrics, lang: str, title: str | None = None) -> go.Figure:
    """Generate a donut chart of needs, wants and savings capacity.

    Parameters
    ----------
    metrics : DashboardMetrics
        Current dashboard totals.
    lang : str
        Language for the category labels.
    title : str, optional
        Title for the chart.

    Returns
    -------
    plotly.graph_objects.Figure
        Donut chart; an empty figure when every slice is zero.
    """
    df = category_breakdown(metrics, lang)
    if df.empty:
        return _empty_figure()
    fig = px.pie(
        df,
        names="Category",
        values="Value",
        hole=0.5,
        color="Category",
        color_discrete_map=dict(zip(df["Category"], df["Color"])),
    )
    fig.update_traces(textinfo="percent", sort=False)
    fig.update_layout(title=title or "Budget breakdown", legend_orientation="h")
    return fig


def target_vs_actual(salary: float, metrics: DashboardMetrics, rule: BudgetRule, lang: str) -> pd.DataFrame:
    """Actual share of salary (one decimal) next to the rule's target per category."""
    rows = [
        (ExpenseType.NEED, metrics.total_needs, rule.needs),
        (ExpenseType.WANT, metrics.total_wants, rule.wants),
        (ExpenseType.SAVING, metrics.total_savings_calculated, rule.savings),
    ]
    return pd.DataFrame(
        [
            {
                "Category": category_label(category, lang),
                "Actual": round(category_percent(value, salary), 1),
                "Target": target,
                "Color": category_color(category),
            }
            for category, value, target in rows
        ],
        columns=["Category", "Actual", "Target", "Color"],
    )


def create_target_vs_actual_chart(
    salary: float,
    metrics: DashboardMetrics,
    rule: BudgetRule,
    lang: str,
    title: str | None = None,
) -> go.Figure:
    """Grouped bar chart of target versus actual percent of salary.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart; an empty figure when there is no salary.
    """
    if not salary or salary <= 0:
        return _empty_figure()
    df = target_vs_actual(salary, metrics, rule, lang)
    target_color = get_budget_config()["colors"]["target"]
    fig = go.Figure()
    fig.add_bar(
        name="Target",
        x=df["Category"],
        y=df["Target"],
        marker_color=target_color,
    )
    fig.add_bar(
        name="Actual",
        x=df["Category"],
        y=df["Actual"],
        marker_color=list(df["Color"]),
    )
    fig.update_layout(
        title=title or "Target vs actual",
        barmode="group",
        yaxis_title="% of salary",
        yaxis_ticksuffix="%",
    )
    return fig
