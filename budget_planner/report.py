"""Budget report export (HTML / Markdown).

The HTML report is a fixed A4-width page: a dated header, summary cards,
the breakdown and target-vs-actual charts, the rule comparison and the full
expense table.  The Markdown variant carries the same sections without the
charts.

Usage::

    from budget_planner.report import build_report_bytes, build_report_filename

    data = build_report_bytes('html', salary=salary, expenses=expenses, rule=rule, lang='ar')
    st.download_button("Download report", data=data, file_name=build_report_filename('html'))
"""

from __future__ import annotations

import html
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional

from .lib.budget.calculations import analyze_budget, category_percent, compute_metrics, expense_share
from .lib.budget.categorization import category_color, category_label
from .lib.budget.models import BudgetAnalysis, BudgetRule, DashboardMetrics, Expense
from .lib.common.file_operations import atomic_write, safe_filename
from .lib.common.formatting import format_currency, format_percent
from .lib.config import get_config_value, get_text
from .visualization import create_category_pie_chart, create_target_vs_actual_chart

logger = logging.getLogger(__name__)

A4_WIDTH_PX = 794
A4_HEIGHT_PX = 1123

STATUS_TEXT = {'over': 'Above target', 'under': 'Below target', 'ok': 'On track'}


class ReportExportError(RuntimeError):
    """The report could not be produced or written."""


# ──────────────────────────────────────────────────────────────
# Summary helpers
# ──────────────────────────────────────────────────────────────

def _summary_rows(salary: float, metrics: DashboardMetrics, currency: str) -> List[List[str]]:
    savings_pct = round(category_percent(metrics.total_savings_calculated, salary))
    return [
        ["Net salary", format_currency(salary, currency)],
        ["Total expenses", format_currency(metrics.total_expenses, currency)],
        ["Remaining", format_currency(metrics.remaining_salary, currency)],
        ["Savings capacity", f"{savings_pct}%"],
    ]


def _analysis_rows(analysis: BudgetAnalysis, lang: str) -> List[List[str]]:
    return [
        [
            category_label(row.category, lang),
            format_percent(row.actual_pct),
            format_percent(row.target_pct, 0),
            STATUS_TEXT[row.status],
        ]
        for row in analysis.rows()
    ]


def _expense_rows(expenses: List[Expense], salary: float, lang: str, currency: str) -> List[List[str]]:
    return [
        [
            e.name,
            category_label(e.category, lang),
            format_currency(e.amount, currency),
            f"{expense_share(e.amount, salary)}%",
            e.note,
        ]
        for e in expenses
    ]


# ──────────────────────────────────────────────────────────────
# Markdown
# ──────────────────────────────────────────────────────────────

def _md_table(headers: List[str], rows: List[List[str]]) -> str:
    if not rows:
        return ""
    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + "|".join(["---"] * len(headers)) + " |",
    ]
    for row in rows:
        cells = " | ".join(str(c).replace("|", "\\|").replace("\n", " ") for c in row)
        lines.append(f"| {cells} |")
    return "\n" + "\n".join(lines) + "\n"


def build_md_report(
    *,
    salary: float,
    expenses: Iterable[Expense],
    rule: BudgetRule,
    lang: str,
    generated_at: Optional[datetime] = None,
) -> str:
    """Return the whole report as a single Markdown string."""
    items = list(expenses)
    metrics = compute_metrics(salary, items)
    analysis = analyze_budget(metrics, salary, rule)
    currency = get_text(lang, 'currency')
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M")

    parts = [
        "# QAWAM Budget Report\n",
        f"> **Generated:** {stamp}  \n> **Budget rule:** {rule.label()}\n",
        "\n## Summary\n",
        _md_table(["Item", "Value"], _summary_rows(salary, metrics, currency)),
        "\n## Target vs actual\n",
        _md_table(["Category", "Actual", "Target", "Status"], _analysis_rows(analysis, lang)),
    ]
    if analysis.balanced:
        parts.append("\n**Your budget is balanced.**\n")

    parts.append("\n## Expenses\n")
    if items:
        parts.append(_md_table(
            ["Name", "Category", "Amount", "% of salary", "Note"],
            _expense_rows(items, salary, lang, currency),
        ))
    else:
        parts.append("\n_No expenses recorded._\n")

    return "\n".join(parts)


# ──────────────────────────────────────────────────────────────
# HTML
# ──────────────────────────────────────────────────────────────

_HTML_STYLE = """
@page {{ size: A4; margin: 0; }}
body {{ margin: 0; background: #ffffff; font-family: Calibri, sans-serif; color: #1e293b; }}
.page {{ width: {width}px; min-height: {height}px; margin: 0 auto; padding: 32px; box-sizing: border-box; }}
.header {{ display: flex; justify-content: space-between; border-bottom: 2px solid #e2e8f0; padding-bottom: 12px; }}
.cards {{ display: flex; gap: 12px; margin: 20px 0; }}
.card {{ flex: 1; border: 1px solid #e2e8f0; border-radius: 8px; padding: 12px; }}
.card .label {{ font-size: 12px; color: #64748b; }}
.card .value {{ font-size: 18px; font-weight: bold; }}
.charts {{ display: flex; gap: 12px; }}
.charts > div {{ flex: 1; min-width: 0; }}
table {{ width: 100%; border-collapse: collapse; margin-top: 12px; font-size: 13px; }}
th, td {{ border: 1px solid #e2e8f0; padding: 6px 8px; text-align: start; }}
th {{ background: #f8fafc; }}
tr {{ page-break-inside: avoid; }}
.badge {{ display: inline-block; width: 10px; height: 10px; border-radius: 50%; margin-inline-end: 6px; }}
.status-over, .status-under {{ color: #b91c1c; font-weight: bold; }}
.status-ok {{ color: #047857; }}
"""


def _html_table(headers: List[str], rows: List[str]) -> str:
    head = "".join(f"<th>{html.escape(h)}</th>" for h in headers)
    return f"<table><thead><tr>{head}</tr></thead><tbody>{''.join(rows)}</tbody></table>"


def build_report_html(
    *,
    salary: float,
    expenses: Iterable[Expense],
    rule: BudgetRule,
    lang: str,
    generated_at: Optional[datetime] = None,
    include_plotlyjs: str | bool = 'cdn',
) -> str:
    """Return the report as a standalone HTML document."""
    items = list(expenses)
    metrics = compute_metrics(salary, items)
    analysis = analyze_budget(metrics, salary, rule)
    currency = get_text(lang, 'currency')
    direction = 'rtl' if lang == 'ar' else 'ltr'
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d")

    cards = "".join(
        f'<div class="card"><div class="label">{html.escape(label)}</div>'
        f'<div class="value">{html.escape(value)}</div></div>'
        for label, value in _summary_rows(salary, metrics, currency)
    )

    pie = create_category_pie_chart(metrics, lang)
    bars = create_target_vs_actual_chart(salary, metrics, rule, lang)
    for fig in (pie, bars):
        fig.update_layout(width=(A4_WIDTH_PX - 76) // 2, height=300, margin=dict(l=20, r=20, t=40, b=20))
    charts = (
        '<div class="charts">'
        f'<div>{pie.to_html(full_html=False, include_plotlyjs=include_plotlyjs)}</div>'
        f'<div>{bars.to_html(full_html=False, include_plotlyjs=False)}</div>'
        '</div>'
    )

    analysis_rows = []
    for row, cells in zip(analysis.rows(), _analysis_rows(analysis, lang)):
        analysis_rows.append(
            "<tr>"
            + "".join(f"<td>{html.escape(c)}</td>" for c in cells[:3])
            + f'<td class="status-{row.status}">{html.escape(cells[3])}</td>'
            + "</tr>"
        )

    expense_rows = []
    for expense, cells in zip(items, _expense_rows(items, salary, lang, currency)):
        badge = f'<span class="badge" style="background:{category_color(expense.category)}"></span>'
        expense_rows.append(
            "<tr>"
            + f"<td>{html.escape(cells[0])}</td>"
            + f"<td>{badge}{html.escape(cells[1])}</td>"
            + "".join(f"<td>{html.escape(c)}</td>" for c in cells[2:])
            + "</tr>"
        )

    balanced = '<p class="status-ok">Your budget is balanced.</p>' if analysis.balanced else ''
    expense_table = (
        _html_table(["Name", "Category", "Amount", "% of salary", "Note"], expense_rows)
        if expense_rows else "<p>No expenses recorded.</p>"
    )

    return (
        "<!DOCTYPE html>"
        f'<html lang="{html.escape(lang)}" dir="{direction}"><head><meta charset="utf-8">'
        "<title>QAWAM Budget Report</title>"
        f"<style>{_HTML_STYLE.format(width=A4_WIDTH_PX, height=A4_HEIGHT_PX)}</style></head>"
        '<body><div class="page">'
        f'<div class="header"><div>{stamp}</div><div><strong>QAWAM</strong></div>'
        f"<div>Rule {html.escape(rule.label())}</div></div>"
        f'<div class="cards">{cards}</div>'
        f"{charts}"
        "<h2>Target vs actual</h2>"
        f'{_html_table(["Category", "Actual", "Target", "Status"], analysis_rows)}{balanced}'
        "<h2>Expenses</h2>"
        f"{expense_table}"
        "</div></body></html>"
    )


# ──────────────────────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────────────────────

def build_report_bytes(fmt: str, **kwargs) -> bytes:
    """Build the report in ``'html'`` or ``'md'`` format as UTF-8 bytes.

    Raises:
        ReportExportError: On an unknown format or any failure while building
    """
    builders = {'html': build_report_html, 'md': build_md_report}
    if fmt not in builders:
        raise ReportExportError(f"Unsupported report format: {fmt}")
    try:
        return builders[fmt](**kwargs).encode('utf-8')
    except ReportExportError:
        raise
    except Exception as e:
        logger.warning(f"Report export failed: {e}")
        raise ReportExportError(f"Could not build the {fmt} report: {e}") from e


def build_report_filename(ext: str, today: Optional[date] = None) -> str:
    """File name such as ``QAWAM-Report-2024-05-01.html``."""
    prefix = get_config_value('budget', 'constants', 'report_prefix', default='QAWAM-Report')
    stamp = (today or date.today()).isoformat()
    return f"{safe_filename(prefix, default='report')}-{stamp}.{ext}"


def write_report(path: Path, content: bytes) -> Path:
    """Write a built report; a failed write leaves no partial file behind.

    Raises:
        ReportExportError: If the file cannot be written
    """
    try:
        return atomic_write(Path(path), content)
    except OSError as e:
        logger.warning(f"Writing report to {path} failed: {e}")
        raise ReportExportError(f"Could not write report to {path}: {e}") from e
