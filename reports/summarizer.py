# reports/summarizer.py
"""
AI expense analysis for the general project report.

The prompt carries three text blocks (project parameters, the expense list and
totals per supplier) and asks Gemini for a short cost-reduction analysis.
One attempt per request: any failure is logged and raised as
SummaryUnavailable for the view to show.
"""

import logging

from django.conf import settings

from finance.aggregation import totals_by_supplier

logger = logging.getLogger(__name__)

BASE_CONTEXT = (
    "You are a construction project manager specialised in cost reduction. "
    "Analyse the project parameters, the expense reports and the costs per supplier "
    "to identify where costs can be reduced. "
    "Give a summary of the spending and suggest specific areas for savings, always "
    "grounded on the project parameters. Be clear and objective."
)


class SummaryUnavailable(Exception):
    pass


def _money(value):
    return f"{settings.DEFAULT_CURRENCY_SYMBOL}{value:,.2f}"


def _date(value):
    return value.strftime('%d/%m/%Y') if value else 'N/A'


def build_summary_input(project, expenses):
    expenses = list(expenses)

    project_parameters = "\n".join([
        f"Project Name: {project.name}",
        f"Total Budget: {_money(project.total_budget)}",
        f"Start Date: {_date(project.start_date)}",
        f"End Date: {_date(project.end_date)}",
        f"Description: {project.description or 'N/A'}",
    ])

    expense_reports = "\n".join(
        f"Category: {e.get_category_display()}, Description: {e.description}, "
        f"Amount: {_money(e.amount)}, Status: {e.get_status_display()}, Supplier: {e.supplier or 'N/A'}"
        for e in expenses
    )

    supplier_costs = "\n".join(
        f"{supplier or 'N/A'}: {_money(total)}"
        for supplier, total in totals_by_supplier(expenses).items()
    )

    return {
        'project_parameters': project_parameters,
        'expense_reports': expense_reports,
        'supplier_costs': supplier_costs,
    }


def build_prompt(summary_input):
    return (
        f"{BASE_CONTEXT}\n\n"
        f"Project Parameters:\n{summary_input['project_parameters']}\n\n"
        f"Expense Reports:\n{summary_input['expense_reports'] or 'No expenses recorded.'}\n\n"
        f"Costs per Supplier:\n{summary_input['supplier_costs'] or 'No suppliers recorded.'}"
    )


def summarize_project_expenses(project, expenses):
    import google.generativeai as genai

    if not settings.GEMINI_API_KEY:
        raise SummaryUnavailable("AI analysis is not configured. Set GEMINI_API_KEY to enable it.")

    prompt = build_prompt(build_summary_input(project, expenses))

    try:
        genai.configure(api_key=settings.GEMINI_API_KEY)
        model = genai.GenerativeModel(settings.GEMINI_MODEL)
        response = model.generate_content(prompt)
        summary = (response.text or '').strip()
    except Exception as e:
        logger.exception("Expense summary failed for project %s.", project.pk)
        raise SummaryUnavailable("An error occurred while generating the summary. Please try again.") from e

    if not summary:
        raise SummaryUnavailable("No summary generated.")
    return summary
