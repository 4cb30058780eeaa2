# finance/aggregation.py
"""
Budget and expense-list computations shared by the finance, project and
report pages.

Every function here works on plain iterables of expenses (model instances or
anything with the same attributes) and never touches the database, so the
same figures come out whether the caller passes a queryset or a list.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from django.core.paginator import Paginator

from .models import Expense

ZERO = Decimal('0')

ALL_CATEGORIES = 'all'

ASCENDING = 'asc'
DESCENDING = 'desc'
SORT_KEYS = ('description', 'supplier', 'date', 'amount', 'category')


def _amount(expense):
    return expense.amount if expense.amount is not None else ZERO


def _budget(project):
    if project is None or project.total_budget is None:
        return ZERO
    return Decimal(project.total_budget)


# --- Totals ---

def total_spent(expenses):
    return sum((_amount(e) for e in expenses), ZERO)


def total_paid(expenses):
    return sum((_amount(e) for e in expenses if e.status == Expense.PAID), ZERO)


def total_pending(expenses):
    return sum((_amount(e) for e in expenses if e.status == Expense.PENDING), ZERO)


def remaining_budget(project, expenses):
    # Pending obligations are not deducted, only what was actually paid.
    return _budget(project) - total_paid(expenses)


def budget_progress_percent(project, expenses):
    budget = _budget(project)
    if budget <= 0:
        return ZERO
    return total_paid(expenses) * 100 / budget


def percent_of(part, whole):
    if not whole:
        return ZERO
    return Decimal(part) * 100 / Decimal(whole)


@dataclass(frozen=True)
class ProjectFinancialSummary:
    total_budget: Decimal
    total_spent: Decimal
    total_paid: Decimal
    total_pending: Decimal
    remaining_budget: Decimal
    progress_percent: Decimal
    expense_count: int


def summarize_project(project, expenses):
    expenses = list(expenses)
    return ProjectFinancialSummary(
        total_budget=_budget(project),
        total_spent=total_spent(expenses),
        total_paid=total_paid(expenses),
        total_pending=total_pending(expenses),
        remaining_budget=remaining_budget(project, expenses),
        progress_percent=budget_progress_percent(project, expenses),
        expense_count=len(expenses),
    )


# --- Grouping ---

@dataclass
class ExpenseGroup:
    total: Decimal = ZERO
    items: List[Expense] = field(default_factory=list)


def group_expenses(expenses, attribute):
    """Groups expenses by `attribute`, keeping first-seen group order and item order."""
    groups = OrderedDict()
    for expense in expenses:
        key = getattr(expense, attribute) or ''
        group = groups.setdefault(key, ExpenseGroup())
        group.total += _amount(expense)
        group.items.append(expense)
    return groups


def _totals_by(expenses, attribute):
    totals = OrderedDict()
    for expense in expenses:
        key = getattr(expense, attribute) or ''
        totals[key] = totals.get(key, ZERO) + _amount(expense)
    return OrderedDict(sorted(totals.items(), key=lambda item: item[1], reverse=True))


def totals_by_supplier(expenses):
    return _totals_by(expenses, 'supplier')


def totals_by_category(expenses):
    return _totals_by(expenses, 'category')


# --- Filtering, sorting and paging for expense tables ---

def filter_expenses(expenses, category=None, search_term=None):
    """
    Keeps expenses in `category` (None or "all" keeps every category) whose
    description or supplier contains `search_term`, ignoring case.
    """
    expenses = list(expenses)
    if category and category != ALL_CATEGORIES:
        expenses = [e for e in expenses if e.category == category]

    term = (search_term or '').strip().casefold()
    if term:
        expenses = [
            e for e in expenses
            if term in (e.description or '').casefold() or term in (e.supplier or '').casefold()
        ]
    return expenses


def _sort_value(expense, key):
    value = getattr(expense, key)
    if isinstance(value, str):
        value = value.casefold()
    # Missing values sort together after the present ones
    return (value is None, value if value is not None else '')


def sort_expenses(expenses, key, direction=ASCENDING):
    if key not in SORT_KEYS:
        raise ValueError(f"Cannot sort expenses by '{key}'.")
    return sorted(
        expenses,
        key=lambda e: _sort_value(e, key),
        reverse=(direction == DESCENDING),
    )


@dataclass(frozen=True)
class SortState:
    key: str = 'date'
    direction: str = DESCENDING

    @classmethod
    def from_params(cls, key, direction):
        if key not in SORT_KEYS:
            return cls()
        if direction not in (ASCENDING, DESCENDING):
            direction = ASCENDING
        return cls(key=key, direction=direction)

    def toggle(self, key):
        """Same key flips the direction, a new key starts ascending."""
        if key == self.key:
            return SortState(key, DESCENDING if self.direction == ASCENDING else ASCENDING)
        return SortState(key, ASCENDING)

    def apply(self, expenses):
        return sort_expenses(expenses, self.key, self.direction)

    def indicator(self, key):
        if key != self.key:
            return ''
        return '▲' if self.direction == ASCENDING else '▼'


def paginate(expenses, page_size, page_number):
    """
    Returns one Django Page of `expenses`. The page number is clamped to
    [1, num_pages] and anything that is not a number means page 1; an empty
    list gives an empty page 1.
    """
    paginator = Paginator(list(expenses), max(1, int(page_size)))
    try:
        number = int(page_number)
    except (TypeError, ValueError):
        number = 1
    number = min(max(1, number), paginator.num_pages)
    return paginator.page(number)
