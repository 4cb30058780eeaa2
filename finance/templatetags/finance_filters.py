# finance/templatetags/finance_filters.py

from decimal import Decimal, InvalidOperation

from django import template
from django.conf import settings

register = template.Library()

@register.filter
def currency(value):
    """
    Formats a number as money with the configured currency symbol.
    Usage: {{ expense.amount|currency }}
    """
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return ''
    symbol = getattr(settings, 'DEFAULT_CURRENCY_SYMBOL', '')
    sign = '-' if amount < 0 else ''
    return f"{sign}{symbol}{abs(amount):,.2f}"

@register.filter
def bar_width(value):
    """Clamps a percentage into 0..100 for progress bars."""
    try:
        percent = float(value)
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, round(percent, 2)))

@register.simple_tag
def sort_link(sort_state, key, querydict):
    """Query string that toggles sorting on `key`, keeping the other filters."""
    params = querydict.copy()
    next_state = sort_state.toggle(key)
    params['sort'] = next_state.key
    params['dir'] = next_state.direction
    params.pop('page', None)
    return '?' + params.urlencode()
