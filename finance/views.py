# finance/views.py

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import HttpResponse
from django.shortcuts import render, redirect, get_object_or_404
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment

from projects.models import Project
from .aggregation import SortState, filter_expenses, paginate, summarize_project, total_spent
from .forms import ExpenseForm, ExpenseFilterForm
from .models import Expense
from .services import ExpenseService, ExpenseSyncError

SORTABLE_COLUMNS = [
    ('description', 'Description'),
    ('supplier', 'Supplier'),
    ('category', 'Category'),
    ('date', 'Date'),
    ('amount', 'Amount'),
]


def apply_expense_filters(request):
    """
    Reads the filter, search and sort parameters from the query string and
    returns the matching expenses in display order.
    """
    expenses = Expense.objects.select_related('project').all()
    filter_form = ExpenseFilterForm(request.GET or None)
    category = search_term = None

    if filter_form.is_valid():
        category = filter_form.cleaned_data.get('category')
        search_term = filter_form.cleaned_data.get('q')
        project = filter_form.cleaned_data.get('project')
        if project:
            expenses = expenses.filter(project=project)

    sort_state = SortState.from_params(request.GET.get('sort'), request.GET.get('dir'))
    rows = sort_state.apply(filter_expenses(expenses, category=category, search_term=search_term))
    return rows, filter_form, sort_state


@login_required
def expense_list(request):
    rows, filter_form, sort_state = apply_expense_filters(request)
    page_obj = paginate(rows, settings.EXPENSES_PER_PAGE, request.GET.get('page'))

    budget_cards = [
        {'project': project, 'summary': summarize_project(project, project.expenses.all())}
        for project in Project.objects.prefetch_related('expenses')
    ]

    columns = [
        {'key': key, 'label': label, 'indicator': sort_state.indicator(key)}
        for key, label in SORTABLE_COLUMNS
    ]

    context = {
        'title': 'Finance',
        'page_obj': page_obj,
        'filter_form': filter_form,
        'sort_state': sort_state,
        'columns': columns,
        'budget_cards': budget_cards,
        'filtered_total': total_spent(rows),
    }
    return render(request, 'finance/expense_list.html', context)


@login_required
def add_expense(request):
    initial = {}
    if request.GET.get('project'):
        initial['project'] = request.GET.get('project')

    if request.method == 'POST':
        form = ExpenseForm(request.POST)
        if form.is_valid():
            try:
                expense = ExpenseService.create_expense(form.save(commit=False))
            except ExpenseSyncError as e:
                messages.error(request, str(e))
            else:
                messages.success(request, f'Expense "{expense.description}" recorded successfully!')
                return redirect('finance:expense_list')
    else:
        form = ExpenseForm(initial=initial)
    return render(request, 'finance/expense_form.html', {'form': form, 'title': 'New Expense'})


@login_required
def edit_expense(request, pk):
    expense = get_object_or_404(Expense, pk=pk)
    if request.method == 'POST':
        form = ExpenseForm(request.POST, instance=expense)
        if form.is_valid():
            try:
                ExpenseService.update_expense(form.save(commit=False))
            except ExpenseSyncError as e:
                messages.error(request, str(e))
            else:
                messages.success(request, f'Expense "{expense.description}" updated successfully!')
                return redirect('finance:expense_list')
    else:
        form = ExpenseForm(instance=expense)
    return render(request, 'finance/expense_form.html', {'form': form, 'title': f'Edit Expense: {expense.description}'})


@login_required
def delete_expense(request, pk):
    expense = get_object_or_404(Expense, pk=pk)
    if request.method == 'POST':
        description = expense.description
        try:
            ExpenseService.delete_expense(expense)
        except ExpenseSyncError as e:
            messages.error(request, str(e))
        else:
            messages.success(request, f'Expense "{description}" deleted successfully!')
        return redirect('finance:expense_list')
    return render(request, 'confirm_delete.html', {'object': expense, 'title': f'Confirm Delete: {expense.description}'})


@login_required
def export_expenses_excel(request):
    rows, _, _ = apply_expense_filters(request)

    wb = Workbook()
    ws = wb.active
    ws.title = "Expenses"

    headers = ['Date', 'Project', 'Description', 'Supplier', 'Category', 'Status', 'Payment Date',
               'Material', 'Quantity', 'Unit', 'Unit Price', 'Amount']
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True, color="2B3674")
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for expense in rows:
        ws.append([
            expense.date.strftime('%Y-%m-%d'),
            expense.project.name,
            expense.description,
            expense.supplier,
            expense.get_category_display(),
            expense.get_status_display(),
            expense.payment_date.strftime('%Y-%m-%d') if expense.payment_date else '',
            expense.material_name,
            expense.quantity,
            expense.unit,
            expense.unit_price,
            expense.amount,
        ])

    ws.append([])
    ws.append([''] * (len(headers) - 2) + ['Total', total_spent(rows)])
    ws.cell(row=ws.max_row, column=len(headers) - 1).font = Font(bold=True)

    for column_cells in ws.columns:
        length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
        ws.column_dimensions[column_cells[0].column_letter].width = min(length + 2, 50)

    response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    response['Content-Disposition'] = 'attachment; filename="expenses.xlsx"'
    wb.save(response)
    return response
