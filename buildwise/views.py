# buildwise/views.py

from django.contrib.auth.decorators import login_required
from django.shortcuts import render

from finance.aggregation import ZERO, summarize_project, total_paid, total_pending, total_spent
from finance.models import Expense
from projects.models import Project
from schedule.models import Task
from team.models import Employee


@login_required
def dashboard(request):
    projects = list(Project.objects.prefetch_related('expenses'))
    expenses = list(Expense.objects.select_related('project'))

    # --- Project cards ---
    project_cards = [
        {'project': project, 'summary': summarize_project(project, project.expenses.all())}
        for project in projects
        if project.status in (Project.PLANNING, Project.IN_PROGRESS)
    ]

    status_counts = {key: 0 for key, _ in Project.STATUS_CHOICES}
    for project in projects:
        status_counts[project.status] = status_counts.get(project.status, 0) + 1

    context = {
        'title': 'Dashboard',
        'project_count': len(projects),
        'status_counts': [(label, status_counts[key]) for key, label in Project.STATUS_CHOICES],
        'total_budget': sum((p.total_budget for p in projects), ZERO),
        'total_spent': total_spent(expenses),
        'total_paid': total_paid(expenses),
        'total_pending': total_pending(expenses),
        'employee_count': Employee.objects.filter(status=Employee.ACTIVE).count(),
        'open_task_count': Task.objects.exclude(status=Task.COMPLETED).count(),
        'project_cards': project_cards,
        'recent_expenses': expenses[:5],
    }
    return render(request, 'dashboard.html', context)
