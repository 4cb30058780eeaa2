# inventory/views.py

from django.contrib.auth.decorators import login_required
from django.shortcuts import render

from projects.models import Project
from .models import InventoryItem


@login_required
def inventory_list(request):
    items = InventoryItem.objects.select_related('project').order_by('project__name', 'name')
    projects = Project.objects.all()

    selected_project = None
    project_id = request.GET.get('project')
    if project_id:
        selected_project = projects.filter(pk=project_id).first() if project_id.isdigit() else None
        items = items.filter(project=selected_project) if selected_project else items.none()

    context = {
        'title': 'Inventory',
        'items': items,
        'projects': projects,
        'selected_project': selected_project,
        'total_value': sum((item.stock_value for item in items), 0),
    }
    return render(request, 'inventory/inventory_list.html', context)
