# projects/views.py

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import ProtectedError, Q
from django.shortcuts import render, redirect, get_object_or_404

from finance.aggregation import summarize_project
from .forms import ProjectForm, ProjectFilterForm
from .models import Project


@login_required
def project_list(request):
    projects_list = Project.objects.prefetch_related('expenses').order_by('name')

    filter_form = ProjectFilterForm(request.GET or None)
    if filter_form.is_valid():
        query = filter_form.cleaned_data.get('q')
        status = filter_form.cleaned_data.get('status')
        if query:
            projects_list = projects_list.filter(
                Q(name__icontains=query) |
                Q(client__icontains=query) |
                Q(address__icontains=query)
            )
        if status:
            projects_list = projects_list.filter(status=status)

    paginator = Paginator(projects_list, 12)
    page_obj = paginator.get_page(request.GET.get('page'))
    rows = [
        {'project': project, 'summary': summarize_project(project, project.expenses.all())}
        for project in page_obj
    ]

    context = {
        'title': 'Projects',
        'page_obj': page_obj,
        'rows': rows,
        'filter_form': filter_form,
    }
    return render(request, 'projects/project_list.html', context)


@login_required
def project_detail(request, pk):
    project = get_object_or_404(Project, pk=pk)
    expenses = list(project.expenses.all())

    context = {
        'title': project.name,
        'project': project,
        'summary': summarize_project(project, expenses),
        'expenses': expenses,
        'tasks': project.tasks.all(),
        'inventory_items': project.inventory_items.all(),
        'employees': project.employees.all(),
    }
    return render(request, 'projects/project_detail.html', context)


@login_required
def add_project(request):
    if request.method == 'POST':
        form = ProjectForm(request.POST)
        if form.is_valid():
            project = form.save()
            messages.success(request, f'Project "{project.name}" created successfully!')
            return redirect('projects:project_detail', pk=project.pk)
    else:
        form = ProjectForm()
    return render(request, 'projects/project_form.html', {'form': form, 'title': 'New Project'})


@login_required
def edit_project(request, pk):
    project = get_object_or_404(Project, pk=pk)
    if request.method == 'POST':
        form = ProjectForm(request.POST, instance=project)
        if form.is_valid():
            form.save()
            messages.success(request, f'Project "{project.name}" updated successfully!')
            return redirect('projects:project_detail', pk=project.pk)
    else:
        form = ProjectForm(instance=project)
    return render(request, 'projects/project_form.html', {'form': form, 'title': f'Edit Project: {project.name}'})


@login_required
def delete_project(request, pk):
    project = get_object_or_404(Project, pk=pk)
    if request.method == 'POST':
        project_name = project.name
        try:
            project.delete()
        except ProtectedError:
            messages.error(
                request,
                f'Project "{project_name}" still has expenses or inventory and cannot be deleted.'
            )
            return redirect('projects:project_detail', pk=pk)
        messages.success(request, f'Project "{project_name}" deleted successfully!')
        return redirect('projects:project_list')
    return render(request, 'confirm_delete.html', {'object': project, 'title': f'Confirm Delete: {project.name}'})
