# schedule/views.py

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.shortcuts import render, redirect, get_object_or_404

from .forms import TaskForm, TaskFilterForm
from .models import Task


@login_required
def task_list(request):
    tasks_list = Task.objects.select_related('project').all()

    filter_form = TaskFilterForm(request.GET or None)
    if filter_form.is_valid():
        project = filter_form.cleaned_data.get('project')
        status = filter_form.cleaned_data.get('status')
        if project:
            tasks_list = tasks_list.filter(project=project)
        if status:
            tasks_list = tasks_list.filter(status=status)

    paginator = Paginator(tasks_list, 20)
    tasks = paginator.get_page(request.GET.get('page'))
    return render(request, 'schedule/task_list.html', {'tasks': tasks, 'filter_form': filter_form, 'title': 'Schedule'})

@login_required
def add_task(request):
    initial = {}
    if request.GET.get('project'):
        initial['project'] = request.GET.get('project')

    if request.method == 'POST':
        form = TaskForm(request.POST)
        if form.is_valid():
            task = form.save()
            messages.success(request, f'Task "{task.name}" added successfully!')
            return redirect('schedule:task_list')
    else:
        form = TaskForm(initial=initial)
    return render(request, 'schedule/task_form.html', {'form': form, 'title': 'New Task'})

@login_required
def edit_task(request, pk):
    task = get_object_or_404(Task, pk=pk)
    if request.method == 'POST':
        form = TaskForm(request.POST, instance=task)
        if form.is_valid():
            form.save()
            messages.success(request, f'Task "{task.name}" updated successfully!')
            return redirect('schedule:task_list')
    else:
        form = TaskForm(instance=task)
    return render(request, 'schedule/task_form.html', {'form': form, 'title': f'Edit Task: {task.name}'})

@login_required
def delete_task(request, pk):
    task = get_object_or_404(Task, pk=pk)
    if request.method == 'POST':
        task_name = task.name
        task.delete()
        messages.success(request, f'Task "{task_name}" deleted successfully!')
        return redirect('schedule:task_list')
    return render(request, 'confirm_delete.html', {'object': task, 'title': f'Confirm Delete: {task.name}'})
