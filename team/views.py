# team/views.py

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import Q
from django.shortcuts import render, redirect, get_object_or_404

from .forms import EmployeeForm, EmployeeFilterForm
from .models import Employee


@login_required
def employee_list(request):
    employees_list = Employee.objects.prefetch_related('projects').all()

    filter_form = EmployeeFilterForm(request.GET or None)
    if filter_form.is_valid():
        query = filter_form.cleaned_data.get('q')
        status = filter_form.cleaned_data.get('status')
        if query:
            employees_list = employees_list.filter(
                Q(name__icontains=query) |
                Q(role__icontains=query) |
                Q(email__icontains=query) |
                Q(phone__icontains=query)
            )
        if status:
            employees_list = employees_list.filter(status=status)

    paginator = Paginator(employees_list, 15)
    employees = paginator.get_page(request.GET.get('page'))
    return render(request, 'team/employee_list.html', {'employees': employees, 'filter_form': filter_form, 'title': 'Team'})

@login_required
def add_employee(request):
    if request.method == 'POST':
        form = EmployeeForm(request.POST)
        if form.is_valid():
            employee = form.save()
            messages.success(request, f'Employee "{employee.name}" added successfully!')
            return redirect('team:employee_list')
    else:
        form = EmployeeForm()
    return render(request, 'team/employee_form.html', {'form': form, 'title': 'New Employee'})

@login_required
def edit_employee(request, pk):
    employee = get_object_or_404(Employee, pk=pk)
    if request.method == 'POST':
        form = EmployeeForm(request.POST, instance=employee)
        if form.is_valid():
            form.save()
            messages.success(request, f'Employee "{employee.name}" updated successfully!')
            return redirect('team:employee_list')
    else:
        form = EmployeeForm(instance=employee)
    return render(request, 'team/employee_form.html', {'form': form, 'title': f'Edit Employee: {employee.name}'})

@login_required
def delete_employee(request, pk):
    employee = get_object_or_404(Employee, pk=pk)
    if request.method == 'POST':
        employee_name = employee.name
        employee.delete()
        messages.success(request, f'Employee "{employee_name}" deleted successfully!')
        return redirect('team:employee_list')
    return render(request, 'confirm_delete.html', {'object': employee, 'title': f'Confirm Delete: {employee.name}'})
