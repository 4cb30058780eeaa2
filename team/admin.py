# team/admin.py

from django.contrib import admin
from .models import Employee

@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ('name', 'role', 'email', 'phone', 'status', 'created_at')
    list_filter = ('status', 'projects')
    search_fields = ('name', 'email', 'phone', 'role')
    filter_horizontal = ('projects',)
