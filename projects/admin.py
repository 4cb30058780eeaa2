# projects/admin.py

from django.contrib import admin
from .models import Project

@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('name', 'client', 'status', 'start_date', 'end_date', 'total_budget')
    list_filter = ('status',)
    search_fields = ('name', 'client', 'address')
    readonly_fields = ('created_at', 'updated_at')
