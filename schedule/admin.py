# schedule/admin.py

from django.contrib import admin
from .models import Task

@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ('name', 'project', 'responsible', 'start_date', 'end_date', 'status', 'priority')
    list_filter = ('status', 'priority', 'project')
    search_fields = ('name', 'responsible')
