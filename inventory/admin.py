# inventory/admin.py

from django.contrib import admin
from .models import InventoryItem

@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'project', 'quantity', 'unit', 'average_price', 'updated_at')
    list_filter = ('project',)
    search_fields = ('name', 'project__name')
    # Lines are driven by material expenses
    readonly_fields = ('normalized_name', 'quantity', 'average_price', 'created_at', 'updated_at')

    def has_add_permission(self, request):
        return False
