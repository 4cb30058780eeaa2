# finance/admin.py

from django.contrib import admin, messages
from django.db import transaction
from django.http import HttpResponseRedirect
from import_export import resources
from import_export.admin import ImportExportModelAdmin
from import_export.fields import Field
from import_export.widgets import ForeignKeyWidget

from projects.models import Project
from .forms import ExpenseForm
from .models import Expense
from .services import ExpenseService, ExpenseSyncError


class ExpenseResource(resources.ModelResource):
    project = Field(attribute='project', column_name='project', widget=ForeignKeyWidget(Project, 'name'))

    class Meta:
        model = Expense
        fields = (
            'id', 'project', 'date', 'payment_date', 'description', 'supplier', 'category',
            'status', 'amount', 'material_name', 'quantity', 'unit_price', 'unit', 'receipt',
        )
        export_order = fields


@admin.register(Expense)
class ExpenseAdmin(ImportExportModelAdmin):
    """
    Uses ExpenseForm so the material amount rule applies here too, and sends
    saves and deletes through ExpenseService so inventory follows. Spreadsheet
    imports do not; run `manage.py reconcile_inventory --fix` after importing
    material expenses.
    """
    form = ExpenseForm
    resource_class = ExpenseResource
    list_display = ('date', 'description', 'project', 'category', 'supplier', 'amount', 'status')
    list_filter = ('status', 'category', 'project')
    search_fields = ('description', 'supplier', 'material_name')
    date_hierarchy = 'date'
    readonly_fields = ('created_at', 'updated_at')

    def _sync_failed(self, request, error):
        self.message_user(request, str(error), messages.ERROR)
        return HttpResponseRedirect(request.get_full_path())

    # Sync errors propagate out of the admin transaction first, so the request rolls back.
    def changeform_view(self, request, object_id=None, form_url='', extra_context=None):
        try:
            return super().changeform_view(request, object_id, form_url, extra_context)
        except ExpenseSyncError as e:
            return self._sync_failed(request, e)

    def delete_view(self, request, object_id, extra_context=None):
        try:
            return super().delete_view(request, object_id, extra_context)
        except ExpenseSyncError as e:
            return self._sync_failed(request, e)

    def changelist_view(self, request, extra_context=None):
        try:
            return super().changelist_view(request, extra_context)
        except ExpenseSyncError as e:
            return self._sync_failed(request, e)

    def save_model(self, request, obj, form, change):
        if change:
            ExpenseService.update_expense(obj)
        else:
            ExpenseService.create_expense(obj)

    def delete_model(self, request, obj):
        ExpenseService.delete_expense(obj)

    def delete_queryset(self, request, queryset):
        with transaction.atomic():
            for expense in queryset:
                ExpenseService.delete_expense(expense)
