# finance/urls.py

from django.urls import path
from . import views

app_name = 'finance'

urlpatterns = [
    path('', views.expense_list, name='expense_list'),
    path('add/', views.add_expense, name='add_expense'),
    path('<int:pk>/edit/', views.edit_expense, name='edit_expense'),
    path('<int:pk>/delete/', views.delete_expense, name='delete_expense'),
    path('export/excel/', views.export_expenses_excel, name='export_expenses_excel'),
]
