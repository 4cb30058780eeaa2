# reports/urls.py
from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    path('', views.project_report, name='project_report'),
    path('export/pdf/', views.export_report_pdf, name='export_report_pdf'),
    path('<int:pk>/summary/', views.generate_summary, name='generate_summary'),
]
