# buildwise/urls.py

from django.contrib import admin
from django.urls import path, include
from django.contrib.auth import views as auth_views

from .views import dashboard

urlpatterns = [
    path('admin/', admin.site.urls),

    path('', dashboard, name='dashboard'),
    path('login/', auth_views.LoginView.as_view(template_name='login.html'), name='login'),
    path('logout/', auth_views.LogoutView.as_view(), name='logout'),

    path('projects/', include('projects.urls', namespace='projects')),
    path('finance/', include('finance.urls', namespace='finance')),
    path('inventory/', include('inventory.urls', namespace='inventory')),
    path('schedule/', include('schedule.urls', namespace='schedule')),
    path('team/', include('team.urls', namespace='team')),
    path('reports/', include('reports.urls', namespace='reports')),
    path('settings/', include('accounts.urls', namespace='accounts')),
]
