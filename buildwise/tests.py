# buildwise/tests.py

from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from accounts.models import User
from finance.models import Expense
from projects.models import Project


class DashboardTest(TestCase):
    def setUp(self):
        User.objects.create_user(username='manager', password='pass12345')
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('10000'),
            status=Project.IN_PROGRESS
        )
        Expense.objects.create(
            project=self.project, date=date(2024, 6, 1), description='Crew payment',
            category=Expense.LABOR, status=Expense.PAID, amount=Decimal('1000')
        )
        Expense.objects.create(
            project=self.project, date=date(2024, 6, 2), description='Mixer rental',
            category=Expense.EQUIPMENT, status=Expense.PENDING, amount=Decimal('500')
        )

    def test_login_page(self):
        response = self.client.get(reverse('login'))
        self.assertEqual(response.status_code, 200)

    def test_dashboard_requires_login(self):
        response = self.client.get(reverse('dashboard'))
        self.assertRedirects(response, f"{reverse('login')}?next=/")

    def test_dashboard_totals(self):
        self.client.login(username='manager', password='pass12345')
        response = self.client.get(reverse('dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['project_count'], 1)
        self.assertEqual(response.context['total_paid'], Decimal('1000'))
        self.assertEqual(response.context['total_pending'], Decimal('500'))
        self.assertEqual(len(response.context['project_cards']), 1)

    def test_inventory_page(self):
        self.client.login(username='manager', password='pass12345')
        response = self.client.get(reverse('inventory:inventory_list'), {'project': self.project.pk})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['selected_project'], self.project)
