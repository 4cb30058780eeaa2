# projects/tests.py

from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse

from accounts.models import User
from finance.models import Expense
from finance.services import ExpenseService
from inventory.models import InventoryItem
from schedule.models import Task
from team.models import Employee
from .forms import ProjectForm
from .models import Project


class ProjectFormTest(TestCase):
    def form_data(self, **overrides):
        data = {
            'name': 'Vista Verde', 'address': 'Rua das Flores, 123', 'client': 'Construtora Sol',
            'start_date': '2024-05-01', 'end_date': '2025-05-01', 'status': Project.PLANNING,
            'total_budget': '500000', 'description': '',
        }
        data.update(overrides)
        return data

    def test_valid_project(self):
        form = ProjectForm(data=self.form_data())
        self.assertTrue(form.is_valid(), form.errors)

    def test_negative_budget_rejected(self):
        form = ProjectForm(data=self.form_data(total_budget='-1'))
        self.assertFalse(form.is_valid())
        self.assertIn('total_budget', form.errors)

    def test_end_before_start_rejected(self):
        form = ProjectForm(data=self.form_data(end_date='2024-04-01'))
        self.assertFalse(form.is_valid())
        self.assertIn('end_date', form.errors)


class ProjectViewsTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='manager', password='pass12345')
        self.client.login(username='manager', password='pass12345')
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('10000'),
            status=Project.IN_PROGRESS
        )

    def test_login_required(self):
        self.client.logout()
        response = self.client.get(reverse('projects:project_list'))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('login'), response.url)

    def test_project_list(self):
        response = self.client.get(reverse('projects:project_list'), {'q': 'verde'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Vista Verde")

    def test_project_detail_shows_summary(self):
        Expense.objects.create(
            project=self.project, date=date(2024, 6, 1), description='Crew payment',
            category=Expense.LABOR, status=Expense.PAID, amount=Decimal('1000')
        )
        response = self.client.get(reverse('projects:project_detail', args=[self.project.pk]))
        self.assertEqual(response.status_code, 200)
        summary = response.context['summary']
        self.assertEqual(summary.total_paid, Decimal('1000'))
        self.assertEqual(summary.remaining_budget, Decimal('9000'))

    def test_add_project(self):
        response = self.client.post(reverse('projects:add_project'), {
            'name': 'Plaza', 'address': 'Avenida Principal, 456', 'client': 'Investimentos Urbanos',
            'start_date': '2024-08-15', 'end_date': '2025-12-20', 'status': Project.PLANNING,
            'total_budget': '1200000', 'description': '',
        })
        project = Project.objects.get(name='Plaza')
        self.assertRedirects(response, reverse('projects:project_detail', args=[project.pk]))

    def test_delete_project_with_expenses_is_refused(self):
        ExpenseService.create_expense(Expense(
            project=self.project, date=date(2024, 6, 10), description='Cement purchase',
            category=Expense.MATERIAL, status=Expense.PAID, amount=Decimal('500'),
            material_name='Cimento', quantity=Decimal('10'), unit_price=Decimal('50'), unit='bag'
        ))
        response = self.client.post(reverse('projects:delete_project', args=[self.project.pk]), follow=True)
        self.assertTrue(Project.objects.filter(pk=self.project.pk).exists())
        self.assertTrue(InventoryItem.objects.filter(project=self.project).exists())
        self.assertContains(response, "cannot be deleted")

    def test_delete_project_removes_its_tasks(self):
        Task.objects.create(
            project=self.project, name='Foundation', responsible='Carlos Silva',
            start_date=date(2024, 5, 10), end_date=date(2024, 6, 20)
        )
        response = self.client.post(reverse('projects:delete_project', args=[self.project.pk]))
        self.assertRedirects(response, reverse('projects:project_list'))
        self.assertFalse(Project.objects.exists())
        self.assertFalse(Task.objects.exists())


class SeedDemoDataCommandTest(TestCase):
    def test_seeds_empty_database(self):
        call_command('seed_demo_data', stdout=StringIO())
        self.assertEqual(Project.objects.count(), 3)
        self.assertEqual(Employee.objects.count(), 3)
        self.assertEqual(Task.objects.count(), 3)
        self.assertEqual(Expense.objects.count(), 3)
        # The cement purchase went through the inventory
        item = InventoryItem.objects.get(normalized_name='cimento')
        self.assertEqual(item.quantity, Decimal('300'))
        self.assertEqual(item.average_price, Decimal('50'))

    def test_skips_when_projects_exist(self):
        call_command('seed_demo_data', stdout=StringIO())
        call_command('seed_demo_data', stdout=StringIO())
        self.assertEqual(Project.objects.count(), 3)

    def test_creates_demo_users_with_password(self):
        call_command('seed_demo_data', '--password', 'demo-pass-123', stdout=StringIO())
        self.assertTrue(User.objects.get(username='admin').is_administrator)
        self.assertEqual(User.objects.get(username='manager').role, User.SITE_MANAGER)
