# team/tests.py

from datetime import date

from django.test import TestCase
from django.urls import reverse

from accounts.models import User
from projects.models import Project
from .forms import EmployeeForm
from .models import Employee


class EmployeeTest(TestCase):
    def setUp(self):
        User.objects.create_user(username='manager', password='pass12345')
        self.client.login(username='manager', password='pass12345')
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1)
        )

    def form_data(self, **overrides):
        data = {
            'name': 'Carlos Silva', 'role': 'Civil Engineer', 'phone': '(11) 98765-4321',
            'email': 'carlos.silva@buildwise.com', 'salary': '8500', 'status': Employee.ACTIVE,
            'projects': [self.project.pk],
        }
        data.update(overrides)
        return data

    def test_negative_salary_rejected(self):
        form = EmployeeForm(data=self.form_data(salary='-1'))
        self.assertFalse(form.is_valid())
        self.assertIn('salary', form.errors)

    def test_at_least_one_project(self):
        form = EmployeeForm(data=self.form_data(projects=[]))
        self.assertFalse(form.is_valid())
        self.assertIn('projects', form.errors)

    def test_add_and_search_employees(self):
        response = self.client.post(reverse('team:add_employee'), self.form_data())
        self.assertRedirects(response, reverse('team:employee_list'))
        employee = Employee.objects.get()
        self.assertEqual(list(employee.projects.all()), [self.project])

        response = self.client.get(reverse('team:employee_list'), {'q': 'engineer'})
        self.assertContains(response, 'Carlos Silva')
        response = self.client.get(reverse('team:employee_list'), {'status': Employee.INACTIVE})
        self.assertEqual(len(response.context['employees']), 0)

    def test_delete_employee(self):
        employee = Employee.objects.create(
            name='João Pereira', role='Site Foreman', phone='(31) 99999-8888',
            email='joao.pereira@buildwise.com'
        )
        self.client.post(reverse('team:delete_employee', args=[employee.pk]))
        self.assertFalse(Employee.objects.exists())
