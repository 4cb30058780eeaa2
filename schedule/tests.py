# schedule/tests.py

from datetime import date

from django.test import TestCase
from django.urls import reverse

from accounts.models import User
from projects.models import Project
from .forms import TaskForm
from .models import Task


class TaskTest(TestCase):
    def setUp(self):
        User.objects.create_user(username='manager', password='pass12345')
        self.client.login(username='manager', password='pass12345')
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1)
        )

    def form_data(self, **overrides):
        data = {
            'project': self.project.pk, 'name': 'Foundation', 'responsible': 'Carlos Silva',
            'start_date': '2024-05-10', 'end_date': '2024-06-20',
            'status': Task.IN_PROGRESS, 'priority': 'high',
        }
        data.update(overrides)
        return data

    def test_end_before_start_rejected(self):
        form = TaskForm(data=self.form_data(end_date='2024-05-01'))
        self.assertFalse(form.is_valid())
        self.assertIn('end_date', form.errors)

    def test_add_and_filter_tasks(self):
        response = self.client.post(reverse('schedule:add_task'), self.form_data())
        self.assertRedirects(response, reverse('schedule:task_list'))
        self.assertEqual(Task.objects.get().project, self.project)

        response = self.client.get(reverse('schedule:task_list'), {'status': Task.COMPLETED})
        self.assertEqual(len(response.context['tasks']), 0)
        response = self.client.get(reverse('schedule:task_list'), {'project': self.project.pk})
        self.assertContains(response, 'Foundation')

    def test_edit_and_delete_task(self):
        task = Task.objects.create(
            project=self.project, name='Foundation', responsible='Carlos Silva',
            start_date=date(2024, 5, 10), end_date=date(2024, 6, 20)
        )
        self.client.post(reverse('schedule:edit_task', args=[task.pk]), self.form_data(status=Task.COMPLETED))
        task.refresh_from_db()
        self.assertEqual(task.status, Task.COMPLETED)

        self.client.post(reverse('schedule:delete_task', args=[task.pk]))
        self.assertFalse(Task.objects.exists())
