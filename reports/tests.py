# reports/tests.py

from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase, override_settings
from django.urls import reverse

from accounts.models import User
from finance.models import Expense
from projects.models import Project
from .summarizer import SummaryUnavailable, build_prompt, build_summary_input, summarize_project_expenses


class ReportTestMixin:
    def setUp(self):
        User.objects.create_user(username='manager', password='pass12345')
        self.client.login(username='manager', password='pass12345')
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('10000'),
            description="Ten-storey residential building."
        )
        self.create_expense('Cement purchase', '1000', Expense.PAID, 'Casa do Construtor', Expense.MATERIAL)
        self.create_expense('Mixer rental', '500', Expense.PENDING, 'AlugaTudo', Expense.EQUIPMENT)
        self.create_expense('Sand purchase', '2000', Expense.PAID, 'Casa do Construtor', Expense.MATERIAL)

    def create_expense(self, description, amount, status, supplier, category):
        return Expense.objects.create(
            project=self.project, date=date(2024, 6, 1), description=description,
            category=category, status=status, supplier=supplier, amount=Decimal(amount)
        )


class ProjectReportViewTest(ReportTestMixin, TestCase):
    def test_no_project_selected(self):
        response = self.client.get(reverse('reports:project_report'))
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.context['project'])

    def test_general_report(self):
        response = self.client.get(reverse('reports:project_report'), {'project': self.project.pk})
        self.assertEqual(response.status_code, 200)
        summary = response.context['summary']
        self.assertEqual(summary.total_paid, Decimal('3000'))
        self.assertEqual(summary.remaining_budget, Decimal('7000'))
        suppliers = response.context['supplier_totals']
        self.assertEqual(suppliers[0]['supplier'], 'Casa do Construtor')
        self.assertEqual(suppliers[0]['total'], Decimal('3000'))

    def test_pending_report(self):
        response = self.client.get(reverse('reports:project_report'),
                                   {'project': self.project.pk, 'type': 'pending'})
        self.assertEqual([e.description for e in response.context['expenses']], ['Mixer rental'])
        self.assertEqual(response.context['pending_total'], Decimal('500'))

    def test_category_report_groups_and_sorts(self):
        response = self.client.get(reverse('reports:project_report'), {
            'project': self.project.pk, 'type': 'category', 'sort': 'amount', 'dir': 'desc',
        })
        groups = dict(response.context['groups'])
        materials = groups['Construction Material']
        self.assertEqual(materials.total, Decimal('3000'))
        self.assertEqual([e.description for e in materials.items], ['Sand purchase', 'Cement purchase'])

    def test_supplier_report(self):
        response = self.client.get(reverse('reports:project_report'),
                                   {'project': self.project.pk, 'type': 'supplier'})
        groups = dict(response.context['groups'])
        self.assertEqual(groups['AlugaTudo'].total, Decimal('500'))

    def test_unknown_report_type_falls_back_to_general(self):
        response = self.client.get(reverse('reports:project_report'),
                                   {'project': self.project.pk, 'type': 'bogus'})
        self.assertEqual(response.context['report_type'], 'general')

    def test_pdf_export(self):
        for report_type in ('general', 'pending', 'category', 'supplier'):
            response = self.client.get(reverse('reports:export_report_pdf'),
                                       {'project': self.project.pk, 'type': report_type})
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response['Content-Type'], 'application/pdf')
            self.assertTrue(response.content.startswith(b'%PDF'))

    def test_pdf_export_needs_a_project(self):
        response = self.client.get(reverse('reports:export_report_pdf'))
        self.assertEqual(response.status_code, 400)


class GenerateSummaryViewTest(ReportTestMixin, TestCase):
    def test_summary_returned_as_json(self):
        with mock.patch('reports.views.summarize_project_expenses', return_value='Negotiate cement prices.'):
            response = self.client.post(reverse('reports:generate_summary', args=[self.project.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True, 'summary': 'Negotiate cement prices.'})

    def test_failure_returned_as_error(self):
        with mock.patch('reports.views.summarize_project_expenses',
                        side_effect=SummaryUnavailable('No summary generated.')):
            response = self.client.post(reverse('reports:generate_summary', args=[self.project.pk]))
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['error'], 'No summary generated.')

    def test_get_not_allowed(self):
        response = self.client.get(reverse('reports:generate_summary', args=[self.project.pk]))
        self.assertEqual(response.status_code, 405)


class SummarizerTest(ReportTestMixin, TestCase):
    def test_summary_input_blocks(self):
        summary_input = build_summary_input(self.project, self.project.expenses.all())
        self.assertIn('Project Name: Vista Verde', summary_input['project_parameters'])
        self.assertIn('Mixer rental', summary_input['expense_reports'])
        # Supplier totals, biggest first
        first_line = summary_input['supplier_costs'].splitlines()[0]
        self.assertTrue(first_line.startswith('Casa do Construtor'))

    def test_prompt_contains_every_block(self):
        prompt = build_prompt(build_summary_input(self.project, self.project.expenses.all()))
        self.assertIn('Project Parameters:', prompt)
        self.assertIn('Expense Reports:', prompt)
        self.assertIn('Costs per Supplier:', prompt)

    @override_settings(GEMINI_API_KEY='')
    def test_unconfigured_key(self):
        with self.assertRaises(SummaryUnavailable):
            summarize_project_expenses(self.project, self.project.expenses.all())

    @override_settings(GEMINI_API_KEY='test-key')
    def test_model_response_is_returned(self):
        with mock.patch('google.generativeai.configure'), \
                mock.patch('google.generativeai.GenerativeModel') as model_class:
            model_class.return_value.generate_content.return_value = mock.Mock(text='  Buy cement in bulk.  ')
            summary = summarize_project_expenses(self.project, self.project.expenses.all())
        self.assertEqual(summary, 'Buy cement in bulk.')
        prompt = model_class.return_value.generate_content.call_args[0][0]
        self.assertIn('Vista Verde', prompt)

    @override_settings(GEMINI_API_KEY='test-key')
    def test_model_error_becomes_summary_unavailable(self):
        with mock.patch('google.generativeai.configure'), \
                mock.patch('google.generativeai.GenerativeModel', side_effect=RuntimeError('quota')):
            with self.assertLogs('reports.summarizer', level='ERROR'):
                with self.assertRaises(SummaryUnavailable):
                    summarize_project_expenses(self.project, self.project.expenses.all())

    @override_settings(GEMINI_API_KEY='test-key')
    def test_empty_response(self):
        with mock.patch('google.generativeai.configure'), \
                mock.patch('google.generativeai.GenerativeModel') as model_class:
            model_class.return_value.generate_content.return_value = mock.Mock(text='')
            with self.assertRaises(SummaryUnavailable):
                summarize_project_expenses(self.project, self.project.expenses.all())
