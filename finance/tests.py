# finance/tests.py

from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.admin.sites import AdminSite
from django.contrib.messages import get_messages
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from accounts.models import User
from projects.models import Project
from .aggregation import (
    ALL_CATEGORIES, ASCENDING, DESCENDING, SortState, budget_progress_percent, filter_expenses,
    group_expenses, paginate, remaining_budget, sort_expenses, summarize_project, total_paid,
    total_pending, total_spent, totals_by_category, totals_by_supplier,
)
from .admin import ExpenseAdmin
from .forms import ExpenseForm
from .models import Expense, MaterialDetails
from .services import ExpenseService, ExpenseSyncError


def make_expense(amount, status=Expense.PAID, **kwargs):
    kwargs.setdefault('description', 'Expense')
    kwargs.setdefault('supplier', '')
    kwargs.setdefault('category', Expense.OTHER)
    kwargs.setdefault('date', date(2024, 6, 1))
    return Expense(amount=Decimal(amount), status=status, **kwargs)


# Budget figures for a project.
class BudgetTotalsTest(SimpleTestCase):
    def setUp(self):
        self.project = Project(name="Vista Verde", total_budget=Decimal('10000'))
        self.expenses = [
            make_expense('1000', Expense.PAID),
            make_expense('500', Expense.PENDING),
            make_expense('2000', Expense.PAID),
        ]

    def test_paid_pending_and_remaining(self):
        self.assertEqual(total_paid(self.expenses), Decimal('3000'))
        self.assertEqual(total_pending(self.expenses), Decimal('500'))
        self.assertEqual(total_spent(self.expenses), Decimal('3500'))
        # Pending is not deducted from the budget
        self.assertEqual(remaining_budget(self.project, self.expenses), Decimal('7000'))
        self.assertEqual(budget_progress_percent(self.project, self.expenses), Decimal('30'))

    def test_paid_and_pending_partition_the_total(self):
        self.assertEqual(
            total_paid(self.expenses) + total_pending(self.expenses),
            total_spent(self.expenses)
        )

    def test_empty_list(self):
        self.assertEqual(total_spent([]), Decimal('0'))
        self.assertEqual(remaining_budget(self.project, []), Decimal('10000'))
        self.assertEqual(budget_progress_percent(self.project, []), Decimal('0'))

    def test_zero_budget_progress_is_zero(self):
        project = Project(name="No Budget", total_budget=Decimal('0'))
        self.assertEqual(budget_progress_percent(project, self.expenses), Decimal('0'))

    def test_missing_project_counts_as_zero_budget(self):
        self.assertEqual(remaining_budget(None, self.expenses), Decimal('-3000'))
        self.assertEqual(budget_progress_percent(None, self.expenses), Decimal('0'))

    def test_summary_bundles_every_figure(self):
        summary = summarize_project(self.project, self.expenses)
        self.assertEqual(summary.total_budget, Decimal('10000'))
        self.assertEqual(summary.total_paid, Decimal('3000'))
        self.assertEqual(summary.total_pending, Decimal('500'))
        self.assertEqual(summary.remaining_budget, Decimal('7000'))
        self.assertEqual(summary.progress_percent, Decimal('30'))
        self.assertEqual(summary.expense_count, 3)

    def test_progress_never_drops_as_paid_expenses_are_added(self):
        expenses = []
        previous = budget_progress_percent(self.project, expenses)
        for amount in ('250', '0', '1999.99', '0.01', '7500', '3000'):
            expenses.append(make_expense(amount, Expense.PAID))
            expenses.append(make_expense('100', Expense.PENDING))
            progress = budget_progress_percent(self.project, expenses)
            self.assertGreaterEqual(progress, previous)
            previous = progress
        # Past the budget the percentage keeps going up
        self.assertEqual(previous, Decimal('127.5'))


class GroupingTest(SimpleTestCase):
    def setUp(self):
        self.expenses = [
            make_expense('100', supplier='Casa do Construtor', category=Expense.MATERIAL),
            make_expense('900', supplier='AlugaTudo', category=Expense.EQUIPMENT),
            make_expense('300', supplier='Casa do Construtor', category=Expense.MATERIAL),
            make_expense('50', supplier='', category=Expense.OTHER),
        ]

    def test_totals_by_supplier_sorted_descending(self):
        totals = totals_by_supplier(self.expenses)
        self.assertEqual(list(totals.items()), [
            ('AlugaTudo', Decimal('900')),
            ('Casa do Construtor', Decimal('400')),
            ('', Decimal('50')),
        ])

    def test_totals_by_category(self):
        totals = totals_by_category(self.expenses)
        self.assertEqual(totals[Expense.EQUIPMENT], Decimal('900'))
        self.assertEqual(totals[Expense.MATERIAL], Decimal('400'))

    def test_group_keeps_item_order(self):
        groups = group_expenses(self.expenses, 'supplier')
        group = groups['Casa do Construtor']
        self.assertEqual(group.total, Decimal('400'))
        self.assertEqual(group.items, [self.expenses[0], self.expenses[2]])
        self.assertEqual(list(groups), ['Casa do Construtor', 'AlugaTudo', ''])


class FilterSortTest(SimpleTestCase):
    def setUp(self):
        self.cement = make_expense('500', description='Cement purchase', supplier='Casa do Construtor',
                                   category=Expense.MATERIAL, date=date(2024, 6, 10))
        self.crew = make_expense('2500', description='Crew payment', supplier='Mão na Massa',
                                 category=Expense.LABOR, date=date(2024, 6, 12))
        self.mixer = make_expense('250', description='Mixer rental', supplier='AlugaTudo',
                                  category=Expense.EQUIPMENT, date=date(2024, 6, 1))
        self.expenses = [self.cement, self.crew, self.mixer]

    def test_no_filter_returns_everything(self):
        self.assertEqual(filter_expenses(self.expenses), self.expenses)
        self.assertEqual(filter_expenses(self.expenses, ALL_CATEGORIES, ''), self.expenses)

    def test_category_filter(self):
        self.assertEqual(filter_expenses(self.expenses, category=Expense.LABOR), [self.crew])

    def test_search_matches_description_or_supplier(self):
        self.assertEqual(filter_expenses(self.expenses, search_term='CEMENT'), [self.cement])
        self.assertEqual(filter_expenses(self.expenses, search_term='alugatudo'), [self.mixer])
        self.assertEqual(filter_expenses(self.expenses, search_term='nothing'), [])

    def test_category_and_search_combine(self):
        self.assertEqual(filter_expenses(self.expenses, Expense.MATERIAL, 'crew'), [])

    def test_sort_by_amount(self):
        self.assertEqual(sort_expenses(self.expenses, 'amount', ASCENDING), [self.mixer, self.cement, self.crew])
        self.assertEqual(sort_expenses(self.expenses, 'amount', DESCENDING), [self.crew, self.cement, self.mixer])

    def test_sort_by_description_ignores_case(self):
        lower = make_expense('1', description='aggregate')
        rows = sort_expenses(self.expenses + [lower], 'description', ASCENDING)
        self.assertEqual(rows[0], lower)

    def test_sort_is_stable(self):
        first = make_expense('10', description='A')
        second = make_expense('10', description='B')
        self.assertEqual(sort_expenses([first, second], 'amount', ASCENDING), [first, second])

    def test_sort_is_a_permutation(self):
        rows = sort_expenses(self.expenses, 'date', DESCENDING)
        self.assertCountEqual(rows, self.expenses)
        self.assertEqual(rows[0], self.crew)

    def test_unknown_sort_key(self):
        with self.assertRaises(ValueError):
            sort_expenses(self.expenses, 'project')


class SortStateTest(SimpleTestCase):
    def test_same_key_flips_direction(self):
        state = SortState('amount', ASCENDING)
        self.assertEqual(state.toggle('amount'), SortState('amount', DESCENDING))
        self.assertEqual(state.toggle('amount').toggle('amount'), state)

    def test_new_key_starts_ascending(self):
        state = SortState('amount', DESCENDING)
        self.assertEqual(state.toggle('supplier'), SortState('supplier', ASCENDING))

    def test_from_params_falls_back_to_default(self):
        self.assertEqual(SortState.from_params('bogus', 'asc'), SortState())
        self.assertEqual(SortState.from_params('amount', 'sideways'), SortState('amount', ASCENDING))

    def test_indicator(self):
        state = SortState('date', DESCENDING)
        self.assertEqual(state.indicator('date'), '▼')
        self.assertEqual(state.indicator('amount'), '')


class PaginateTest(SimpleTestCase):
    def setUp(self):
        self.expenses = [make_expense(str(i)) for i in range(1, 31)]

    def test_page_size(self):
        page = paginate(self.expenses, 15, 2)
        self.assertEqual(len(page.object_list), 15)
        self.assertEqual(page.object_list[0].amount, Decimal('16'))

    def test_page_number_is_clamped(self):
        self.assertEqual(paginate(self.expenses, 15, 99).number, 2)
        self.assertEqual(paginate(self.expenses, 15, 0).number, 1)
        self.assertEqual(paginate(self.expenses, 15, -3).number, 1)
        self.assertEqual(paginate(self.expenses, 15, 'abc').number, 1)
        self.assertEqual(paginate(self.expenses, 15, None).number, 1)

    def test_empty_input_gives_empty_first_page(self):
        page = paginate([], 15, 3)
        self.assertEqual(page.number, 1)
        self.assertEqual(list(page.object_list), [])


# The material part of an expense is only exposed for complete material expenses.
class MaterialDetailsTest(SimpleTestCase):
    def test_material_expense(self):
        expense = make_expense('500', category=Expense.MATERIAL, material_name='Cimento',
                               quantity=Decimal('10'), unit_price=Decimal('50'), unit='bag')
        self.assertEqual(expense.material, MaterialDetails('Cimento', Decimal('10'), Decimal('50'), 'bag'))

    def test_other_category_has_no_material(self):
        expense = make_expense('500', category=Expense.LABOR, material_name='Cimento',
                               quantity=Decimal('10'), unit_price=Decimal('50'), unit='bag')
        self.assertIsNone(expense.material)

    def test_incomplete_material_is_ignored(self):
        expense = make_expense('0', category=Expense.MATERIAL, material_name='Cimento',
                               quantity=Decimal('0'), unit_price=Decimal('50'), unit='bag')
        self.assertIsNone(expense.material)


class ExpenseFormTest(TestCase):
    def setUp(self):
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('500000')
        )

    def form_data(self, **overrides):
        data = {
            'project': self.project.pk,
            'description': 'Cement purchase',
            'category': Expense.MATERIAL,
            'supplier': 'Casa do Construtor',
            'date': '2024-06-10',
            'status': Expense.PAID,
            'payment_date': '2024-06-10',
            'amount': '',
            'material_name': 'Cimento',
            'quantity': '10',
            'unit_price': '50.50',
            'unit': 'bag',
            'receipt': '',
        }
        data.update(overrides)
        return data

    def test_material_amount_is_quantity_times_unit_price(self):
        form = ExpenseForm(data=self.form_data())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['amount'], Decimal('505.00'))

    def test_material_fields_required(self):
        form = ExpenseForm(data=self.form_data(material_name='', unit='', quantity='', unit_price=''))
        self.assertFalse(form.is_valid())
        for field in ('material_name', 'unit', 'quantity', 'unit_price'):
            self.assertIn(field, form.errors)

    def test_non_positive_quantity_rejected(self):
        form = ExpenseForm(data=self.form_data(quantity='0', unit_price='-1'))
        self.assertFalse(form.is_valid())
        self.assertIn('quantity', form.errors)
        self.assertIn('unit_price', form.errors)

    def test_other_category_clears_material_fields(self):
        form = ExpenseForm(data=self.form_data(category=Expense.LABOR, amount='2500'))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['material_name'], '')
        self.assertIsNone(form.cleaned_data['quantity'])
        self.assertEqual(form.cleaned_data['amount'], Decimal('2500'))

    def test_other_category_needs_amount(self):
        form = ExpenseForm(data=self.form_data(category=Expense.LABOR, amount=''))
        self.assertFalse(form.is_valid())
        self.assertIn('amount', form.errors)

    def test_pending_expense_has_no_payment_date(self):
        form = ExpenseForm(data=self.form_data(status=Expense.PENDING))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertIsNone(form.cleaned_data['payment_date'])


class ExpenseServiceTest(TestCase):
    def setUp(self):
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('500000')
        )

    def material_expense(self):
        return Expense(
            project=self.project, date=date(2024, 6, 10), description='Cement purchase',
            category=Expense.MATERIAL, status=Expense.PAID, amount=Decimal('500'),
            material_name='Cimento', quantity=Decimal('10'), unit_price=Decimal('50'), unit='bag'
        )

    def test_inventory_failure_rolls_back_the_expense(self):
        with mock.patch('finance.services.InventoryService.apply_material_expense', side_effect=DatabaseError):
            with self.assertRaises(ExpenseSyncError):
                ExpenseService.create_expense(self.material_expense())
        self.assertEqual(Expense.objects.count(), 0)
        self.assertFalse(self.project.inventory_items.exists())

    def test_failed_delete_keeps_the_expense(self):
        expense = ExpenseService.create_expense(self.material_expense())
        with mock.patch('finance.services.InventoryService.reverse_material_expense', side_effect=DatabaseError):
            with self.assertRaises(ExpenseSyncError):
                ExpenseService.delete_expense(expense)
        self.assertTrue(Expense.objects.filter(pk=expense.pk).exists())
        self.assertEqual(self.project.inventory_items.get().quantity, Decimal('10'))


class ExpenseViewsTest(TestCase):
    def setUp(self):
        User.objects.create_user(username='manager', password='pass12345')
        self.client.login(username='manager', password='pass12345')
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('10000')
        )

    def post_material_expense(self):
        return self.client.post(reverse('finance:add_expense'), {
            'project': self.project.pk, 'description': 'Cement purchase', 'category': Expense.MATERIAL,
            'supplier': 'Casa do Construtor', 'date': '2024-06-10', 'status': Expense.PAID,
            'payment_date': '2024-06-10', 'amount': '', 'material_name': 'Cimento',
            'quantity': '10', 'unit_price': '50', 'unit': 'bag', 'receipt': '',
        })

    def test_add_material_expense_stocks_inventory(self):
        response = self.post_material_expense()
        self.assertRedirects(response, reverse('finance:expense_list'))
        expense = Expense.objects.get()
        self.assertEqual(expense.amount, Decimal('500'))
        self.assertEqual(self.project.inventory_items.get().quantity, Decimal('10'))

    def test_delete_expense_reverses_inventory(self):
        self.post_material_expense()
        expense = Expense.objects.get()

        response = self.client.get(reverse('finance:delete_expense', args=[expense.pk]))
        self.assertEqual(response.status_code, 200)

        self.client.post(reverse('finance:delete_expense', args=[expense.pk]))
        self.assertFalse(Expense.objects.exists())
        self.assertEqual(self.project.inventory_items.get().quantity, Decimal('0'))

    def test_list_filters_and_sorts(self):
        for description, amount in [('Cement purchase', '500'), ('Crew payment', '2500'), ('Mixer rental', '250')]:
            Expense.objects.create(
                project=self.project, date=date(2024, 6, 1), description=description,
                category=Expense.OTHER, status=Expense.PAID, amount=Decimal(amount)
            )
        response = self.client.get(reverse('finance:expense_list'), {'sort': 'amount', 'dir': 'asc'})
        self.assertEqual(response.status_code, 200)
        amounts = [e.amount for e in response.context['page_obj']]
        self.assertEqual(amounts, [Decimal('250'), Decimal('500'), Decimal('2500')])

        response = self.client.get(reverse('finance:expense_list'), {'q': 'crew', 'category': 'all'})
        self.assertEqual([e.description for e in response.context['page_obj']], ['Crew payment'])
        self.assertEqual(response.context['filtered_total'], Decimal('2500'))

    def test_out_of_range_page_is_clamped(self):
        response = self.client.get(reverse('finance:expense_list'), {'page': '50'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['page_obj'].number, 1)

    def test_excel_export(self):
        self.post_material_expense()
        response = self.client.get(reverse('finance:export_expenses_excel'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )


class ExpenseAdminTest(TestCase):
    def setUp(self):
        User.objects.create_superuser(username='admin', email='admin@example.com', password='pass12345')
        self.client.login(username='admin', password='pass12345')
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('500000')
        )

    def admin_data(self, **overrides):
        data = {
            'project': self.project.pk, 'description': 'Cement purchase', 'category': Expense.MATERIAL,
            'supplier': 'Casa do Construtor', 'date': '2024-06-10', 'status': Expense.PAID,
            'payment_date': '2024-06-10', 'amount': '1.00', 'material_name': 'Cimento',
            'quantity': '10', 'unit_price': '50', 'unit': 'bag', 'receipt': '', '_save': 'Save',
        }
        data.update(overrides)
        return data

    def create_material_expense(self, description='Cement purchase'):
        return ExpenseService.create_expense(Expense(
            project=self.project, date=date(2024, 6, 10), description=description,
            category=Expense.MATERIAL, status=Expense.PAID, amount=Decimal('500'),
            material_name='Cimento', quantity=Decimal('10'), unit_price=Decimal('50'), unit='bag'
        ))

    def error_messages(self, response):
        return [str(m) for m in get_messages(response.wsgi_request) if m.level_tag == 'error']

    def test_admin_uses_the_expense_form(self):
        self.assertTrue(issubclass(ExpenseAdmin(Expense, AdminSite()).form, ExpenseForm))

    def test_add_recomputes_material_amount(self):
        response = self.client.post(reverse('admin:finance_expense_add'), self.admin_data())
        self.assertEqual(response.status_code, 302)
        expense = Expense.objects.get()
        self.assertEqual(expense.amount, Decimal('500.00'))
        self.assertEqual(self.project.inventory_items.get().quantity, Decimal('10'))

    def test_add_rejects_incomplete_material(self):
        response = self.client.post(reverse('admin:finance_expense_add'),
                                    self.admin_data(quantity='0', unit=''))
        self.assertEqual(response.status_code, 200)
        self.assertIn('quantity', response.context['adminform'].form.errors)
        self.assertFalse(Expense.objects.exists())

    def test_failed_add_shows_error_message(self):
        with mock.patch('finance.services.InventoryService.apply_material_expense', side_effect=DatabaseError):
            response = self.client.post(reverse('admin:finance_expense_add'), self.admin_data())
        self.assertEqual(response.status_code, 302)
        self.assertEqual(self.error_messages(response), ["Could not save the expense. Please try again."])
        self.assertFalse(Expense.objects.exists())

    def test_failed_delete_shows_error_message(self):
        expense = self.create_material_expense()
        with mock.patch('finance.services.InventoryService.reverse_material_expense', side_effect=DatabaseError):
            response = self.client.post(reverse('admin:finance_expense_delete', args=[expense.pk]), {'post': 'yes'})
        self.assertEqual(response.status_code, 302)
        self.assertEqual(self.error_messages(response), ["Could not delete the expense. Please try again."])
        self.assertTrue(Expense.objects.filter(pk=expense.pk).exists())
        self.assertEqual(self.project.inventory_items.get().quantity, Decimal('10'))

    def test_bulk_delete_reverses_inventory(self):
        first = self.create_material_expense()
        second = self.create_material_expense('Second cement purchase')
        self.client.post(reverse('admin:finance_expense_changelist'), {
            'action': 'delete_selected', '_selected_action': [first.pk, second.pk], 'post': 'yes',
        })
        self.assertFalse(Expense.objects.exists())
        self.assertEqual(self.project.inventory_items.get().quantity, Decimal('0'))

    def test_bulk_delete_is_all_or_nothing(self):
        first = self.create_material_expense()
        second = self.create_material_expense('Second cement purchase')
        with mock.patch('finance.services.InventoryService.reverse_material_expense',
                        side_effect=[None, DatabaseError()]):
            response = self.client.post(reverse('admin:finance_expense_changelist'), {
                'action': 'delete_selected', '_selected_action': [first.pk, second.pk], 'post': 'yes',
            })
        self.assertEqual(response.status_code, 302)
        self.assertEqual(self.error_messages(response), ["Could not delete the expense. Please try again."])
        self.assertEqual(Expense.objects.count(), 2)
