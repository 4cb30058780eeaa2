# inventory/tests.py

from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, TestCase

from finance.models import Expense
from finance.services import ExpenseService
from projects.models import Project
from .models import InventoryItem
from .services import PRICE_STEP, InventoryService, normalize_material_name, weighted_average_price


class NormalizeMaterialNameTest(SimpleTestCase):
    def test_trims_collapses_and_casefolds(self):
        self.assertEqual(normalize_material_name('  Cimento   CP-II '), 'cimento cp-ii')
        self.assertEqual(normalize_material_name('CIMENTO'), normalize_material_name('cimento'))

    def test_empty_name(self):
        self.assertEqual(normalize_material_name(None), '')


class WeightedAveragePriceTest(SimpleTestCase):
    def test_average(self):
        self.assertEqual(weighted_average_price(Decimal('10'), Decimal('50'), Decimal('10'), Decimal('70')), Decimal('60'))

    def test_empty_line_takes_the_new_price(self):
        self.assertEqual(weighted_average_price(Decimal('0'), Decimal('50'), Decimal('4'), Decimal('80')), Decimal('80'))


class InventoryReconciliationTest(TestCase):
    def setUp(self):
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('500000')
        )

    def add_material(self, name, quantity, unit_price, unit='bag', project=None):
        quantity, unit_price = Decimal(quantity), Decimal(unit_price)
        expense = Expense(
            project=project or self.project, date=date(2024, 6, 10), description=f'{name} purchase',
            category=Expense.MATERIAL, status=Expense.PAID, amount=quantity * unit_price,
            material_name=name, quantity=quantity, unit_price=unit_price, unit=unit
        )
        return ExpenseService.create_expense(expense)

    def line(self, name='Cimento'):
        return InventoryItem.objects.get(project=self.project, normalized_name=normalize_material_name(name))

    def test_first_purchase_creates_line(self):
        self.add_material('Cimento', '10', '50')
        item = self.line()
        self.assertEqual(item.name, 'Cimento')
        self.assertEqual(item.quantity, Decimal('10'))
        self.assertEqual(item.average_price, Decimal('50'))
        self.assertEqual(item.unit, 'bag')

    def test_purchase_delete_sequence(self):
        first = self.add_material('Cimento', '10', '50')
        self.add_material('Cimento', '10', '70')
        item = self.line()
        self.assertEqual(item.quantity, Decimal('20'))
        self.assertEqual(item.average_price, Decimal('60'))

        ExpenseService.delete_expense(first)
        item.refresh_from_db()
        # Quantity goes back down, the average price stays where it was
        self.assertEqual(item.quantity, Decimal('10'))
        self.assertEqual(item.average_price, Decimal('60'))

    def test_average_over_mixed_purchases(self):
        purchases = [('3', '10'), ('2.5', '12.40'), ('7', '9.95'), ('1.25', '15'), ('40', '11.35')]
        for quantity, unit_price in purchases:
            self.add_material('Cimento', quantity, unit_price)

        total_quantity = sum(Decimal(q) for q, _ in purchases)
        total_value = sum(Decimal(q) * Decimal(p) for q, p in purchases)
        item = self.line()
        self.assertEqual(item.quantity, total_quantity)
        self.assertLessEqual(abs(item.average_price - total_value / total_quantity), PRICE_STEP)

    def test_names_match_ignoring_case_and_spacing(self):
        self.add_material('Cimento', '10', '50')
        self.add_material('  CIMENTO ', '5', '50')
        self.assertEqual(InventoryItem.objects.filter(project=self.project).count(), 1)
        self.assertEqual(self.line().quantity, Decimal('15'))

    def test_lines_are_per_project(self):
        other = Project.objects.create(
            name="Plaza", address="Avenida Principal, 456", client="Investimentos Urbanos",
            start_date=date(2024, 8, 15), end_date=date(2025, 12, 20)
        )
        self.add_material('Cimento', '10', '50')
        self.add_material('Cimento', '3', '90', project=other)
        self.assertEqual(self.line().quantity, Decimal('10'))
        self.assertEqual(InventoryItem.objects.get(project=other).quantity, Decimal('3'))

    def test_reversal_never_goes_below_zero(self):
        expense = self.add_material('Cimento', '10', '50')
        InventoryItem.objects.filter(pk=self.line().pk).update(quantity=Decimal('5'))

        ExpenseService.delete_expense(expense)
        self.assertEqual(self.line().quantity, Decimal('0'))
        self.assertFalse(Expense.objects.exists())

    def test_deleting_without_a_line_only_deletes_the_expense(self):
        expense = self.add_material('Cimento', '10', '50')
        InventoryItem.objects.all().delete()
        ExpenseService.delete_expense(expense)
        self.assertFalse(Expense.objects.exists())
        self.assertFalse(InventoryItem.objects.exists())

    def test_non_material_expense_leaves_inventory_alone(self):
        expense = Expense(
            project=self.project, date=date(2024, 6, 12), description='Crew payment',
            category=Expense.LABOR, status=Expense.PAID, amount=Decimal('2500')
        )
        ExpenseService.create_expense(expense)
        ExpenseService.delete_expense(expense)
        self.assertFalse(InventoryItem.objects.exists())

    def test_unit_mismatch_keeps_existing_unit(self):
        self.add_material('Cimento', '10', '50', unit='bag')
        with self.assertLogs('inventory.services', level='WARNING'):
            self.add_material('Cimento', '50', '1', unit='kg')
        item = self.line()
        self.assertEqual(item.unit, 'bag')
        self.assertEqual(item.quantity, Decimal('60'))

    def test_edit_replaces_the_old_contribution(self):
        expense = self.add_material('Cimento', '10', '50')
        expense.quantity = Decimal('4')
        expense.unit_price = Decimal('80')
        expense.amount = Decimal('320')
        ExpenseService.update_expense(expense)

        item = self.line()
        self.assertEqual(item.quantity, Decimal('4'))
        self.assertEqual(item.average_price, Decimal('80'))

    def test_edit_to_another_material_moves_the_quantity(self):
        expense = self.add_material('Cimento', '10', '50')
        expense.material_name = 'Areia'
        ExpenseService.update_expense(expense)

        self.assertEqual(self.line('Cimento').quantity, Decimal('0'))
        self.assertEqual(self.line('Areia').quantity, Decimal('10'))

    def test_edit_to_non_material_takes_quantity_out(self):
        expense = self.add_material('Cimento', '10', '50')
        expense.category = Expense.OTHER
        expense.material_name, expense.quantity, expense.unit_price, expense.unit = '', None, None, ''
        ExpenseService.update_expense(expense)
        self.assertEqual(self.line().quantity, Decimal('0'))


class InventoryRebuildTest(TestCase):
    def setUp(self):
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('500000')
        )
        first = self.add_material('10', '50')
        self.add_material('10', '70')
        ExpenseService.delete_expense(first)

    def add_material(self, quantity, unit_price):
        quantity, unit_price = Decimal(quantity), Decimal(unit_price)
        return ExpenseService.create_expense(Expense(
            project=self.project, date=date(2024, 6, 10), description='Cement purchase',
            category=Expense.MATERIAL, status=Expense.PAID, amount=quantity * unit_price,
            material_name='Cimento', quantity=quantity, unit_price=unit_price, unit='bag'
        ))

    def test_rebuild_reports_stale_average(self):
        discrepancies = InventoryService.rebuild_project_inventory(self.project)
        self.assertEqual(len(discrepancies), 1)
        d = discrepancies[0]
        self.assertEqual(d.stored_average_price, Decimal('60'))
        self.assertEqual(d.expected_average_price, Decimal('70'))
        self.assertEqual(d.expected_quantity, Decimal('10'))
        # Nothing written without commit
        self.assertEqual(InventoryItem.objects.get().average_price, Decimal('60'))

    def test_rebuild_commit_writes_projection(self):
        InventoryService.rebuild_project_inventory(self.project, commit=True)
        item = InventoryItem.objects.get()
        self.assertEqual(item.quantity, Decimal('10'))
        self.assertEqual(item.average_price, Decimal('70'))
        self.assertEqual(InventoryService.rebuild_project_inventory(self.project), [])

    def test_command_fix(self):
        out = StringIO()
        call_command('reconcile_inventory', '--fix', stdout=out)
        self.assertIn('Cimento', out.getvalue())
        self.assertEqual(InventoryItem.objects.get().average_price, Decimal('70'))

    def test_command_without_fix_only_reports(self):
        out = StringIO()
        call_command('reconcile_inventory', '--project', str(self.project.pk), stdout=out)
        self.assertIn('--fix', out.getvalue())
        self.assertEqual(InventoryItem.objects.get().average_price, Decimal('60'))

    def test_command_unknown_project(self):
        with self.assertRaises(CommandError):
            call_command('reconcile_inventory', '--project', '9999', stdout=StringIO())


class InventoryPriceDriftTest(TestCase):
    def setUp(self):
        self.project = Project.objects.create(
            name="Vista Verde", address="Rua das Flores, 123", client="Construtora Sol",
            start_date=date(2024, 5, 1), end_date=date(2025, 5, 1), total_budget=Decimal('500000')
        )

    def add_material(self, quantity, unit_price):
        quantity, unit_price = Decimal(quantity), Decimal(unit_price)
        return ExpenseService.create_expense(Expense(
            project=self.project, date=date(2024, 6, 10), description='Cement purchase',
            category=Expense.MATERIAL, status=Expense.PAID,
            amount=(quantity * unit_price).quantize(Decimal('0.01')),
            material_name='Cimento', quantity=quantity, unit_price=unit_price, unit='bag'
        ))

    def test_small_price_steps_do_not_create_discrepancies(self):
        self.add_material('3', '10')
        for _ in range(3):
            self.add_material('1', '10.0001')
        self.assertEqual(InventoryService.rebuild_project_inventory(self.project), [])

        out = StringIO()
        call_command('reconcile_inventory', stdout=out)
        self.assertIn('Inventory matches the material expenses.', out.getvalue())

    def test_many_small_purchases_on_a_large_line(self):
        self.add_material('1000', '10')
        for _ in range(30):
            self.add_material('1', '10.001')
        item = InventoryItem.objects.get()
        expected = (Decimal('10000') + 30 * Decimal('10.001')) / Decimal('1030')
        self.assertLessEqual(abs(item.average_price - expected), PRICE_STEP)
        self.assertEqual(InventoryService.rebuild_project_inventory(self.project), [])
