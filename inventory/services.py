# inventory/services.py

import logging
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction

from .models import InventoryItem

logger = logging.getLogger(__name__)

QUANTITY_STEP = Decimal('0.001')
PRICE_STEP = Decimal('0.0001')
# Stored precision of average prices. PRICE_STEP is the tolerance when comparing them.
AVERAGE_PRICE_STEP = Decimal('0.00000001')


def normalize_material_name(name):
    """Canonical matching key for a material: trimmed, single-spaced, case-folded."""
    return ' '.join((name or '').split()).casefold()


def display_material_name(name):
    return ' '.join((name or '').split())


def weighted_average_price(current_quantity, current_price, added_quantity, added_price):
    current_quantity = max(Decimal(current_quantity), Decimal('0'))
    total_quantity = current_quantity + added_quantity
    if total_quantity <= 0:
        return Decimal(added_price)
    return (current_quantity * Decimal(current_price) + added_quantity * added_price) / total_quantity


def _quantity(value):
    return Decimal(value).quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)


def _price(value):
    return Decimal(value).quantize(AVERAGE_PRICE_STEP, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class InventoryDiscrepancy:
    project_id: int
    name: str
    unit: str
    stored_quantity: Decimal
    expected_quantity: Decimal
    stored_average_price: Decimal
    expected_average_price: Decimal


class InventoryService:
    """
    Keeps each (project, material) inventory line in step with the material
    expenses that feed it. Callers wrap these calls in the same
    transaction.atomic() block as the expense write.
    """

    @staticmethod
    def _locked_line(project_id, normalized_name):
        return (
            InventoryItem.objects.select_for_update()
            .filter(project_id=project_id, normalized_name=normalized_name)
            .first()
        )

    @staticmethod
    def apply_material_expense(expense):
        material = expense.material
        if material is None:
            return None

        key = normalize_material_name(material.name)
        with transaction.atomic():
            item = InventoryService._locked_line(expense.project_id, key)

            if item is None:
                item = InventoryItem.objects.create(
                    project_id=expense.project_id,
                    name=display_material_name(material.name),
                    normalized_name=key,
                    quantity=_quantity(material.quantity),
                    unit=material.unit,
                    average_price=_price(material.unit_price),
                )
                logger.debug("Created inventory line '%s' for project %s: %s @ %s",
                             item.name, expense.project_id, item.quantity, item.average_price)
                return item

            if item.unit and material.unit != item.unit:
                logger.warning(
                    "Unit mismatch for '%s' on project %s: line uses '%s', expense %s uses '%s'. Keeping '%s'.",
                    item.name, expense.project_id, item.unit, expense.pk, material.unit, item.unit
                )
            elif not item.unit:
                item.unit = material.unit

            new_price = weighted_average_price(item.quantity, item.average_price,
                                               material.quantity, material.unit_price)
            item.quantity = _quantity(max(item.quantity, Decimal('0')) + material.quantity)
            item.average_price = _price(new_price)
            item.save(update_fields=['quantity', 'average_price', 'unit', 'updated_at'])
            logger.debug("Updated inventory line '%s' for project %s: %s @ %s",
                         item.name, expense.project_id, item.quantity, item.average_price)
        return item

    @staticmethod
    def reverse_material_expense(expense):
        """
        Takes a material expense's quantity back out of its line, never below
        zero. The average price is left as it is.
        """
        material = expense.material
        if material is None:
            return None

        key = normalize_material_name(material.name)
        with transaction.atomic():
            item = InventoryService._locked_line(expense.project_id, key)
            if item is None:
                logger.info("No inventory line '%s' on project %s to reverse for expense %s.",
                            material.name, expense.project_id, expense.pk)
                return None

            item.quantity = _quantity(max(Decimal('0'), item.quantity - material.quantity))
            item.save(update_fields=['quantity', 'updated_at'])
            logger.debug("Reversed %s of '%s' on project %s, %s left.",
                         material.quantity, item.name, expense.project_id, item.quantity)
        return item

    @staticmethod
    def expected_project_inventory(project):
        """
        The exact inventory the project's material expenses add up to, keyed by
        normalized material name.
        """
        from finance.models import Expense

        expected = OrderedDict()
        expenses = (
            Expense.objects.filter(project=project, category=Expense.MATERIAL)
            .order_by('date', 'created_at', 'id')
        )
        for expense in expenses:
            material = expense.material
            if material is None:
                continue
            key = normalize_material_name(material.name)
            line = expected.setdefault(key, {
                'name': display_material_name(material.name),
                'unit': material.unit,
                'quantity': Decimal('0'),
                'value': Decimal('0'),
            })
            line['quantity'] += material.quantity
            line['value'] += material.quantity * material.unit_price
        return expected

    @staticmethod
    def rebuild_project_inventory(project, commit=False):
        """
        Compares the stored lines with the exact projection of the project's
        material expenses and returns the differences. With commit=True the
        projection is written back in one transaction.
        """
        expected = InventoryService.expected_project_inventory(project)
        stored = {item.normalized_name: item for item in InventoryItem.objects.filter(project=project)}

        discrepancies = []
        for key in list(expected) + [k for k in stored if k not in expected]:
            line = expected.get(key)
            item = stored.get(key)

            if line is not None:
                expected_quantity = _quantity(line['quantity'])
                expected_price = _price(line['value'] / line['quantity'])
            else:
                expected_quantity = _quantity(0)
                expected_price = _price(item.average_price)

            stored_quantity = _quantity(item.quantity) if item else _quantity(0)
            stored_price = _price(item.average_price) if item else _price(0)

            price_differs = abs(stored_price - expected_price) > PRICE_STEP
            if stored_quantity != expected_quantity or price_differs or item is None:
                discrepancies.append(InventoryDiscrepancy(
                    project_id=project.pk,
                    name=line['name'] if line else item.name,
                    unit=line['unit'] if line else item.unit,
                    stored_quantity=stored_quantity,
                    expected_quantity=expected_quantity,
                    stored_average_price=stored_price,
                    expected_average_price=expected_price,
                ))

        if commit and discrepancies:
            with transaction.atomic():
                for d in discrepancies:
                    key = normalize_material_name(d.name)
                    InventoryItem.objects.update_or_create(
                        project=project,
                        normalized_name=key,
                        defaults={
                            'name': d.name,
                            'unit': d.unit,
                            'quantity': d.expected_quantity,
                            'average_price': d.expected_average_price,
                        }
                    )
            logger.info("Rebuilt %d inventory line(s) for project %s.", len(discrepancies), project.pk)

        return discrepancies
