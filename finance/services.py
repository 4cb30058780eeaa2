# finance/services.py

import logging

from django.db import DatabaseError, transaction

from inventory.services import InventoryService
from .models import Expense

logger = logging.getLogger(__name__)


class ExpenseSyncError(Exception):
    """An expense and its inventory effect could not be written together."""


class ExpenseService:
    """
    Expense writes that also move inventory. Each call is one transaction:
    either the expense and its inventory line both change, or neither does.
    """

    @staticmethod
    def create_expense(expense):
        try:
            with transaction.atomic():
                expense.save()
                InventoryService.apply_material_expense(expense)
        except DatabaseError as e:
            logger.exception("Could not save expense '%s'.", expense.description)
            raise ExpenseSyncError("Could not save the expense. Please try again.") from e
        return expense

    @staticmethod
    def update_expense(expense):
        """
        Saves an edited expense. The stored version's material contribution is
        taken out of inventory and the edited one is put back in, as if the
        old expense were deleted and the new one created.
        """
        try:
            with transaction.atomic():
                previous = Expense.objects.select_for_update().filter(pk=expense.pk).first()
                if previous is not None:
                    InventoryService.reverse_material_expense(previous)
                expense.save()
                InventoryService.apply_material_expense(expense)
        except DatabaseError as e:
            logger.exception("Could not update expense %s.", expense.pk)
            raise ExpenseSyncError("Could not save the expense. Please try again.") from e
        return expense

    @staticmethod
    def delete_expense(expense):
        expense_id = expense.pk
        try:
            with transaction.atomic():
                InventoryService.reverse_material_expense(expense)
                expense.delete()
        except DatabaseError as e:
            logger.exception("Could not delete expense %s.", expense_id)
            raise ExpenseSyncError("Could not delete the expense. Please try again.") from e
