# inventory/models.py

from django.db import models


class InventoryItem(models.Model):
    """
    Stock of one material on one project site. Lines are fed by material
    expenses, so quantity and average_price are maintained by
    inventory.services.InventoryService and not edited by hand.
    """
    project = models.ForeignKey('projects.Project', on_delete=models.PROTECT, related_name='inventory_items')
    name = models.CharField(max_length=200)
    normalized_name = models.CharField(max_length=200, editable=False)
    quantity = models.DecimalField(max_digits=14, decimal_places=3, default=0)
    unit = models.CharField(max_length=30, blank=True)
    average_price = models.DecimalField(max_digits=20, decimal_places=8, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('project', 'normalized_name')
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit}) at {self.project}"

    @property
    def stock_value(self):
        return self.quantity * self.average_price
