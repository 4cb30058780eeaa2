# finance/models.py

from dataclasses import dataclass
from decimal import Decimal

from django.db import models


@dataclass(frozen=True)
class MaterialDetails:
    """The material-only part of an expense: what was bought and at what unit price."""
    name: str
    quantity: Decimal
    unit_price: Decimal
    unit: str


class Expense(models.Model):
    MATERIAL = 'material'
    LABOR = 'labor'
    EQUIPMENT = 'equipment'
    SERVICES = 'services'
    DOCUMENTATION = 'documentation'
    OTHER = 'other'
    CATEGORY_CHOICES = [
        (MATERIAL, 'Construction Material'),
        (LABOR, 'Labor'),
        (EQUIPMENT, 'Equipment / Tools'),
        (SERVICES, 'Outsourced Services'),
        (DOCUMENTATION, 'Documentation'),
        (OTHER, 'Other'),
    ]

    PAID = 'paid'
    PENDING = 'pending'
    STATUS_CHOICES = [
        (PAID, 'Paid'),
        (PENDING, 'Pending'),
    ]

    project = models.ForeignKey('projects.Project', on_delete=models.PROTECT, related_name='expenses')
    date = models.DateField(help_text="The date the expense was incurred.")
    payment_date = models.DateField(null=True, blank=True)
    description = models.CharField(max_length=255)
    supplier = models.CharField(max_length=200, blank=True)
    receipt = models.TextField(blank=True, help_text="Invoice number or a link to the receipt.")
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default=MATERIAL)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    # Only filled in for material expenses
    material_name = models.CharField(max_length=200, blank=True)
    quantity = models.DecimalField(max_digits=14, decimal_places=3, null=True, blank=True)
    unit_price = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)
    unit = models.CharField(max_length=30, blank=True, help_text="e.g. bag, m³, unit")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.date} - {self.description} ({self.amount})"

    @property
    def is_paid(self):
        return self.status == self.PAID

    @property
    def material(self):
        """
        MaterialDetails for a complete material expense, None for every other
        expense. Inventory reconciliation only ever looks at this value.
        """
        if self.category != self.MATERIAL:
            return None
        if not self.material_name or not self.unit:
            return None
        if self.quantity is None or self.unit_price is None:
            return None
        if self.quantity <= 0 or self.unit_price <= 0:
            return None
        return MaterialDetails(
            name=self.material_name,
            quantity=Decimal(self.quantity),
            unit_price=Decimal(self.unit_price),
            unit=self.unit,
        )
