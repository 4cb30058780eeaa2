# team/models.py

from django.db import models


class Employee(models.Model):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    STATUS_CHOICES = [
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
    ]

    name = models.CharField(max_length=200)
    role = models.CharField(max_length=100, help_text="Job title on site, e.g. Civil Engineer.")
    phone = models.CharField(max_length=30)
    email = models.EmailField()
    salary = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    projects = models.ManyToManyField('projects.Project', related_name='employees')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name
