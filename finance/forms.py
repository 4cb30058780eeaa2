# finance/forms.py

from decimal import Decimal, ROUND_HALF_UP

from django import forms

from projects.models import Project
from .aggregation import ALL_CATEGORIES
from .models import Expense

MATERIAL_FIELDS = ('material_name', 'quantity', 'unit_price', 'unit')


class ExpenseForm(forms.ModelForm):
    class Meta:
        model = Expense
        fields = [
            'project', 'description', 'category', 'supplier', 'date', 'status', 'payment_date',
            'amount', 'material_name', 'quantity', 'unit_price', 'unit', 'receipt',
        ]
        labels = {
            'project': 'Project', 'description': 'Description', 'category': 'Category',
            'supplier': 'Supplier', 'date': 'Expense Date', 'status': 'Status',
            'payment_date': 'Payment Date', 'amount': 'Amount', 'material_name': 'Material',
            'quantity': 'Quantity', 'unit_price': 'Unit Price', 'unit': 'Unit',
            'receipt': 'Receipt (number or link)',
        }
        widgets = {
            'project': forms.Select(attrs={'class': 'form-select'}),
            'description': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Cement purchase'}),
            'category': forms.Select(attrs={'class': 'form-select'}),
            'supplier': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Enter supplier name'}),
            'date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'payment_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'amount': forms.NumberInput(attrs={'class': 'form-control', 'placeholder': '1500.00'}),
            'material_name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Cement'}),
            'quantity': forms.NumberInput(attrs={'class': 'form-control'}),
            'unit_price': forms.NumberInput(attrs={'class': 'form-control'}),
            'unit': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'bag, m³, unit'}),
            'receipt': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Material expenses get their amount from quantity x unit price
        self.fields['amount'].required = False

    def clean(self):
        cleaned_data = super().clean()
        category = cleaned_data.get('category')

        if category == Expense.MATERIAL:
            material_name = (cleaned_data.get('material_name') or '').strip()
            unit = (cleaned_data.get('unit') or '').strip()
            quantity = cleaned_data.get('quantity')
            unit_price = cleaned_data.get('unit_price')

            if not material_name:
                self.add_error('material_name', "Material name is required for material expenses.")
            if not unit:
                self.add_error('unit', "Unit is required for material expenses.")
            if quantity is None or quantity <= 0:
                self.add_error('quantity', "Quantity must be greater than zero.")
            if unit_price is None or unit_price <= 0:
                self.add_error('unit_price', "Unit price must be greater than zero.")

            cleaned_data['material_name'] = material_name
            cleaned_data['unit'] = unit
            if quantity and unit_price and quantity > 0 and unit_price > 0:
                cleaned_data['amount'] = (quantity * unit_price).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        else:
            for name in MATERIAL_FIELDS:
                cleaned_data[name] = None if name in ('quantity', 'unit_price') else ''
            amount = cleaned_data.get('amount')
            if amount is None:
                self.add_error('amount', "Amount is required.")
            elif amount < 0:
                self.add_error('amount', "Amount must be zero or positive.")

        if cleaned_data.get('status') == Expense.PENDING:
            cleaned_data['payment_date'] = None

        return cleaned_data


class ExpenseFilterForm(forms.Form):
    q = forms.CharField(
        required=False,
        label="Search",
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Description or supplier...'})
    )
    category = forms.ChoiceField(
        required=False,
        choices=[(ALL_CATEGORIES, 'All Categories')] + Expense.CATEGORY_CHOICES,
        widget=forms.Select(attrs={'class': 'form-select'})
    )
    project = forms.ModelChoiceField(
        queryset=Project.objects.all(),
        required=False,
        empty_label="All Projects",
        widget=forms.Select(attrs={'class': 'form-select'})
    )
