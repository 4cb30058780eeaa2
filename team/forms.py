# team/forms.py

from django import forms
from .models import Employee

class EmployeeForm(forms.ModelForm):
    class Meta:
        model = Employee
        fields = ['name', 'role', 'phone', 'email', 'salary', 'status', 'projects']
        labels = {
            'name': 'Full Name', 'role': 'Role', 'phone': 'Phone', 'email': 'Email',
            'salary': 'Salary', 'status': 'Status', 'projects': 'Linked Projects',
        }
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Enter full name'}),
            'role': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Civil Engineer'}),
            'phone': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Enter phone number'}),
            'email': forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'Enter email address'}),
            'salary': forms.NumberInput(attrs={'class': 'form-control', 'placeholder': '0.00'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'projects': forms.CheckboxSelectMultiple(),
        }

    def clean_salary(self):
        salary = self.cleaned_data['salary']
        if salary < 0:
            raise forms.ValidationError("Salary must be zero or positive.")
        return salary


class EmployeeFilterForm(forms.Form):
    q = forms.CharField(
        required=False,
        label="Search",
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Name, role, email or phone...'})
    )
    status = forms.ChoiceField(
        required=False,
        choices=[('', 'All Statuses')] + Employee.STATUS_CHOICES,
        widget=forms.Select(attrs={'class': 'form-select'})
    )
