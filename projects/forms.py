# projects/forms.py

from django import forms
from .models import Project

class ProjectForm(forms.ModelForm):
    class Meta:
        model = Project
        fields = ['name', 'address', 'client', 'start_date', 'end_date', 'status', 'total_budget', 'description']
        labels = {
            'name': 'Project Name', 'address': 'Address', 'client': 'Client',
            'start_date': 'Start Date', 'end_date': 'End Date', 'status': 'Status',
            'total_budget': 'Total Budget', 'description': 'Description',
        }
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Enter project name'}),
            'address': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Street, number, city'}),
            'client': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Enter client name'}),
            'start_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'end_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'total_budget': forms.NumberInput(attrs={'class': 'form-control', 'placeholder': '0.00'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
        }

    def clean_total_budget(self):
        budget = self.cleaned_data['total_budget']
        if budget < 0:
            raise forms.ValidationError("Budget must be zero or positive.")
        return budget

    def clean(self):
        cleaned_data = super().clean()
        start_date = cleaned_data.get('start_date')
        end_date = cleaned_data.get('end_date')
        if start_date and end_date and end_date < start_date:
            self.add_error('end_date', "End date cannot be before the start date.")
        return cleaned_data


class ProjectFilterForm(forms.Form):
    q = forms.CharField(
        required=False,
        label="Search",
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Name, client or address...'})
    )
    status = forms.ChoiceField(
        required=False,
        choices=[('', 'All Statuses')] + Project.STATUS_CHOICES,
        widget=forms.Select(attrs={'class': 'form-select'})
    )
