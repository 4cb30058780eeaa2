# schedule/forms.py

from django import forms
from projects.models import Project
from .models import Task

class TaskForm(forms.ModelForm):
    class Meta:
        model = Task
        fields = ['project', 'name', 'responsible', 'start_date', 'end_date', 'status', 'priority']
        labels = {
            'project': 'Project', 'name': 'Task Name', 'responsible': 'Responsible',
            'start_date': 'Start Date', 'end_date': 'End Date', 'status': 'Status', 'priority': 'Priority',
        }
        widgets = {
            'project': forms.Select(attrs={'class': 'form-select'}),
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Foundation pouring'}),
            'responsible': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Who is in charge'}),
            'start_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'end_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'priority': forms.Select(attrs={'class': 'form-select'}),
        }

    def clean(self):
        cleaned_data = super().clean()
        start_date = cleaned_data.get('start_date')
        end_date = cleaned_data.get('end_date')
        if start_date and end_date and end_date < start_date:
            self.add_error('end_date', "End date cannot be before the start date.")
        return cleaned_data


class TaskFilterForm(forms.Form):
    project = forms.ModelChoiceField(
        queryset=Project.objects.all(),
        required=False,
        empty_label="All Projects",
        widget=forms.Select(attrs={'class': 'form-select'})
    )
    status = forms.ChoiceField(
        required=False,
        choices=[('', 'All Statuses')] + Task.STATUS_CHOICES,
        widget=forms.Select(attrs={'class': 'form-select'})
    )
