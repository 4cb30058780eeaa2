# accounts/forms.py

from django import forms
from .models import User

class UserSettingsForm(forms.ModelForm):
    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'email', 'role', 'is_active']
        labels = {
            'first_name': 'First Name', 'last_name': 'Last Name',
            'email': 'Email', 'role': 'Role', 'is_active': 'Active',
        }
        widgets = {
            'first_name': forms.TextInput(attrs={'class': 'form-control'}),
            'last_name': forms.TextInput(attrs={'class': 'form-control'}),
            'email': forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'Enter email address'}),
            'role': forms.Select(attrs={'class': 'form-select'}),
        }
