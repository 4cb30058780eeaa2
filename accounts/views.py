# accounts/views.py

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib import messages

from .decorators import role_required
from .forms import UserSettingsForm
from .models import User


@role_required(User.ADMINISTRATOR)
def user_list(request):
    users = User.objects.all().order_by('username')
    return render(request, 'accounts/user_list.html', {'users': users, 'title': 'Users & Roles'})

@role_required(User.ADMINISTRATOR)
def edit_user(request, pk):
    user = get_object_or_404(User, pk=pk)
    if request.method == 'POST':
        form = UserSettingsForm(request.POST, instance=user)
        if form.is_valid():
            form.save()
            messages.success(request, f'User "{user.username}" updated successfully!')
            return redirect('accounts:user_list')
    else:
        form = UserSettingsForm(instance=user)
    return render(request, 'accounts/user_form.html', {'form': form, 'title': f'Edit User: {user.username}'})
