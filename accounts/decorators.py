# accounts/decorators.py

from functools import wraps

from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied


def role_required(role):
    """
    Restricts a view to users holding `role`. Anonymous users are sent to the
    login page first; authenticated users without the role get a 403.
    """
    def decorator(view_func):
        @login_required
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if not request.user.has_role(role):
                raise PermissionDenied("You do not have access to this section.")
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
