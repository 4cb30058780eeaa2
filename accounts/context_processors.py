# accounts/context_processors.py

from django.urls import reverse

from .models import User

# (url name, label, required role)
NAV_ITEMS = [
    ('dashboard', 'Dashboard', None),
    ('projects:project_list', 'Projects', None),
    ('team:employee_list', 'Team', None),
    ('finance:expense_list', 'Finance', None),
    ('schedule:task_list', 'Schedule', None),
    ('reports:project_report', 'Reports', None),
    ('accounts:user_list', 'Settings', User.ADMINISTRATOR),
]


def visible_nav_items(user):
    if not user.is_authenticated:
        return []
    items = []
    for url_name, label, required_role in NAV_ITEMS:
        if not user.has_role(required_role):
            continue
        items.append({'url': reverse(url_name), 'label': label, 'url_name': url_name})
    return items


def navigation(request):
    items = visible_nav_items(request.user)
    for item in items:
        item['active'] = request.path == item['url']
    return {'nav_items': items}
