# accounts/tests.py

from django.test import TestCase
from django.urls import reverse

from .context_processors import visible_nav_items
from .models import User


class UserRoleTest(TestCase):
    def test_default_role_is_site_manager(self):
        user = User.objects.create_user(username='manager', password='pass12345')
        self.assertEqual(user.role, User.SITE_MANAGER)
        self.assertFalse(user.is_administrator)

    def test_superuser_counts_as_administrator(self):
        user = User.objects.create_superuser(username='root', password='pass12345', email='root@example.com')
        self.assertTrue(user.has_role(User.ADMINISTRATOR))

    def test_str_prefers_full_name(self):
        user = User(username='cs', first_name='Carlos', last_name='Silva')
        self.assertEqual(str(user), 'Carlos Silva')
        self.assertEqual(str(User(username='cs')), 'cs')


# Navigation entries are filtered by role.
class NavigationTest(TestCase):
    def setUp(self):
        self.manager = User.objects.create_user(username='manager', password='pass12345')
        self.admin = User.objects.create_user(username='admin', password='pass12345', role=User.ADMINISTRATOR)

    def url_names(self, user):
        return [item['url_name'] for item in visible_nav_items(user)]

    def test_manager_does_not_see_settings(self):
        names = self.url_names(self.manager)
        self.assertIn('finance:expense_list', names)
        self.assertNotIn('accounts:user_list', names)

    def test_administrator_sees_settings(self):
        self.assertIn('accounts:user_list', self.url_names(self.admin))

    def test_navigation_in_rendered_page(self):
        self.client.login(username='manager', password='pass12345')
        response = self.client.get(reverse('dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertNotContains(response, reverse('accounts:user_list'))


class UserSettingsViewTest(TestCase):
    def setUp(self):
        self.manager = User.objects.create_user(username='manager', password='pass12345')
        self.admin = User.objects.create_user(username='admin', password='pass12345', role=User.ADMINISTRATOR)

    def test_manager_is_forbidden(self):
        self.client.login(username='manager', password='pass12345')
        response = self.client.get(reverse('accounts:user_list'))
        self.assertEqual(response.status_code, 403)

    def test_anonymous_is_sent_to_login(self):
        response = self.client.get(reverse('accounts:user_list'))
        self.assertEqual(response.status_code, 302)

    def test_administrator_changes_role(self):
        self.client.login(username='admin', password='pass12345')
        response = self.client.get(reverse('accounts:user_list'))
        self.assertContains(response, 'manager')

        response = self.client.post(reverse('accounts:edit_user', args=[self.manager.pk]), {
            'first_name': 'Site', 'last_name': 'Manager', 'email': 'manager@buildwise.com',
            'role': User.ADMINISTRATOR, 'is_active': 'on',
        })
        self.assertRedirects(response, reverse('accounts:user_list'))
        self.manager.refresh_from_db()
        self.assertEqual(self.manager.role, User.ADMINISTRATOR)
