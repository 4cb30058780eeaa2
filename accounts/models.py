from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Custom User model to extend Django's default User.
    The role decides which dashboard sections a user can open.
    """
    ADMINISTRATOR = 'administrator'
    SITE_MANAGER = 'site_manager'
    ROLE_CHOICES = [
        (ADMINISTRATOR, 'Administrator'),
        (SITE_MANAGER, 'Site Manager'),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=SITE_MANAGER,
        verbose_name="Role"
    )

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return self.get_full_name() or self.username

    @property
    def is_administrator(self):
        return self.is_superuser or self.role == self.ADMINISTRATOR

    def has_role(self, role):
        if role is None:
            return True
        if role == self.ADMINISTRATOR:
            return self.is_administrator
        return self.role == role
