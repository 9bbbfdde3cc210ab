"""User model for the identity boundary of the stock ledger.

This module defines the custom `User` model which extends Django's
`AbstractUser` with a unique email and the closed `Role` the inventory
core authorizes against.
"""

from common.choices import Role
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user with unique email and an inventory role.

    Fields:
    - email: the primary email, unique at the database level (normalized).
    - role: OWNER or STAFF; decides which movement types the user may record.
    """

    ROLE_OWNER = Role.OWNER
    ROLE_STAFF = Role.STAFF
    ROLE_CHOICES = Role.choices

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_STAFF, db_index=True)

    def save(self, *args, **kwargs):
        """Normalize the email so uniqueness checks are reliable, then persist."""
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)
