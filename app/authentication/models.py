"""
Authentication models.

This module defines the shop owner account. There is no separate Shop
table: the authenticated User is the shop, and its primary key is the
partition key used by the customers and ledger apps.

Related files:
    - managers.py: Custom user manager for email-based creation
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Shop owner account using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        shop_name: Display name of the shop
        phone: Owner contact number
        is_active: Whether the account can sign in
        is_staff: Whether the user can access Django admin
        date_joined: When the account was created
        updated_at: When the account was last modified
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="Owner's email address (primary identifier)",
    )
    shop_name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Display name of the shop",
    )
    phone = models.CharField(
        max_length=20,
        blank=True,
        default="",
        help_text="Owner contact number",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the account was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.shop_name or self.email

    def get_full_name(self):
        return self.shop_name or self.email

    def get_short_name(self):
        return self.shop_name or self.email.split("@")[0]
