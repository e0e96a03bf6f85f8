"""
Authentication application.

Shop owners sign in with email and password and receive JWT tokens. The
authenticated user *is* the shop: every customer account and ledger entry
is partitioned by ``user.id``.

Key components:
    - User model: Email-based shop owner with a display ``shop_name``
    - UserManager: create_user / create_superuser
    - Views: registration and current-shop profile (tokens come from
      djangorestframework-simplejwt)

Usage:
    from authentication.models import User
"""
