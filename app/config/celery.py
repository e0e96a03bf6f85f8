"""
Celery configuration for the shop ledger service.

Celery runs the ledger's background work:
- Nightly balance reconciliation (see CELERY_BEAT_SCHEDULE in settings)
- On-demand repair of a drifted customer balance

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps.

Usage:
    from ledger.tasks import reconcile_customer_balances

    reconcile_customer_balances.delay(shop_id=shop.id)

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
