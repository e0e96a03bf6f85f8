"""
Tests for authentication app.

This package contains test modules for:
- test_managers.py: UserManager tests
- test_views.py: Registration, JWT and shop profile endpoint tests

Usage:
    pytest authentication/tests/
"""
