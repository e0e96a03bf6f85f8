"""
Tests for customers app.

Usage:
    pytest customers/tests/
"""
