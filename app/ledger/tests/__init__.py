"""
Tests for the ledger app.

Usage:
    pytest ledger/tests/
"""
