"""Ledger service wire models and HTTP transport."""
