"""Numeric, calendar and display helpers."""
