"""Wealth projection backend: compound-interest projections toward a savings target."""
