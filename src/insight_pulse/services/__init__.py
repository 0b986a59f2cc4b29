# src/insight_pulse/services/__init__.py
"""Business logic for reactions, rankings and counter reconciliation."""
