"""Data access helpers over the SQLAlchemy models."""
