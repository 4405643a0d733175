"""Relational storage for transitdb: ORM models, engine setup, error adapters."""
