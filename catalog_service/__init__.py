"""Catalog Service - product catalog management over a pluggable store."""

__version__ = "0.1.0"
