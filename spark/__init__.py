# spark/__init__.py
"""Spark: product-idea generation service."""
