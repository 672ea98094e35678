"""
Services Package

Business logic services for Finance Categories.

Modules:
- category_actions: Category action layer returning result envelopes
- defaults: Starter category catalog
"""

from finance_categories.services.category_actions import CategoryActions

__all__ = ["CategoryActions"]
