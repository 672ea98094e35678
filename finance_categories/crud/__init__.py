"""
CRUD repositories
"""
from finance_categories.crud.category import category
from finance_categories.crud.user import user

__all__ = ["category", "user"]
