"""
Database models
"""
from finance_categories.db.base import Base
from finance_categories.models.user import User
from finance_categories.models.account import Account, AccountType
from finance_categories.models.category import Category, CategoryType
from finance_categories.models.transaction import Transaction, TransactionType
from finance_categories.models.budget import Budget

__all__ = [
    "Base",
    "User",
    "Account",
    "AccountType",
    "Category",
    "CategoryType",
    "Transaction",
    "TransactionType",
    "Budget",
]
