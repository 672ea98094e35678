"""
Starter category catalog added by "load defaults"
"""
from typing import List

from finance_categories.schemas.category import CategoryInput

DEFAULT_CATEGORIES: List[CategoryInput] = [
    # Income categories
    CategoryInput(name="Salary", type="INCOME", bgColor="#E8F5E9", fgColor="#2E7D32", icon="dollar-sign"),
    CategoryInput(name="Gifts", type="INCOME", bgColor="#F3E5F5", fgColor="#7B1FA2", icon="gift"),

    # Expense categories
    CategoryInput(name="Rent", type="EXPENSE", bgColor="#FFEBEE", fgColor="#C62828", icon="home"),
    CategoryInput(name="Eating Out", type="EXPENSE", bgColor="#FFF3E0", fgColor="#E65100", icon="utensils"),
    CategoryInput(name="Tech", type="EXPENSE", bgColor="#E3F2FD", fgColor="#1565C0", icon="monitor"),
    CategoryInput(name="Groceries", type="EXPENSE", bgColor="#F1F8E9", fgColor="#558B2F", icon="shopping-cart"),
    CategoryInput(name="Home", type="EXPENSE", bgColor="#EFEBE9", fgColor="#4E342E", icon="home"),
    CategoryInput(name="Education", type="EXPENSE", bgColor="#E8EAF6", fgColor="#283593", icon="book"),
    CategoryInput(name="Entertainment", type="EXPENSE", bgColor="#FCE4EC", fgColor="#C2185B", icon="film"),
    CategoryInput(name="Taxi", type="EXPENSE", bgColor="#FFF8E1", fgColor="#FF8F00", icon="car"),
    CategoryInput(name="Charity", type="EXPENSE", bgColor="#EDE7F6", fgColor="#512DA8", icon="heart"),
    CategoryInput(name="Transport", type="EXPENSE", bgColor="#ECEFF1", fgColor="#455A64", icon="car"),
    CategoryInput(name="Shopping", type="EXPENSE", bgColor="#FBE9E7", fgColor="#D84315", icon="shopping-bag"),
    CategoryInput(name="Health", type="EXPENSE", bgColor="#E0F7FA", fgColor="#00838F", icon="heart"),
]


def missing_defaults(existing_names) -> List[CategoryInput]:
    """Catalog entries whose names the user does not own yet"""
    return [c for c in DEFAULT_CATEGORIES if c.name not in existing_names]
