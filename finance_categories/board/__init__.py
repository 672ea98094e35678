"""
Category board

Screen-level logic of category management, independent of any UI toolkit.
"""
from finance_categories.board.cache import QueryCache
from finance_categories.board.client import HttpCategoryActions
from finance_categories.board.controller import CategoryBoard
from finance_categories.board.presentation import CategoryGroups, group_categories, filter_categories

__all__ = [
    "QueryCache",
    "HttpCategoryActions",
    "CategoryBoard",
    "CategoryGroups",
    "group_categories",
    "filter_categories",
]
