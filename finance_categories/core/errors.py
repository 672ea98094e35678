"""
Category error taxonomy

Raised by the validation and persistence layers, converted into
result envelopes by the action layer.
"""
from typing import Dict, List, Optional


class CategoryError(Exception):
    """Base class for expected category failures"""
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CategoryValidationError(CategoryError):
    """Input failed schema rules; errors are keyed by field name"""
    code = "validation"

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        self.errors = errors
        if message is None:
            message = "; ".join(
                f"{field}: {', '.join(messages)}" for field, messages in errors.items()
            )
        super().__init__(message)


class CategoryNotFoundError(CategoryError):
    """Category does not exist or belongs to another user"""
    code = "not_found"

    def __init__(self, category_id: str):
        super().__init__("Category not found")
        self.category_id = category_id


class CategoryConflictError(CategoryError):
    """Category name already taken by the same user"""
    code = "conflict"

    def __init__(self, name: str):
        super().__init__(f"Category with name '{name}' already exists")
        self.name = name


class CategoryInUseError(CategoryError):
    """Category is still referenced by budgets"""
    code = "in_use"

    def __init__(self, category_id: str, budget_count: int):
        super().__init__(
            f"Category is used by {budget_count} budget(s) and cannot be deleted"
        )
        self.category_id = category_id
        self.budget_count = budget_count
