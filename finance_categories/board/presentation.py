"""
Presentation helpers for the category board: grouping, search,
form values and confirmation text
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from finance_categories.core.icons import DEFAULT_ICON, icon_glyph
from finance_categories.models.category import CategoryType
from finance_categories.schemas.category import CategoryResponse

NEW_CATEGORY_DEFAULTS: Dict[str, Any] = {
    "name": "",
    "type": CategoryType.EXPENSE.value,
    "bgColor": "#EEEEEE",
    "fgColor": "#333333",
    "icon": DEFAULT_ICON,
}


@dataclass
class CategoryGroups:
    """Categories split for display; BOTH is shown with expenses"""
    income: List[CategoryResponse] = field(default_factory=list)
    expense: List[CategoryResponse] = field(default_factory=list)


def group_categories(categories: Iterable[CategoryResponse]) -> CategoryGroups:
    groups = CategoryGroups()
    for category in categories:
        if category.type == CategoryType.INCOME:
            groups.income.append(category)
        else:
            groups.expense.append(category)
    return groups


def filter_categories(categories: Iterable[CategoryResponse], query: str) -> List[CategoryResponse]:
    """Case-insensitive name substring match; blank query keeps everything"""
    needle = (query or "").strip().casefold()
    if not needle:
        return list(categories)
    return [c for c in categories if needle in c.name.casefold()]


def form_values(category: Optional[CategoryResponse] = None) -> Dict[str, Any]:
    """Initial form values: defaults for add mode, the category for edit mode"""
    if category is None:
        return dict(NEW_CATEGORY_DEFAULTS)
    return {
        "id": category.id,
        "name": category.name,
        "type": CategoryType(category.type).value,
        "bgColor": category.bg_color,
        "fgColor": category.fg_color,
        "icon": category.icon,
    }


def delete_confirmation_message(category: Optional[CategoryResponse] = None) -> str:
    if category is None:
        return "This will permanently delete the category. This action cannot be undone."
    return (
        f'This will permanently delete the category "{category.name}". '
        "This action cannot be undone."
    )


def category_badge(category: CategoryResponse) -> Dict[str, str]:
    """What a card draws: glyph and colors"""
    return {
        "glyph": icon_glyph(category.icon),
        "background": category.bg_color,
        "foreground": category.fg_color,
    }
