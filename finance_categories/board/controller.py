"""
Category board controller

Drives the category management screen: loads the list through the
query cache, filters and groups it, runs the add/edit sheet and the
delete confirmation, and turns every action result into a notification.

After a successful mutation the list is invalidated and refetched
before the open dialog closes. A failed action leaves its dialog open.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from finance_categories.board.cache import QueryCache
from finance_categories.board.presentation import (
    CategoryGroups,
    delete_confirmation_message,
    filter_categories,
    form_values,
    group_categories,
)
from finance_categories.board.state import Dialog, DialogMode, Notification, RequestStatus
from finance_categories.core.errors import CategoryValidationError
from finance_categories.schemas.category import CategoryResponse, parse_category_input
from finance_categories.services.category_actions import UNEXPECTED_ERROR

logger = logging.getLogger(__name__)

CATEGORY_LIST_KEY = "categories"

BOARD_ACTIONS = ("load", "save", "delete", "seed")


class CategoryBoard:
    """
    Category management screen state

    ``actions`` is anything with the category action contract:
    ``CategoryActions`` in-process or ``HttpCategoryActions`` remotely.
    """

    def __init__(self, actions, cache: Optional[QueryCache] = None):
        self.actions = actions
        self.cache = cache or QueryCache()
        self.cache.register(CATEGORY_LIST_KEY, self.actions.list)

        self.search = ""
        self.dialog: Optional[Dialog] = None
        self.notifications: List[Notification] = []
        self.status: Dict[str, RequestStatus] = {name: RequestStatus.IDLE for name in BOARD_ACTIONS}

    # === LIST ===

    @property
    def categories(self) -> List[CategoryResponse]:
        return self.cache.peek(CATEGORY_LIST_KEY) or []

    async def load(self) -> List[CategoryResponse]:
        """Fetch the list unless a fresh copy is cached"""
        self.status["load"] = RequestStatus.PENDING
        try:
            categories = await self.cache.get(CATEGORY_LIST_KEY)
        except Exception as e:
            logger.exception(f"Failed to load categories: {e}")
            self.status["load"] = RequestStatus.ERROR
            self._notify("error", "Error", "Failed to load categories")
            return []
        self.status["load"] = RequestStatus.SUCCESS
        return categories

    def set_search(self, query: str) -> None:
        self.search = query

    def visible(self) -> CategoryGroups:
        """Current list filtered by the search box and grouped by flow"""
        return group_categories(filter_categories(self.categories, self.search))

    # === DIALOGS ===

    def open_create(self) -> Dialog:
        self.dialog = Dialog(mode=DialogMode.CREATE, values=form_values())
        return self.dialog

    def open_edit(self, category: CategoryResponse) -> Dialog:
        self.dialog = Dialog(mode=DialogMode.EDIT, category=category, values=form_values(category))
        return self.dialog

    def open_delete(self, category: CategoryResponse) -> Dialog:
        self.dialog = Dialog(
            mode=DialogMode.DELETE,
            category=category,
            message=delete_confirmation_message(category)
        )
        return self.dialog

    def close_dialog(self) -> None:
        self.dialog = None

    def is_pending(self, action: str) -> bool:
        return self.status[action] == RequestStatus.PENDING

    # === MUTATIONS ===

    async def submit(self, values: Optional[Dict[str, Any]] = None) -> bool:
        """
        Submit the add/edit sheet

        Values are validated locally first; field errors stay on the
        dialog and nothing is sent.
        """
        dialog = self.dialog
        if dialog is None or dialog.mode not in (DialogMode.CREATE, DialogMode.EDIT):
            raise RuntimeError("No category form is open")

        if values:
            dialog.values.update(values)

        try:
            category_in = parse_category_input(dialog.values)
        except CategoryValidationError as e:
            dialog.errors = e.errors
            return False
        dialog.errors = {}

        payload = category_in.model_dump(by_alias=True, exclude={"id"})
        if dialog.mode == DialogMode.EDIT:
            category_id = dialog.category.id
            return await self._mutate(
                "save",
                lambda: self.actions.update(category_id, payload),
                "Category updated"
            )
        return await self._mutate(
            "save",
            lambda: self.actions.create(payload),
            "Category created"
        )

    async def confirm_delete(self) -> bool:
        """Second step of deletion; the dialog stays open if it fails"""
        dialog = self.dialog
        if dialog is None or dialog.mode != DialogMode.DELETE:
            raise RuntimeError("No delete confirmation is open")

        category_id = dialog.category.id
        return await self._mutate(
            "delete",
            lambda: self.actions.delete(category_id),
            "Category deleted"
        )

    async def load_defaults(self) -> bool:
        """Add the default catalog; reports how many were added"""
        return await self._mutate(
            "seed",
            self.actions.seed_defaults,
            "Default categories",
            close_dialog=False
        )

    # === HELPERS ===

    async def _mutate(
        self,
        action: str,
        call: Callable[[], Awaitable[Any]],
        success_title: str,
        close_dialog: bool = True
    ) -> bool:
        if self.is_pending(action):
            logger.debug(f"Ignoring {action}: request already pending")
            return False

        self.status[action] = RequestStatus.PENDING
        try:
            result = await call()
        except Exception as e:
            logger.exception(f"Unexpected error during {action}: {e}")
            self.status[action] = RequestStatus.ERROR
            self._notify("error", "Error", UNEXPECTED_ERROR)
            return False

        if not result.success:
            self.status[action] = RequestStatus.ERROR
            field_errors = getattr(result, "field_errors", None)
            if field_errors and self.dialog is not None:
                self.dialog.errors = field_errors
            self._notify("error", "Error", result.error or UNEXPECTED_ERROR)
            return False

        await self._refresh()
        self.status[action] = RequestStatus.SUCCESS
        if close_dialog:
            self.close_dialog()

        message = getattr(result, "message", None) or success_title
        level = "info" if getattr(result, "nothing_to_add", False) else "success"
        self._notify(level, success_title, message)
        return True

    async def _refresh(self) -> None:
        self.cache.invalidate(CATEGORY_LIST_KEY)
        try:
            await self.cache.refetch(CATEGORY_LIST_KEY)
        except Exception as e:
            # Key stays stale, so the next load fetches again
            logger.exception(f"Failed to refresh categories: {e}")
            self._notify("error", "Error", "Failed to refresh categories")

    def _notify(self, level: str, title: str, message: str) -> None:
        self.notifications.append(Notification(level=level, title=title, message=message))
