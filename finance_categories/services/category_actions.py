"""
Category action layer

Request-level operations for one user. Every mutating action returns a
result envelope instead of raising for expected failures (bad input,
missing category, name conflict, category in use). Only listing raises,
and only on unexpected errors.

Database work runs in the threadpool so blocking session calls stay off
the event loop. Successful mutations invalidate the user's cached
category list.
"""

import logging
from typing import Any, Callable, List, Optional

from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from finance_categories.core.errors import CategoryError, CategoryValidationError
from finance_categories.core.redis_client import RedisClient
from finance_categories.crud import category as crud_category
from finance_categories.models.category import Category, CategoryType
from finance_categories.schemas.category import (
    ActionResult,
    CategoryResponse,
    SeedDefaultsResult,
    parse_category_input,
)
from finance_categories.services.defaults import DEFAULT_CATEGORIES, missing_defaults

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"

# One retry covers a concurrent insert of a default name
SEED_ATTEMPTS = 2


class CategoryActions:
    """
    Category operations bound to a database session and the requesting user

    Usage:
        actions = CategoryActions(db, user_id="...", cache=redis_client)
        result = await actions.create({"name": "Groceries", ...})
        if result.success:
            ...
    """

    def __init__(self, db: Session, user_id: str, cache: Optional[RedisClient] = None):
        self.db = db
        self.user_id = user_id
        self.cache = cache

    # === QUERIES ===

    async def list(self, category_type: Optional[CategoryType] = None) -> List[CategoryResponse]:
        """
        All categories of the user ordered by name

        With ``category_type`` only categories usable for that flow are
        returned (BOTH included). Only the unfiltered list is cached.
        """
        generation = None
        if category_type is None:
            generation = await self._cache_generation()
            cached = await self._read_cache(generation)
            if cached is not None:
                return cached

        records = await run_in_threadpool(self._load_records, category_type)

        if category_type is None:
            await self._write_cache(generation, records)
        return records

    async def get(self, category_id: str) -> ActionResult[CategoryResponse]:
        """Single category owned by the user"""
        db_obj = await self._run(crud_category.get, category_id=category_id, user_id=self.user_id)
        if db_obj is None:
            logger.warning(f"Category {category_id} not found for user {self.user_id}")
            return ActionResult[CategoryResponse].fail("Category not found", code="not_found")
        return ActionResult[CategoryResponse].ok(self._to_record(db_obj))

    # === MUTATIONS ===

    async def create(self, payload: Any) -> ActionResult[CategoryResponse]:
        """Validate input and create a category owned by the user"""
        try:
            category_in = parse_category_input(payload)
            db_obj = await self._run(crud_category.create, obj_in=category_in, user_id=self.user_id)
        except CategoryError as e:
            return await self._expected_failure("create", e)
        except IntegrityError as e:
            return await self._conflict_failure("create", e)
        except SQLAlchemyError as e:
            return await self._unexpected_failure("create", e)

        record = self._to_record(db_obj)
        await self._invalidate()
        logger.info(f"Category created: {record.id} ({record.name}) for user {self.user_id}")
        return ActionResult[CategoryResponse].ok(record)

    async def update(self, category_id: str, payload: Any) -> ActionResult[CategoryResponse]:
        """Replace all attributes of a category owned by the user"""
        try:
            category_in = parse_category_input(payload)
            db_obj = await self._run(
                crud_category.get_or_raise,
                category_id=category_id,
                user_id=self.user_id
            )
            db_obj = await self._run(crud_category.update, db_obj=db_obj, obj_in=category_in)
        except CategoryError as e:
            return await self._expected_failure("update", e)
        except IntegrityError as e:
            return await self._conflict_failure("update", e)
        except SQLAlchemyError as e:
            return await self._unexpected_failure("update", e)

        record = self._to_record(db_obj)
        await self._invalidate()
        logger.info(f"Category updated: {record.id} ({record.name}) for user {self.user_id}")
        return ActionResult[CategoryResponse].ok(record)

    async def delete(self, category_id: str) -> ActionResult[None]:
        """
        Delete a category owned by the user

        Fails with ``in_use`` while budgets reference the category.
        Referencing transactions lose their category.
        """
        try:
            await self._run(crud_category.delete, category_id=category_id, user_id=self.user_id)
        except CategoryError as e:
            return await self._expected_failure("delete", e)
        except IntegrityError as e:
            return await self._conflict_failure("delete", e)
        except SQLAlchemyError as e:
            return await self._unexpected_failure("delete", e)

        await self._invalidate()
        logger.info(f"Category deleted: {category_id} for user {self.user_id}")
        return ActionResult[None].ok()

    async def seed_defaults(self) -> SeedDefaultsResult:
        """
        Add the default catalog, skipping names the user already owns

        Safe to repeat: a second call adds nothing.
        """
        added: Optional[List[Category]] = None
        for attempt in range(1, SEED_ATTEMPTS + 1):
            try:
                added = await run_in_threadpool(self._add_missing_defaults)
                break
            except IntegrityError as e:
                await run_in_threadpool(self.db.rollback)
                logger.warning(
                    f"Default categories collided for user {self.user_id} "
                    f"(attempt {attempt}/{SEED_ATTEMPTS}): {e.orig}"
                )
            except SQLAlchemyError as e:
                await run_in_threadpool(self.db.rollback)
                logger.error(f"Error adding default categories for user {self.user_id}: {e}")
                return SeedDefaultsResult(success=False, error=UNEXPECTED_ERROR, code="unexpected")

        if added is None:
            logger.error(f"Default categories kept colliding for user {self.user_id}")
            return SeedDefaultsResult(success=False, error=UNEXPECTED_ERROR, code="unexpected")

        count = len(added)
        if count:
            await self._invalidate()
            message = f"Added {count} default categories"
        else:
            message = "All default categories already exist"
        logger.info(f"{message} for user {self.user_id}")

        return SeedDefaultsResult(
            success=True,
            added=count,
            skipped=len(DEFAULT_CATEGORIES) - count,
            nothing_to_add=count == 0,
            message=message,
        )

    # === HELPERS ===

    async def _run(self, func: Callable[..., Any], **kwargs: Any) -> Any:
        """Call a CRUD function with this session in the threadpool"""
        return await run_in_threadpool(func, db=self.db, **kwargs)

    def _load_records(self, category_type: Optional[CategoryType]) -> List[CategoryResponse]:
        categories = crud_category.get_multi(
            db=self.db,
            user_id=self.user_id,
            category_type=category_type
        )
        return [self._to_record(c) for c in categories]

    def _add_missing_defaults(self) -> List[Category]:
        existing = crud_category.get_names(db=self.db, user_id=self.user_id)
        return crud_category.create_many(
            db=self.db,
            objs_in=missing_defaults(existing),
            user_id=self.user_id
        )

    @staticmethod
    def _to_record(db_obj: Category) -> CategoryResponse:
        return CategoryResponse.model_validate(db_obj)

    async def _expected_failure(self, action: str, error: CategoryError) -> ActionResult:
        await run_in_threadpool(self.db.rollback)
        logger.warning(f"Category {action} failed for user {self.user_id}: {error.message}")
        field_errors = error.errors if isinstance(error, CategoryValidationError) else None
        return ActionResult.fail(error.message, code=error.code, field_errors=field_errors)

    async def _conflict_failure(self, action: str, error: IntegrityError) -> ActionResult:
        await run_in_threadpool(self.db.rollback)
        logger.warning(f"Category {action} rejected by constraint for user {self.user_id}: {error.orig}")
        return ActionResult.fail("Category conflicts with an existing record", code="conflict")

    async def _unexpected_failure(self, action: str, error: SQLAlchemyError) -> ActionResult:
        await run_in_threadpool(self.db.rollback)
        logger.error(f"Unexpected error during category {action} for user {self.user_id}: {error}")
        return ActionResult.fail(UNEXPECTED_ERROR, code="unexpected")

    async def _cache_generation(self) -> Optional[int]:
        """List generation read before querying; None when the cache is off or down"""
        if self.cache is None:
            return None
        try:
            return await self.cache.get_category_generation(self.user_id)
        except RedisError as e:
            logger.warning(f"Category cache read failed: {e}")
            return None

    async def _read_cache(self, generation: Optional[int]) -> Optional[List[CategoryResponse]]:
        if generation is None:
            return None
        try:
            cached = await self.cache.get_category_list(self.user_id, generation)
        except RedisError as e:
            logger.warning(f"Category cache read failed: {e}")
            return None
        if cached is None:
            return None
        return [CategoryResponse.model_validate(item) for item in cached]

    async def _write_cache(self, generation: Optional[int], records: List[CategoryResponse]) -> None:
        if generation is None:
            return
        try:
            await self.cache.set_category_list(
                self.user_id,
                generation,
                [r.model_dump(mode="json", by_alias=True) for r in records]
            )
        except RedisError as e:
            logger.warning(f"Category cache write failed: {e}")

    async def _invalidate(self) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.invalidate_category_list(self.user_id)
        except RedisError as e:
            logger.warning(f"Category cache invalidation failed: {e}")
