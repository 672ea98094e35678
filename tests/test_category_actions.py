"""
Tests for the category action layer

Tests:
1. Result envelopes for every mutation
2. Ownership isolation
3. Default catalog seeding
4. Category list cache reads and invalidation
5. Database work off the event loop
"""

import threading
from datetime import date
from decimal import Decimal

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import IntegrityError

from finance_categories.crud import category as crud_category
from finance_categories.models import Budget, Transaction
from finance_categories.models.category import CategoryType
from finance_categories.models.transaction import TransactionType
from finance_categories.services.category_actions import CategoryActions
from finance_categories.services.defaults import DEFAULT_CATEGORIES


@pytest.mark.unit
class TestCreateCategory:
    """Create action"""

    async def test_create_then_list(self, actions, groceries_payload):
        result = await actions.create(groceries_payload)

        assert result.success is True
        assert result.error is None
        assert result.data.name == "Groceries"
        assert result.data.type == CategoryType.EXPENSE
        assert result.data.bg_color == "#F9FAFB"
        assert result.data.fg_color == "#4B5563"
        assert result.data.icon == "shopping-cart"
        assert result.data.user_id == "user-1"

        names = [c.name for c in await actions.list()]
        assert names == ["Groceries"]

    async def test_empty_name_fails_without_side_effects(self, actions, groceries_payload):
        groceries_payload["name"] = ""

        result = await actions.create(groceries_payload)

        assert result.success is False
        assert result.code == "validation"
        assert "name" in result.field_errors
        assert result.error
        assert await actions.list() == []

    async def test_bad_color_fails(self, actions, groceries_payload):
        groceries_payload["bgColor"] = "#FFF"

        result = await actions.create(groceries_payload)

        assert result.success is False
        assert result.field_errors == {"bgColor": ["Must be a valid hex color"]}

    async def test_duplicate_name_conflict(self, actions, groceries_payload):
        await actions.create(groceries_payload)

        result = await actions.create(groceries_payload)

        assert result.success is False
        assert result.code == "conflict"
        assert result.error == "Category with name 'Groceries' already exists"
        assert len(await actions.list()) == 1

    async def test_same_name_for_other_user(self, actions, other_actions, groceries_payload):
        await actions.create(groceries_payload)

        result = await other_actions.create(groceries_payload)

        assert result.success is True
        assert result.data.user_id == "user-2"


@pytest.mark.unit
class TestUpdateCategory:
    """Update action replaces every attribute"""

    async def test_update_round_trip(self, actions, groceries_payload):
        created = await actions.create(groceries_payload)
        changes = {
            "name": "Food",
            "type": "BOTH",
            "bgColor": "#000000",
            "fgColor": "#FFFFFF",
            "icon": "utensils",
        }

        result = await actions.update(created.data.id, changes)

        assert result.success is True
        assert result.data.id == created.data.id
        assert result.data.name == "Food"
        assert result.data.type == CategoryType.BOTH
        assert result.data.bg_color == "#000000"
        assert result.data.fg_color == "#FFFFFF"
        assert result.data.icon == "utensils"

        fetched = await actions.get(created.data.id)
        assert fetched.data.name == "Food"

    async def test_update_missing(self, actions, groceries_payload):
        result = await actions.update("missing", groceries_payload)

        assert result.success is False
        assert result.code == "not_found"
        assert result.error == "Category not found"

    async def test_update_invalid_keeps_category(self, actions, groceries_payload):
        created = await actions.create(groceries_payload)
        groceries_payload["type"] = "TRANSFER"

        result = await actions.update(created.data.id, groceries_payload)

        assert result.success is False
        assert result.code == "validation"
        assert "type" in result.field_errors
        fetched = await actions.get(created.data.id)
        assert fetched.data.type == CategoryType.EXPENSE

    async def test_update_to_existing_name(self, actions, groceries_payload, salary_payload):
        await actions.create(groceries_payload)
        salary = await actions.create(salary_payload)
        salary_payload["name"] = "Groceries"

        result = await actions.update(salary.data.id, salary_payload)

        assert result.success is False
        assert result.code == "conflict"


@pytest.mark.unit
class TestDeleteCategory:
    """Delete action"""

    async def test_delete_then_list(self, actions, groceries_payload):
        created = await actions.create(groceries_payload)

        result = await actions.delete(created.data.id)

        assert result.success is True
        assert result.data is None
        assert await actions.list() == []

    async def test_delete_missing(self, actions):
        result = await actions.delete("missing")

        assert result.success is False
        assert result.code == "not_found"

    async def test_delete_with_budget_in_use(self, db, user, actions, groceries_payload):
        created = await actions.create(groceries_payload)
        db.add(Budget(
            amount=Decimal("250.00"),
            month=10,
            year=2026,
            user_id=user.id,
            category_id=created.data.id,
        ))
        db.commit()

        result = await actions.delete(created.data.id)

        assert result.success is False
        assert result.code == "in_use"
        assert "budget" in result.error
        assert [c.id for c in await actions.list()] == [created.data.id]

    async def test_delete_keeps_transactions(self, db, user, actions, groceries_payload):
        created = await actions.create(groceries_payload)
        transaction = Transaction(
            amount=Decimal("42.00"),
            type=TransactionType.EXPENSE,
            transaction_date=date(2026, 10, 12),
            user_id=user.id,
            category_id=created.data.id,
        )
        db.add(transaction)
        db.commit()
        transaction_id = transaction.id

        result = await actions.delete(created.data.id)

        assert result.success is True
        assert db.get(Transaction, transaction_id).category_id is None


@pytest.mark.unit
class TestOwnership:
    """Categories are invisible to other users"""

    async def test_other_user_cannot_see(self, actions, other_actions, groceries_payload):
        created = await actions.create(groceries_payload)

        assert await other_actions.list() == []
        result = await other_actions.get(created.data.id)
        assert result.success is False
        assert result.code == "not_found"

    async def test_other_user_cannot_update(self, actions, other_actions, groceries_payload):
        created = await actions.create(groceries_payload)
        groceries_payload["name"] = "Hijacked"

        result = await other_actions.update(created.data.id, groceries_payload)

        assert result.success is False
        assert result.code == "not_found"
        fetched = await actions.get(created.data.id)
        assert fetched.data.name == "Groceries"

    async def test_other_user_cannot_delete(self, actions, other_actions, groceries_payload):
        created = await actions.create(groceries_payload)

        result = await other_actions.delete(created.data.id)

        assert result.success is False
        assert result.code == "not_found"
        assert len(await actions.list()) == 1


@pytest.mark.unit
class TestListFilter:
    """Listing by flow"""

    async def test_filter_by_type(self, actions, groceries_payload, salary_payload):
        await actions.create(groceries_payload)
        await actions.create(salary_payload)
        await actions.create({**groceries_payload, "name": "Refunds", "type": "BOTH"})

        income = await actions.list(CategoryType.INCOME)
        expense = await actions.list(CategoryType.EXPENSE)

        assert [c.name for c in income] == ["Refunds", "Salary"]
        assert [c.name for c in expense] == ["Groceries", "Refunds"]


@pytest.mark.unit
class TestSeedDefaults:
    """Default catalog seeding"""

    async def test_seed_empty_user(self, actions):
        result = await actions.seed_defaults()

        assert result.success is True
        assert result.added == len(DEFAULT_CATEGORIES) == 14
        assert result.skipped == 0
        assert result.nothing_to_add is False
        assert result.message == "Added 14 default categories"

        categories = await actions.list()
        assert len(categories) == 14
        assert sum(1 for c in categories if c.type == CategoryType.INCOME) == 2

    async def test_seed_is_idempotent(self, actions):
        await actions.seed_defaults()

        result = await actions.seed_defaults()

        assert result.success is True
        assert result.added == 0
        assert result.skipped == 14
        assert result.nothing_to_add is True
        assert result.message == "All default categories already exist"
        assert len(await actions.list()) == 14

    async def test_seed_skips_existing_names(self, actions, salary_payload):
        await actions.create({**salary_payload, "bgColor": "#123456"})

        result = await actions.seed_defaults()

        assert result.added == 13
        assert result.skipped == 1
        salary = [c for c in await actions.list() if c.name == "Salary"]
        assert len(salary) == 1
        assert salary[0].bg_color == "#123456"

    async def test_seed_is_per_user(self, actions, other_actions):
        await actions.seed_defaults()

        result = await other_actions.seed_defaults()

        assert result.added == 14

    async def test_seed_retries_after_collision(self, actions, monkeypatch):
        create_many = crud_category.create_many
        calls = []

        def collide_once(**kwargs):
            calls.append(1)
            if len(calls) == 1:
                raise IntegrityError("INSERT INTO categories", {}, Exception("UNIQUE constraint failed"))
            return create_many(**kwargs)

        monkeypatch.setattr(crud_category, "create_many", collide_once)

        result = await actions.seed_defaults()

        assert len(calls) == 2
        assert result.success is True
        assert result.added == 14

    async def test_seed_gives_up_after_repeated_collisions(self, actions, mock_redis, monkeypatch):
        def always_collide(**kwargs):
            raise IntegrityError("INSERT INTO categories", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(crud_category, "create_many", always_collide)

        result = await actions.seed_defaults()

        assert result.success is False
        assert result.code == "unexpected"
        assert result.error == "An unexpected error occurred"
        assert mock_redis.invalidated == []
        assert await actions.list() == []


@pytest.mark.unit
class TestBlockingWork:
    """Session calls run outside the event loop thread"""

    async def test_crud_runs_in_threadpool(self, actions, groceries_payload, monkeypatch):
        create = crud_category.create
        threads = []

        def recording_create(**kwargs):
            threads.append(threading.get_ident())
            return create(**kwargs)

        monkeypatch.setattr(crud_category, "create", recording_create)

        result = await actions.create(groceries_payload)

        assert result.success is True
        assert threads and threads[0] != threading.get_ident()


@pytest.mark.unit
class TestCategoryCache:
    """Cached list reads and invalidation"""

    async def cached_list(self, mock_redis, user_id="user-1"):
        generation = await mock_redis.get_category_generation(user_id)
        return await mock_redis.get_category_list(user_id, generation)

    async def test_list_populates_cache(self, actions, mock_redis, groceries_payload):
        await actions.create(groceries_payload)

        await actions.list()

        cached = await self.cached_list(mock_redis)
        assert [item["name"] for item in cached] == ["Groceries"]
        assert cached[0]["bgColor"] == "#F9FAFB"

    async def test_list_served_from_cache(self, actions, mock_redis, groceries_payload):
        await actions.create(groceries_payload)
        records = await actions.list()
        stale = records[0].model_dump(mode="json", by_alias=True)
        stale["name"] = "From Cache"
        generation = await mock_redis.get_category_generation("user-1")
        await mock_redis.set_category_list("user-1", generation, [stale])

        listed = await actions.list()

        assert [c.name for c in listed] == ["From Cache"]

    async def test_filtered_list_bypasses_cache(self, actions, mock_redis, groceries_payload):
        await actions.create(groceries_payload)
        generation = await mock_redis.get_category_generation("user-1")
        await mock_redis.set_category_list("user-1", generation, [])

        listed = await actions.list(CategoryType.EXPENSE)

        assert [c.name for c in listed] == ["Groceries"]

    async def test_mutations_invalidate(self, actions, mock_redis, groceries_payload):
        created = await actions.create(groceries_payload)
        await actions.update(created.data.id, {**groceries_payload, "name": "Food"})
        await actions.delete(created.data.id)

        assert mock_redis.invalidated == ["user-1", "user-1", "user-1"]
        assert await mock_redis.get_category_generation("user-1") == 3

    async def test_failures_do_not_invalidate(self, actions, mock_redis, groceries_payload):
        await actions.create({**groceries_payload, "name": ""})
        await actions.delete("missing")

        assert mock_redis.invalidated == []

    async def test_seed_invalidates_only_when_added(self, actions, mock_redis):
        await actions.seed_defaults()
        await actions.seed_defaults()

        assert mock_redis.invalidated == ["user-1"]

    async def test_list_after_create_is_fresh(self, actions, groceries_payload, salary_payload):
        await actions.create(groceries_payload)
        assert len(await actions.list()) == 1

        await actions.create(salary_payload)

        assert len(await actions.list()) == 2

    async def test_list_read_before_mutation_is_not_served_after(
        self, db, user, mock_redis, groceries_payload, salary_payload
    ):
        class InterleavingCache(type(mock_redis)):
            """Runs a mutation between the list query and its cache write"""
            before_write = None

            async def set_category_list(self, user_id, generation, categories):
                if self.before_write is not None:
                    mutation, self.before_write = self.before_write, None
                    await mutation()
                await super().set_category_list(user_id, generation, categories)

        cache = InterleavingCache()
        actions = CategoryActions(db=db, user_id=user.id, cache=cache)
        await actions.create(groceries_payload)
        cache.before_write = lambda: actions.create(salary_payload)

        first = await actions.list()
        second = await actions.list()

        assert [c.name for c in first] == ["Groceries"]
        assert [c.name for c in second] == ["Groceries", "Salary"]

    async def test_cache_errors_are_tolerated(self, db, user, groceries_payload):
        class BrokenCache:
            async def get_category_generation(self, user_id):
                raise RedisConnectionError("down")

            async def get_category_list(self, user_id, generation):
                raise RedisConnectionError("down")

            async def set_category_list(self, user_id, generation, categories):
                raise RedisConnectionError("down")

            async def invalidate_category_list(self, user_id):
                raise RedisConnectionError("down")

        actions = CategoryActions(db=db, user_id=user.id, cache=BrokenCache())

        created = await actions.create(groceries_payload)

        assert created.success is True
        assert [c.name for c in await actions.list()] == ["Groceries"]

    async def test_without_cache(self, db, user, groceries_payload):
        actions = CategoryActions(db=db, user_id=user.id)

        await actions.create(groceries_payload)

        assert len(await actions.list()) == 1
