"""
CRUD operations for Category model
"""
from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.orm import Session

from finance_categories.core.errors import (
    CategoryConflictError,
    CategoryInUseError,
    CategoryNotFoundError,
)
from finance_categories.models.budget import Budget
from finance_categories.models.category import Category, CategoryType
from finance_categories.models.transaction import Transaction
from finance_categories.schemas.category import CategoryInput


def _attributes(obj_in: CategoryInput) -> Dict[str, Any]:
    data = obj_in.model_dump(exclude={"id"})
    data["type"] = CategoryType(data["type"])
    return data


class CRUDCategory:
    """CRUD operations for Category, always scoped to the owning user"""

    def get(self, db: Session, category_id: str, user_id: str) -> Optional[Category]:
        """Get category by ID for specific user"""
        return db.query(Category).filter(
            and_(
                Category.id == category_id,
                Category.user_id == user_id
            )
        ).first()

    def get_or_raise(self, db: Session, category_id: str, user_id: str) -> Category:
        category = self.get(db=db, category_id=category_id, user_id=user_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    def get_multi(
        self,
        db: Session,
        user_id: str,
        category_type: Optional[CategoryType] = None
    ) -> List[Category]:
        """
        Get categories for user ordered by name

        Filtering by INCOME or EXPENSE also returns BOTH categories,
        since those classify either flow.
        """
        query = db.query(Category).filter(Category.user_id == user_id)

        if category_type is not None:
            category_type = CategoryType(category_type)
            if category_type == CategoryType.BOTH:
                query = query.filter(Category.type == CategoryType.BOTH)
            else:
                query = query.filter(
                    or_(Category.type == category_type, Category.type == CategoryType.BOTH)
                )

        return query.order_by(Category.name, Category.id).all()

    def get_by_name(
        self,
        db: Session,
        name: str,
        user_id: str
    ) -> Optional[Category]:
        """Get category by name for specific user"""
        return db.query(Category).filter(
            and_(
                Category.name == name,
                Category.user_id == user_id
            )
        ).first()

    def get_names(self, db: Session, user_id: str) -> Set[str]:
        """All category names owned by user"""
        rows = db.execute(select(Category.name).where(Category.user_id == user_id))
        return {name for (name,) in rows}

    def create(self, db: Session, obj_in: CategoryInput, user_id: str) -> Category:
        """Create new category for user"""
        if self.get_by_name(db=db, name=obj_in.name, user_id=user_id):
            raise CategoryConflictError(obj_in.name)

        db_obj = Category(
            **_attributes(obj_in),
            user_id=user_id
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def create_many(
        self,
        db: Session,
        objs_in: Iterable[CategoryInput],
        user_id: str
    ) -> List[Category]:
        """Insert several categories in one transaction"""
        db_objs = [
            Category(**_attributes(obj_in), user_id=user_id)
            for obj_in in objs_in
        ]
        if not db_objs:
            return []
        db.add_all(db_objs)
        db.commit()
        for db_obj in db_objs:
            db.refresh(db_obj)
        return db_objs

    def update(
        self,
        db: Session,
        db_obj: Category,
        obj_in: CategoryInput
    ) -> Category:
        """Replace all attributes of category"""
        if obj_in.name != db_obj.name:
            existing = self.get_by_name(db=db, name=obj_in.name, user_id=db_obj.user_id)
            if existing:
                raise CategoryConflictError(obj_in.name)

        for field, value in _attributes(obj_in).items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def count_budgets(self, db: Session, category_id: str) -> int:
        return db.scalar(
            select(func.count()).select_from(Budget).where(Budget.category_id == category_id)
        )

    def delete(self, db: Session, category_id: str, user_id: str) -> None:
        """
        Delete category

        Refused while budgets reference it; transactions that reference it
        are kept and lose their category. Both happen in one commit.
        """
        db_obj = self.get_or_raise(db=db, category_id=category_id, user_id=user_id)

        budget_count = self.count_budgets(db=db, category_id=db_obj.id)
        if budget_count:
            raise CategoryInUseError(db_obj.id, budget_count)

        db.execute(
            update(Transaction)
            .where(Transaction.category_id == db_obj.id)
            .values(category_id=None)
            .execution_options(synchronize_session="fetch")
        )
        db.delete(db_obj)
        db.commit()


# Create instance
category = CRUDCategory()
