"""
Category model for income/expense categorization
"""
from typing import List, TYPE_CHECKING
from enum import Enum

from sqlalchemy import String, ForeignKey, Index, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_categories.db.base import Base, TimestampMixin, generate_id

if TYPE_CHECKING:
    from finance_categories.models.user import User
    from finance_categories.models.transaction import Transaction
    from finance_categories.models.budget import Budget


class CategoryType(str, Enum):
    """Category type enum"""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    BOTH = "BOTH"


class Category(Base, TimestampMixin):
    """
    Category model

    Owned by exactly one user. Transactions reference it optionally,
    budgets mandatorily.
    """
    __tablename__ = "categories"

    # Primary key
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)

    # Category info
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[CategoryType] = mapped_column(SQLEnum(CategoryType), nullable=False)

    # Visual customization
    bg_color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        comment="Background hex color #RRGGBB"
    )
    fg_color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        comment="Foreground hex color #RRGGBB"
    )
    icon: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Icon key"
    )

    # Ownership
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="categories")

    transactions: Mapped[List["Transaction"]] = relationship(
        "Transaction",
        back_populates="category",
        passive_deletes=True
    )

    budgets: Mapped[List["Budget"]] = relationship(
        "Budget",
        back_populates="category",
        passive_deletes="all"
    )

    # Indexes
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_category_user_name"),
        Index("idx_category_type", "type"),
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, type={self.type})>"
