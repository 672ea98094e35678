"""
CRUD operations for User model
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finance_categories.models.user import User

logger = logging.getLogger(__name__)


class CRUDUser:
    """CRUD operations for User"""

    def get(self, db: Session, user_id: str) -> Optional[User]:
        """Get user by ID"""
        return db.get(User, user_id)

    def create(
        self,
        db: Session,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        name: Optional[str] = None
    ) -> User:
        """Create user, keeping the caller's ID when given"""
        user = User(id=user_id, email=email, name=name) if user_id else User(email=email, name=name)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def get_or_create(
        self,
        db: Session,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None
    ) -> User:
        """
        Get user, provisioning it on first use

        A concurrent first request for the same ID wins the insert;
        the loser rolls back and reads that row.

        Raises:
            IntegrityError: if the email belongs to another user
        """
        user = self.get(db, user_id)
        if user is not None:
            return user

        try:
            user = self.create(db, user_id=user_id, email=email, name=name)
        except IntegrityError:
            db.rollback()
            user = self.get(db, user_id)
            if user is None:
                raise
            return user

        logger.info(f"User provisioned: {user.id}")
        return user


user = CRUDUser()
