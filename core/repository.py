"""Repositories for profile and weight-log persistence.

Wraps the handful of queries the services need so endpoint and service code
never builds SQLAlchemy queries inline.
"""

from datetime import date
from sqlalchemy.orm import Session
from typing import TypeVar, Generic, Type, Optional, List, Any
from database.models import Base, Profile, WeightLog

T = TypeVar('T', bound=Base)


class BaseRepository(Generic[T]):
    """Generic repository bound to one model and one session."""

    def __init__(self, model: Type[T], session: Session):
        self.model = model
        self.session = session

    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an object by its primary key, or None."""
        return self.session.get(self.model, id)

    def add(self, obj: T) -> T:
        """Add, commit and refresh a new object."""
        return save(self.session, obj)

    def update(self, obj: T) -> T:
        """Commit pending changes to an existing object and refresh it."""
        self.session.commit()
        self.session.refresh(obj)
        return obj


class ProfileRepository(BaseRepository[Profile]):

    def __init__(self, session: Session):
        super().__init__(Profile, session)

    def get_by_email(self, email: str) -> Optional[Profile]:
        return self.session.query(Profile).filter(Profile.email == email).first()


class WeightLogRepository(BaseRepository[WeightLog]):

    def __init__(self, session: Session):
        super().__init__(WeightLog, session)

    def get_for_date(self, profile_id: int, on: date) -> Optional[WeightLog]:
        """Return the entry a profile logged on a given calendar date."""
        return (
            self.session.query(WeightLog)
            .filter(WeightLog.profile_id == profile_id, WeightLog.date == on)
            .first()
        )

    def list_for_profile(self, profile_id: int, since: Optional[date] = None) -> List[WeightLog]:
        """Return a profile's entries in ascending date order.

        Args:
            profile_id: Owner of the entries.
            since: Optional inclusive lower bound on the entry date.
        """
        query = self.session.query(WeightLog).filter(WeightLog.profile_id == profile_id)
        if since is not None:
            query = query.filter(WeightLog.date >= since)
        return query.order_by(WeightLog.date.asc()).all()


def save(session: Session, obj: Base) -> Base:
    """Convenience function to add, commit and refresh an object.

    Args:
        session: Database session.
        obj: Model instance to persist.

    Returns:
        The persisted object with refreshed attributes.
    """
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj
