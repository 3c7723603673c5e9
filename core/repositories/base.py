"""Shared plumbing for repositories."""

from typing import Generic, TypeVar

from sqlalchemy import exists
from sqlalchemy.orm import Session

from core.db import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    One repository per aggregate root, bound to a request's session.

    Subclasses set ``model``. Writes are flushed so generated ids are
    available, but committing is left to the caller.

    Usage:
        class UserRepository(BaseRepository[User]):
            model = User
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: int) -> T | None:
        return self.session.get(self.model, id)

    def add(self, instance: T) -> T:
        """Stage ``instance`` and flush it."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def exists_where(self, **filters) -> bool:
        """True when a row matches every column=value filter."""
        clauses = [getattr(self.model, key) == value for key, value in filters.items()]
        return bool(self.session.query(exists().where(*clauses)).scalar())
