from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from sqlalchemy.orm import Session

from marketplace.domain.repositories.category_repository import CategoryRepository
from marketplace.domain.repositories.listing_repository import ListingRepository


class IUnitOfWork(ABC):
    categories: CategoryRepository
    listings: ListingRepository

    @abstractmethod
    def __enter__(self): ...
    @abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb): ...
    @abstractmethod
    def commit(self): ...
    @abstractmethod
    def rollback(self): ...
    @abstractmethod
    def flush(self): ...


class UnitOfWork(AbstractContextManager, IUnitOfWork):
    """Coordinates repositories & transaction boundaries."""

    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepository(db)
        self.listings = ListingRepository(db)

    # ---- context-manager API -----------------------------------------
    def __enter__(self):
        return self

    def __exit__(self, exc_type, *_):
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    # ---- public -------------------------------------------------------
    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def flush(self):
        self.db.flush()
