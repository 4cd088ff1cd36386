"""Create all tables on the configured database.

``python -m marketplace.db.init_db`` creates the tables; add ``--seed`` to
load the starter category tree into an empty store as well.
"""

import sys

import marketplace.models  # noqa: F401  registers every table on Base.metadata
from marketplace.db.base import Base
from marketplace.db.session import db_manager
from marketplace.utils.logger import get_logger

logger = get_logger("init_db")


def init_db() -> None:
    Base.metadata.create_all(bind=db_manager.engine)
    logger.info(f"Tables ready: {sorted(Base.metadata.tables)}")


def seed_categories() -> int:
    from marketplace.domain.unit_of_work import UnitOfWork
    from marketplace.services.category_service import CategoryService

    session = db_manager.SessionLocal()
    try:
        return CategoryService(UnitOfWork(session)).seed()
    finally:
        session.close()


if __name__ == "__main__":
    init_db()
    if "--seed" in sys.argv[1:]:
        seed_categories()
