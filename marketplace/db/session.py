from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from marketplace.core.config import settings


class DBSessionManager:

    def __init__(self, database_url: str | None = None) -> None:
        db_settings = settings.database
        url = database_url or db_settings.database_url
        if url.startswith("sqlite"):
            # SQLite pools do not take size/overflow arguments
            self.engine = create_engine(
                url, future=True, connect_args={"check_same_thread": False}
            )
        else:
            self.engine = create_engine(
                url,
                future=True,
                pool_size=db_settings.pool_size,
                max_overflow=db_settings.max_overflow,
                pool_timeout=db_settings.pool_timeout,
                pool_recycle=db_settings.pool_recycle,
                pool_pre_ping=db_settings.pool_pre_ping,
            )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,
        )

    def get_session(self) -> Generator[Session, None, None]:
        session: Session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()


db_manager = DBSessionManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one session per request."""
    yield from db_manager.get_session()
