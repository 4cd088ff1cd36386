import os
from typing import Callable, Generator, Optional

# Settings are read at import time
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("APP_DATABASE__DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import marketplace.models  # noqa: F401
from marketplace.db.base import Base
from marketplace.db.session import get_db
from marketplace.domain.unit_of_work import UnitOfWork
from marketplace.main import app
from marketplace.models.category_model import Category


# One shared in-memory connection so the app and the test see the same data
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def uow(db_session: Session) -> UnitOfWork:
    return UnitOfWork(db_session)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client whose requests use the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_category(db_session: Session) -> Callable[..., Category]:
    """Insert a category directly, bypassing service validation."""

    def _make(
        name: str,
        parent: Optional[Category] = None,
        sort_order: int = 0,
        is_active: bool = True,
        slug: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Category:
        category = Category(
            name=name,
            slug=slug or name.lower().replace(" ", "-"),
            description=description,
            parent_id=parent.id if parent else None,
            sort_order=sort_order,
            is_active=is_active,
        )
        db_session.add(category)
        db_session.commit()
        return category

    return _make


@pytest.fixture
def sample_tree(make_category) -> dict:
    """
    home
    ├── cleaning
    │   ├── deep-cleaning
    │   │   └── carpets
    │   └── windows
    └── garden
    events
    └── catering
    """
    home = make_category("Home", sort_order=1)
    cleaning = make_category("Cleaning", parent=home, sort_order=1)
    deep = make_category("Deep Cleaning", parent=cleaning, sort_order=1)
    carpets = make_category("Carpets", parent=deep)
    windows = make_category("Windows", parent=cleaning, sort_order=2)
    garden = make_category("Garden", parent=home, sort_order=2)
    events = make_category("Events", sort_order=2)
    catering = make_category("Catering", parent=events)
    return {
        "home": home,
        "cleaning": cleaning,
        "deep": deep,
        "carpets": carpets,
        "windows": windows,
        "garden": garden,
        "events": events,
        "catering": catering,
    }
