import os
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator
from unittest.mock import MagicMock

# Override settings for tests before importing app modules
TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["S3_BUCKET"] = "test-bucket"
os.environ["S3_REGION"] = "us-east-1"
os.environ["S3_PUBLIC_BASE_URL"] = "https://cdn.example.com"
os.environ["DEFAULT_TITLE_VALUE"] = "5"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.dependencies import get_file_storage
from app.main import app
from app.models import BaseTitle, DrawItems, Edition, FisicalTitle, Title, User, Winner
from app.models.database import Base, get_db
from app.services.storage_service import FileStorageService

# Create test database engine
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(test_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db_session = TestSessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def s3_client() -> MagicMock:
    """boto3 S3 client double."""
    return MagicMock()


@pytest.fixture
def storage(s3_client: MagicMock) -> FileStorageService:
    return FileStorageService(client=s3_client)


@pytest.fixture(scope="function")
def client(db: Session, storage: FileStorageService) -> Generator[TestClient, None, None]:
    """Create a test client with database and storage overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user."""
    user = User(name="Test User", email="test@example.com", balance=Decimal("100"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def base_titles(db: Session) -> list[BaseTitle]:
    """Catalog T0001..T0010."""
    titles = [
        BaseTitle(
            name=f"T{number:04d}",
            dozens=[f"{number:02d}", f"{number + 10:02d}", f"{number + 20:02d}"],
            bar_code=f"BAR{number:04d}",
            qr_code=f"QR{number:04d}",
            chances=2,
        )
        for number in range(1, 11)
    ]
    db.add_all(titles)
    db.commit()
    return titles


def make_edition(db: Session, name: str = "Edition 1", status: str = "OPEN", order: int | None = 1) -> Edition:
    edition = Edition(
        name=name,
        draw_date=datetime(2026, 12, 24, 20, 0, tzinfo=timezone.utc),
        order=order,
        status=status,
    )
    db.add(edition)
    db.commit()
    db.refresh(edition)
    return edition


def make_title(db: Session, edition: Edition | None, name: str, value: int = 5, **extra) -> Title:
    title = Title(
        edition_id=edition.id if edition else None,
        name=name,
        dozens=["01", "02"],
        bar_code=f"BAR-{name}",
        qr_code=f"QR-{name}",
        chances=1,
        value=value,
        **extra,
    )
    db.add(title)
    db.commit()
    db.refresh(title)
    return title


@pytest.fixture
def test_edition(db: Session) -> Edition:
    return make_edition(db)


@pytest.fixture
def closed_edition(db: Session) -> Edition:
    return make_edition(db, name="Closed Edition", status="CLOSED", order=2)


@pytest.fixture
def edition_with_draw(db: Session, test_edition: Edition) -> Edition:
    """Open edition with a draw item, a winner and a paper title."""
    draw_item = DrawItems(edition_id=test_edition.id, name="Car", description="0 km car")
    db.add(draw_item)
    db.flush()
    db.add(Winner(edition_id=test_edition.id, draw_item_id=draw_item.id, title_name="T0001", winner_name="Ana"))
    db.add(FisicalTitle(edition_id=test_edition.id, name="P0001", value=5, seller_name="Kiosk 3"))
    db.commit()
    db.refresh(test_edition)
    return test_edition


@pytest.fixture
def edition_factory(db: Session):
    return lambda **kwargs: make_edition(db, **kwargs)


@pytest.fixture
def title_factory(db: Session):
    return lambda edition, name, **kwargs: make_title(db, edition, name, **kwargs)
