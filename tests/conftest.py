"""Shared fixtures: in-memory database, fake AI provider, hunt builders."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hunthub.core.config import Settings
from hunthub.db.base import Base
from hunthub.schemas.hunt import HuntCreateIn, StepCreateIn
from hunthub.services.ai_validation import AIValidationService
from hunthub.services.hunts import HuntService
from hunthub.services.play import PlayService
from hunthub.services.publishing import PublishingService
from hunthub.services.release_manager import ReleaseManager
from tests.factories import OWNER, FakeProvider


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url="sqlite://",
        storage_root=str(tmp_path / "storage"),
        ai_validation_timeout_ms=300,
    )


@pytest.fixture
def provider_factory():
    return FakeProvider


@pytest.fixture
def fake_ai() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def ai_service(fake_ai, settings) -> AIValidationService:
    return AIValidationService(text_provider=fake_ai, audio_provider=fake_ai, settings=settings)


@pytest.fixture
def hunts(db, settings) -> HuntService:
    return HuntService(db, settings=settings)


@pytest.fixture
def publishing(db, settings) -> PublishingService:
    return PublishingService(db, settings=settings)


@pytest.fixture
def releases(db) -> ReleaseManager:
    return ReleaseManager(db)


@pytest.fixture
def play(db, ai_service, settings) -> PlayService:
    return PlayService(db, ai=ai_service, settings=settings)


@pytest.fixture
def make_hunt(hunts):
    """Create a draft hunt with the given steps; returns the hunt id."""

    def _make(steps: list[StepCreateIn], owner: str = OWNER, name: str = "Old Town Hunt") -> int:
        hunt = hunts.create_hunt(owner, HuntCreateIn(name=name, description="A walk through the old town"))
        for step in steps:
            hunts.create_step(hunt.hunt_id, owner, step)
        return hunt.hunt_id

    return _make


@pytest.fixture
def make_live_hunt(make_hunt, hunts, publishing, releases):
    """Create, publish and release a hunt; returns its HuntOut."""

    def _make(steps: list[StepCreateIn], owner: str = OWNER):
        hunt_id = make_hunt(steps, owner=owner)
        published = publishing.publish_hunt(hunt_id, owner)
        releases.release_hunt(hunt_id, owner, published.published_version)
        return hunts.get_hunt(hunt_id, owner)

    return _make
