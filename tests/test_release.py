import pytest
from sqlalchemy import select

from hunthub.core.errors import ConflictError, ForbiddenError, ValidationError
from hunthub.models.hunt import Hunt
from hunthub.models.hunt_version import HuntVersion
from hunthub.models.step import Step
from tests.factories import OWNER, clue_step


@pytest.fixture
def published_hunt(make_hunt, publishing):
    hunt_id = make_hunt([clue_step()])
    publishing.publish_hunt(hunt_id, OWNER)
    publishing.publish_hunt(hunt_id, OWNER)
    return hunt_id  # v1, v2 published; v3 draft


def test_release_defaults_to_newest_published(published_hunt, releases):
    result = releases.release_hunt(published_hunt, OWNER)

    assert result.live_version == 2
    assert result.previous_live_version is None
    assert result.released_by == OWNER


def test_release_with_stale_live_version_conflicts(published_hunt, releases):
    releases.release_hunt(published_hunt, OWNER, version=1, current_live_version=None)

    with pytest.raises(ConflictError) as exc:
        releases.release_hunt(published_hunt, OWNER, version=1, current_live_version=None)
    assert "current liveVersion" in exc.value.message

    # same call with the fresh token is an idempotent re-release
    again = releases.release_hunt(published_hunt, OWNER, version=1, current_live_version=1)
    assert again.live_version == 1
    assert again.previous_live_version == 1


def test_rollback_to_older_version(published_hunt, releases):
    releases.release_hunt(published_hunt, OWNER, version=2, current_live_version=None)
    result = releases.release_hunt(published_hunt, OWNER, version=1, current_live_version=2)

    assert result.previous_live_version == 2
    assert result.live_version == 1


def test_release_rejects_unpublished_version(published_hunt, releases):
    with pytest.raises(ValidationError) as exc:
        releases.release_hunt(published_hunt, OWNER, version=3)
    assert "not published" in exc.value.message


def test_release_without_published_versions(make_hunt, releases):
    hunt_id = make_hunt([clue_step()])
    with pytest.raises(ValidationError):
        releases.release_hunt(hunt_id, OWNER)


def test_take_offline(db, published_hunt, releases):
    releases.release_hunt(published_hunt, OWNER, version=2)

    with pytest.raises(ConflictError):
        releases.take_offline(published_hunt, OWNER, current_live_version=1)

    result = releases.take_offline(published_hunt, OWNER, current_live_version=2)
    assert result.previous_live_version == 2
    assert result.live_version is None

    hunt = db.scalar(select(Hunt).where(Hunt.hunt_id == published_hunt))
    assert hunt.live_version is None
    assert hunt.released_at is None

    with pytest.raises(ValidationError):
        releases.take_offline(published_hunt, OWNER, current_live_version=2)


def test_release_requires_admin(published_hunt, releases):
    with pytest.raises(ForbiddenError):
        releases.release_hunt(published_hunt, "someone-else")


def test_live_hunt_cannot_be_deleted_until_offline(db, published_hunt, releases, hunts):
    releases.release_hunt(published_hunt, OWNER, version=2)

    with pytest.raises(ConflictError):
        hunts.delete_hunt(published_hunt, OWNER)

    releases.take_offline(published_hunt, OWNER, current_live_version=2)
    hunts.delete_hunt(published_hunt, OWNER)

    hunt = db.scalar(select(Hunt).where(Hunt.hunt_id == published_hunt))
    assert hunt.is_deleted
    assert db.scalars(select(HuntVersion).where(HuntVersion.hunt_id == published_hunt)).all() == []
    assert db.scalars(select(Step).where(Step.hunt_id == published_hunt)).all() == []


def test_only_owner_can_delete(published_hunt, hunts):
    with pytest.raises(ForbiddenError):
        hunts.delete_hunt(published_hunt, "someone-else")
