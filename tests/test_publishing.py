import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from hunthub.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from hunthub.models.hunt import Hunt
from hunthub.models.hunt_version import HuntVersion
from hunthub.models.step import Step
from hunthub.services import publishing as publishing_module
from hunthub.services.authorization import AuthorizationService, HuntPermission
from hunthub.services.release_manager import ReleaseManager
from tests.factories import OWNER, clue_step, location_step, quiz_choice_step


def _steps(db, hunt_id, version):
    return db.scalars(
        select(Step).where(Step.hunt_id == hunt_id, Step.hunt_version == version).order_by(Step.step_id)
    ).all()


def test_publish_freezes_draft_and_forks_new_one(db, make_hunt, publishing):
    hunt_id = make_hunt([clue_step(), quiz_choice_step(), location_step()])

    result = publishing.publish_hunt(hunt_id, OWNER)

    assert result.published_version == 1
    assert result.new_draft_version == 2
    assert result.live_version is None

    v1 = db.scalar(select(HuntVersion).where(HuntVersion.hunt_id == hunt_id, HuntVersion.version == 1))
    v2 = db.scalar(select(HuntVersion).where(HuntVersion.hunt_id == hunt_id, HuntVersion.version == 2))
    assert v1.is_published and v1.published_by == OWNER
    assert not v2.is_published
    assert v2.step_order == v1.step_order

    hunt = db.scalar(select(Hunt).where(Hunt.hunt_id == hunt_id))
    assert hunt.latest_version == 2
    assert hunt.live_version is None


def test_publish_preserves_step_ids(db, make_hunt, publishing):
    hunt_id = make_hunt([clue_step(), quiz_choice_step(), location_step()])

    publishing.publish_hunt(hunt_id, OWNER)

    source = _steps(db, hunt_id, 1)
    clones = _steps(db, hunt_id, 2)
    assert [s.step_id for s in clones] == [s.step_id for s in source]
    assert [s.type for s in clones] == [s.type for s in source]
    assert [s.challenge for s in clones] == [s.challenge for s in source]


def test_second_publish_with_stale_token_conflicts(db, make_hunt, publishing):
    hunt_id = make_hunt([clue_step()])
    token = db.scalar(
        select(HuntVersion.updated_at).where(HuntVersion.hunt_id == hunt_id, HuntVersion.version == 1)
    )

    publishing.publish_hunt(hunt_id, OWNER, expected_updated_at=token)
    with pytest.raises(ConflictError):
        publishing.publish_hunt(hunt_id, OWNER, expected_updated_at=token)

    hunt = db.scalar(select(Hunt).where(Hunt.hunt_id == hunt_id))
    assert hunt.latest_version == 2
    published = db.scalars(
        select(HuntVersion.version).where(HuntVersion.hunt_id == hunt_id, HuntVersion.is_published == True)  # noqa: E712
    ).all()
    assert published == [1]


def test_publish_without_steps_is_rejected(make_hunt, publishing):
    hunt_id = make_hunt([])
    with pytest.raises(ValidationError) as exc:
        publishing.publish_hunt(hunt_id, OWNER)
    assert "no steps" in exc.value.message


def test_publish_requires_admin(db, make_hunt, publishing):
    hunt_id = make_hunt([clue_step()])
    AuthorizationService(db).share_hunt(hunt_id, OWNER, "viewer", HuntPermission.VIEW)

    with pytest.raises(ForbiddenError):
        publishing.publish_hunt(hunt_id, "viewer")
    with pytest.raises(ForbiddenError):
        publishing.publish_hunt(hunt_id, "stranger")
    with pytest.raises(NotFoundError):
        publishing.publish_hunt(9999, OWNER)


def test_collaborator_with_admin_can_publish(db, make_hunt, publishing):
    hunt_id = make_hunt([clue_step()])
    AuthorizationService(db).share_hunt(hunt_id, OWNER, "editor", HuntPermission.ADMIN)

    assert publishing.publish_hunt(hunt_id, "editor").published_version == 1


def test_pruning_keeps_newest_ten_and_the_live_version(db, make_hunt, publishing, releases):
    hunt_id = make_hunt([clue_step()])
    publishing.publish_hunt(hunt_id, OWNER)
    releases.release_hunt(hunt_id, OWNER, version=1)

    # v2..v11: eleven published versions, v1 is outside the window but live
    for _ in range(10):
        assert publishing.publish_hunt(hunt_id, OWNER).pruned_versions == []

    result = publishing.publish_hunt(hunt_id, OWNER)
    assert result.published_version == 12
    assert result.pruned_versions == [2]

    remaining = db.scalars(
        select(HuntVersion.version).where(HuntVersion.hunt_id == hunt_id).order_by(HuntVersion.version)
    ).all()
    assert remaining == [1, *range(3, 14)]
    assert _steps(db, hunt_id, 2) == []
    assert len(_steps(db, hunt_id, 1)) == 1


def test_list_versions_marks_live_and_published(make_hunt, publishing, releases):
    hunt_id = make_hunt([clue_step(), clue_step()])
    publishing.publish_hunt(hunt_id, OWNER)
    publishing.publish_hunt(hunt_id, OWNER)
    releases.release_hunt(hunt_id, OWNER, version=1)

    versions = publishing.list_versions(hunt_id, OWNER)

    assert [v.version for v in versions] == [3, 2, 1]
    assert [v.is_published for v in versions] == [False, True, True]
    assert [v.is_live for v in versions] == [False, False, True]
    assert all(v.step_count == 2 for v in versions)


def test_release_during_publish_keeps_live_version(db, engine, make_hunt, publishing, monkeypatch):
    hunt_id = make_hunt([clue_step()])
    for _ in range(10):
        publishing.publish_hunt(hunt_id, OWNER)  # v1..v10 published, v11 draft

    original_clone = publishing_module.clone_steps
    released = []

    def clone_after_concurrent_release(*args, **kwargs):
        if not released:
            other = Session(bind=engine)
            try:
                released.append(ReleaseManager(other).release_hunt(hunt_id, OWNER, version=1))
            finally:
                other.close()
        return original_clone(*args, **kwargs)

    monkeypatch.setattr(publishing_module, "clone_steps", clone_after_concurrent_release)

    with pytest.raises(ConflictError):
        publishing.publish_hunt(hunt_id, OWNER)

    hunt = db.scalar(select(Hunt).where(Hunt.hunt_id == hunt_id))
    assert hunt.live_version == 1
    assert hunt.latest_version == 11
    assert len(_steps(db, hunt_id, 1)) == 1

    # the retry sees the new live pointer and spares it
    retry = publishing.publish_hunt(hunt_id, OWNER)
    assert retry.published_version == 11
    assert retry.live_version == 1
    assert retry.pruned_versions == []
    assert len(_steps(db, hunt_id, 1)) == 1
