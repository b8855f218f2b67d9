import random
import uuid
from datetime import timedelta

import pytest
from sqlalchemy import select, update

from hunthub.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from hunthub.db.session import utcnow
from hunthub.models.hunt import AccessMode
from hunthub.models.progress import HuntProgressStatus, Progress, StepProgress
from hunthub.models.submission import Submission
from hunthub.schemas.answer import AnswerPayload, AnswerType
from hunthub.schemas.hunt import HuntUpdateIn
from hunthub.services.ai_validation import FALLBACK_FEEDBACK, AIValidationService
from hunthub.services.authorization import AuthorizationService, HuntPermission
from hunthub.services.invitations import PlayerInvitationService
from hunthub.services.play import PlayService
from hunthub.services.play.exporter import maybe_randomize_options
from tests.factories import OWNER, FakeProvider, clue_step, quiz_choice_step, quiz_input_step, task_step


def choice(option_id: str) -> AnswerPayload:
    return AnswerPayload.model_validate({"quiz_choice": {"option_id": option_id}})


def text(answer: str) -> AnswerPayload:
    return AnswerPayload.model_validate({"quiz_input": {"answer": answer}})


@pytest.fixture
def live_hunt(make_live_hunt):
    return make_live_hunt([clue_step(hint="Look behind the bench"), quiz_choice_step(), quiz_input_step("oak")])


@pytest.fixture
def session(play, live_hunt):
    return play.start_session(live_hunt.play_slug, "  Alice  ")


def test_start_session_points_at_first_step(session, live_hunt):
    assert session.status == HuntProgressStatus.IN_PROGRESS
    assert session.current_step_index == 0
    assert session.current_step_id == live_hunt.step_order[0]
    assert session.total_steps == 3
    assert session.hunt.name == "Old Town Hunt"
    assert not session.is_preview


def test_session_stays_on_version_it_started_with(db, play, session, live_hunt, hunts, publishing, releases):
    hunts.create_step(live_hunt.hunt_id, OWNER, clue_step())
    hunts.update_hunt(live_hunt.hunt_id, OWNER, HuntUpdateIn(name="Renamed Hunt"))
    published = publishing.publish_hunt(live_hunt.hunt_id, OWNER)
    releases.release_hunt(live_hunt.hunt_id, OWNER, published.published_version, current_live_version=1)

    again = play.get_session(session.session_id)
    assert again.total_steps == 3
    assert again.hunt.name == "Old Town Hunt"

    progress = db.scalar(select(Progress).where(Progress.session_id == session.session_id))
    assert progress.version == 1
    assert progress.player_name == "Alice"


def test_get_step_allows_current_and_next_only(play, session, live_hunt):
    first, second, third = live_hunt.step_order

    current = play.get_step(session.session_id, first)
    assert current.step_index == 0
    assert set(current.links) == {"self", "next", "validate"}
    assert current.links["next"].href.endswith(f"/step/{second}")
    assert "_links" in current.model_dump(by_alias=True)
    assert current.step.has_hint

    upcoming = play.get_step(session.session_id, second)
    assert upcoming.step_index == 1

    with pytest.raises(ForbiddenError) as exc:
        play.get_step(session.session_id, third)
    assert exc.value.message == "Step not accessible from current position"


def test_player_step_hides_answer_keys(play, session, live_hunt):
    quiz = play.get_step(session.session_id, live_hunt.step_order[1]).step.challenge["quiz"]

    assert "target_id" not in quiz
    assert [o["id"] for o in quiz["options"]] == ["a", "b", "c"]


def test_wrong_answer_counts_attempt_without_advancing(play, session):
    play.validate_answer(session.session_id, AnswerType.CLUE, AnswerPayload())

    result = play.validate_answer(session.session_id, AnswerType.QUIZ_CHOICE, choice("a"))
    assert not result.correct
    assert result.attempts == 1
    assert not result.is_complete
    assert play.get_session(session.session_id).current_step_index == 1

    result = play.validate_answer(session.session_id, AnswerType.QUIZ_CHOICE, choice("c"))
    assert result.attempts == 2


def test_full_playthrough_completes_session(db, play, session, live_hunt):
    sid = session.session_id

    assert play.validate_answer(sid, AnswerType.CLUE, AnswerPayload()).correct
    assert play.validate_answer(sid, AnswerType.QUIZ_CHOICE, choice("b")).correct
    last = play.validate_answer(sid, AnswerType.QUIZ_INPUT, text("  OAK "))

    assert last.correct
    assert last.is_complete

    finished = play.get_session(sid)
    assert finished.status == HuntProgressStatus.COMPLETED
    assert finished.current_step_id is None
    assert finished.completed_at is not None

    progress = db.scalar(select(Progress).where(Progress.session_id == sid))
    assert [sp.step_id for sp in progress.steps] == live_hunt.step_order
    assert all(sp.completed for sp in progress.steps)

    with pytest.raises(ConflictError) as exc:
        play.validate_answer(sid, AnswerType.QUIZ_INPUT, text("oak"))
    assert exc.value.message == "This session has already been completed"


def test_submissions_are_recorded(db, play, session):
    play.validate_answer(session.session_id, AnswerType.CLUE, AnswerPayload())
    play.validate_answer(session.session_id, AnswerType.QUIZ_CHOICE, choice("a"))

    submissions = db.scalars(select(Submission).order_by(Submission.id)).all()
    assert [s.is_correct for s in submissions] == [True, False]
    assert submissions[1].content == {"answer_type": "quiz-choice", "quiz_choice": {"option_id": "a"}}


def test_answer_type_must_match_step(play, session):
    with pytest.raises(ValidationError) as exc:
        play.validate_answer(session.session_id, AnswerType.QUIZ_CHOICE, choice("a"))
    assert "Expected clue" in exc.value.message


def test_stale_step_pointer_conflicts(db, play, session, live_hunt):
    progress = play.sessions.require_session(session.session_id)

    with pytest.raises(ConflictError):
        play.sessions.advance_to_next_step(progress, live_hunt.step_order[1], live_hunt.step_order[2])
    db.rollback()


def test_time_limit_reports_expired(db, make_live_hunt, play):
    hunt = make_live_hunt([clue_step(time_limit=30), clue_step()])
    session = play.start_session(hunt.play_slug, "Bob")
    db.execute(update(StepProgress).values(started_at=utcnow() - timedelta(minutes=5)))
    db.commit()

    result = play.validate_answer(session.session_id, AnswerType.CLUE, AnswerPayload())
    assert result.expired
    assert result.correct


def test_attempt_limit_reports_exhausted(make_live_hunt, play):
    hunt = make_live_hunt([quiz_choice_step(max_attempts=2)])
    sid = play.start_session(hunt.play_slug, "Bob").session_id

    first = play.validate_answer(sid, AnswerType.QUIZ_CHOICE, choice("a"))
    second = play.validate_answer(sid, AnswerType.QUIZ_CHOICE, choice("a"))
    third = play.validate_answer(sid, AnswerType.QUIZ_CHOICE, choice("b"))

    assert not first.exhausted and not second.exhausted
    assert third.exhausted
    assert third.attempts == 3
    assert third.max_attempts == 2


def test_hint_budget(play, session, live_hunt):
    hint = play.request_hint(session.session_id)
    assert hint.hint == "Look behind the bench"
    assert hint.hints_used == 1
    assert hint.max_hints == 1

    with pytest.raises(ConflictError):
        play.request_hint(session.session_id)

    play.validate_answer(session.session_id, AnswerType.CLUE, AnswerPayload())
    with pytest.raises(NotFoundError):
        play.request_hint(session.session_id)


def test_unknown_or_malformed_session(play):
    with pytest.raises(NotFoundError):
        play.get_session("not-a-session")
    with pytest.raises(NotFoundError):
        play.get_session(str(uuid.uuid4()))


def test_anonymous_session_expires(db, play, session):
    db.execute(update(Progress).values(started_at=utcnow() - timedelta(days=8)))
    db.commit()

    with pytest.raises(NotFoundError):
        play.get_session(session.session_id)


def test_hunt_must_be_live(make_hunt, hunts, play):
    hunt_id = make_hunt([clue_step()])
    slug = hunts.get_hunt(hunt_id, OWNER).play_slug

    with pytest.raises(ForbiddenError):
        play.start_session(slug, "Alice")
    with pytest.raises(NotFoundError):
        play.start_session("no-such-slug", "Alice")


def test_invite_only_access(db, play, live_hunt):
    invitations = PlayerInvitationService(db)
    invitations.update_access_mode(live_hunt.hunt_id, AccessMode.INVITE_ONLY, OWNER)

    with pytest.raises(ForbiddenError):
        play.start_session(live_hunt.play_slug, "Mallory", email="mallory@example.com")
    with pytest.raises(ForbiddenError):
        play.start_session(live_hunt.play_slug, "Anonymous")

    invitations.invite_player(live_hunt.hunt_id, "guest@example.com", OWNER)
    session = play.start_session(live_hunt.play_slug, "Guest", email="  Guest@Example.COM ")
    assert session.status == HuntProgressStatus.IN_PROGRESS

    # collaborators skip the invitation list
    assert play.start_session(live_hunt.play_slug, "Owner", user_id=OWNER).session_id


def test_collaborators_only_access(db, play, live_hunt):
    PlayerInvitationService(db).update_access_mode(live_hunt.hunt_id, AccessMode.COLLABORATORS_ONLY, OWNER)
    AuthorizationService(db).share_hunt(live_hunt.hunt_id, OWNER, "friend-1", HuntPermission.VIEW)

    with pytest.raises(ForbiddenError):
        play.start_session(live_hunt.play_slug, "Stranger", user_id="stranger-1")

    session = play.start_session(live_hunt.play_slug, "Friend", user_id="friend-1")
    assert session.session_id


def test_preview_session_can_navigate(make_hunt, hunts, play):
    hunt_id = make_hunt([clue_step(), clue_step(), clue_step()])
    order = hunts.get_hunt(hunt_id, OWNER).step_order

    preview = play.start_preview_session(hunt_id, OWNER)
    assert preview.is_preview
    assert preview.total_steps == 3

    moved = play.navigate(preview.session_id, order[2])
    assert moved.current_step_index == 2
    assert play.get_session(preview.session_id).current_step_id == order[2]

    with pytest.raises(NotFoundError):
        play.navigate(preview.session_id, 9999)

    with pytest.raises(ForbiddenError):
        play.start_preview_session(hunt_id, "stranger-1")


def test_navigate_is_preview_only(play, session, live_hunt):
    with pytest.raises(ForbiddenError):
        play.navigate(session.session_id, live_hunt.step_order[2])


def test_abandoned_session_rejects_play(play, session, live_hunt):
    abandoned = play.abandon_session(session.session_id)
    assert abandoned.status == HuntProgressStatus.ABANDONED

    with pytest.raises(ConflictError) as exc:
        play.get_step(session.session_id, live_hunt.step_order[0])
    assert exc.value.message == "This session has been abandoned"
    with pytest.raises(ConflictError):
        play.request_hint(session.session_id)


def test_discover_pages_through_live_hunts(make_hunt, make_live_hunt, play):
    make_hunt([clue_step()])  # draft only, not listed
    for _ in range(3):
        make_live_hunt([clue_step()])

    first = play.discover_hunts(page=1, limit=2)
    second = play.discover_hunts(page=2, limit=2)

    assert first.total == 3
    assert len(first.hunts) == 2
    assert len(second.hunts) == 1
    assert {h.hunt_id for h in first.hunts}.isdisjoint(h.hunt_id for h in second.hunts)

    with pytest.raises(ValidationError):
        play.discover_hunts(limit=51)


def test_randomized_options_are_shuffled_with_rng():
    challenge = {"quiz": {"options": [{"id": str(i)} for i in range(6)], "randomize_order": True}}
    expected = [{"id": str(i)} for i in range(6)]
    random.Random(7).shuffle(expected)

    shuffled = maybe_randomize_options(challenge, random.Random(7))
    assert shuffled["quiz"]["options"] == expected

    fixed = {"quiz": {"options": [{"id": "a"}, {"id": "b"}], "randomize_order": False}}
    assert maybe_randomize_options(fixed, random.Random(7))["quiz"]["options"] == [{"id": "a"}, {"id": "b"}]


def test_task_answer_fails_open_when_ai_is_down(db, make_live_hunt, settings):
    ai = AIValidationService(
        text_provider=FakeProvider(error=RuntimeError("quota exceeded")),
        audio_provider=FakeProvider(),
        settings=settings,
    )
    play = PlayService(db, ai=ai, settings=settings)
    hunt = make_live_hunt([task_step()])
    sid = play.start_session(hunt.play_slug, "Poet").session_id

    result = play.validate_answer(
        sid, AnswerType.TASK, AnswerPayload.model_validate({"task": {"response": "The river hums"}})
    )

    assert result.correct
    assert result.is_complete
    assert result.feedback == FALLBACK_FEEDBACK

    submission = db.scalar(select(Submission))
    assert submission.meta["fallbackUsed"] is True
    assert submission.meta["aiModel"] == "fake-model"
