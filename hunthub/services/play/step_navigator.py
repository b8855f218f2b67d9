"""Step lookups resolved against the persisted step order of a session's version."""
from sqlalchemy import select
from sqlalchemy.orm import Session

from hunthub.models.step import Step


def get_step_index(step_order: list[int], step_id: int) -> int:
    try:
        return step_order.index(step_id)
    except ValueError:
        return -1


def get_next_step_id(step_order: list[int], step_id: int) -> int | None:
    index = get_step_index(step_order, step_id)
    if index == -1 or index + 1 >= len(step_order):
        return None
    return step_order[index + 1]


def get_step_by_id(db: Session, hunt_id: int, version: int, step_id: int) -> Step | None:
    return db.scalar(
        select(Step).where(Step.hunt_id == hunt_id, Step.hunt_version == version, Step.step_id == step_id)
    )


def step_href(session_id: str, step_id: int) -> str:
    return f"/api/play/sessions/{session_id}/step/{step_id}"


def validate_href(session_id: str) -> str:
    return f"/api/play/sessions/{session_id}/validate"
