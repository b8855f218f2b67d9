"""Copy a version's steps into another version of the same hunt."""
from sqlalchemy import select
from sqlalchemy.orm import Session

from hunthub.db.session import utcnow
from hunthub.models.step import Step


def list_steps(db: Session, hunt_id: int, version: int) -> list[Step]:
    return list(
        db.scalars(
            select(Step).where(Step.hunt_id == hunt_id, Step.hunt_version == version).order_by(Step.id)
        )
    )


def copy_step(step: Step, *, hunt_id: int, version: int, step_id: int | None = None) -> Step:
    now = utcnow()
    return Step(
        step_id=step.step_id if step_id is None else step_id,
        hunt_id=hunt_id,
        hunt_version=version,
        type=step.type,
        challenge_json=step.challenge_json,
        hint=step.hint,
        required_location_json=step.required_location_json,
        time_limit=step.time_limit,
        max_attempts=step.max_attempts,
        meta_json=step.meta_json,
        created_at=now,
        updated_at=now,
    )


def clone_steps(db: Session, hunt_id: int, from_version: int, to_version: int) -> list[Step]:
    """
    Copy every step of (hunt_id, from_version) to (hunt_id, to_version).

    step_id values are kept verbatim so the same step shares its id across
    versions. Caller owns the transaction.
    """
    clones = [copy_step(step, hunt_id=hunt_id, version=to_version) for step in list_steps(db, hunt_id, from_version)]
    db.add_all(clones)
    db.flush()
    return clones
