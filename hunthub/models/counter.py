"""Counter model: named monotonic sequences for huntId, stepId and assetId."""
from sqlalchemy import Column, Integer, String, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hunthub.core.errors import ConflictError
from hunthub.db.session import Base


class Counter(Base):
    __tablename__ = "counters"

    name = Column(String(32), primary_key=True)  # hunt | step | asset
    seq = Column(Integer, nullable=False, default=0)


def next_sequence(db: Session, name: str) -> int:
    """Increment and return the named sequence. Values are never reused.

    The migration seeds the known counters; the insert below only covers
    databases built with create_all. Two requests racing to create the same
    row surface as a ConflictError rather than a raw IntegrityError.
    """
    result = db.execute(
        update(Counter)
        .where(Counter.name == name)
        .values(seq=Counter.seq + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.add(Counter(name=name, seq=1))
        try:
            db.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Sequence {name} was created by another request. Please retry.") from exc
        return 1
    return db.scalar(select(Counter.seq).where(Counter.name == name))
