"""Step model: challenge content scoped to (hunt_id, hunt_version)."""
import enum
import json

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from hunthub.db.session import Base, utcnow


class ChallengeType(str, enum.Enum):
    CLUE = "clue"
    QUIZ = "quiz"
    MISSION = "mission"
    TASK = "task"


class Step(Base):
    __tablename__ = "steps"
    __table_args__ = (
        UniqueConstraint("step_id", "hunt_id", "hunt_version", name="uq_steps_step_id_hunt_version"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Stable across version clones: "the same step" in v1 and v2 shares this id
    step_id = Column(Integer, nullable=False, index=True)
    hunt_id = Column(Integer, nullable=False, index=True)
    hunt_version = Column(Integer, nullable=False)

    type = Column(String(16), nullable=False)  # clue | quiz | mission | task
    # {"clue": {...}} | {"quiz": {...}} | {"mission": {...}} | {"task": {...}}
    challenge_json = Column(Text, nullable=False)
    hint = Column(Text, nullable=True)
    required_location_json = Column(Text, nullable=True)
    time_limit = Column(Integer, nullable=True)  # seconds
    max_attempts = Column(Integer, nullable=True)
    meta_json = Column(Text, nullable=False, default="{}")

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def challenge(self) -> dict:
        return json.loads(self.challenge_json)

    @challenge.setter
    def challenge(self, value: dict) -> None:
        self.challenge_json = json.dumps(value)

    @property
    def required_location(self) -> dict | None:
        return json.loads(self.required_location_json) if self.required_location_json else None

    @required_location.setter
    def required_location(self, value: dict | None) -> None:
        self.required_location_json = json.dumps(value) if value is not None else None

    @property
    def meta(self) -> dict:
        return json.loads(self.meta_json or "{}")
