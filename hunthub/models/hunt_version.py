"""HuntVersion model: one draft or published snapshot per (hunt_id, version)."""
import json

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint

from hunthub.db.session import Base, utcnow


class HuntVersion(Base):
    __tablename__ = "hunt_versions"
    __table_args__ = (
        UniqueConstraint("hunt_id", "version", name="uq_hunt_versions_hunt_id_version"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    hunt_id = Column(Integer, nullable=False, index=True)
    version = Column(Integer, nullable=False)  # starts at 1, monotonic

    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    # {lat, lng, radius, address?}
    start_location_json = Column(Text, nullable=True)
    # ordered list of stable step ids
    step_order_json = Column(Text, nullable=False, default="[]")

    is_published = Column(Boolean, nullable=False, default=False, index=True)
    published_at = Column(DateTime, nullable=True)
    published_by = Column(String(64), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    # optimistic lock token for publish and draft edits
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def step_order(self) -> list[int]:
        return json.loads(self.step_order_json or "[]")

    @step_order.setter
    def step_order(self, value: list[int]) -> None:
        self.step_order_json = json.dumps([int(v) for v in value])

    @property
    def start_location(self) -> dict | None:
        return json.loads(self.start_location_json) if self.start_location_json else None

    @start_location.setter
    def start_location(self, value: dict | None) -> None:
        self.start_location_json = json.dumps(value) if value is not None else None
