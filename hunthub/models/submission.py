"""Submission model: one answer a player sent for one step, with its verdict."""
import json

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from hunthub.db.session import Base, utcnow


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    step_progress_id = Column(Integer, ForeignKey("step_progress.id"), nullable=False, index=True)
    submitted_at = Column(DateTime, nullable=False, default=utcnow)
    # answer text, option id, coordinates, asset id, ...
    content_json = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False)
    score = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    # e.g. {"aiModel": "...", "fallbackUsed": true}
    meta_json = Column(Text, nullable=True)

    step_progress = relationship("StepProgress", back_populates="responses")

    @property
    def content(self):
        return json.loads(self.content_json)

    @property
    def meta(self) -> dict:
        return json.loads(self.meta_json) if self.meta_json else {}
