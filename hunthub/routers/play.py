"""Player routes. The session UUID in the path is the player's credential."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from hunthub.routers.deps import CurrentUser, OptionalUser, get_play_service
from hunthub.schemas.answer import ValidateAnswerIn
from hunthub.schemas.play import (
    DiscoverOut,
    HintOut,
    NavigateOut,
    SessionOut,
    StartSessionIn,
    StepOut,
    ValidateAnswerOut,
)
from hunthub.services.play import PlayService

router = APIRouter(prefix="/api/play", tags=["play"])

Play = Annotated[PlayService, Depends(get_play_service)]


class NavigateIn(BaseModel):
    step_id: int


@router.get("/discover", response_model=DiscoverOut)
def discover_hunts(
    play: Play,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
):
    return play.discover_hunts(page, limit)


@router.post("/{play_slug}/start", response_model=SessionOut, status_code=201)
def start_session(play_slug: str, body: StartSessionIn, play: Play, user_id: OptionalUser):
    return play.start_session(play_slug, body.player_name, body.email, user_id)


@router.post("/preview/{hunt_id}", response_model=SessionOut, status_code=201)
def start_preview_session(hunt_id: int, user_id: CurrentUser, play: Play):
    return play.start_preview_session(hunt_id, user_id)


@router.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(session_id: str, play: Play):
    return play.get_session(session_id)


@router.get("/sessions/{session_id}/step/{step_id}", response_model=StepOut)
def get_step(session_id: str, step_id: int, play: Play):
    return play.get_step(session_id, step_id)


@router.post("/sessions/{session_id}/validate", response_model=ValidateAnswerOut)
def validate_answer(session_id: str, body: ValidateAnswerIn, play: Play):
    return play.validate_answer(session_id, body.answer_type, body.payload)


@router.post("/sessions/{session_id}/hint", response_model=HintOut)
def request_hint(session_id: str, play: Play):
    return play.request_hint(session_id)


@router.post("/sessions/{session_id}/navigate", response_model=NavigateOut)
def navigate(session_id: str, body: NavigateIn, play: Play):
    return play.navigate(session_id, body.step_id)


@router.post("/sessions/{session_id}/abandon", response_model=SessionOut)
def abandon_session(session_id: str, play: Play):
    return play.abandon_session(session_id)
