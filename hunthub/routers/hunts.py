"""Creator routes: authoring, versions, publish / release, invitations."""
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from hunthub.routers.deps import (
    CurrentUser,
    get_hunt_service,
    get_invitation_service,
    get_publishing_service,
    get_release_manager,
)
from hunthub.schemas.hunt import (
    AccessModeIn,
    CloneHuntIn,
    CloneHuntOut,
    HuntCreateIn,
    HuntOut,
    HuntUpdateIn,
    InvitationOut,
    InvitePlayerIn,
    ReorderStepsIn,
    StepCreateIn,
    StepOut,
    StepUpdateIn,
)
from hunthub.schemas.publishing import (
    PublishIn,
    PublishOut,
    ReleaseIn,
    ReleaseOut,
    TakeOfflineIn,
    TakeOfflineOut,
    VersionOut,
)
from hunthub.services.hunts import HuntService
from hunthub.services.invitations import PlayerInvitationService
from hunthub.services.publishing import PublishingService
from hunthub.services.release_manager import ReleaseManager

router = APIRouter(prefix="/api/hunts", tags=["hunts"])

Hunts = Annotated[HuntService, Depends(get_hunt_service)]
Publishing = Annotated[PublishingService, Depends(get_publishing_service)]
Releases = Annotated[ReleaseManager, Depends(get_release_manager)]
Invitations = Annotated[PlayerInvitationService, Depends(get_invitation_service)]


@router.post("", response_model=HuntOut, status_code=201)
def create_hunt(body: HuntCreateIn, user_id: CurrentUser, hunts: Hunts):
    return hunts.create_hunt(user_id, body)


@router.get("/{hunt_id}", response_model=HuntOut)
def get_hunt(hunt_id: int, user_id: CurrentUser, hunts: Hunts):
    return hunts.get_hunt(hunt_id, user_id)


@router.patch("/{hunt_id}", response_model=HuntOut)
def update_hunt(hunt_id: int, body: HuntUpdateIn, user_id: CurrentUser, hunts: Hunts):
    return hunts.update_hunt(hunt_id, user_id, body)


@router.delete("/{hunt_id}", status_code=204)
def delete_hunt(hunt_id: int, user_id: CurrentUser, hunts: Hunts):
    hunts.delete_hunt(hunt_id, user_id)
    return Response(status_code=204)


@router.post("/{hunt_id}/clone", response_model=CloneHuntOut, status_code=201)
def clone_hunt(hunt_id: int, body: CloneHuntIn, user_id: CurrentUser, hunts: Hunts):
    return hunts.clone_hunt(hunt_id, user_id, body.version)


# --- steps (draft only) ---


@router.get("/{hunt_id}/steps", response_model=list[StepOut])
def list_steps(hunt_id: int, user_id: CurrentUser, hunts: Hunts):
    return hunts.list_steps(hunt_id, user_id)


@router.post("/{hunt_id}/steps", response_model=StepOut, status_code=201)
def create_step(hunt_id: int, body: StepCreateIn, user_id: CurrentUser, hunts: Hunts):
    return hunts.create_step(hunt_id, user_id, body)


@router.put("/{hunt_id}/steps/{step_id}", response_model=StepOut)
def update_step(hunt_id: int, step_id: int, body: StepUpdateIn, user_id: CurrentUser, hunts: Hunts):
    return hunts.update_step(hunt_id, step_id, user_id, body)


@router.delete("/{hunt_id}/steps/{step_id}", status_code=204)
def delete_step(hunt_id: int, step_id: int, user_id: CurrentUser, hunts: Hunts):
    hunts.delete_step(hunt_id, step_id, user_id)
    return Response(status_code=204)


@router.put("/{hunt_id}/step-order", response_model=HuntOut)
def reorder_steps(hunt_id: int, body: ReorderStepsIn, user_id: CurrentUser, hunts: Hunts):
    return hunts.reorder_steps(hunt_id, body.step_order, user_id)


# --- versions, publish, release ---


@router.get("/{hunt_id}/versions", response_model=list[VersionOut])
def list_versions(hunt_id: int, user_id: CurrentUser, publishing: Publishing):
    return publishing.list_versions(hunt_id, user_id)


@router.post("/{hunt_id}/publish", response_model=PublishOut)
def publish_hunt(hunt_id: int, user_id: CurrentUser, publishing: Publishing, body: PublishIn | None = None):
    expected = body.expected_updated_at if body else None
    return publishing.publish_hunt(hunt_id, user_id, expected)


@router.put("/{hunt_id}/release", response_model=ReleaseOut)
def release_hunt(hunt_id: int, body: ReleaseIn, user_id: CurrentUser, releases: Releases):
    return releases.release_hunt(hunt_id, user_id, body.version, body.current_live_version)


@router.post("/{hunt_id}/take-offline", response_model=TakeOfflineOut)
def take_offline(hunt_id: int, body: TakeOfflineIn, user_id: CurrentUser, releases: Releases):
    return releases.take_offline(hunt_id, user_id, body.current_live_version)


# --- player access ---


@router.put("/{hunt_id}/access-mode", status_code=204)
def update_access_mode(hunt_id: int, body: AccessModeIn, user_id: CurrentUser, invitations: Invitations):
    invitations.update_access_mode(hunt_id, body.access_mode, user_id)
    return Response(status_code=204)


@router.get("/{hunt_id}/invitations", response_model=list[InvitationOut])
def list_invitations(hunt_id: int, user_id: CurrentUser, invitations: Invitations):
    return [
        InvitationOut(hunt_id=i.hunt_id, email=i.email, invited_by=i.invited_by, invited_at=i.invited_at)
        for i in invitations.list_invitations(hunt_id, user_id)
    ]


@router.post("/{hunt_id}/invitations", response_model=InvitationOut, status_code=201)
def invite_player(hunt_id: int, body: InvitePlayerIn, user_id: CurrentUser, invitations: Invitations):
    invitation = invitations.invite_player(hunt_id, body.email, user_id)
    return InvitationOut(
        hunt_id=invitation.hunt_id,
        email=invitation.email,
        invited_by=invitation.invited_by,
        invited_at=invitation.invited_at,
    )


@router.delete("/{hunt_id}/invitations/{email}", status_code=204)
def revoke_invitation(hunt_id: int, email: str, user_id: CurrentUser, invitations: Invitations):
    invitations.revoke_invitation(hunt_id, email, user_id)
    return Response(status_code=204)
