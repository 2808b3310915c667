"""Invitation endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from contentplatform.api.deps import get_db, get_current_user
from contentplatform.api.schemas.rbac import (
    InvitationCreate,
    InvitationResponse,
    InvitationValidation,
)
from contentplatform.core.exceptions import ValidationError
from contentplatform.core.rbac import Action, Resource, require_permission
from contentplatform.core.tenant import tenant_query
from contentplatform.db.models import Invitation, InvitationStatus, User
from contentplatform.services import accounts

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.post("", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED)
@require_permission(Resource.INVITATIONS, Action.CREATE)
async def create_invitation(
    payload: InvitationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Invite someone into the current organization. Defaults to the EDITOR role."""
    invitation = accounts.create_invitation(db, current_user, payload.email, payload.role_ids)
    return InvitationResponse.from_invitation(invitation, include_token=True)


@router.get("", response_model=List[InvitationResponse])
@require_permission(Resource.INVITATIONS, Action.READ)
async def list_invitations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    status_filter: Optional[InvitationStatus] = Query(None, alias="status"),
):
    query = tenant_query(db, Invitation, current_user)
    if status_filter is not None:
        query = query.filter(Invitation.status == status_filter.value)
    invitations = query.order_by(Invitation.created_at.desc()).all()
    return [InvitationResponse.from_invitation(i) for i in invitations]


@router.delete("/{invitation_id}", response_model=InvitationResponse)
@require_permission(Resource.INVITATIONS, Action.DELETE)
async def cancel_invitation(
    invitation_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invitation = accounts.cancel_invitation(db, current_user, invitation_id)
    return InvitationResponse.from_invitation(invitation)


@router.get("/validate/{token}", response_model=InvitationValidation)
async def validate_invitation(token: str, db: Session = Depends(get_db)):
    """Public check used by the sign-up page before registering with a token."""
    try:
        invitation = accounts.get_pending_invitation(db, token)
    except ValidationError as e:
        return InvitationValidation(valid=False, reason=e.message)
    return InvitationValidation(
        valid=True,
        email=invitation.email,
        corporate_name=invitation.corporate.name,
        expires_at=invitation.expires_at,
    )
