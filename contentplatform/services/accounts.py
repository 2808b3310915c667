"""Account lifecycle: registration, organizations and invitations.

Registration decides a new user's initial roles:
- the first user ever registered becomes SUPER_ADMIN
- a self-registering user gets a fresh organization and becomes its ADMIN
- an invited user joins the inviter's organization with the invitation's
  roles, or EDITOR when the invitation names none
"""

import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Iterable, Optional

from slugify import slugify
from sqlalchemy import func
from sqlalchemy.orm import Session

from contentplatform.core.config import get_settings
from contentplatform.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from contentplatform.core.rbac.checker import is_super_admin
from contentplatform.core.rbac.roles import ADMIN, EDITOR, SUPER_ADMIN
from contentplatform.core.security import get_password_hash
from contentplatform.core.tenant import current_tenant_id, ensure_same_tenant
from contentplatform.db.models import Corporate, Invitation, InvitationStatus, Role, User
from contentplatform.db.seed import get_role_by_name

logger = logging.getLogger(__name__)
settings = get_settings()


def generate_invitation_token() -> str:
    """64-character URL-safe hex token."""
    return secrets.token_hex(32)


def domain_from_email(email: str) -> str:
    """Domain-safe organization key from the local part of an email."""
    local_part = email.split("@", 1)[0] if "@" in email else ""
    domain = slugify(local_part, separator="")
    if not domain:
        return f"org-{uuid.uuid4().hex[:8]}"
    return domain


def create_corporate_for_user(db: Session, user: User) -> Corporate:
    """Create an organization named after a self-registering user."""
    base_name = f"{user.name}'s Organization"
    name = base_name
    counter = 1
    while db.query(Corporate.id).filter(Corporate.name == name).first():
        name = f"{base_name} {counter}"
        counter += 1

    base_domain = domain_from_email(user.email)
    domain = base_domain
    counter = 1
    while db.query(Corporate.id).filter(Corporate.domain == domain).first():
        domain = f"{base_domain}{counter}"
        counter += 1

    corporate = Corporate(
        name=name,
        domain=domain,
        description=f"Auto-created organization for {user.name}",
    )
    db.add(corporate)
    db.flush()
    logger.info("Created organization %s (%s) for %s", name, domain, user.email)
    return corporate


def _require_role(db: Session, name: str) -> Role:
    role = get_role_by_name(db, name)
    if role is None:
        raise ConflictError(f"{name} role not found. Please run application initialization.")
    return role


def get_pending_invitation(db: Session, token: str) -> Invitation:
    """
    Look up an invitation that can still be accepted.

    Raises:
        ValidationError: If the token is unknown, used, cancelled or expired
    """
    invitation = db.query(Invitation).filter(Invitation.token == token).first()
    if invitation is None:
        raise ValidationError("Invalid invitation token")
    if not invitation.is_pending:
        raise ValidationError("Invitation has already been used or is no longer valid")
    if invitation.is_expired:
        invitation.status = InvitationStatus.EXPIRED.value
        db.commit()
        raise ValidationError("Invitation has expired. Please request a new invitation")
    return invitation


def register_user(
    db: Session,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    invitation_token: Optional[str] = None,
) -> User:
    """Create a user, their organization or membership, and initial roles."""
    invitation = get_pending_invitation(db, invitation_token) if invitation_token else None
    if invitation is not None:
        # The invitation decides which address joins
        email = invitation.email

    if db.query(User.id).filter(func.lower(User.email) == email.lower()).first():
        raise ConflictError(
            "An account with this email already exists. Please login or use a different email"
        )

    is_first_user = db.query(User.id).first() is None

    user = User(
        email=email,
        password_hash=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        name=f"{first_name} {last_name}",
        enabled=True,
    )

    if invitation is not None:
        user.corporate_id = invitation.corporate_id
        user.invited_by_id = invitation.invited_by_id
        user.invitation_accepted_at = datetime.utcnow()
    else:
        user.corporate_id = create_corporate_for_user(db, user).id

    if is_first_user:
        user.roles.add(_require_role(db, SUPER_ADMIN))
    elif invitation is None:
        user.roles.add(_require_role(db, ADMIN))
    elif invitation.roles:
        user.roles.update(invitation.roles)
    else:
        user.roles.add(_require_role(db, EDITOR))

    db.add(user)
    db.flush()

    if invitation is not None:
        invitation.status = InvitationStatus.ACCEPTED.value
        invitation.accepted_at = datetime.utcnow()
        invitation.accepted_by_id = user.id

    db.commit()
    db.refresh(user)
    logger.info("Registered %s with roles %s", user.email, ", ".join(user.role_names))
    return user


def assignable_roles(db: Session, actor: User, role_ids: Iterable[uuid.UUID]) -> set:
    """
    Resolve role ids the actor may hand out: system roles or its tenant's custom roles.

    SUPER_ADMIN can only be handed out by a super administrator, whether
    directly or through an invitation.

    Raises:
        NotFoundError: If a role does not exist
        TenantViolationError: If a custom role belongs to another tenant
        PermissionDeniedError: If a non super administrator names SUPER_ADMIN
    """
    tenant_id = current_tenant_id(actor)
    roles = set()
    for role_id in role_ids:
        role = db.get(Role, role_id)
        if role is None:
            raise NotFoundError("Role")
        if not role.is_system_role:
            ensure_same_tenant(role, tenant_id)
        if role.name == SUPER_ADMIN and not is_super_admin(actor):
            raise PermissionDeniedError("Only a super administrator can assign the SUPER_ADMIN role")
        roles.add(role)
    return roles


def create_invitation(db: Session, inviter: User, email: str, role_ids: Iterable[uuid.UUID] = ()) -> Invitation:
    """Invite an email address into the inviter's organization."""
    tenant_id = current_tenant_id(inviter)

    if db.query(User.id).filter(func.lower(User.email) == email.lower()).first():
        raise ConflictError("A user with this email already exists")

    existing = db.query(Invitation).filter(
        Invitation.corporate_id == tenant_id,
        func.lower(Invitation.email) == email.lower(),
        Invitation.status == InvitationStatus.PENDING.value,
    ).first()
    if existing is not None and not existing.is_expired:
        raise ConflictError("A pending invitation already exists for this email")

    roles = assignable_roles(db, inviter, role_ids)
    if not roles:
        roles = {_require_role(db, EDITOR)}

    invitation = Invitation(
        token=generate_invitation_token(),
        email=email,
        corporate_id=tenant_id,
        invited_by_id=inviter.id,
        status=InvitationStatus.PENDING.value,
        expires_at=datetime.utcnow() + timedelta(days=settings.invitation_expiry_days),
        roles=roles,
    )
    db.add(invitation)
    db.commit()
    db.refresh(invitation)
    logger.info("Invitation for %s created by %s", email, inviter.email)
    return invitation


def cancel_invitation(db: Session, actor: User, invitation_id: uuid.UUID) -> Invitation:
    """Cancel a pending invitation of the actor's organization."""
    tenant_id = current_tenant_id(actor)
    invitation = db.get(Invitation, invitation_id)
    if invitation is None:
        raise NotFoundError("Invitation")
    ensure_same_tenant(invitation, tenant_id)
    if not invitation.is_pending:
        raise ValidationError("Only pending invitations can be cancelled")

    invitation.status = InvitationStatus.CANCELLED.value
    db.commit()
    return invitation
