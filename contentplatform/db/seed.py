"""Database seeding for the Content Platform.

Materializes the permission catalog and the canonical roles. Every insert
is existence-checked first and runs in its own savepoint, so two processes
bootstrapping the same database at once cannot duplicate a row: the
losing writer's insert is rolled back and the winner's row is used.
"""

import logging
from typing import Callable, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from contentplatform.core.rbac.permissions import PERMISSION_DEFINITIONS
from contentplatform.core.rbac.roles import ADMIN, DEFAULT_ROLES, EDITOR, SUPER_ADMIN, VIEWER
from contentplatform.db.models import Permission, Role

logger = logging.getLogger(__name__)


def _permission_exists(db: Session, name: str) -> bool:
    return db.query(Permission.id).filter(Permission.name == name).first() is not None


def _role_exists(db: Session, name: str) -> bool:
    return db.query(Role.id).filter(Role.name == name).first() is not None


def _insert_once(db: Session, obj) -> bool:
    """
    Insert obj inside a savepoint.

    Returns False if a concurrent writer already inserted the same
    unique key; any other database error propagates.
    """
    try:
        with db.begin_nested():
            db.add(obj)
        return True
    except IntegrityError:
        # The savepoint rollback has already expunged the pending object
        logger.info("%r already created by a concurrent bootstrap", obj)
        return False


def ensure_catalog(db: Session) -> int:
    """
    Create every catalog permission that is not yet stored.

    Args:
        db: Database session

    Returns:
        Number of permissions created by this call
    """
    created = 0
    for name, perm in PERMISSION_DEFINITIONS.items():
        if _permission_exists(db, name):
            continue
        row = Permission(
            name=name,
            description=perm.description,
            resource=perm.resource.value,
            action=perm.action.value,
        )
        if _insert_once(db, row):
            created += 1
    db.commit()
    if created:
        logger.info("Created %d permissions", created)
    return created


def ensure_canonical_roles(db: Session) -> int:
    """
    Create the canonical roles that do not exist yet.

    A role that already exists is left untouched, even if an administrator
    has since edited its permissions. Permissions are linked from what is
    actually stored, so this runs after ensure_catalog.

    Returns:
        Number of roles created by this call
    """
    stored = {p.name: p for p in db.query(Permission).all()}
    created = 0

    for role_name, role_config in DEFAULT_ROLES.items():
        if _role_exists(db, role_name):
            continue
        names = role_config["builder"](stored.keys())
        role = Role(
            name=role_name,
            description=role_config["description"],
            is_system_role=True,
            permissions={stored[name] for name in names},
        )
        if _insert_once(db, role):
            created += 1
            logger.info("Created role %s with %d permissions", role_name, len(names))
    db.commit()
    return created


def bootstrap(db: Session) -> dict:
    """
    Idempotently create the permission catalog and the canonical roles.

    Returns:
        Counts of rows created by this call and totals after it
    """
    permissions_created = ensure_catalog(db)
    roles_created = ensure_canonical_roles(db)
    return {
        "permissions_created": permissions_created,
        "roles_created": roles_created,
        "permissions_total": db.query(func.count(Permission.id)).scalar(),
        "roles_total": db.query(func.count(Role.id)).scalar(),
    }


def run_startup_bootstrap(session_factory: Callable[[], Session]) -> Optional[dict]:
    """
    Run bootstrap at process start.

    Database failures are logged and swallowed so the process still
    starts; the catalog may then be incomplete until the next run.
    """
    db = session_factory()
    try:
        summary = bootstrap(db)
        logger.info(
            "RBAC bootstrap complete: %d permissions, %d roles",
            summary["permissions_total"], summary["roles_total"],
        )
        return summary
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("RBAC bootstrap failed, initialization may be incomplete: %s", e)
        return None
    finally:
        db.close()


def get_permission_by_name(db: Session, name: str) -> Optional[Permission]:
    """Get a stored permission by canonical name."""
    return db.query(Permission).filter(Permission.name == name).first()


def get_role_by_name(db: Session, name: str) -> Optional[Role]:
    """Get a role by its globally unique name."""
    return db.query(Role).filter(Role.name == name).first()


def get_super_admin_role(db: Session) -> Optional[Role]:
    return get_role_by_name(db, SUPER_ADMIN)


def get_admin_role(db: Session) -> Optional[Role]:
    return get_role_by_name(db, ADMIN)


def get_editor_role(db: Session) -> Optional[Role]:
    return get_role_by_name(db, EDITOR)


def get_viewer_role(db: Session) -> Optional[Role]:
    return get_role_by_name(db, VIEWER)


# CLI script for seeding
if __name__ == "__main__":
    from contentplatform.core.config import get_settings
    from contentplatform.core.logger import configure_from_settings
    from contentplatform.db.base import Base
    from contentplatform.db.session import SessionLocal, engine

    configure_from_settings(get_settings())
    Base.metadata.create_all(bind=engine)
    summary = run_startup_bootstrap(SessionLocal)
    if summary is None:
        raise SystemExit(1)
    print(f"Permissions: {summary['permissions_total']} ({summary['permissions_created']} new)")
    print(f"Roles: {summary['roles_total']} ({summary['roles_created']} new)")
