from typing import AsyncGenerator, Generator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from contentplatform.db.session import SessionLocal
from contentplatform.db.models import User
from contentplatform.core.exceptions import DEFAULT_DENIED_MESSAGE
from contentplatform.core.rbac.guard import (
    PermissionRequirement,
    enforce,
    reset_current_actor,
    set_current_actor,
)
from contentplatform.core.rbac.permissions import ActionLike, ResourceLike
from contentplatform.core.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> AsyncGenerator[User, None]:
    """
    Get current authenticated user from a JWT bearer token.

    The user is also bound as the request's actor for the rest of the
    request, so guarded code further down the call chain can resolve it
    without a current_user argument.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    user_id = decode_token(token)
    if user_id is None:
        raise credentials_exception

    user = db.get(User, user_id)
    if user is None or not user.enabled:
        raise credentials_exception

    actor_token = set_current_actor(user)
    try:
        yield user
    finally:
        reset_current_actor(actor_token)


class PermissionDependency:
    """
    FastAPI dependency for permission checking.

    Declared on a router it covers every route of the group; declared on a
    route it replaces the group requirement for that route. Only the
    requirement declared closest to the route is enforced.

    Usage:
        router = APIRouter(dependencies=[Depends(PermissionDependency(Resource.ROLES, Action.READ))])

        @router.post("/roles", dependencies=[Depends(PermissionDependency("roles", "create"))])
        async def create_role():
            ...
    """

    def __init__(
        self,
        resource: ResourceLike,
        action: ActionLike,
        message: str = DEFAULT_DENIED_MESSAGE,
    ):
        self.requirement = PermissionRequirement(resource, action, message)

    def is_overridden(self, request: Request) -> bool:
        """True when a more specific requirement is declared for the matched route."""
        route = request.scope.get("route")
        if route is None:
            return False
        # Group dependencies are listed before the route's own
        declared = [
            d.dependency
            for d in getattr(route, "dependencies", [])
            if isinstance(d.dependency, PermissionDependency)
        ]
        return self in declared and declared[-1] is not self

    async def __call__(
        self,
        request: Request,
        current_user: User = Depends(get_current_user),
    ) -> User:
        if not self.is_overridden(request):
            enforce(self.requirement, current_user)
        return current_user


def require(resource: ResourceLike, action: ActionLike, message: str = DEFAULT_DENIED_MESSAGE):
    """Shorthand for Depends(PermissionDependency(...))."""
    return Depends(PermissionDependency(resource, action, message))
