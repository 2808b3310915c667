"""Declarative permission enforcement for the Content Platform.

``require_permission`` attaches a (resource, action) requirement to a
function, coroutine function or class. The check runs before the wrapped
body, so a denied call has no side effects.

Usage:
    @router.post("/templates")
    @require_permission(Resource.TEMPLATES, Action.CREATE)
    async def create_template(..., current_user: User = Depends(get_current_user)):
        ...

    @require_permission(Resource.TRANSLATIONS, Action.READ)
    class TranslationService:
        def list_keys(self, current_user): ...          # TRANSLATIONS_READ

        @require_permission(Resource.TRANSLATIONS, Action.DELETE)
        def purge(self, current_user): ...              # TRANSLATIONS_DELETE only
"""

import inspect
import logging
from contextlib import contextmanager
from contextvars import ContextVar, Token
from functools import wraps
from typing import Any, Callable, Iterator, NamedTuple, Optional

from contentplatform.core.exceptions import (
    DEFAULT_DENIED_MESSAGE,
    AuthenticationRequiredError,
    PermissionDeniedError,
)

from .checker import has_permission
from .permissions import ActionLike, ResourceLike, permission_name

logger = logging.getLogger(__name__)

REQUIREMENT_ATTR = "__permission_requirement__"

_current_actor: ContextVar[Optional[Any]] = ContextVar("current_actor", default=None)


class PermissionRequirement(NamedTuple):
    resource: ResourceLike
    action: ActionLike
    message: str = DEFAULT_DENIED_MESSAGE

    @property
    def permission(self) -> str:
        return permission_name(self.resource, self.action)


def set_current_actor(user) -> Token:
    """Bind the authenticated user for guards that get no current_user argument."""
    return _current_actor.set(user)


def reset_current_actor(token: Token) -> None:
    _current_actor.reset(token)


def get_current_actor():
    return _current_actor.get()


@contextmanager
def actor_context(user) -> Iterator[None]:
    token = set_current_actor(user)
    try:
        yield
    finally:
        reset_current_actor(token)


def _resolve_actor(args: tuple, kwargs: dict):
    """Explicit current_user, then the bound actor, then a positional user.

    Positional users are only consulted outside a request, since inside one
    a user argument is usually the target of the operation.
    """
    current_user = kwargs.get("current_user")
    if current_user is not None:
        return current_user
    actor = get_current_actor()
    if actor is not None:
        return actor
    for arg in args:
        if all(hasattr(arg, attr) for attr in ("roles", "permissions", "corporate_id")):
            return arg
    return None


def enforce(requirement: PermissionRequirement, user) -> None:
    """Raise unless the user satisfies the requirement."""
    if user is None:
        raise AuthenticationRequiredError()
    if not has_permission(user, requirement.resource, requirement.action):
        logger.warning(
            "Permission denied for user %s: %s required",
            getattr(user, "email", getattr(user, "id", "?")),
            requirement.permission,
        )
        raise PermissionDeniedError(
            requirement.message,
            resource=str(getattr(requirement.resource, "value", requirement.resource)),
            action=str(getattr(requirement.action, "value", requirement.action)),
        )


def _guard_callable(func: Callable, requirement: PermissionRequirement) -> Callable:
    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            enforce(requirement, _resolve_actor(args, kwargs))
            return await func(*args, **kwargs)

        wrapper = async_wrapper
    else:
        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            enforce(requirement, _resolve_actor(args, kwargs))
            return func(*args, **kwargs)

        wrapper = sync_wrapper

    setattr(wrapper, REQUIREMENT_ATTR, requirement)
    return wrapper


def _guard_class(cls: type, requirement: PermissionRequirement) -> type:
    for attr, value in list(vars(cls).items()):
        if attr.startswith("_"):
            continue
        if isinstance(value, (staticmethod, classmethod)):
            func = value.__func__
            if getattr(func, REQUIREMENT_ATTR, None) is None:
                setattr(cls, attr, type(value)(_guard_callable(func, requirement)))
        elif inspect.isfunction(value):
            # A method-level requirement governs over the class-level one
            if getattr(value, REQUIREMENT_ATTR, None) is None:
                setattr(cls, attr, _guard_callable(value, requirement))
    setattr(cls, REQUIREMENT_ATTR, requirement)
    return cls


def require_permission(
    resource: ResourceLike,
    action: ActionLike,
    message: str = DEFAULT_DENIED_MESSAGE,
):
    """
    Decorator factory requiring a resource/action permission.

    Args:
        resource: Resource the operation touches
        action: Action the operation performs
        message: Message carried by PermissionDeniedError on refusal

    Applied to a class, every public method without its own requirement
    is guarded.
    """
    requirement = PermissionRequirement(resource, action, message)

    def decorator(target):
        if inspect.isclass(target):
            return _guard_class(target, requirement)
        return _guard_callable(target, requirement)

    return decorator


def get_requirement(target) -> Optional[PermissionRequirement]:
    """Return the requirement declared on a function or class, if any."""
    return getattr(target, REQUIREMENT_ATTR, None)
