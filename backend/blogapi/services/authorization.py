"""
Ownership rule shared by the post and comment services.

A user may modify a resource when they hold ADMIN or authored it.
"""

import logging

from blogapi.exceptions import PermissionDeniedError
from blogapi.models.user import Role, User

logger = logging.getLogger(__name__)


def can_modify(user: User, author_id: int) -> bool:
    if user.has_role(Role.ADMIN):
        return True
    return user.id == author_id


def ensure_can_modify(user: User, author_id: int, action: str, resource: str) -> None:
    """
    Raises PermissionDeniedError unless `user` may modify the resource.

    Example:
        ensure_can_modify(actor, post.author_id, "update", "post")
        → "You are not authorized to update this post"
    """
    if not can_modify(user, author_id):
        logger.warning(
            "User %s denied %s on %s owned by %s", user.id, action, resource, author_id
        )
        raise PermissionDeniedError(
            message=f"You are not authorized to {action} this {resource}",
            context={"user_id": user.id, "author_id": author_id},
        )
