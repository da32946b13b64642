"""
Blog API - Comment Service
==========================

What:  Create, read, update, delete and list comments on posts.
How:   Comments and posts share the content store. A comment keeps the post
       id and author id it was created with; only its content can change.
"""

import logging
from typing import Optional

from blogapi.exceptions import NotFoundError, ValidationError
from blogapi.models.comment import Comment
from blogapi.models.user import User
from blogapi.repositories.comment_repository import CommentRepository
from blogapi.repositories.post_repository import PostRepository
from blogapi.repositories.user_repository import UserRepository
from blogapi.schemas.common import PagedResponse
from blogapi.schemas.post import CommentRequest, CommentResponse
from blogapi.services.authorization import ensure_can_modify

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(
        self,
        comments: CommentRepository,
        posts: PostRepository,
        users: UserRepository,
    ):
        self.comments = comments
        self.posts = posts
        self.users = users

    async def create(self, request: CommentRequest) -> CommentResponse:
        """
        Attach a new comment to an existing post.

        Raises:
            NotFoundError: post or author does not exist; nothing is written
        """
        if not await self.posts.exists(request.post_id):
            raise NotFoundError("Post", request.post_id)

        author = await self.users.get_by_id(request.author_id)
        if author is None:
            raise NotFoundError("Author", request.author_id)

        comment = await self.comments.add(
            Comment(
                post_id=request.post_id,
                author_id=request.author_id,
                content=request.content,
            )
        )
        logger.info("Comment %s added to post %s", comment.id, comment.post_id)
        return self._to_response(comment, author.username)

    async def get(self, comment_id: str) -> CommentResponse:
        comment = await self._get_or_raise(comment_id)
        return await self._map_one(comment)

    async def update(
        self, comment_id: str, request: CommentRequest, actor: User
    ) -> CommentResponse:
        comment = await self._get_or_raise(comment_id)
        ensure_can_modify(actor, comment.author_id, "update", "comment")

        if comment.post_id != request.post_id:
            raise ValidationError("Post of a comment cannot be changed", field="postId")
        if comment.author_id != request.author_id:
            raise ValidationError("Author of a comment cannot be changed", field="authorId")

        comment.content = request.content
        await self.comments.save(comment)
        logger.info("Comment %s updated by user %s", comment.id, actor.id)
        return await self._map_one(comment)

    async def delete(self, comment_id: str, actor: User) -> None:
        comment = await self._get_or_raise(comment_id)
        ensure_can_modify(actor, comment.author_id, "delete", "comment")
        await self.comments.delete(comment)
        logger.info("Comment %s deleted by user %s", comment_id, actor.id)

    async def list_by_post(
        self, post_id: str, page: int = 0, size: int = 10
    ) -> PagedResponse[CommentResponse]:
        """
        One page of a post's comments, oldest first.

        Raises:
            NotFoundError: the post does not exist (an existing post with no
                comments gives an empty page instead)
        """
        if not await self.posts.exists(post_id):
            raise NotFoundError("Post", post_id)

        comments, total = await self.comments.find_page_by_post(
            post_id, offset=page * size, limit=size
        )
        usernames = await self.users.find_usernames(c.author_id for c in comments)
        content = [self._to_response(c, usernames.get(c.author_id)) for c in comments]
        return PagedResponse[CommentResponse].build(content, page, size, total)

    async def _get_or_raise(self, comment_id: str) -> Comment:
        comment = await self.comments.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment", comment_id)
        return comment

    async def _map_one(self, comment: Comment) -> CommentResponse:
        usernames = await self.users.find_usernames([comment.author_id])
        return self._to_response(comment, usernames.get(comment.author_id))

    @staticmethod
    def _to_response(comment: Comment, author_username: Optional[str]) -> CommentResponse:
        return CommentResponse(
            id=comment.id,
            post_id=comment.post_id,
            author_id=comment.author_id,
            author_username=author_username,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )
