"""
Blog API - Post Service
=======================

What:  Create, read, update, delete and list blog posts.
How:   Posts live in the content store; authors live in the credential
       store. The service checks the author exists before writing and maps
       author ids to usernames when building responses.
Who:   Called by the /api/posts routes.

Order of checks for update/delete (every check runs before any write):
    1. Post exists                       → NotFoundError (404)
    2. Caller is the author or an ADMIN  → PermissionDeniedError (403)
    3. Author is unchanged (update only) → ValidationError (400)
"""

import logging
from typing import Dict, Optional

from blogapi.exceptions import NotFoundError, ValidationError
from blogapi.models.post import Post
from blogapi.models.user import User
from blogapi.repositories.comment_repository import CommentRepository
from blogapi.repositories.post_repository import PostRepository
from blogapi.repositories.user_repository import UserRepository
from blogapi.schemas.common import PagedResponse
from blogapi.schemas.post import PostRequest, PostResponse
from blogapi.services.authorization import ensure_can_modify

logger = logging.getLogger(__name__)


class PostService:
    def __init__(
        self,
        posts: PostRepository,
        comments: CommentRepository,
        users: UserRepository,
    ):
        self.posts = posts
        self.comments = comments
        self.users = users

    async def create(self, request: PostRequest) -> PostResponse:
        """
        Persist a new post for an existing author.

        Raises:
            NotFoundError: authorId does not resolve to a user; nothing is written
        """
        author = await self.users.get_by_id(request.author_id)
        if author is None:
            raise NotFoundError("Author", request.author_id)

        post = await self.posts.add(
            Post(
                title=request.title,
                content=request.content,
                author_id=request.author_id,
            )
        )
        logger.info("Post %s created by author %s", post.id, post.author_id)
        return self._to_response(post, author.username)

    async def get(self, post_id: str) -> PostResponse:
        post = await self._get_or_raise(post_id)
        return await self._map_one(post)

    async def update(self, post_id: str, request: PostRequest, actor: User) -> PostResponse:
        post = await self._get_or_raise(post_id)
        ensure_can_modify(actor, post.author_id, "update", "post")

        if post.author_id != request.author_id:
            raise ValidationError("Author of a post cannot be changed", field="authorId")

        post.title = request.title
        post.content = request.content
        await self.posts.save(post)
        logger.info("Post %s updated by user %s", post.id, actor.id)
        return await self._map_one(post)

    async def delete(self, post_id: str, actor: User) -> None:
        """
        Delete a post and, first, every comment that references it.

        Both deletes go through the content store session and are
        committed together when the request completes.
        """
        post = await self._get_or_raise(post_id)
        ensure_can_modify(actor, post.author_id, "delete", "post")

        removed = await self.comments.delete_by_post_id(post.id)
        await self.posts.delete(post)
        logger.info(
            "Post %s deleted by user %s (%d comments removed)", post_id, actor.id, removed
        )

    async def list(
        self,
        page: int = 0,
        size: int = 10,
        search: Optional[str] = None,
    ) -> PagedResponse[PostResponse]:
        """
        One page of posts, newest first.

        A non-blank `search` keeps posts whose title or content contains the
        term, ignoring case. Blank or missing search returns all posts.
        A non-blank term is matched as given, surrounding spaces included.
        """
        if search is not None and not search.strip():
            search = None
        posts, total = await self.posts.find_page(
            offset=page * size,
            limit=size,
            search=search,
        )
        usernames = await self.users.find_usernames(p.author_id for p in posts)
        content = [self._to_response(p, usernames.get(p.author_id)) for p in posts]
        return PagedResponse[PostResponse].build(content, page, size, total)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_or_raise(self, post_id: str) -> Post:
        post = await self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    async def _map_one(self, post: Post) -> PostResponse:
        usernames: Dict[int, str] = await self.users.find_usernames([post.author_id])
        return self._to_response(post, usernames.get(post.author_id))

    @staticmethod
    def _to_response(post: Post, author_username: Optional[str]) -> PostResponse:
        return PostResponse(
            id=post.id,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
            author_username=author_username,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )
